class OTPError(Exception):
    """
    Base class for every error raised by steamotp.
    """


class DigestError(OTPError):
    """
    The HMAC layer could not produce a digest.
    """


class UnsupportedAlgorithm(DigestError, ValueError):
    """
    The requested digest algorithm is not known to hashlib.
    """


class KeyMaterialError(DigestError, TypeError):
    """
    The HMAC primitive rejected the key.
    """


class DecodeError(OTPError, ValueError):
    """
    A secret string is neither valid hex nor valid base64.
    """


class GenerationError(OTPError):
    """
    A code or token could not be generated; the cause is chained.
    """


class TimeQueryError(OTPError):
    """
    Base class for failures of the server time probe.
    """


class TransportError(TimeQueryError):
    """
    The request never produced a usable HTTP response (connection, timeout, status).
    """


class ResponseFormatError(TimeQueryError):
    """
    The response did not have the expected ``{"response": {"server_time": ...}}`` shape.
    """


class MalformedResponseError(ResponseFormatError):
    """
    The response body was not JSON at all.
    """
