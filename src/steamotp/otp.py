import struct
from typing import Any, Union

from . import utils
from .digest import DEFAULT_ALGORITHM, new_hmac
from .exceptions import DigestError, GenerationError

# No 0/1/A/E/I/L/O/S/U/Z: nothing that reads like another symbol
STEAM_CHARS = "23456789BCDFGHJKMNPQRTVWXY"
DEFAULT_DIGITS = 5


class OTP(object):
    """
    Base class for OTP handlers.
    """

    def __init__(
        self,
        s: Union[str, bytes],
        digits: int = DEFAULT_DIGITS,
        digest: Any = DEFAULT_ALGORITHM,
        chars: str = STEAM_CHARS,
    ) -> None:
        """
        :param s: shared secret as raw bytes, 40 hex characters or base64
        :param digits: number of symbols in the code
        :param digest: HMAC digest algorithm name or hashlib constructor
        :param chars: symbol alphabet; the code is the truncated HMAC value in base ``len(chars)``
        """
        if digits < 1:
            raise ValueError("digits must be a positive integer")
        if len(chars) < 2:
            raise ValueError("chars must hold at least two symbols")
        self.digits = digits
        self.digest = digest
        self.chars = chars
        self.secret = s

    def generate_otp(self, input: int) -> str:
        """
        :param input: the HMAC counter value to use as the OTP input.
            Usually the number of intervals elapsed since the Unix epoch
        :raises GenerationError: the counter does not fit 64 bits or the HMAC failed
        """
        try:
            message = self.int_to_bytestring(input)
        except struct.error as e:
            raise GenerationError("counter {} is not an unsigned 64-bit integer".format(input)) from e
        try:
            hmac_hash = new_hmac(self.byte_secret(), message, self.digest).digest()
        except DigestError as e:
            raise GenerationError("could not compute HMAC: {}".format(e)) from e
        if len(hmac_hash) < 19:
            raise GenerationError("digest size is lower than 19 bytes, too short for dynamic truncation")
        return self.encode(self.truncate(hmac_hash))

    @staticmethod
    def truncate(hmac_hash: bytes) -> int:
        """
        Dynamic truncation from RFC 4226: the low nibble of the last byte
        selects a 4-byte window, read big-endian with the sign bit cleared.
        """
        offset = hmac_hash[-1] & 0xF
        return struct.unpack(">I", hmac_hash[offset : offset + 4])[0] & 0x7FFFFFFF

    def encode(self, code: int) -> str:
        """
        Spells ``code`` with ``self.chars``, least significant symbol first,
        keeping only ``self.digits`` symbols.
        """
        base = len(self.chars)
        symbols = []
        for _ in range(self.digits):
            code, i = divmod(code, base)
            symbols.append(self.chars[i])
        return "".join(symbols)

    def byte_secret(self) -> bytes:
        return utils.decode_secret(self.secret)

    @staticmethod
    def int_to_bytestring(i: int) -> bytes:
        """
        Turns an integer into the 8-byte big-endian counter
        which is fed to the HMAC along with the secret.
        """
        return struct.pack(">Q", i)
