import base64
import binascii
import re
import unicodedata
from hmac import compare_digest
from typing import Union

from .exceptions import DecodeError

HEX_SECRET = re.compile(r"^[0-9a-f]{40}$", re.IGNORECASE)

ENCODING_BYTES = "bytes"
ENCODING_HEX = "hex"
ENCODING_BASE64 = "base64"


def sniff_encoding(secret: Union[str, bytes]) -> str:
    """
    Tells how a secret is encoded.

    Raw bytes are taken as they are. A string of exactly 40 hexadecimal
    characters (either case) is hex; every other string is base64. The hex
    check wins, so a base64 string that happens to be 40 hex characters long
    is read as hex. Existing Steam secrets rely on this order.

    :param secret: secret as bytes, hex string or base64 string
    :returns: one of ``"bytes"``, ``"hex"`` or ``"base64"``
    """
    if isinstance(secret, (bytes, bytearray, memoryview)):
        return ENCODING_BYTES
    if HEX_SECRET.match(secret):
        return ENCODING_HEX
    return ENCODING_BASE64


def decode_secret(secret: Union[str, bytes]) -> bytes:
    """
    Turns a secret in any accepted encoding into the raw key bytes
    fed to the HMAC along with the message.

    :param secret: secret as bytes, hex string or base64 string
    :raises DecodeError: the string is not valid for the sniffed encoding
    """
    encoding = sniff_encoding(secret)
    if encoding == ENCODING_BYTES:
        return bytes(secret)
    if encoding == ENCODING_HEX:
        return bytes.fromhex(secret)

    # Secrets copied out of some tools lose their trailing "=" padding
    missing_padding = len(secret) % 4
    if missing_padding:
        secret += "=" * (4 - missing_padding)
    try:
        return base64.b64decode(secret, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError("secret is neither 40 hex characters nor valid base64: {}".format(e)) from e


def strings_equal(s1: str, s2: str) -> bool:
    """
    Timing-attack resistant string comparison.

    Normal comparison using == will short-circuit on the first mismatching
    character. This avoids that by scanning the whole string, though we
    still reveal to a timing attack whether the strings are the same
    length.
    """
    s1 = unicodedata.normalize("NFKC", s1)
    s2 = unicodedata.normalize("NFKC", s2)
    return compare_digest(s1.encode("utf-8"), s2.encode("utf-8"))
