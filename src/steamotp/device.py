import hashlib
from typing import Union

from . import utils
from .exceptions import DecodeError

DEVICE_ID_PREFIX = "android:"
# lengths of the hyphen-separated hex groups
_GROUPS = (8, 4, 4, 4, 12)


def get_device_id(identifier: Union[int, str, bytes]) -> str:
    """
    Derives the device identifier the Steam mobile app registers with.

    The result looks like a UUID but is a plain SHA-1 of the identifier, so
    the same account always yields the same device ID. String identifiers
    go through :func:`steamotp.utils.decode_secret` like any secret, and
    fall back to their UTF-8 text when that fails, which is what happens to
    most 17-digit SteamID64 strings. Integers are hashed as their decimal
    text, so a SteamID64 gives the same device ID as int or as string.

    >>> get_device_id(b"abc")
    'android:a9993e36-4706-816a-ba3e-25717850c26c'
    """
    if isinstance(identifier, int):
        data = str(identifier).encode("ascii")
    elif isinstance(identifier, str):
        try:
            data = utils.decode_secret(identifier)
        except DecodeError:
            data = identifier.encode("utf-8")
    else:
        data = utils.decode_secret(identifier)

    hex_digest = hashlib.sha1(data).hexdigest()
    groups = []
    start = 0
    for length in _GROUPS:
        groups.append(hex_digest[start : start + length])
        start += length
    return DEVICE_ID_PREFIX + "-".join(groups)
