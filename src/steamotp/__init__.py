import math
from typing import Optional, Union

from . import exceptions as exceptions
from .confirmation import TAG_ALLOW as TAG_ALLOW
from .confirmation import TAG_CANCEL as TAG_CANCEL
from .confirmation import TAG_CONF as TAG_CONF
from .confirmation import TAG_DETAILS as TAG_DETAILS
from .confirmation import generate_confirmation_code as generate_confirmation_code
from .device import get_device_id as get_device_id
from .otp import OTP as OTP
from .otp import STEAM_CHARS as STEAM_CHARS
from .timesync import TimeOffset as TimeOffset
from .timesync import get_time as get_time
from .timesync import get_time_offset as get_time_offset
from .totp import TOTP as TOTP
from .utils import decode_secret as decode_secret
from .utils import sniff_encoding as sniff_encoding

__all__ = [
    "OTP",
    "TOTP",
    "STEAM_CHARS",
    "TAG_ALLOW",
    "TAG_CANCEL",
    "TAG_CONF",
    "TAG_DETAILS",
    "TimeOffset",
    "decode_secret",
    "exceptions",
    "generate_auth_code",
    "generate_confirmation_code",
    "get_device_id",
    "get_time",
    "get_time_offset",
    "sniff_encoding",
]


def generate_auth_code(
    secret: Union[str, bytes],
    time_offset: int = 0,
    timestamp: Optional[Union[int, float]] = None,
) -> str:
    """
    Generates the 5-symbol Steam Guard login code.

    :param secret: shared secret as raw bytes, 40 hex characters or base64
    :param time_offset: seconds to add to the clock, see :func:`get_time_offset`
    :param timestamp: Unix time to generate the code for instead of the local clock
    :returns: code such as ``"GG5F5"``
    :raises DecodeError: malformed secret
    :raises GenerationError: the HMAC could not be computed
    """
    totp = TOTP(secret)
    if timestamp is None:
        return totp.now(time_offset)
    return totp.at(math.floor(timestamp) + time_offset)
