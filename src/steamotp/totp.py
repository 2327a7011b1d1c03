import calendar
import datetime
import math
import time
from typing import Any, Optional, Union

from . import utils
from .digest import DEFAULT_ALGORITHM
from .otp import DEFAULT_DIGITS, OTP, STEAM_CHARS

DEFAULT_INTERVAL = 30


class TOTP(OTP):
    """
    Handler for time-based OTP counters.
    """

    def __init__(
        self,
        s: Union[str, bytes],
        digits: int = DEFAULT_DIGITS,
        digest: Any = DEFAULT_ALGORITHM,
        chars: str = STEAM_CHARS,
        interval: int = DEFAULT_INTERVAL,
    ) -> None:
        """
        :param s: shared secret as raw bytes, 40 hex characters or base64
        :param digits: number of symbols in the OTP
        :param digest: digest function to use in the HMAC (expected to be SHA1)
        :param chars: symbol alphabet of the OTP
        :param interval: the time interval in seconds for OTP. This defaults to 30.
        """
        if interval < 1:
            raise ValueError("interval must be a positive number of seconds")
        self.interval = interval
        super().__init__(s=s, digits=digits, digest=digest, chars=chars)

    def at(self, for_time: Union[int, float, datetime.datetime], counter_offset: int = 0) -> str:
        """
        Accepts either a Unix timestamp integer or a datetime object.

        :param for_time: the time to generate an OTP for
        :param counter_offset: the amount of ticks to add to the time counter
        :returns: OTP value
        """
        return self.generate_otp(self.timecode(for_time) + counter_offset)

    def now(self, time_offset: int = 0) -> str:
        """
        Generate the current time OTP.

        :param time_offset: seconds to add to the local clock, usually
            the ``offset`` measured by :func:`steamotp.timesync.get_time_offset`
        :returns: OTP value
        """
        return self.at(math.floor(time.time()) + time_offset)

    def verify(
        self,
        otp: str,
        for_time: Optional[Union[int, float, datetime.datetime]] = None,
        valid_window: int = 0,
    ) -> bool:
        """
        Verifies the OTP passed in against the current time OTP.

        :param otp: the OTP to check against
        :param for_time: time to check OTP at (defaults to now)
        :param valid_window: extends the validity to this many counter ticks before and after the current one
        :returns: True if verification succeeded, False otherwise
        """
        if for_time is None:
            for_time = time.time()

        otp = str(otp).upper()
        if valid_window:
            for i in range(-valid_window, valid_window + 1):
                if utils.strings_equal(otp, self.at(for_time, i)):
                    return True
            return False

        return utils.strings_equal(otp, self.at(for_time))

    def remaining(self, for_time: Optional[Union[int, float, datetime.datetime]] = None) -> int:
        """
        Seconds until the OTP for ``for_time`` (defaults to now) rolls over.
        """
        if for_time is None:
            for_time = time.time()
        return self.interval - self._timestamp(for_time) % self.interval

    def timecode(self, for_time: Union[int, float, datetime.datetime]) -> int:
        """
        Number of whole intervals between the Unix epoch and ``for_time``.
        Naive datetimes are taken as local time.
        """
        return self._timestamp(for_time) // self.interval

    @staticmethod
    def _timestamp(for_time: Union[int, float, datetime.datetime]) -> int:
        if isinstance(for_time, datetime.datetime):
            if for_time.tzinfo:
                return calendar.timegm(for_time.utctimetuple())
            return int(time.mktime(for_time.timetuple()))
        return math.floor(for_time)
