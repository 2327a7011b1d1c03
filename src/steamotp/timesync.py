import logging
import math
import os
import time
from typing import Any, Dict, NamedTuple, Optional, Tuple, Union

import requests

from .exceptions import MalformedResponseError, ResponseFormatError, TransportError

log = logging.getLogger(__name__)

TIME_QUERY_URL = os.getenv("STEAMOTP_TIME_URL", "https://api.steampowered.com/ITwoFactorService/QueryTime/v1/")


def timeout_from_env(default: float = 10.0) -> float:
    """
    Reads ``STEAMOTP_TIMEOUT``; unset, unparsable or non-positive values give ``default``.
    """
    value = os.getenv("STEAMOTP_TIMEOUT")
    if not value:
        return default
    try:
        timeout = float(value)
    except ValueError:
        log.warning("ignoring STEAMOTP_TIMEOUT=%r, not a number of seconds", value)
        return default
    if timeout <= 0:
        log.warning("ignoring STEAMOTP_TIMEOUT=%r, must be positive", value)
        return default
    return timeout


DEFAULT_TIMEOUT = timeout_from_env()


class TimeOffset(NamedTuple):
    #: server time minus local time, in seconds
    offset: int
    #: round trip duration, in milliseconds
    latency: int
    #: the ``response`` object as sent by the server; besides ``server_time``
    #: it carries probe and retry hints such as ``skew_tolerance_seconds``
    response: Dict[str, Any]


def get_time(time_offset: int = 0) -> int:
    """
    Current Unix time in whole seconds, shifted by ``time_offset``.
    """
    return math.floor(time.time()) + time_offset


def get_time_offset(
    session: Optional[requests.Session] = None,
    timeout: Union[float, Tuple[float, float]] = DEFAULT_TIMEOUT,
    url: str = TIME_QUERY_URL,
) -> TimeOffset:
    """
    Asks Steam for its clock and measures how far the local one is off.

    One POST with an empty body is made; nothing is retried.

    :param session: requests session to send the query through; a fresh one
        is used (and closed) if omitted
    :param timeout: seconds to wait, or a ``(connect, read)`` tuple
    :param url: time query endpoint
    :returns: :class:`TimeOffset`
    :raises TransportError: connection failure, timeout or HTTP error status
    :raises MalformedResponseError: the body is not JSON
    :raises ResponseFormatError: the JSON has no usable ``response.server_time``
    """
    own_session = session is None
    if own_session:
        session = requests.Session()

    log.debug("querying server time from %s", url)
    start = time.time()
    try:
        response = session.post(url, data=b"", headers={"Content-Length": "0"}, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        log.warning("server time query to %s failed: %s", url, e)
        raise TransportError("server time query failed: {}".format(e)) from e
    finally:
        if own_session:
            session.close()
    latency = int(round((time.time() - start) * 1000))

    try:
        body = response.json()
    except ValueError as e:
        log.warning("server time response is not JSON: %r", response.text[:200])
        raise MalformedResponseError("server time response is not valid JSON") from e

    result = parse_time_response(body)
    offset = int(result["server_time"]) - math.floor(time.time())
    log.debug("server time offset %+ds, latency %dms", offset, latency)
    return TimeOffset(offset=offset, latency=latency, response=result)


def parse_time_response(body: Any) -> Dict[str, Any]:
    """
    Checks the decoded JSON body and returns its ``response`` object.

    :raises ResponseFormatError: no ``response.server_time``, or it is not an integer
    """
    try:
        result = body["response"]
        server_time = result["server_time"]
    except (KeyError, TypeError) as e:
        log.warning("server time response lacks response.server_time: %r", body)
        raise ResponseFormatError("server time response lacks response.server_time") from e

    # Steam sends it as a string of digits
    try:
        int(server_time)
    except (TypeError, ValueError) as e:
        log.warning("server time response has a non-integer server_time: %r", server_time)
        raise ResponseFormatError("server_time is not an integer: {!r}".format(server_time)) from e
    if isinstance(server_time, (bool, float)):
        log.warning("server time response has a non-integer server_time: %r", server_time)
        raise ResponseFormatError("server_time is not an integer: {!r}".format(server_time))
    return result
