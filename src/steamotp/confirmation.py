import base64
import struct
from typing import Optional, Union

from . import utils
from .digest import hmac_digest
from .exceptions import DigestError, GenerationError

# Tags the Steam mobile confirmation pages sign
TAG_CONF = "conf"
TAG_DETAILS = "details"
TAG_ALLOW = "allow"
TAG_CANCEL = "cancel"


def confirmation_payload(time: int, tag: Optional[str] = None) -> bytes:
    """
    8-byte big-endian timestamp followed by the raw UTF-8 tag, with no
    separator. The payload only ever goes into the HMAC, it is never parsed
    back.
    """
    try:
        payload = struct.pack(">Q", time)
    except struct.error as e:
        raise GenerationError("time {!r} is not an unsigned 64-bit integer".format(time)) from e
    if tag:
        payload += tag.encode("utf-8")
    return payload


def generate_confirmation_code(identity_secret: Union[str, bytes], time: int, tag: Optional[str] = None) -> str:
    """
    Signs a mobile confirmation request.

    :param identity_secret: identity secret as raw bytes, 40 hex characters or base64
    :param time: Unix time the request is made at, server-adjusted
    :param tag: what is being confirmed, e.g. ``TAG_CONF`` or ``TAG_ALLOW``; may be empty
    :returns: base64 of the full 20-byte HMAC-SHA1
    :raises DecodeError: malformed secret
    :raises GenerationError: the HMAC could not be computed
    """
    key = utils.decode_secret(identity_secret)
    try:
        digest = hmac_digest(key, confirmation_payload(time, tag), "sha1")
    except DigestError as e:
        raise GenerationError("could not compute confirmation HMAC: {}".format(e)) from e
    return base64.b64encode(digest).decode("ascii")
