import hashlib
import hmac
from typing import Any, Callable

from .exceptions import KeyMaterialError, UnsupportedAlgorithm

DEFAULT_ALGORITHM = "sha1"


def lookup_digest(algorithm: Any = DEFAULT_ALGORITHM) -> Callable:
    """
    Resolves an algorithm name to a hashlib constructor.

    Accepts names in any case and with or without a dash ("sha1", "SHA-1",
    "Sha256"), or a hashlib constructor which is returned as is.

    :param algorithm: algorithm name or hashlib constructor
    :returns: hashlib constructor
    :raises UnsupportedAlgorithm: if hashlib has no such algorithm
    """
    if callable(algorithm):
        return algorithm
    if not isinstance(algorithm, str):
        raise UnsupportedAlgorithm("algorithm must be a name or a hashlib constructor, not {!r}".format(algorithm))

    name = algorithm.replace("-", "").lower()
    if name not in hashlib.algorithms_available:
        raise UnsupportedAlgorithm("unsupported digest algorithm: {!r}".format(algorithm))
    constructor = getattr(hashlib, name, None)
    if constructor is None:
        # available through OpenSSL only, e.g. "sm3"
        def constructor(data: bytes = b"") -> Any:
            return hashlib.new(name, data)

    return constructor


def new_hmac(key: bytes, msg: bytes = b"", algorithm: Any = DEFAULT_ALGORITHM) -> hmac.HMAC:
    """
    Returns a keyed HMAC context; feed it with ``update()`` and read ``digest()``.

    :param key: raw key bytes, any length including empty
    :param msg: initial message bytes
    :param algorithm: algorithm name or hashlib constructor
    :raises UnsupportedAlgorithm: unknown algorithm
    :raises KeyMaterialError: the key is not bytes-like
    """
    digestmod = lookup_digest(algorithm)
    if not isinstance(key, (bytes, bytearray, memoryview)):
        raise KeyMaterialError("HMAC key must be bytes-like, not {}".format(type(key).__name__))
    try:
        return hmac.new(key, msg, digestmod)
    except ValueError as e:
        # e.g. shake_128: no fixed digest size to key an HMAC with
        raise UnsupportedAlgorithm("{!r} cannot be used for HMAC: {}".format(algorithm, e)) from e


def hmac_digest(key: bytes, msg: bytes, algorithm: Any = DEFAULT_ALGORITHM) -> bytes:
    """
    One-shot HMAC: import the key, absorb ``msg`` and finalize.

    >>> len(hmac_digest(b"key", b"message"))
    20
    """
    return new_hmac(key, msg, algorithm).digest()
