import base64
import hashlib
import hmac
import re

import pytest

import steamotp
from steamotp import exceptions
from steamotp.digest import hmac_digest, lookup_digest, new_hmac
from steamotp.utils import decode_secret, sniff_encoding, strings_equal

HEX_SECRET = "3132333435363738393031323334353637383930"
DEVICE_ID_RE = re.compile(r"^android:[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$")


def test_sniff_encoding():
    assert sniff_encoding(b"raw") == "bytes"
    assert sniff_encoding(bytearray(b"raw")) == "bytes"
    assert sniff_encoding(HEX_SECRET) == "hex"
    assert sniff_encoding(HEX_SECRET.upper()) == "hex"
    # one character short or long falls back to base64
    assert sniff_encoding(HEX_SECRET[:-1]) == "base64"
    assert sniff_encoding(HEX_SECRET + "0") == "base64"
    assert sniff_encoding("MTIzNDU2Nzg5MDEyMzQ1Njc4OTA=") == "base64"


def test_hex_wins_over_base64():
    # 40 hex characters are valid base64 too, but are always read as hex
    assert decode_secret(HEX_SECRET) == b"12345678901234567890"
    assert decode_secret(HEX_SECRET) != base64.b64decode(HEX_SECRET)


def test_decode_secret():
    assert decode_secret(b"\x00\xff") == b"\x00\xff"
    assert decode_secret("MTIzNDU2Nzg5MDEyMzQ1Njc4OTA=") == b"12345678901234567890"
    assert decode_secret("MTIzNDU2Nzg5MDEyMzQ1Njc4OTA") == b"12345678901234567890"
    assert decode_secret("") == b""


def test_decode_secret_error_keeps_cause():
    with pytest.raises(exceptions.DecodeError) as excinfo:
        decode_secret("abcde")
    assert excinfo.value.__cause__ is not None
    assert isinstance(excinfo.value, ValueError)


def test_strings_equal():
    assert strings_equal("GG5F5", "GG5F5")
    assert not strings_equal("GG5F5", "GG5F6")


def test_hmac_digest_matches_stdlib():
    expected = hmac.new(b"key", b"message", hashlib.sha1).digest()
    assert hmac_digest(b"key", b"message") == expected
    assert hmac_digest(b"key", b"message", "SHA-1") == expected
    assert hmac_digest(b"key", b"message", hashlib.sha1) == expected
    assert len(hmac_digest(b"", b"")) == 20
    assert len(hmac_digest(b"key", b"message", "sha256")) == 32


def test_new_hmac_streams():
    context = new_hmac(b"key")
    context.update(b"mess")
    context.update(b"age")
    assert context.digest() == hmac_digest(b"key", b"message")


def test_unsupported_algorithm():
    with pytest.raises(exceptions.UnsupportedAlgorithm):
        lookup_digest("rot13")
    with pytest.raises(exceptions.UnsupportedAlgorithm):
        hmac_digest(b"key", b"message", 42)


def test_key_material_error():
    with pytest.raises(exceptions.KeyMaterialError) as excinfo:
        hmac_digest("not bytes", b"message")
    assert "key" in str(excinfo.value)


def test_message_type_error_is_not_blamed_on_key():
    with pytest.raises(TypeError) as excinfo:
        hmac_digest(b"key", "not bytes")
    assert not isinstance(excinfo.value, exceptions.KeyMaterialError)


@pytest.mark.parametrize("algorithm", ["shake_128", "shake_256"])
def test_variable_length_digest_is_unsupported(algorithm):
    with pytest.raises(exceptions.UnsupportedAlgorithm) as excinfo:
        hmac_digest(b"key", b"message", algorithm)
    assert isinstance(excinfo.value.__cause__, ValueError)


def test_device_id_known_vector():
    # SHA-1("abc") = a9993e364706816aba3e25717850c26c9cd0d89d
    assert steamotp.get_device_id(b"abc") == "android:a9993e36-4706-816a-ba3e-25717850c26c"
    # "YWJj" is base64 for "abc"
    assert steamotp.get_device_id("YWJj") == "android:a9993e36-4706-816a-ba3e-25717850c26c"


def test_device_id_numeric():
    steam_id = 76561197960287930
    expected = hashlib.sha1(b"76561197960287930").hexdigest()
    device_id = steamotp.get_device_id(steam_id)
    assert DEVICE_ID_RE.match(device_id)
    assert device_id.replace("-", "") == "android:" + expected[:32]


@pytest.mark.parametrize("identifier", [b"", b"\x00" * 64, "7656119796028793", HEX_SECRET, "cnOgv/KdpLoP6Nbh0GMkXkPXALQ="])
def test_device_id_format(identifier):
    assert DEVICE_ID_RE.match(steamotp.get_device_id(identifier))


@pytest.mark.parametrize("secret", ["YWJj!!!!", "YW Jj", "YWJj\n", "cnOgv/KdpLoP6Nbh0GMkXkPXALQ=!"])
def test_decode_secret_rejects_foreign_characters(secret):
    with pytest.raises(exceptions.DecodeError):
        decode_secret(secret)


def test_device_id_steam_id_string():
    steam_id = "76561197960287930"
    device_id = steamotp.get_device_id(steam_id)
    assert DEVICE_ID_RE.match(device_id)
    assert device_id == steamotp.get_device_id(76561197960287930)


@pytest.mark.parametrize("identifier", ["abcde", "not base64!", "ünïcode"])
def test_device_id_undecodable_string_uses_text(identifier):
    expected = hashlib.sha1(identifier.encode("utf-8")).hexdigest()
    assert steamotp.get_device_id(identifier).replace("-", "") == "android:" + expected[:32]


def test_device_id_still_sniffs_decodable_strings():
    # "YWJj" decodes to "abc" and is hashed as such, not as its text
    assert steamotp.get_device_id("YWJj") == steamotp.get_device_id(b"abc")
    assert steamotp.get_device_id("YWJj") != steamotp.get_device_id("YWJj!")
