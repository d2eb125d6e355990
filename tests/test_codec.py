import os

import pytest

from totpcli.exceptions import InvalidSecretEncoding
from totpcli.security.secret import Secret
from totpcli.totp import codec

from conftest import RFC_SECRET_BASE32, RFC_SEED_SHA1, DEMO_SECRET


def test_decode_canonical():
    assert codec.decode(DEMO_SECRET) == Secret(b"Hello!\xde\xad\xbe\xef")
    assert codec.decode(RFC_SECRET_BASE32).get() == RFC_SEED_SHA1


@pytest.mark.parametrize("text", [
    "jbswy3dpehpk3pxp",
    "JBSW Y3DP EHPK 3PXP",
    "jbsw-y3dp-ehpk-3pxp",
    "  JBSWY3DP\tEHPK3PXP\n",
    "JBSWY3DPEHPK3PXP======",
])
def test_decode_normalizes_input(text):
    assert codec.decode(text) == codec.decode(DEMO_SECRET)


def test_decode_restores_missing_padding():
    # 10 characters decode to 6 bytes and need 6 '=' of padding
    assert codec.decode("MFRGGZDFMY").get() == b"abcdef"
    assert codec.decode("MFRGGZDFMY======").get() == b"abcdef"


def test_decode_tolerates_extra_padding():
    assert codec.decode("JBSWY3DP========") == codec.decode("JBSWY3DP")
    assert codec.normalize("jbswy3dp========") == "JBSWY3DP"


@pytest.mark.parametrize("text", ["", "   ", "- -", "========"])
def test_decode_rejects_empty(text):
    with pytest.raises(InvalidSecretEncoding):
        codec.decode(text)


@pytest.mark.parametrize("text", [
    "JBSWY3DPEHPK3PX1",   # 1 is not Base32
    "JBSWY3DPEHPK3PX0",
    "JBSWY3DP8HPK3PXP",
    "JBSW=Y3DPEHPK3PXP",  # padding only allowed at the end
    "JBSWY3DP_EHPK3PXP",
    "MFRGGZDFMYMFRGGZDFﬀ",  # ligature upper-cases to "FF"
    "JBSWY3DPEHPK3PXı",      # dotless i upper-cases to "I"
])
def test_decode_rejects_bad_characters(text):
    with pytest.raises(InvalidSecretEncoding):
        codec.decode(text)


@pytest.mark.parametrize("text", ["A", "ABC", "ABCDEF"])
def test_decode_rejects_impossible_lengths(text):
    with pytest.raises(InvalidSecretEncoding):
        codec.decode(text)


def test_decode_rejects_non_text():
    with pytest.raises(InvalidSecretEncoding):
        codec.decode(b"JBSWY3DPEHPK3PXP")


def test_error_does_not_echo_secret():
    text = "abcdefg1hijkmnop"
    with pytest.raises(InvalidSecretEncoding) as excinfo:
        codec.decode(text)
    message = str(excinfo.value)
    assert "position 8" in message
    assert text not in message
    assert text.upper() not in message


def test_encode_is_canonical():
    assert codec.encode(Secret(RFC_SEED_SHA1)) == RFC_SECRET_BASE32
    assert codec.encode(Secret(b"abcdef")) == "MFRGGZDFMY======"
    assert codec.encode(b"abcdef") == "MFRGGZDFMY======"


def test_round_trip_various_lengths():
    for length in (1, 5, 10, 16, 20, 32, 64):
        secret = Secret(os.urandom(length))
        assert codec.decode(codec.encode(secret)) == secret


def test_group_and_is_valid():
    assert codec.group("MFRGGZDFMY======") == "MFRG GZDF MY"
    assert codec.is_valid("mfrg gzdf my")
    assert not codec.is_valid("MFRG1")


def test_secret_is_redacted():
    secret = codec.decode(DEMO_SECRET)
    assert "Hello" not in repr(secret)
    assert "Hello" not in str(secret)
    assert repr(secret) == "Secret(<10 bytes>)"
    assert len(secret) == 10


def test_secret_rejects_empty():
    with pytest.raises(ValueError):
        Secret(b"")
    with pytest.raises(TypeError):
        Secret("text")
