import hashlib
import hmac

import pytest

from conftest import MAX_INT, SECRET, requires_ripemd160
from pkg_csrf.domain.codec import (
    decode_token,
    encode_certificate,
    encode_token,
    ensure_algorithm,
    sign,
    verify_signature,
)
from pkg_csrf.domain.constants import DigestAlgorithm
from pkg_csrf.domain.exceptions import ConfigurationError, InvalidIdentityError, TokenParseError
from pkg_csrf.domain.value_objects import Token


def test_encode_certificate():
    assert encode_certificate(["identity"], 10) == "identity:10"
    assert encode_certificate("identity", 10) == "identity:10"
    assert encode_certificate(["tenant", "alice"], 10) == "tenant:alice:10"

    with pytest.raises(InvalidIdentityError):
        encode_certificate(["a:b"], 10)


def test_sign_matches_hmac():
    expected = hmac.new(b"secret", b"identity:10", hashlib.sha256).hexdigest()
    assert sign("identity:10", "secret", DigestAlgorithm.SHA256) == expected
    assert sign("identity:10", "secret", "sha256") == expected
    assert sign("identity:10", "other", "sha256") != expected


@requires_ripemd160
def test_sign_ripemd160_vectors():
    assert (
        sign(f"identity:{MAX_INT}", SECRET)
        == "e14a5ae5132d4e4b489d74698144104055c25f4c"
    )
    assert (
        sign("identity:0", SECRET, "ripemd160")
        == "0d163df2868bcc2dd15e1a7ae72528ed130354d3"
    )


def test_encode_and_decode_token():
    assert encode_token(42, "abc") == "42:abc"
    assert decode_token("42:abc") == Token(expire_at=42, signature="abc")
    assert decode_token(f"{MAX_INT}:ff") == Token(expire_at=MAX_INT, signature="ff")


@pytest.mark.parametrize(
    "token",
    [
        None, "", "abc", "42", "42:", ":abc", "42:abc:def", "x1:abc", " 1:abc", "1_0:abc", "+1:abc",
        "9" * 5000 + ":abc", "9" * 20 + ":abc",
    ],
)
def test_decode_token_rejects_malformed(token):
    with pytest.raises(TokenParseError):
        decode_token(token)


def test_verify_signature():
    assert verify_signature("abc", "abc")
    assert not verify_signature("abc", "abd")
    assert not verify_signature("abc", "abcd")
    assert not verify_signature("abc", "")
    # non-ascii input must not raise
    assert not verify_signature("abc", "abé")


def test_ensure_algorithm():
    assert ensure_algorithm("sha256") is DigestAlgorithm.SHA256

    with pytest.raises(ConfigurationError):
        ensure_algorithm("md5")


def test_sign_unknown_algorithm():
    with pytest.raises(ConfigurationError):
        sign("identity:10", "secret", "md5")


def test_decode_token_accepts_largest_int64():
    assert decode_token(f"-{MAX_INT}:ab").expire_at == -MAX_INT
