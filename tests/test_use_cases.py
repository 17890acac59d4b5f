import pytest

from conftest import NOW, SECRET
from pkg_csrf.application.use_cases.issue import IssueTokenUseCase
from pkg_csrf.application.use_cases.verify import VerifyTokenUseCase
from pkg_csrf.domain.codec import decode_token, encode_certificate, encode_token, sign
from pkg_csrf.domain.constants import DigestAlgorithm
from pkg_csrf.domain.exceptions import (
    SignatureMismatchError,
    TokenExpiredError,
    TokenParseError,
)
from pkg_csrf.domain.value_objects import Identity

ALICE = Identity("alice")


def _issue() -> IssueTokenUseCase:
    return IssueTokenUseCase(secret=SECRET, algorithm=DigestAlgorithm.SHA256, ttl=1200)


def _verify() -> VerifyTokenUseCase:
    return VerifyTokenUseCase(secret=SECRET, algorithm=DigestAlgorithm.SHA256)


def _token_expiring_at(expire_at: int, identity: Identity = ALICE) -> str:
    certificate = encode_certificate(identity, expire_at)
    return encode_token(expire_at, sign(certificate, SECRET, "sha256"))


def test_issue_binds_expiration():
    token = _issue().execute(ALICE, NOW)
    decoded = decode_token(token)
    assert decoded.expire_at == NOW + 1200
    assert decoded.signature == sign(f"alice:{NOW + 1200}", SECRET, "sha256")


def test_issue_anonymous_returns_none():
    assert _issue().execute(Identity(), NOW) is None


def test_issue_then_verify():
    token = _issue().execute(ALICE, NOW)
    _verify().execute(token, ALICE, NOW)
    _verify().execute(token, ALICE, NOW + 1199)


def test_verify_rejects_other_identity():
    token = _issue().execute(ALICE, NOW)
    with pytest.raises(SignatureMismatchError):
        _verify().execute(token, Identity("bob"), NOW)


def test_verify_rejects_anonymous():
    token = _issue().execute(ALICE, NOW)
    with pytest.raises(SignatureMismatchError):
        _verify().execute(token, Identity(), NOW)


def test_verify_expiry_boundary():
    with pytest.raises(TokenExpiredError):
        _verify().execute(_token_expiring_at(NOW), ALICE, NOW)
    with pytest.raises(TokenExpiredError):
        _verify().execute(_token_expiring_at(NOW - 1), ALICE, NOW)
    _verify().execute(_token_expiring_at(NOW + 1), ALICE, NOW)


def test_verify_rejects_tampered_expiration():
    token = _issue().execute(ALICE, NOW)
    signature = decode_token(token).signature
    with pytest.raises(SignatureMismatchError):
        _verify().execute(encode_token(NOW + 999_999, signature), ALICE, NOW)


def test_verify_rejects_every_single_character_change():
    token = _issue().execute(ALICE, NOW)
    decoded = decode_token(token)
    signature = decoded.signature

    for i, char in enumerate(signature):
        replacement = "0" if char != "0" else "1"
        mutated = signature[:i] + replacement + signature[i + 1:]
        with pytest.raises(SignatureMismatchError):
            _verify().execute(encode_token(decoded.expire_at, mutated), ALICE, NOW)


@pytest.mark.parametrize("token", [None, "", "garbage", "1:2:3"])
def test_verify_malformed(token):
    with pytest.raises(TokenParseError):
        _verify().execute(token, ALICE, NOW)
