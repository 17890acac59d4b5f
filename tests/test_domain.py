# tests/test_domain.py
import pytest

from pkg_csrf.domain.constants import DigestAlgorithm
from pkg_csrf.domain.entities import SimpleRequest
from pkg_csrf.domain.exceptions import InvalidIdentityError
from pkg_csrf.domain.value_objects import Identity, Token


def test_identity_value_object():
    assert Identity("alice").components == ("alice",)
    assert Identity(["tenant", "alice"]).components == ("tenant", "alice")
    assert Identity((1, 2)).components == ("1", "2")
    assert Identity.of(Identity("bob")) == Identity("bob")

    with pytest.raises(InvalidIdentityError):
        Identity("tenant:alice")

    with pytest.raises(InvalidIdentityError):
        Identity(["tenant", "a:b"])


def test_identity_requires_ordered_sequence():
    with pytest.raises(InvalidIdentityError):
        Identity({"tenant", "alice"})

    with pytest.raises(InvalidIdentityError):
        Identity(part for part in ["tenant", "alice"])

    with pytest.raises(InvalidIdentityError):
        Identity(b"alice")


def test_anonymous_identity():
    assert Identity().is_anonymous
    assert Identity(None).is_anonymous
    assert Identity("").is_anonymous
    assert Identity([]).is_anonymous
    assert not Identity("alice").is_anonymous


def test_token_expiry_is_strict():
    token = Token(expire_at=100, signature="abc")
    assert token.is_expired(100)
    assert token.is_expired(101)
    assert not token.is_expired(99)


def test_digest_algorithm():
    assert DigestAlgorithm.parse("SHA256") is DigestAlgorithm.SHA256
    assert DigestAlgorithm.parse(DigestAlgorithm.SHA512) is DigestAlgorithm.SHA512
    assert DigestAlgorithm.RIPEMD160.is_legacy
    assert DigestAlgorithm.SHA1.is_legacy
    assert not DigestAlgorithm.SHA256.is_legacy

    with pytest.raises(ValueError):
        DigestAlgorithm.parse("md5")


def test_simple_request():
    request = SimpleRequest(
        method="post",
        body={"csrf": "1:abc"},
        headers={"X-CSRF-Token": "2:def"},
    )
    assert request.method == "POST"
    assert request.get_body_field("csrf") == "1:abc"
    assert request.get_body_field("missing") is None
    assert request.get_header("x-csrf-token") == "2:def"

    updated = request.with_attribute("csrf", "token")
    assert updated.get_attribute("csrf") == "token"
    # immutable update
    assert request.get_attribute("csrf") is None
    assert updated.get_body_field("csrf") == "1:abc"
