"""
Token codec: pure encode/decode of certificates and tokens.

Wire format of a token is ``<expire_at>:<signature>``; the signed
certificate is ``<identity_1>:...:<identity_n>:<expire_at>``.
"""

from __future__ import annotations

import hashlib
import hmac
from typing import Iterable, Optional

from .constants import CERTIFICATE_SEPARATOR, DEFAULT_ALGORITHM, DigestAlgorithm
from .exceptions import ConfigurationError, TokenParseError
from .value_objects import Identity, Token


# Unix times fit in a signed 64-bit integer
MAX_EXPIRATION_DIGITS = 19


def _parse_algorithm(algorithm: DigestAlgorithm | str) -> DigestAlgorithm:
    try:
        return DigestAlgorithm.parse(algorithm)
    except ValueError as exc:
        raise ConfigurationError(str(exc)) from exc


def ensure_algorithm(algorithm: DigestAlgorithm | str) -> DigestAlgorithm:
    """
    Resolve `algorithm` and check the running interpreter can compute it.

    Raises:
        ConfigurationError
    """
    resolved = _parse_algorithm(algorithm)

    # ripemd160 depends on the OpenSSL build
    try:
        hashlib.new(resolved.value)
    except ValueError as exc:
        raise ConfigurationError(
            f"Digest algorithm {resolved.value!r} is not available in this runtime"
        ) from exc
    return resolved


def encode_certificate(identity: Identity | Iterable[str] | str, expire_at: int) -> str:
    parts = list(Identity.of(identity).components)
    parts.append(str(int(expire_at)))
    return CERTIFICATE_SEPARATOR.join(parts)


def sign(
        certificate: str,
        secret: str,
        algorithm: DigestAlgorithm | str = DEFAULT_ALGORITHM,
) -> str:
    """
    HMAC hex digest of `certificate`.

    Raises:
        ConfigurationError for an unsupported algorithm.
    """
    digest = _parse_algorithm(algorithm).value
    return hmac.new(
        secret.encode("utf-8"),
        certificate.encode("utf-8"),
        digest,
    ).hexdigest()


def encode_token(expire_at: int, signature: str) -> str:
    return f"{int(expire_at)}{CERTIFICATE_SEPARATOR}{signature}"


def decode_token(token: Optional[str]) -> Token:
    """
    Split a token into its expiration and signature.

    Raises:
        TokenParseError for missing, empty or malformed input.
    """
    if not token or not isinstance(token, str):
        raise TokenParseError("Token is missing")

    parts = token.split(CERTIFICATE_SEPARATOR)
    if len(parts) != 2:
        raise TokenParseError("Token must have exactly two parts")

    raw_expire_at, signature = parts
    if not signature:
        raise TokenParseError("Token signature is empty")

    # int() would also accept "+1", " 1" and "1_000"
    digits = raw_expire_at[1:] if raw_expire_at.startswith("-") else raw_expire_at
    if not digits.isdigit() or not digits.isascii():
        raise TokenParseError("Token expiration is not an integer")
    if len(digits) > MAX_EXPIRATION_DIGITS:
        raise TokenParseError("Token expiration is out of range")

    return Token(expire_at=int(raw_expire_at), signature=signature)


def verify_signature(expected: str, actual: str) -> bool:
    """
    Constant-time comparison of two signatures.
    """
    return hmac.compare_digest(expected.encode("utf-8"), actual.encode("utf-8"))
