from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ...domain.codec import decode_token, encode_certificate, sign, verify_signature
from ...domain.constants import DigestAlgorithm
from ...domain.exceptions import SignatureMismatchError, TokenExpiredError
from ...domain.value_objects import Identity


@dataclass(frozen=True, slots=True)
class VerifyTokenUseCase:
    """
    Application use case:
    - Decode a presented token
    - Rebuild the certificate from the *current* identity and the presented
      expiration, then compare signatures in constant time
    - Require the expiration to be strictly in the future

    Raises distinct errors so callers can log the reason; the public
    boundary (`CsrfAuthority`) collapses them into a single outcome.
    """

    secret: str
    algorithm: DigestAlgorithm

    def execute(self, token: Optional[str], identity: Identity, now: int) -> None:
        """
        Raises:
            TokenParseError
            SignatureMismatchError
            TokenExpiredError
        """
        decoded = decode_token(token)

        if identity.is_anonymous:
            # nothing to rebuild the certificate from
            raise SignatureMismatchError("No identity to verify the token against")

        certificate = encode_certificate(identity, decoded.expire_at)
        expected = sign(certificate, self.secret, self.algorithm)

        signature_valid = verify_signature(expected, decoded.signature)
        expired = decoded.is_expired(now)

        if not signature_valid:
            raise SignatureMismatchError("Signature does not match")
        if expired:
            raise TokenExpiredError("Token has expired")
