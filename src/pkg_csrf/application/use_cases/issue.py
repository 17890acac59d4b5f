from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import structlog

from ...domain.codec import encode_certificate, encode_token, sign
from ...domain.constants import DigestAlgorithm
from ...domain.value_objects import Identity

logger = structlog.get_logger("pkg_csrf")


@dataclass(frozen=True, slots=True)
class IssueTokenUseCase:
    """
    Application use case:
    - Bind an identity to an expiration `ttl` seconds from now
    - Sign the resulting certificate and encode it as a token

    Anonymous identities get no token.
    """

    secret: str
    algorithm: DigestAlgorithm
    ttl: int

    def execute(self, identity: Identity, now: int) -> Optional[str]:
        if identity.is_anonymous:
            logger.debug("Anonymous caller, no CSRF token issued")
            return None

        expire_at = now + self.ttl
        certificate = encode_certificate(identity, expire_at)
        signature = sign(certificate, self.secret, self.algorithm)

        logger.debug("Issued CSRF token", expire_at=expire_at)
        return encode_token(expire_at, signature)
