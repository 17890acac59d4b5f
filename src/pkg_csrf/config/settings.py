from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable

from ..domain.codec import ensure_algorithm
from ..domain.constants import (
    DEFAULT_ALGORITHM,
    DEFAULT_ATTRIBUTE,
    DEFAULT_ERROR_BODY,
    DEFAULT_HEADER_NAME,
    DEFAULT_SAFE_METHODS,
    DEFAULT_STATUS_ON_ERROR,
    DEFAULT_TTL,
    DigestAlgorithm,
)
from ..domain.exceptions import ConfigurationError


@dataclass(frozen=True, slots=True)
class CsrfSettings:
    """
    CSRF token settings, fixed for the lifetime of the component.

    Host code decides how to construct this (env, config file, etc.).
    `ripemd160` is kept as the default for compatibility with tokens
    issued by older deployments; new deployments should use `sha256`.
    """
    secret: str
    attribute: str = DEFAULT_ATTRIBUTE
    ttl: int = DEFAULT_TTL
    algorithm: DigestAlgorithm = DEFAULT_ALGORITHM
    safe_methods: FrozenSet[str] = field(default_factory=lambda: DEFAULT_SAFE_METHODS)
    status_on_error: int = DEFAULT_STATUS_ON_ERROR
    error_body: str = DEFAULT_ERROR_BODY
    header_name: str = DEFAULT_HEADER_NAME

    def __post_init__(self) -> None:
        if not isinstance(self.secret, str) or not self.secret:
            raise ConfigurationError("CSRF secret must be a non-empty string")
        if not self.attribute:
            raise ConfigurationError("CSRF attribute name must not be empty")
        if isinstance(self.ttl, bool) or not isinstance(self.ttl, int) or self.ttl <= 0:
            raise ConfigurationError(f"CSRF ttl must be a positive integer, got {self.ttl!r}")
        if not 400 <= int(self.status_on_error) <= 599:
            raise ConfigurationError(
                f"CSRF error status must be a 4xx/5xx code, got {self.status_on_error!r}"
            )

        object.__setattr__(self, "algorithm", ensure_algorithm(self.algorithm))
        object.__setattr__(self, "safe_methods", _normalize_methods(self.safe_methods))


def _normalize_methods(methods: Iterable[str]) -> FrozenSet[str]:
    if isinstance(methods, str):
        methods = (methods,)
    normalized = frozenset(m.strip().upper() for m in methods if m and m.strip())
    if not normalized:
        raise ConfigurationError("At least one read-only method must be configured")
    return normalized
