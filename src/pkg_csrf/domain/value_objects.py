# src/pkg_csrf/domain/value_objects.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Sequence, Tuple

from .constants import CERTIFICATE_SEPARATOR
from .exceptions import InvalidIdentityError


# --- Identity value objects ----------------------------------------------


def _normalize(value: Any) -> Tuple[str, ...]:
    """
    Normalize a resolver result into a tuple of strings.
    If a plain string is passed, treat it as a single-element collection.
    """
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,) if value else ()
    if isinstance(value, (bytes, bytearray)):
        raise InvalidIdentityError("Identity must be text, not bytes")
    if isinstance(value, Sequence):
        return tuple(str(part) for part in value)
    if isinstance(value, Iterable):
        # sets and generators have no stable order across processes
        raise InvalidIdentityError(
            f"Identity must be an ordered sequence, got {type(value).__name__}"
        )
    return (str(value),)


@dataclass(frozen=True, slots=True)
class Identity:
    """
    Ordered identity components a token is bound to.

    An identity without components is anonymous and is never issued a token.
    Components must not contain the certificate separator, otherwise two
    different identities could produce the same certificate.
    """
    components: Tuple[str, ...] = ()

    def __init__(self, components: Iterable[str] | str | None = None) -> None:
        parts = _normalize(components)
        for part in parts:
            if CERTIFICATE_SEPARATOR in part:
                raise InvalidIdentityError(
                    f"Identity component must not contain {CERTIFICATE_SEPARATOR!r}"
                )
        object.__setattr__(self, "components", parts)

    @classmethod
    def of(cls, value: Identity | Iterable[str] | str | None) -> Identity:
        if isinstance(value, Identity):
            return value
        return cls(value)

    @property
    def is_anonymous(self) -> bool:
        return not self.components


# --- Token value objects -------------------------------------------------


@dataclass(frozen=True, slots=True)
class Token:
    """
    Decoded form of the transmitted token: ``expire_at:signature``.
    """
    expire_at: int
    signature: str

    def is_expired(self, now: int) -> bool:
        return self.expire_at <= now


@dataclass(frozen=True, slots=True)
class Rejection:
    """
    Fixed response returned when verification fails.
    """
    status_code: int
    body: str
