from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence, TypeVar, Union

IdentityValue = Union[str, Sequence[str], None]

R = TypeVar("R", covariant=True)


class RequestContext(Protocol):
    """
    Port for the request carrier flowing through the host pipeline.

    Implementations live in the integrations layer (e.g. Starlette adapter)
    or are in-memory (`SimpleRequest`).
    """

    @property
    def method(self) -> str:
        ...

    def get_attribute(self, key: str, default: Any = None) -> Any:
        ...

    def with_attribute(self, key: str, value: Any) -> RequestContext:
        """
        Return a carrier with `key` set; the receiver stays unchanged.
        """
        ...

    def get_body_field(self, key: str) -> Any:
        ...

    def get_header(self, name: str) -> Optional[str]:
        ...


class IdentityResolver(Protocol):
    """
    Port resolving the principal a token is bound to.

    Must be deterministic for a given request: it is called once when a
    token is verified and once when the next one is issued.
    Returning None or an empty value means the caller is anonymous.
    """

    def __call__(self, request: Any) -> IdentityValue:
        ...


class WriteClassifier(Protocol):
    def __call__(self, request: Any) -> bool:
        ...


class NextHandler(Protocol[R]):
    def __call__(self, request: Any) -> R:
        ...


class Clock(Protocol):
    def __call__(self) -> int:
        ...
