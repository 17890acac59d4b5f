from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Mapping, Optional


def _freeze(values: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    return MappingProxyType(dict(values or {}))


@dataclass(frozen=True, slots=True)
class SimpleRequest:
    """
    In-memory request context.

    Implements the `RequestContext` port for pipelines that are not backed
    by an HTTP framework (CLI, queues, tests). Attribute updates return a
    new instance; the original is never modified.
    """
    method: str = "GET"
    body: Mapping[str, Any] = field(default_factory=dict)
    attributes: Mapping[str, Any] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", self.method.upper())
        object.__setattr__(self, "body", _freeze(self.body))
        object.__setattr__(self, "attributes", _freeze(self.attributes))
        object.__setattr__(
            self,
            "headers",
            _freeze({k.lower(): v for k, v in (self.headers or {}).items()}),
        )

    def get_attribute(self, key: str, default: Any = None) -> Any:
        return self.attributes.get(key, default)

    def with_attribute(self, key: str, value: Any) -> "SimpleRequest":
        attributes = dict(self.attributes)
        attributes[key] = value
        return replace(self, attributes=attributes)

    def get_body_field(self, key: str) -> Any:
        return self.body.get(key)

    def get_header(self, name: str) -> Optional[str]:
        return self.headers.get(name.lower())
