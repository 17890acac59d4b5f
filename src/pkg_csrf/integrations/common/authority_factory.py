from __future__ import annotations

import dataclasses
from typing import Any, Callable, Iterable, Optional

from ...application.authority import CsrfAuthority
from ...config.settings import CsrfSettings
from ...domain.constants import (
    DEFAULT_ALGORITHM,
    DEFAULT_ATTRIBUTE,
    DEFAULT_ERROR_BODY,
    DEFAULT_HEADER_NAME,
    DEFAULT_SAFE_METHODS,
    DEFAULT_STATUS_ON_ERROR,
    DEFAULT_TTL,
    DigestAlgorithm,
)
from ...domain.ports import Clock, IdentityResolver, WriteClassifier


# --- Write classifiers ---------------------------------------------------


def method_classifier(safe_methods: Iterable[str] = DEFAULT_SAFE_METHODS) -> WriteClassifier:
    """
    Default policy: every method outside `safe_methods` is a write.
    """
    safe = frozenset(m.upper() for m in safe_methods)

    def classify(request: Any) -> bool:
        return request.method.upper() not in safe

    return classify


def exempt(
        classifier: WriteClassifier,
        predicate: Callable[[Any], bool],
) -> WriteClassifier:
    """
    Wrap `classifier` so requests matching `predicate` are never verified.

    Typical use: a login form that cannot carry a token yet.

        classifier = exempt(method_classifier(), lambda r: r.path == "/login")
    """

    def classify(request: Any) -> bool:
        if predicate(request):
            return False
        return classifier(request)

    return classify


# --- Factory -------------------------------------------------------------


def create_csrf_authority(
        *,
        identity_resolver: IdentityResolver,
        secret: Optional[str] = None,
        settings: Optional[CsrfSettings] = None,
        attribute: str = DEFAULT_ATTRIBUTE,
        ttl: int = DEFAULT_TTL,
        algorithm: DigestAlgorithm | str = DEFAULT_ALGORITHM,
        safe_methods: Iterable[str] = DEFAULT_SAFE_METHODS,
        status_on_error: int = DEFAULT_STATUS_ON_ERROR,
        error_body: str = DEFAULT_ERROR_BODY,
        header_name: str = DEFAULT_HEADER_NAME,
        write_classifier: Optional[WriteClassifier] = None,
        should_protect: Optional[Callable[[Any], bool]] = None,
        clock: Optional[Clock] = None,
) -> CsrfAuthority:
    """
    High-level factory: CSRF config -> CsrfAuthority.

    Either pass a ready `settings` object, or a `secret` plus optional
    overrides. When both are given, `secret` overrides `settings.secret`.
    Misconfiguration raises `ConfigurationError` here, not per request.
    """
    if settings is None:
        settings = CsrfSettings(
            secret=secret or "",
            attribute=attribute,
            ttl=ttl,
            algorithm=algorithm,
            safe_methods=frozenset(safe_methods),
            status_on_error=status_on_error,
            error_body=error_body,
            header_name=header_name,
        )
    elif secret is not None:
        settings = dataclasses.replace(settings, secret=secret)

    return CsrfAuthority(
        settings,
        identity_resolver,
        write_classifier=write_classifier,
        should_protect=should_protect,
        clock=clock,
    )
