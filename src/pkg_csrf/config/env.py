from __future__ import annotations

import os
from typing import Any

from ..domain.exceptions import ConfigurationError
from .settings import CsrfSettings


def settings_from_env(**overrides: Any) -> CsrfSettings:
    """
    Build `CsrfSettings` from `CSRF_*` environment variables.

    Keyword arguments take precedence over the environment.
    """
    def _int(key: str) -> int | None:
        raw = os.getenv(key)
        if raw is None or not raw.strip():
            return None
        try:
            return int(raw.strip())
        except ValueError:
            raise ConfigurationError(f"{key} must be an integer, got {raw!r}") from None

    def _split_csv(key: str) -> list[str]:
        raw = os.getenv(key)
        if not raw:
            return []
        return [x.strip() for x in raw.split(",") if x and x.strip()]

    values: dict[str, Any] = {}

    secret = os.getenv("CSRF_SECRET")
    if secret:
        values["secret"] = secret
    if os.getenv("CSRF_ATTRIBUTE"):
        values["attribute"] = os.environ["CSRF_ATTRIBUTE"]
    if os.getenv("CSRF_ALGORITHM"):
        values["algorithm"] = os.environ["CSRF_ALGORITHM"]
    if os.getenv("CSRF_ERROR_BODY"):
        values["error_body"] = os.environ["CSRF_ERROR_BODY"]
    if os.getenv("CSRF_HEADER_NAME"):
        values["header_name"] = os.environ["CSRF_HEADER_NAME"]

    ttl = _int("CSRF_TTL")
    if ttl is not None:
        values["ttl"] = ttl
    status_on_error = _int("CSRF_STATUS_ON_ERROR")
    if status_on_error is not None:
        values["status_on_error"] = status_on_error

    safe_methods = _split_csv("CSRF_SAFE_METHODS")
    if safe_methods:
        values["safe_methods"] = frozenset(safe_methods)

    values.update({k: v for k, v in overrides.items() if v is not None})

    if not values.get("secret"):
        raise ConfigurationError("Missing CSRF settings: CSRF_SECRET")

    return CsrfSettings(**values)
