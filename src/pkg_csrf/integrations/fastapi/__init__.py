from __future__ import annotations

from typing import Any

from .deps import FastAPICsrf
from .middleware import CsrfMiddleware
from .security import StarletteRequestContext
from ..common.authority_factory import create_csrf_authority


def create_fastapi_csrf(**options: Any) -> FastAPICsrf:
    """
    High-level helper for FastAPI apps:

    - Creates a CsrfAuthority (same keyword arguments as
      `create_csrf_authority`)
    - Wraps it in FastAPICsrf, exposing dependencies like:

        fastapi_csrf.issue_token
        fastapi_csrf.verify_token
        fastapi_csrf.protect

    For app-wide protection install the middleware instead:

        app.add_middleware(CsrfMiddleware, authority=fastapi_csrf.authority)
    """
    return FastAPICsrf(authority=create_csrf_authority(**options))


__all__ = ["CsrfMiddleware", "FastAPICsrf", "StarletteRequestContext", "create_fastapi_csrf"]
