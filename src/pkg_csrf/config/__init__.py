"""
pkg_csrf.config

- CsrfSettings: immutable settings validated at construction.
- settings_from_env: builds CsrfSettings from CSRF_* environment variables.
"""

from __future__ import annotations

from .env import settings_from_env
from .settings import CsrfSettings

__all__ = [
    "CsrfSettings",
    "settings_from_env",
]
