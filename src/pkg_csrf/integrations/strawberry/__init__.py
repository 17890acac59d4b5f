from .csrf import (
    StrawberryCsrf,
    StrawberryCsrfContext,
    create_strawberry_csrf,
)

__all__ = [
    "StrawberryCsrf",
    "StrawberryCsrfContext",
    "create_strawberry_csrf",
]
