from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, Type

from graphql import OperationType
from starlette.requests import Request
from strawberry.permission import BasePermission
from strawberry.types import Info

from ...application.authority import CsrfAuthority
from ..common.authority_factory import create_csrf_authority
from ..fastapi.security import StarletteRequestContext


# --------------------------------------------------------------------- #
# Context type used by Strawberry
# --------------------------------------------------------------------- #

@dataclass(slots=True)
class StrawberryCsrfContext:
    """
    Default context type for Strawberry GraphQL.

    `csrf_token` is the token the client must send back in the CSRF header
    with its next mutation; it is None for anonymous callers.
    """
    request: Request
    csrf_token: Optional[str] = None
    extra: Any = None  # host app can put UoW, services, etc. here if desired


# --------------------------------------------------------------------- #
# Main integration: StrawberryCsrf
# --------------------------------------------------------------------- #

@dataclass(slots=True)
class StrawberryCsrf:
    """
    Strawberry GraphQL integration for pkg_csrf.

    Responsibilities:
      - provide a `context_getter` that issues a token on every operation
      - provide a permission class that verifies the token on mutations

    GraphQL bodies are JSON documents, so the token travels in the
    `settings.header_name` header (default: X-CSRF-Token).
    """

    authority: CsrfAuthority

    # ----------------------------------------------------------------- #
    # Context getter
    # ----------------------------------------------------------------- #

    def make_context_getter(
        self,
        *,
        extra_factory: Optional[Callable[[Request, Optional[str]], Any]] = None,
    ):
        """
        Build an async function compatible with:

            strawberry.fastapi.GraphQLRouter(context_getter=...)

        Args:
            extra_factory:
                - Optional callable: (request: Request, token: str | None) -> Any
                - Whatever it returns will be stored on context.extra
        """
        authority = self.authority

        async def _context_getter(request: Request) -> StrawberryCsrfContext:
            context = StarletteRequestContext(request=request)
            token = None
            if authority.should_protect(context):
                token = authority.issue(context).get_attribute(authority.settings.attribute)

            extra = extra_factory(request, token) if extra_factory else None
            return StrawberryCsrfContext(request=request, csrf_token=token, extra=extra)

        return _context_getter

    # ----------------------------------------------------------------- #
    # Permission helpers
    # ----------------------------------------------------------------- #

    def require_csrf(self) -> Type[BasePermission]:
        """
        Permission: mutations must carry a valid CSRF token.

        Example:

            RequireCsrf = strawberry_csrf.require_csrf()

            @strawberry.mutation(permission_classes=[RequireCsrf])
            def update_profile(self, info: Info, name: str) -> Profile:
                ...
        """
        authority = self.authority

        class _RequireCsrf(BasePermission):
            message = authority.settings.error_body

            def has_permission(self, source: Any, info: Info, **kwargs: Any) -> bool:
                if info.operation.operation is not OperationType.MUTATION:
                    return True

                request = _request_from(info.context)
                context = StarletteRequestContext(request=request)
                if not authority.should_protect(context):
                    return True
                return authority.verify(context)

        return _RequireCsrf


def _request_from(context: Any) -> Request:
    if isinstance(context, dict):
        return context["request"]
    return context.request


# --------------------------------------------------------------------- #
# High-level helper
# --------------------------------------------------------------------- #

def create_strawberry_csrf(**options: Any) -> StrawberryCsrf:
    """
    Convenience helper:

        strawberry_csrf = create_strawberry_csrf(
            secret=settings.CSRF_SECRET,
            identity_resolver=lambda ctx: ctx.request.cookies.get("session_id"),
            algorithm="sha256",
        )

    Accepts the keyword arguments of `create_csrf_authority`.
    """
    return StrawberryCsrf(authority=create_csrf_authority(**options))
