from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import HTTPException, Request

from ...application.authority import CsrfAuthority
from ...domain.value_objects import Rejection
from .security import StarletteRequestContext, read_token_field


@dataclass(slots=True)
class FastAPICsrf:
    """
    FastAPI integration for pkg_csrf, for apps that protect individual
    routes instead of installing `CsrfMiddleware`.

        csrf = create_fastapi_csrf(secret=..., identity_resolver=...)

        @router.get("/form")
        async def form(token: str | None = Depends(csrf.issue_token)):
            ...

        @router.post("/form", dependencies=[Depends(csrf.verify_token)])
        async def submit(...):
            ...
    """

    authority: CsrfAuthority

    # ------------------------------------------------------------------ #
    # Dependencies
    # ------------------------------------------------------------------ #

    async def issue_token(self, request: Request) -> Optional[str]:
        """
        Dependency: issue a token for the current identity.

        Also stores it in `request.state.<attribute>`. Returns None for
        anonymous callers and for requests `should_protect` excludes.
        """
        context = StarletteRequestContext(request=request)
        if not self.authority.should_protect(context):
            return None
        token = self.authority.issue(context).get_attribute(self.authority.settings.attribute)
        if token is not None:
            setattr(request.state, self.authority.settings.attribute, token)
        return token

    async def verify_token(self, request: Request) -> None:
        """
        Dependency: require a valid token on write requests.

        Raises:
            HTTPException with the configured status and error body.
        """
        authority = self.authority
        context = StarletteRequestContext(request=request)
        if not authority.should_protect(context) or not authority.needs_verification(context):
            return

        body = await read_token_field(request, authority.settings.attribute)
        context = StarletteRequestContext(request=request, body=body)

        if not authority.verify(context):
            rejection = authority.reject()
            raise HTTPException(
                status_code=rejection.status_code,
                detail=rejection.body,
            )

    async def protect(self, request: Request) -> Optional[str]:
        """
        Dependency: full cycle for one route. Verifies write requests, then
        issues and returns the token for the next request.
        """
        authority = self.authority
        context = StarletteRequestContext(request=request)
        if authority.should_protect(context) and authority.needs_verification(context):
            body = await read_token_field(request, authority.settings.attribute)
            context = StarletteRequestContext(request=request, body=body)

        prepared = authority.prepare(context)
        if isinstance(prepared, Rejection):
            raise HTTPException(status_code=prepared.status_code, detail=prepared.body)

        token = prepared.get_attribute(authority.settings.attribute)
        if token is not None:
            setattr(request.state, authority.settings.attribute, token)
        return token
