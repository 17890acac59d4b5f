from __future__ import annotations

from typing import Any, List

import structlog
from starlette.requests import Request
from starlette.responses import PlainTextResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from ...application.authority import CsrfAuthority
from ...domain.value_objects import Rejection
from .security import StarletteRequestContext, read_token_field

logger = structlog.get_logger("pkg_csrf")


async def _buffer_body(receive: Receive) -> List[Message]:
    messages: List[Message] = []
    while True:
        message = await receive()
        messages.append(message)
        if message["type"] != "http.request" or not message.get("more_body", False):
            return messages


def _replay(messages: List[Message], receive: Receive) -> Receive:
    pending = list(messages)

    async def replay() -> Message:
        if pending:
            return pending.pop(0)
        return await receive()

    return replay


class CsrfMiddleware:
    """
    Pure ASGI middleware running `CsrfAuthority` in front of the app.

    - Write requests: the token is read from the form/JSON field named by
      `settings.attribute`, falling back to the `settings.header_name`
      header. Failures answer with a plain-text rejection.
    - Every protected request from a known identity gets a fresh token in
      `request.state.<attribute>` for the next response to embed.

    The request body is buffered before verification and replayed to the
    app unchanged.

        app.add_middleware(CsrfMiddleware, authority=authority)
    """

    def __init__(self, app: ASGIApp, authority: CsrfAuthority) -> None:
        self.app = app
        self.authority = authority

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        authority = self.authority
        context = StarletteRequestContext(request=Request(scope))

        if authority.should_protect(context) and authority.needs_verification(context):
            messages = await _buffer_body(receive)
            receive = _replay(messages, receive)
            body = await read_token_field(
                Request(scope, _replay(messages, _disconnected)),
                authority.settings.attribute,
            )
            context = StarletteRequestContext(request=context.request, body=body)

        prepared = authority.prepare(context)
        if isinstance(prepared, Rejection):
            logger.info(
                "Rejected request without a valid CSRF token",
                method=scope.get("method"),
                path=scope.get("path"),
            )
            response = PlainTextResponse(prepared.body, status_code=prepared.status_code)
            await response(scope, receive, send)
            return

        token = prepared.get_attribute(authority.settings.attribute)
        if token is not None:
            state: dict[str, Any] = scope.setdefault("state", {})
            state[authority.settings.attribute] = token

        await self.app(scope, receive, send)


async def _disconnected() -> Message:
    return {"type": "http.disconnect"}
