import asyncio
from types import SimpleNamespace

from graphql import OperationType
from starlette.requests import Request

from conftest import SECRET, fixed_clock
from pkg_csrf.integrations.strawberry import StrawberryCsrfContext, create_strawberry_csrf


def _request(session=None, token=None) -> Request:
    headers = []
    if session is not None:
        headers.append((b"cookie", f"session={session}".encode()))
    if token is not None:
        headers.append((b"x-csrf-token", token.encode()))
    return Request(
        {
            "type": "http",
            "method": "POST",
            "path": "/graphql",
            "query_string": b"",
            "headers": headers,
        }
    )


def _csrf():
    return create_strawberry_csrf(
        secret=SECRET,
        algorithm="sha256",
        identity_resolver=lambda context: context.request.cookies.get("session"),
        clock=fixed_clock,
    )


def _info(operation: OperationType, request: Request) -> SimpleNamespace:
    return SimpleNamespace(
        operation=SimpleNamespace(operation=operation),
        context=StrawberryCsrfContext(request=request),
    )


def test_context_getter_issues_token():
    getter = _csrf().make_context_getter(extra_factory=lambda request, token: {"seen": token})

    context = asyncio.run(getter(_request(session="abc")))

    assert context.csrf_token is not None
    assert context.extra == {"seen": context.csrf_token}


def test_context_getter_anonymous():
    context = asyncio.run(_csrf().make_context_getter()(_request()))
    assert context.csrf_token is None


def test_require_csrf_permission():
    csrf = _csrf()
    token = asyncio.run(csrf.make_context_getter()(_request(session="abc"))).csrf_token
    permission = csrf.require_csrf()()

    valid = _info(OperationType.MUTATION, _request(session="abc", token=token))
    assert permission.has_permission(None, valid) is True

    missing = _info(OperationType.MUTATION, _request(session="abc"))
    assert permission.has_permission(None, missing) is False
    assert permission.message == "Invalid or missing CSRF token!"

    other_session = _info(OperationType.MUTATION, _request(session="xyz", token=token))
    assert permission.has_permission(None, other_session) is False


def test_require_csrf_ignores_queries():
    permission = _csrf().require_csrf()()
    query = _info(OperationType.QUERY, _request(session="abc"))

    assert permission.has_permission(None, query) is True
