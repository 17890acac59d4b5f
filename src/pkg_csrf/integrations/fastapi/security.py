from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional

from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException
from starlette.requests import Request

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")
JSON_CONTENT_TYPE = "application/json"


@dataclass(frozen=True, slots=True)
class StarletteRequestContext:
    """
    `RequestContext` adapter over a Starlette request.

    The identity resolver and write classifier receive this object; the
    underlying request is available as `.request` (cookies, session,
    `scope["user"]`, ...). `body` only holds the fields read for token
    verification, never the full payload.
    """
    request: Request
    body: Mapping[str, Any] = field(default_factory=dict)
    attributes: Mapping[str, Any] = field(default_factory=dict)

    @property
    def method(self) -> str:
        return self.request.method

    @property
    def path(self) -> str:
        return self.request.url.path

    def get_attribute(self, key: str, default: Any = None) -> Any:
        return self.attributes.get(key, default)

    def with_attribute(self, key: str, value: Any) -> StarletteRequestContext:
        attributes = dict(self.attributes)
        attributes[key] = value
        return replace(self, attributes=attributes)

    def get_body_field(self, key: str) -> Any:
        return self.body.get(key)

    def get_header(self, name: str) -> Optional[str]:
        return self.request.headers.get(name)


def _media_type(request: Request) -> str:
    content_type = request.headers.get("content-type", "")
    return content_type.split(";", 1)[0].strip().lower()


async def read_token_field(request: Request, field_name: str) -> dict[str, str]:
    """
    Read the single body field carrying the token from:

      1. a form body (urlencoded or multipart)
      2. a JSON object body

    Returns an empty dict when the body has no such string field.
    Consumes the request body; callers that forward the request must
    replay it.
    """
    media_type = _media_type(request)

    if media_type in FORM_CONTENT_TYPES:
        try:
            form = await request.form()
        except (MultiPartException, HTTPException):
            return {}
        try:
            value = form.get(field_name)
        finally:
            await form.close()
        if isinstance(value, UploadFile) or not value:
            return {}
        return {field_name: value}

    if media_type == JSON_CONTENT_TYPE:
        try:
            payload = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            return {}
        value = payload.get(field_name) if isinstance(payload, dict) else None
        if isinstance(value, str) and value:
            return {field_name: value}

    return {}
