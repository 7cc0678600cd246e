"""Request Fields — raw, untyped field maps from request bodies.

Invariants:
    - Always returns a dict (empty when the body is empty)
    - JSON bodies must be objects; anything else is invalid input
    - Form bodies yield string values, JSON bodies keep their JSON types
"""

import json
from typing import Any

from fastapi import Request

from issue_tracker.core.errors import InvalidInputError

_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def read_body_fields(request: Request) -> dict[str, Any]:
    """Parse a JSON or form-encoded body into a plain field map."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(_FORM_TYPES):
        form = await request.form()
        return dict(form.items())

    body = await request.body()
    if not body.strip():
        return {}
    try:
        data = json.loads(body)
    except ValueError as e:
        raise InvalidInputError() from e
    if not isinstance(data, dict):
        raise InvalidInputError()
    return data


def read_query_fields(request: Request) -> dict[str, Any]:
    return dict(request.query_params.items())
