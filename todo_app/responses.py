"""Uniform ``{success, data, error}`` JSON responses."""

import json
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from todo_app.models import Task


def _encode(data: Any) -> Any:
    if isinstance(data, Task):
        return data.to_json()
    if isinstance(data, list):
        return [_encode(item) for item in data]
    return data


def success_response(data: Any, status_code: int = 200) -> JSONResponse:
    return JSONResponse(
        content={"success": True, "data": _encode(data)},
        status_code=status_code,
    )


def error_response(error: str, status_code: int = 500) -> JSONResponse:
    return JSONResponse(
        content={"success": False, "error": error},
        status_code=status_code,
    )


class InvalidJSONBody(Exception):
    """The request body could not be decoded as JSON."""


async def parse_json_body(request: Request) -> Any:
    """Decode the request body.

    Raises:
        InvalidJSONBody: If the body is empty or not valid JSON.
    """
    raw = await request.body()
    try:
        return json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise InvalidJSONBody(str(exc)) from exc
