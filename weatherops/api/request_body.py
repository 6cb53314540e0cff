"""Raw JSON body reading for routes that validate their own payloads."""

from typing import Any

from fastapi import Request

from ..errors import InvalidInput


async def read_json_body(request: Request) -> Any:
    """Parse the request body as JSON. An empty body reads as ``{}``."""
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        return await request.json()
    except ValueError as exc:
        raise InvalidInput("Request body must be valid JSON") from exc
