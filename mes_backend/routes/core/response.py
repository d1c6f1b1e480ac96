"""
Response utilities for route handlers.
"""

import math

from aiohttp import web


def _json_response(payload: dict, status: int = 200) -> web.Response:
    """JSON response with a payload that is always valid strict JSON."""
    return web.json_response(_sanitize_json_payload(payload), status=status)


def _sanitize_json_payload(value):
    """
    Normalize payload values so they are always valid strict JSON.
    - Converts NaN/Infinity floats to None.
    - Recurses through dict/list/tuple containers.
    """
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, dict):
        return {k: _sanitize_json_payload(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_sanitize_json_payload(v) for v in value]
    return value
