"""
Core utilities for route handlers.
"""
from .response import _json_response
from .static_files import (
    MIME_TYPES,
    NO_CACHE_HEADERS,
    cache_headers_for,
    content_type_for,
    resolve_asset,
)

__all__ = [
    "_json_response",
    "MIME_TYPES",
    "NO_CACHE_HEADERS",
    "cache_headers_for",
    "content_type_for",
    "resolve_asset",
]
