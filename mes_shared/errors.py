"""
Shared helpers for sanitizing error messages before they reach clients.
"""
from __future__ import annotations

import re
from typing import Any

MAX_DETAIL_LENGTH = 200
_POSIX_PATH_RE = re.compile(r"(?<![A-Za-z0-9:/?&=#%])/(?!/)[^\s#?]+")


def sanitize_error_message(exc: Any, fallback: str) -> str:
    """
    Build a safe error message for clients and log lines.

    Filesystem paths in the exception text are replaced by `[path]`, the text is
    folded onto one line and prefixed by `fallback`.
    """
    if not fallback:
        fallback = "An error occurred"
    if exc is None:
        return fallback

    try:
        raw = str(exc)
    except Exception:
        raw = ""

    detail = " ".join(_POSIX_PATH_RE.sub("[path]", raw).split())
    if detail:
        return f"{fallback}: {detail[:MAX_DETAIL_LENGTH]}"
    return fallback
