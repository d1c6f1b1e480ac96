"""
Observability helpers (request id + timing + request log) for aiohttp routes.
"""

from __future__ import annotations

import logging
import time
from typing import Any
from uuid import uuid4

from aiohttp import web

from mes_shared import get_logger, log_structured, request_id_var

from .utils import env_bool

logger = get_logger(__name__)

_APPKEY_OBS_INSTALLED = web.AppKey("mes_observability_installed", bool)

MS_PER_S = 1000.0
_HEALTH_PATHS = frozenset({"/health"})


def _new_request_id() -> str:
    return uuid4().hex


def _get_request_id(request: web.Request) -> str:
    rid = (request.headers.get("X-Request-ID") or "").strip()
    return rid or _new_request_id()


def _is_error_status(status: int | None) -> bool:
    return status is not None and status >= 400


def _should_log(request: web.Request, *, status: int | None) -> bool:
    """Every request is logged except successful health polls (unless MES_OBS_LOG_HEALTH)."""
    path = request.path or ""
    if path in _HEALTH_PATHS and not _is_error_status(status):
        return env_bool("MES_OBS_LOG_HEALTH", False)
    return True


def _client_address(request: web.Request) -> str:
    forwarded = (request.headers.get("X-Forwarded-For") or "").split(",")[0].strip()
    return forwarded or str(request.remote or "")


@web.middleware
async def request_context_middleware(request: web.Request, handler):
    """Add request-id correlation and a one-line access log per request."""
    if env_bool("MES_OBS_DISABLE", False):
        return await handler(request)

    rid = _get_request_id(request)
    request["mes_request_id"] = rid
    token = request_id_var.set(rid)
    start = time.perf_counter()
    status: int | None = None
    error: str | None = None
    try:
        response = await handler(request)
        status = response.status
        response.headers["X-Request-ID"] = rid
        return response
    except web.HTTPException as exc:
        status = exc.status
        exc.headers["X-Request-ID"] = rid
        raise
    except Exception as exc:
        status = 500
        error = type(exc).__name__
        raise
    finally:
        duration_ms = (time.perf_counter() - start) * MS_PER_S
        request["mes_duration_ms"] = duration_ms
        try:
            _emit_request_log(request, status=status, duration_ms=duration_ms, error=error)
        finally:
            request_id_var.reset(token)


def _emit_request_log(request: web.Request, *, status: int | None, duration_ms: float, error: str | None) -> None:
    if not _should_log(request, status=status):
        return
    level = logging.WARNING if _is_error_status(status) and (status or 0) >= 500 else logging.INFO
    context: dict[str, Any] = {
        "method": request.method,
        "path": request.path_qs,
        "status": status,
        "duration_ms": round(duration_ms, 2),
        "remote": _client_address(request),
    }
    if error:
        context["error"] = error
    log_structured(logger, level, f"{request.method} {request.path_qs} {status} {duration_ms:.0f}ms", **context)


def ensure_observability(app: web.Application) -> None:
    """Install the request context middleware once per app."""
    if app.get(_APPKEY_OBS_INSTALLED):
        return
    app.middlewares.insert(0, request_context_middleware)
    app[_APPKEY_OBS_INSTALLED] = True
