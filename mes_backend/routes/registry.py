"""
Route registration system.
Registers every handler module and installs the site-wide middlewares on an aiohttp app.
"""

from __future__ import annotations

import traceback
from collections.abc import Awaitable, Callable

from aiohttp import web

from mes_shared import get_logger, sanitize_error_message

from ..config import API_PREFIX, ServerSettings
from ..features.health import HealthService
from ..observability import ensure_observability
from .core import _json_response, cache_headers_for
from .handlers import (
    APP_KEY_HEALTH,
    APP_KEY_SETTINGS,
    register_health_routes,
    register_page_routes,
    register_static_routes,
)

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]

CONTENT_SECURITY_POLICY = (
    "default-src 'self'; "
    "script-src 'self' 'unsafe-inline'; "
    "style-src 'self' 'unsafe-inline'; "
    "img-src 'self' data: https:; "
    "font-src 'self'; "
    "connect-src 'self'; "
    "frame-ancestors 'none';"
)
SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Content-Security-Policy": CONTENT_SECURITY_POLICY,
}

_APP_KEY_MIDDLEWARES_INSTALLED: web.AppKey[bool] = web.AppKey("_mes_middlewares_installed", bool)
_APP_KEY_ROUTES_REGISTERED: web.AppKey[bool] = web.AppKey("_mes_routes_registered", bool)

logger = get_logger(__name__)


@web.middleware
async def security_headers_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    """Apply security headers to every response."""
    response = await handler(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


@web.middleware
async def cache_headers_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    """Cache policy by extension: images for a year, css/js for a week, html never."""
    response = await handler(request)
    if response.status < 400:
        for name, value in cache_headers_for(request.path).items():
            response.headers.setdefault(name, value)
    return response


def _not_found_response(request: web.Request) -> web.StreamResponse:
    logger.warning("404 - Route not found: %s %s", request.method, request.path_qs)
    if request.path.startswith(API_PREFIX):
        return _json_response(
            {
                "error": "Not Found",
                "message": "The requested resource was not found",
                "path": request.path_qs,
            },
            status=404,
        )
    # Unknown page paths go back to the home page.
    return web.Response(status=302, headers={"Location": "/"})


@web.middleware
async def not_found_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    """Catch-all for unmatched routes: JSON 404 for API paths, redirect for pages."""
    try:
        return await handler(request)
    except (web.HTTPNotFound, web.HTTPMethodNotAllowed):
        return _not_found_response(request)


def _make_error_middleware(settings: ServerSettings):
    @web.middleware
    async def error_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
        """Turn unhandled exceptions into a JSON error; details only in development."""
        try:
            return await handler(request)
        except web.HTTPException:
            raise
        except Exception as exc:
            logger.error("Error occurred: %s", sanitize_error_message(exc, type(exc).__name__), exc_info=True)
            status = int(getattr(exc, "status_code", 500) or 500)
            message = str(exc) if settings.is_development else "Internal Server Error"
            payload: dict = {"error": "Internal Server Error" if status == 500 else message}
            if settings.is_development:
                payload["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
            return _json_response(payload, status=status)

    return error_middleware


def register_all_routes(routes: web.RouteTableDef) -> web.RouteTableDef:
    """
    Register all route handlers on `routes`.
    The static catch-all goes last so named routes win.
    """
    register_health_routes(routes)
    register_page_routes(routes)
    register_static_routes(routes)

    logger.debug("Routes registered: GET /health, GET / /tos /privacy, GET /{asset}")
    return routes


def _install_middlewares(app: web.Application, settings: ServerSettings) -> None:
    if app.get(_APP_KEY_MIDDLEWARES_INSTALLED):
        return
    # Outermost first: headers wrap the 404/500 responses produced further in.
    app.middlewares.extend(
        [
            security_headers_middleware,
            cache_headers_middleware,
            _make_error_middleware(settings),
            not_found_middleware,
        ]
    )
    app[_APP_KEY_MIDDLEWARES_INSTALLED] = True


def register_routes(app: web.Application, settings: ServerSettings) -> None:
    """Register routes, services and middlewares onto an aiohttp application."""
    app[APP_KEY_SETTINGS] = settings
    app[APP_KEY_HEALTH] = HealthService(settings)

    _install_middlewares(app, settings)
    ensure_observability(app)

    if app.get(_APP_KEY_ROUTES_REGISTERED):
        logger.debug("register_routes(app) skipped: routes already registered on this app")
        return
    app.add_routes(register_all_routes(web.RouteTableDef()))
    app[_APP_KEY_ROUTES_REGISTERED] = True
