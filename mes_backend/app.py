"""
aiohttp application factory and process runner for the static site.
"""
from __future__ import annotations

import asyncio
import errno
from typing import Any

from aiohttp import web

from mes_shared import format_timestamp, get_logger, log_success

from .config import ServerSettings, load_settings
from .routes import register_routes
from .routes.handlers import APP_KEY_SETTINGS

logger = get_logger(__name__)

BANNER_WIDTH = 50


def _loop_exception_handler(loop: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
    exc = context.get("exception")
    logger.error("Unhandled exception in event loop: %s", context.get("message") or exc, exc_info=exc)


async def _on_startup(app: web.Application) -> None:
    settings = app[APP_KEY_SETTINGS]
    asyncio.get_running_loop().set_exception_handler(_loop_exception_handler)

    display_host = "localhost" if settings.host in ("0.0.0.0", "::", "") else settings.host
    logger.info("=" * BANNER_WIDTH)
    logger.info("Military Essentials Website Server")
    logger.info("=" * BANNER_WIDTH)
    logger.info("Environment: %s", settings.environment)
    logger.info("Port: %s", settings.port)
    logger.info("URL: http://%s:%s", display_host, settings.port)
    logger.info("Health Check: http://%s:%s/health", display_host, settings.port)
    logger.info("Static root: %s", settings.static_root)
    logger.info("Started: %s", format_timestamp())
    logger.info("=" * BANNER_WIDTH)


async def _on_shutdown(app: web.Application) -> None:
    logger.info("Shutdown requested, closing connections...")


async def _on_cleanup(app: web.Application) -> None:
    log_success(logger, "HTTP server closed")


def create_app(settings: ServerSettings | None = None) -> web.Application:
    """Build the aiohttp application for `settings` (environment defaults when None)."""
    settings = settings or load_settings()
    if not (settings.static_root / "index.html").is_file():
        logger.warning("Document shell not found under %s", settings.static_root)

    app = web.Application()
    register_routes(app, settings)
    app.on_startup.append(_on_startup)
    app.on_shutdown.append(_on_shutdown)
    app.on_cleanup.append(_on_cleanup)
    return app


def run(settings: ServerSettings | None = None) -> int:
    """
    Serve until SIGINT/SIGTERM. Open connections get `shutdown_timeout_s`
    to finish before they are dropped. Returns the process exit code.
    """
    settings = settings or load_settings()
    app = create_app(settings)
    try:
        web.run_app(
            app,
            host=settings.host,
            port=settings.port,
            shutdown_timeout=settings.shutdown_timeout_s,
            print=None,
            access_log=None,
        )
    except OSError as exc:
        if exc.errno == errno.EADDRINUSE:
            logger.error("Port %s is already in use", settings.port)
        else:
            logger.error("Server error: %s", exc)
        return 1
    return 0
