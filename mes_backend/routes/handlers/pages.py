"""
Document shell and static asset routes.
"""
from pathlib import Path

from aiohttp import web

from mes_shared import ErrorCode, get_logger

from ...config import INDEX_DOCUMENT, PAGE_ROUTES, ServerSettings
from ..core import NO_CACHE_HEADERS, content_type_for, resolve_asset

logger = get_logger(__name__)

APP_KEY_SETTINGS: web.AppKey[ServerSettings] = web.AppKey("mes_settings", ServerSettings)


def _static_root(request: web.Request) -> Path:
    return request.app[APP_KEY_SETTINGS].static_root


def _file_response(path: Path) -> web.FileResponse:
    response = web.FileResponse(path=str(path))
    content_type = content_type_for(path)
    if content_type:
        response.headers["Content-Type"] = content_type
    return response


def register_page_routes(routes: web.RouteTableDef) -> None:
    """Every page route answers with the same document shell; the client picks the section."""

    async def document_shell(request: web.Request) -> web.StreamResponse:
        index = _static_root(request) / INDEX_DOCUMENT
        if not index.is_file():
            logger.error("Error sending file: %s is missing", INDEX_DOCUMENT)
            return web.Response(status=500, text="Internal Server Error")
        response = _file_response(index)
        response.headers.update(NO_CACHE_HEADERS)
        return response

    for path in PAGE_ROUTES:
        routes.get(path)(document_shell)


def register_static_routes(routes: web.RouteTableDef) -> None:
    """Catch-all asset route. Register last: it matches every GET path."""

    @routes.get("/{tail:.*}")
    async def static_asset(request: web.Request) -> web.StreamResponse:
        result = resolve_asset(_static_root(request), request.match_info.get("tail", ""))
        if not result.ok:
            if result.code == ErrorCode.FORBIDDEN.value:
                logger.warning("Rejected static path: %s", request.path)
            raise web.HTTPNotFound()
        return _file_response(result.unwrap())
