"""
Health check endpoint.
"""
from aiohttp import web

from mes_shared import ErrorCode, Result, get_logger, sanitize_error_message

from ...features.health import HealthService
from ..core import _json_response

logger = get_logger(__name__)

APP_KEY_HEALTH: web.AppKey[HealthService] = web.AppKey("mes_health_service", HealthService)


def register_health_routes(routes: web.RouteTableDef) -> None:
    """Register the health route."""

    @routes.get("/health")
    async def health(request: web.Request) -> web.Response:
        """Get health status."""
        service = request.app.get(APP_KEY_HEALTH)
        if service is None:
            result = Result.Err(ErrorCode.SERVICE_UNAVAILABLE, "Health service not configured")
        else:
            try:
                result = service.status()
            except Exception as exc:
                result = Result.Err(ErrorCode.INTERNAL, sanitize_error_message(exc, "Health status failed"))

        if not result.ok:
            logger.error("Health check failed: %s", result.error)
            return _json_response({"status": "unhealthy", "error": result.error, "code": result.code}, status=503)
        return _json_response(result.data)
