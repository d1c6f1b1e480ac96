"""
Health service - process status for load balancers and uptime checks.
"""
from typing import Callable

from mes_shared import Result, format_timestamp, get_logger, uptime_seconds

from ...config import ServerSettings

logger = get_logger(__name__)


class HealthService:
    """
    Health check service.

    Reports that the process is serving, how long it has been up, and which
    environment it runs in.
    """

    def __init__(self, settings: ServerSettings, uptime: Callable[[], float] = uptime_seconds):
        self.settings = settings
        self._uptime = uptime

    def status(self) -> Result[dict]:
        """
        Returns:
            Result with status dict containing:
                - status: always "healthy" while the process serves requests
                - timestamp: ISO-8601 UTC time of the check
                - uptime: process uptime in seconds
                - environment: deployment environment name
        """
        return Result.Ok(
            {
                "status": "healthy",
                "timestamp": format_timestamp(),
                "uptime": round(float(self._uptime()), 3),
                "environment": self.settings.environment,
            }
        )
