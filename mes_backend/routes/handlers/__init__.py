from .health import APP_KEY_HEALTH, register_health_routes
from .pages import APP_KEY_SETTINGS, register_page_routes, register_static_routes

__all__ = [
    "APP_KEY_HEALTH",
    "APP_KEY_SETTINGS",
    "register_health_routes",
    "register_page_routes",
    "register_static_routes",
]
