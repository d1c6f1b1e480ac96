"""HTTP routes for the static site server."""
from .registry import register_all_routes, register_routes

__all__ = ["register_all_routes", "register_routes"]
