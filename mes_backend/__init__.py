"""
Military Essentials website: static server and client navigation controller.
"""
from .app import create_app, run

__all__ = ["create_app", "run"]
