"""HTTP layer for the donation point directory."""

from .app import create_app
from .config import Settings, get_settings
from .routes import build_points_router

__all__ = ["Settings", "build_points_router", "create_app", "get_settings"]
