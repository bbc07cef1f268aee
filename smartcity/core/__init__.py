"""Core configuration, security and token handling."""

from smartcity.core.config import Settings, get_settings
from smartcity.core.database import get_db

__all__ = ["Settings", "get_settings", "get_db"]
