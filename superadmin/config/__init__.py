"""Configuration for the Super Admin Console Service."""

from superadmin.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
