"""
Configuration package for shortweave

Provides application settings via environment variables using pydantic-settings.
"""

from .settings import appsettings, AppSettings, ErrorBehavior, DEFAULT_BLOCK_ELEMENTS

__all__ = ["appsettings", "AppSettings", "ErrorBehavior", "DEFAULT_BLOCK_ELEMENTS"]
