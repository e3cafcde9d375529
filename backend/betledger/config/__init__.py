"""
Configuration module initialization.
Exports configuration components for use throughout the application.
"""

from betledger.config.settings import Settings, get_settings, settings

__all__ = ["Settings", "settings", "get_settings"]
