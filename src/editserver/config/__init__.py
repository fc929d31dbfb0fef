"""Configuration management for editserver.

Loads and validates YAML-based configuration with Pydantic models.
Environment variables override file values.
"""

from editserver.config.settings import (
    LoggingConfig,
    ServerConfig,
    Settings,
    load_settings,
    parse_bind_address,
)

__all__ = [
    "LoggingConfig",
    "ServerConfig",
    "Settings",
    "load_settings",
    "parse_bind_address",
]
