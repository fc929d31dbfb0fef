"""Configuration management for editserver.

Loads settings from a YAML configuration file with environment variable
overrides. Supports .env files.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/editserver.yaml")

# Host used when the bind address leaves it empty (":8888")
ALL_INTERFACES = "0.0.0.0"


class ServerConfig(BaseModel):
    """Settings the edit handler is built from. Fixed once the server starts."""

    model_config = ConfigDict(frozen=True)

    bind: str = Field(default=":8888", description="Bind address, host:port")
    editor_command: str = Field(
        default="gvim -f",
        min_length=1,
        description="Editor program followed by its arguments, whitespace separated",
    )
    require_extension_origin: bool = Field(default=True)
    origin_prefix: str = Field(default="chrome-extension:")
    editor_timeout: float | None = Field(
        default=None, gt=0, description="Seconds to wait for the editor; None waits forever"
    )
    fail_on_editor_error: bool = Field(
        default=False, description="Answer 500 when the editor exits nonzero or cannot start"
    )
    temp_prefix: str = Field(default="edit-server-")
    temp_suffix: str = Field(default="")
    temp_dir: str | None = Field(default=None)
    max_concurrent_edits: int = Field(
        default=40, gt=0, description="Worker threads available to editor sessions"
    )

    @field_validator("editor_command")
    @classmethod
    def _editor_command_has_program(cls, value: str) -> str:
        if not value.split():
            raise ValueError("editor_command must name a program")
        return value


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO")
    format: str = Field(
        default="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    file: str | None = Field(default=None)


class Settings(BaseSettings):
    """Root configuration for the edit server.

    Values come from, highest priority first: constructor arguments,
    environment variables such as ``EDITSERVER_SERVER__EDITOR_COMMAND``,
    the .env file, the YAML file, then defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="EDITSERVER_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        yaml_file=DEFAULT_CONFIG_PATH,
        yaml_file_encoding="utf-8",
        extra="ignore",
    )

    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Load settings from YAML + .env + environment variables.

    Priority: env vars > .env file > YAML file > defaults
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    if path.exists():
        logger.info("Loaded configuration from %s", path)
    else:
        logger.warning("Config file %s not found, using defaults + env vars", path)

    class FileSettings(Settings):
        model_config = SettingsConfigDict(yaml_file=path)

    return FileSettings()


def parse_bind_address(bind: str) -> tuple[str, int]:
    """Split a ``host:port`` bind address.

    An empty host (``":8888"``) binds every interface. IPv6 hosts may be
    given in brackets (``"[::1]:8888"``).

    Raises:
        ValueError: If the port is missing or not a valid port number.
    """
    host, sep, port_text = bind.rpartition(":")
    if not sep:
        raise ValueError(f"Bind address {bind!r} has no port")
    try:
        port = int(port_text)
    except ValueError:
        raise ValueError(f"Invalid port in bind address {bind!r}") from None
    if not 0 < port < 65536:
        raise ValueError(f"Port out of range in bind address {bind!r}")
    host = host.strip("[]") or ALL_INTERFACES
    return host, port
