"""Tests for configuration loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from editserver.config.settings import (
    ServerConfig,
    Settings,
    load_settings,
    parse_bind_address,
)


class TestSettings:
    def test_default_settings(self) -> None:
        """Default Settings should be valid."""
        settings = Settings()
        assert settings.server.bind == ":8888"
        assert settings.server.editor_command == "gvim -f"
        assert settings.server.require_extension_origin is True
        assert settings.logging.level == "INFO"

    def test_server_config_defaults(self) -> None:
        config = ServerConfig()
        assert config.origin_prefix == "chrome-extension:"
        assert config.editor_timeout is None
        assert config.fail_on_editor_error is False
        assert config.temp_prefix == "edit-server-"
        assert config.temp_dir is None
        assert config.max_concurrent_edits == 40

    @pytest.mark.parametrize("slots", [0, -1])
    def test_non_positive_edit_slots_rejected(self, slots: int) -> None:
        with pytest.raises(ValidationError):
            ServerConfig(max_concurrent_edits=slots)

    def test_server_config_frozen(self) -> None:
        config = ServerConfig()
        with pytest.raises(ValidationError):
            config.editor_command = "vim"  # type: ignore[misc]

    @pytest.mark.parametrize("command", ["", "   ", "\t\n"])
    def test_blank_editor_command_rejected(self, command: str) -> None:
        with pytest.raises(ValidationError):
            ServerConfig(editor_command=command)

    def test_non_positive_timeout_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ServerConfig(editor_timeout=0)

    def test_load_settings_missing_file(self, tmp_path: Path) -> None:
        """load_settings with missing file should return defaults."""
        settings = load_settings(tmp_path / "nonexistent.yaml")
        assert settings.server.editor_command == "gvim -f"

    def test_load_settings_from_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "editserver.yaml"
        path.write_text(
            "server:\n"
            "  bind: '127.0.0.1:9292'\n"
            "  editor_command: 'emacsclient -c'\n"
            "  require_extension_origin: false\n"
            "  editor_timeout: 600\n"
            "logging:\n"
            "  level: DEBUG\n"
        )
        settings = load_settings(path)
        assert settings.server.bind == "127.0.0.1:9292"
        assert settings.server.editor_command == "emacsclient -c"
        assert settings.server.require_extension_origin is False
        assert settings.server.editor_timeout == 600
        assert settings.logging.level == "DEBUG"

    def test_empty_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_settings(path).server.bind == ":8888"

    def test_env_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EDITSERVER_SERVER__EDITOR_COMMAND", "kate --block")
        settings = load_settings(tmp_path / "nonexistent.yaml")
        assert settings.server.editor_command == "kate --block"

    def test_env_beats_yaml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = tmp_path / "editserver.yaml"
        path.write_text(
            "server:\n"
            "  bind: '127.0.0.1:9292'\n"
            "  editor_command: 'gvim -f'\n"
        )
        monkeypatch.setenv("EDITSERVER_SERVER__EDITOR_COMMAND", "kate --block")
        settings = load_settings(path)
        assert settings.server.editor_command == "kate --block"
        assert settings.server.bind == "127.0.0.1:9292"

    def test_yaml_fills_what_env_leaves_unset(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        path = tmp_path / "editserver.yaml"
        path.write_text("logging:\n  level: DEBUG\n")
        monkeypatch.setenv("EDITSERVER_SERVER__BIND", ":9000")
        settings = load_settings(path)
        assert settings.server.bind == ":9000"
        assert settings.logging.level == "DEBUG"


class TestParseBindAddress:
    def test_empty_host_binds_all_interfaces(self) -> None:
        assert parse_bind_address(":8888") == ("0.0.0.0", 8888)

    def test_host_and_port(self) -> None:
        assert parse_bind_address("127.0.0.1:9000") == ("127.0.0.1", 9000)

    def test_hostname(self) -> None:
        assert parse_bind_address("localhost:8888") == ("localhost", 8888)

    def test_ipv6(self) -> None:
        assert parse_bind_address("[::1]:8888") == ("::1", 8888)

    @pytest.mark.parametrize("bind", ["8888", "localhost", "host:http", ":0", ":70000"])
    def test_invalid(self, bind: str) -> None:
        with pytest.raises(ValueError):
            parse_bind_address(bind)
