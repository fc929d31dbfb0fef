"""Shared test fixtures for the editserver test suite.

Provides server configurations that keep temp files in a per-test
directory, so tests can check that nothing is left behind.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from editserver.config.settings import ServerConfig


# ---------------------------------------------------------------------------
# Configuration Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def scratch_dir(tmp_path: Path) -> Path:
    """Directory the server creates its temp files in."""
    d = tmp_path / "scratch"
    d.mkdir()
    return d


@pytest.fixture
def server_config(scratch_dir: Path) -> ServerConfig:
    """Config with origin restriction on and temp files under scratch_dir."""
    return ServerConfig(editor_command="fake-editor --wait", temp_dir=str(scratch_dir))


@pytest.fixture
def open_config(scratch_dir: Path) -> ServerConfig:
    """Config that accepts any origin."""
    return ServerConfig(
        editor_command="fake-editor --wait",
        require_extension_origin=False,
        temp_dir=str(scratch_dir),
    )


@pytest.fixture
def extension_headers() -> dict[str, str]:
    return {"Origin": "chrome-extension://abcdefghijklmnop"}
