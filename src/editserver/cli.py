"""Command-line interface for the edit server.

Loads settings, applies command-line overrides and starts the HTTP
server. ``-b`` and ``-c`` set the bind address and editor command.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="editserver",
        description="Edit POSTed content in a local editor and return the result",
    )
    parser.add_argument(
        "-C", "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: config/editserver.yaml)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "-b", "--bind",
        type=str, default=None,
        help="Bind address, host:port (default: :8888)",
    )
    parser.add_argument(
        "-c", "--editor",
        type=str, default=None,
        help="The editor command, with arguments (default: 'gvim -f')",
    )
    parser.add_argument(
        "--allow-any-origin",
        action="store_true",
        help="Accept POST requests without a browser extension Origin header",
    )
    parser.add_argument(
        "--timeout",
        type=float, default=None,
        help="Seconds to wait for the editor before giving up on it (default: wait forever)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Answer 500 when the editor exits nonzero or cannot be started",
    )
    return parser.parse_args(argv)


def apply_overrides(settings, args: argparse.Namespace) -> None:
    """Fold command-line flags into the loaded settings."""
    overrides: dict[str, object] = {}
    if args.bind is not None:
        overrides["bind"] = args.bind
    if args.editor is not None:
        overrides["editor_command"] = args.editor
    if args.allow_any_origin:
        overrides["require_extension_origin"] = False
    if args.timeout is not None:
        overrides["editor_timeout"] = args.timeout
    if args.strict:
        overrides["fail_on_editor_error"] = True
    if overrides:
        # Revalidate; model_copy(update=...) would skip the field checks
        settings.server = type(settings.server).model_validate(
            {**settings.server.model_dump(), **overrides}
        )
    if args.verbose:
        settings.logging.level = "DEBUG"


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the editserver CLI."""
    args = parse_args(argv)

    from editserver.config.settings import load_settings
    from editserver.server import main as run_server
    from editserver.utils.logging import setup_logging

    settings = load_settings(args.config)
    apply_overrides(settings, args)
    setup_logging(settings.logging)

    run_server(settings.server)


if __name__ == "__main__":
    main()
