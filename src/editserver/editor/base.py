"""Abstract base class for running the external editor.

The handler only needs "run this command against this file and block
until it is done". Implementations decide how: the real backend spawns
a child process, tests plug in a function that edits the file directly.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from editserver.domain.models import EditorInvocation

logger = logging.getLogger(__name__)


class EditorRunner(ABC):
    """Abstract interface for running an editor against a file.

    Implementations must not return before the editor is finished with
    the file, since the handler reads it back right afterwards.

    Example usage::

        runner = SubprocessEditor(timeout=600)
        invocation = EditorInvocation.from_command("gvim -f", "/tmp/edit-server-x1")
        exit_code = runner.run(invocation)
    """

    @abstractmethod
    def run(self, invocation: EditorInvocation) -> int | None:
        """Run the editor and wait for it to exit.

        Args:
            invocation: Program, static arguments and the temp file path.

        Returns:
            The editor's exit code, or None if no exit code is available
            (the editor never started, or was stopped before finishing).

        Raises:
            EditorError: Only for failures the implementation considers
                         fatal. The handler logs these and reads the file
                         back anyway unless strict mode is on.
        """
        ...


class EditorError(Exception):
    """Raised when the editor cannot be run to completion."""

    def __init__(self, message: str, program: str = "") -> None:
        super().__init__(message)
        self.program = program
