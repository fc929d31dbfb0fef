"""Editor backend that runs the configured command as a child process."""

from __future__ import annotations

import logging
import subprocess

from editserver.domain.models import EditorInvocation
from editserver.editor.base import EditorError, EditorRunner

logger = logging.getLogger(__name__)


class SubprocessEditor(EditorRunner):
    """Runs the editor with :func:`subprocess.run` and blocks until it exits.

    A nonzero exit status is logged and returned, not raised. Editors
    disagree on what their exit codes mean, so the edited file is the
    only thing trusted.

    The child gets no standard streams. Launch failures and timeouts
    raise :class:`EditorError`.
    """

    def __init__(self, timeout: float | None = None) -> None:
        self._timeout = timeout

    @property
    def timeout(self) -> float | None:
        return self._timeout

    def run(self, invocation: EditorInvocation) -> int | None:
        logger.info("Running editor %s", invocation)
        try:
            completed = subprocess.run(
                invocation.argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                timeout=self._timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            # subprocess.run has already killed and reaped the child
            raise EditorError(
                f"Editor {invocation.program} did not exit within {self._timeout}s",
                program=invocation.program,
            ) from e
        except OSError as e:
            raise EditorError(
                f"Unable to launch editor {invocation.program}: {e}",
                program=invocation.program,
            ) from e

        if completed.returncode != 0:
            logger.warning(
                "Editor %s exited with status %d", invocation.program, completed.returncode
            )
        else:
            logger.debug("Editor %s exited cleanly", invocation.program)
        return completed.returncode
