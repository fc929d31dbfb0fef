"""Editor invocation module for editserver.

Runs the configured editor command against a temp file and blocks until
it is done. The runner is pluggable so tests can avoid real processes.

Public API:
    EditorRunner -- Abstract base class
    EditorError -- Raised when the editor cannot run to completion
    SubprocessEditor -- Child-process backend
"""

from editserver.editor.base import EditorError, EditorRunner
from editserver.editor.subprocess_runner import SubprocessEditor

__all__ = ["EditorError", "EditorRunner", "SubprocessEditor"]
