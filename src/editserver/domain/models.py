"""Core domain models for the edit server.

These models represent the per-request data flowing through an edit:
the editor command line built for a temp file, and the outcome the
handler hands back to the HTTP layer. Nothing here outlives a request.
"""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class EditStatus(str, enum.Enum):
    """Terminal state of one request through the edit pipeline."""

    STATUS_PAGE = "status_page"  # Non-POST request, answered with the status message
    COMPLETED = "completed"  # Edited content returned
    UNAUTHORIZED = "unauthorized"  # Origin check failed
    FILE_ERROR = "file_error"  # Temp file could not be created
    WRITE_ERROR = "write_error"  # Body did not match the declared length
    EDITOR_ERROR = "editor_error"  # Editor failed and strict mode is on
    READ_ERROR = "read_error"  # Temp file could not be read back


# ---------------------------------------------------------------------------
# Editor Models
# ---------------------------------------------------------------------------


class EditorInvocation(BaseModel):
    """A single editor command line run against one temp file."""

    model_config = ConfigDict(frozen=True)

    program: str = Field(min_length=1, description="Editor executable")
    args: tuple[str, ...] = Field(default=(), description="Static arguments from the editor command")
    path: str = Field(description="Temp file path, always passed last")

    @classmethod
    def from_command(cls, command: str, path: str) -> EditorInvocation:
        """Build an invocation from a whitespace separated command string.

        Raises:
            ValueError: If the command contains no program name.
        """
        parts = command.split()
        if not parts:
            raise ValueError("Editor command is empty")
        return cls(program=parts[0], args=tuple(parts[1:]), path=path)

    @property
    def argv(self) -> list[str]:
        return [self.program, *self.args, self.path]

    def __str__(self) -> str:
        return " ".join(self.argv)


# ---------------------------------------------------------------------------
# Response Models
# ---------------------------------------------------------------------------


class EditOutcome(BaseModel):
    """What the handler decided to answer for one request."""

    model_config = ConfigDict(frozen=True)

    status: EditStatus
    status_code: int = Field(default=200, ge=100, le=599)
    body: bytes = Field(default=b"")
    media_type: str = Field(default="text/plain; charset=utf-8")
