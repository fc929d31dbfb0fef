"""Request-scoped temporary files.

Each edit gets its own uniquely named file in the system temp directory.
The file is the hand-off medium between the HTTP body and the editor
process, and is always unlinked when the request finishes.

Usage::

    with scratch_file() as scratch:
        scratch.write(body)
        run_editor(scratch.path)
        edited = scratch.read()
"""

from __future__ import annotations

import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "edit-server-"


class ScratchFileError(Exception):
    """Raised when the temporary file cannot be created."""


class ScratchFile:
    """An open temporary file waiting for content.

    The descriptor is closed after the first write so that another
    process can open the file and see everything that was written.
    """

    def __init__(self, fd: int, path: str) -> None:
        self._fd: int | None = fd
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def is_open(self) -> bool:
        return self._fd is not None

    def write(self, data: bytes) -> int:
        """Write ``data``, then flush, sync and close the file.

        Returns the number of bytes written. A short count is not an
        error here; callers compare it against what they expected.

        Raises:
            ScratchFileError: If the file was already closed.
            OSError: If the write itself fails.
        """
        if self._fd is None:
            raise ScratchFileError(f"Temporary file {self._path} is already closed")
        written = 0
        with os.fdopen(self._fd, "wb") as f:
            self._fd = None
            if data:
                written = f.write(data)
            f.flush()
            os.fsync(f.fileno())
        logger.debug("Wrote %d bytes to '%s'", written, self._path)
        return written

    def read(self) -> bytes:
        """Read the whole file back from disk."""
        return self._path.read_bytes()

    def close(self) -> None:
        if self._fd is not None:
            try:
                os.close(self._fd)
            finally:
                self._fd = None

    def remove(self) -> None:
        """Close and unlink the file. Safe to call more than once."""
        self.close()
        logger.debug("Unlinking temporary file '%s'", self._path)
        try:
            self._path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Could not remove temporary file '%s': %s", self._path, e)


@contextmanager
def scratch_file(
    prefix: str = DEFAULT_PREFIX,
    suffix: str = "",
    directory: str | None = None,
) -> Iterator[ScratchFile]:
    """Create a uniquely named temp file that is removed on exit.

    Args:
        prefix: Name prefix, so stray files are recognizable.
        suffix: Name suffix, e.g. ``".txt"`` to steer editor syntax modes.
        directory: Where to create the file. Defaults to the system temp
                   directory.

    Raises:
        ScratchFileError: If the file cannot be created.
    """
    try:
        fd, path = tempfile.mkstemp(prefix=prefix, suffix=suffix, dir=directory)
    except OSError as e:
        raise ScratchFileError(f"Unable to open temporary file: {e}") from e

    scratch = ScratchFile(fd, path)
    logger.debug("Created temporary file '%s'", path)
    try:
        yield scratch
    finally:
        scratch.remove()
