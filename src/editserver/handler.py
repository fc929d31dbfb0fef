"""Per-request edit pipeline.

Turns one HTTP request into one edit: check the method and origin,
write the body to a fresh temp file, run the editor against it, and
answer with whatever the file holds afterwards. Every failure ends the
request with an HTTP status; nothing is retried and nothing is shared
between requests, so concurrent calls need no locking.

The handler is synchronous. The HTTP layer runs it on a worker thread so
that a long editing session only blocks its own request.
"""

from __future__ import annotations

import logging
from typing import Mapping

from editserver.config.settings import ServerConfig
from editserver.domain.models import EditorInvocation, EditOutcome, EditStatus
from editserver.editor.base import EditorError, EditorRunner
from editserver.editor.subprocess_runner import SubprocessEditor
from editserver.scratch import ScratchFile, ScratchFileError, scratch_file

logger = logging.getLogger(__name__)

STATUS_MESSAGE = (
    "Server is up and running.  To use it, issue a POST request "
    "with the file to edit as the content body.\n"
)

CONTENT_MEDIA_TYPE = "application/octet-stream"


class UnauthorizedError(Exception):
    """Raised when a request fails the origin check."""


class EditHandler:
    """Runs the edit workflow for single requests.

    Args:
        config: Server settings; only the editor and origin fields are used.
        editor: Runner for the editor command. Defaults to a
                :class:`SubprocessEditor` using ``config.editor_timeout``.
    """

    def __init__(self, config: ServerConfig, editor: EditorRunner | None = None) -> None:
        self._config = config
        self._editor = editor or SubprocessEditor(timeout=config.editor_timeout)

    @property
    def config(self) -> ServerConfig:
        return self._config

    @property
    def editor(self) -> EditorRunner:
        return self._editor

    def handle(
        self,
        method: str,
        headers: Mapping[str, str],
        body: bytes,
        content_length: int | None,
    ) -> EditOutcome:
        """Process one request and decide the response.

        Args:
            method: HTTP method.
            headers: Request headers; looked up case-insensitively.
            body: Raw request body as received.
            content_length: The declared ``Content-Length``, or None when
                            the header was missing or unparsable.
        """
        early = self.precheck(method, headers)
        if early is not None:
            return early

        try:
            with scratch_file(
                prefix=self._config.temp_prefix,
                suffix=self._config.temp_suffix,
                directory=self._config.temp_dir,
            ) as scratch:
                return self._edit(scratch, body, content_length)
        except ScratchFileError as e:
            logger.error("%s", e)
            return _failure(EditStatus.FILE_ERROR)

    def precheck(self, method: str, headers: Mapping[str, str]) -> EditOutcome | None:
        """Answer requests that never reach the editor.

        Covers the status page and the origin check. Does no I/O, so the
        HTTP layer can call it before reading the body.

        Returns:
            The final outcome, or None if the request should be edited.
        """
        if method.upper() != "POST":
            return EditOutcome(status=EditStatus.STATUS_PAGE, body=STATUS_MESSAGE.encode())

        try:
            self.authorise(headers)
        except UnauthorizedError as e:
            logger.warning("Unauthorised: %s", e)
            return EditOutcome(
                status=EditStatus.UNAUTHORIZED,
                status_code=401,
                body=f"Unauthorized: {e}\n".encode(),
            )
        return None

    def authorise(self, headers: Mapping[str, str]) -> None:
        """Check the origin header when origin restriction is enabled.

        Raises:
            UnauthorizedError: If the origin is missing or has the wrong prefix.
        """
        if not self._config.require_extension_origin:
            return
        origin = _get_header(headers, "origin")
        if not origin.startswith(self._config.origin_prefix):
            raise UnauthorizedError("unauthorized origin")

    def _edit(
        self, scratch: ScratchFile, body: bytes, content_length: int | None
    ) -> EditOutcome:
        if content_length is None or content_length < 0:
            logger.error("Request has no usable Content-Length")
            return _failure(EditStatus.WRITE_ERROR)

        try:
            written = scratch.write(body[:content_length])
        except OSError as e:
            logger.error("Unable to write content to '%s': %s", scratch.path, e)
            return _failure(EditStatus.WRITE_ERROR)

        if written != content_length:
            logger.error(
                "Unable to write full content (%d bytes), only %d bytes written",
                content_length, written,
            )
            return _failure(EditStatus.WRITE_ERROR)

        invocation = EditorInvocation.from_command(
            self._config.editor_command, str(scratch.path.absolute())
        )
        if not self._run_editor(invocation):
            return _failure(EditStatus.EDITOR_ERROR)

        try:
            content = scratch.read()
        except OSError as e:
            logger.error("Unable to read returned content: %s", e)
            return _failure(EditStatus.READ_ERROR)

        logger.debug("Returning %d bytes of content", len(content))
        return EditOutcome(
            status=EditStatus.COMPLETED,
            body=content,
            media_type=CONTENT_MEDIA_TYPE,
        )

    def _run_editor(self, invocation: EditorInvocation) -> bool:
        """Run the editor. Returns False only when strict mode rejects the run."""
        strict = self._config.fail_on_editor_error
        try:
            exit_code = self._editor.run(invocation)
        except EditorError as e:
            logger.warning("%s", e)
            return not strict

        if exit_code is not None and exit_code != 0 and strict:
            logger.error("Rejecting edit, editor %s exited with status %d",
                         invocation.program, exit_code)
            return False
        return True


def _get_header(headers: Mapping[str, str], name: str) -> str:
    value = headers.get(name)
    if value is not None:
        return value
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return ""


def _failure(status: EditStatus) -> EditOutcome:
    return EditOutcome(status=status, status_code=500)
