"""FastAPI HTTP server for the edit endpoint.

Every path answers the same way:

    any method but POST         -> 200, fixed status message
    POST <- raw content         -> 200, edited content
                                   401, origin check failed
                                   500, temp file / transfer / read failure

The status page and the origin check are answered on the event loop
before the body is read. Each edit runs on its own worker thread, drawn
from a pool of ``max_concurrent_edits`` threads, so concurrent edits
proceed independently and never hold up the status page.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import anyio
import anyio.to_thread
import uvicorn
from fastapi import FastAPI, Request, Response
from starlette.requests import ClientDisconnect
from starlette.routing import request_response

from editserver import __version__
from editserver.config.settings import ServerConfig, parse_bind_address
from editserver.domain.models import EditOutcome
from editserver.editor.base import EditorRunner
from editserver.handler import EditHandler

logger = logging.getLogger(__name__)


def create_app(
    config: ServerConfig | None = None,
    editor: EditorRunner | None = None,
) -> FastAPI:
    """Create the edit server application.

    Args:
        config: Server settings. Defaults to ``ServerConfig()``.
        editor: Optional editor runner (for testing). Defaults to running
                ``config.editor_command`` as a child process.
    """
    config = config or ServerConfig()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        h: EditHandler = app.state.handler
        logger.info(
            "Edit server started (editor=%r, origin restriction %s)",
            h.config.editor_command,
            "on" if h.config.require_extension_origin else "off",
        )
        yield
        logger.info("Edit server stopped")

    app = FastAPI(
        title="editserver",
        description="Edit POSTed content in a local editor and return the result",
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.handler = EditHandler(config, editor=editor)
    app.state.edit_limiter = None

    async def edit(request: Request) -> Response:
        h: EditHandler = app.state.handler
        early = h.precheck(request.method, request.headers)
        if early is not None:
            return _to_response(early)

        body = await _read_body(request)
        outcome = await anyio.to_thread.run_sync(
            h.handle,
            request.method,
            request.headers,
            body,
            _content_length(request),
            limiter=_edit_limiter(app),
        )
        return _to_response(outcome)

    # A mount has no method filter, so every method on every path lands here
    app.mount("/", request_response(edit), name="edit")

    return app


def _edit_limiter(app: FastAPI) -> anyio.CapacityLimiter:
    """Worker threads reserved for editor sessions, created on first use."""
    if app.state.edit_limiter is None:
        h: EditHandler = app.state.handler
        app.state.edit_limiter = anyio.CapacityLimiter(h.config.max_concurrent_edits)
    return app.state.edit_limiter


def _to_response(outcome: EditOutcome) -> Response:
    return Response(
        content=outcome.body,
        status_code=outcome.status_code,
        media_type=outcome.media_type,
    )


async def _read_body(request: Request) -> bytes:
    """Read the request body, keeping whatever arrived before a disconnect."""
    chunks: list[bytes] = []
    try:
        async for chunk in request.stream():
            chunks.append(chunk)
    except ClientDisconnect:
        logger.debug("Client disconnected while sending the body")
    return b"".join(chunks)


def _content_length(request: Request) -> int | None:
    value = request.headers.get("content-length")
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


# ---------------------------------------------------------------------------
# Standalone entry point
# ---------------------------------------------------------------------------

def main(config: ServerConfig | None = None) -> None:
    """Run the edit server."""
    config = config or ServerConfig()
    host, port = parse_bind_address(config.bind)
    logger.info("Binding edit server on %s:%d", host, port)
    app = create_app(config)
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
