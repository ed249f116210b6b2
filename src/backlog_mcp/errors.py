"""Error taxonomy shared by the client, resources, prompts, and tools.

``InvalidRequest``, ``NotFound`` and ``InternalError`` are ``McpError``
subclasses, so raising one from a resource or prompt handler aborts that
request with a JSON-RPC error.  Tool handlers never let them escape: the
dispatcher folds them into a ``{"error": ...}`` text payload.
"""

from __future__ import annotations

from mcp.shared.exceptions import McpError
from mcp.types import INTERNAL_ERROR, INVALID_REQUEST, METHOD_NOT_FOUND, ErrorData


class BacklogMCPError(McpError):
    """Base for protocol-level errors raised by this package."""

    code: int = INTERNAL_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(ErrorData(code=self.code, message=message))


class InvalidRequest(BacklogMCPError):
    """Missing or malformed input: URI segment, id, or tool argument."""

    code = INVALID_REQUEST


class NotFound(BacklogMCPError):
    """Unknown tool, prompt, or resource path."""

    code = METHOD_NOT_FOUND


class InternalError(BacklogMCPError):
    """Unexpected backend or serialization failure."""

    code = INTERNAL_ERROR


class BackendError(Exception):
    """A failed outbound call to the Backlog API."""

    def __init__(self, message: str, *, method: str, path: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.method = method
        self.path = path
        self.status_code = status_code
