from __future__ import annotations

__all__ = [
    "ServeError",
    "PathEscapeError",
    "MarkdownNotFound",
    "MarkdownReadFailure",
    "NOT_FOUND_MESSAGE",
    "READ_FAILURE_MESSAGE",
    "FORBIDDEN_MESSAGE",
]

NOT_FOUND_MESSAGE = "File not found"
READ_FAILURE_MESSAGE = "Failed to read file"
FORBIDDEN_MESSAGE = "Forbidden path"


class ServeError(Exception):
    """Base class for errors that end a request with a fixed text response.

    `code` is a stable machine name for logs, `status_code` the HTTP status
    and `message` the body sent to the client.
    """

    code: str = "serve_error"
    status_code: int = 500
    message: str = READ_FAILURE_MESSAGE

    def __init__(self, path: str, detail: str | None = None) -> None:
        super().__init__(detail or f"{self.code}: {path}")
        self.path = path


class PathEscapeError(ServeError):
    """The request path resolves outside the root directory."""

    code = "path_escape"
    status_code = 403
    message = FORBIDDEN_MESSAGE


class MarkdownNotFound(ServeError):
    code = "not_found"
    status_code = 404
    message = NOT_FOUND_MESSAGE


class MarkdownReadFailure(ServeError):
    """The file existed at check time but could not be read."""

    code = "read_failure"
    status_code = 500
    message = READ_FAILURE_MESSAGE
