from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import FileResponse, PlainTextResponse

from ..config import Settings
from ..domain.errors import ServeError
from ..domain.paths import MARKDOWN_SUFFIX
from ..service import markdown_service

MARKDOWN_MEDIA_TYPE = f"text/plain; charset={markdown_service.ENCODING}"
MARKDOWN_ROUTE = "/{doc_path:path}" + MARKDOWN_SUFFIX


def build_router(settings: Settings) -> APIRouter:
    """Return the routes bound to one root directory and entry document.

    HEAD is routed alongside GET so both report the same headers.
    """
    router = APIRouter()

    @router.api_route("/", methods=["GET", "HEAD"], include_in_schema=False)
    async def entry_document() -> FileResponse:
        # A missing entry document is left to FileResponse (framework 500)
        return FileResponse(settings.entry_path)

    @router.api_route(
        MARKDOWN_ROUTE, methods=["GET", "HEAD"], summary="Markdown source as plain text"
    )
    async def markdown(doc_path: str) -> PlainTextResponse:
        """Return a Markdown file verbatim, or a fixed 403/404/500 message."""
        request_path = f"/{doc_path}{MARKDOWN_SUFFIX}"
        try:
            text = await markdown_service.read_markdown(settings.root, request_path)
        except ServeError as e:
            return PlainTextResponse(e.message, status_code=e.status_code)
        return PlainTextResponse(text, media_type=MARKDOWN_MEDIA_TYPE)

    return router
