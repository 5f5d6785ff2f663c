from __future__ import annotations

import os
from pathlib import Path

import anyio

from ..domain.errors import MarkdownNotFound, MarkdownReadFailure, PathEscapeError
from ..domain.paths import ensure_within_root, is_markdown_path, join_request_path
from ..logging_conf import get_logger

logger = get_logger("service.markdown")

ENCODING = "utf-8"


async def _canonical(candidate: Path) -> Path:
    try:
        return Path(await anyio.Path(candidate).resolve())
    except (OSError, RuntimeError) as e:
        # Unresolvable (symlink loop, over-long name): judge the lexical path
        # and let the existence probe decide
        logger.debug(
            "markdown.unresolvable",
            extra={"event": "markdown_unresolvable", "error": str(e)},
        )
        return Path(os.path.normpath(candidate))


async def resolve(root: Path, request_path: str) -> Path:
    """Map a URL path to a canonical file path under `root`.

    `root` must already be canonical (see `Settings.root`).
    """
    try:
        candidate = join_request_path(root, request_path)
        canonical = await _canonical(candidate)
        return ensure_within_root(root, canonical, request_path)
    except PathEscapeError:
        logger.warning(
            "markdown.path_rejected",
            extra={"event": "markdown_path_rejected", "path": request_path},
        )
        raise


async def _probe(path: Path) -> bool:
    # Any failure to stat counts as absent
    try:
        return await anyio.Path(path).exists()
    except OSError:
        return False


async def _read(path: Path) -> str:
    # Decoded from bytes so line endings survive untranslated; undecodable
    # bytes are replaced rather than failing the request
    data = await anyio.Path(path).read_bytes()
    return data.decode(ENCODING, errors="replace")


async def read_markdown(root: Path, request_path: str) -> str:
    """Resolve, check and read one Markdown document.

    The existence check always runs before the read; the file may still
    vanish in between, which surfaces as a read failure.

    Raises:
        PathEscapeError: the path resolves outside `root`.
        MarkdownNotFound: the path is not a Markdown path, or nothing exists
            at the resolved path.
        MarkdownReadFailure: the path exists but could not be read.
    """
    if not is_markdown_path(request_path):
        raise MarkdownNotFound(request_path, f"not a markdown path: {request_path}")

    path = await resolve(root, request_path)

    if not await _probe(path):
        logger.info(
            "markdown.not_found",
            extra={"event": "markdown_not_found", "path": request_path},
        )
        raise MarkdownNotFound(request_path)

    try:
        text = await _read(path)
    except OSError as e:
        logger.warning(
            "markdown.read_failed",
            extra={
                "event": "markdown_read_failed",
                "path": request_path,
                "error": str(e),
            },
        )
        raise MarkdownReadFailure(request_path, str(e)) from e

    logger.info(
        "markdown.served",
        extra={"event": "markdown_served", "path": request_path, "chars": len(text)},
    )
    return text
