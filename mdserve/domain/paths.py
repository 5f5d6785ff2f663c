from __future__ import annotations

from pathlib import Path

from .errors import PathEscapeError

__all__ = [
    "MARKDOWN_SUFFIX",
    "is_markdown_path",
    "join_request_path",
    "ensure_within_root",
]

MARKDOWN_SUFFIX = ".md"


def is_markdown_path(path: str) -> bool:
    """Return True if a URL path names a Markdown document (case-sensitive)."""
    return path.endswith(MARKDOWN_SUFFIX)


def join_request_path(root: Path, request_path: str) -> Path:
    """Join a decoded URL path onto the root directory, without touching disk.

    Leading slashes are dropped so the URL path is always taken relative to
    `root`; `..` segments are left for `ensure_within_root` to judge after
    canonicalization.

    Raises:
        PathEscapeError: if the path contains a NUL byte.
    """
    if "\x00" in request_path:
        raise PathEscapeError(request_path, "request path contains a NUL byte")
    return root / request_path.lstrip("/")


def ensure_within_root(root: Path, candidate: Path, request_path: str) -> Path:
    """Check that a canonical `candidate` is `root` or lies beneath it.

    Both paths must already be canonical (symlinks and `..` resolved).
    """
    if candidate != root and not candidate.is_relative_to(root):
        raise PathEscapeError(request_path, f"path escapes root: {request_path}")
    return candidate
