"""mdserve: static file server that also returns Markdown sources as plain text.

Exposes the package version; the ASGI app lives in `mdserve.main`.
"""
from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("mdserve")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"
