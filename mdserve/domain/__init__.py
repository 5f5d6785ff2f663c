"""Pure domain utilities: path resolution and error types.

Free of FastAPI/HTTP concerns so they can be unit-tested directly.
"""
__all__ = ["errors", "paths"]
