from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Fetched:
    """One response observed during the smoke run."""

    path: str
    status_code: int
    content_type: str
    body: bytes
    elapsed_ms: float


class SmokeError(RuntimeError):
    """Raised when the smoke flow cannot proceed (e.g., server never ready)."""


class FixtureError(SmokeError):
    """Raised when the local Markdown tree cannot be used for the run."""


class FetchError(SmokeError):
    """Raised when fetching a single path fails after retries."""
