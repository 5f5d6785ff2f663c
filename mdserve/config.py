from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

__all__ = [
    "DEFAULT_PORT",
    "DEFAULT_ENTRY_DOCUMENT",
    "ConfigError",
    "Settings",
]

DEFAULT_PORT = 5173
DEFAULT_HOST = "0.0.0.0"
DEFAULT_ENTRY_DOCUMENT = "index.html"


class ConfigError(ValueError):
    """Raised when settings taken from the environment are invalid."""


class Settings(BaseModel):
    """Process-wide server settings, fixed at startup and passed explicitly."""

    model_config = ConfigDict(frozen=True)

    root: Path
    port: int = Field(DEFAULT_PORT, ge=1, le=65535)
    host: str = DEFAULT_HOST
    entry_document: str = Field(DEFAULT_ENTRY_DOCUMENT, min_length=1)
    log_level: str = "INFO"

    @field_validator("root")
    @classmethod
    def _canonical_root(cls, value: Path) -> Path:
        root = value.expanduser().resolve()
        if not root.is_dir():
            raise ValueError(f"root is not a directory: {value}")
        return root

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level: {value}")
        return level

    @property
    def entry_path(self) -> Path:
        return self.root / self.entry_document

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from environment variables.

        PORT, SERVE_ROOT, SERVE_HOST, ENTRY_DOCUMENT and LOG_LEVEL; unset
        variables fall back to the defaults (root is the working directory).
        """
        env = os.environ if environ is None else environ
        raw: dict[str, str] = {"root": env.get("SERVE_ROOT") or os.getcwd()}
        for key, name in (
            ("port", "PORT"),
            ("host", "SERVE_HOST"),
            ("entry_document", "ENTRY_DOCUMENT"),
            ("log_level", "LOG_LEVEL"),
        ):
            if env.get(name):
                raw[key] = env[name]
        try:
            return cls(**raw)
        except ValidationError as e:
            raise ConfigError(f"invalid settings: {e}") from e
