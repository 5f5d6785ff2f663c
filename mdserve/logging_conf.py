"""JSON-lines logging shared by the server and the smoke runner.

`setup_logging(level)` is called by whoever owns the process configuration
(`create_app` with `Settings.log_level`, the runner with its own level). It
installs one stdout handler on the root logger and can be called again to
change the level without stacking handlers.
"""
from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from logging import LogRecord
from typing import Any

HANDLER_NAME = "mdserve.json"

# Everything a bare LogRecord carries; other attributes came in via `extra=`.
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime"}

_SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


class JsonFormatter(logging.Formatter):
    """One JSON object per record: ts, level, logger, message, then extras.

    A dict passed as the message is merged in place of `message`. Extras
    never overwrite the fields above.
    """

    def format(self, record: LogRecord) -> str:  # type: ignore[override]
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(
                timespec="milliseconds"
            ),
            "level": record.levelname,
            "logger": record.name,
        }
        if isinstance(record.msg, dict):
            payload.update(record.msg)
        else:
            payload["message"] = record.getMessage()

        extras = {
            k: v
            for k, v in vars(record).items()
            if k not in _RECORD_ATTRS and k not in payload
        }
        payload.update(extras)

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def to_level(level: str | int) -> int:
    """Map a level name or number to a logging level, INFO if unknown."""
    if isinstance(level, int):
        return level
    return logging.getLevelNamesMapping().get(level.upper(), logging.INFO)


def _json_handler(root: logging.Logger) -> logging.Handler:
    for handler in root.handlers:
        if handler.get_name() == HANDLER_NAME:
            return handler
    handler = logging.StreamHandler(stream=sys.stdout)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)
    return handler


def setup_logging(level: str | int = logging.INFO) -> None:
    """Route the root and uvicorn loggers through the JSON handler at `level`."""
    lvl = to_level(level)
    root = logging.getLogger()
    root.setLevel(lvl)
    _json_handler(root).setLevel(lvl)

    for name in _SERVER_LOGGERS:
        lg = logging.getLogger(name)
        lg.setLevel(lvl)
        lg.propagate = True
        for h in list(lg.handlers):
            lg.removeHandler(h)


def get_logger(name: str | None = None) -> logging.Logger:
    return logging.getLogger(name if name else __name__)
