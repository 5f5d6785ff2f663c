"""FastAPI app factory, request logging and the `mdserve` process entry point."""
from __future__ import annotations

import time
from collections.abc import Callable
from uuid import uuid4

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.staticfiles import StaticFiles

from . import __version__
from .api import build_router
from .config import Settings
from .logging_conf import get_logger, setup_logging, to_level

logger = get_logger("app")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application; with no settings they are read from the environment."""
    settings = settings or Settings.from_env()
    setup_logging(settings.log_level)
    app = FastAPI(
        title="mdserve",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings

    @app.on_event("startup")
    async def _on_startup() -> None:
        logger.info(
            "startup",
            extra={"event": "startup", "root": str(settings.root)},
        )

    @app.on_event("shutdown")
    async def _on_shutdown() -> None:
        logger.info("shutdown", extra={"event": "shutdown"})

    @app.middleware("http")
    async def request_logger(request: Request, call_next: Callable[[Request], Response]):
        """JSON request logging with a correlation id.

        - Propagates an incoming X-Request-ID or mints one
        - Logs start and end events with method/path/status/elapsed_ms
        - Echoes X-Request-ID on the response
        """
        request_id = request.headers.get("X-Request-ID", str(uuid4()))
        request.state.request_id = request_id

        start = time.perf_counter()
        logger.info(
            "request.start",
            extra={
                "event": "request_start",
                "method": request.method,
                "path": request.url.path,
                "request_id": request_id,
            },
        )
        try:
            response = await call_next(request)
        except Exception as exc:  # logged here, turned into a 500 by the framework
            logger.exception(
                "request.error",
                extra={
                    "event": "request_error",
                    "path": request.url.path,
                    "method": request.method,
                    "request_id": request_id,
                },
            )
            raise exc
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000.0

        response.headers["X-Request-ID"] = request_id
        logger.info(
            "request.end",
            extra={
                "event": "request_end",
                "status_code": response.status_code,
                "elapsed_ms": round(elapsed_ms, 2),
                "request_id": request_id,
            },
        )
        return response

    app.include_router(build_router(settings))

    # Catch-all static responder; must stay after the routes above.
    app.mount("/", StaticFiles(directory=settings.root), name="static")

    return app


def main() -> None:
    settings = Settings.from_env()
    setup_logging(settings.log_level)
    logger.info(
        "server.listening",
        extra={
            "event": "server_listening",
            "url": f"http://localhost:{settings.port}",
            "root": str(settings.root),
        },
    )
    uvicorn.run(
        "mdserve.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=to_level(settings.log_level),
        log_config=None,
    )


if __name__ == "__main__":
    main()
