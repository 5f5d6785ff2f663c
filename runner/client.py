from __future__ import annotations

import asyncio
import time
from collections.abc import Iterable
from urllib.parse import quote

import httpx

from mdserve.logging_conf import get_logger
from runner.types import FetchError, Fetched, SmokeError

logger = get_logger("runner.client")


async def wait_for_ready(base_url: str, timeout_s: float = 20.0) -> None:
    """GET / until the server answers with a non-5xx status, or raise after a timeout.

    - Connection errors are expected while the server boots and are ignored
    - Logs once the server is reachable
    """
    deadline = time.monotonic() + timeout_s
    async with httpx.AsyncClient(base_url=base_url, timeout=5.0) as client:
        while time.monotonic() < deadline:
            try:
                r = await client.get("/")
                if r.status_code < 500:
                    logger.info("server.ready", extra={"event": "server_ready"})
                    return
            except httpx.HTTPError:
                pass
            await asyncio.sleep(0.25)
    raise SmokeError("Server did not become ready within timeout")


def url_path(relative: str) -> str:
    """Turn a POSIX path relative to the served root into a URL path."""
    return "/" + quote(relative.lstrip("/"))


async def fetch_one(client: httpx.AsyncClient, relative: str, *, retries: int = 2) -> Fetched:
    """GET one path and record status, content type, body and latency.

    Only transport errors are retried; any HTTP status is a result.
    """
    path = url_path(relative)
    last_err: Exception | None = None
    for attempt in range(retries):
        start = time.perf_counter()
        try:
            r = await client.get(path)
        except httpx.HTTPError as e:  # pragma: no cover - network flakiness
            last_err = e
            logger.warning(
                "fetch.retry",
                extra={
                    "event": "fetch_retry",
                    "path": path,
                    "attempt": attempt + 1,
                    "error": str(e),
                },
            )
            continue
        return Fetched(
            path=relative,
            status_code=r.status_code,
            content_type=r.headers.get("content-type", ""),
            body=r.content,
            elapsed_ms=(time.perf_counter() - start) * 1000.0,
        )
    raise FetchError(f"fetch failed for {path}: {last_err}")


async def fetch_all(base_url: str, paths: Iterable[str]) -> tuple[list[Fetched], list[str]]:
    """Fetch paths concurrently; return results and the paths that failed outright.

    - Continues even if some fetches fail
    - Logs a short summary of counts
    """
    wanted = list(paths)
    async with httpx.AsyncClient(base_url=base_url, timeout=30.0) as client:
        results = await asyncio.gather(
            *(fetch_one(client, p) for p in wanted), return_exceptions=True
        )
    fetched: list[Fetched] = []
    failed: list[str] = []
    for path, res in zip(wanted, results):
        if isinstance(res, Exception):
            failed.append(path)
            continue
        fetched.append(res)
    logger.info(
        "fetch.summary",
        extra={
            "event": "fetch_summary",
            "requested": len(wanted),
            "succeeded": len(fetched),
            "failed": len(failed),
        },
    )
    return fetched, failed
