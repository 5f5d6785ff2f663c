#!/usr/bin/env python3
"""High-level smoke runner checking a live server against its Markdown tree.

Steps:
- wait for the server to answer
- collect every *.md file under the served root
- fetch them all concurrently (tolerates per-path failures)
- fetch one path that does not exist and expect a 404
- emit a compact summary and exit code
"""
from __future__ import annotations

import asyncio
import os
import sys
from pathlib import Path

import httpx

from mdserve.logging_conf import get_logger, setup_logging
from runner.cli import parse_args
from runner.client import fetch_all, fetch_one, wait_for_ready
from runner.utils import collect_markdown, missing_markdown_path, summarize

logger = get_logger("runner")


async def run_smoke(*, base_url: str, root: Path, timeout_s: float = 20.0) -> int:
    await wait_for_ready(base_url, timeout_s=timeout_s)
    paths = collect_markdown(root)
    fetched, failed = await fetch_all(base_url, paths)
    async with httpx.AsyncClient(base_url=base_url, timeout=10.0) as client:
        missing = await fetch_one(client, missing_markdown_path(paths))
    summary, exit_code = summarize(root, fetched, failed, missing)
    logger.info("runner.summary", extra=summary)
    return exit_code


def main(argv: list[str] | None = None) -> None:
    setup_logging(os.getenv("LOG_LEVEL", "INFO"))
    args = parse_args(argv or sys.argv[1:])
    code = asyncio.run(
        run_smoke(
            base_url=args.base_url,
            root=Path(args.root),
            timeout_s=args.timeout,
        )
    )
    raise SystemExit(code)


if __name__ == "__main__":
    main()
