from __future__ import annotations

import argparse
import os
from pathlib import Path


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse CLI arguments for the smoke runner."""
    parser = argparse.ArgumentParser(description="mdserve smoke runner")
    parser.add_argument("--base-url", default=os.getenv("BASE_URL", "http://127.0.0.1:5173"))
    parser.add_argument(
        "--root",
        default=os.getenv("SERVE_ROOT", str(Path(__file__).resolve().parents[1] / "fixtures")),
        help="directory the server is serving; its *.md files are checked",
    )
    parser.add_argument("--timeout", type=float, default=20.0)
    return parser.parse_args(argv)
