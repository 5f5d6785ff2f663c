#!/usr/bin/env python3
"""Write a small sample site under fixtures/ for local runs of the server and smoke runner.

    python tools/fixtures.py
    SERVE_ROOT=fixtures mdserve
    python -m runner.smoke --root fixtures
"""
from __future__ import annotations

from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
FX = ROOT / "fixtures"

FILES = [
    (FX / "index.html", b"<!doctype html><title>mdserve</title><p>entry document</p>\n"),
    (FX / "notes.md", b"# notes\n\n- tiny fixture file\n"),
    (FX / "docs" / "readme.md", b"Hello"),
    (FX / "docs" / "guide" / "setup.md", "# Setup\n\nUnicode survives: café, 文件\n".encode()),
    (FX / "docs" / "crlf.md", b"line one\r\nline two\r\n"),
    (FX / "docs" / "empty.md", b""),
    (FX / "assets" / "style.css", b"body { font-family: sans-serif; }\n"),
    (FX / "assets" / "data.json", b"{\n  \"ok\": true\n}\n"),
]


def main() -> None:
    FX.mkdir(parents=True, exist_ok=True)
    for path, data in FILES:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    created = [str(p.relative_to(ROOT)) for p, _ in FILES if p.exists()]
    print("Created fixtures:")
    for c in created:
        print(" -", c)
    if len(created) != len(FILES):
        raise SystemExit(f"Expected {len(FILES)} fixtures, found {len(created)}")


if __name__ == "__main__":
    main()
