from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from mdserve.config import Settings
from mdserve.main import create_app

INDEX_HTML = b"<!doctype html><title>site</title><p>entry</p>\n"


@pytest.fixture
def site(tmp_path: Path) -> Path:
    """A served root with an entry document, Markdown and other assets."""
    root = tmp_path / "site"
    (root / "docs" / "guide").mkdir(parents=True)
    (root / "assets").mkdir()
    (root / "index.html").write_bytes(INDEX_HTML)
    (root / "notes.md").write_bytes(b"# notes\n")
    (root / "docs" / "readme.md").write_bytes(b"Hello")
    (root / "docs" / "guide" / "setup.md").write_bytes("# Setup\n\ncafé 文件\n".encode())
    (root / "docs" / "crlf.md").write_bytes(b"one\r\ntwo\r\n")
    (root / "docs" / "empty.md").write_bytes(b"")
    (root / "assets" / "style.css").write_bytes(b"body { color: red; }\n")
    return root


@pytest.fixture
def settings(site: Path) -> Settings:
    return Settings(root=site)


@pytest.fixture
def client(settings: Settings):
    with TestClient(create_app(settings)) as c:
        yield c
