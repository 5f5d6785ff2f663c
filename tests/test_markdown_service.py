"""Tests for the Markdown resolver service."""

import os
from pathlib import Path

import pytest

from mdserve.domain.errors import MarkdownNotFound, MarkdownReadFailure, PathEscapeError
from mdserve.service import markdown_service

pytestmark = pytest.mark.anyio


class TestReadMarkdown:
    """Resolve, check and read."""

    async def test_reads_existing_file(self, settings):
        text = await markdown_service.read_markdown(settings.root, "/docs/readme.md")
        assert text == "Hello"

    async def test_reads_nested_unicode_file(self, settings):
        text = await markdown_service.read_markdown(settings.root, "/docs/guide/setup.md")
        assert text == "# Setup\n\ncafé 文件\n"

    async def test_line_endings_untouched(self, settings):
        text = await markdown_service.read_markdown(settings.root, "/docs/crlf.md")
        assert text == "one\r\ntwo\r\n"

    async def test_empty_file(self, settings):
        assert await markdown_service.read_markdown(settings.root, "/docs/empty.md") == ""

    async def test_invalid_utf8_is_replaced(self, settings):
        (settings.root / "bad.md").write_bytes(b"ok \xff end")
        text = await markdown_service.read_markdown(settings.root, "/bad.md")
        assert text == "ok \ufffd end"

    async def test_missing_file(self, settings):
        with pytest.raises(MarkdownNotFound) as exc:
            await markdown_service.read_markdown(settings.root, "/docs/missing.md")
        assert exc.value.status_code == 404
        assert exc.value.message == "File not found"

    async def test_idempotent(self, settings):
        first = await markdown_service.read_markdown(settings.root, "/notes.md")
        second = await markdown_service.read_markdown(settings.root, "/notes.md")
        assert first == second

    async def test_reads_fresh_content(self, settings):
        path = settings.root / "notes.md"
        assert await markdown_service.read_markdown(settings.root, "/notes.md") == "# notes\n"
        path.write_text("changed", encoding="utf-8")
        assert await markdown_service.read_markdown(settings.root, "/notes.md") == "changed"


class TestReadFailures:
    async def test_directory_named_like_markdown(self, settings):
        (settings.root / "folder.md").mkdir()
        with pytest.raises(MarkdownReadFailure) as exc:
            await markdown_service.read_markdown(settings.root, "/folder.md")
        assert exc.value.status_code == 500
        assert exc.value.message == "Failed to read file"

    async def test_removed_between_check_and_read(self, settings, monkeypatch):
        """The file exists when probed but is gone when read."""
        real_probe = markdown_service._probe
        target = settings.root / "docs" / "readme.md"

        async def probe_then_remove(path: Path) -> bool:
            exists = await real_probe(path)
            target.unlink()
            return exists

        monkeypatch.setattr(markdown_service, "_probe", probe_then_remove)
        with pytest.raises(MarkdownReadFailure):
            await markdown_service.read_markdown(settings.root, "/docs/readme.md")

    async def test_check_runs_before_read(self, settings, monkeypatch):
        calls: list[str] = []

        async def probe(path: Path) -> bool:
            calls.append("probe")
            return False

        async def read(path: Path) -> str:
            calls.append("read")
            return ""

        monkeypatch.setattr(markdown_service, "_probe", probe)
        monkeypatch.setattr(markdown_service, "_read", read)
        with pytest.raises(MarkdownNotFound):
            await markdown_service.read_markdown(settings.root, "/notes.md")
        assert calls == ["probe"]


class TestContainment:
    async def test_parent_traversal_rejected(self, settings):
        (settings.root.parent / "secret.md").write_text("secret", encoding="utf-8")
        with pytest.raises(PathEscapeError):
            await markdown_service.read_markdown(settings.root, "/../secret.md")

    async def test_traversal_back_inside_root_allowed(self, settings):
        text = await markdown_service.read_markdown(
            settings.root, "/docs/guide/../readme.md"
        )
        assert text == "Hello"

    async def test_missing_traversal_target_still_rejected(self, settings):
        with pytest.raises(PathEscapeError):
            await markdown_service.read_markdown(settings.root, "/../../nowhere.md")

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
    async def test_symlink_out_of_root_rejected(self, settings):
        outside = settings.root.parent / "outside.md"
        outside.write_text("outside", encoding="utf-8")
        (settings.root / "link.md").symlink_to(outside)
        with pytest.raises(PathEscapeError):
            await markdown_service.read_markdown(settings.root, "/link.md")

    async def test_symlink_within_root_allowed(self, settings):
        (settings.root / "alias.md").symlink_to(settings.root / "docs" / "readme.md")
        assert await markdown_service.read_markdown(settings.root, "/alias.md") == "Hello"


class TestUnresolvable:
    async def test_overlong_name(self, settings):
        with pytest.raises(MarkdownNotFound):
            await markdown_service.read_markdown(settings.root, "/" + "b" * 300 + ".md")

    async def test_symlink_loop(self, settings):
        (settings.root / "loop.md").symlink_to(settings.root / "loop.md")
        with pytest.raises(MarkdownNotFound):
            await markdown_service.read_markdown(settings.root, "/loop.md")

    async def test_overlong_outside_root_still_rejected(self, settings):
        with pytest.raises(PathEscapeError):
            await markdown_service.read_markdown(settings.root, "/../" + "c" * 300 + ".md")


async def test_non_markdown_path_refused(settings):
    with pytest.raises(MarkdownNotFound):
        await markdown_service.read_markdown(settings.root, "/index.html")
