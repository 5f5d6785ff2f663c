from __future__ import annotations

from pathlib import Path
from uuid import uuid4

from mdserve.domain.errors import NOT_FOUND_MESSAGE
from mdserve.domain.paths import MARKDOWN_SUFFIX
from runner.types import FixtureError, Fetched

EXPECTED_CONTENT_TYPE = "text/plain; charset=utf-8"


def percentile(values: list[float], p: float) -> float:
    """Compute the p-th percentile using linear interpolation."""
    if not values:
        return 0.0
    s = sorted(values)
    k = (len(s) - 1) * p
    f = int(k)
    c = min(f + 1, len(s) - 1)
    if f == c:
        return s[f]
    d0 = s[f] * (c - k)
    d1 = s[c] * (k - f)
    return d0 + d1


def collect_markdown(root: Path) -> list[str]:
    """Return every Markdown file under `root` as a sorted POSIX relative path."""
    if not root.is_dir():
        raise FixtureError(f"root directory not found: {root}")
    found = sorted(
        p.relative_to(root).as_posix()
        for p in root.rglob(f"*{MARKDOWN_SUFFIX}")
        if p.is_file()
    )
    if not found:
        raise FixtureError(f"no {MARKDOWN_SUFFIX} files under {root}")
    return found


def missing_markdown_path(existing: list[str]) -> str:
    """Return a Markdown path that is not among `existing`."""
    while True:
        candidate = f"__missing__/{uuid4().hex}{MARKDOWN_SUFFIX}"
        if candidate not in existing:
            return candidate


def check_markdown(root: Path, fetched: Fetched) -> str | None:
    """Compare one response with the file on disk; return a problem or None."""
    if fetched.status_code != 200:
        return f"status {fetched.status_code}"
    if fetched.content_type.lower() != EXPECTED_CONTENT_TYPE:
        return f"content-type {fetched.content_type!r}"
    if fetched.body != (root / fetched.path).read_bytes():
        return "body differs from file"
    return None


def check_missing(fetched: Fetched) -> str | None:
    if fetched.status_code != 404:
        return f"status {fetched.status_code}"
    if fetched.body.decode("utf-8", errors="replace") != NOT_FOUND_MESSAGE:
        return "unexpected not-found body"
    return None


def summarize(
    root: Path, fetched: list[Fetched], failed: list[str], missing: Fetched
) -> tuple[dict, int]:
    """Compute summary dict and an exit code from the observed responses."""
    mismatches: list[dict] = [
        {"path": p, "problem": "request failed"} for p in failed
    ]
    ok_count = 0
    for f in fetched:
        problem = check_markdown(root, f)
        if problem:
            mismatches.append({"path": f.path, "problem": problem})
        else:
            ok_count += 1
    missing_problem = check_missing(missing)
    if missing_problem:
        mismatches.append({"path": missing.path, "problem": missing_problem})

    durations_ms = [f.elapsed_ms for f in fetched]
    avg_ms = (sum(durations_ms) / len(durations_ms)) if durations_ms else 0.0
    summary = {
        "component": "runner",
        "event": "summary",
        "checked": len(fetched) + len(failed),
        "ok_count": ok_count,
        "mismatch_count": len(mismatches),
        "timings": {
            "avg_ms": round(avg_ms, 2),
            "p95_ms": round(percentile(durations_ms, 0.95), 2),
            "max_ms": round(max(durations_ms), 2) if durations_ms else 0.0,
        },
        "mismatches": mismatches,
    }
    exit_code = 0 if (not mismatches and fetched) else 1
    return summary, exit_code
