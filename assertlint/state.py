"""Findings: normalized finding dicts, ignore matching, JSON report."""

from __future__ import annotations

import fnmatch
from datetime import UTC, datetime

from assertlint.core.enums import Confidence, Tier
from assertlint.engine.checkers.base import Diagnostic
from assertlint.file_discovery import rel, resolve_path


def _now() -> str:
    return datetime.now(UTC).isoformat(timespec="seconds")


def make_finding(filepath: str, diag: Diagnostic) -> dict:
    """Create a normalized finding dict with a stable ID."""
    rfile = rel(resolve_path(filepath))
    return {
        "id": f"{diag.rule}::{rfile}::{diag.pos.line}:{diag.pos.col}",
        "detector": diag.rule,
        "file": rfile,
        "line": diag.pos.line,
        "column": diag.pos.col,
        "end_line": diag.end.line,
        "end_column": diag.end.col,
        "tier": int(Tier.QUICK_FIX),
        "confidence": str(Confidence.HIGH),
        "summary": diag.message,
        "detail": {"call": diag.call, "selector": diag.selector},
    }


def is_ignored(finding_id: str, file: str, ignore_patterns: list[str]) -> bool:
    """Check if a finding should be ignored.

    Pattern types:
    - Contains '*'  → fnmatch against finding ID (if '::' present) or file path
    - Contains '::' → prefix match on finding ID
    - Otherwise     → exact file path match
    """
    for pattern in ignore_patterns:
        if "*" in pattern:
            target = finding_id if "::" in pattern else file
            if fnmatch.fnmatch(target, pattern):
                return True
        elif "::" in pattern:
            if finding_id.startswith(pattern):
                return True
        elif file == pattern or file == rel(resolve_path(pattern)):
            return True
    return False


def filter_ignored(findings: list[dict], ignore_patterns: list[str]) -> tuple[list[dict], int]:
    """Drop ignored findings. Returns (kept, suppressed_count)."""
    if not ignore_patterns:
        return findings, 0
    kept = [f for f in findings if not is_ignored(f["id"], f["file"], ignore_patterns)]
    return kept, len(findings) - len(kept)


def build_report(findings: list[dict], *, files_scanned: int, skipped: int, suppressed: int) -> dict:
    """Assemble the ``scan --json`` document."""
    by_detector: dict[str, int] = {}
    for f in findings:
        by_detector[f["detector"]] = by_detector.get(f["detector"], 0) + 1
    return {
        "generated_at": _now(),
        "stats": {
            "files_scanned": files_scanned,
            "files_skipped": skipped,
            "findings": len(findings),
            "suppressed": suppressed,
            "by_detector": by_detector,
        },
        "findings": findings,
    }
