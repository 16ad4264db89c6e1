"""Go file discovery and cheap pre-parse filters."""

from __future__ import annotations

import re
from pathlib import Path

from assertlint.file_discovery import find_source_files

GO_FILE_EXCLUSIONS = ["vendor", "testdata", ".git", "node_modules"]

_TESTIFY_IMPORT_RE = re.compile(r'"github\.com/stretchr/testify/(?:assert|require|suite)"')


def is_test_file(filepath: str) -> bool:
    return filepath.endswith("_test.go")


def find_go_files(path: Path | str, *, test_files_only: bool = True) -> list[str]:
    """Find Go source files under path (only ``*_test.go`` by default)."""
    files = find_source_files(path, [".go"], exclusions=GO_FILE_EXCLUSIONS)
    if test_files_only:
        return [f for f in files if is_test_file(f)]
    return files


def imports_testify(content: str) -> bool:
    """True if the source imports one of the testify assertion packages."""
    return _TESTIFY_IMPORT_RE.search(content) is not None
