"""File discovery: project root, source file finding, exclusion matching."""

from __future__ import annotations

import fnmatch
import os
import tempfile
from pathlib import Path

from assertlint.core.runtime_state import current_runtime_context

__all__ = [
    "DEFAULT_EXCLUSIONS",
    "get_project_root",
    "set_exclusions",
    "get_exclusions",
    "matches_exclusion",
    "rel",
    "resolve_path",
    "safe_write_text",
    "find_source_files",
]

_DEFAULT_PROJECT_ROOT = Path(os.environ.get("ASSERTLINT_ROOT", Path.cwd())).resolve()

# Directories that are never useful to scan — always pruned during traversal.
DEFAULT_EXCLUSIONS = frozenset(
    {
        ".git",
        ".hg",
        ".svn",
        ".idea",
        ".vscode",
        "node_modules",
        "vendor",
        "testdata",
        "__pycache__",
        ".venv*",
        "venv",
    }
)


def get_project_root() -> Path:
    """Return the active project root, checking RuntimeContext first.

    Tests set ``RuntimeContext.project_root`` to point at a tmp directory.
    Production code uses the process-level default from $ASSERTLINT_ROOT / cwd.
    """
    override = current_runtime_context().project_root
    if override is not None:
        return override
    return _DEFAULT_PROJECT_ROOT


def set_exclusions(patterns: list[str]):
    """Set global exclusion patterns (called once from CLI at startup)."""
    runtime = current_runtime_context()
    runtime.exclusions = tuple(patterns)
    runtime.source_file_cache.clear()


def get_exclusions() -> tuple[str, ...]:
    """Return current extra exclusion patterns."""
    return current_runtime_context().exclusions


def matches_exclusion(rel_path: str, exclusion: str) -> bool:
    """Check if a relative path matches an exclusion pattern (path-component aware).

    Matches if exclusion is a path component (e.g. "mocks" matches "mocks/a_test.go"
    or "pkg/mocks/b_test.go") or a directory prefix (e.g. "pkg/mocks" matches
    "pkg/mocks/b_test.go"). Does NOT do substring matching — "mock" will NOT match
    "mockery.go".

    Glob-style ``*`` is supported per component: ``*_gen_test.go`` matches any
    generated test file, ``.venv*`` matches ``.venv`` and ``.venv-debug``.
    """
    parts = Path(rel_path).parts
    if exclusion in parts:
        return True
    if "*" in exclusion:
        if any(fnmatch.fnmatch(part, exclusion) for part in parts):
            return True
    if "/" in exclusion or os.sep in exclusion:
        normalized = exclusion.rstrip("/").rstrip(os.sep)
        return rel_path.startswith(normalized + "/") or rel_path.startswith(
            normalized + os.sep
        )
    return False


def _normalize_path_separators(path: str) -> str:
    return path.replace("\\", "/")


def _safe_relpath(path: str | Path, start: str | Path) -> str:
    try:
        return os.path.relpath(str(path), str(start))
    except ValueError:
        return str(Path(path).resolve())


def rel(path: str) -> str:
    root = get_project_root()
    resolved = Path(path).resolve()
    try:
        return _normalize_path_separators(str(resolved.relative_to(root)))
    except ValueError:
        return _normalize_path_separators(_safe_relpath(resolved, root))


def resolve_path(filepath: str) -> str:
    """Resolve a filepath to absolute, handling both relative and absolute."""
    p = Path(filepath)
    if p.is_absolute():
        return str(p.resolve())
    return str((get_project_root() / filepath).resolve())


def safe_write_text(filepath: str | Path, content: str) -> None:
    """Atomically write text to a file using temp+rename."""
    p = Path(filepath)
    p.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=p.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w") as f:
            f.write(content)
        os.replace(tmp, str(p))
    except OSError:
        if os.path.exists(tmp):
            os.unlink(tmp)
        raise


def _is_excluded_dir(name: str, rel_path: str, extra: tuple[str, ...]) -> bool:
    in_default_exclusions = name in DEFAULT_EXCLUSIONS or any(
        "*" in pattern and fnmatch.fnmatch(name, pattern)
        for pattern in DEFAULT_EXCLUSIONS
    )
    matches_extra_exclusion = bool(
        extra
        and any(
            matches_exclusion(rel_path, exclusion) or exclusion == name
            for exclusion in extra
        )
    )
    return in_default_exclusions or matches_extra_exclusion


def _find_source_files_cached(
    path: str,
    extensions: tuple[str, ...],
    exclusions: tuple[str, ...] | None = None,
    extra_exclusions: tuple[str, ...] = (),
) -> tuple[str, ...]:
    """Cached file discovery using os.walk — prunes excluded dirs during traversal."""
    cache_key = (path, extensions, exclusions, extra_exclusions)
    cache = current_runtime_context().source_file_cache
    cached = cache.get(cache_key)
    if cached is not None:
        return cached

    project_root = get_project_root()
    root = Path(path)
    if not root.is_absolute():
        root = project_root / root
    all_exclusions = (exclusions or ()) + extra_exclusions
    files: list[str] = []
    if root.is_file():
        candidates = [(str(root.parent), [], [root.name])]
    else:
        candidates = os.walk(root)
    for dirpath, dirnames, filenames in candidates:
        rel_dir = _normalize_path_separators(_safe_relpath(dirpath, project_root))
        dirnames[:] = sorted(
            d
            for d in dirnames
            if not _is_excluded_dir(d, rel_dir + "/" + d, all_exclusions)
        )
        for fname in filenames:
            if any(fname.endswith(ext) for ext in extensions):
                full = os.path.join(dirpath, fname)
                rel_file = _normalize_path_separators(_safe_relpath(full, project_root))
                if all_exclusions and any(
                    matches_exclusion(rel_file, ex) for ex in all_exclusions
                ):
                    continue
                files.append(rel_file)
    result = tuple(sorted(files))
    cache.put(cache_key, result)
    return result


def find_source_files(
    path: str | Path, extensions: list[str], exclusions: list[str] | None = None
) -> list[str]:
    """Find all files with given extensions under a path, excluding patterns.

    Returned paths are relative to the project root.
    """
    return list(
        _find_source_files_cached(
            str(path),
            tuple(extensions),
            tuple(exclusions) if exclusions else None,
            get_exclusions(),
        )
    )
