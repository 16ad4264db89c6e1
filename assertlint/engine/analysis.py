"""Run call checkers over Go sources, files and directory trees."""

from __future__ import annotations

import logging
import os
import posixpath
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from assertlint.engine.checkers import enabled_checkers
from assertlint.engine.checkers.base import CallChecker, Diagnostic, Pass
from assertlint.engine.checkers.call_meta import new_call_meta
from assertlint.file_discovery import resolve_path
from assertlint.languages.go import (
    GoSyntaxError,
    TypesInfo,
    check_file,
    check_package,
    find_go_files,
    get_go_parser,
    imports_testify,
    parse_file,
)
from assertlint.languages.go.syntax import CallExpr, File, walk

logger = logging.getLogger(__name__)


@dataclass
class FileResult:
    path: str
    diagnostics: list[Diagnostic] = field(default_factory=list)
    syntax_errors: list[GoSyntaxError] = field(default_factory=list)
    skipped: bool = False


@dataclass
class ScanResult:
    files: list[FileResult] = field(default_factory=list)

    @property
    def findings(self) -> list[tuple[str, Diagnostic]]:
        """Every diagnostic paired with its file, sorted by file, line, column."""
        pairs = [(f.path, d) for f in self.files for d in f.diagnostics]
        return sorted(pairs, key=lambda p: (p[0], p[1].pos.line, p[1].pos.col))

    @property
    def skipped(self) -> int:
        return sum(1 for f in self.files if f.skipped)

    @property
    def files_scanned(self) -> int:
        return sum(1 for f in self.files if not f.skipped)


def _resolve_checkers(checkers: list[CallChecker] | None) -> list[CallChecker]:
    return enabled_checkers() if checkers is None else list(checkers)


def _run_checkers(file: File, info: TypesInfo, checkers: list[CallChecker]) -> list[Diagnostic]:
    pass_ = Pass(filename=file.filename, file=file, types_info=info)
    diagnostics: list[Diagnostic] = []
    for node in walk(file):
        if not isinstance(node, CallExpr):
            continue
        call = new_call_meta(pass_, node)
        if call is None:
            continue
        for checker in checkers:
            diag = checker.check(pass_, call)
            if diag is not None:
                diagnostics.append(diag)
    diagnostics.sort(key=lambda d: (d.pos.line, d.pos.col))
    return diagnostics


def analyze_source(
    filename: str, source: str, checkers: list[CallChecker] | None = None
) -> list[Diagnostic]:
    """Check Go source text on its own, as a one-file package.

    Raises GoSyntaxError when the source has no package clause.
    """
    file = parse_file(source, filename)
    return _run_checkers(file, check_file(file), _resolve_checkers(checkers))


def _package_files(targets: list[tuple[str, str]]) -> list[tuple[str, str]]:
    """Every Go file in the targets' directory, targets included."""
    display_dir = posixpath.dirname(targets[0][0])
    directory = os.path.dirname(targets[0][1])
    try:
        names = sorted(os.listdir(directory))
    except OSError:
        names = []
    members = [
        (posixpath.join(display_dir, name), os.path.join(directory, name))
        for name in names
        # the go tool ignores files starting with "." or "_"
        if name.endswith(".go") and not name.startswith((".", "_"))
    ]
    known = {full_path for _, full_path in members}
    return members + [t for t in targets if t[1] not in known]


def _analyze_dir(targets: list[tuple[str, str]], checkers: list[CallChecker]) -> list[FileResult]:
    """Check the *targets* of one directory, type-checking each package as a whole.

    Every Go file in the directory is parsed so that declarations in sibling
    files (helpers, suite types) resolve. Only packages with a testify import
    in at least one file are checked, and only the targets get results.
    """
    results = {display: FileResult(display) for display, _ in targets}
    sources: dict[str, str] = {}
    for display, full_path in _package_files(targets):
        try:
            sources[display] = Path(full_path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("Skipping unreadable file %s: %s", display, exc)
            if display in results:
                results[display].skipped = True
    if not any(imports_testify(source) for source in sources.values()):
        return list(results.values())

    packages: dict[str, list[File]] = {}
    for display, source in sources.items():
        try:
            file = parse_file(source, display)
        except GoSyntaxError as exc:
            logger.debug("Skipping unparseable file %s: %s", display, exc)
            if display in results:
                results[display].skipped = True
            continue
        packages.setdefault(file.package.name, []).append(file)

    for name, files in packages.items():
        if not any(imports_testify(sources[f.filename]) for f in files):
            continue
        logger.debug("Checking package %s (%d files)", name, len(files))
        info = check_package(files)
        for file in files:
            result = results.get(file.filename)
            if result is None:
                continue
            for err in file.errors:
                logger.debug("Syntax error (recovered): %s", err)
            result.diagnostics = _run_checkers(file, info, checkers)
            result.syntax_errors = list(file.errors)
    return list(results.values())


def analyze_file(path: str | Path, checkers: list[CallChecker] | None = None) -> FileResult:
    """Check one file together with the rest of its package.

    Unreadable files and files without a package clause come back ``skipped``.
    """
    get_go_parser()
    (result,) = _analyze_dir([(str(path), resolve_path(str(path)))], _resolve_checkers(checkers))
    return result


def _worker_count(jobs: int, n_files: int) -> int:
    workers = jobs if jobs > 0 else (os.cpu_count() or 1)
    return max(1, min(workers, n_files))


def scan_path(
    path: str | Path,
    *,
    checkers: list[CallChecker] | None = None,
    test_files_only: bool = True,
    jobs: int = 0,
) -> ScanResult:
    """Check every Go file under *path* (only ``*_test.go`` by default).

    A path naming a single file is always checked. Files are grouped by
    directory so each package is type-checked once. Raises FileNotFoundError
    when *path* does not exist and GoParserUnavailableError when the Go
    grammar cannot be loaded.
    """
    full = Path(resolve_path(str(path)))
    if not full.exists():
        raise FileNotFoundError(f"No such file or directory: {path}")
    get_go_parser()
    files = find_go_files(path, test_files_only=test_files_only and not full.is_file())
    active = _resolve_checkers(checkers)
    # Paths are resolved here: worker threads do not see the runtime context.
    groups: dict[str, list[tuple[str, str]]] = {}
    for display in files:
        full_path = resolve_path(display)
        groups.setdefault(os.path.dirname(full_path), []).append((display, full_path))
    workers = _worker_count(jobs, len(groups))
    logger.debug(
        "Scanning %d Go files in %d directories with %d workers",
        len(files),
        len(groups),
        workers,
    )

    if workers == 1:
        batches = [_analyze_dir(targets, active) for targets in groups.values()]
    else:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            batches = list(executor.map(lambda t: _analyze_dir(t, active), groups.values()))
    results = [r for batch in batches for r in batch]
    results.sort(key=lambda r: r.path)
    return ScanResult(results)
