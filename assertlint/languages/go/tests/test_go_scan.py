"""Tests for Go file discovery and tree scanning."""

from __future__ import annotations

import logging
import textwrap
from pathlib import Path

import pytest

from assertlint.core.runtime_state import make_runtime_context, runtime_scope
from assertlint.engine.analysis import analyze_file, scan_path
from assertlint.file_discovery import set_exclusions
from assertlint.languages.go.extractors import find_go_files, imports_testify, is_test_file

_FLAGGED = textwrap.dedent(
    """\
    package calc

    import (
    	"testing"

    	"github.com/stretchr/testify/assert"
    )

    func TestCalc(t *testing.T) {
    	got := 0.1 + 0.2
    	assert.Equal(t, 0.3, got)
    	assert.True(t, got == 0.3)
    }
    """
)

_CLEAN = textwrap.dedent(
    """\
    package calc

    import (
    	"testing"

    	"github.com/stretchr/testify/assert"
    )

    func TestCount(t *testing.T) {
    	assert.Equal(t, 3, len("abc"))
    }
    """
)


def _write(root: Path, rel: str, content: str | bytes) -> Path:
    p = root / rel
    p.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        p.write_bytes(content)
    else:
        p.write_text(content)
    return p


@pytest.fixture
def project(tmp_path):
    with runtime_scope(make_runtime_context(project_root=tmp_path)):
        yield tmp_path


class TestDiscovery:
    def test_is_test_file(self):
        assert is_test_file("pkg/calc_test.go")
        assert not is_test_file("pkg/calc.go")

    def test_imports_testify(self):
        assert imports_testify(_FLAGGED)
        assert imports_testify('import "github.com/stretchr/testify/require"')
        assert imports_testify('import "github.com/stretchr/testify/suite"')
        assert not imports_testify('import "github.com/stretchr/testify/mock"')
        assert not imports_testify("package calc")

    def test_finds_test_files_only_by_default(self, project):
        _write(project, "calc/calc.go", "package calc\n")
        _write(project, "calc/calc_test.go", _FLAGGED)
        assert find_go_files(project) == ["calc/calc_test.go"]
        assert find_go_files(project, test_files_only=False) == ["calc/calc.go", "calc/calc_test.go"]

    def test_vendor_and_testdata_pruned(self, project):
        _write(project, "vendor/x/x_test.go", _FLAGGED)
        _write(project, "calc/testdata/y_test.go", _FLAGGED)
        _write(project, "calc/calc_test.go", _FLAGGED)
        assert find_go_files(project) == ["calc/calc_test.go"]

    def test_exclusions_honored(self, project):
        _write(project, "mocks/m_test.go", _FLAGGED)
        _write(project, "calc/calc_test.go", _FLAGGED)
        set_exclusions(["mocks"])
        assert find_go_files(project) == ["calc/calc_test.go"]


class TestScan:
    def test_reports_findings_sorted(self, project):
        _write(project, "b/b_test.go", _FLAGGED)
        _write(project, "a/a_test.go", _FLAGGED)
        _write(project, "a/clean_test.go", _CLEAN)
        result = scan_path(project)
        assert [f.path for f in result.files] == ["a/a_test.go", "a/clean_test.go", "b/b_test.go"]
        findings = result.findings
        assert [(path, d.pos.line) for path, d in findings] == [
            ("a/a_test.go", 11),
            ("a/a_test.go", 12),
            ("b/b_test.go", 11),
            ("b/b_test.go", 12),
        ]
        assert result.files_scanned == 3
        assert result.skipped == 0

    def test_non_test_files_ignored_unless_asked(self, project):
        _write(project, "calc/helpers.go", _FLAGGED)
        assert scan_path(project).findings == []
        assert len(scan_path(project, test_files_only=False).findings) == 2

    def test_explicit_file_always_scanned(self, project):
        path = _write(project, "calc/helpers.go", _FLAGGED)
        assert len(scan_path(path).findings) == 2

    def test_relative_path_resolves_against_project_root(self, project):
        _write(project, "calc/calc_test.go", _FLAGGED)
        assert len(scan_path("calc").findings) == 2

    def test_missing_path_raises(self, project):
        with pytest.raises(FileNotFoundError):
            scan_path(project / "nope")

    def test_unreadable_and_packageless_files_skipped(self, project, caplog):
        _write(project, "calc/latin1_test.go", b"package calc\n// caf\xe9\n")
        _write(project, "calc/broken_test.go", _FLAGGED.replace("package calc\n", ""))
        _write(project, "calc/calc_test.go", _FLAGGED)
        with caplog.at_level(logging.DEBUG, logger="assertlint.engine.analysis"):
            result = scan_path(project)
        assert result.skipped == 2
        assert result.files_scanned == 1
        assert {path for path, _ in result.findings} == {"calc/calc_test.go"}
        assert "Skipping" in caplog.text

    def test_recovered_syntax_errors_still_report(self, project):
        _write(
            project,
            "calc/partial_test.go",
            _FLAGGED + "\nfunc broken() {\n\tbad := )\n}\n",
        )
        (result,) = scan_path(project).files
        assert not result.skipped
        assert result.syntax_errors
        assert len(result.diagnostics) == 2

    def test_files_without_testify_import_not_parsed(self, project):
        _write(project, "calc/plain_test.go", "package calc\n\nfunc @@@\n")
        (result,) = scan_path(project).files
        assert not result.skipped
        assert result.diagnostics == []

    def test_package_declarations_span_files(self, project):
        _write(
            project,
            "geo/area.go",
            textwrap.dedent(
                """\
                package geo

                func Area(r float64) float64 { return 3.14 * r * r }
                """
            ),
        )
        _write(
            project,
            "geo/suite_test.go",
            textwrap.dedent(
                """\
                package geo

                import "github.com/stretchr/testify/suite"

                type GeoSuite struct{ suite.Suite }
                """
            ),
        )
        _write(
            project,
            "geo/area_test.go",
            textwrap.dedent(
                """\
                package geo

                import (
                	"testing"

                	"github.com/stretchr/testify/assert"
                )

                func TestArea(t *testing.T) {
                	want := 12.56
                	assert.Equal(t, want, Area(2))
                }

                func (s *GeoSuite) TestUnit() {
                	s.Equal(Area(1), Area(1))
                }
                """
            ),
        )
        result = scan_path(project)
        assert [f.path for f in result.files] == ["geo/area_test.go", "geo/suite_test.go"]
        assert [(path, d.pos.line) for path, d in result.findings] == [
            ("geo/area_test.go", 11),
            ("geo/area_test.go", 15),
        ]

    def test_suite_file_without_testify_import_is_checked(self, project):
        _write(
            project,
            "geo/suite_test.go",
            textwrap.dedent(
                """\
                package geo

                import "github.com/stretchr/testify/suite"

                type GeoSuite struct{ suite.Suite }
                """
            ),
        )
        _write(
            project,
            "geo/unit_test.go",
            textwrap.dedent(
                """\
                package geo

                func (s *GeoSuite) TestHalf() {
                	half := 1.0 / 2
                	s.Equal(0.5, half)
                }
                """
            ),
        )
        findings = scan_path(project).findings
        assert [(path, d.message) for path, d in findings] == [
            ("geo/unit_test.go", "use s.InEpsilon (or InDelta)"),
        ]

    def test_external_test_package_checked_separately(self, project):
        _write(project, "calc/calc.go", "package calc\n\nfunc Sum(a, b float64) float64 { return a + b }\n")
        _write(project, "calc/calc_test.go", _FLAGGED.replace("package calc", "package calc_test"))
        (result,) = scan_path(project).files
        assert len(result.diagnostics) == 2

    def test_analyze_file_sees_sibling_declarations(self, project):
        _write(project, "calc/calc.go", "package calc\n\nvar Pi = 3.14159\n")
        path = _write(
            project,
            "calc/pi_test.go",
            textwrap.dedent(
                """\
                package calc

                import (
                	"testing"

                	"github.com/stretchr/testify/assert"
                )

                func TestPi(t *testing.T) {
                	assert.Equal(t, Pi, Pi)
                }
                """
            ),
        )
        assert [d.pos.line for d in analyze_file(path).diagnostics] == [10]

    def test_parallel_scan_matches_serial(self, project):
        for i in range(6):
            _write(project, f"pkg{i}/p_test.go", _FLAGGED if i % 2 else _CLEAN)
        serial = scan_path(project, jobs=1)
        parallel = scan_path(project, jobs=4)
        assert [(p, d.pos) for p, d in serial.findings] == [(p, d.pos) for p, d in parallel.findings]
        assert len(parallel.findings) == 6

    def test_analyze_file(self, project):
        path = _write(project, "calc/calc_test.go", _FLAGGED)
        result = analyze_file(path)
        assert result.path == str(path)
        assert [d.message for d in result.diagnostics] == [
            "use assert.InEpsilon (or InDelta)",
            "use assert.InEpsilon (or InDelta)",
        ]

    def test_analyze_missing_file_is_skipped(self, project):
        assert analyze_file(project / "gone_test.go").skipped
