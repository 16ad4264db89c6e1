"""Tests for finding normalization, ignore patterns and the JSON report."""

from __future__ import annotations

import pytest

from assertlint.core.runtime_state import make_runtime_context, runtime_scope
from assertlint.engine.checkers.base import Diagnostic
from assertlint.languages.go.syntax import Pos
from assertlint.state import build_report, filter_ignored, is_ignored, make_finding


@pytest.fixture
def project(tmp_path):
    with runtime_scope(make_runtime_context(project_root=tmp_path)):
        yield tmp_path


def _diag(line: int = 12, col: int = 2) -> Diagnostic:
    return Diagnostic(
        rule="float-compare",
        message="use assert.InEpsilon (or InDelta)",
        pos=Pos(line, col),
        end=Pos(line, 30),
        call="Equal",
        selector="assert",
    )


class TestMakeFinding:
    def test_fields(self, project):
        f = make_finding("calc/calc_test.go", _diag())
        assert f["id"] == "float-compare::calc/calc_test.go::12:2"
        assert f["file"] == "calc/calc_test.go"
        assert (f["line"], f["column"], f["end_line"], f["end_column"]) == (12, 2, 12, 30)
        assert f["detector"] == "float-compare"
        assert f["tier"] == 2
        assert f["confidence"] == "high"
        assert f["summary"] == "use assert.InEpsilon (or InDelta)"
        assert f["detail"] == {"call": "Equal", "selector": "assert"}

    def test_absolute_path_made_relative(self, project):
        f = make_finding(str(project / "calc" / "calc_test.go"), _diag())
        assert f["file"] == "calc/calc_test.go"


class TestIgnore:
    ID = "float-compare::legacy/old_test.go::4:2"
    FILE = "legacy/old_test.go"

    @pytest.mark.parametrize(
        "pattern,expected",
        [
            ("float-compare::legacy/*", True),
            ("float-compare::legacy/", True),
            ("legacy/*", True),
            ("legacy/old_test.go", True),
            ("float-compare::other/*", False),
            ("other_test.go", False),
        ],
    )
    def test_patterns(self, project, pattern, expected):
        assert is_ignored(self.ID, self.FILE, [pattern]) is expected

    def test_filter_counts_suppressed(self, project):
        findings = [
            make_finding("legacy/old_test.go", _diag()),
            make_finding("calc/calc_test.go", _diag()),
        ]
        kept, suppressed = filter_ignored(findings, ["legacy/*"])
        assert [f["file"] for f in kept] == ["calc/calc_test.go"]
        assert suppressed == 1

    def test_no_patterns_keeps_everything(self, project):
        findings = [make_finding("calc/calc_test.go", _diag())]
        assert filter_ignored(findings, []) == (findings, 0)


def test_build_report(project):
    findings = [make_finding("a_test.go", _diag(1)), make_finding("b_test.go", _diag(2))]
    report = build_report(findings, files_scanned=5, skipped=1, suppressed=3)
    assert report["stats"] == {
        "files_scanned": 5,
        "files_skipped": 1,
        "findings": 2,
        "suppressed": 3,
        "by_detector": {"float-compare": 2},
    }
    assert report["findings"] == findings
    assert "generated_at" in report
