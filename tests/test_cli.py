"""End-to-end tests for the assertlint command line."""

import json
import textwrap

import pytest

import assertlint.file_discovery as file_discovery_mod
from assertlint.cli import create_parser, main

_FLAGGED = textwrap.dedent(
    """\
    package calc

    import (
    	"testing"

    	"github.com/stretchr/testify/assert"
    	"github.com/stretchr/testify/require"
    )

    func TestCalc(t *testing.T) {
    	got := 0.1 + 0.2
    	assert.Equal(t, 0.3, got)
    	require.Truef(t, got == 0.3, "sum %v", got)
    }
    """
)


@pytest.fixture
def project(tmp_path, monkeypatch):
    monkeypatch.setattr(file_discovery_mod, "_DEFAULT_PROJECT_ROOT", tmp_path)
    calc = tmp_path / "calc"
    calc.mkdir()
    (calc / "calc_test.go").write_text(_FLAGGED)
    (calc / "calc.go").write_text("package calc\n")
    return tmp_path


def _run(argv):
    """Run the CLI and return its exit code (0 when it returns normally)."""
    try:
        main(argv)
    except SystemExit as exc:
        return exc.code or 0
    return 0


# ===========================================================================
# parser
# ===========================================================================

class TestParser:
    def test_command_required(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args([])

    def test_no_abbreviations(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["scan", "--js"])

    def test_scan_defaults(self):
        args = create_parser().parse_args(["scan"])
        assert args.path is None
        assert args.jobs is None
        assert not args.json and not args.all_files

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            create_parser().parse_args(["--version"])
        assert exc_info.value.code == 0
        assert "assertlint" in capsys.readouterr().out


# ===========================================================================
# scan
# ===========================================================================

class TestScanCommand:
    def test_findings_exit_one(self, project, capsys):
        assert _run(["scan"]) == 1
        out = capsys.readouterr().out.splitlines()
        assert out == [
            "calc/calc_test.go:12:2: float-compare: use assert.InEpsilon (or InDelta)",
            "calc/calc_test.go:13:2: float-compare: use require.InEpsilonf (or InDeltaf)",
        ]

    def test_summary_on_stderr(self, project, capsys):
        _run(["scan"])
        err = capsys.readouterr().err
        assert "1 files checked" in err
        assert "2 findings" in err

    def test_clean_tree_exits_zero(self, project, capsys):
        (project / "calc" / "calc_test.go").write_text("package calc\n")
        assert _run(["scan"]) == 0
        assert "0 findings" in capsys.readouterr().err

    def test_json_report(self, project, capsys):
        assert _run(["scan", "--json"]) == 1
        report = json.loads(capsys.readouterr().out)
        assert report["stats"]["findings"] == 2
        assert report["stats"]["by_detector"] == {"float-compare": 2}
        first = report["findings"][0]
        assert first["id"] == "float-compare::calc/calc_test.go::12:2"
        assert first["detail"] == {"call": "Equal", "selector": "assert"}

    def test_explicit_path(self, project, capsys):
        other = project / "other"
        other.mkdir()
        assert _run(["scan", str(other)]) == 0
        assert _run(["scan", "calc"]) == 1

    def test_all_files_includes_non_test_sources(self, project, capsys):
        (project / "calc" / "calc.go").write_text(_FLAGGED)
        _run(["scan", "--json"])
        assert json.loads(capsys.readouterr().out)["stats"]["findings"] == 2
        _run(["scan", "--json", "--all-files"])
        assert json.loads(capsys.readouterr().out)["stats"]["findings"] == 4

    def test_disable_checker(self, project):
        assert _run(["scan", "--disable", "float-compare"]) == 0

    def test_unknown_checker_exits_two(self, project, capsys):
        assert _run(["scan", "--enable", "bogus"]) == 2
        assert "Unknown checker" in capsys.readouterr().err

    def test_missing_path_exits_two(self, project, capsys):
        assert _run(["scan", "nowhere"]) == 2
        assert "No such file or directory" in capsys.readouterr().err

    def test_cli_exclude(self, project, capsys):
        assert _run(["--exclude", "calc", "scan"]) == 0
        assert "Excluding: calc" in capsys.readouterr().err

    def test_parallel_jobs(self, project):
        assert _run(["scan", "--jobs", "3"]) == 1


# ===========================================================================
# config
# ===========================================================================

class TestConfigCommand:
    def test_set_show_unset(self, project, capsys):
        assert _run(["config", "set", "jobs", "2"]) == 0
        saved = json.loads((project / ".assertlint" / "config.json").read_text())
        assert saved["jobs"] == 2

        capsys.readouterr()
        _run(["config", "show"])
        out = capsys.readouterr().out
        assert "jobs = 2" in out
        assert "test_files_only = true" in out

        assert _run(["config", "unset", "jobs"]) == 0
        saved = json.loads((project / ".assertlint" / "config.json").read_text())
        assert saved["jobs"] == 0

    def test_bad_value_exits_two(self, project, capsys):
        assert _run(["config", "set", "jobs", "lots"]) == 2
        assert _run(["config", "set", "nope", "1"]) == 2
        assert "Unknown config key" in capsys.readouterr().err
        assert not (project / ".assertlint" / "config.json").exists()

    def test_ignore_pattern_suppresses(self, project, capsys):
        _run(["config", "set", "ignore", "float-compare::calc/*"])
        capsys.readouterr()
        assert _run(["scan"]) == 0
        assert "2 suppressed" in capsys.readouterr().err

    def test_persisted_exclude(self, project, capsys):
        _run(["config", "set", "exclude", "calc"])
        capsys.readouterr()
        assert _run(["scan"]) == 0
        assert "Excluding (from config): calc" in capsys.readouterr().err

    def test_persisted_disable(self, project):
        _run(["config", "set", "disable", "float-compare"])
        assert _run(["scan"]) == 0

    def test_scan_all_files_from_config(self, project, capsys):
        (project / "calc" / "calc.go").write_text(_FLAGGED)
        _run(["config", "set", "test_files_only", "false"])
        capsys.readouterr()
        _run(["scan", "--json"])
        assert json.loads(capsys.readouterr().out)["stats"]["findings"] == 4


# ===========================================================================
# checkers
# ===========================================================================

class TestCheckersCommand:
    def test_lists_checkers(self, project, capsys):
        assert _run(["checkers"]) == 0
        out = capsys.readouterr().out
        assert "float-compare" in out
        assert "yes" in out
        assert "Flags exact comparisons of floating-point values." in out

    def test_reflects_disabled(self, project, capsys):
        _run(["config", "set", "disable", "float-compare"])
        capsys.readouterr()
        _run(["checkers"])
        row = next(line for line in capsys.readouterr().out.splitlines() if "float-compare" in line)
        assert " no " in row


# ===========================================================================
# ignore
# ===========================================================================

class TestIgnoreCommand:
    def test_adds_pattern_and_suppresses(self, project, capsys):
        assert _run(["ignore", "float-compare::calc/*"]) == 0
        assert "Added ignore pattern: float-compare::calc/*" in capsys.readouterr().out
        saved = json.loads((project / ".assertlint" / "config.json").read_text())
        assert saved["ignore"] == ["float-compare::calc/*"]

        assert _run(["scan"]) == 0
        assert "2 suppressed" in capsys.readouterr().err

    def test_pattern_added_once(self, project):
        _run(["ignore", "calc/calc_test.go"])
        _run(["ignore", "calc/calc_test.go"])
        saved = json.loads((project / ".assertlint" / "config.json").read_text())
        assert saved["ignore"] == ["calc/calc_test.go"]

    def test_pattern_required(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["ignore"])
