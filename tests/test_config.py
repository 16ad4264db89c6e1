"""Tests for assertlint.config — project-wide configuration management."""

import json

import pytest

from assertlint.config import (
    CONFIG_SCHEMA,
    add_ignore_pattern,
    config_path,
    default_config,
    load_config,
    save_config,
    set_config_value,
    unset_config_value,
)
from assertlint.core.runtime_state import make_runtime_context, runtime_scope


# ===========================================================================
# default_config
# ===========================================================================

class TestDefaultConfig:
    def test_returns_all_keys(self):
        cfg = default_config()
        for key in CONFIG_SCHEMA:
            assert key in cfg

    def test_default_values(self):
        cfg = default_config()
        assert cfg["exclude"] == []
        assert cfg["ignore"] == []
        assert cfg["enable"] == []
        assert cfg["disable"] == []
        assert cfg["test_files_only"] is True
        assert cfg["jobs"] == 0

    def test_defaults_are_independent_copies(self):
        a = default_config()
        a["ignore"].append("x")
        assert default_config()["ignore"] == []


# ===========================================================================
# load_config / save_config round-trip
# ===========================================================================

class TestLoadSaveConfig:
    def test_no_file_returns_defaults(self, tmp_path):
        cfg = load_config(tmp_path / "config.json")
        assert cfg == default_config()

    def test_round_trip(self, tmp_path):
        p = tmp_path / "config.json"
        cfg = default_config()
        cfg["jobs"] = 4
        cfg["ignore"] = ["float-compare::legacy/*"]
        save_config(cfg, p)
        loaded = load_config(p)
        assert loaded["jobs"] == 4
        assert loaded["ignore"] == ["float-compare::legacy/*"]

    def test_missing_keys_filled(self, tmp_path):
        p = tmp_path / "config.json"
        p.write_text(json.dumps({"jobs": 2}))
        cfg = load_config(p)
        assert cfg["jobs"] == 2
        assert cfg["test_files_only"] is True

    def test_unknown_keys_dropped(self, tmp_path):
        p = tmp_path / "config.json"
        p.write_text(json.dumps({"badge_path": "x.png"}))
        assert "badge_path" not in load_config(p)

    def test_wrong_types_fall_back_to_default(self, tmp_path):
        p = tmp_path / "config.json"
        p.write_text(json.dumps({"jobs": True, "exclude": "vendor", "test_files_only": "no"}))
        cfg = load_config(p)
        assert cfg["jobs"] == 0
        assert cfg["exclude"] == []
        assert cfg["test_files_only"] is True

    def test_corrupt_file_returns_defaults(self, tmp_path):
        p = tmp_path / "config.json"
        p.write_text("{not json")
        assert load_config(p) == default_config()

    def test_non_object_returns_defaults(self, tmp_path):
        p = tmp_path / "config.json"
        p.write_text("[1, 2]")
        assert load_config(p) == default_config()

    def test_default_location_under_project_root(self, tmp_path):
        with runtime_scope(make_runtime_context(project_root=tmp_path)):
            assert config_path() == tmp_path / ".assertlint" / "config.json"
            save_config({"jobs": 3})
            assert load_config()["jobs"] == 3


# ===========================================================================
# set_config_value / unset_config_value
# ===========================================================================

class TestSetConfigValue:
    def test_set_int(self):
        cfg = default_config()
        set_config_value(cfg, "jobs", "8")
        assert cfg["jobs"] == 8

    def test_set_int_auto(self):
        cfg = default_config()
        cfg["jobs"] = 4
        set_config_value(cfg, "jobs", "auto")
        assert cfg["jobs"] == 0

    def test_set_int_negative_rejected(self):
        with pytest.raises(ValueError):
            set_config_value(default_config(), "jobs", "-1")

    def test_set_int_garbage_rejected(self):
        with pytest.raises(ValueError):
            set_config_value(default_config(), "jobs", "many")

    @pytest.mark.parametrize("raw,expected", [("true", True), ("no", False), ("0", False), ("YES", True)])
    def test_set_bool(self, raw, expected):
        cfg = default_config()
        set_config_value(cfg, "test_files_only", raw)
        assert cfg["test_files_only"] is expected

    def test_set_bool_invalid(self):
        with pytest.raises(ValueError):
            set_config_value(default_config(), "test_files_only", "maybe")

    def test_list_appends_without_duplicates(self):
        cfg = default_config()
        set_config_value(cfg, "exclude", "mocks")
        set_config_value(cfg, "exclude", "gen")
        set_config_value(cfg, "exclude", "mocks")
        assert cfg["exclude"] == ["mocks", "gen"]

    def test_unknown_key(self):
        with pytest.raises(KeyError):
            set_config_value(default_config(), "nonexistent", "1")


class TestUnsetConfigValue:
    def test_resets_to_default(self):
        cfg = default_config()
        cfg["disable"] = ["float-compare"]
        unset_config_value(cfg, "disable")
        assert cfg["disable"] == []

    def test_unknown_key(self):
        with pytest.raises(KeyError):
            unset_config_value(default_config(), "nonexistent")


class TestAddIgnorePattern:
    def test_deduplicates(self):
        cfg = default_config()
        add_ignore_pattern(cfg, "float-compare::a_test.go")
        add_ignore_pattern(cfg, "float-compare::a_test.go")
        assert cfg["ignore"] == ["float-compare::a_test.go"]

    def test_creates_list(self):
        cfg = {}
        add_ignore_pattern(cfg, "x")
        assert cfg["ignore"] == ["x"]
