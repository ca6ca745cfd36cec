"""Tests for listtodo.config."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from listtodo.config import (
    CONFIG_FILENAME,
    DEFAULTS,
    ConfigError,
    _deep_merge,
    _validate,
    load_config,
)


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Write a minimal .list-todo.yaml in tmp_path."""
    path = tmp_path / CONFIG_FILENAME
    config = {
        "output_format": "pretty",
        "statuses": {"active": ["todo", "in-progress", "next"]},
    }
    path.write_text(yaml.dump(config))
    return path


class TestDeepMerge:
    def test_flat_merge(self) -> None:
        base = {"a": 1, "b": 2}
        override = {"b": 3, "c": 4}
        assert _deep_merge(base, override) == {"a": 1, "b": 3, "c": 4}

    def test_nested_merge(self) -> None:
        base = {"x": {"a": 1, "b": 2}}
        override = {"x": {"b": 3}}
        assert _deep_merge(base, override) == {"x": {"a": 1, "b": 3}}

    def test_override_replaces_non_dict(self) -> None:
        base = {"x": {"a": 1}}
        override = {"x": "flat"}
        assert _deep_merge(base, override) == {"x": "flat"}

    def test_does_not_mutate_base(self) -> None:
        base = {"a": {"b": 1}}
        _deep_merge(base, {"a": {"b": 2}})
        assert base["a"]["b"] == 1


class TestValidate:
    def test_defaults_valid(self) -> None:
        config = _deep_merge(DEFAULTS, {})
        _validate(config)  # Should not raise

    def test_select_alias_normalized(self) -> None:
        config = _deep_merge(DEFAULTS, {"select": "incomplete"})
        _validate(config)
        assert config["select"] == "shovel-ready"

    def test_unknown_select(self) -> None:
        config = _deep_merge(DEFAULTS, {"select": "everything"})
        with pytest.raises(ConfigError, match="select.*unrecognized selection mode"):
            _validate(config)

    def test_unknown_output_format(self) -> None:
        config = _deep_merge(DEFAULTS, {"output_format": "xml"})
        with pytest.raises(ConfigError, match="output_format"):
            _validate(config)

    def test_statuses_not_mapping(self) -> None:
        config = _deep_merge(DEFAULTS, {"statuses": ["todo"]})
        with pytest.raises(ConfigError, match="statuses.*mapping"):
            _validate(config)

    def test_status_list_must_be_strings(self) -> None:
        config = _deep_merge(DEFAULTS, {"statuses": {"active": "todo"}})
        with pytest.raises(ConfigError, match="statuses.active.*list of strings"):
            _validate(config)

    def test_done_must_be_inactive(self) -> None:
        config = _deep_merge(DEFAULTS, {"statuses": {"inactive": ["cancelled"]}})
        with pytest.raises(ConfigError, match="must include 'done'"):
            _validate(config)

    def test_overlapping_statuses(self) -> None:
        config = _deep_merge(DEFAULTS, {"statuses": {"active": ["todo", "tabled"]}})
        with pytest.raises(ConfigError, match="both active and inactive.*tabled"):
            _validate(config)

    def test_negative_separator_width(self) -> None:
        config = _deep_merge(DEFAULTS, {"pretty": {"separator_width": -1}})
        with pytest.raises(ConfigError, match="separator_width"):
            _validate(config)

    def test_log_level_uppercased(self) -> None:
        config = _deep_merge(DEFAULTS, {"log_level": "debug"})
        _validate(config)
        assert config["log_level"] == "DEBUG"

    def test_bad_log_level(self) -> None:
        config = _deep_merge(DEFAULTS, {"log_level": "chatty"})
        with pytest.raises(ConfigError, match="log_level"):
            _validate(config)


class TestLoadConfig:
    def test_defaults_when_no_file(self, tmp_path: Path) -> None:
        config = load_config(search_dir=tmp_path)
        assert config["select"] == "all"
        assert config["output_format"] == "json"
        assert config["random"]["eligible_types"] == ["task"]
        assert config["pretty"]["separator_width"] == 74

    def test_discovers_file_in_search_dir(self, tmp_path: Path, config_file: Path) -> None:
        config = load_config(search_dir=tmp_path)
        # User-specified values present
        assert config["output_format"] == "pretty"
        assert config["statuses"]["active"] == ["todo", "in-progress", "next"]
        # Defaults filled in
        assert config["statuses"]["inactive"] == ["done", "cancelled", "tabled"]
        assert config["select"] == "all"

    def test_explicit_path(self, config_file: Path) -> None:
        config = load_config(config_file)
        assert config["output_format"] == "pretty"

    def test_explicit_path_missing(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Config not found"):
            load_config(tmp_path / "nope.yaml")

    def test_empty_file_means_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path)["output_format"] == "json"

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("just a string")
        with pytest.raises(ConfigError, match="YAML mapping"):
            load_config(path)

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.yaml"
        path.write_text("select: [unclosed\n")
        with pytest.raises(ConfigError, match="not valid YAML"):
            load_config(path)

    def test_defaults_not_mutated(self, tmp_path: Path, config_file: Path) -> None:
        load_config(search_dir=tmp_path)
        assert DEFAULTS["output_format"] == "json"
        assert DEFAULTS["statuses"]["active"] == ["todo", "in-progress"]
