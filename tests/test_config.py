"""Tests for the config module."""

import pytest
import yaml
from pydantic import ValidationError

from shell_prompt.config.defaults import DEFAULT_CONFIG_YAML
from shell_prompt.config.loader import (
    deep_merge,
    load_config,
    load_config_from_string,
)
from shell_prompt.config.schema import DEFAULT_TEMPLATE, Config, GitSettings


class TestDeepMerge:
    """Tests for deep_merge function."""

    def test_merge_simple_dicts(self):
        """Test merging simple dictionaries."""
        result = deep_merge({"a": 1, "b": 2}, {"b": 3, "c": 4})

        assert result == {"a": 1, "b": 3, "c": 4}

    def test_merge_nested_dicts(self):
        """Test merging nested dictionaries."""
        base = {"a": {"x": 1, "y": 2}, "b": 3}
        override = {"a": {"y": 5, "z": 6}}

        assert deep_merge(base, override) == {"a": {"x": 1, "y": 5, "z": 6}, "b": 3}

    def test_does_not_mutate_base(self):
        base = {"a": {"x": 1}}
        deep_merge(base, {"a": {"x": 2}})

        assert base == {"a": {"x": 1}}


class TestLoadConfigFromString:
    """Tests for load_config_from_string function."""

    def test_empty(self):
        config = load_config_from_string("")

        assert config.template == DEFAULT_TEMPLATE
        assert config.shell == "plain"
        assert config.color is True
        assert config.git == GitSettings()

    def test_sample(self, sample_config):
        assert sample_config.shell == "zsh"
        assert sample_config.git.timeout == 0.5
        assert sample_config.git.untracked is False

    def test_shell_case_insensitive(self):
        assert load_config_from_string("shell: BASH").shell == "bash"

    def test_unknown_key_rejected(self):
        with pytest.raises(ValidationError):
            load_config_from_string("colour: false")

    def test_invalid_shell_rejected(self):
        with pytest.raises(ValidationError):
            load_config_from_string("shell: fish")

    def test_invalid_timeout_rejected(self):
        with pytest.raises(ValidationError):
            load_config_from_string("git:\n  timeout: 0")

    def test_defaults_yaml_matches_model(self):
        """Test the documented defaults are the model defaults."""
        assert Config(**yaml.safe_load(DEFAULT_CONFIG_YAML)) == Config()


class TestLoadConfig:
    """Tests for load_config with files on disk."""

    def test_missing_files(self, tmp_path, empty_config):
        config = load_config(tmp_path / "config.yaml", tmp_path / "conf.d")

        assert config == empty_config

    def test_dropin_overrides(self, tmp_path):
        (tmp_path / "config.yaml").write_text("template: '{user} '\ngit:\n  timeout: 2\n")
        dropin = tmp_path / "conf.d"
        dropin.mkdir()
        (dropin / "10-git.yaml").write_text("git:\n  enabled: false\n")
        (dropin / "20-color.yml").write_text("color: false\n")

        config = load_config(str(tmp_path / "config.yaml"), str(dropin))

        assert config.template == "{user} "
        assert config.git == GitSettings(enabled=False, timeout=2.0)
        assert config.color is False

    def test_xdg_config_home(self, tmp_path, monkeypatch):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        (tmp_path / "prompt").mkdir()
        (tmp_path / "prompt" / "config.yaml").write_text("shell: zsh\n")

        assert load_config().shell == "zsh"

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ValueError, match="mapping"):
            load_config(path, tmp_path / "conf.d")
