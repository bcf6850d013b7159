"""Tests for configuration loading."""

import os

import pytest

from git_tail.config import TailConfig, load_config
from git_tail.exceptions import ConfigurationError, InvalidConfigError
from git_tail.output import OutputConfig


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    """No real home/project config files or GIT_TAIL_* variables."""
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("GIT_TAIL_"):
            monkeypatch.delenv(key)
    return tmp_path


class TestTailConfig:
    def test_defaults(self):
        config = TailConfig(since="1 year ago")
        assert config.branches == []
        assert config.alias_hashes is False
        assert config.git_binary == "git"
        assert config.output == OutputConfig(verbose=False, color=None)

    def test_since_required(self):
        with pytest.raises(ValueError):
            TailConfig()

    def test_blank_branch_rejected(self):
        with pytest.raises(ValueError):
            TailConfig(since="x", branches=["main", " "])

    def test_repo_path_must_exist(self, tmp_path):
        with pytest.raises(ValueError):
            TailConfig(since="x", repo_path=str(tmp_path / "missing"))


class TestLoadConfig:
    def test_overrides(self):
        config = load_config(since="2 years ago", alias_hashes=True, color=None)
        assert config.since == "2 years ago"
        assert config.alias_hashes is True
        assert config.color is None

    def test_missing_since_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            load_config()

    def test_project_file(self, isolated):
        (isolated / "git-tail.toml").write_text('since = "6 months ago"\nbranches = ["main"]\n')
        config = load_config()
        assert config.since == "6 months ago"
        assert config.branches == ["main"]

    def test_global_file_under_table(self, isolated):
        (isolated / ".git-tail.toml").write_text('[git-tail]\nsince = "1 week ago"\n')
        assert load_config().since == "1 week ago"

    def test_explicit_file_beats_project_file(self, isolated):
        (isolated / "git-tail.toml").write_text('since = "project"\n')
        explicit = isolated / "custom.toml"
        explicit.write_text('since = "explicit"\n')
        assert load_config(config_file=explicit).since == "explicit"

    def test_missing_explicit_file(self, isolated):
        with pytest.raises(ConfigurationError):
            load_config(config_file=isolated / "nope.toml", since="x")

    def test_invalid_toml(self, isolated):
        bad = isolated / "bad.toml"
        bad.write_text("since = \n")
        with pytest.raises(ConfigurationError):
            load_config(config_file=bad)

    def test_unknown_key(self, isolated):
        (isolated / "git-tail.toml").write_text('since = "x"\nworkers = 4\n')
        with pytest.raises(ConfigurationError):
            load_config()

    def test_env_vars(self, monkeypatch):
        monkeypatch.setenv("GIT_TAIL_SINCE", "3 days ago")
        monkeypatch.setenv("GIT_TAIL_BRANCHES", "main, develop")
        monkeypatch.setenv("GIT_TAIL_ALIAS_HASHES", "yes")
        monkeypatch.setenv("GIT_TAIL_COLOR", "off")
        config = load_config()
        assert config.since == "3 days ago"
        assert config.branches == ["main", "develop"]
        assert config.alias_hashes is True
        assert config.color is False

    def test_cli_beats_env(self, monkeypatch):
        monkeypatch.setenv("GIT_TAIL_SINCE", "env")
        assert load_config(since="cli").since == "cli"

    def test_invalid_env_bool(self, monkeypatch):
        monkeypatch.setenv("GIT_TAIL_VERBOSE", "sometimes")
        with pytest.raises(InvalidConfigError) as exc_info:
            load_config(since="x")
        assert exc_info.value.key == "GIT_TAIL_VERBOSE"
