"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from shell_prompt.config.loader import load_config_from_string
from shell_prompt.config.schema import Config
from shell_prompt.core.environment import Environment, GitState


@pytest.fixture
def home() -> Path:
    return Path("/home/alice")


@pytest.fixture
def env(home: Path) -> Environment:
    """Snapshot outside any repository."""
    return Environment(
        cwd=home / "Dev" / "github" / "twe4ked" / "prompt",
        home=home,
        hostname="laptop.example.com",
        user="alice",
        variables={"HOME": str(home), "EDITOR": "vim", "EMPTY": ""},
        last_exit_status=0,
    )


@pytest.fixture
def git_state(home: Path) -> GitState:
    """A repository with pending changes."""
    return GitState(
        root=home / "Dev" / "github" / "twe4ked" / "prompt",
        branch="main",
        commit="1a2b3c4d5e6f7a8b9c0d1e2f3a4b5c6d7e8f9a0b",
        staged=True,
        dirty=True,
        ahead=2,
        stashes=3,
    )


@pytest.fixture
def repo_env(home: Path, git_state: GitState) -> Environment:
    """Snapshot inside a repository subdirectory."""
    return Environment(
        cwd=git_state.root / "src" / "core",
        home=home,
        git=git_state,
        jobs=2,
        hostname="laptop",
        user="alice",
        variables={"SSH_CONNECTION": "10.0.0.1 22 10.0.0.2 22"},
        last_exit_status=1,
    )


@pytest.fixture
def sample_config() -> Config:
    """Sample configuration for testing."""
    yaml_content = """
template: "{if last_command_status}{green}{else}{red}{end}{cwd=short}{reset} $ "
shell: zsh
color: true
git:
  enabled: true
  timeout: 0.5
  untracked: false
"""
    return load_config_from_string(yaml_content)


@pytest.fixture
def empty_config() -> Config:
    """Empty configuration for testing."""
    return Config()
