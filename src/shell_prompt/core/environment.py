"""Environment snapshot gathered once per render."""

from __future__ import annotations

import getpass
import logging
import os
import socket
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from shell_prompt.config.schema import GitSettings
from shell_prompt.core.git import inspect_repository
from shell_prompt.core.models import EnvironmentQueryFailure, GitState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Environment:
    """Immutable facts consulted by every component during one render."""

    cwd: Path
    home: Path
    git: GitState | None = None
    jobs: int = 0
    hostname: str = ""
    user: str = ""
    variables: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    last_exit_status: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.variables, MappingProxyType):
            object.__setattr__(self, "variables", MappingProxyType(dict(self.variables)))

    def getenv(self, name: str) -> str:
        """Value of an environment variable, empty string when unset."""
        return self.variables.get(name, "")


def current_directory(environ: Mapping[str, str]) -> Path:
    """Current directory, preferring the shell's logical $PWD.

    Raises:
        EnvironmentQueryFailure: the directory no longer exists
    """
    try:
        physical = Path(os.getcwd())
    except OSError as e:
        raise EnvironmentQueryFailure(f"current directory lookup failed: {e}") from e
    logical = environ.get("PWD")
    if logical:
        try:
            if os.path.samefile(logical, physical):
                return Path(logical)
        except OSError:
            pass
    return physical


def query_hostname() -> str:
    """Host name of this machine."""
    try:
        return socket.gethostname()
    except OSError as e:
        raise EnvironmentQueryFailure(f"hostname lookup failed: {e}") from e


def query_user(environ: Mapping[str, str]) -> str:
    """Login name of the current user."""
    try:
        return getpass.getuser()
    except (OSError, KeyError) as e:
        user = environ.get("USER", "")
        if user:
            return user
        raise EnvironmentQueryFailure(f"user lookup failed: {e}") from e


def query_git(path: Path, settings: GitSettings) -> GitState | None:
    """Repository state for path, None when git is disabled or absent."""
    if not settings.enabled:
        return None

    return inspect_repository(path, timeout=settings.timeout, untracked=settings.untracked)


def collect_environment(
    *,
    last_exit_status: int = 0,
    jobs: int = 0,
    git_settings: GitSettings | None = None,
    environ: Mapping[str, str] | None = None,
) -> Environment:
    """Gather every fact once and freeze them into an Environment.

    Failing queries are logged and degrade to empty values so a broken
    git or resolver never breaks the prompt.

    Args:
        last_exit_status: Exit status of the previous foreground command
        jobs: Number of background jobs reported by the shell
        git_settings: Git inspection settings (default: enabled)
        environ: Environment variables (default: os.environ)

    Returns:
        Environment snapshot
    """
    if environ is None:
        environ = os.environ
    if git_settings is None:
        git_settings = GitSettings()

    variables = dict(environ)

    cwd_known = True
    try:
        cwd = current_directory(variables)
    except EnvironmentQueryFailure as e:
        logger.debug("%s", e)
        # the shell still knows where it was, even if the directory is gone
        cwd = Path(variables.get("PWD", ""))
        cwd_known = False

    hostname = ""
    try:
        hostname = query_hostname()
    except EnvironmentQueryFailure as e:
        logger.debug("%s", e)

    user = ""
    try:
        user = query_user(variables)
    except EnvironmentQueryFailure as e:
        logger.debug("%s", e)

    git = None
    if cwd_known:
        try:
            git = query_git(cwd, git_settings)
        except EnvironmentQueryFailure as e:
            logger.debug("%s", e)

    try:
        home = Path.home()
    except RuntimeError as e:
        logger.debug("home directory lookup failed: %s", e)
        home = Path(variables.get("HOME", "/"))

    return Environment(
        cwd=cwd,
        home=home,
        git=git,
        jobs=jobs,
        hostname=hostname,
        user=user,
        variables=variables,
        last_exit_status=last_exit_status,
    )
