"""Prompt components: parameter models and resolution against a snapshot."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from shell_prompt.core.color import UNDERLINE_OFF, UNDERLINE_ON, wrap_escape
from shell_prompt.core.environment import Environment
from shell_prompt.core.models import GitState

if TYPE_CHECKING:
    from shell_prompt.core.evaluator import RenderOptions


class ComponentName(Enum):
    """Known component names."""

    CWD = "cwd"
    ENV = "env"
    GIT_BRANCH = "git_branch"
    GIT_COMMIT = "git_commit"
    GIT_STASH = "git_stash"
    GIT_STATUS = "git_status"
    HOSTNAME = "hostname"
    JOBS = "jobs"
    USER = "user"


class CwdStyle(Enum):
    """How the current directory is abbreviated."""

    DEFAULT = "default"
    SHORT = "short"
    LONG = "long"


class Params(BaseModel):
    """Base for component parameters; components without options use it as is."""

    model_config = ConfigDict(frozen=True, extra="forbid")


class CwdParams(Params):
    style: CwdStyle = CwdStyle.DEFAULT
    underline_repo: bool = False


class EnvParams(Params):
    name: str = Field(min_length=1)


class GitStatusParams(Params):
    """Indicator symbols for each kind of pending change."""

    staged: str = "+"
    dirty: str = "*"
    untracked: str = "?"
    ahead: str = "↑"
    behind: str = "↓"


class HostnameParams(Params):
    fqdn: bool = False


PARAMS: dict[ComponentName, type[Params]] = {
    ComponentName.CWD: CwdParams,
    ComponentName.ENV: EnvParams,
    ComponentName.GIT_BRANCH: Params,
    ComponentName.GIT_COMMIT: Params,
    ComponentName.GIT_STASH: Params,
    ComponentName.GIT_STATUS: GitStatusParams,
    ComponentName.HOSTNAME: HostnameParams,
    ComponentName.JOBS: Params,
    ComponentName.USER: Params,
}

# Parameter set by the `{name=value}` shorthand
PRIMARY_PARAM: dict[ComponentName, str] = {
    ComponentName.CWD: "style",
    ComponentName.ENV: "name",
    ComponentName.HOSTNAME: "fqdn",
}


@dataclass(frozen=True)
class ComponentCall:
    """A component reference with validated parameters."""

    name: ComponentName
    params: Params = field(default_factory=Params)

    @classmethod
    def build(cls, name: ComponentName, options: dict[str, str]) -> ComponentCall:
        """Validate raw string options against the component's parameter model.

        Raises:
            pydantic.ValidationError: unknown key or malformed value
        """
        return cls(name=name, params=PARAMS[name].model_validate(options))


def resolve(call: ComponentCall, env: Environment, options: RenderOptions) -> str:
    """Render a component to text using only facts from the snapshot."""
    params = call.params
    git = env.git

    match call.name:
        case ComponentName.CWD:
            return format_cwd(env, params, options)  # type: ignore[arg-type]
        case ComponentName.ENV:
            return env.getenv(params.name)  # type: ignore[attr-defined]
        case ComponentName.GIT_BRANCH:
            if git is None:
                return ""
            return git.branch if git.branch is not None else git.short_commit
        case ComponentName.GIT_COMMIT:
            return git.short_commit if git is not None else ""
        case ComponentName.GIT_STASH:
            if git is None or git.stashes == 0:
                return ""
            return f"{git.stashes}+"
        case ComponentName.GIT_STATUS:
            return format_git_status(env, params)  # type: ignore[arg-type]
        case ComponentName.HOSTNAME:
            if params.fqdn:  # type: ignore[attr-defined]
                return env.hostname
            return env.hostname.split(".", 1)[0]
        case ComponentName.JOBS:
            return str(env.jobs) if env.jobs > 0 else ""
        case ComponentName.USER:
            return env.user
        case _:
            raise ValueError(f"Unknown component: {call.name}")


def format_git_status(env: Environment, params: GitStatusParams) -> str:
    git = env.git
    if git is None:
        return ""

    parts: list[str] = []
    if git.staged:
        parts.append(params.staged)
    if git.dirty:
        parts.append(params.dirty)
    if git.untracked:
        parts.append(params.untracked)
    if git.ahead:
        parts.append(f"{params.ahead}{git.ahead}")
    if git.behind:
        parts.append(f"{params.behind}{git.behind}")
    return "".join(parts)


def format_cwd(env: Environment, params: CwdParams, options: RenderOptions) -> str:
    """Format the current directory.

    The default style replaces the home directory with "~", short also
    collapses every segment but the last to its first character, long
    prints the absolute path untouched.
    """
    cwd = env.cwd
    if params.style != CwdStyle.LONG and cwd.is_relative_to(env.home):
        parts = ["~", *cwd.relative_to(env.home).parts]
    else:
        parts = list(cwd.parts)

    if params.style == CwdStyle.SHORT:
        parts = [part[:1] if part != "/" else part for part in parts[:-1]] + parts[-1:]

    repo_start = None
    if params.underline_repo and options.color and env.git is not None:
        repo_start = _repo_start_index(cwd, env.git, len(parts))

    if repo_start is None:
        return join_parts(parts)

    head = join_parts(parts[:repo_start])
    tail = join_parts(parts[repo_start:])
    if head and not head.endswith("/"):
        head += "/"
    underline = wrap_escape(UNDERLINE_ON, options.shell) + tail + wrap_escape(UNDERLINE_OFF, options.shell)
    return head + underline


def join_parts(parts: list[str]) -> str:
    """Join path segments, keeping a leading root."""
    if parts and parts[0] == "/":
        return "/" + "/".join(parts[1:])
    return "/".join(parts)


def _repo_start_index(cwd: Path, git: GitState, count: int) -> int | None:
    """Index of the segment naming the repository root, None if outside it.

    The prefix reported by git counts segments below the root, so a cwd
    reached through a symlink still lines up with the physical root.
    """
    if git.prefix is not None:
        depth = len(git.prefix.parts)
    elif cwd.is_relative_to(git.root):
        depth = len(cwd.relative_to(git.root).parts)
    else:
        return None
    return max(count - depth - 1, 0)
