"""Repository inspection through the git command line."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import replace
from pathlib import Path

from shell_prompt.core.models import EnvironmentQueryFailure, GitState

logger = logging.getLogger(__name__)

NOT_A_REPOSITORY = "not a git repository"


def run_git(args: list[str], cwd: Path, timeout: float) -> subprocess.CompletedProcess[str]:
    """Run a git command and capture its output.

    Raises:
        EnvironmentQueryFailure: git is missing or timed out
    """
    try:
        return subprocess.run(
            ["git", *args],
            capture_output=True,
            encoding="utf-8",
            errors="surrogateescape",
            timeout=timeout,
            cwd=cwd,
        )
    except subprocess.TimeoutExpired as e:
        raise EnvironmentQueryFailure(f"git {args[0]} timed out after {timeout}s") from e
    except OSError as e:
        raise EnvironmentQueryFailure(f"could not run git: {e}") from e


def parse_porcelain_v2(output: str, root: Path, prefix: Path | None = None) -> GitState:
    """Parse `git status --porcelain=v2 --branch --show-stash` output.

    Args:
        output: Raw command output
        root: Top-level directory of the working tree
        prefix: Inspected directory relative to root

    Returns:
        GitState describing the repository
    """
    branch: str | None = None
    commit: str | None = None
    staged = dirty = untracked = False
    ahead = behind = stashes = 0

    for line in output.splitlines():
        if line.startswith("# "):
            key, _, value = line[2:].partition(" ")
            match key:
                case "branch.oid":
                    commit = None if value == "(initial)" else value
                case "branch.head":
                    branch = None if value == "(detached)" else value
                case "branch.ab":
                    for part in value.split():
                        if part.startswith("+"):
                            ahead = int(part[1:])
                        elif part.startswith("-"):
                            behind = int(part[1:])
                case "stash":
                    stashes = int(value)
            continue

        kind, _, rest = line.partition(" ")
        match kind:
            case "1" | "2" | "u":
                xy = rest[:2]
                if kind == "u":
                    staged = dirty = True
                    continue
                if xy[:1] not in (".", ""):
                    staged = True
                if xy[1:2] not in (".", ""):
                    dirty = True
            case "?":
                untracked = True

    return GitState(
        root=root,
        prefix=prefix,
        branch=branch,
        commit=commit,
        staged=staged,
        dirty=dirty,
        untracked=untracked,
        ahead=ahead,
        behind=behind,
        stashes=stashes,
    )


def has_stash_header(output: str) -> bool:
    """Check for the `# stash` line that only git 2.35+ prints."""
    return any(line.startswith("# stash ") for line in output.splitlines())


def count_stashes(path: Path, timeout: float) -> int:
    """Count stash entries by walking the stash reflog."""
    result = run_git(["rev-list", "--walk-reflogs", "--count", "refs/stash"], path, timeout)
    if result.returncode != 0:
        # no refs/stash means nothing is stashed
        return 0
    try:
        return int(result.stdout.strip())
    except ValueError:
        raise EnvironmentQueryFailure(f"unexpected stash count: {result.stdout.strip()!r}") from None


def inspect_repository(path: Path, timeout: float = 1.0, untracked: bool = True) -> GitState | None:
    """Inspect the repository containing path.

    Args:
        path: Directory to inspect
        timeout: Seconds allowed per git invocation
        untracked: Scan for untracked files

    Returns:
        GitState, or None when path is not inside a working tree

    Raises:
        EnvironmentQueryFailure: git could not be consulted
    """
    result = run_git(["rev-parse", "--show-toplevel", "--show-prefix"], path, timeout)
    if result.returncode != 0:
        if NOT_A_REPOSITORY in result.stderr.lower():
            logger.debug("%s is not inside a git repository", path)
            return None
        raise EnvironmentQueryFailure(f"git rev-parse failed: {result.stderr.strip()}")

    lines = result.stdout.splitlines()
    if not lines:
        raise EnvironmentQueryFailure("git rev-parse printed no top-level directory")
    root = Path(lines[0])
    prefix = Path(lines[1]) if len(lines) > 1 else Path()

    untracked_flag = "--untracked-files=normal" if untracked else "--untracked-files=no"
    result = run_git(["status", "--porcelain=v2", "--branch", "--show-stash", untracked_flag], path, timeout)
    if result.returncode != 0 and "show-stash" in result.stderr:
        # git before 2.16 has no --show-stash
        result = run_git(["status", "--porcelain=v2", "--branch", untracked_flag], path, timeout)
    if result.returncode != 0:
        raise EnvironmentQueryFailure(f"git status failed: {result.stderr.strip()}")

    state = parse_porcelain_v2(result.stdout, root, prefix)
    if not has_stash_header(result.stdout):
        state = replace(state, stashes=count_stashes(path, timeout))
    logger.debug("git state for %s: %s", path, state)
    return state
