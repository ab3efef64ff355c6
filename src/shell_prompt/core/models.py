"""Data models shared by the environment collector and the git inspector."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


class EnvironmentQueryFailure(Exception):
    """An external fact source could not be consulted."""


@dataclass(frozen=True)
class GitState:
    """Repository facts for the current directory.

    Attributes:
        root: Top-level directory of the working tree
        prefix: Current directory relative to root, None when unknown
        branch: Current branch name, None when HEAD is detached
        commit: Full HEAD commit id, None in a repository without commits
        staged: Index differs from HEAD
        dirty: Working tree differs from the index
        untracked: Untracked files are present
        ahead: Commits ahead of the upstream branch
        behind: Commits behind the upstream branch
        stashes: Number of stash entries
    """

    root: Path
    prefix: Path | None = None
    branch: str | None = None
    commit: str | None = None
    staged: bool = False
    dirty: bool = False
    untracked: bool = False
    ahead: int = 0
    behind: int = 0
    stashes: int = 0

    @property
    def short_commit(self) -> str:
        """Abbreviated commit id, empty when there is no commit."""
        return self.commit[:7] if self.commit else ""
