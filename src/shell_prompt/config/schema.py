"""Pydantic models for configuration schema."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_TEMPLATE = "{cwd} {git_branch} $ "


class GitSettings(BaseModel):
    """Repository inspection options."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    enabled: bool = Field(default=True, description="Inspect git repositories at all")
    timeout: float = Field(default=1.0, gt=0, description="Seconds allowed per git invocation")
    untracked: bool = Field(default=True, description="Scan for untracked files")


class Config(BaseModel):
    """Top-level configuration."""

    model_config = ConfigDict(extra="forbid")

    template: str = Field(default=DEFAULT_TEMPLATE, description="Prompt template")
    shell: Literal["zsh", "bash", "plain"] = Field(
        default="plain", description="Escape style for zero-width sequences"
    )
    color: bool = Field(default=True, description="Enable/disable colors")
    git: GitSettings = Field(default_factory=GitSettings)

    @field_validator("shell", mode="before")
    @classmethod
    def parse_shell(cls, v: str) -> str:
        """Accept shell names in any case."""
        return v.lower() if isinstance(v, str) else v
