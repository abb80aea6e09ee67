"""Configuration schema for ws-affected.yaml."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class WsAffectedConfig(BaseModel):
    """Tool defaults read from ws-affected.yaml.

    Every field can be overridden from the command line.

    Attributes:
        base: Base git reference to compare against.
        head: Head git reference to compare.
        concurrency: Task concurrency; 0 means CPU count, negative values
            are subtracted from the CPU count.
        print_success: Print output of successful scripts as well.
        dep_types: Dependency categories used by list commands.
        transitive: Walk dependents/dependencies transitively.
        client: Package manager executable used to run scripts.
        env: Extra environment variables for every task.
    """

    model_config = ConfigDict(extra="forbid")

    base: str = "master"
    head: str = "HEAD"
    concurrency: int = 0
    print_success: bool = False
    dep_types: Literal["all", "prod"] = "all"
    transitive: bool = False
    client: str = Field(default="npm", min_length=1)
    env: dict[str, str] = Field(default_factory=dict)
