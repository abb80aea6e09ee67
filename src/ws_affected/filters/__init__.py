"""Workspace filtering and selection."""

from ws_affected.filters.affected import find_owner, get_touched_workspaces, resolve_affected
from ws_affected.filters.selection import (
    expand_workspaces,
    get_affected_workspaces,
    select_workspaces,
    validate_names,
)

__all__ = [
    "expand_workspaces",
    "find_owner",
    "get_affected_workspaces",
    "get_touched_workspaces",
    "resolve_affected",
    "select_workspaces",
    "validate_names",
]
