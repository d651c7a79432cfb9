"""Shared help-panel groups for the bazel-gopath CLI."""

from __future__ import annotations

from cyclopts import Group

session_group = Group(
    "Session",
    help="Session and run context options.",
    sort_key=0,
)

workspace_group = Group(
    "Workspace",
    help="Locate the Bazel workspace and the query tool.",
    sort_key=1,
)

output_group = Group(
    "Output",
    help="Configure the GOPATH destination tree.",
    sort_key=2,
)

admin_group = Group(
    "Admin",
    help="Administrative commands and help.",
    sort_key=99,
)

__all__ = [
    "admin_group",
    "output_group",
    "session_group",
    "workspace_group",
]
