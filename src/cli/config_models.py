"""Typed configuration model for bazel-gopath."""

from __future__ import annotations

from serde_msgspec import StructBaseStrict


class GopathConfig(StructBaseStrict, frozen=True):
    """Configuration file payload.

    Relative ``workspace`` values are resolved against the current directory;
    relative ``out_gopath`` values against the workspace.
    """

    bazel_bin: str | None = None
    workspace: str | None = None
    out_gopath: str | None = None


__all__ = ["GopathConfig"]
