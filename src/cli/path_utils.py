"""Anchor workspace and GOPATH locations taken from flags or config."""

from __future__ import annotations

from pathlib import Path


def _anchor(base: Path, value: Path | str) -> Path:
    path = Path(value).expanduser()
    return path if path.is_absolute() else base / path


def resolve_workspace(value: Path | str | None, *, cwd: Path) -> Path | None:
    """Return the absolute workspace root.

    Parameters
    ----------
    value
        Workspace from ``--workspace`` or config; relative to ``cwd``.
    cwd
        Directory the command runs in.

    Returns
    -------
    Path | None
        Resolved workspace, or None when no workspace was given.
    """
    if value is None:
        return None
    return _anchor(cwd, value).resolve()


def resolve_out_gopath(value: Path | str | None, *, workspace: Path) -> Path | None:
    """Return the GOPATH destination root.

    Relative values are anchored at the workspace, not the current directory,
    so a checked-in config means the same tree wherever the command runs.

    Returns
    -------
    Path | None
        Destination root, or None to use the layout default.
    """
    if value is None:
        return None
    return _anchor(workspace, value)


__all__ = ["resolve_out_gopath", "resolve_workspace"]
