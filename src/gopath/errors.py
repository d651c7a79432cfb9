"""Error taxonomy for GOPATH projection.

Fatal conditions raise subclasses of :class:`GopathError`. Targets whose
import path cannot be resolved are not errors; they are reported as skipped.
"""

from __future__ import annotations

from pathlib import Path

from buildgraph.errors import (
    GopathError,
    InvalidImportPathError,
    MalformedGraphError,
    MalformedLabelError,
    MissingProtoSourcesError,
    QueryDecodeError,
    QueryError,
)


class ProjectionError(GopathError):
    """Raised when a directory or symlink cannot be created."""

    def __init__(self, action: str, path: Path, exc: OSError) -> None:
        msg = f"Failed to {action} {str(path)!r}: {exc.strerror or exc}"
        super().__init__(msg)
        self.action = action
        self.path = path


__all__ = [
    "GopathError",
    "InvalidImportPathError",
    "MalformedGraphError",
    "MalformedLabelError",
    "MissingProtoSourcesError",
    "ProjectionError",
    "QueryDecodeError",
    "QueryError",
]
