"""GOPATH projection of Go-producing build rules."""

from gopath.errors import ProjectionError
from gopath.importpath import ImportPath, ImportPathSource, resolve_import_path
from gopath.pipeline import ProjectionRequest, project_workspace
from gopath.projector import (
    GopathProjector,
    ProjectedLink,
    ProjectionLayout,
    ProjectionReport,
    ensure_directory,
    ensure_symlink,
)
from gopath.sources import SourceFile, SourceKind, rule_sources

__all__ = [
    "GopathProjector",
    "ImportPath",
    "ImportPathSource",
    "ProjectedLink",
    "ProjectionError",
    "ProjectionLayout",
    "ProjectionReport",
    "ProjectionRequest",
    "SourceFile",
    "SourceKind",
    "ensure_directory",
    "ensure_symlink",
    "project_workspace",
    "resolve_import_path",
    "rule_sources",
]
