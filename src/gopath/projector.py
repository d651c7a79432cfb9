"""Materialize the GOPATH symlink tree for resolved Go rules."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from buildgraph.labels import parse_label
from gopath.errors import ProjectionError
from gopath.importpath import resolve_import_path
from gopath.sources import SourceFile, SourceKind, rule_sources

if TYPE_CHECKING:
    from buildgraph.index import GraphIndex
    from buildgraph.model import Rule
    from gopath.importpath import ImportPath

LOGGER = logging.getLogger(__name__)

DEFAULT_GOPATH_DIRNAME = ".gopath"
GENFILES_DIRNAME = "bazel-genfiles"
EXTERNAL_DIRNAME = "external"
SRC_DIRNAME = "src"
DIR_MODE = 0o777


def ensure_directory(path: Path, *, root: Path, mode: int = DIR_MODE) -> None:
    """Create ``path`` and its missing ancestors below ``root``.

    Ancestors are created bottom-up by recursion. An existing entry counts as
    success at every level so repeated or concurrent runs do not fail.

    Parameters
    ----------
    path
        Directory to create.
    root
        Directory where the recursion stops; it is never created here.
    mode
        Permission bits for created directories.

    Raises
    ------
    ProjectionError
        Raised for any failure other than the entry already existing.
    """
    if path == root or path.parent == path:
        return
    ensure_directory(path.parent, root=root, mode=mode)
    try:
        path.mkdir(mode=mode)
    except FileExistsError:
        return
    except OSError as exc:
        raise ProjectionError("make parent directories", path, exc) from exc


def ensure_symlink(source: Path, dest: Path) -> bool:
    """Link ``dest`` to ``source`` unless ``dest`` already exists.

    Returns
    -------
    bool
        True when a new link was created, False when one was already there.

    Raises
    ------
    ProjectionError
        Raised for any failure other than the entry already existing.
    """
    try:
        dest.symlink_to(source)
    except FileExistsError:
        return False
    except OSError as exc:
        raise ProjectionError(f"symlink {str(source)!r} ->", dest, exc) from exc
    return True


@dataclass(frozen=True)
class ProjectionLayout:
    """Filesystem roots used to compute link sources and destinations.

    Parameters
    ----------
    workspace
        Absolute Bazel workspace root.
    out_gopath
        Destination GOPATH root.
    """

    workspace: Path
    out_gopath: Path

    @classmethod
    def for_workspace(cls, workspace: Path, out_gopath: Path | None = None) -> ProjectionLayout:
        """Build a layout, defaulting the GOPATH to ``<workspace>/.gopath``.

        Returns
        -------
        ProjectionLayout
            Layout rooted at ``workspace``.
        """
        return cls(
            workspace=workspace,
            out_gopath=out_gopath or workspace / DEFAULT_GOPATH_DIRNAME,
        )

    @property
    def src_root(self) -> Path:
        """Return ``<out_gopath>/src``."""
        return self.out_gopath / SRC_DIRNAME

    @property
    def genfiles_root(self) -> Path:
        """Return the root of generated outputs."""
        return self.workspace / GENFILES_DIRNAME

    def workspace_root(self, workspace: str) -> Path:
        """Return where sources of ``workspace`` are checked out.

        Returns
        -------
        Path
            Main workspace root, or the external repository directory.
        """
        if not workspace:
            return self.workspace
        return (
            self.workspace
            / f"bazel-{self.workspace.name}"
            / EXTERNAL_DIRNAME
            / workspace.lstrip("@")
        )

    def source_path(self, source: SourceFile) -> Path:
        """Return the absolute path a link should point at.

        Returns
        -------
        Path
            Location of the literal or generated file.
        """
        label = source.label
        if source.kind is SourceKind.GENERATED:
            base = self.genfiles_root
            if label.workspace:
                base = base / EXTERNAL_DIRNAME / label.workspace.lstrip("@")
        else:
            base = self.workspace_root(label.workspace)
        return base.joinpath(label.package, label.name)

    def dest_path(self, package_dir: str, filename: str) -> Path:
        """Return the link location for ``filename`` in ``package_dir``.

        Returns
        -------
        Path
            Path under ``<out_gopath>/src``.
        """
        return self.src_root.joinpath(package_dir, filename)


@dataclass(frozen=True)
class ProjectedLink:
    """One link in the GOPATH tree."""

    dest: Path
    source: Path
    created: bool


@dataclass(frozen=True)
class ProjectionReport:
    """Outcome of a projection run.

    Parameters
    ----------
    links
        Every link the run ensured, in projection order.
    skipped
        Labels of Go rules whose import path could not be resolved.
    """

    links: tuple[ProjectedLink, ...] = ()
    skipped: tuple[str, ...] = ()

    @property
    def created_count(self) -> int:
        """Return the number of links created by this run."""
        return sum(1 for link in self.links if link.created)

    @property
    def existing_count(self) -> int:
        """Return the number of links that were already present."""
        return sum(1 for link in self.links if not link.created)


class GopathProjector:
    """Project Go rules from a graph index onto a GOPATH tree."""

    def __init__(self, layout: ProjectionLayout) -> None:
        self.layout = layout

    def prepare(self) -> None:
        """Create the destination root.

        Raises
        ------
        ProjectionError
            Raised when the root cannot be created for a reason other than
            already existing.
        """
        try:
            self.layout.out_gopath.mkdir(mode=DIR_MODE)
        except FileExistsError:
            return
        except OSError as exc:
            raise ProjectionError("create GOPATH root", self.layout.out_gopath, exc) from exc

    def link(self, import_path: ImportPath, rule: Rule, source: SourceFile) -> ProjectedLink:
        """Ensure the link for one source file of ``rule``.

        Returns
        -------
        ProjectedLink
            Destination, source and whether the link was new.

        Raises
        ------
        InvalidImportPathError
            Raised before any filesystem change when the package directory
            would fall outside ``<out_gopath>/src``.
        """
        package_dir = import_path.package_dir(parse_label(rule.name), include_name=source.nested)
        src = self.layout.source_path(source)
        dest = self.layout.dest_path(package_dir, source.filename)
        ensure_directory(dest.parent, root=self.layout.out_gopath)
        created = ensure_symlink(src, dest)
        LOGGER.debug("%s %s -> %s", "Linked" if created else "Exists", dest, src)
        return ProjectedLink(dest=dest, source=src, created=created)

    def project_rule(self, rule: Rule, index: GraphIndex) -> list[ProjectedLink] | None:
        """Project every source of one Go-producing rule.

        Returns
        -------
        list[ProjectedLink] | None
            Links for the rule, or None when its import path is unresolved.
        """
        import_path = resolve_import_path(rule, index)
        if import_path is None:
            LOGGER.warning("Failed to discover import path for %r; skipping", rule.name)
            return None
        return [self.link(import_path, rule, source) for source in rule_sources(rule, index)]

    def project(self, index: GraphIndex) -> ProjectionReport:
        """Project all Go-producing rules of ``index`` in graph order.

        Returns
        -------
        ProjectionReport
            Links ensured and rules skipped.
        """
        self.prepare()
        links: list[ProjectedLink] = []
        skipped: list[str] = []
        for rule in index.go_rules:
            rule_links = self.project_rule(rule, index)
            if rule_links is None:
                skipped.append(rule.name)
                continue
            links.extend(rule_links)
        return ProjectionReport(links=tuple(links), skipped=tuple(skipped))


__all__ = [
    "DEFAULT_GOPATH_DIRNAME",
    "GENFILES_DIRNAME",
    "GopathProjector",
    "ProjectedLink",
    "ProjectionLayout",
    "ProjectionReport",
    "ensure_directory",
    "ensure_symlink",
]
