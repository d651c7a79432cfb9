"""Resolve the GOPATH package directory of Go-producing rules."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import StrEnum
from pathlib import PurePosixPath
from typing import TYPE_CHECKING

from buildgraph.errors import InvalidImportPathError
from buildgraph.labels import WORKSPACE_SEPARATOR, Label, parse_label

if TYPE_CHECKING:
    from buildgraph.index import GraphIndex
    from buildgraph.model import Rule

LOGGER = logging.getLogger(__name__)

PREFIX_REFERENCE_NAME = "go_prefix"
DEFAULT_LIBRARY_NAME = "go_default_library"


class ImportPathSource(StrEnum):
    """Where an import path was found."""

    IMPORTPATH_ATTR = "importpath"
    PREFIX_INPUT = "prefix_input"
    GO_PREFIX_ATTR = "go_prefix_attr"


@dataclass(frozen=True)
class ImportPath:
    """Resolved import path for one rule.

    Parameters
    ----------
    path
        Import path, or the declared prefix for prefix-derived results.
    source
        Strategy that produced the path.
    """

    path: str
    source: ImportPathSource

    @property
    def legacy(self) -> bool:
        """Return whether the path is a bare prefix needing a package sub-path.

        Returns
        -------
        bool
            True when the path came from a prefix declaration.
        """
        return self.source is not ImportPathSource.IMPORTPATH_ATTR

    def package_dir(self, rule_label: Label, *, include_name: bool = True) -> str:
        """Return the package directory under ``src/`` for a rule.

        Prefix-derived paths append the rule's package and, unless it is the
        default library or ``include_name`` is false, its name.

        Parameters
        ----------
        rule_label
            Label of the rule owning the files.
        include_name
            Whether a non-default rule name adds its own sub-directory.

        Returns
        -------
        str
            Slash-separated package directory.

        Raises
        ------
        InvalidImportPathError
            Raised when the directory is absolute or contains ``..``.
        """
        if self.legacy:
            name = rule_label.name if include_name else ""
            if name == DEFAULT_LIBRARY_NAME:
                name = ""
            parts = (self.path, rule_label.package, name)
            package_dir = "/".join(part.strip("/") for part in parts if part.strip("/"))
        else:
            package_dir = self.path
        candidate = PurePosixPath(package_dir)
        if candidate.is_absolute() or ".." in candidate.parts:
            raise InvalidImportPathError(str(rule_label), package_dir)
        return package_dir


type ImportPathStrategy = Callable[[Rule, GraphIndex], ImportPath | None]


def from_importpath_attr(rule: Rule, index: GraphIndex) -> ImportPath | None:
    """Use a direct ``importpath`` attribute verbatim.

    Returns
    -------
    ImportPath | None
        Resolved path, or None when the attribute is absent or empty.
    """
    _ = index
    value = rule.string_attr("importpath")
    if not value:
        return None
    return ImportPath(path=value, source=ImportPathSource.IMPORTPATH_ATTR)


def from_prefix_input(rule: Rule, index: GraphIndex) -> ImportPath | None:
    """Follow the first rule input named ``go_prefix`` to its declaration.

    Returns
    -------
    ImportPath | None
        Resolved prefix, or None when no such input is registered.
    """
    for inp in rule.rule_inputs:
        if parse_label(inp).name != PREFIX_REFERENCE_NAME:
            continue
        prefix = index.prefixes.get(inp)
        if not prefix:
            return None
        return ImportPath(path=prefix, source=ImportPathSource.PREFIX_INPUT)
    return None


def from_go_prefix_attr(rule: Rule, index: GraphIndex) -> ImportPath | None:
    """Resolve a ``go_prefix`` label attribute within the rule's workspace.

    Returns
    -------
    ImportPath | None
        Resolved prefix, or None when the attribute or declaration is missing.
    """
    value = rule.string_attr("go_prefix")
    if not value:
        return None
    key = value
    if value.startswith(WORKSPACE_SEPARATOR):
        key = parse_label(rule.name).workspace + value
    prefix = index.prefixes.get(key)
    if not prefix:
        return None
    return ImportPath(path=prefix, source=ImportPathSource.GO_PREFIX_ATTR)


IMPORT_PATH_STRATEGIES: tuple[ImportPathStrategy, ...] = (
    from_importpath_attr,
    from_prefix_input,
    from_go_prefix_attr,
)


def resolve_import_path(
    rule: Rule,
    index: GraphIndex,
    strategies: Sequence[ImportPathStrategy] = IMPORT_PATH_STRATEGIES,
) -> ImportPath | None:
    """Try each strategy in order and return the first hit.

    Parameters
    ----------
    rule
        Go-producing rule.
    index
        Lookup tables from the classification pass.
    strategies
        Ordered resolution strategies.

    Returns
    -------
    ImportPath | None
        Resolved import path, or None when the rule must be skipped.
    """
    for strategy in strategies:
        resolved = strategy(rule, index)
        if resolved is not None:
            LOGGER.debug("Resolved %r via %s -> %r", rule.name, resolved.source, resolved.path)
            return resolved
    return None


__all__ = [
    "DEFAULT_LIBRARY_NAME",
    "IMPORT_PATH_STRATEGIES",
    "PREFIX_REFERENCE_NAME",
    "ImportPath",
    "ImportPathSource",
    "ImportPathStrategy",
    "from_go_prefix_attr",
    "from_importpath_attr",
    "from_prefix_input",
    "resolve_import_path",
]
