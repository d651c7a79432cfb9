"""Parse Bazel labels into workspace, package and name parts."""

from __future__ import annotations

from buildgraph.errors import MalformedLabelError
from serde_msgspec import StructBaseHotPath

WORKSPACE_SEPARATOR = "//"
NAME_SEPARATOR = ":"


class Label(StructBaseHotPath, frozen=True):
    """Parsed build-graph label.

    Parameters
    ----------
    workspace
        Workspace part, e.g. ``@io_grpc``. Empty for the main workspace.
    package
        Slash-separated package path.
    name
        Target name within the package.
    """

    workspace: str
    package: str
    name: str

    @property
    def is_main_workspace(self) -> bool:
        """Return whether the label belongs to the main workspace.

        Returns
        -------
        bool
            True when the workspace part is empty.
        """
        return not self.workspace

    def with_name(self, name: str) -> Label:
        """Return a sibling label in the same package.

        Returns
        -------
        Label
            Label sharing workspace and package with ``name`` replaced.
        """
        return Label(workspace=self.workspace, package=self.package, name=name)

    def __str__(self) -> str:
        return f"{self.workspace}//{self.package}:{self.name}"


def parse_label(text: str) -> Label:
    """Split ``text`` into a Label.

    The workspace is everything before the first ``//``; the remainder is
    split on its first ``:`` into package and name.

    Parameters
    ----------
    text
        Label string such as ``@ws//pkg/sub:target``.

    Returns
    -------
    Label
        Parsed label.

    Raises
    ------
    MalformedLabelError
        Raised when either separator is absent.
    """
    workspace, sep, rest = text.partition(WORKSPACE_SEPARATOR)
    if not sep:
        raise MalformedLabelError(text, WORKSPACE_SEPARATOR)
    package, sep, name = rest.partition(NAME_SEPARATOR)
    if not sep:
        raise MalformedLabelError(text, NAME_SEPARATOR)
    return Label(workspace=workspace, package=package, name=name)


__all__ = ["Label", "MalformedLabelError", "parse_label"]
