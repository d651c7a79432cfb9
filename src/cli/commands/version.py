"""Version reporting for the bazel-gopath CLI."""

from __future__ import annotations

import platform
import sys
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version

import msgspec

from serde_msgspec import StructBaseStrict

DISTRIBUTION = "bazel-gopath"
RUNTIME_DEPENDENCIES = ("cyclopts", "msgspec", "protobuf", "rich")


class VersionInfo(StructBaseStrict, frozen=True):
    """Installed versions of bazel-gopath and its runtime stack."""

    name: str
    version: str
    python: str
    platform: str
    dependencies: dict[str, str | None]


def get_version() -> str:
    """Get the bazel-gopath package version string.

    Returns
    -------
    str
        Version string, or "0.0.0-dev" when running from a source checkout.
    """
    return _installed_version(DISTRIBUTION) or "0.0.0-dev"


def get_version_info() -> VersionInfo:
    """Collect package, interpreter and dependency versions.

    Returns
    -------
    VersionInfo
        Versions; uninstalled dependencies map to None.
    """
    return VersionInfo(
        name=DISTRIBUTION,
        version=get_version(),
        python=platform.python_version(),
        platform=platform.platform(),
        dependencies={dep: _installed_version(dep) for dep in RUNTIME_DEPENDENCIES},
    )


def version_command() -> int:
    """Print version information as JSON.

    Returns
    -------
    int
        Exit status code.
    """
    encoded = msgspec.json.encode(get_version_info(), order="deterministic")
    sys.stdout.write(msgspec.json.format(encoded, indent=2).decode("utf-8") + "\n")
    return 0


def _installed_version(name: str) -> str | None:
    try:
        return pkg_version(name)
    except PackageNotFoundError:
        return None


__all__ = [
    "RUNTIME_DEPENDENCIES",
    "VersionInfo",
    "get_version",
    "get_version_info",
    "version_command",
]
