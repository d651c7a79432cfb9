"""Configuration management commands."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Annotated

from cyclopts import Parameter

from cli.config_loader import CONFIG_FILENAME, ConfigResolution, resolve_config
from cli.context import RunContext
from cli.groups import admin_group

_TEMPLATE = """# bazel-gopath.toml

# Query tool executable.
# bazel_bin = "bazel"

# Bazel workspace root, relative to the directory bazel-gopath runs in.
# workspace = "."

# GOPATH destination root, relative to the workspace.
# out_gopath = ".gopath"
"""


def show_config(
    *,
    run_context: Annotated[RunContext | None, Parameter(parse=False)] = None,
) -> int:
    """Show the effective configuration payload.

    Returns
    -------
    int
        Exit status code.
    """
    if run_context is None:
        resolution = resolve_config(None)
    else:
        resolution = ConfigResolution(
            config=run_context.config,
            location=run_context.config_location,
        )
    payload = resolution.to_display_dict()
    sys.stdout.write(json.dumps(payload, indent=2, sort_keys=True) + "\n")
    return 0


def init_config(
    *,
    path: Annotated[
        Path | None,
        Parameter(
            name="--path",
            help=f"Path to write the configuration template (default: {CONFIG_FILENAME}).",
        ),
    ] = None,
    force: Annotated[
        bool,
        Parameter(
            name="--force",
            help="Overwrite existing config file.",
            group=admin_group,
        ),
    ] = False,
) -> int:
    """Write a configuration template to disk.

    Returns
    -------
    int
        Exit status code.

    Raises
    ------
    FileExistsError
        Raised when the target path exists and ``force`` is false.
    """
    target_path = path if path is not None else Path(CONFIG_FILENAME)
    if target_path.exists() and not force:
        msg = f"Config file already exists: {target_path}."
        raise FileExistsError(msg)
    target_path.write_text(_TEMPLATE, encoding="utf-8")
    return 0


__all__ = ["init_config", "show_config"]
