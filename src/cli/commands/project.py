"""Project Bazel Go targets into a GOPATH tree."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

from cyclopts import Parameter

from buildgraph.query import DEFAULT_BAZEL_BIN
from cli.config_models import GopathConfig
from cli.context import RunContext
from cli.exit_codes import ExitCode
from cli.groups import output_group, workspace_group
from cli.path_utils import resolve_out_gopath, resolve_workspace
from cli.result import CliResult
from gopath.pipeline import ProjectionRequest, project_workspace

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProjectOptions:
    """CLI overrides for a projection run."""

    workspace: Path | None = None
    bazel_bin: str | None = None
    out_gopath: Path | None = None


def build_projection_request(
    options: ProjectOptions,
    config: GopathConfig,
    *,
    cwd: Path | None = None,
) -> ProjectionRequest | None:
    """Merge CLI overrides with config file values.

    Parameters
    ----------
    options
        Values from flags or environment variables.
    config
        Values from the configuration file.
    cwd
        Directory relative workspace paths are anchored at.

    Returns
    -------
    ProjectionRequest | None
        Resolved request, or None when no workspace is configured.
    """
    workspace = resolve_workspace(options.workspace or config.workspace, cwd=cwd or Path.cwd())
    if workspace is None:
        return None
    out_gopath = resolve_out_gopath(options.out_gopath or config.out_gopath, workspace=workspace)
    return ProjectionRequest(
        workspace=workspace,
        bazel_bin=options.bazel_bin or config.bazel_bin or DEFAULT_BAZEL_BIN,
        out_gopath=out_gopath,
    )


def project_command(
    *,
    workspace: Annotated[
        Path | None,
        Parameter(
            name=["--workspace", "-w"],
            help="Location of the Bazel workspace.",
            env_var="BAZEL_GOPATH_WORKSPACE",
            group=workspace_group,
        ),
    ] = None,
    bazel_bin: Annotated[
        str | None,
        Parameter(
            name="--bazel-bin",
            help=f"Location of the bazel binary (default: {DEFAULT_BAZEL_BIN}).",
            env_var="BAZEL_GOPATH_BAZEL_BIN",
            group=workspace_group,
        ),
    ] = None,
    out_gopath: Annotated[
        Path | None,
        Parameter(
            name=["--out-gopath", "-o"],
            help="GOPATH destination root. Defaults to <workspace>/.gopath.",
            env_var="BAZEL_GOPATH_OUT",
            group=output_group,
        ),
    ] = None,
    run_context: Annotated[RunContext | None, Parameter(parse=False)] = None,
) -> CliResult:
    """Query the workspace and link its Go sources into a GOPATH tree.

    Returns
    -------
    CliResult
        Summary of links created, already present and targets skipped.
    """
    t0 = time.perf_counter()
    config = run_context.config if run_context is not None else GopathConfig()
    request = build_projection_request(
        ProjectOptions(workspace=workspace, bazel_bin=bazel_bin, out_gopath=out_gopath),
        config,
    )
    if request is None:
        LOGGER.error("Requires at least --workspace")
        return CliResult.error(ExitCode.CONFIG_ERROR, summary="Requires at least --workspace.")

    report = project_workspace(request)
    summary = (
        f"GOPATH {request.layout.out_gopath}: "
        f"{report.created_count} links created, "
        f"{report.existing_count} already present, "
        f"{len(report.skipped)} targets skipped."
    )
    return CliResult.success(
        summary=summary,
        metrics={"duration_ms": (time.perf_counter() - t0) * 1000.0},
    )


__all__ = ["ProjectOptions", "build_projection_request", "project_command"]
