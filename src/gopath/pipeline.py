"""End-to-end projection: query, decode, classify, link."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from buildgraph.index import build_graph_index
from buildgraph.query import DEFAULT_BAZEL_BIN, QueryOptions, run_query
from buildgraph.query_proto import decode_query_result
from gopath.projector import GopathProjector, ProjectionLayout, ProjectionReport

LOGGER = logging.getLogger(__name__)

type QueryRunner = Callable[[QueryOptions], bytes]


@dataclass(frozen=True)
class ProjectionRequest:
    """Inputs of one projection run.

    Parameters
    ----------
    workspace
        Absolute Bazel workspace root.
    bazel_bin
        Query tool executable.
    out_gopath
        Destination GOPATH root; defaults to ``<workspace>/.gopath``.
    """

    workspace: Path
    bazel_bin: str = DEFAULT_BAZEL_BIN
    out_gopath: Path | None = None

    @property
    def layout(self) -> ProjectionLayout:
        """Return the filesystem layout for this request."""
        return ProjectionLayout.for_workspace(self.workspace, self.out_gopath)


def project_workspace(
    request: ProjectionRequest,
    *,
    query_runner: QueryRunner = run_query,
) -> ProjectionReport:
    """Project a workspace's Go rules into its GOPATH tree.

    The query completes and every lookup table is built before the first
    link is created.

    Parameters
    ----------
    request
        Workspace, query tool and destination.
    query_runner
        Callable returning serialized QueryResult bytes.

    Returns
    -------
    ProjectionReport
        Links ensured and rules skipped.
    """
    data = query_runner(QueryOptions(workspace=request.workspace, bazel_bin=request.bazel_bin))
    targets = decode_query_result(data)
    index = build_graph_index(targets)
    layout = request.layout
    LOGGER.info(
        "Projecting %d Go rules from %s into %s",
        len(index.go_rules),
        layout.workspace,
        layout.out_gopath,
    )
    return GopathProjector(layout).project(index)


__all__ = ["ProjectionRequest", "QueryRunner", "project_workspace"]
