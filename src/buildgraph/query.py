"""Run the Bazel query that selects Go and proto build-graph nodes."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

LOGGER = logging.getLogger(__name__)

GO_GRAPH_QUERY = "deps(kind('_?go_.*|proto_compile|proto_library rule', //...))"
DEFAULT_BAZEL_BIN = "bazel"


@dataclass(frozen=True)
class QueryOptions:
    """Configure the build-graph query invocation."""

    workspace: Path
    bazel_bin: str = DEFAULT_BAZEL_BIN
    expression: str = GO_GRAPH_QUERY
    keep_going: bool = True


def query_command(opts: QueryOptions) -> list[str]:
    """Return the argv for the proto-encoded graph query.

    Returns
    -------
    list[str]
        Command line passed to the query tool.
    """
    cmd = [opts.bazel_bin, "query", "--output=proto"]
    if opts.keep_going:
        cmd.append("-k")
    cmd.append(opts.expression)
    return cmd


def run_query(opts: QueryOptions) -> bytes:
    """Run the query tool and return its captured standard output.

    Standard error is inherited so query diagnostics reach the user as-is.
    A non-zero exit status is only logged: ``-k`` queries report errors
    alongside a usable partial graph.

    Parameters
    ----------
    opts
        Query invocation options.

    Returns
    -------
    bytes
        Serialized QueryResult bytes.
    """
    cmd = query_command(opts)
    LOGGER.debug("Running %s in %s", cmd, opts.workspace)
    proc = subprocess.run(
        cmd,
        cwd=str(opts.workspace),
        stdout=subprocess.PIPE,
        check=False,
    )
    if proc.returncode != 0:
        LOGGER.warning("%s query returned exit status %d", opts.bazel_bin, proc.returncode)
    return proc.stdout


__all__ = [
    "DEFAULT_BAZEL_BIN",
    "GO_GRAPH_QUERY",
    "QueryOptions",
    "query_command",
    "run_query",
]
