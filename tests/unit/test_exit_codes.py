"""Tests for exception to exit code classification."""

from __future__ import annotations

import errno
from pathlib import Path

import pytest

from buildgraph.errors import (
    GopathError,
    MalformedLabelError,
    MissingProtoSourcesError,
    QueryDecodeError,
)
from cli.config_loader import ConfigError
from cli.exit_codes import ExitCode
from cli.result import CliResult
from gopath.errors import ProjectionError


@pytest.mark.parametrize(
    ("exc", "expected"),
    [
        (QueryDecodeError("bad bytes"), ExitCode.QUERY_ERROR),
        (MalformedLabelError("nolabel", "//"), ExitCode.GRAPH_ERROR),
        (MissingProtoSourcesError("//a:a_go_proto", "//a:a_proto"), ExitCode.GRAPH_ERROR),
        (
            ProjectionError("symlink", Path("/x"), OSError(errno.EACCES, "Permission denied")),
            ExitCode.PROJECTION_ERROR,
        ),
        (ConfigError("broken"), ExitCode.CONFIG_ERROR),
        (FileNotFoundError("bazel"), ExitCode.QUERY_ERROR),
        (PermissionError("denied"), ExitCode.CONFIG_ERROR),
        (ValueError("nope"), ExitCode.VALIDATION_ERROR),
        (GopathError("generic"), ExitCode.GENERAL_ERROR),
        (RuntimeError("boom"), ExitCode.GENERAL_ERROR),
    ],
)
def test_from_exception(exc: BaseException, expected: ExitCode) -> None:
    """Domain errors map to their stage; others fall back by type."""
    assert ExitCode.from_exception(exc) is expected


def test_projection_error_message() -> None:
    """Projection errors carry the action, path and OS reason."""
    exc = ProjectionError(
        "make parent directories",
        Path("/gopath/src/x"),
        OSError(errno.ENOTDIR, "Not a directory"),
    )
    assert str(exc) == "Failed to make parent directories '/gopath/src/x': Not a directory"
    assert isinstance(exc, GopathError)


def test_cli_result_from_exception() -> None:
    """Results built from exceptions keep the message as summary."""
    result = CliResult.from_exception(MalformedLabelError("pkg:name", "//"))
    assert result.exit_code == ExitCode.GRAPH_ERROR
    assert not result.ok
    assert result.summary == "Malformed label 'pkg:name': missing '//' separator."
