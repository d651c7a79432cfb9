"""End-to-end projection with an in-process query runner."""

from __future__ import annotations

from pathlib import Path

import pytest

from buildgraph.errors import MissingProtoSourcesError, QueryDecodeError
from buildgraph.query import QueryOptions
from gopath.pipeline import ProjectionRequest, project_workspace
from tests.test_helpers.query_graph import (
    expected_links,
    rule_target,
    sample_graph,
    serialize_targets,
)


def _runner(payload: bytes, calls: list[QueryOptions] | None = None):  # noqa: ANN202
    def _run(opts: QueryOptions) -> bytes:
        if calls is not None:
            calls.append(opts)
        return payload

    return _run


def _link_map(src_root: Path) -> dict[str, Path]:
    return {
        path.relative_to(src_root).as_posix(): Path(path.readlink())
        for path in src_root.rglob("*")
        if path.is_symlink()
    }


def test_sample_workspace_projection(workspace: Path) -> None:
    """Every Go-producing rule with an import path is linked."""
    calls: list[QueryOptions] = []
    request = ProjectionRequest(workspace=workspace, bazel_bin="bazelisk")
    report = project_workspace(request, query_runner=_runner(serialize_targets(sample_graph()), calls))

    assert calls == [QueryOptions(workspace=workspace, bazel_bin="bazelisk")]
    src_root = workspace / ".gopath" / "src"
    assert _link_map(src_root) == expected_links(workspace)
    assert report.created_count == len(expected_links(workspace))
    assert report.existing_count == 0
    assert report.skipped == ("//orphan:go_default_library",)
    assert not (src_root / "github.com" / "acme" / "app" / "orphan").exists()


def test_second_run_is_idempotent(workspace: Path) -> None:
    """Re-running over an existing tree creates nothing new."""
    request = ProjectionRequest(workspace=workspace)
    runner = _runner(serialize_targets(sample_graph()))
    first = project_workspace(request, query_runner=runner)
    second = project_workspace(request, query_runner=runner)

    assert second.created_count == 0
    assert second.existing_count == first.created_count
    assert [link.dest for link in second.links] == [link.dest for link in first.links]
    assert _link_map(workspace / ".gopath" / "src") == expected_links(workspace)


def test_custom_gopath_root(workspace: Path, tmp_path: Path) -> None:
    """An explicit destination replaces ``<workspace>/.gopath``."""
    out = tmp_path / "gopath"
    request = ProjectionRequest(workspace=workspace, out_gopath=out)
    project_workspace(request, query_runner=_runner(serialize_targets(sample_graph())))
    assert _link_map(out / "src") == expected_links(workspace)
    assert not (workspace / ".gopath").exists()


def test_missing_proto_library_aborts(workspace: Path) -> None:
    """A dangling go_proto_library reference is fatal."""
    payload = serialize_targets(
        [
            rule_target(
                "//p:p_go_proto",
                "go_proto_library",
                attributes={"importpath": "example.com/p", "proto": "//p:p_proto"},
            )
        ]
    )
    request = ProjectionRequest(workspace=workspace)
    with pytest.raises(MissingProtoSourcesError):
        project_workspace(request, query_runner=_runner(payload))


def test_undecodable_output_aborts_before_linking(workspace: Path) -> None:
    """Nothing is created when query output cannot be decoded."""
    request = ProjectionRequest(workspace=workspace)
    with pytest.raises(QueryDecodeError):
        project_workspace(request, query_runner=_runner(b"\xff\xff\xff"))
    assert not (workspace / ".gopath").exists()


def test_empty_graph_creates_only_root(workspace: Path) -> None:
    """An empty query result leaves an empty GOPATH root."""
    request = ProjectionRequest(workspace=workspace)
    report = project_workspace(request, query_runner=_runner(b""))
    assert report.links == ()
    assert (workspace / ".gopath").is_dir()
    assert list((workspace / ".gopath").iterdir()) == []
