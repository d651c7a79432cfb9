"""Shared pytest fixtures for projection tests."""

from __future__ import annotations

import os
import stat
from collections.abc import Callable
from pathlib import Path

import pytest

from tests.test_helpers.query_graph import sample_graph, serialize_targets

type FakeBazelFactory = Callable[..., Path]

_FAKE_BAZEL = """#!/bin/sh
pwd > "{cwd_file}"
printf '%s\\n' "$@" > "{args_file}"
cat "{payload}"
exit {status}
"""


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Return an empty workspace directory named ``repo``.

    Returns
    -------
    Path
        Resolved workspace root.
    """
    root = tmp_path / "repo"
    root.mkdir()
    return root.resolve()


@pytest.fixture
def fake_bazel(tmp_path: Path) -> FakeBazelFactory:
    """Return a factory writing a shell script that impersonates bazel.

    The script records its cwd and argv next to itself, prints the payload
    and exits with the requested status.

    Returns
    -------
    FakeBazelFactory
        Callable taking ``payload`` bytes and an optional ``status``.
    """

    def _factory(payload: bytes | None = None, *, status: int = 0) -> Path:
        bin_dir = tmp_path / "bin"
        bin_dir.mkdir(exist_ok=True)
        payload_path = bin_dir / "payload.bin"
        payload_path.write_bytes(
            payload if payload is not None else serialize_targets(sample_graph())
        )
        script = bin_dir / "bazel"
        script.write_text(
            _FAKE_BAZEL.format(
                cwd_file=bin_dir / "cwd.txt",
                args_file=bin_dir / "args.txt",
                payload=payload_path,
                status=status,
            ),
            encoding="utf-8",
        )
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    return _factory


@pytest.fixture(autouse=True)
def _clear_gopath_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in tuple(os.environ):
        if name.startswith("BAZEL_GOPATH_"):
            monkeypatch.delenv(name)
