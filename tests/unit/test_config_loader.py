"""Tests for configuration discovery and validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from cli.config_loader import CONFIG_FILENAME, ConfigError, resolve_config
from cli.config_models import GopathConfig


def test_no_config_yields_defaults(tmp_path: Path) -> None:
    """Without any config file every value is unset."""
    resolution = resolve_config(None, cwd=tmp_path)
    assert resolution.config == GopathConfig()
    assert resolution.location is None
    assert resolution.to_display_dict() == {"location": None, "values": {}}


def test_config_file_found_in_parent(tmp_path: Path) -> None:
    """``bazel-gopath.toml`` is discovered from nested directories."""
    path = tmp_path / CONFIG_FILENAME
    path.write_text('bazel_bin = "bazelisk"\nout_gopath = "out"\n', encoding="utf-8")
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)

    resolution = resolve_config(None, cwd=nested)
    assert resolution.config == GopathConfig(bazel_bin="bazelisk", out_gopath="out")
    assert resolution.location == path.resolve()


def test_pyproject_tool_section(tmp_path: Path) -> None:
    """``[tool.bazel-gopath]`` is used when no dedicated file exists."""
    (tmp_path / "pyproject.toml").write_text(
        '[project]\nname = "x"\n\n[tool.bazel-gopath]\nworkspace = "repo"\n',
        encoding="utf-8",
    )
    resolution = resolve_config(None, cwd=tmp_path)
    assert resolution.config.workspace == "repo"


def test_dedicated_file_wins_over_pyproject(tmp_path: Path) -> None:
    """The dedicated config file takes precedence."""
    (tmp_path / "pyproject.toml").write_text(
        '[tool.bazel-gopath]\nworkspace = "from-pyproject"\n', encoding="utf-8"
    )
    (tmp_path / CONFIG_FILENAME).write_text('workspace = "from-file"\n', encoding="utf-8")
    assert resolve_config(None, cwd=tmp_path).config.workspace == "from-file"


def test_explicit_config_file(tmp_path: Path) -> None:
    """``--config`` bypasses discovery."""
    path = tmp_path / "custom.toml"
    path.write_text('bazel_bin = "/opt/bazel"\n', encoding="utf-8")
    resolution = resolve_config(str(path), cwd=tmp_path / "elsewhere")
    assert resolution.config.bazel_bin == "/opt/bazel"
    assert resolution.location == path


def test_explicit_config_file_missing(tmp_path: Path) -> None:
    """A missing explicit file is a configuration error."""
    with pytest.raises(ConfigError, match="Config file not found"):
        resolve_config(str(tmp_path / "missing.toml"))


def test_unknown_key_rejected(tmp_path: Path) -> None:
    """Strict decoding rejects keys the model does not declare."""
    (tmp_path / CONFIG_FILENAME).write_text('bazel = "x"\n', encoding="utf-8")
    with pytest.raises(ConfigError, match="Config validation failed"):
        resolve_config(None, cwd=tmp_path)


def test_wrong_type_rejected(tmp_path: Path) -> None:
    """Values must have the declared types."""
    (tmp_path / CONFIG_FILENAME).write_text("workspace = 3\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="Config validation failed"):
        resolve_config(None, cwd=tmp_path)


def test_invalid_toml_rejected(tmp_path: Path) -> None:
    """Unparseable TOML is a configuration error."""
    (tmp_path / CONFIG_FILENAME).write_text("workspace = \n", encoding="utf-8")
    with pytest.raises(ConfigError, match="Invalid TOML"):
        resolve_config(None, cwd=tmp_path)


def test_unreadable_config_file_rejected(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Read failures surface as configuration errors."""
    (tmp_path / CONFIG_FILENAME).write_text('workspace = "."\n', encoding="utf-8")

    def _denied(self: Path, *args: object, **kwargs: object) -> str:
        raise PermissionError(13, "Permission denied", str(self))

    monkeypatch.setattr(Path, "read_text", _denied)
    with pytest.raises(ConfigError, match="Cannot read config file") as excinfo:
        resolve_config(None, cwd=tmp_path)
    assert isinstance(excinfo.value.__cause__, PermissionError)
