"""Config loading and normalization helpers for the CLI."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import cast

import msgspec

from cli.config_models import GopathConfig
from serde_msgspec import to_builtins, validation_error_payload

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "bazel-gopath.toml"
PYPROJECT_FILENAME = "pyproject.toml"
PYPROJECT_TOOL_KEY = "bazel-gopath"


class ConfigError(ValueError):
    """Raised when a configuration file cannot be read or validated."""


@dataclass(frozen=True)
class ConfigResolution:
    """Decoded configuration plus the file it came from."""

    config: GopathConfig
    location: Path | None = None

    def to_display_dict(self) -> dict[str, object]:
        """Return the configuration and its location for display.

        Returns
        -------
        dict[str, object]
            JSON-compatible payload.
        """
        return {
            "location": str(self.location) if self.location is not None else None,
            "values": config_to_mapping(self.config),
        }


def resolve_config(config_file: str | None, *, cwd: Path | None = None) -> ConfigResolution:
    """Load configuration from ``--config`` or the nearest config file.

    Without an explicit file, ``bazel-gopath.toml`` is searched from ``cwd``
    upwards, then ``[tool.bazel-gopath]`` in the nearest ``pyproject.toml``.

    Parameters
    ----------
    config_file
        Optional explicit config file path.
    cwd
        Directory the search starts from. Defaults to the process cwd.

    Returns
    -------
    ConfigResolution
        Decoded configuration, empty when no file was found.

    Raises
    ------
    ConfigError
        Raised when an explicit config file does not exist.
    """
    if config_file:
        path = Path(config_file)
        if not path.is_file():
            msg = f"Config file not found: {config_file!r}."
            raise ConfigError(msg)
        raw = _read_toml(path)
        if path.name == PYPROJECT_FILENAME:
            raw = _extract_tool_config(raw) or {}
        return ConfigResolution(config=_decode_config(raw, location=str(path)), location=path)

    start = cwd or Path.cwd()
    config_path = _find_in_parents(CONFIG_FILENAME, start)
    if config_path is not None:
        raw = _read_toml(config_path)
        return ConfigResolution(
            config=_decode_config(raw, location=str(config_path)),
            location=config_path,
        )

    pyproject_path = _find_in_parents(PYPROJECT_FILENAME, start)
    if pyproject_path is not None:
        nested = _extract_tool_config(_read_toml(pyproject_path))
        if nested is not None:
            location = f"{pyproject_path}:tool.{PYPROJECT_TOOL_KEY}"
            return ConfigResolution(
                config=_decode_config(nested, location=location),
                location=pyproject_path,
            )

    logger.debug("No configuration file found from %s", start)
    return ConfigResolution(config=GopathConfig())


def config_to_mapping(config: GopathConfig) -> dict[str, object]:
    """Convert a config struct to builtins.

    Returns
    -------
    dict[str, object]
        Mapping with unset values omitted.
    """
    return cast("dict[str, object]", to_builtins(config))


def _find_in_parents(filename: str, start: Path) -> Path | None:
    path = start.resolve()
    while True:
        candidate = path / filename
        if candidate.is_file():
            return candidate
        if path.parent == path:
            return None
        path = path.parent


def _read_toml(path: Path) -> dict[str, object]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        msg = f"Cannot read config file {path}: {exc}"
        raise ConfigError(msg) from exc
    try:
        payload = msgspec.toml.decode(text, type=object, strict=True)
    except msgspec.DecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise ConfigError(msg) from exc
    if not isinstance(payload, dict):
        msg = f"Expected TOML mapping in {path}, got {type(payload).__name__}."
        raise ConfigError(msg)
    return cast("dict[str, object]", payload)


def _extract_tool_config(raw: Mapping[str, object]) -> Mapping[str, object] | None:
    tool = raw.get("tool")
    if not isinstance(tool, Mapping):
        return None
    nested = tool.get(PYPROJECT_TOOL_KEY)
    if not isinstance(nested, Mapping):
        return None
    return cast("Mapping[str, object]", nested)


def _decode_config(raw: Mapping[str, object], *, location: str) -> GopathConfig:
    try:
        return msgspec.convert(dict(raw), type=GopathConfig, strict=True)
    except msgspec.ValidationError as exc:
        details = validation_error_payload(exc)
        msg = f"Config validation failed for {location}: {details}"
        raise ConfigError(msg) from exc


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "ConfigResolution",
    "config_to_mapping",
    "resolve_config",
]
