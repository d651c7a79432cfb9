"""Run context for CLI command injection."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from cli.config_models import GopathConfig


@dataclass(frozen=True)
class RunContext:
    """Injected run context for CLI commands.

    Parameters
    ----------
    log_level
        Logging level applied to the invocation.
    config
        Decoded configuration file contents.
    config_location
        Path of the file the configuration came from, if any.
    """

    log_level: str
    config: GopathConfig = field(default_factory=GopathConfig)
    config_location: Path | None = None


__all__ = ["RunContext"]
