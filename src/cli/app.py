"""Main application setup for the bazel-gopath CLI."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import Annotated, Literal

from cyclopts import App, Parameter

from buildgraph.errors import GopathError
from cli.commands.version import get_version
from cli.config_loader import ConfigError, resolve_config
from cli.context import RunContext
from cli.groups import session_group
from cli.result import CliResult
from cli.result_action import cli_result_action

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

LOGGER = logging.getLogger(__name__)

_HELP_EPILOGUE = """
Examples:
  bazel-gopath project -w .                 Project the current workspace into ./.gopath
  bazel-gopath project -w ~/src/app -o /tmp/gopath
  bazel-gopath config show                  Show effective configuration
  bazel-gopath config init                  Write a bazel-gopath.toml template

Environment Variables:
  BAZEL_GOPATH_LOG_LEVEL   Default log level (DEBUG, INFO, WARNING, ERROR)
  BAZEL_GOPATH_WORKSPACE   Bazel workspace root
  BAZEL_GOPATH_BAZEL_BIN   Bazel binary
  BAZEL_GOPATH_OUT         GOPATH destination root
"""

app = App(
    name="bazel-gopath",
    help="Project Bazel Go targets into a GOPATH tree for non-Bazel tooling.",
    help_format="rich",
    help_epilogue=_HELP_EPILOGUE,
    version=get_version(),
    version_flags=["--version", "-V"],
    default_parameter=Parameter(
        show_default=True,
        show_env_var=True,
    ),
    exit_on_error=True,
    print_error=True,
    help_on_error=False,
)

app.meta.group_parameters = session_group


@dataclass(frozen=True)
class SessionOptions:
    """Session-level configuration parameters."""

    config_file: Annotated[
        str | None,
        Parameter(
            name="--config",
            help="Path to configuration file (overrides default search).",
            group=session_group,
        ),
    ] = None
    log_level: Annotated[
        Literal["DEBUG", "INFO", "WARNING", "ERROR"],
        Parameter(
            name="--log-level",
            help="Logging verbosity level.",
            env_var="BAZEL_GOPATH_LOG_LEVEL",
            group=session_group,
        ),
    ] = "INFO"


_DEFAULT_SESSION_OPTIONS = SessionOptions()


@app.meta.default
def meta_launcher(
    *tokens: Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
    session: Annotated[SessionOptions, Parameter(name="*")] = _DEFAULT_SESSION_OPTIONS,
) -> int:
    """Meta launcher for config selection and context injection.

    Returns
    -------
    int
        Exit status code from command execution.

    Raises
    ------
    ValueError
        Raised when the log level is invalid.
    """
    if session.log_level not in LOG_LEVELS:
        msg = f"Unsupported log level {session.log_level!r}."
        raise ValueError(msg)
    logging.basicConfig(level=session.log_level, format=LOG_FORMAT, stream=sys.stderr)

    try:
        resolution = resolve_config(session.config_file)
    except ConfigError as exc:
        LOGGER.error("%s", exc)
        return cli_result_action(app, None, CliResult.from_exception(exc))

    run_context = RunContext(
        log_level=session.log_level,
        config=resolution.config,
        config_location=resolution.location,
    )

    command, bound, ignored = app.parse_args(list(tokens))
    extra = {name: run_context for name in ignored if name == "run_context"}
    try:
        result = command(*bound.args, **bound.kwargs, **extra)
    except (GopathError, ConfigError, OSError) as exc:
        LOGGER.error("%s", exc)
        result = CliResult.from_exception(exc)
    return cli_result_action(app, command, result)


app.command("cli.commands.project:project_command", name="project", alias="p")

_config_app = App(name="config", help="Configuration management.")
_config_app.command("cli.commands.config:show_config", name="show")
_config_app.command("cli.commands.config:init_config", name="init")
app.command(_config_app, alias="cfg")
app.command("cli.commands.version:version_command", name="version", alias="v")


def main() -> None:
    """Run the bazel-gopath CLI."""
    sys.exit(app.meta())


__all__ = ["app", "main", "meta_launcher"]
