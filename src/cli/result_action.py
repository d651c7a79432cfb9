"""Result action handler for Cyclopts integration."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.console import Console

from cli.exit_codes import ExitCode
from cli.result import CliResult

if TYPE_CHECKING:
    from cyclopts import App


def cli_result_action(
    app: App | None,
    cmd: object,
    result: Any,
    *,
    console: Console | None = None,
) -> int:
    """Handle command results and convert to exit codes.

    Parameters
    ----------
    app
        The Cyclopts application instance.
    cmd
        The resolved command that was executed.
    result
        The return value from the command function.
    console
        Console to print summaries on. Defaults to stdout.

    Returns
    -------
    int
        Exit code for the process.
    """
    _ = (app, cmd)
    if result is None:
        return ExitCode.SUCCESS

    if isinstance(result, int):
        return result

    console = console or Console()
    if isinstance(result, CliResult):
        if result.summary:
            console.print(result.summary, highlight=False, soft_wrap=True)
        duration = result.metrics.get("duration_ms")
        if duration is not None:
            console.print(f"Duration: {duration:.1f}ms")
        return int(result.exit_code)

    console.print(f"Unexpected command return type: {type(result).__name__} (value: {result!r})")
    return ExitCode.GENERAL_ERROR


__all__ = ["cli_result_action"]
