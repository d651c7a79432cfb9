"""CLI entrypoints for bazel-gopath."""

from cli.app import main
from cli.exit_codes import ExitCode
from cli.result import CliResult

__all__ = ["CliResult", "ExitCode", "main"]
