"""dump-dir CLI - Command-line interface for the dump-dir tool."""

from dumpdir.cli.main import app, run_cli

__all__ = ["app", "run_cli"]
