"""Command-line interface for dump-dir.

This module provides the Typer-based CLI that prints the contents of every
file under the given paths, git-aware and filter-configurable.
"""

from pathlib import Path
from typing import Annotated, Any, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from dumpdir import __version__
from dumpdir.api import dump_paths
from dumpdir.config import load_config
from dumpdir.config.schema import no_filter_values
from dumpdir.core.exceptions import (
    ConfigError,
    ConfigNotFoundError,
    DumpDirError,
    GlobSetBuildError,
    InvalidGlobError,
    InvalidPatternError,
    PathNotFoundError,
    WalkError,
)
from dumpdir.core.logging import setup_logging
from dumpdir.outputs.printer import Printer

# Exit codes
EXIT_SUCCESS = 0
EXIT_ERROR = 1

app = typer.Typer(
    name="dump-dir",
    help="Prints file contents of a directory, git-aware and filter-configurable.",
    add_completion=False,
)
console = Console()
error_console = Console(stderr=True)


def _panel(heading: str, title: str, body: str, details: dict[str, Any] | None = None) -> None:
    message = f"[bold red]{heading}[/bold red]\n\n{escape(body)}"
    for key, value in (details or {}).items():
        if value is not None:
            message += f"\n\n[dim]{key}:[/dim] {escape(str(value))}"
    error_console.print(Panel(message, title=f"[red]{title}[/red]", border_style="red"))


def _display_error(error: Exception, title: str = "Error") -> None:
    """Display an error with rich formatting.

    Args:
        error: The exception to display.
        title: The title for the error panel.
    """
    if isinstance(error, (InvalidPatternError, InvalidGlobError)):
        kind = "regex" if isinstance(error, InvalidPatternError) else "glob"
        _panel(
            "Invalid Pattern",
            "Pattern Error",
            error.message,
            {"Hint": f"check the {kind} '{error.pattern}' in your config or --skip-patterns"},
        )
    elif isinstance(error, GlobSetBuildError):
        _panel("Invalid Glob Set", "Pattern Error", error.message)
    elif isinstance(error, WalkError):
        _panel("Walk Error", "Walk Error", error.message, {"Path": error.path})
    elif isinstance(error, ConfigNotFoundError):
        _panel(
            "Configuration Error",
            "Config Error",
            error.message,
            {"Hint": "check the --config argument"},
        )
    elif isinstance(error, ConfigError):
        _panel("Configuration Error", "Config Error", error.message, {"Config key": error.config_key})
    elif isinstance(error, PathNotFoundError):
        _panel(
            "Path Not Found",
            "Path Error",
            error.message,
            {"Hint": "did you mean to pass a different path?"},
        )
    elif isinstance(error, DumpDirError):
        _panel("Error", title, error.message)
    elif isinstance(error, PermissionError):
        _panel("Permission Denied", "Permission Error", str(error))
    else:
        _panel(title, "Error", str(error))


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold cyan]dump-dir[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit()


def _split_list(value: str | None) -> list[str] | None:
    if value is None:
        return None
    return [item.strip() for item in value.split(",") if item.strip()]


def build_cli_overrides(
    no_filter: bool,
    skip_extensions: str | None,
    skip_patterns: str | None,
) -> dict[str, Any]:
    """Turn the filter options into config overrides.

    ``--no-filter`` clears every rule first; ``--skip-extensions`` and
    ``--skip-patterns`` then replace their lists.
    """
    overrides: dict[str, Any] = {}
    if no_filter:
        overrides.update(no_filter_values())
    extensions = _split_list(skip_extensions)
    if extensions is not None:
        overrides["skip_extensions"] = extensions
    patterns = _split_list(skip_patterns)
    if patterns is not None:
        overrides["skip_patterns"] = patterns
    return overrides


@app.command()
def dump(
    paths: Annotated[
        Optional[list[Path]],
        typer.Argument(
            help="Paths to dump (files or directories). Defaults to the current directory.",
            show_default=False,
        ),
    ] = None,
    skip_extensions: Annotated[
        Optional[str],
        typer.Option(
            "--skip-extensions",
            metavar="EXT,...",
            help='Override config: skip extensions (comma-separated, e.g. "snap,lock")',
        ),
    ] = None,
    skip_patterns: Annotated[
        Optional[str],
        typer.Option(
            "--skip-patterns",
            metavar="PATTERN,...",
            help="Override config: skip filename patterns (comma-separated regex)",
        ),
    ] = None,
    no_filter: Annotated[
        bool,
        typer.Option(
            "--no-filter",
            help="Include files that would normally be skipped (overrides all filters)",
        ),
    ] = False,
    summary: Annotated[
        bool,
        typer.Option(
            "--summary",
            help="Show a summary line count at the end",
        ),
    ] = False,
    config_path: Annotated[
        Optional[Path],
        typer.Option(
            "--config",
            metavar="FILE",
            help="Path to a local config file (default: ./dump.toml)",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Log why each file or directory is excluded",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress warnings (only show errors)",
        ),
    ] = False,
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = None,
) -> None:
    """Print the contents of every file under PATH, respecting .gitignore.

    Exit codes:
        0: Success
        1: An error occurred
    """
    setup_logging(verbose=verbose, quiet=quiet)

    roots = list(paths) if paths else [Path(".")]

    try:
        config = load_config(
            config_path=config_path,
            cli_args=build_cli_overrides(no_filter, skip_extensions, skip_patterns),
        )

        for root in roots:
            if not root.exists():
                raise PathNotFoundError(str(root))

        dump_paths(roots, config, printer=Printer(), summary=summary)
    except DumpDirError as e:
        _display_error(e)
        raise typer.Exit(code=EXIT_ERROR) from None
    except KeyboardInterrupt:
        error_console.print("\n[yellow]Interrupted by user[/yellow]")
        raise typer.Exit(code=EXIT_ERROR) from None

    raise typer.Exit(code=EXIT_SUCCESS)


def run_cli() -> None:
    """Entry point for the ``dump-dir`` console script."""
    app()


if __name__ == "__main__":
    run_cli()
