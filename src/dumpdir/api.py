"""Library entry points for dump-dir.

These functions tie configuration, filtering, traversal and printing
together for callers that do not go through the command line.

Example::

    from dumpdir.api import collect_paths

    files = collect_paths(["src", "docs"])
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from dumpdir.config import AppConfig, load_config
from dumpdir.core.filter import FilterRules
from dumpdir.core.ignore import WalkOptions
from dumpdir.core.stats import DumpStats
from dumpdir.core.walker import WarningCallback, collect_files
from dumpdir.outputs.printer import Printer

logger = logging.getLogger(__name__)


def collect_paths(
    paths: Iterable[Path | str],
    config: AppConfig | None = None,
    *,
    options: WalkOptions | None = None,
    on_warning: WarningCallback | None = None,
) -> list[Path]:
    """Collect the files to dump from several roots.

    One filter is built and shared by every root. Roots are walked in the
    order given; a file reached through more than one root is kept only at
    its first occurrence.

    Args:
        paths: Files or directories to walk.
        config: Filter configuration. Defaults to ``load_config()``.
        options: Ignore-file options. Defaults to the config's
            ``respect_gitignore`` setting with every source enabled.
        on_warning: Called for every entry skipped on a permission error.

    Returns:
        The surviving files, in walk order.

    Raises:
        InvalidPatternError: If a skip pattern is not a valid regex.
        InvalidGlobError: If a skip glob is not a valid glob.
        GlobSetBuildError: If the globs cannot be combined.
        WalkError: If a root cannot be walked.
    """
    if config is None:
        config = load_config()
    if options is None:
        options = WalkOptions(respect_gitignore=config.respect_gitignore)

    rules = FilterRules.build(config)

    seen: set[Path] = set()
    files: list[Path] = []
    for root in paths:
        for path in collect_files(Path(root), rules, options=options, on_warning=on_warning):
            key = path.resolve()
            if key in seen:
                logger.debug(f"Skipping duplicate {path}")
                continue
            seen.add(key)
            files.append(path)
    return files


def dump_paths(
    paths: Iterable[Path | str],
    config: AppConfig | None = None,
    *,
    printer: Printer | None = None,
    summary: bool = False,
) -> DumpStats:
    """Collect files from ``paths`` and print each one.

    Args:
        paths: Files or directories to dump.
        config: Filter configuration. Defaults to ``load_config()``.
        printer: Printer to write with. Defaults to a stdout printer.
        summary: Print the summary line at the end.

    Returns:
        The printer's statistics.
    """
    printer = printer or Printer()

    def record_warning(warning) -> None:
        printer.stats.add_skipped(str(warning.path), warning.reason, warning.detail)

    for path in collect_paths(paths, config, on_warning=record_warning):
        printer.print_file(path)

    logger.debug(f"Dump finished: {printer.stats.to_dict()}")
    if summary:
        printer.print_summary()
    return printer.stats
