"""Content printer for dump-dir.

This module provides the Printer, which writes each collected file to the
console under a header and keeps the counters used by the summary line.
Headers and the summary are styled with Rich; file content is written
as-is, without markup, highlighting, wrapping or tab expansion.
"""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console

from dumpdir.core.stats import DumpStats, SkipReason

logger = logging.getLogger(__name__)

SEPARATOR = "=" * 52

HEADER_STYLE = "bold blue"
SUMMARY_STYLE = "dim"


def count_lines(content: str) -> int:
    """Count lines the way a line iterator sees them.

    A trailing newline does not start a new line, and a final line without
    one still counts.
    """
    if not content:
        return 0
    return content.count("\n") + (0 if content.endswith("\n") else 1)


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


class Printer:
    """Prints file contents with a header and tracks what was printed.

    Example:
        printer = Printer()
        for path in files:
            printer.print_file(path)
        printer.print_summary()
    """

    def __init__(self, console: Console | None = None):
        """Initialize the printer.

        Args:
            console: Rich console to write to. Defaults to a stdout console.
        """
        self.console = console or Console(highlight=False)
        self.stats = DumpStats()

    def _print_styled(self, text: str, style: str) -> None:
        self.console.print(
            text, style=style, markup=False, highlight=False, emoji=False, soft_wrap=True
        )

    def print_file(self, path: Path) -> None:
        """Print one file under a header.

        A file that cannot be read is logged, counted as unreadable and
        otherwise left out; no header is printed for it.

        Args:
            path: The file to print.
        """
        path = Path(path)
        try:
            data = path.read_bytes()
        except OSError as e:
            detail = e.strerror or str(e)
            logger.warning(f"Cannot read '{path}': {detail}")
            self.stats.add_skipped(str(path), SkipReason.UNREADABLE, detail)
            return

        content = data.decode("utf-8", errors="replace")

        self._print_styled(SEPARATOR, HEADER_STYLE)
        self._print_styled(f" FILE: {path}", HEADER_STYLE)
        self._print_styled(SEPARATOR, HEADER_STYLE)

        self.console.file.write(content)
        # Blank line between files
        self.console.file.write("\n")
        self.console.file.flush()

        self.stats.add_printed_file(count_lines(content))

    def summary_line(self) -> str:
        """Return the text of the summary line."""
        line = (
            f"── Summary: {_plural(self.stats.files_printed, 'file')}, "
            f"{_plural(self.stats.lines_printed, 'line')}"
        )
        unreadable = self.stats.unreadable_count
        if unreadable > 0:
            line += f", {unreadable} unreadable skipped"
        denied = self.stats.permission_denied_count
        if denied > 0:
            line += f", {denied} permission denied"
        return line

    def print_summary(self) -> None:
        """Print the closing summary line."""
        self._print_styled(self.summary_line(), SUMMARY_STYLE)
