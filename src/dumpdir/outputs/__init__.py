"""Output for dump-dir.

This module provides the Printer that writes file contents, each under a
header naming the file, and the closing summary line.
"""

from dumpdir.outputs.printer import SEPARATOR, Printer, count_lines

__all__ = ["SEPARATOR", "Printer", "count_lines"]
