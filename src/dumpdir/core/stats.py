"""Dump statistics for dump-dir.

This module provides DumpStats, which tracks the files and lines printed
during a run together with the entries that had to be skipped, and the
SkipReason values shared with the walker's warnings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class SkipReason(str, Enum):
    """Reasons why an entry may be skipped without being filtered out."""

    PERMISSION_DENIED = "permission_denied"
    UNREADABLE = "unreadable"


@dataclass
class SkippedEntry:
    """Information about a skipped entry.

    Attributes:
        path: Path to the entry that was skipped.
        reason: Reason the entry was skipped.
        detail: Optional additional detail about why it was skipped.
    """

    path: str
    reason: SkipReason
    detail: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation."""
        result: dict[str, Any] = {
            "path": self.path,
            "reason": self.reason.value,
        }
        if self.detail:
            result["detail"] = self.detail
        return result


@dataclass
class DumpStats:
    """Counters for a dump run.

    Attributes:
        files_printed: Number of files whose content was printed.
        lines_printed: Total number of lines printed.
        skipped: Entries skipped during the walk or while printing.

    Example:
        >>> stats = DumpStats()
        >>> stats.add_printed_file(12)
        >>> stats.add_skipped("secret.txt", SkipReason.UNREADABLE)
        >>> stats.unreadable_count
        1
    """

    files_printed: int = 0
    lines_printed: int = 0
    skipped: list[SkippedEntry] = field(default_factory=list)

    def add_printed_file(self, lines: int) -> None:
        self.files_printed += 1
        self.lines_printed += lines

    def add_skipped(self, path: str, reason: SkipReason, detail: str | None = None) -> None:
        self.skipped.append(SkippedEntry(path=path, reason=reason, detail=detail))

    @property
    def unreadable_count(self) -> int:
        return sum(1 for s in self.skipped if s.reason == SkipReason.UNREADABLE)

    @property
    def permission_denied_count(self) -> int:
        return sum(1 for s in self.skipped if s.reason == SkipReason.PERMISSION_DENIED)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "files_printed": self.files_printed,
            "lines_printed": self.lines_printed,
            "skipped": [s.to_dict() for s in self.skipped],
        }
