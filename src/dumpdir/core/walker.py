"""Directory walker for dump-dir.

collect_files walks a root depth-first, honoring gitignore rules, pruning
whole directories the filter rejects, and returning the surviving files in
a stable order: the entries of each directory are visited sorted by name.
Symbolic links are neither followed nor returned.
"""

from __future__ import annotations

import logging
import os
import stat
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import NamedTuple

from dumpdir.core.exceptions import WalkError
from dumpdir.core.filter import FilterRules
from dumpdir.core.ignore import IgnoreStack, WalkOptions
from dumpdir.core.stats import SkipReason

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WalkWarning:
    """A non-fatal problem met while walking.

    Attributes:
        path: The entry that could not be visited.
        reason: Why it was skipped.
        detail: The underlying error message.
    """

    path: Path
    reason: SkipReason
    detail: str = ""


# Type alias for the warning side channel
WarningCallback = Callable[[WalkWarning], None]


class _Frame(NamedTuple):
    """A pending entry: a file to check or a directory to list."""

    path: Path
    abs_path: Path
    ignores: IgnoreStack
    is_dir: bool


class _Walk:
    """State for a single collect_files call."""

    def __init__(
        self,
        rules: FilterRules,
        on_warning: WarningCallback | None,
    ):
        self.rules = rules
        self.on_warning = on_warning
        self.files: list[Path] = []

    def warn(self, path: Path, error: OSError) -> None:
        warning = WalkWarning(path, SkipReason.PERMISSION_DENIED, str(error))
        logger.warning(f"Permission denied: {path}")
        if self.on_warning is not None:
            self.on_warning(warning)

    def list_dir(self, path: Path) -> list[os.DirEntry[str]]:
        with os.scandir(path) as it:
            entries = list(it)
        entries.sort(key=lambda entry: entry.name)
        return entries

    def children(self, path: Path, abs_path: Path, ignores: IgnoreStack) -> list[_Frame]:
        """Return the admitted entries of directory ``path``, sorted by name.

        Raises:
            OSError: If the directory itself cannot be listed.
        """
        frames: list[_Frame] = []
        for entry in self.list_dir(path):
            child = path / entry.name
            abs_child = abs_path / entry.name
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
                is_file = entry.is_file(follow_symlinks=False)
            except PermissionError as e:
                self.warn(child, e)
                continue
            except OSError as e:
                raise WalkError(str(child), e) from e

            if not (is_dir or is_file):
                # symlinks, sockets, fifos, devices
                continue

            if ignores.is_ignored(abs_child, is_dir):
                logger.debug(f"{child}: ignored by gitignore rules")
                continue

            if is_dir and self.rules.should_skip_dir(child):
                logger.debug(f"Pruned directory {child}")
                continue

            frames.append(_Frame(child, abs_child, ignores, is_dir))
        return frames

    def run(self, root: Path, abs_root: Path, ignores: IgnoreStack) -> None:
        """Walk directory ``root`` depth-first without recursion.

        Frames are pushed in reverse name order so they pop in name order,
        and a subdirectory is emptied before its later siblings are reached.
        """
        try:
            frames = self.children(root, abs_root, ignores)
        except OSError as e:
            raise WalkError(str(root), e) from e

        stack = frames[::-1]
        while stack:
            frame = stack.pop()
            if not frame.is_dir:
                if not self.rules.should_skip(frame.path):
                    self.files.append(frame.path)
                continue

            try:
                inner = frame.ignores.child(frame.abs_path)
                frames = self.children(frame.path, frame.abs_path, inner)
            except PermissionError as e:
                self.warn(frame.path, e)
                continue
            except OSError as e:
                raise WalkError(str(frame.path), e) from e
            stack.extend(reversed(frames))


def collect_files(
    root: Path,
    rules: FilterRules,
    *,
    options: WalkOptions | None = None,
    on_warning: WarningCallback | None = None,
) -> list[Path]:
    """Collect all files under ``root`` that pass ``rules``, in sorted order.

    The root itself is never pruned, even if its name matches a directory
    rule. A root that is a regular file yields just that file, subject to
    the file rules only.

    Args:
        root: File or directory to walk.
        rules: The compiled filter, shared read-only.
        options: Which ignore sources to honor. Defaults to all of them.
        on_warning: Called for every entry skipped because of a permission
            error, in addition to the warning being logged.

    Returns:
        Paths formed by joining ``root`` with each surviving relative path.

    Raises:
        WalkError: If the root is missing or unreadable, or listing a
            directory fails for any reason other than permissions.
    """
    root = Path(root)
    try:
        mode = root.stat().st_mode
    except OSError as e:
        raise WalkError(str(root), e) from e

    walk = _Walk(rules, on_warning)

    if stat.S_ISREG(mode):
        if not rules.should_skip(root):
            walk.files.append(root)
        return walk.files

    if not stat.S_ISDIR(mode):
        return walk.files

    abs_root = root.absolute()
    walk.run(root, abs_root, IgnoreStack.for_root(abs_root, options))
    return walk.files
