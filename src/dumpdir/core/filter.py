"""File filter module for dump-dir.

This module provides FilterRules, the compiled and immutable rule set that
decides whether a directory should be pruned from the walk and whether a
file should be skipped. Rules are compiled once from configuration; every
pattern error surfaces while building, never while filtering.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from dumpdir.core.exceptions import InvalidPatternError
from dumpdir.core.globset import GlobSet
from dumpdir.core.sniff import is_binary

if TYPE_CHECKING:
    from dumpdir.config.schema import AppConfig

logger = logging.getLogger(__name__)

# Appended to a directory path so that globs ending in /** match the directory.
_SYNTHETIC_CHILD = "_"


class RuleSource(Protocol):
    """Anything exposing the seven rule fields (usually an AppConfig)."""

    skip_extensions: list[str]
    skip_patterns: list[str]
    skip_filenames: list[str]
    skip_path_components: list[str]
    skip_globs: list[str]
    skip_binary: bool
    skip_hidden: bool


class SkipRule(str, Enum):
    """The rule responsible for skipping a path."""

    PATH_COMPONENT = "path_component"
    HIDDEN = "hidden"
    EXTENSION = "extension"
    FILENAME = "filename"
    PATTERN = "pattern"
    GLOB = "glob"
    BINARY = "binary"


@dataclass(frozen=True)
class SkipDecision:
    """Outcome of evaluating a path against the rules.

    Attributes:
        path: The path that was checked.
        rule: The rule that excluded the path, or None if it is kept.
        matched: The configured value that matched (extension, pattern, ...).
    """

    path: Path
    rule: SkipRule | None = None
    matched: str | None = None

    @property
    def skipped(self) -> bool:
        return self.rule is not None

    @property
    def reason(self) -> str:
        if self.rule is None:
            return "kept"
        if self.matched is None:
            return f"skipped by {self.rule.value} rule"
        return f"skipped by {self.rule.value} rule '{self.matched}'"


def _lowered(values: Iterable[str]) -> frozenset[str]:
    return frozenset(v.lower() for v in values)


def _is_hidden_name(name: str) -> bool:
    return name.startswith(".") and name not in (".", "..")


def _relative_to_cwd(path: Path) -> Path | None:
    """Strip the current working directory prefix, or None if not under it."""
    try:
        cwd = os.getcwd()
    except OSError:
        # Working directory was removed
        return None
    try:
        return path.relative_to(cwd)
    except ValueError:
        return None


@dataclass(frozen=True)
class FilterRules:
    """Compiled, immutable skip rules.

    Build with :meth:`build`; afterwards the instance is read-only and can be
    shared between any number of walks.

    Example:
        >>> rules = FilterRules.build(AppConfig(skip_extensions=["lock"], skip_hidden=False))
        >>> rules.should_skip(Path("Cargo.LOCK"))
        True
        >>> rules.should_skip_dir(Path("src"))
        False
    """

    skip_extensions: frozenset[str]
    skip_filenames: frozenset[str]
    skip_path_components: frozenset[str]
    skip_patterns: tuple[re.Pattern[str], ...]
    skip_globs: GlobSet
    skip_binary: bool
    skip_hidden: bool

    @classmethod
    def build(cls, config: AppConfig | RuleSource) -> FilterRules:
        """Compile the rules described by ``config``.

        Raises:
            InvalidPatternError: If a skip_patterns entry is not a valid regex.
            InvalidGlobError: If a skip_globs entry is not a valid glob.
            GlobSetBuildError: If the globs cannot be combined into one matcher.
        """
        patterns: list[re.Pattern[str]] = []
        for pattern in config.skip_patterns:
            try:
                patterns.append(re.compile(pattern, re.IGNORECASE))
            except re.error as e:
                raise InvalidPatternError(pattern, e) from e

        skip_globs = GlobSet.build(config.skip_globs)

        return cls(
            skip_extensions=_lowered(ext.lstrip(".") for ext in config.skip_extensions),
            skip_filenames=_lowered(config.skip_filenames),
            skip_path_components=_lowered(config.skip_path_components),
            skip_patterns=tuple(patterns),
            skip_globs=skip_globs,
            skip_binary=config.skip_binary,
            skip_hidden=config.skip_hidden,
        )

    def _glob_match(self, path: Path) -> bool:
        if self.skip_globs.is_match(path):
            return True
        rel = _relative_to_cwd(path)
        return rel is not None and self.skip_globs.is_match(rel)

    def should_skip_dir(self, path: Path) -> bool:
        """Return True if the whole directory should be pruned from the walk.

        Only rules that exclude every descendant are consulted: the directory
        name (hidden or a blocked component) and globs. Extension, filename,
        regex and binary rules apply to files only.
        """
        name = path.name
        if name:
            if self.skip_hidden and _is_hidden_name(name):
                return True
            if name.lower() in self.skip_path_components:
                return True

        if self.skip_globs.is_empty():
            return False

        # A pattern like **/target/** needs a child path to match the directory.
        for candidate in (path, path / _SYNTHETIC_CHILD):
            if self._glob_match(candidate):
                return True

        return False

    def explain(self, path: Path) -> SkipDecision:
        """Evaluate ``path`` against every file rule, first match wins."""
        parts = path.parts

        for part in parts:
            if part.lower() in self.skip_path_components:
                return SkipDecision(path, SkipRule.PATH_COMPONENT, part)

        if self.skip_hidden:
            # Absolute paths may carry dotted segments from an unrelated prefix
            # (a temp dir); the walker has already pruned hidden ancestors.
            if path.is_absolute():
                if _is_hidden_name(path.name):
                    return SkipDecision(path, SkipRule.HIDDEN, path.name)
            else:
                for part in parts:
                    if _is_hidden_name(part):
                        return SkipDecision(path, SkipRule.HIDDEN, part)

        extension = path.suffix[1:].lower()
        if extension and extension in self.skip_extensions:
            return SkipDecision(path, SkipRule.EXTENSION, extension)

        for name in (path.stem, path.name):
            if name.lower() in self.skip_filenames:
                return SkipDecision(path, SkipRule.FILENAME, name.lower())

        path_str = str(path)
        for regex in self.skip_patterns:
            if regex.search(path_str):
                return SkipDecision(path, SkipRule.PATTERN, regex.pattern)

        if self._glob_match(path):
            rel = _relative_to_cwd(path)
            matched = self.skip_globs.matching_pattern(path)
            if matched is None and rel is not None:
                matched = self.skip_globs.matching_pattern(rel)
            return SkipDecision(path, SkipRule.GLOB, matched)

        if self.skip_binary and is_binary(path):
            return SkipDecision(path, SkipRule.BINARY)

        return SkipDecision(path)

    def should_skip(self, path: Path) -> bool:
        """Return True if the file should be skipped."""
        decision = self.explain(path)
        if decision.skipped:
            logger.debug(f"{path}: {decision.reason}")
        return decision.skipped
