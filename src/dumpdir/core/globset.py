"""Glob compilation for dump-dir.

Globs are translated to regular expressions and matched against whole
paths (``/``-separated). Matching is case-insensitive. Supported syntax:

- ``*`` matches anything except ``/``
- ``?`` matches one character except ``/``
- ``**`` as a whole path component matches any number of directories
- ``[abc]``, ``[a-z]``, ``[!abc]`` / ``[^abc]`` character classes
- ``{a,b}`` alternation (not nested)
- ``\\x`` matches ``x`` literally
"""

from __future__ import annotations

import os
import re
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import PurePath

from dumpdir.core.exceptions import GlobSetBuildError, InvalidGlobError


class GlobSyntaxError(ValueError):
    """A glob could not be parsed."""


@dataclass(frozen=True)
class Glob:
    """A single compiled glob.

    Attributes:
        pattern: The original glob string.
        regex: The translated, anchored regex source.
    """

    pattern: str
    regex: str

    @classmethod
    def compile(cls, pattern: str) -> Glob:
        """Translate ``pattern`` into an anchored regex.

        Raises:
            InvalidGlobError: If the glob is malformed or the translated
                regex does not compile.
        """
        try:
            regex = "^" + glob_to_regex(pattern) + "$"
            re.compile(regex, re.IGNORECASE)
        except (GlobSyntaxError, re.error) as e:
            raise InvalidGlobError(pattern, e) from e
        return cls(pattern=pattern, regex=regex)


def glob_to_regex(pattern: str) -> str:
    """Convert a glob pattern to an (unanchored) regex pattern.

    Args:
        pattern: Glob pattern to convert.

    Returns:
        Regex pattern string.

    Raises:
        GlobSyntaxError: On an unclosed ``[`` or ``{``, a nested ``{``, or a
            trailing backslash.
    """
    regex_parts: list[str] = []
    i = 0
    n = len(pattern)
    in_alternation = False

    while i < n:
        c = pattern[i]

        if c == "*":
            if i + 1 < n and pattern[i + 1] == "*":
                at_start = i == 0 or pattern[i - 1] == "/"
                at_end = i + 2 == n
                followed_by_sep = i + 2 < n and pattern[i + 2] == "/"
                if at_start and followed_by_sep:
                    # **/ matches zero or more leading directories
                    regex_parts.append("(?:.*/)?")
                    i += 3
                elif at_start and at_end:
                    # trailing /** (or a bare **) matches everything below
                    regex_parts.append(".*")
                    i += 2
                else:
                    # ** inside a component behaves like *
                    regex_parts.append("[^/]*")
                    i += 2
            else:
                regex_parts.append("[^/]*")
                i += 1
        elif c == "?":
            regex_parts.append("[^/]")
            i += 1
        elif c == "[":
            j = i + 1
            negate = j < n and pattern[j] in "!^"
            if negate:
                j += 1
            # A ] right after the opening bracket is a literal member
            if j < n and pattern[j] == "]":
                j += 1
            while j < n and pattern[j] != "]":
                j += 1
            if j >= n:
                raise GlobSyntaxError("unclosed character class; missing ']'")
            members = pattern[i + 1 + int(negate) : j]
            members = members.replace("\\", "\\\\").replace("[", "\\[")
            regex_parts.append(("[^" if negate else "[") + members + "]")
            i = j + 1
        elif c == "{":
            if in_alternation:
                raise GlobSyntaxError("nested alternate groups are not allowed")
            in_alternation = True
            regex_parts.append("(?:")
            i += 1
        elif c == "}" and in_alternation:
            in_alternation = False
            regex_parts.append(")")
            i += 1
        elif c == "," and in_alternation:
            regex_parts.append("|")
            i += 1
        elif c == "\\":
            if i + 1 >= n:
                raise GlobSyntaxError("dangling '\\'")
            regex_parts.append(re.escape(pattern[i + 1]))
            i += 2
        else:
            regex_parts.append(re.escape(c))
            i += 1

    if in_alternation:
        raise GlobSyntaxError("unclosed alternate group; missing '}'")

    return "".join(regex_parts)


def _to_match_string(path: str | os.PathLike[str]) -> str:
    """Normalize a path to the ``/``-separated form globs are matched on."""
    if isinstance(path, PurePath):
        return path.as_posix()
    return os.fspath(path).replace("\\", "/")


class GlobSet:
    """A set of globs matched together through one combined regex.

    Example:
        >>> globs = GlobSet.build(["**/target/**", "**/*.min.js"])
        >>> globs.is_match("project/target/debug/app")
        True
        >>> globs.is_match("src/main.rs")
        False
    """

    def __init__(self, globs: tuple[Glob, ...], matcher: re.Pattern[str] | None):
        self.globs = globs
        self._matcher = matcher

    @classmethod
    def build(cls, patterns: Iterable[str]) -> GlobSet:
        """Compile every pattern and assemble the combined matcher.

        Raises:
            InvalidGlobError: If an individual glob is malformed.
            GlobSetBuildError: If the combined matcher cannot be compiled.
        """
        globs = tuple(Glob.compile(p) for p in patterns)
        if not globs:
            return cls(globs, None)

        combined = "|".join(f"(?:{g.regex})" for g in globs)
        try:
            matcher = re.compile(combined, re.IGNORECASE)
        except (re.error, OverflowError, RecursionError) as e:
            raise GlobSetBuildError(e) from e
        return cls(globs, matcher)

    def is_empty(self) -> bool:
        return self._matcher is None

    def is_match(self, path: str | os.PathLike[str]) -> bool:
        """Return True if any glob matches the whole path."""
        if self._matcher is None:
            return False
        return self._matcher.match(_to_match_string(path)) is not None

    def matching_pattern(self, path: str | os.PathLike[str]) -> str | None:
        """Return the first glob (in configuration order) matching ``path``."""
        if self._matcher is None:
            return None
        candidate = _to_match_string(path)
        for glob in self.globs:
            if re.match(glob.regex, candidate, re.IGNORECASE):
                return glob.pattern
        return None

    def __repr__(self) -> str:
        return f"GlobSet({[g.pattern for g in self.globs]!r})"
