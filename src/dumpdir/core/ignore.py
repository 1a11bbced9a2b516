"""Version-control ignore rules for dump-dir.

Ignore files use gitignore syntax and are compiled with pathspec. Rules are
composed the way git composes them: a ``.gitignore`` applies to its own
directory and everything below it, deeper files win over shallower ones,
and any ``.gitignore`` wins over the repository's ``info/exclude`` and the
user's global excludes file.

``.gitignore`` files only take effect inside a git repository. Plain
``.ignore`` files use the same syntax, apply everywhere and win over every
git source.
"""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path

import pathspec

logger = logging.getLogger(__name__)

GITIGNORE_NAME = ".gitignore"
IGNORE_NAME = ".ignore"


@dataclass(frozen=True)
class WalkOptions:
    """Which ignore sources a walk honors.

    Attributes:
        respect_gitignore: Apply ignore files at all.
        git_global: Apply the global excludes file (inside a repository).
        git_exclude: Apply ``.git/info/exclude`` (inside a repository).
    """

    respect_gitignore: bool = True
    git_global: bool = True
    git_exclude: bool = True


@dataclass(frozen=True)
class IgnoreFile:
    """A compiled ignore file anchored at ``base``.

    Attributes:
        base: Directory the patterns are relative to.
        spec: The compiled gitignore spec.
        source: Where the patterns were read from.
    """

    base: Path
    spec: pathspec.GitIgnoreSpec
    source: Path

    @classmethod
    def load(cls, path: Path, base: Path | None = None) -> IgnoreFile | None:
        """Read and compile an ignore file.

        Returns None if the file is missing or holds no patterns. An
        unreadable file is logged and treated as empty.
        """
        try:
            if not path.is_file():
                return None
            lines = path.read_text(encoding="utf-8", errors="replace").splitlines()
        except OSError as e:
            logger.warning(f"Could not read ignore file {path}: {e}")
            return None
        lines = [line for line in lines if line.strip() and not line.startswith("#")]
        if not lines:
            return None
        return cls(
            base=base if base is not None else path.parent,
            spec=pathspec.GitIgnoreSpec.from_lines(lines),
            source=path,
        )

    def check(self, path: Path, is_dir: bool) -> bool | None:
        """Return True if ignored, False if re-included, None if no rule matches."""
        try:
            rel = path.relative_to(self.base).as_posix()
        except ValueError:
            return None
        if rel in ("", "."):
            return None
        if is_dir:
            rel += "/"
        return self.spec.check_file(rel).include


def find_repository_root(start: Path) -> Path | None:
    """Walk up from ``start`` to the first directory containing ``.git``."""
    current = start
    while True:
        if (current / ".git").exists():
            return current
        parent = current.parent
        if parent == current:
            return None
        current = parent


def _git_dir(repo_root: Path) -> Path | None:
    """Resolve the git directory, following a ``gitdir:`` file for worktrees."""
    dot_git = repo_root / ".git"
    if dot_git.is_dir():
        return dot_git
    try:
        content = dot_git.read_text(encoding="utf-8").strip()
    except OSError:
        return None
    if content.startswith("gitdir:"):
        git_dir = Path(content[len("gitdir:") :].strip())
        return git_dir if git_dir.is_absolute() else repo_root / git_dir
    return None


def global_excludes_path() -> Path | None:
    """Locate the user's global git excludes file.

    Uses ``core.excludesFile`` when git is available and sets it, otherwise
    the XDG default ``$XDG_CONFIG_HOME/git/ignore``.
    """
    try:
        result = subprocess.run(
            ["git", "config", "--get", "core.excludesFile"],
            capture_output=True,
            text=True,
            timeout=5,
        )
        configured = result.stdout.strip()
        if result.returncode == 0 and configured:
            return Path(configured).expanduser()
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug(f"Could not query git for core.excludesFile: {e}")

    xdg_home = os.environ.get("XDG_CONFIG_HOME")
    config_home = Path(xdg_home) if xdg_home else Path.home() / ".config"
    return config_home / "git" / "ignore"


class IgnoreStack:
    """An immutable chain of ignore files in effect for one directory.

    ``ignores`` holds the per-directory ``.ignore`` files and ``layers`` the
    per-directory ``.gitignore`` files, shallowest first. ``fallbacks`` holds
    ``info/exclude`` and the global file, in that order. Outside a git
    repository only ``.ignore`` files are collected.
    """

    def __init__(
        self,
        layers: tuple[IgnoreFile, ...] = (),
        fallbacks: tuple[IgnoreFile, ...] = (),
        enabled: bool = True,
        ignores: tuple[IgnoreFile, ...] = (),
        in_repository: bool = True,
    ):
        self.layers = layers
        self.fallbacks = fallbacks
        self.enabled = enabled
        self.ignores = ignores
        self.in_repository = in_repository

    @classmethod
    def for_root(cls, root: Path, options: WalkOptions | None = None) -> IgnoreStack:
        """Build the stack in effect at ``root`` (a directory).

        ``.ignore`` files are read from every ancestor of ``root`` and from
        ``root`` itself. Inside a git repository this also collects the
        ``.gitignore`` files of every ancestor between the repository root
        and ``root``, plus the repository exclude file and the global
        excludes file.
        """
        options = options or WalkOptions()
        if not options.respect_gitignore:
            return cls(enabled=False)

        root = root.absolute()
        repo_root = find_repository_root(root)
        directories = [*reversed(root.parents), root]

        ignores: list[IgnoreFile] = []
        for directory in directories:
            ignore_file = IgnoreFile.load(directory / IGNORE_NAME)
            if ignore_file is not None:
                ignores.append(ignore_file)

        if repo_root is None:
            logger.debug(f"{root} is not inside a git repository; .gitignore files not applied")
            return cls(ignores=tuple(ignores), in_repository=False)

        layers: list[IgnoreFile] = []
        fallbacks: list[IgnoreFile] = []

        for directory in directories:
            if directory != repo_root and repo_root not in directory.parents:
                continue
            ignore_file = IgnoreFile.load(directory / GITIGNORE_NAME)
            if ignore_file is not None:
                layers.append(ignore_file)

        git_dir = _git_dir(repo_root)
        if options.git_exclude and git_dir is not None:
            exclude = IgnoreFile.load(git_dir / "info" / "exclude", base=repo_root)
            if exclude is not None:
                fallbacks.append(exclude)

        if options.git_global:
            global_path = global_excludes_path()
            if global_path is not None:
                global_file = IgnoreFile.load(global_path, base=repo_root)
                if global_file is not None:
                    fallbacks.append(global_file)

        return cls(tuple(layers), tuple(fallbacks), ignores=tuple(ignores))

    def child(self, directory: Path) -> IgnoreStack:
        """Return the stack in effect inside ``directory``."""
        if not self.enabled:
            return self
        ignore_file = IgnoreFile.load(directory / IGNORE_NAME)
        gitignore_file = None
        if self.in_repository:
            gitignore_file = IgnoreFile.load(directory / GITIGNORE_NAME)
        if ignore_file is None and gitignore_file is None:
            return self
        ignores = self.ignores if ignore_file is None else (*self.ignores, ignore_file)
        layers = self.layers if gitignore_file is None else (*self.layers, gitignore_file)
        return IgnoreStack(
            layers,
            self.fallbacks,
            ignores=ignores,
            in_repository=self.in_repository,
        )

    def is_ignored(self, path: Path, is_dir: bool) -> bool:
        """Return True if the most specific matching rule ignores ``path``."""
        if not self.enabled:
            return False
        for ignore_file in (*reversed(self.ignores), *reversed(self.layers), *self.fallbacks):
            result = ignore_file.check(path, is_dir)
            if result is not None:
                return result
        return False

    def __repr__(self) -> str:
        sources = [str(f.source) for f in (*self.ignores, *self.layers, *self.fallbacks)]
        return f"IgnoreStack({sources!r})"
