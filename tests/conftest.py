"""Pytest fixtures for dump-dir tests.

This module provides reusable fixtures for building directory trees, an
isolated environment (no user config, no DUMP_DIR_* variables) and filter
configurations with every rule turned off.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path

import pytest

from dumpdir.config import AppConfig
from dumpdir.core.filter import FilterRules

# Mapping of relative path -> file content. A trailing "/" creates an
# empty directory instead.
TreeSpec = dict[str, str | bytes]


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HOME and XDG_CONFIG_HOME at an empty directory and clear DUMP_DIR_*.

    Keeps the user's real config and global git excludes out of every test.
    """
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(home / ".gitconfig"))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    for name in list(os.environ):
        if name.startswith("DUMP_DIR_"):
            monkeypatch.delenv(name, raising=False)
    return home


@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[[TreeSpec], Path]:
    """Return a function that materializes a tree under ``tmp_path``.

    Example:
        root = make_tree({"src/main.rs": "fn main() {}", "build/": ""})
    """

    def _make(spec: TreeSpec, root: Path | None = None) -> Path:
        base = root or tmp_path
        for rel, content in spec.items():
            target = base / rel
            if rel.endswith("/"):
                target.mkdir(parents=True, exist_ok=True)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                target.write_bytes(content)
            else:
                target.write_text(content, encoding="utf-8")
        return base

    return _make


@pytest.fixture
def bare_config() -> AppConfig:
    """Return a config with every rule disabled."""
    return AppConfig.bare()


@pytest.fixture
def bare_rules(bare_config: AppConfig) -> FilterRules:
    """Return rules that skip nothing."""
    return FilterRules.build(bare_config)


@pytest.fixture
def in_tmp(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test with ``tmp_path`` as the working directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path
