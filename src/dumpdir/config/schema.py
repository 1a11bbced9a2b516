"""Configuration schema definitions using Pydantic Settings.

This module defines AppConfig, the merged configuration a filter is built
from, with its documented defaults.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SKIP_EXTENSIONS = ["snap", "lock", "new", "gitignore", "orig", "bak", "swp"]

# Test files like foo_test.rs or test_foo.rs
DEFAULT_SKIP_PATTERNS = [r".*test.*\.rs$"]

DEFAULT_SKIP_FILENAMES = ["license", "readme", "changelog", "makefile", "dockerfile"]

DEFAULT_SKIP_PATH_COMPONENTS = [".github", ".git", "node_modules", ".direnv"]

_LIST_FIELDS = (
    "skip_extensions",
    "skip_patterns",
    "skip_filenames",
    "skip_path_components",
    "skip_globs",
)


def no_filter_values() -> dict[str, Any]:
    """Return rule values that let every file through."""
    values: dict[str, Any] = {name: [] for name in _LIST_FIELDS}
    values.update(skip_binary=False, skip_hidden=False)
    return values


class AppConfig(BaseSettings):
    """The resolved, merged configuration.

    Values can be set programmatically, loaded from config files, or read
    from ``DUMP_DIR_*`` environment variables. List fields accept a list or
    a comma-separated string.
    """

    model_config = SettingsConfigDict(
        env_prefix="DUMP_DIR_",
        case_sensitive=False,
        extra="ignore",
        enable_decoding=False,
    )

    skip_extensions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SKIP_EXTENSIONS),
        description="File extensions to skip, without the leading dot",
    )
    skip_patterns: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SKIP_PATTERNS),
        description="Regular expressions matched case-insensitively against the full path",
    )
    skip_filenames: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SKIP_FILENAMES),
        description="Exact filenames or stems to skip (case-insensitive)",
    )
    skip_path_components: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SKIP_PATH_COMPONENTS),
        description="Skip a file if any component of its path matches",
    )
    skip_globs: list[str] = Field(
        default_factory=list,
        description="Glob patterns matched against the full path, e.g. **/target/**",
    )
    skip_binary: bool = Field(
        default=True,
        description="Skip files whose content is detected as binary",
    )
    skip_hidden: bool = Field(
        default=True,
        description="Skip hidden files and directories",
    )
    respect_gitignore: bool = Field(
        default=True,
        description="Honor .gitignore, .git/info/exclude and global git excludes",
    )

    @field_validator(*_LIST_FIELDS, mode="before")
    @classmethod
    def parse_list(cls, v: Any) -> list[str]:
        """Parse a list from a comma-separated string or a sequence."""
        if v is None:
            return []
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return [str(item) for item in v]

    @classmethod
    def bare(cls, **overrides: Any) -> AppConfig:
        """Build a config with every rule disabled, then apply ``overrides``."""
        values = no_filter_values()
        values.update(overrides)
        return cls(**values)
