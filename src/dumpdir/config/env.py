"""Environment variable mapping for dump-dir configuration.

This module defines the environment variables that can be used to
configure dump-dir and provides utilities for reading them.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

# Environment variable names
ENV_CONFIG_PATH = "DUMP_DIR_CONFIG"
ENV_SKIP_EXTENSIONS = "DUMP_DIR_SKIP_EXTENSIONS"
ENV_SKIP_PATTERNS = "DUMP_DIR_SKIP_PATTERNS"
ENV_SKIP_FILENAMES = "DUMP_DIR_SKIP_FILENAMES"
ENV_SKIP_PATH_COMPONENTS = "DUMP_DIR_SKIP_PATH_COMPONENTS"
ENV_SKIP_GLOBS = "DUMP_DIR_SKIP_GLOBS"
ENV_SKIP_BINARY = "DUMP_DIR_SKIP_BINARY"
ENV_SKIP_HIDDEN = "DUMP_DIR_SKIP_HIDDEN"
ENV_RESPECT_GITIGNORE = "DUMP_DIR_RESPECT_GITIGNORE"

# Variable name -> config key. Values are passed through as strings and
# validated by AppConfig, so a malformed boolean is reported against its key.
_ENV_KEYS = {
    ENV_SKIP_EXTENSIONS: "skip_extensions",
    ENV_SKIP_PATTERNS: "skip_patterns",
    ENV_SKIP_FILENAMES: "skip_filenames",
    ENV_SKIP_PATH_COMPONENTS: "skip_path_components",
    ENV_SKIP_GLOBS: "skip_globs",
    ENV_SKIP_BINARY: "skip_binary",
    ENV_SKIP_HIDDEN: "skip_hidden",
    ENV_RESPECT_GITIGNORE: "respect_gitignore",
}


def get_env_overrides() -> dict[str, Any]:
    """Get configuration overrides from environment variables.

    List variables are comma-separated; an empty value clears the list.

    Returns:
        Dictionary of configuration values from environment variables.
    """
    overrides: dict[str, Any] = {}
    for env_name, key in _ENV_KEYS.items():
        if env_name in os.environ:
            overrides[key] = os.environ[env_name].strip()
    return overrides


def get_config_path_from_env() -> Path | None:
    """Get the local config file path from the environment.

    Returns:
        Path to config file if set, None otherwise.
    """
    value = os.environ.get(ENV_CONFIG_PATH, "").strip()
    if value:
        return Path(value).expanduser()
    return None
