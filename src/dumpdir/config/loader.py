"""Configuration file loading and discovery.

This module finds the global and local configuration files and parses
them into plain dictionaries. TOML is the native format; YAML and JSON
are accepted by file suffix.
"""

from __future__ import annotations

import json
import tomllib
from pathlib import Path
from typing import Any

import yaml

from dumpdir.core.exceptions import ConfigError, ConfigNotFoundError

# Local config file looked up in the current directory
LOCAL_CONFIG_NAME = "dump.toml"


def global_config_path() -> Path:
    """Return the location of the user-level config file."""
    return Path.home() / ".config" / "dump-dir" / "config.toml"


class ConfigLoader:
    """Loads and parses configuration files.

    Locates the global file (``~/.config/dump-dir/config.toml``) and the
    local file (an explicit path, or ``./dump.toml``), and parses either into
    a dictionary that can be merged over the defaults.
    """

    def __init__(self, cwd: Path | None = None) -> None:
        """Initialize the config loader.

        Args:
            cwd: Directory searched for ``dump.toml``. Defaults to the
                process working directory at lookup time.
        """
        self.cwd = cwd

    def find_global_file(self) -> Path | None:
        path = global_config_path()
        return path if path.is_file() else None

    def find_local_file(self, explicit: Path | str | None = None) -> Path | None:
        """Find the local configuration file.

        Args:
            explicit: A path the user asked for. It must exist.

        Returns:
            The local config path, or None if there is none.

        Raises:
            ConfigNotFoundError: If ``explicit`` is given but does not exist.
        """
        if explicit is not None:
            path = Path(explicit)
            if not path.exists():
                raise ConfigNotFoundError(str(path))
            return path

        base = self.cwd if self.cwd is not None else Path.cwd()
        path = base / LOCAL_CONFIG_NAME
        return path if path.is_file() else None

    def load(self, path: Path | str) -> dict[str, Any]:
        """Load configuration values from a file.

        Args:
            path: Path to the configuration file.

        Returns:
            The parsed key/value mapping. Unknown keys are kept here and
            dropped when the merged values are validated.

        Raises:
            ConfigNotFoundError: If the file does not exist.
            ConfigError: If the file cannot be read or parsed.
        """
        path = Path(path)

        if not path.exists():
            raise ConfigNotFoundError(str(path))

        if not path.is_file():
            raise ConfigError(f"Configuration path is not a file: {path}")

        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(f"Failed to read config file {path}: {e}") from e

        suffix = path.suffix.lower()
        if suffix in (".yml", ".yaml"):
            return self._load_yaml(content, path)
        elif suffix == ".json":
            return self._load_json(content, path)
        else:
            return self._load_toml(content, path)

    def _load_yaml(self, content: str, path: Path) -> dict[str, Any]:
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"Config file must contain a mapping, got: {type(data).__name__}")
        return data

    def _load_toml(self, content: str, path: Path) -> dict[str, Any]:
        try:
            return tomllib.loads(content)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {path}: {e}") from e

    def _load_json(self, content: str, path: Path) -> dict[str, Any]:
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config file must contain an object, got: {type(data).__name__}")
        return data
