"""Configuration management for dump-dir.

Configuration is layered, later sources overriding earlier ones. Lists are
replaced, never merged:

1. Built-in defaults (lowest priority)
2. Global config file (``~/.config/dump-dir/config.toml``)
3. Local config file (``--config``, ``$DUMP_DIR_CONFIG`` or ``./dump.toml``)
4. Environment variables (``DUMP_DIR_*``)
5. CLI arguments (highest priority)

Example usage::

    from dumpdir.config import load_config

    config = load_config(cli_args={"skip_extensions": ["lock"]})
    print(config.skip_extensions)
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from dumpdir.config.env import (
    ENV_CONFIG_PATH,
    get_config_path_from_env,
    get_env_overrides,
)
from dumpdir.config.loader import ConfigLoader, global_config_path
from dumpdir.config.schema import (
    DEFAULT_SKIP_EXTENSIONS,
    DEFAULT_SKIP_FILENAMES,
    DEFAULT_SKIP_PATH_COMPONENTS,
    DEFAULT_SKIP_PATTERNS,
    AppConfig,
)
from dumpdir.core.exceptions import ConfigError

__all__ = [
    # Schema
    "AppConfig",
    "DEFAULT_SKIP_EXTENSIONS",
    "DEFAULT_SKIP_PATTERNS",
    "DEFAULT_SKIP_FILENAMES",
    "DEFAULT_SKIP_PATH_COMPONENTS",
    # Loader
    "ConfigLoader",
    "global_config_path",
    # Environment variables
    "ENV_CONFIG_PATH",
    "get_env_overrides",
    # Priority handling
    "ConfigPriority",
    "default_values",
    "load_config",
]

logger = logging.getLogger(__name__)


class ConfigPriority(str, Enum):
    """Configuration source priority levels.

    Higher priority sources override lower priority ones.
    """

    DEFAULT = "default"
    GLOBAL_FILE = "global_file"
    LOCAL_FILE = "local_file"
    ENVIRONMENT = "environment"
    CLI = "cli"


def default_values() -> dict[str, Any]:
    """Return the built-in defaults as a plain dictionary.

    Unlike ``AppConfig()``, this never reads the environment.
    """
    return {
        name: field.get_default(call_default_factory=True)
        for name, field in AppConfig.model_fields.items()
    }


def _merge(
    base: dict[str, Any],
    override: dict[str, Any],
    source: ConfigPriority,
    sources: dict[str, ConfigPriority],
) -> dict[str, Any]:
    """Overlay ``override`` on ``base``, recording where each key came from.

    ``None`` values are treated as unset.
    """
    result = base.copy()
    for key, value in override.items():
        if value is None:
            continue
        result[key] = value
        sources[key] = source
    return result


def _validate(values: dict[str, Any], sources: dict[str, ConfigPriority]) -> AppConfig:
    try:
        return AppConfig.model_validate(values)
    except ValidationError as e:
        error = e.errors()[0]
        key = str(error["loc"][0]) if error["loc"] else None
        origin = sources.get(key, ConfigPriority.DEFAULT).value if key else None
        raise ConfigError(
            f"Invalid value for '{key}': {error['msg']}",
            config_key=key,
            context={"source": origin} if origin else None,
        ) from e


def load_config(
    config_path: Path | str | None = None,
    cli_args: dict[str, Any] | None = None,
    use_env: bool = True,
    use_file: bool = True,
) -> AppConfig:
    """Load configuration with proper priority handling.

    Args:
        config_path: Optional explicit path to the local config file.
        cli_args: Optional dictionary of CLI overrides keyed by field name.
            ``None`` values are ignored.
        use_env: Whether to apply environment variable overrides.
        use_file: Whether to load the global and local config files.

    Returns:
        A fully merged AppConfig instance.

    Raises:
        ConfigNotFoundError: If an explicitly named config file is missing.
        ConfigError: If a file cannot be parsed or a value has the wrong type.
    """
    sources: dict[str, ConfigPriority] = {}
    values = default_values()

    if use_file:
        loader = ConfigLoader()

        global_file = loader.find_global_file()
        if global_file is not None:
            logger.debug(f"Loading global config {global_file}")
            values = _merge(values, loader.load(global_file), ConfigPriority.GLOBAL_FILE, sources)

        explicit = config_path
        if explicit is None and use_env:
            explicit = get_config_path_from_env()
        local_file = loader.find_local_file(explicit)
        if local_file is not None:
            logger.debug(f"Loading local config {local_file}")
            values = _merge(values, loader.load(local_file), ConfigPriority.LOCAL_FILE, sources)

    if use_env:
        values = _merge(values, get_env_overrides(), ConfigPriority.ENVIRONMENT, sources)

    if cli_args:
        values = _merge(values, cli_args, ConfigPriority.CLI, sources)

    return _validate(values, sources)
