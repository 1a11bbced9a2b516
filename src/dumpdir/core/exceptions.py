"""Custom exception hierarchy for dump-dir.

All exceptions inherit from DumpDirError, so callers can catch every
dump-dir failure with a single except clause. Pattern errors are raised
while building a filter; walk errors while traversing a root.
"""

from __future__ import annotations


class DumpDirError(Exception):
    """Base exception for all dump-dir errors.

    Attributes:
        message: Human-readable error message.
        context: Optional dictionary of additional context about the error.
    """

    def __init__(self, message: str, context: dict | None = None):
        """Initialize the exception.

        Args:
            message: Human-readable error message.
            context: Optional dictionary of additional context about the error.
        """
        self.message = message
        self.context = context or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including context if present."""
        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class InvalidPatternError(DumpDirError):
    """Raised when a skip_patterns entry is not a valid regular expression.

    Example:
        >>> raise InvalidPatternError("[invalid", cause=re.error("unterminated character set"))
    """

    def __init__(self, pattern: str, cause: Exception):
        super().__init__(f"Invalid regex pattern '{pattern}': {cause}")
        self.pattern = pattern
        self.cause = cause


class InvalidGlobError(DumpDirError):
    """Raised when a skip_globs entry is not a valid glob."""

    def __init__(self, pattern: str, cause: Exception):
        super().__init__(f"Invalid glob pattern '{pattern}': {cause}")
        self.pattern = pattern
        self.cause = cause


class GlobSetBuildError(DumpDirError):
    """Raised when individually valid globs cannot be combined into one matcher."""

    def __init__(self, cause: Exception):
        super().__init__(f"Failed to build glob set: {cause}")
        self.cause = cause


class WalkError(DumpDirError):
    """Raised for a fatal error during directory traversal.

    Permission-denied errors below the root are reported as warnings
    instead; everything else (a missing or unreadable root, an I/O
    failure while listing a directory) ends the walk with this error.
    """

    def __init__(self, path: str, cause: Exception):
        super().__init__(f"Walk error: {cause}", context={"path": path})
        self.path = path
        self.cause = cause


class ConfigError(DumpDirError):
    """Exception raised for configuration errors.

    Raised when a config file cannot be parsed or contains values of the
    wrong type.

    Example:
        >>> raise ConfigError("Invalid TOML in dump.toml", config_key="skip_binary")
    """

    def __init__(self, message: str, config_key: str | None = None, context: dict | None = None):
        """Initialize the config error.

        Args:
            message: Human-readable error message.
            config_key: The configuration key that caused the error.
            context: Optional dictionary of additional context.
        """
        ctx = context or {}
        if config_key:
            ctx["config_key"] = config_key
        super().__init__(message, ctx)
        self.config_key = config_key


class ConfigNotFoundError(ConfigError):
    """Raised when an explicitly requested config file does not exist."""

    def __init__(self, path: str):
        super().__init__(f"Config file not found: {path}")
        self.path = path


class PathNotFoundError(DumpDirError):
    """Raised when a path given on the command line does not exist."""

    def __init__(self, path: str):
        super().__init__(f"Path does not exist: {path}")
        self.path = path
