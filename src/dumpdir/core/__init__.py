# Core module for dump-dir

from dumpdir.core.exceptions import (
    ConfigError,
    ConfigNotFoundError,
    DumpDirError,
    GlobSetBuildError,
    InvalidGlobError,
    InvalidPatternError,
    PathNotFoundError,
    WalkError,
)
from dumpdir.core.filter import (
    FilterRules,
    SkipDecision,
    SkipRule,
)
from dumpdir.core.globset import GlobSet
from dumpdir.core.ignore import IgnoreStack, WalkOptions
from dumpdir.core.stats import (
    DumpStats,
    SkippedEntry,
    SkipReason,
)
from dumpdir.core.walker import (
    WalkWarning,
    WarningCallback,
    collect_files,
)
