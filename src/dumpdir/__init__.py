"""dump-dir - Print the contents of a directory tree, git-aware and filter-configurable.

dump-dir walks one or more paths, drops everything a configurable filter
rejects (hidden entries, binary files, lock files, build output, paths
ignored by git) and prints each remaining file under a header naming it.
"""

__version__ = "0.1.0"
