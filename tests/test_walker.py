"""Tests for collect_files.

This module tests the directory walk end to end:
- The reference scenarios for each kind of rule
- Pruning (pruned directories are never listed)
- Ordering, idempotence and the root special cases
- gitignore integration, symlinks and permission handling
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from dumpdir.config import AppConfig
from dumpdir.core.exceptions import WalkError
from dumpdir.core.filter import FilterRules
from dumpdir.core.ignore import WalkOptions
from dumpdir.core.stats import SkipReason
from dumpdir.core.walker import WalkWarning, _Walk, collect_files


def build(**overrides) -> FilterRules:
    return FilterRules.build(AppConfig.bare(**overrides))


@pytest.fixture
def listed_dirs(monkeypatch: pytest.MonkeyPatch) -> list[Path]:
    """Record every directory the walker lists."""
    listed: list[Path] = []
    original = _Walk.list_dir

    def recording(self, path):
        listed.append(Path(path))
        return original(self, path)

    monkeypatch.setattr(_Walk, "list_dir", recording)
    return listed


class TestScenarios:
    """Reference scenarios, walked from the working directory."""

    def test_extension_rule(self, in_tmp: Path, make_tree) -> None:
        make_tree({"Cargo.lock": "", "main.rs": "fn main() {}\n"})
        rules = FilterRules.build(AppConfig(skip_extensions=["lock"], skip_hidden=False))
        assert collect_files(Path("."), rules) == [Path("main.rs")]

    def test_glob_prunes_directory(self, in_tmp: Path, make_tree, listed_dirs: list[Path]) -> None:
        make_tree({"src/main.rs": "fn main() {}\n", "target/debug/bin": "ELF"})
        rules = build(skip_globs=["**/target/**"])
        assert collect_files(Path("."), rules) == [Path("src/main.rs")]
        assert Path("target") not in listed_dirs
        assert Path("target/debug") not in listed_dirs

    def test_default_configuration(self, in_tmp: Path, make_tree) -> None:
        make_tree(
            {
                "src/main.rs": "fn main() {}\n",
                "Cargo.lock": "# lock\n",
                "src/foo_test.rs": "#[test] fn t() {}\n",
                ".env": "SECRET=1\n",
                "README.md": "# readme\n",
            }
        )
        rules = FilterRules.build(AppConfig())
        assert collect_files(Path("."), rules) == [Path("src/main.rs")]

    def test_hidden_directory_never_listed(self, in_tmp: Path, make_tree, listed_dirs: list[Path]) -> None:
        make_tree({".github/workflows/ci.yml": "on: push\n", "src/main.rs": "fn main() {}\n"})
        rules = build(skip_hidden=True)
        assert collect_files(Path("."), rules) == [Path("src/main.rs")]
        assert all(".github" not in p.parts for p in listed_dirs)


class TestOrdering:
    """Tests for deterministic output."""

    def test_sorted_per_directory(self, make_tree, bare_rules: FilterRules) -> None:
        root = make_tree({"b.txt": "", "c/x.txt": "", "a/z.txt": "", "a/y.txt": ""})
        result = collect_files(root, bare_rules)
        assert [p.relative_to(root).as_posix() for p in result] == [
            "a/y.txt",
            "a/z.txt",
            "b.txt",
            "c/x.txt",
        ]

    def test_directory_contents_before_later_siblings(self, make_tree, bare_rules: FilterRules) -> None:
        """Test that a directory's files come at the directory's position by name."""
        root = make_tree({"a.txt": "", "a/b.txt": ""})
        result = collect_files(root, bare_rules)
        assert [p.relative_to(root).as_posix() for p in result] == ["a/b.txt", "a.txt"]

    def test_independent_of_enumeration_order(
        self, make_tree, bare_rules: FilterRules, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        root = make_tree({"one.txt": "", "two.txt": "", "three.txt": ""})
        expected = collect_files(root, bare_rules)

        original_scandir = os.scandir

        class ReversedScandir:
            def __init__(self, path):
                self._it = original_scandir(path)

            def __enter__(self):
                return reversed(list(self._it))

            def __exit__(self, *exc):
                self._it.close()

        monkeypatch.setattr("dumpdir.core.walker.os.scandir", ReversedScandir)
        assert collect_files(root, bare_rules) == expected

    def test_idempotent(self, make_tree) -> None:
        root = make_tree({"src/a.rs": "", "src/b.rs": "", "docs/x.md": "", "x.lock": ""})
        rules = build(skip_extensions=["lock"])
        assert collect_files(root, rules) == collect_files(root, rules)

    def test_paths_joined_to_root(self, make_tree, bare_rules: FilterRules) -> None:
        root = make_tree({"src/main.rs": ""})
        assert collect_files(root, bare_rules) == [root / "src" / "main.rs"]

    def test_deep_tree(self, tmp_path: Path, bare_rules: FilterRules) -> None:
        """Test that nesting deeper than the interpreter recursion limit is walked."""
        depth = 1200
        current = tmp_path
        for _ in range(depth):
            current = current / "a"
            os.mkdir(current)
        (current / "leaf.txt").write_text("bottom\n")
        (tmp_path / "top.txt").write_text("top\n")

        try:
            result = collect_files(tmp_path, bare_rules)
        finally:
            # Remove bottom-up so cleanup does not recurse either
            (current / "leaf.txt").unlink()
            while current != tmp_path:
                os.rmdir(current)
                current = current.parent

        deepest = tmp_path.joinpath(*["a"] * depth)
        assert result == [deepest / "leaf.txt", tmp_path / "top.txt"]


class TestRoot:
    """Tests for the special handling of the walk root."""

    def test_root_is_never_pruned(self, tmp_path: Path, make_tree) -> None:
        root = make_tree({"main.rs": ""}, root=tmp_path / ".hidden")
        assert collect_files(root, build(skip_hidden=True)) == [root / "main.rs"]

    def test_single_file_root(self, tmp_path: Path) -> None:
        path = tmp_path / "main.rs"
        path.write_text("fn main() {}\n")
        assert collect_files(path, build()) == [path]

    def test_single_file_root_filtered(self, tmp_path: Path) -> None:
        path = tmp_path / "Cargo.lock"
        path.write_text("")
        assert collect_files(path, build(skip_extensions=["lock"])) == []

    def test_missing_root(self, tmp_path: Path) -> None:
        with pytest.raises(WalkError) as exc_info:
            collect_files(tmp_path / "nope", build())
        assert exc_info.value.path == str(tmp_path / "nope")
        assert isinstance(exc_info.value.cause, FileNotFoundError)

    def test_empty_directory(self, tmp_path: Path) -> None:
        assert collect_files(tmp_path, build()) == []

    def test_accepts_string_root(self, make_tree) -> None:
        root = make_tree({"a.txt": ""})
        assert collect_files(str(root), build()) == [root / "a.txt"]


class TestGitignore:
    """Tests for gitignore integration."""

    def test_gitignored_entries_skipped(self, make_tree) -> None:
        root = make_tree(
            {
                ".git/": "",
                ".gitignore": "build/\n*.log\n",
                "build/out.txt": "",
                "debug.log": "",
                "src/main.rs": "",
            }
        )
        assert collect_files(root, build(skip_hidden=True)) == [root / "src" / "main.rs"]

    def test_nested_gitignore(self, make_tree) -> None:
        root = make_tree(
            {
                ".git/": "",
                "pkg/.gitignore": "generated.rs\n",
                "pkg/generated.rs": "",
                "pkg/lib.rs": "",
                "generated.rs": "",
            }
        )
        result = collect_files(root, build(skip_hidden=True))
        assert result == [root / "generated.rs", root / "pkg" / "lib.rs"]

    def test_gitignore_disabled(self, make_tree) -> None:
        root = make_tree({".git/": "", ".gitignore": "*.log\n", "debug.log": ""})
        result = collect_files(
            root,
            build(skip_hidden=True),
            options=WalkOptions(respect_gitignore=False),
        )
        assert result == [root / "debug.log"]

    def test_gitignored_directory_not_listed(self, make_tree, listed_dirs: list[Path]) -> None:
        root = make_tree({".git/": "", ".gitignore": "vendor/\n", "vendor/lib/x.c": "", "main.c": ""})
        assert collect_files(root, build(skip_hidden=True)) == [root / "main.c"]
        assert root / "vendor" not in listed_dirs

    def test_gitignore_needs_repository(self, make_tree, bare_rules: FilterRules) -> None:
        """Test that a .gitignore outside any repository does not hide files."""
        root = make_tree({".gitignore": "*.log\n", "a.log": "", "main.rs": ""})
        assert collect_files(root, bare_rules) == [
            root / ".gitignore",
            root / "a.log",
            root / "main.rs",
        ]

    def test_dot_ignore_without_repository(self, make_tree, bare_rules: FilterRules) -> None:
        root = make_tree({".ignore": "*.log\n", "a.log": "", "main.rs": ""})
        assert collect_files(root, bare_rules) == [root / ".ignore", root / "main.rs"]


class TestSpecialEntries:
    """Tests for symlinks and permission errors."""

    def test_symlinks_not_followed(self, make_tree, bare_rules: FilterRules) -> None:
        root = make_tree({"real/file.txt": "", "target.txt": ""})
        (root / "link-dir").symlink_to(root / "real", target_is_directory=True)
        (root / "link.txt").symlink_to(root / "target.txt")
        assert collect_files(root, bare_rules) == [root / "real" / "file.txt", root / "target.txt"]

    def test_permission_denied_below_root_warns(
        self, make_tree, bare_rules: FilterRules, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        root = make_tree({"locked/secret.txt": "", "open/file.txt": ""})
        original = _Walk.list_dir

        def deny_locked(self, path):
            if Path(path).name == "locked":
                raise PermissionError(13, "Permission denied", str(path))
            return original(self, path)

        monkeypatch.setattr(_Walk, "list_dir", deny_locked)

        warnings: list[WalkWarning] = []
        result = collect_files(root, bare_rules, on_warning=warnings.append)

        assert result == [root / "open" / "file.txt"]
        assert len(warnings) == 1
        assert warnings[0].path == root / "locked"
        assert warnings[0].reason is SkipReason.PERMISSION_DENIED

    def test_permission_denied_on_root_is_fatal(
        self, tmp_path: Path, bare_rules: FilterRules, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def deny(self, path):
            raise PermissionError(13, "Permission denied", str(path))

        monkeypatch.setattr(_Walk, "list_dir", deny)
        with pytest.raises(WalkError):
            collect_files(tmp_path, bare_rules)

    def test_other_errors_are_fatal(
        self, make_tree, bare_rules: FilterRules, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        root = make_tree({"sub/file.txt": ""})
        original = _Walk.list_dir

        def fail_sub(self, path):
            if Path(path).name == "sub":
                raise OSError(5, "Input/output error", str(path))
            return original(self, path)

        monkeypatch.setattr(_Walk, "list_dir", fail_sub)
        with pytest.raises(WalkError) as exc_info:
            collect_files(root, bare_rules)
        assert exc_info.value.path == str(root / "sub")

    @pytest.mark.skipif(
        not hasattr(os, "geteuid") or os.geteuid() == 0,
        reason="requires a non-root user for real permission errors",
    )
    def test_real_unreadable_directory(self, make_tree, bare_rules: FilterRules) -> None:
        root = make_tree({"locked/secret.txt": "", "file.txt": ""})
        locked = root / "locked"
        locked.chmod(0)
        try:
            warnings: list[WalkWarning] = []
            result = collect_files(root, bare_rules, on_warning=warnings.append)
        finally:
            locked.chmod(0o755)
        assert result == [root / "file.txt"]
        assert [w.path for w in warnings] == [locked]
