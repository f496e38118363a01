"""Integration tests for path classification: excludes and symlink policy."""

import os
from pathlib import Path

import pytest

from folder_hash import ExcludedRootError, NotFoundError, hash_element
from folder_hash.classifier import PathClassifier, PathKind
from folder_hash.config import resolve_options
from folder_hash.fs import LocalFileSystem, MemoryFileSystem


def make_classifier(**overrides) -> PathClassifier:
    return PathClassifier(LocalFileSystem(), resolve_options(overrides))


class TestExcludePatterns:
    """Tests for exclude matching against relative paths and basenames."""

    @pytest.mark.parametrize(
        ("pattern", "rel_path", "is_dir", "expected"),
        [
            ("file1", "file1", False, True),
            ("file1", "sub/file1", False, True),
            ("file1", "file10", False, False),
            ("**/.*", ".hidden", False, True),
            ("**/.*", "a/b/.gitkeep", False, True),
            ("**/.*", "a/visible", False, False),
            ("*.log", "logs/run.log", False, True),
            ("build/", "build", True, True),
            ("build/", "build", False, False),
            ("src/gen", "src/gen", True, True),
            ("src/gen", "other/src/gen", True, False),
            ("node_modules", "web/node_modules", True, True),
        ],
    )
    def test_is_excluded(self, pattern: str, rel_path: str, is_dir: bool, expected: bool):
        classifier = make_classifier(excludes=[pattern])

        assert classifier.is_excluded(rel_path, is_dir=is_dir) is expected

    def test_no_patterns_excludes_nothing(self):
        assert make_classifier().is_excluded(".hidden") is False

    def test_classify_file_and_directory(self, sample_folder: Path):
        classifier = make_classifier()

        assert classifier.classify(str(sample_folder / "file1"), "file1") is PathKind.FILE
        assert classifier.classify(str(sample_folder / "f2"), "f2") is PathKind.DIRECTORY

    def test_classify_excluded(self, sample_folder: Path):
        classifier = make_classifier(excludes=["**/.*"])

        assert classifier.classify(str(sample_folder / ".hidden"), ".hidden") is PathKind.SKIP

    def test_classify_missing(self, sample_folder: Path):
        with pytest.raises(NotFoundError):
            make_classifier().classify(str(sample_folder / "missing"), "missing")

    def test_classify_beneath_a_file(self, sample_folder: Path):
        with pytest.raises(NotFoundError):
            make_classifier().classify(str(sample_folder / "file1" / "x"), "file1/x")

    def test_list_entries_of_a_file(self, sample_folder: Path):
        with pytest.raises(NotFoundError):
            make_classifier().list_entries(str(sample_folder / "file1"))

    def test_list_entries_unordered_names(self, sample_folder: Path):
        names = make_classifier().list_entries(str(sample_folder / "subfolder1"))

        assert sorted(names) == ["file1", "file2"]

    def test_list_entries_memory_filesystem(self):
        fs = MemoryFileSystem({"d": {"z": b"", "a": b""}})
        classifier = PathClassifier(fs, resolve_options())

        assert classifier.list_entries("/d") == ["z", "a"]


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
class TestSymlinks:
    """Tests for symlink following and cycle avoidance."""

    @pytest.fixture
    def linked_tree(self, make_tree) -> Path:
        root = make_tree("linked", {"data": {"file1": b"hello"}, "plain": b"hello"})
        os.symlink(root / "plain", root / "alias")
        os.symlink(root / "data", root / "data-link", target_is_directory=True)
        return root

    def test_symlinks_followed_by_default(self, linked_tree: Path):
        result = hash_element(str(linked_tree))

        names = [c.name for c in result.children]
        assert names == ["alias", "data", "data-link", "plain"]
        alias = result.children[0]
        assert alias.hash == result.children[3].hash
        assert result.children[1].hash == result.children[2].hash

    def test_symlinks_skipped_when_not_followed(self, linked_tree: Path):
        result = hash_element(str(linked_tree), {"symlinks": {"follow": False}})

        assert [c.name for c in result.children] == ["data", "plain"]

    def test_symlinked_root_not_followed(self, linked_tree: Path):
        with pytest.raises(ExcludedRootError):
            hash_element(str(linked_tree / "alias"), {"symlinks": {"follow": False}})

    def test_symlink_cycle_skipped(self, make_tree):
        root = make_tree("cyclic", {"inner": {"file1": b"hello"}})
        os.symlink(root, root / "inner" / "back", target_is_directory=True)

        result = hash_element(str(root))

        inner = result.children[0]
        assert [c.name for c in inner.children] == ["file1"]

    def test_dangling_symlink_is_not_found(self, make_tree):
        root = make_tree("dangling", {"file1": b"hello"})
        os.symlink(root / "gone", root / "broken")

        with pytest.raises(NotFoundError):
            hash_element(str(root))

        result = hash_element(str(root), {"symlinks": {"follow": False}})
        assert [c.name for c in result.children] == ["file1"]

    def test_excluded_dangling_symlink_skipped(self, make_tree):
        root = make_tree("stale", {"keep": b"data", "logs": {"app.txt": b"ok"}})
        os.symlink(root / "missing-target", root / "stale.log")
        os.symlink(root / "missing-target", root / "logs" / "old.log")

        result = hash_element(str(root), {"excludes": ["*.log"]})

        assert [c.name for c in result.children] == ["keep", "logs"]
        assert [c.name for c in result.children[1].children] == ["app.txt"]

    def test_excluded_dangling_symlink_by_relative_path(self, make_tree):
        root = make_tree("anchored", {"keep": b"data", "sub": {}})
        os.symlink(root / "missing-target", root / "sub" / "broken")

        result = hash_element(str(root), {"excludes": ["sub/broken"]})

        assert result.children[1].children == ()
