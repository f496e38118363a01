"""Shared test fixtures for folder-hash."""

from pathlib import Path

import pytest
from click.testing import CliRunner

SAMPLE_FOLDER = "sample-folder"

# name -> bytes (file) or dict (directory)
SAMPLE_TREE = {
    "file1": b"hello",
    "file2": b"hello",
    ".hidden": b"dotfile",
    "subfolder1": {
        "file1": b"hello",
        "file2": b"world",
    },
    "f2": {
        "file1": b"hello again",
        "subfolder1": {
            "file1": b"hello",
            "file2": b"world",
        },
        "subfolder2": {
            "file1": b"hello",
            "file2": b"world",
        },
    },
    "f3": {
        "subfolder1": {
            "file1": b"something else",
            "file2": b"world",
            ".gitkeep": b"",
        },
    },
}


def write_tree(root: Path, tree: dict) -> Path:
    """Materialize a nested dict of names -> bytes/dict under *root*."""
    root.mkdir(parents=True, exist_ok=True)
    for name, value in tree.items():
        if isinstance(value, dict):
            write_tree(root / name, value)
        else:
            (root / name).write_bytes(value)
    return root


@pytest.fixture
def cli_runner():
    """Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def sample_folder(tmp_path: Path) -> Path:
    """
    A temporary copy of the sample tree.

    Structure:
        sample-folder/
        ├── .hidden
        ├── file1              "hello"
        ├── file2              "hello"
        ├── subfolder1/        file1 "hello", file2 "world"
        ├── f2/
        │   ├── file1          "hello again"
        │   ├── subfolder1/    same content as subfolder1
        │   └── subfolder2/    same content as subfolder1
        └── f3/
            └── subfolder1/    file1 differs, plus .gitkeep
    """
    return write_tree(tmp_path / SAMPLE_FOLDER, SAMPLE_TREE)


@pytest.fixture
def make_tree(tmp_path: Path):
    """Factory writing an arbitrary tree below tmp_path."""

    def _make(name: str, tree: dict) -> Path:
        return write_tree(tmp_path / name, tree)

    return _make


@pytest.fixture
def sample_tree() -> dict:
    """The sample tree as a nested dict."""
    return SAMPLE_TREE
