"""Filesystem backends used by the hash tree builder."""

from __future__ import annotations

import io
import os
import posixpath
import stat
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO, Union


class EntryKind(Enum):
    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    OTHER = "other"  # fifo, socket, device


@dataclass(frozen=True)
class EntryStat:
    kind: EntryKind
    size: int = 0


class FileSystem(ABC):
    """Abstract base class for filesystem backends.

    Missing paths raise ``FileNotFoundError``; other failures raise the
    matching ``OSError`` subclass.
    """

    @abstractmethod
    def normalize(self, path: str) -> str:
        """Return a canonical spelling of *path* (no ``.``/``..`` parts)."""
        ...

    @abstractmethod
    def join(self, *parts: str) -> str:
        ...

    @abstractmethod
    def basename(self, path: str) -> str:
        ...

    @abstractmethod
    def stat(self, path: str, follow_symlinks: bool = True) -> EntryStat:
        """
        Describe the entry at *path*.

        Args:
            path: Path to inspect
            follow_symlinks: If False, a link is reported as SYMLINK

        Returns:
            EntryStat with the entry kind and size in bytes
        """
        ...

    @abstractmethod
    def list_dir(self, path: str) -> list[str]:
        """List entry basenames of a directory, in no particular order."""
        ...

    @abstractmethod
    def open_read(self, path: str) -> BinaryIO:
        ...

    @abstractmethod
    def realpath(self, path: str) -> str:
        """Resolve every symlink in *path*."""
        ...


class LocalFileSystem(FileSystem):
    """The operating system's filesystem."""

    def normalize(self, path: str) -> str:
        return os.path.abspath(os.fspath(path))

    def join(self, *parts: str) -> str:
        return os.path.join(*(os.fspath(p) for p in parts))

    def basename(self, path: str) -> str:
        return os.path.basename(path)

    def stat(self, path: str, follow_symlinks: bool = True) -> EntryStat:
        st = os.stat(path, follow_symlinks=follow_symlinks)
        mode = st.st_mode
        if stat.S_ISLNK(mode):
            kind = EntryKind.SYMLINK
        elif stat.S_ISDIR(mode):
            kind = EntryKind.DIRECTORY
        elif stat.S_ISREG(mode):
            kind = EntryKind.FILE
        else:
            kind = EntryKind.OTHER
        return EntryStat(kind=kind, size=st.st_size)

    def list_dir(self, path: str) -> list[str]:
        return os.listdir(path)

    def open_read(self, path: str) -> BinaryIO:
        return open(path, "rb")

    def realpath(self, path: str) -> str:
        return os.path.realpath(path)


# Nested mapping of name -> bytes/str (file) or mapping (directory)
TreeSpec = Mapping[str, Union[bytes, str, "TreeSpec"]]


class MemoryFileSystem(FileSystem):
    """In-memory POSIX-style tree, built from nested dicts.

    Example::

        fs = MemoryFileSystem({"sample": {"file1": b"hello", "sub": {}}})
        fs.open_read("/sample/file1").read()  # b"hello"

    Relative paths are resolved against ``/``. Symlinks are not supported.
    """

    def __init__(self, tree: TreeSpec | None = None):
        self._root: dict = {}
        if tree:
            self._populate(self._root, tree)

    def _populate(self, target: dict, tree: TreeSpec) -> None:
        for name, value in tree.items():
            if "/" in name or name in ("", ".", ".."):
                raise ValueError(f"Invalid entry name: {name!r}")
            if isinstance(value, Mapping):
                target[name] = {}
                self._populate(target[name], value)
            elif isinstance(value, str):
                target[name] = value.encode("utf-8")
            else:
                target[name] = bytes(value)

    def write_file(self, path: str, content: bytes | str) -> None:
        """Create or replace a file, creating parent directories as needed."""
        parts = self._parts(path)
        if not parts:
            raise IsADirectoryError(path)
        node = self._root
        for part in parts[:-1]:
            node = node.setdefault(part, {})
            if not isinstance(node, dict):
                raise NotADirectoryError(path)
        if isinstance(content, str):
            content = content.encode("utf-8")
        node[parts[-1]] = bytes(content)

    def mkdir(self, path: str) -> None:
        node = self._root
        for part in self._parts(path):
            node = node.setdefault(part, {})
            if not isinstance(node, dict):
                raise NotADirectoryError(path)

    def _parts(self, path: str) -> list[str]:
        return [p for p in self.normalize(path).split("/") if p]

    def _lookup(self, path: str) -> dict | bytes:
        node: dict | bytes = self._root
        for part in self._parts(path):
            if not isinstance(node, dict):
                raise NotADirectoryError(path)
            if part not in node:
                raise FileNotFoundError(path)
            node = node[part]
        return node

    def normalize(self, path: str) -> str:
        return posixpath.normpath(posixpath.join("/", os.fspath(path)))

    def join(self, *parts: str) -> str:
        return posixpath.join(*(os.fspath(p) for p in parts))

    def basename(self, path: str) -> str:
        return posixpath.basename(path)

    def stat(self, path: str, follow_symlinks: bool = True) -> EntryStat:
        node = self._lookup(path)
        if isinstance(node, dict):
            return EntryStat(kind=EntryKind.DIRECTORY)
        return EntryStat(kind=EntryKind.FILE, size=len(node))

    def list_dir(self, path: str) -> list[str]:
        node = self._lookup(path)
        if not isinstance(node, dict):
            raise NotADirectoryError(path)
        return list(node)

    def open_read(self, path: str) -> BinaryIO:
        node = self._lookup(path)
        if isinstance(node, dict):
            raise IsADirectoryError(path)
        return io.BytesIO(node)

    def realpath(self, path: str) -> str:
        return self.normalize(path)
