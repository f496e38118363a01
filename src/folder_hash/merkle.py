"""Merkle-style hashing of files and directory trees."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any

from .classifier import PathClassifier, PathKind
from .config import HashOptions
from .digest import encode_digest, new_hash
from .errors import ExcludedRootError, NotFoundError, UnreadableFileError
from .fs import FileSystem, LocalFileSystem

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
NAME_TERMINATOR = b"\0"


@dataclass(frozen=True)
class HashResult:
    """A node in the hash tree representing a file or directory."""

    name: str
    hash: str
    children: tuple[HashResult, ...] | None = None  # None for files

    @property
    def is_directory(self) -> bool:
        return self.children is not None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain nested dictionary."""
        result: dict[str, Any] = {"name": self.name, "hash": self.hash}
        if self.children is not None:
            result["children"] = [child.to_dict() for child in self.children]
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HashResult:
        """Deserialize from dictionary."""
        children = None
        if "children" in data and data["children"] is not None:
            children = tuple(cls.from_dict(child) for child in data["children"])
        return cls(name=data["name"], hash=data["hash"], children=children)

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def walk(self, prefix: str = "") -> Iterator[tuple[str, HashResult]]:
        """Yield ``(relative_path, node)`` pairs depth-first, self first."""
        path = f"{prefix}/{self.name}" if prefix else self.name
        yield path, self
        for child in self.children or ():
            yield from child.walk(path)

    def render(self, indent: int = 0) -> str:
        lines = [f"{'  ' * indent}{self.name}: {self.hash}"]
        for child in self.children or ():
            lines.append(child.render(indent + 1))
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()


def canonical_order(names: Iterable[str]) -> list[str]:
    """Sort basenames by their filesystem byte form."""
    return sorted(names, key=os.fsencode)


def combine_child_digests(
    children: Iterable[tuple[str, bytes]],
    algo: str,
    include_names: bool = True,
    own_name: str | None = None,
) -> bytes:
    """
    Compute a directory digest from its children's digests.

    Args:
        children: ``(basename, raw digest)`` pairs, already in canonical order
        algo: Hash algorithm name
        include_names: Feed each basename (then NUL) before its digest
        own_name: If given, fed (then NUL) before any child

    Returns:
        Raw digest bytes of the directory
    """
    h = new_hash(algo)
    if own_name is not None:
        h.update(os.fsencode(own_name) + NAME_TERMINATOR)
    for name, digest in children:
        if include_names:
            h.update(os.fsencode(name) + NAME_TERMINATOR)
        h.update(digest)
    return h.digest()


def compute_file_digest(path: str, algo: str, fs: FileSystem | None = None) -> bytes:
    """Compute the raw digest of a file's contents, streamed in file order."""
    fs = fs or LocalFileSystem()
    h = new_hash(algo)
    try:
        with fs.open_read(path) as f:
            for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
                h.update(chunk)
    except (FileNotFoundError, NotADirectoryError) as e:
        raise NotFoundError(path) from e
    except OSError as e:
        raise UnreadableFileError(path, e.strerror or str(e)) from e
    return h.digest()


def compute_file_hash(
    path: str, algo: str = "sha1", encoding: str = "hex", fs: FileSystem | None = None
) -> str:
    """Compute the encoded hash of a file's contents."""
    return encode_digest(compute_file_digest(path, algo, fs), encoding)


class HashTreeBuilder:
    """Builds a HashResult tree for one root path.

    A builder owns its classifier state, so use one per traversal.
    """

    def __init__(self, options: HashOptions, fs: FileSystem | None = None):
        self.options = options
        self.fs = fs or LocalFileSystem()
        self.classifier = PathClassifier(self.fs, options)

    def build(self, path: str) -> HashResult:
        """
        Hash the file or directory at *path*.

        Raises:
            NotFoundError: The path does not exist
            ExcludedRootError: The path itself is excluded
            UnreadableFileError: A file or directory could not be read
        """
        root = self.fs.normalize(path)
        name = self.fs.basename(root)
        kind = self.classifier.classify(root, name)
        if kind is PathKind.SKIP:
            raise ExcludedRootError(root)

        node, _ = self._build_node(root, name, kind, is_root=True)
        logger.debug("Hashed %s: %s", root, node.hash)
        return node

    def _build_node(
        self, path: str, rel_path: str, kind: PathKind, is_root: bool = False
    ) -> tuple[HashResult, bytes] | None:
        """Recursively build a node, returning it with its raw digest.

        Returns None for an empty directory that should be omitted.
        """
        name = self.fs.basename(path)

        if kind is PathKind.FILE:
            digest = compute_file_digest(path, self.options.algo, self.fs)
            node = HashResult(name=name, hash=encode_digest(digest, self.options.encoding))
            return node, digest

        self.classifier.enter(path)
        try:
            children: list[tuple[HashResult, bytes]] = []
            for child_name in canonical_order(self.classifier.list_entries(path)):
                child_path = self.fs.join(path, child_name)
                child_rel = f"{rel_path}/{child_name}" if not is_root else child_name
                child_kind = self.classifier.classify(child_path, child_rel)
                if child_kind is PathKind.SKIP:
                    continue
                built = self._build_node(child_path, child_rel, child_kind)
                if built is not None:
                    children.append(built)
        finally:
            self.classifier.leave()

        if not children and not is_root and not self.options.folders.include_empty:
            logger.debug("Omitting empty directory %s", path)
            return None

        match = self.options.match
        digest = combine_child_digests(
            ((child.name, child_digest) for child, child_digest in children),
            self.options.algo,
            include_names=match.basename,
            own_name=name if is_root and match.path else None,
        )
        logger.debug("Combined %d children of %s", len(children), path)
        node = HashResult(
            name=name,
            hash=encode_digest(digest, self.options.encoding),
            children=tuple(child for child, _ in children),
        )
        return node, digest
