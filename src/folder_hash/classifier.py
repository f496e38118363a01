"""Decides how the builder treats each filesystem entry."""

from __future__ import annotations

import logging
from enum import Enum

from .config import HashOptions, compile_excludes
from .errors import NotFoundError, UnreadableFileError
from .fs import EntryKind, FileSystem

logger = logging.getLogger(__name__)


class PathKind(Enum):
    FILE = "file"
    DIRECTORY = "directory"
    SKIP = "skip"


class PathClassifier:
    """Classifies paths as file, directory or skip, and lists directories.

    Exclude patterns use gitignore wildcard semantics and are tested against
    both the path relative to the traversal root and the basename.
    Directories are also tested with a trailing slash so ``build/`` style
    patterns apply to them.
    """

    def __init__(self, fs: FileSystem, options: HashOptions):
        self.fs = fs
        self.options = options
        self._excludes = compile_excludes(options.excludes)
        # Resolved directories on the current descent path
        self._ancestors: list[str] = []

    def is_excluded(self, rel_path: str, is_dir: bool = False) -> bool:
        """Check if a root-relative path matches any exclude pattern."""
        if not self.options.excludes:
            return False
        basename = rel_path.rsplit("/", 1)[-1]
        candidates = [rel_path, basename]
        if is_dir:
            candidates += [f"{rel_path}/", f"{basename}/"]
        return any(self._excludes.match_file(c) for c in candidates if c)

    def classify(self, path: str, rel_path: str) -> PathKind:
        """Classify *path*, whose root-relative form is *rel_path*."""
        try:
            entry = self.fs.stat(path, follow_symlinks=False)
            if entry.kind is EntryKind.SYMLINK:
                if not self.options.symlinks.follow:
                    logger.debug("Skipping symlink %s", path)
                    return PathKind.SKIP
                # Excluded links are never resolved, so a dangling one is skipped
                if self.is_excluded(rel_path):
                    logger.debug("Excluding %s", rel_path)
                    return PathKind.SKIP
                entry = self.fs.stat(path, follow_symlinks=True)
        except (FileNotFoundError, NotADirectoryError) as e:
            raise NotFoundError(path) from e
        except OSError as e:
            raise UnreadableFileError(path, e.strerror or str(e)) from e

        if entry.kind is EntryKind.OTHER:
            logger.debug("Skipping special file %s", path)
            return PathKind.SKIP

        is_dir = entry.kind is EntryKind.DIRECTORY
        if self.is_excluded(rel_path, is_dir=is_dir):
            logger.debug("Excluding %s", rel_path)
            return PathKind.SKIP

        if is_dir and self.fs.realpath(path) in self._ancestors:
            logger.warning("Skipping %s: symlink cycle", path)
            return PathKind.SKIP

        return PathKind.DIRECTORY if is_dir else PathKind.FILE

    def list_entries(self, directory: str) -> list[str]:
        """List basenames in *directory*, unordered."""
        try:
            return self.fs.list_dir(directory)
        except (FileNotFoundError, NotADirectoryError) as e:
            raise NotFoundError(directory) from e
        except OSError as e:
            raise UnreadableFileError(directory, e.strerror or str(e)) from e

    def enter(self, directory: str) -> None:
        """Record *directory* as being on the current descent path."""
        self._ancestors.append(self.fs.realpath(directory))

    def leave(self) -> None:
        self._ancestors.pop()
