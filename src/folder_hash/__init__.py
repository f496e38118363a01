"""Folder Hash - Deterministic content hashes for files and directory trees."""

__version__ = "0.1.0"

# Conventional options file looked up by the CLI
OPTIONS_FILE = ".folder-hash.json"

from .api import hash_element, hash_element_async  # noqa: E402
from .config import DEFAULT_OPTIONS, HashOptions, resolve_options  # noqa: E402
from .errors import (  # noqa: E402
    ExcludedRootError,
    FolderHashError,
    InvalidOptionError,
    NotFoundError,
    UnreadableFileError,
    UnsupportedAlgorithmError,
    UnsupportedEncodingError,
)
from .fs import FileSystem, LocalFileSystem, MemoryFileSystem  # noqa: E402
from .merkle import HashResult, HashTreeBuilder  # noqa: E402

__all__ = [
    "DEFAULT_OPTIONS",
    "ExcludedRootError",
    "FileSystem",
    "FolderHashError",
    "HashOptions",
    "HashResult",
    "HashTreeBuilder",
    "InvalidOptionError",
    "LocalFileSystem",
    "MemoryFileSystem",
    "NotFoundError",
    "UnreadableFileError",
    "UnsupportedAlgorithmError",
    "UnsupportedEncodingError",
    "hash_element",
    "hash_element_async",
    "resolve_options",
]
