"""Public entry points: value-returning, error-first callback and async."""

from __future__ import annotations

import asyncio
import os
from collections.abc import Callable, Mapping
from typing import Any

from .config import HashOptions, resolve_options
from .errors import FolderHashError, InvalidOptionError
from .fs import FileSystem, LocalFileSystem
from .merkle import HashResult, HashTreeBuilder

# Error-first completion routine: exactly one of (error, result) is set
Callback = Callable[[FolderHashError | None, HashResult | None], None]

OptionsArg = HashOptions | Mapping[str, Any] | None


def _split_args(
    target: str | os.PathLike[str],
    folder_or_options: str | os.PathLike[str] | OptionsArg,
    options: OptionsArg,
    fs: FileSystem,
) -> tuple[str, OptionsArg]:
    """Resolve the ``(name, folder[, options])`` and ``(path[, options])`` forms."""
    if not isinstance(target, (str, os.PathLike)):
        raise InvalidOptionError(f"target must be a path, got {type(target).__name__}")
    target = os.fspath(target)
    if not isinstance(target, str):
        raise InvalidOptionError(f"target must be a str path, got {type(target).__name__}")
    if isinstance(folder_or_options, (str, os.PathLike)):
        return fs.join(os.fspath(folder_or_options), target), options
    if folder_or_options is not None and options is not None:
        raise InvalidOptionError("options given twice")
    return target, folder_or_options if folder_or_options is not None else options


def _hash(path: str, options: OptionsArg, fs: FileSystem) -> HashResult:
    resolved = resolve_options(options)
    return HashTreeBuilder(resolved, fs).build(path)


def hash_element(
    target: str | os.PathLike[str],
    folder_or_options: str | os.PathLike[str] | OptionsArg = None,
    options: OptionsArg = None,
    *,
    callback: Callback | None = None,
    fs: FileSystem | None = None,
) -> HashResult | None:
    """
    Hash a file or directory.

    Args:
        target: Entry name (joined under *folder*) or a full path
        folder_or_options: Parent folder of *target*, or the options
        options: Option overrides, merged onto the defaults
        callback: Optional ``callback(error, result)``; when given, nothing
            is raised or returned
        fs: Filesystem backend (defaults to the local filesystem)

    Returns:
        The HashResult tree, or None when a callback is used
    """
    fs = fs or LocalFileSystem()
    if callback is None:
        path, opts = _split_args(target, folder_or_options, options, fs)
        return _hash(path, opts, fs)

    try:
        path, opts = _split_args(target, folder_or_options, options, fs)
        result = _hash(path, opts, fs)
    except FolderHashError as e:
        callback(e, None)
    else:
        callback(None, result)
    return None


async def hash_element_async(
    target: str | os.PathLike[str],
    folder_or_options: str | os.PathLike[str] | OptionsArg = None,
    options: OptionsArg = None,
    *,
    fs: FileSystem | None = None,
) -> HashResult:
    """Awaitable form of hash_element; the traversal runs in a worker thread."""
    fs = fs or LocalFileSystem()
    path, opts = _split_args(target, folder_or_options, options, fs)
    return await asyncio.to_thread(_hash, path, opts, fs)
