"""Configuration management for folder hashing."""

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import pathspec
from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, ValidationError

from . import OPTIONS_FILE
from .digest import check_algorithm, check_encoding
from .errors import InvalidOptionError


class MatchOptions(BaseModel):
    """Which names take part in a directory's combination step."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    basename: StrictBool = True  # Child basenames are fed before their digests
    path: StrictBool = True  # Root's own basename is fed into the root's hash


class SymlinkOptions(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    follow: StrictBool = True


class FolderOptions(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    include_empty: StrictBool = True


class HashOptions(BaseModel):
    """Options for a single hashing call."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    algo: StrictStr = "sha1"
    encoding: StrictStr = "hex"
    excludes: list[StrictStr] = Field(default_factory=list)
    match: MatchOptions = Field(default_factory=MatchOptions)
    symlinks: SymlinkOptions = Field(default_factory=SymlinkOptions)
    folders: FolderOptions = Field(default_factory=FolderOptions)


DEFAULT_OPTIONS = HashOptions()


def compile_excludes(patterns: list[str]) -> pathspec.PathSpec:
    """Compile exclude patterns using gitignore wildcard semantics."""
    for pattern in patterns:
        if not pattern.strip():
            raise InvalidOptionError("exclude patterns must not be empty")
    try:
        return pathspec.PathSpec.from_lines(pathspec.patterns.GitWildMatchPattern, patterns)
    except ValueError as e:
        raise InvalidOptionError(f"malformed exclude pattern: {e}") from e


def resolve_options(
    overrides: HashOptions | Mapping[str, Any] | None = None, **kwargs: Any
) -> HashOptions:
    """Merge caller overrides onto the defaults and validate the result.

    Nested groups merge field by field, so ``{"match": {"path": True}}``
    keeps the default ``match.basename``.
    """
    if isinstance(overrides, HashOptions):
        data = overrides.model_dump()
    elif overrides is None:
        data = {}
    elif isinstance(overrides, Mapping):
        data = dict(overrides)
    else:
        raise InvalidOptionError(
            f"options must be a mapping or HashOptions, got {type(overrides).__name__}"
        )
    data.update(kwargs)

    try:
        options = HashOptions.model_validate(data)
    except ValidationError as e:
        raise InvalidOptionError(_describe_validation_error(e)) from e

    check_algorithm(options.algo)
    check_encoding(options.encoding)
    compile_excludes(options.excludes)
    return options


def load_options(path: Path) -> HashOptions:
    """Load options from a JSON file.

    Falls back to defaults if the file doesn't exist.
    """
    if not path.exists():
        return DEFAULT_OPTIONS

    try:
        with open(path) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise InvalidOptionError(f"{path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise InvalidOptionError(f"{path} must contain a JSON object")
    return resolve_options(data)


def save_options(options: HashOptions, path: Path) -> None:
    """Save options to a JSON file."""
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        json.dump(options.model_dump(), f, indent=2)


def get_options_path(root: Path) -> Path:
    """Get the conventional options file path for a directory."""
    return root / OPTIONS_FILE


def apply_env_overrides(options: HashOptions) -> HashOptions:
    """Apply environment variable overrides to options."""
    data = options.model_dump()

    # FOLDER_HASH_ALGO
    if algo := os.environ.get("FOLDER_HASH_ALGO"):
        data["algo"] = algo

    # FOLDER_HASH_ENCODING
    if encoding := os.environ.get("FOLDER_HASH_ENCODING"):
        data["encoding"] = encoding

    # FOLDER_HASH_EXCLUDES (comma separated, appended)
    if excludes := os.environ.get("FOLDER_HASH_EXCLUDES"):
        extra = [p.strip() for p in excludes.split(",") if p.strip()]
        data["excludes"] = [*data["excludes"], *extra]

    return resolve_options(data)


def _describe_validation_error(error: ValidationError) -> str:
    parts = []
    for err in error.errors():
        loc = ".".join(str(part) for part in err["loc"]) or "options"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)
