"""Error taxonomy for folder hashing.

Every error aborts the traversal that raised it. Nothing is retried.
"""


class FolderHashError(Exception):
    """Base class for all folder-hash errors."""


class NotFoundError(FolderHashError):
    """The target path (or an entry met during traversal) does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"No such file or directory: {path}")


class ExcludedRootError(FolderHashError):
    """The traversal root itself is excluded by the options."""

    def __init__(self, path: str, reason: str = "excluded by options"):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot hash excluded root {path}: {reason}")


class UnreadableFileError(FolderHashError):
    """Reading a file (or listing a directory) failed."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read {path}: {reason}")


class UnsupportedAlgorithmError(FolderHashError):
    def __init__(self, algo: str):
        self.algo = algo
        super().__init__(f"Unsupported hash algorithm: {algo!r}")


class UnsupportedEncodingError(FolderHashError):
    def __init__(self, encoding: str):
        self.encoding = encoding
        super().__init__(f"Unsupported digest encoding: {encoding!r}")


class InvalidOptionError(FolderHashError):
    """Options failed validation (bad types, unknown keys, bad patterns)."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"Invalid options: {message}")
