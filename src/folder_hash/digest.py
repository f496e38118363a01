"""Digest primitive: named hash contexts and text encodings for digests."""

import base64
import hashlib
from collections.abc import Callable

from .errors import UnsupportedAlgorithmError, UnsupportedEncodingError

ENCODERS: dict[str, Callable[[bytes], str]] = {
    "hex": bytes.hex,
    "base64": lambda digest: base64.b64encode(digest).decode("ascii"),
    "base64url": lambda digest: base64.urlsafe_b64encode(digest).decode("ascii"),
    "base32": lambda digest: base64.b32encode(digest).decode("ascii"),
    "latin1": lambda digest: digest.decode("latin-1"),
    "binary": lambda digest: digest.decode("latin-1"),
}


def new_hash(algo: str) -> "hashlib._Hash":
    """Create a fresh hash context for *algo*.

    Variable-length (SHAKE) algorithms are rejected since a directory's
    combination needs every child digest to have a fixed size.
    """
    if not isinstance(algo, str) or algo.lower().startswith("shake"):
        raise UnsupportedAlgorithmError(str(algo))
    try:
        return hashlib.new(algo)
    except (ValueError, TypeError) as e:
        raise UnsupportedAlgorithmError(algo) from e


def encode_digest(digest: bytes, encoding: str) -> str:
    """Render raw digest bytes in the named text encoding."""
    try:
        encoder = ENCODERS[encoding]
    except (KeyError, TypeError) as e:
        raise UnsupportedEncodingError(str(encoding)) from e
    return encoder(digest)


def check_algorithm(algo: str) -> None:
    new_hash(algo)


def check_encoding(encoding: str) -> None:
    if encoding not in ENCODERS:
        raise UnsupportedEncodingError(str(encoding))
