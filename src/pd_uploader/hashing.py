"""Hashing utilities for content-based duplicate detection.

Digests are plain lowercase SHA-256 hex strings (64 characters, no
``sha256:`` prefix) because that is exactly what the hash ledger stores.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Union
import hashlib

CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class FileIdentity:
    """A file path paired with the digest of its content.

    Only ``digest`` takes part in duplicate detection; ``path`` is whatever
    string the caller supplied and is not canonicalized.
    """

    path: str
    digest: str


def compute_stream_digest(stream: BinaryIO) -> str:
    """Compute SHA256 hash of everything readable from a binary stream.

    Args:
        stream: Binary file-like object positioned at the start of the content

    Returns:
        64-character lowercase hex digest

    Raises:
        OSError: If the stream cannot be fully read
    """
    sha256 = hashlib.sha256()
    for chunk in iter(lambda: stream.read(CHUNK_SIZE), b""):
        sha256.update(chunk)
    return sha256.hexdigest()


def compute_file_digest(path: Union[str, Path]) -> str:
    """Compute SHA256 hash of file contents.

    Simple byte-for-byte hashing - any change invalidates the digest.

    Args:
        path: Path to file to hash

    Returns:
        64-character lowercase hex digest

    Raises:
        FileNotFoundError: If the file does not exist
        OSError: If the file cannot be read
    """
    with Path(path).open("rb") as f:
        return compute_stream_digest(f)


def compute_bytes_digest(data: bytes) -> str:
    """Compute SHA256 hash of an in-memory buffer."""
    return hashlib.sha256(data).hexdigest()


def identify(path: Union[str, Path]) -> FileIdentity:
    """Hash a file and return its identity."""
    return FileIdentity(path=str(path), digest=compute_file_digest(path))


__all__ = [
    "FileIdentity",
    "compute_stream_digest",
    "compute_file_digest",
    "compute_bytes_digest",
    "identify",
]
