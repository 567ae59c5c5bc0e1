"""Utility functions for pd-uploader."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Union

import magic

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"

# leading bytes handed to libmagic
SNIFF_LENGTH = 512

_SIZE_UNITS = ["B", "KB", "MB", "GB", "TB"]


def humanize_size(size: float) -> str:
    """Convert bytes to human-readable format.

    Examples:
        0 -> "0.0 B"
        1536 -> "1.5 KB"
        5 * 1024 ** 3 -> "5.0 GB"
    """
    for unit in _SIZE_UNITS:
        if size < 1024.:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} PB"


def get_iso_timestamp() -> str:
    """Get current local time in ISO 8601 format with UTC offset.

    Example: "2025-08-26T02:51:17+02:00"
    """
    return datetime.now().astimezone().isoformat(timespec="seconds")


def get_file_size(path: Union[str, Path]) -> int:
    """Return the size of a file in bytes, or 0 if it cannot be stat'ed."""
    try:
        return Path(path).stat().st_size
    except OSError:
        return 0


def sniff_mime_type(head: bytes) -> str:
    """Identify content from its leading bytes.

    Empty content, and content libmagic cannot classify, map to
    application/octet-stream.
    """
    if not head:
        return DEFAULT_MIME_TYPE
    try:
        mime_type = magic.from_buffer(head[:SNIFF_LENGTH], mime=True)
    except magic.MagicException as e:
        logger.debug("MIME detection failed: %s", e)
        return DEFAULT_MIME_TYPE
    return mime_type or DEFAULT_MIME_TYPE


def detect_mime_type(path: Union[str, Path]) -> str:
    """Sniff the MIME type of a file from its first bytes.

    The file name is not consulted. An unreadable file yields
    application/octet-stream.
    """
    try:
        with open(path, "rb") as f:
            head = f.read(SNIFF_LENGTH)
    except OSError:
        return DEFAULT_MIME_TYPE
    return sniff_mime_type(head)
