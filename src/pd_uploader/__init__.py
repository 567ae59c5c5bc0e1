"""Deduplicating file uploader for PixelDrain-compatible blob storage."""

from .constants import UPLOADER_VERSION

__version__ = UPLOADER_VERSION
