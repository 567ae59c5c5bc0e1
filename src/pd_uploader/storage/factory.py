"""Factory for creating remote storage instances."""

from pathlib import Path
from typing import TYPE_CHECKING

from .base import RemoteStorage
from .fs import FilesystemRemoteStorage
from .pixeldrain import PixelDrainClient

if TYPE_CHECKING:
    from ..config import UploaderConfig


def make_remote_storage(config: "UploaderConfig") -> RemoteStorage:
    """
    Create remote storage instance based on configuration.

    ``fs://<dir>`` API URLs select the local filesystem store; anything else
    is treated as a PixelDrain API root.

    Args:
        config: Uploader configuration

    Returns:
        RemoteStorage instance

    Raises:
        ValueError: If an fs:// URL has no directory
    """
    if config.api_url.startswith("fs://"):
        directory = config.api_url[len("fs://"):]
        if not directory:
            raise ValueError("fs:// storage requires a directory path")
        return FilesystemRemoteStorage(Path(directory))

    return PixelDrainClient(api_url=config.api_url, options=config.client_options())
