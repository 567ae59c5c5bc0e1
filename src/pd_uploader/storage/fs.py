"""Filesystem remote storage implementation for testing and dry runs."""

import shutil
from pathlib import Path
from typing import BinaryIO, List, Optional

from ..hashing import compute_file_digest
from ..storage_models import Auth, ResponseUpload

ID_LENGTH = 8


class FilesystemRemoteStorage:
    """
    Local directory standing in for the remote service (avoids network in unit tests).

    Uploaded content is stored as base_dir/<id>/<file_name>, where <id> is the
    first characters of the content digest. Every upload succeeds with HTTP 201.
    """

    def __init__(self, base_dir: Path):
        """
        Initialize filesystem store.

        Args:
            base_dir: Directory receiving uploaded files
        """
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self.uploads: List[str] = []

    def upload(
        self,
        stream: BinaryIO,
        file_name: str,
        auth: Optional[Auth] = None,
        anonymous: bool = False,
    ) -> ResponseUpload:
        """
        Copy the stream into the store.

        Args:
            stream: Binary stream to store
            file_name: Name to store it under
            auth: Ignored
            anonymous: Ignored

        Returns:
            ResponseUpload with status 201 and the generated id
        """
        tmp = self.base_dir / f".incoming-{file_name}"
        with tmp.open("wb") as f:
            shutil.copyfileobj(stream, f)

        file_id = compute_file_digest(tmp)[:ID_LENGTH]
        dest = self.base_dir / file_id / file_name
        dest.parent.mkdir(parents=True, exist_ok=True)
        tmp.replace(dest)

        self.uploads.append(file_id)
        return ResponseUpload(status_code=201, success=True, id=file_id)

    def file_url(self, file_id: str) -> str:
        """fs:// URL of the directory holding an uploaded file."""
        return f"fs://{(self.base_dir / file_id).absolute()}"

    def open(self, file_id: str) -> Path:
        """Path of the stored content for ``file_id``.

        Raises:
            FileNotFoundError: If nothing was stored under that id
        """
        folder = self.base_dir / file_id
        stored = sorted(folder.iterdir()) if folder.is_dir() else []
        if not stored:
            raise FileNotFoundError(f"Upload not found: {file_id}")
        return stored[0]
