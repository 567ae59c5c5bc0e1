"""Append-only CSV audit trail of upload attempts.

One row is written per completed transmission, whatever HTTP status the
remote service answered with. Skipped duplicates and transport failures are
not recorded. The header row is written only when the file is empty at the
moment it is opened for appending.
"""

import csv
import logging
from pathlib import Path
from typing import List, Union

from pydantic import BaseModel, Field

from .errors import AuditLogError
from .utils import get_iso_timestamp, humanize_size

logger = logging.getLogger(__name__)

AUDIT_HEADER = [
    "File Name",
    "Directory Path",
    "URL",
    "Upload Date and Time",
    "File Size",
    "MIME Type",
    "Uploader Username",
    "Upload Status",
]


class AuditRecord(BaseModel):
    """Metadata of one completed upload attempt (never the content)."""

    file_name: str
    source_path: str
    remote_url: str
    timestamp: str = Field(default_factory=get_iso_timestamp)
    byte_size: int = 0
    mime_type: str = ""
    uploader: str = ""
    status_code: int

    @property
    def formatted_size(self) -> str:
        """Byte size rendered for humans, e.g. "1.5 KB"."""
        return humanize_size(self.byte_size)

    def to_row(self) -> List[str]:
        """Render the record in ``AUDIT_HEADER`` column order."""
        return [
            self.file_name,
            self.source_path,
            self.remote_url,
            self.timestamp,
            self.formatted_size,
            self.mime_type,
            self.uploader,
            str(self.status_code),
        ]


class UploadAuditLog:
    """Write-forward CSV log of upload attempts."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def __repr__(self) -> str:
        return f"UploadAuditLog({str(self.path)!r})"

    def append(self, record: AuditRecord) -> None:
        """Append one record, writing the header first if the log is empty.

        Args:
            record: Upload attempt to record

        Raises:
            AuditLogError: On any I/O failure
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", newline="", encoding="utf-8") as f:
                writer = csv.writer(f, lineterminator="\n")
                if self.path.stat().st_size == 0:
                    writer.writerow(AUDIT_HEADER)
                writer.writerow(record.to_row())
        except OSError as e:
            raise AuditLogError(self.path, str(e)) from e
        logger.debug("Logged upload of %s (HTTP %d) to %s",
                     record.source_path, record.status_code, self.path)

    def rows(self) -> List[List[str]]:
        """Read back every row, header included. Missing log reads as empty."""
        if not self.path.exists():
            return []
        try:
            with self.path.open(newline="", encoding="utf-8") as f:
                return [row for row in csv.reader(f) if row]
        except OSError as e:
            raise AuditLogError(self.path, str(e)) from e
