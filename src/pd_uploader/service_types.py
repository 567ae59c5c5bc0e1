"""Service layer types for pd-uploader."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Protocol

from pydantic import BaseModel, Field

from .storage_models import Auth, ResponseUpload


@dataclass
class UploadRequest:
    """What to upload and how.

    Exactly one of ``path`` or ``stream`` is normally set. A stream upload
    needs ``file_name``; it may also carry ``path`` purely as the source to
    record in the ledger and audit log.
    """
    path: Optional[str] = None
    stream: Optional[Any] = None  # binary file-like object
    file_name: Optional[str] = None
    anonymous: bool = False
    auth: Auth = field(default_factory=Auth)


class OutcomeKind(str, Enum):
    """Terminal state of one file's upload."""
    UPLOADED = "uploaded"
    SKIPPED_DUPLICATE = "skipped"


class UploadOutcome(BaseModel):
    """Result of processing a single file.

    Failures are not outcomes: they are raised to the caller.
    """
    kind: OutcomeKind
    path: Optional[str] = None
    file_name: str
    digest: str
    status_code: int
    success: bool
    remote_id: Optional[str] = None
    remote_url: Optional[str] = None
    message: Optional[str] = None
    response: Optional[ResponseUpload] = None

    @property
    def skipped(self) -> bool:
        return self.kind == OutcomeKind.SKIPPED_DUPLICATE


class UploadResult(BaseModel):
    """Ordered outcomes of one upload call (one entry per file)."""
    outcomes: List[UploadOutcome] = Field(default_factory=list)

    @property
    def uploaded(self) -> List[UploadOutcome]:
        return [o for o in self.outcomes if o.kind == OutcomeKind.UPLOADED]

    @property
    def skipped(self) -> List[UploadOutcome]:
        return [o for o in self.outcomes if o.kind == OutcomeKind.SKIPPED_DUPLICATE]

    @property
    def rejected(self) -> List[UploadOutcome]:
        """Uploads the remote service answered with a failure status."""
        return [o for o in self.uploaded if not o.success]

    @property
    def summary(self) -> str:
        return (
            f"{len(self.uploaded)} uploaded, {len(self.skipped)} skipped, "
            f"{len(self.rejected)} rejected"
        )


class ProgressCallback(Protocol):
    """Progress reporting interface."""

    def on_file_start(self, path: str, size: int) -> None:
        """Called when starting to process a file."""
        ...

    def on_file_complete(self, path: str, outcome: UploadOutcome) -> None:
        """Called when file processing is complete."""
        ...

    def on_file_error(self, path: str, error: str) -> None:
        """Called when file processing fails."""
        ...
