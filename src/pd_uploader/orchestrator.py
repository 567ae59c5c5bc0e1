"""Upload orchestration: hash, dedup check, transmit, record.

Single-file state progression::

    Start -> HashChecked -> Skipped
                         -> Transmitting -> Recorded
                                         -> Failed

``Skipped`` and ``Recorded`` are returned as ``UploadOutcome``; ``Failed``
is the underlying exception propagating to the caller.

Recording policy: once the remote service has answered, the attempt is
written to the audit log *and* the ledger whatever the HTTP status was. A
rejected upload is therefore treated as sent and will be skipped on the next
run until its ledger row is removed by hand. Transport failures record
nothing.

Directory batches run strictly sequentially against one ledger and stop at
the first failure, re-raising it without returning the outcomes gathered so
far. Nothing is retried.
"""

import getpass
import io
import logging
import os
from pathlib import Path
from typing import Optional, Union

from .audit import AuditRecord, UploadAuditLog
from .constants import DUPLICATE_MESSAGE, DUPLICATE_STATUS_CODE
from .errors import InputError, MissingFileNameError, MissingSourceError, UploaderError
from .hashing import compute_bytes_digest, compute_file_digest
from .ledger import HashLedger
from .service_types import (
    OutcomeKind,
    ProgressCallback,
    UploadOutcome,
    UploadRequest,
    UploadResult,
)
from .storage.base import RemoteStorage
from .storage_models import Auth, ResponseUpload
from .utils import detect_mime_type, get_file_size, sniff_mime_type
from .walker import list_files

logger = logging.getLogger(__name__)


def _default_uploader_name() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return ""


class Uploader:
    """Drives uploads through the ledger, the remote storage and the audit log.

    The ledger and audit log locations are fixed at construction; the
    orchestrator never looks them up itself.
    """

    def __init__(
        self,
        storage: RemoteStorage,
        ledger: HashLedger,
        audit_log: UploadAuditLog,
        uploader_name: Optional[str] = None,
        progress: Optional[ProgressCallback] = None,
    ):
        """Initialize orchestrator.

        Args:
            storage: Remote storage to transmit to
            ledger: Hash ledger consulted and appended for every file
            audit_log: Audit log receiving one row per transmission
            uploader_name: Identity written to the audit log
                (defaults to the local user name)
            progress: Optional progress reporter for directory batches
        """
        self.storage = storage
        self.ledger = ledger
        self.audit_log = audit_log
        self.uploader_name = uploader_name if uploader_name is not None else _default_uploader_name()
        self.progress = progress

    # ---- entry point ------------------------------------------------------

    def upload(self, request: UploadRequest) -> UploadResult:
        """Upload a file, a stream or a whole directory.

        Directories are delegated to ``upload_directory``; they are never
        transmitted as content themselves.

        Raises:
            MissingSourceError: If the request has neither path nor stream
            OSError: If the path cannot be read
            UploaderError: Ledger, audit log or transport failures
        """
        if request.stream is not None:
            return UploadResult(outcomes=[self.upload_stream(request)])
        if not request.path:
            raise MissingSourceError()
        if os.path.isdir(request.path):
            return self.upload_directory(
                request.path, auth=request.auth, anonymous=request.anonymous
            )
        return UploadResult(outcomes=[self.upload_file(request)])

    # ---- single file ------------------------------------------------------

    def upload_file(self, request: UploadRequest) -> UploadOutcome:
        """Run one file through hash -> dedup check -> transmit -> record.

        Args:
            request: Request whose ``path`` names a regular file

        Returns:
            UPLOADED outcome (any HTTP status) or SKIPPED_DUPLICATE outcome

        Raises:
            MissingSourceError: If no path is given
            InputError: If the path is a directory
            OSError: If the file cannot be read
            LedgerError, AuditLogError: If recording fails
            TransportError: If transmission fails
        """
        path = request.path
        if not path:
            raise MissingSourceError()
        if os.path.isdir(path):
            raise InputError(f"{path} is a directory; upload it with upload_directory")

        digest = compute_file_digest(path)
        file_name = request.file_name or os.path.basename(path)
        if self.ledger.contains_digest(digest):
            logger.info("File %s is a duplicate. Skipping upload.", path)
            return self._skipped(path, file_name, digest)

        size = get_file_size(path)
        mime_type = detect_mime_type(path)
        logger.info("Starting upload for file: %s", path)
        with open(path, "rb") as f:
            response = self.storage.upload(f, file_name, request.auth, request.anonymous)

        return self._record(path, file_name, digest, size, mime_type, response)

    def upload_stream(self, request: UploadRequest) -> UploadOutcome:
        """Upload in-memory content.

        The stream is read fully, hashed and sent from the buffer. With a
        ``path`` on the request the upload is deduplicated and recorded like
        a file upload. Without one there is no source to record, so the
        ledger and audit log are bypassed and the content is always sent.

        Raises:
            MissingSourceError: If the request carries no stream
            MissingFileNameError: If the request carries no file name
        """
        if request.stream is None:
            raise MissingSourceError()
        if not request.file_name:
            raise MissingFileNameError()

        data = request.stream.read()
        digest = compute_bytes_digest(data)
        path = request.path

        if path and self.ledger.contains_digest(digest):
            logger.info("Stream %s is a duplicate. Skipping upload.", path)
            return self._skipped(path, request.file_name, digest)

        logger.info("Starting upload for stream: %s", request.file_name)
        response = self.storage.upload(
            io.BytesIO(data), request.file_name, request.auth, request.anonymous
        )

        if not path:
            return self._outcome(None, request.file_name, digest, response)
        return self._record(
            path,
            request.file_name,
            digest,
            len(data),
            sniff_mime_type(data),
            response,
        )

    # ---- directory batch --------------------------------------------------

    def upload_directory(
        self,
        root: Union[str, Path],
        auth: Optional[Auth] = None,
        anonymous: bool = False,
    ) -> UploadResult:
        """Upload every file under ``root``, one at a time.

        Files are processed in ``list_files`` order. The first failure stops
        the batch and is re-raised; files after it are never attempted.

        Returns:
            Outcomes for every file, in processing order
        """
        auth = auth or Auth()
        files = list_files(root)
        logger.info("Uploading %d files from %s (ledger %s)", len(files), root, self.ledger.path)

        result = UploadResult()
        for path in files:
            logger.info("Uploading file: %s", path)
            if self.progress:
                self.progress.on_file_start(path, get_file_size(path))
            try:
                outcome = self.upload_file(UploadRequest(path=path, auth=auth, anonymous=anonymous))
            except (UploaderError, OSError) as e:
                logger.error("Error uploading file %s: %s", path, e)
                if self.progress:
                    self.progress.on_file_error(path, str(e))
                raise
            if self.progress:
                self.progress.on_file_complete(path, outcome)
            result.outcomes.append(outcome)
        return result

    # ---- helpers ----------------------------------------------------------

    def _skipped(self, path: Optional[str], file_name: str, digest: str) -> UploadOutcome:
        return UploadOutcome(
            kind=OutcomeKind.SKIPPED_DUPLICATE,
            path=path,
            file_name=file_name,
            digest=digest,
            status_code=DUPLICATE_STATUS_CODE,
            success=False,
            message=DUPLICATE_MESSAGE,
        )

    def _outcome(
        self,
        path: Optional[str],
        file_name: str,
        digest: str,
        response: ResponseUpload,
    ) -> UploadOutcome:
        remote_url = self.storage.file_url(response.id) if response.id else None
        return UploadOutcome(
            kind=OutcomeKind.UPLOADED,
            path=path,
            file_name=file_name,
            digest=digest,
            status_code=response.status_code,
            success=response.success,
            remote_id=response.id,
            remote_url=remote_url,
            message=response.message,
            response=response,
        )

    def _record(
        self,
        path: str,
        file_name: str,
        digest: str,
        size: int,
        mime_type: str,
        response: ResponseUpload,
    ) -> UploadOutcome:
        """Write the audit row and the ledger row for a transmitted file."""
        outcome = self._outcome(path, file_name, digest, response)
        if response.success:
            logger.info("File uploaded successfully: %s", file_name)
        else:
            logger.warning(
                "Remote rejected %s (HTTP %d): %s; recording it as sent",
                path, response.status_code, response.message or response.value,
            )

        self.audit_log.append(AuditRecord(
            file_name=file_name,
            source_path=str(path),
            remote_url=outcome.remote_url or "",
            byte_size=size,
            mime_type=mime_type,
            uploader=self.uploader_name,
            status_code=response.status_code,
        ))
        self.ledger.append(path, digest)
        return outcome
