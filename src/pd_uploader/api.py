"""Stable API for pd-uploader operations.

This module provides a minimal API surface for scripts that want the
deduplicating upload without going through the CLI. It resolves the
configuration and the ledger location, then hands everything to the
orchestrator.
"""

from pathlib import Path
from typing import Optional, Union

from .audit import UploadAuditLog
from .config import UploaderConfig, load_config
from .env_manager import resolve_ledger_path
from .ledger import HashLedger
from .orchestrator import Uploader
from .service_types import ProgressCallback, UploadRequest, UploadResult
from .storage import RemoteStorage, make_remote_storage


def build_uploader(
    config: Optional[UploaderConfig] = None,
    mode: Optional[str] = None,
    storage: Optional[RemoteStorage] = None,
    progress: Optional[ProgressCallback] = None,
) -> Uploader:
    """Assemble an Uploader from configuration.

    Args:
        config: Configuration (loaded from .pd-uploader/config.yaml if omitted)
        mode: "test" or "prod"; picks the ledger (ENV_MODE if omitted)
        storage: Remote storage override, mainly for tests
        progress: Optional progress reporter

    Returns:
        Uploader bound to the resolved ledger and audit log
    """
    config = config or load_config()
    ledger = HashLedger(resolve_ledger_path(config, mode))
    ledger.ensure_exists()
    return Uploader(
        storage=storage or make_remote_storage(config),
        ledger=ledger,
        audit_log=UploadAuditLog(config.audit_log_path),
        uploader_name=config.uploader_name,
        progress=progress,
    )


def upload_path(
    path: Union[str, Path],
    config: Optional[UploaderConfig] = None,
    mode: Optional[str] = None,
    anonymous: bool = False,
) -> UploadResult:
    """Upload a file or directory, skipping content already sent.

    Args:
        path: File or directory to upload
        config: Configuration (loaded if omitted)
        mode: "test" or "prod" ledger selection
        anonymous: Upload without attaching credentials

    Returns:
        UploadResult with one outcome per file

    Raises:
        FileNotFoundError: If path does not exist
        UploaderError: Ledger, audit log or transport failures

    Example:
        >>> from pd_uploader.api import upload_path
        >>> result = upload_path("photos/")
        >>> print(result.summary)
        3 uploaded, 1 skipped, 0 rejected
    """
    config = config or load_config()
    uploader = build_uploader(config, mode)
    request = UploadRequest(path=str(path), anonymous=anonymous, auth=config.auth())
    return uploader.upload(request)
