"""Shared test fixtures and utilities."""

from unittest.mock import MagicMock

import pytest

from pd_uploader.audit import UploadAuditLog
from pd_uploader.ledger import HashLedger
from pd_uploader.orchestrator import Uploader
from pd_uploader.storage.fs import FilesystemRemoteStorage
from pd_uploader.storage_models import ResponseUpload


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's environment out of the tests."""
    for var in ("ENV_MODE", "PIXELDRAIN_API_KEY", "PIXELDRAIN_API_URL"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def ledger(tmp_path):
    """Ledger in a fresh temp directory (file not created yet)."""
    return HashLedger(tmp_path / "state" / "hashes.csv")


@pytest.fixture
def audit_log(tmp_path):
    """Audit log in a fresh temp directory (file not created yet)."""
    return UploadAuditLog(tmp_path / "state" / "upload_logs.csv")


@pytest.fixture
def fs_storage(tmp_path):
    """Filesystem stand-in for the remote service."""
    return FilesystemRemoteStorage(tmp_path / "remote")


@pytest.fixture
def uploader(fs_storage, ledger, audit_log):
    """Uploader wired to temp ledger, audit log and filesystem storage."""
    return Uploader(fs_storage, ledger, audit_log, uploader_name="tester")


@pytest.fixture
def mock_storage():
    """Remote storage mock answering every upload with 201."""
    storage = MagicMock()
    storage.upload.side_effect = lambda stream, name, auth, anonymous: ResponseUpload(
        status_code=201, success=True, id=f"id-{name}"
    )
    storage.file_url.side_effect = lambda file_id: f"https://pixeldrain.com/u/{file_id}"
    return storage


@pytest.fixture
def write_file(tmp_path):
    """Factory fixture to write files relative to tmp_path/data."""
    def _write(path: str, content="test content"):
        file_path = tmp_path / "data" / path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            file_path.write_bytes(content)
        else:
            file_path.write_text(content)
        return file_path
    return _write
