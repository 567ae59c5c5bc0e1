"""Custom exceptions for pd-uploader.

This module defines typed exceptions for better error handling and clearer
error messages throughout the application. Local file failures are not
wrapped: ``OSError`` and its subclasses propagate unchanged.
"""


class UploaderError(RuntimeError):
    """Base class for all uploader errors."""
    pass


# Input Errors
class InputError(UploaderError, ValueError):
    """A required argument (path, stream, file id, ...) is missing."""
    pass


class MissingSourceError(InputError):
    """Neither a file path nor a stream was given."""

    def __init__(self):
        super().__init__("file path or file reader is required")


class MissingFileIdError(InputError):
    """Operation on a remote file without an id."""

    def __init__(self):
        super().__init__("file id is required")


class MissingFileNameError(InputError):
    """Stream upload without an explicit file name."""

    def __init__(self):
        super().__init__("if you use a file reader you need to specify the filename")


# Storage Errors
class StorageError(UploaderError):
    """Base class for local persisted-store errors."""
    pass


class LedgerError(StorageError):
    """Hash ledger could not be created, read or appended."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Hash ledger {path}: {reason}")


class AuditLogError(StorageError):
    """Upload audit log could not be written."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Audit log {path}: {reason}")


# Transport Errors
class TransportError(UploaderError):
    """Network or transport failure talking to the remote service."""
    pass


class ResponseDecodeError(TransportError):
    """Remote service replied with a body that is not valid JSON."""

    def __init__(self, url: str, status_code: int, body: str):
        self.url = url
        self.status_code = status_code
        self.body = body
        super().__init__(
            f"Could not decode response from {url} (HTTP {status_code}): {body[:200]!r}"
        )


# Configuration Errors
class ConfigError(UploaderError):
    """Invalid or unreadable configuration."""
    pass
