"""Base protocol for remote storage implementations."""

from typing import BinaryIO, Protocol

from ..storage_models import Auth, ResponseUpload


class RemoteStorage(Protocol):
    """
    Protocol for the remote side of an upload.

    Implementations send bytes and report back what the service said.
    A non-2xx status is returned as data; only transport failures raise.
    Duplicate detection is the caller's responsibility, not the store's.
    """

    def upload(
        self,
        stream: BinaryIO,
        file_name: str,
        auth: Auth,
        anonymous: bool = False,
    ) -> ResponseUpload:
        """
        Send content to remote storage.

        Args:
            stream: Binary stream positioned at the start of the content
            file_name: Name to store the content under
            auth: Credentials (ignored when anonymous)
            anonymous: Upload without associating it to the account

        Returns:
            ResponseUpload with status code and remote id

        Raises:
            TransportError: If the request could not be completed
        """
        ...

    def file_url(self, file_id: str) -> str:
        """
        Public URL of an uploaded file.

        Args:
            file_id: Remote id returned by upload

        Returns:
            URL string recorded in the audit log
        """
        ...
