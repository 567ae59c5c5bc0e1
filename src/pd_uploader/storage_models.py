"""Request and response models for the remote storage API.

Field names follow the JSON the service sends so responses can be
validated directly. Every response carries the HTTP status code and a
``success`` flag; a remote rejection is therefore ordinary data, not an
exception.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Auth(BaseModel):
    """API credentials. The service wants an empty username and the key as password."""
    api_key: Optional[str] = None

    def is_auth_available(self) -> bool:
        return bool(self.api_key)


class ClientOptions(BaseModel):
    """Transport settings passed straight through to the HTTP session."""
    debug: bool = False
    proxy_url: str = ""
    enable_cookies: bool = True
    insecure_tls: bool = True
    timeout: float = 3600.0
    user_agent: Optional[str] = None


class ResponseDefault(BaseModel):
    """Fields shared by every API response."""
    model_config = ConfigDict(extra="ignore")

    status_code: int = 0
    success: bool = False
    value: Optional[str] = None
    message: Optional[str] = None


class ResponseUpload(ResponseDefault):
    """Reply to POST/PUT /file."""
    id: Optional[str] = None


class FileInfo(BaseModel):
    """Metadata of one remote file."""
    model_config = ConfigDict(extra="ignore")

    id: str = ""
    name: str = ""
    size: int = 0
    views: int = 0
    bandwidth_used: int = 0
    date_upload: Optional[str] = None
    date_last_view: Optional[str] = None
    mime_type: str = ""
    thumbnail_href: str = ""
    hash_sha256: Optional[str] = None
    can_edit: bool = False


class ResponseFileInfo(ResponseDefault, FileInfo):
    """Reply to GET /file/{id}/info."""


class ResponseDownload(ResponseDefault):
    """Result of saving a remote file (or thumbnail) to disk."""
    file_path: Optional[str] = None
    file_name: Optional[str] = None
    file_size: int = 0


class ResponseThumbnail(ResponseDownload):
    """Result of GET /file/{id}/thumbnail."""


class ResponseDelete(ResponseDefault):
    """Reply to DELETE /file/{id}."""


class ListFile(BaseModel):
    """File reference inside a list creation request."""
    id: str
    description: str = ""


class ListInfo(BaseModel):
    """Metadata of one remote list."""
    model_config = ConfigDict(extra="ignore")

    id: str = ""
    title: str = ""
    date_created: Optional[str] = None
    file_count: int = 0
    files: List[FileInfo] = Field(default_factory=list)
    can_edit: bool = False


class ResponseCreateList(ResponseDefault):
    """Reply to POST /list."""
    id: Optional[str] = None


class ResponseGetList(ResponseDefault, ListInfo):
    """Reply to GET /list/{id}."""


class ResponseGetUser(ResponseDefault):
    """Reply to GET /user."""
    username: str = ""
    email: str = ""
    subscription: Dict[str, Any] = Field(default_factory=dict)
    storage_space_used: int = 0


class ResponseGetUserFiles(ResponseDefault):
    """Reply to GET /user/files."""
    files: List[FileInfo] = Field(default_factory=list)


class ResponseGetUserLists(ResponseDefault):
    """Reply to GET /user/lists."""
    lists: List[ListInfo] = Field(default_factory=list)
