"""HTTP client for the PixelDrain file API."""

import base64
import logging
import urllib.parse
from http.cookiejar import DefaultCookiePolicy
from pathlib import Path
from typing import BinaryIO, Dict, List, Optional, Type, TypeVar, Union

import requests

from ..constants import API_URL, DEFAULT_USER_AGENT
from ..errors import (
    InputError,
    MissingFileIdError,
    MissingFileNameError,
    MissingSourceError,
    ResponseDecodeError,
    TransportError,
)
from ..storage_models import (
    Auth,
    ClientOptions,
    ListFile,
    ResponseCreateList,
    ResponseDefault,
    ResponseDelete,
    ResponseDownload,
    ResponseFileInfo,
    ResponseGetList,
    ResponseGetUser,
    ResponseGetUserFiles,
    ResponseGetUserLists,
    ResponseThumbnail,
    ResponseUpload,
)

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=ResponseDefault)

DOWNLOAD_CHUNK_SIZE = 64 * 1024


def basic_auth_token(username: str, password: str) -> str:
    """Base64 token for an HTTP Basic ``Authorization`` header."""
    return base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")


def _base_url_for(api_url: str) -> str:
    """Derive the public site URL from the API URL (".../api" -> ".../")."""
    trimmed = api_url.rstrip("/")
    if trimmed.endswith("/api"):
        trimmed = trimmed[: -len("/api")]
    return trimmed + "/"


class PixelDrainClient:
    """
    Client for the PixelDrain API: upload, download, info, lists and user.

    All calls return response models carrying the HTTP status code. Only
    transport failures (connection errors, timeouts, undecodable bodies)
    raise, as ``TransportError``.
    """

    def __init__(
        self,
        api_url: str = API_URL,
        options: Optional[ClientOptions] = None,
        session: Optional[requests.Session] = None,
        base_url: Optional[str] = None,
    ):
        """
        Initialize client.

        Args:
            api_url: API root, e.g. https://pixeldrain.com/api
            options: Transport settings (defaults match the service's own client)
            session: Pre-built session, mainly for tests
            base_url: Public site root used for file URLs (derived from api_url)
        """
        self.api_url = api_url.rstrip("/")
        self.base_url = base_url or _base_url_for(self.api_url)
        self.options = options or ClientOptions()
        self.session = session or requests.Session()
        self._configure_session()
        logger.debug("API client api_url=%s", self.api_url)

    def _configure_session(self) -> None:
        opts = self.options
        self.session.headers["User-Agent"] = opts.user_agent or DEFAULT_USER_AGENT
        self.session.verify = not opts.insecure_tls
        if not opts.enable_cookies:
            self.session.cookies.set_policy(DefaultCookiePolicy(allowed_domains=[]))
        if opts.proxy_url:
            self.session.proxies.update({"http": opts.proxy_url, "https": opts.proxy_url})

    # ---- request plumbing -------------------------------------------------

    def _auth_headers(self, auth: Optional[Auth], anonymous: bool = False) -> Dict[str, str]:
        if auth is not None and auth.is_auth_available() and not anonymous:
            return {"Authorization": "Basic " + basic_auth_token("", auth.api_key)}
        return {}

    def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        kwargs.setdefault("timeout", self.options.timeout)
        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            raise TransportError(f"{method} {url} failed: {e}") from e
        if self.options.debug:
            logger.debug("%s %s -> %s %s", method, url, response.status_code,
                         response.headers.get("Content-Type", ""))
        return response

    def _decode(self, response: requests.Response, model: Type[R]) -> R:
        """Validate a JSON body into ``model`` and stamp the status code.

        ``success`` comes from the body when present, otherwise from a 2xx
        status.
        """
        try:
            data = response.json()
        except ValueError as e:
            raise ResponseDecodeError(response.url, response.status_code, response.text) from e
        if not isinstance(data, dict):
            data = {"value": str(data)}
        result = model.model_validate(data)
        result.status_code = response.status_code
        if "success" not in data:
            result.success = 200 <= response.status_code < 300
        return result

    def _save_body(self, response: requests.Response, save_path: Path) -> int:
        save_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with save_path.open("wb") as f:
                for chunk in response.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                    f.write(chunk)
        except requests.RequestException as e:
            raise TransportError(f"Download to {save_path} interrupted: {e}") from e
        return save_path.stat().st_size

    # ---- URLs -------------------------------------------------------------

    def file_url(self, file_id: str) -> str:
        """Public viewer URL of an uploaded file."""
        return f"{self.base_url}u/{file_id}"

    def _file_endpoint(self, file_id: str, suffix: str = "") -> str:
        if not file_id:
            raise MissingFileIdError()
        return f"{self.api_url}/file/{urllib.parse.quote(file_id)}{suffix}"

    # ---- uploads ----------------------------------------------------------

    def upload(
        self,
        stream: BinaryIO,
        file_name: str,
        auth: Optional[Auth] = None,
        anonymous: bool = False,
    ) -> ResponseUpload:
        """POST /file as multipart form field ``file``."""
        if not file_name:
            raise MissingFileNameError()
        url = f"{self.api_url}/file"
        logger.info("Sending POST request to %s with file: %s", url, file_name)
        response = self._request(
            "POST",
            url,
            headers=self._auth_headers(auth, anonymous),
            files={"file": (file_name, stream)},
            params={"anonymous": "true" if anonymous else "false"},
        )
        return self._decode(response, ResponseUpload)

    def upload_put(
        self,
        file_name: Optional[str] = None,
        path: Optional[Union[str, Path]] = None,
        stream: Optional[BinaryIO] = None,
        auth: Optional[Auth] = None,
        anonymous: bool = False,
    ) -> ResponseUpload:
        """PUT /file/{name} with the raw content as body.

        The name defaults to the file's base name when uploading from a path.
        The ``anonymous`` parameter is not sent; the service mishandles it on
        PUT, so it only controls whether credentials are attached.
        """
        if path is None and stream is None:
            raise MissingSourceError()
        if stream is not None and not file_name:
            raise MissingFileNameError()
        name = file_name or Path(path).name
        url = f"{self.api_url}/file/{urllib.parse.quote(name)}"
        headers = self._auth_headers(auth, anonymous)

        if stream is not None:
            response = self._request("PUT", url, headers=headers, data=stream)
        else:
            with Path(path).open("rb") as f:
                response = self._request("PUT", url, headers=headers, data=f)

        result = self._decode(response, ResponseUpload)
        result.success = response.status_code == 201
        return result

    # ---- downloads --------------------------------------------------------

    def download(
        self,
        file_id: str,
        save_path: Union[str, Path],
        auth: Optional[Auth] = None,
    ) -> ResponseDownload:
        """GET /file/{id} and save the body to ``save_path``.

        A non-200 reply is decoded as an error body and returned with
        ``success=False``; nothing is written to disk in that case.
        """
        if not save_path:
            raise InputError("path to save the file is required")
        url = self._file_endpoint(file_id)
        response = self._request("GET", url, headers=self._auth_headers(auth), stream=True)
        if response.status_code != 200:
            result = self._decode(response, ResponseDownload)
            result.success = False
            return result

        save_path = Path(save_path)
        size = self._save_body(response, save_path)
        return ResponseDownload(
            status_code=response.status_code,
            success=True,
            file_path=str(save_path),
            file_name=save_path.name,
            file_size=size,
        )

    def download_thumbnail(
        self,
        file_id: str,
        save_path: Union[str, Path],
        width: Optional[int] = None,
        height: Optional[int] = None,
        auth: Optional[Auth] = None,
    ) -> ResponseThumbnail:
        """GET /file/{id}/thumbnail?width=&height= and save the image."""
        if not save_path:
            raise InputError("path to save the thumbnail is required")
        url = self._file_endpoint(file_id, "/thumbnail")
        params = {}
        if width:
            params["width"] = str(width)
        if height:
            params["height"] = str(height)
        response = self._request(
            "GET", url, headers=self._auth_headers(auth), params=params, stream=True
        )
        if response.status_code != 200:
            result = self._decode(response, ResponseThumbnail)
            result.success = False
            return result

        save_path = Path(save_path)
        size = self._save_body(response, save_path)
        return ResponseThumbnail(
            status_code=response.status_code,
            success=True,
            file_path=str(save_path),
            file_name=save_path.name,
            file_size=size,
        )

    # ---- metadata ---------------------------------------------------------

    def get_file_info(self, file_id: str, auth: Optional[Auth] = None) -> ResponseFileInfo:
        """GET /file/{id}/info."""
        url = self._file_endpoint(file_id, "/info")
        response = self._request("GET", url, headers=self._auth_headers(auth))
        return self._decode(response, ResponseFileInfo)

    def delete(self, file_id: str, auth: Optional[Auth] = None) -> ResponseDelete:
        """DELETE /file/{id}."""
        url = self._file_endpoint(file_id)
        response = self._request("DELETE", url, headers=self._auth_headers(auth))
        return self._decode(response, ResponseDelete)

    def create_list(
        self,
        title: str,
        files: List[ListFile],
        auth: Optional[Auth] = None,
        anonymous: bool = False,
    ) -> ResponseCreateList:
        """POST /list with a JSON body describing the list."""
        body = {
            "title": title,
            "anonymous": anonymous,
            "files": [f.model_dump() for f in files],
        }
        response = self._request(
            "POST",
            f"{self.api_url}/list",
            headers=self._auth_headers(auth, anonymous),
            json=body,
        )
        return self._decode(response, ResponseCreateList)

    def get_list(self, list_id: str, auth: Optional[Auth] = None) -> ResponseGetList:
        """GET /list/{id}."""
        if not list_id:
            raise MissingFileIdError()
        url = f"{self.api_url}/list/{urllib.parse.quote(list_id)}"
        response = self._request("GET", url, headers=self._auth_headers(auth))
        return self._decode(response, ResponseGetList)

    def get_user(self, auth: Optional[Auth] = None) -> ResponseGetUser:
        """GET /user."""
        response = self._request("GET", f"{self.api_url}/user", headers=self._auth_headers(auth))
        return self._decode(response, ResponseGetUser)

    def get_user_files(self, auth: Optional[Auth] = None) -> ResponseGetUserFiles:
        """GET /user/files."""
        response = self._request(
            "GET", f"{self.api_url}/user/files", headers=self._auth_headers(auth)
        )
        return self._decode(response, ResponseGetUserFiles)

    def get_user_lists(self, auth: Optional[Auth] = None) -> ResponseGetUserLists:
        """GET /user/lists."""
        response = self._request(
            "GET", f"{self.api_url}/user/lists", headers=self._auth_headers(auth)
        )
        return self._decode(response, ResponseGetUserLists)
