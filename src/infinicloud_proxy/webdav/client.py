"""WebDAV client that translates drive operations into WebDAV requests."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from urllib import request as urllib_request
from urllib.error import HTTPError, URLError
from urllib.parse import quote

from infinicloud_proxy.webdav.credentials import basic_auth_header
from infinicloud_proxy.webdav.models import (
    DEFAULT_CONTENT_TYPE,
    DirectoryEntry,
    DownloadedFile,
    DriveConfig,
)
from infinicloud_proxy.webdav.multistatus import parse_multistatus

if TYPE_CHECKING:
    from infinicloud_proxy.config import AppConfig

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 60.0

PROPFIND_BODY = b"""<?xml version="1.0" encoding="utf-8"?>
<d:propfind xmlns:d="DAV:">
    <d:prop>
        <d:displayname/>
        <d:resourcetype/>
        <d:getcontentlength/>
        <d:getlastmodified/>
    </d:prop>
</d:propfind>"""

# Characters left unescaped when quoting a logical path into a URL.
_PATH_SAFE_CHARS = "/~!$&'()*+,;=:@"


class WebDavApiError(Exception):
    """Raised when the WebDAV server returns a non-2xx response."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"WebDAV error {status_code}: {message}")
        self.status_code = status_code
        self.message = message


class WebDavConnectionError(Exception):
    """Raised when the WebDAV server cannot be reached."""


class WebDavClient:
    """Authenticated client for a single WebDAV drive."""

    def __init__(self, drive: DriveConfig, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> None:
        """Initialise the client.

        Args:
            drive: Drive URL and credentials for this request.
            timeout: Socket timeout in seconds for each upstream call.
        """
        self._drive = drive
        self._timeout = timeout
        self._auth_header = basic_auth_header(drive.username, drive.password)

    def build_url(self, path: str) -> str:
        """Join the drive base URL and a logical path (e.g. "/Docs/a.txt")."""
        if not path.startswith("/"):
            path = f"/{path}"
        return f"{self._drive.base_url}{quote(path, safe=_PATH_SAFE_CHARS)}"

    def _request(
        self,
        method: str,
        path: str,
        data: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> tuple[bytes, str | None]:
        """Send an authenticated request and return (body, content type).

        Raises:
            WebDavApiError: If the server returns a non-2xx status code.
            WebDavConnectionError: If the server cannot be reached.
        """
        url = self.build_url(path)
        req = urllib_request.Request(
            url,
            data=data,
            headers={"Authorization": self._auth_header, **(headers or {})},
            method=method,
        )
        logger.info("[_request] upstream call; method:%s;path:%s", method, path)
        try:
            with urllib_request.urlopen(req, timeout=self._timeout) as resp:
                return resp.read(), resp.headers.get("Content-Type")
        except HTTPError as exc:
            logger.warning(
                "[_request] upstream error; method:%s;path:%s;status:%d",
                method,
                path,
                exc.code,
            )
            raise WebDavApiError(exc.code, str(exc.reason)) from exc
        except URLError as exc:
            logger.error("[_request] upstream unreachable; method:%s;reason:%s", method, exc.reason)
            raise WebDavConnectionError(f"Cannot reach WebDAV server: {exc.reason}") from exc
        except TimeoutError as exc:
            logger.error("[_request] upstream timed out; method:%s;path:%s", method, path)
            raise WebDavConnectionError("WebDAV server timed out") from exc

    def propfind(self, path: str, depth: str = "1") -> str:
        """Fetch the multistatus document for a path.

        Args:
            path: Logical path of the collection to inspect.
            depth: Value of the Depth header ("0" or "1").

        Returns:
            Response body decoded as UTF-8.
        """
        body, _ = self._request(
            "PROPFIND",
            path,
            data=PROPFIND_BODY,
            headers={"Depth": depth, "Content-Type": "application/xml"},
        )
        return body.decode("utf-8", errors="replace")

    def list_directory(self, path: str) -> list[DirectoryEntry]:
        """List the immediate children of a collection."""
        return parse_multistatus(self.propfind(path), path)

    def download(self, path: str) -> DownloadedFile:
        """GET a file and return its content and content type."""
        body, content_type = self._request("GET", path)
        return DownloadedFile(content=body, content_type=content_type or DEFAULT_CONTENT_TYPE)

    def upload(self, path: str, content: bytes, content_type: str = DEFAULT_CONTENT_TYPE) -> None:
        """PUT content to a path, creating or replacing the file."""
        self._request("PUT", path, data=content, headers={"Content-Type": content_type})

    def make_directory(self, path: str) -> None:
        """Create a collection with MKCOL."""
        self._request("MKCOL", path)

    def delete(self, path: str) -> None:
        """Delete a file or collection."""
        self._request("DELETE", path)

    def move(self, source: str, destination: str, overwrite: bool = True) -> None:
        """Move or rename a resource within the drive."""
        self._request("MOVE", source, headers=self._destination_headers(destination, overwrite))

    def copy(self, source: str, destination: str, overwrite: bool = True) -> None:
        """Copy a resource within the drive."""
        self._request("COPY", source, headers=self._destination_headers(destination, overwrite))

    def _destination_headers(self, destination: str, overwrite: bool) -> dict[str, str]:
        return {
            "Destination": self.build_url(destination),
            "Overwrite": "T" if overwrite else "F",
        }


def webdav_client_from_config(drive: DriveConfig, config: AppConfig) -> WebDavClient:
    """Construct a WebDavClient for a drive using application configuration.

    Args:
        drive: Drive URL and credentials decoded from the request.
        config: Application configuration instance.

    Returns:
        Configured WebDavClient instance.
    """
    return WebDavClient(drive=drive, timeout=config.upstream_timeout_seconds)
