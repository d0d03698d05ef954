"""Gateway blueprint: REST-style drive operations forwarded to WebDAV.

Each endpoint decodes the drive config carried by the request, performs a
single WebDAV call and maps the outcome to a JSON response. Nothing is
cached or stored between requests.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from urllib.parse import quote, unquote

import azure.functions as func

from infinicloud_proxy.config import AppConfig, load_config
from infinicloud_proxy.functions.responses import (
    error_response,
    json_response,
    preflight_response,
)
from infinicloud_proxy.webdav.client import (
    WebDavApiError,
    WebDavClient,
    WebDavConnectionError,
    webdav_client_from_config,
)
from infinicloud_proxy.webdav.credentials import (
    DRIVE_CONFIG_HEADER,
    DriveConfigError,
    decode_drive_config,
)
from infinicloud_proxy.webdav.models import DEFAULT_CONTENT_TYPE

logger = logging.getLogger(__name__)

bp = func.Blueprint()

DEFAULT_PATH = "/"

# Characters encodeURIComponent leaves unescaped, besides alphanumerics and "-_.~".
_FILENAME_SAFE_CHARS = "!*'()"

Operation = Callable[[WebDavClient], func.HttpResponse]


class BadRequestError(Exception):
    """Raised when a request is missing a required parameter."""


def _request_path(req: func.HttpRequest) -> str:
    return req.params.get("path") or DEFAULT_PATH


def _execute(
    action: str,
    config: AppConfig,
    encoded_drive: str | None,
    operation: Operation,
) -> func.HttpResponse:
    """Decode the drive, run ``operation`` against it and map failures to responses.

    Args:
        action: Human-readable action name used in error messages (e.g. "Upload").
        config: Application configuration instance.
        encoded_drive: Base64 JSON drive config taken from the request.
        operation: Callable performing the WebDAV call(s) and building the response.
    """
    try:
        drive = decode_drive_config(encoded_drive)
        client = webdav_client_from_config(drive, config)
        return operation(client)

    except (DriveConfigError, BadRequestError) as exc:
        logger.warning("[%s] rejected request; reason:%s", action, exc)
        return error_response(str(exc), config, status_code=400)

    except WebDavApiError as exc:
        return error_response(
            f"{action} Error: {exc.status_code} {exc.message}",
            config,
            status_code=exc.status_code,
        )

    except WebDavConnectionError as exc:
        logger.error("[%s] upstream unreachable", action, exc_info=True)
        return error_response(str(exc), config, status_code=502)

    except Exception:
        logger.error("[%s] request failed", action, exc_info=True)
        return error_response("Internal server error", config, status_code=500)


@bp.route(
    route="api/gateway",
    methods=["GET", "PUT", "POST", "DELETE", "OPTIONS"],
    auth_level=func.AuthLevel.ANONYMOUS,
)
def gateway(req: func.HttpRequest) -> func.HttpResponse:
    """Directory listing, upload, folder creation and deletion for one path.

    GET lists the collection at ``path``, PUT uploads the request body,
    POST creates a collection (MKCOL) and DELETE removes the resource.
    """
    config = load_config()
    method = req.method.upper()
    if method == "OPTIONS":
        return preflight_response(config)

    path = _request_path(req)
    encoded_drive = req.headers.get(DRIVE_CONFIG_HEADER)
    logger.info("[gateway] request received; method:%s;path:%s", method, path)

    if method == "GET":

        def list_directory(client: WebDavClient) -> func.HttpResponse:
            entries = client.list_directory(path)
            logger.info("[gateway] listed directory; path:%s;entries:%d", path, len(entries))
            return json_response([entry.to_dict() for entry in entries], config)

        return _execute("WebDAV", config, encoded_drive, list_directory)

    if method == "PUT":

        def upload(client: WebDavClient) -> func.HttpResponse:
            content_type = req.headers.get("Content-Type") or DEFAULT_CONTENT_TYPE
            client.upload(path, req.get_body(), content_type=content_type)
            return json_response({"success": True, "path": path}, config)

        return _execute("Upload", config, encoded_drive, upload)

    if method == "POST":

        def make_directory(client: WebDavClient) -> func.HttpResponse:
            client.make_directory(path)
            return json_response({"success": True, "path": path}, config)

        return _execute("Create Folder", config, encoded_drive, make_directory)

    def delete(client: WebDavClient) -> func.HttpResponse:
        client.delete(path)
        return json_response({"success": True}, config)

    return _execute("Delete", config, encoded_drive, delete)


@bp.route(
    route="api/download/{drive_id}",
    methods=["GET", "OPTIONS"],
    auth_level=func.AuthLevel.ANONYMOUS,
)
def download(req: func.HttpRequest) -> func.HttpResponse:
    """Download a file; credentials come from the ``auth`` query parameter.

    Links produced for ``<img>``/``<a>`` tags cannot carry custom headers,
    so the drive config travels base64-encoded in the query string instead.
    ``preview=true`` omits the attachment disposition so browsers render
    the file inline.
    """
    config = load_config()
    if req.method.upper() == "OPTIONS":
        return preflight_response(config)

    auth = req.params.get("auth")
    if not auth:
        return error_response("Missing auth parameter", config, status_code=400)

    path = _request_path(req)
    preview = req.params.get("preview") == "true"
    logger.info(
        "[download] request received; drive_id:%s;path:%s;preview:%s",
        req.route_params.get("drive_id"),
        path,
        preview,
    )

    def fetch(client: WebDavClient) -> func.HttpResponse:
        downloaded = client.download(path)
        headers = config.cors_headers()
        if not preview:
            filename = quote(path.split("/")[-1], safe=_FILENAME_SAFE_CHARS)
            headers["Content-Disposition"] = f'attachment; filename="{filename}"'
        return func.HttpResponse(
            downloaded.content,
            status_code=200,
            headers={"Content-Type": downloaded.content_type, **headers},
        )

    return _execute("Download", config, unquote(auth), fetch)


def _transfer(req: func.HttpRequest, action: str) -> func.HttpResponse:
    """Shared body of the move and copy endpoints."""
    config = load_config()
    if req.method.upper() == "OPTIONS":
        return preflight_response(config)

    logger.info(
        "[%s] request received; drive_id:%s",
        action.lower(),
        req.route_params.get("drive_id"),
    )

    def run(client: WebDavClient) -> func.HttpResponse:
        try:
            body = req.get_json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            body = {}
        source = body.get("from")
        destination = body.get("to")
        valid = isinstance(source, str) and isinstance(destination, str)
        if not valid or not source or not destination:
            raise BadRequestError("Missing from or to path")

        if action == "Move":
            client.move(source, destination)
        else:
            client.copy(source, destination)
        return json_response({"success": True}, config)

    return _execute(action, config, req.headers.get(DRIVE_CONFIG_HEADER), run)


@bp.route(
    route="api/move/{drive_id}",
    methods=["POST", "OPTIONS"],
    auth_level=func.AuthLevel.ANONYMOUS,
)
def move(req: func.HttpRequest) -> func.HttpResponse:
    """Move or rename a resource (WebDAV MOVE with Overwrite: T)."""
    return _transfer(req, "Move")


@bp.route(
    route="api/copy/{drive_id}",
    methods=["POST", "OPTIONS"],
    auth_level=func.AuthLevel.ANONYMOUS,
)
def copy(req: func.HttpRequest) -> func.HttpResponse:
    """Copy a resource (WebDAV COPY with Overwrite: T)."""
    return _transfer(req, "Copy")
