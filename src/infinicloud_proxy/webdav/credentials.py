"""Per-request drive credentials carried in the x-drive-config header."""

from __future__ import annotations

import base64
import binascii
import json
from urllib.parse import urlparse

from infinicloud_proxy.webdav.models import (
    FIELD_PASSWORD,
    FIELD_URL,
    FIELD_USERNAME,
    DriveConfig,
)

DRIVE_CONFIG_HEADER = "x-drive-config"


class DriveConfigError(Exception):
    """Raised when the drive config is missing or cannot be decoded."""


def decode_drive_config(encoded: str | None) -> DriveConfig:
    """Decode a base64-encoded JSON drive config.

    Args:
        encoded: Value of the x-drive-config header (or the download ``auth``
            query parameter), e.g. base64 of
            ``{"url": "https://x.teracloud.jp/dav/", "username": "u", "password": "p"}``.

    Returns:
        Validated DriveConfig instance.

    Raises:
        DriveConfigError: If the value is missing, malformed, or lacks a
            usable url, username or password.
    """
    if not encoded:
        raise DriveConfigError(f"Missing {DRIVE_CONFIG_HEADER} header")

    try:
        raw = base64.b64decode(encoded.strip(), validate=False).decode("utf-8")
        data = json.loads(raw)
    except (binascii.Error, UnicodeDecodeError, ValueError) as exc:
        raise DriveConfigError(f"Invalid {DRIVE_CONFIG_HEADER} format") from exc

    if not isinstance(data, dict):
        raise DriveConfigError(f"Invalid {DRIVE_CONFIG_HEADER} format")

    for key in (FIELD_URL, FIELD_USERNAME, FIELD_PASSWORD):
        if not isinstance(data.get(key), str):
            raise DriveConfigError(f"Drive config is missing '{key}'")

    url = data[FIELD_URL]
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise DriveConfigError(f"Drive config url must be an absolute http(s) URL: {url!r}")

    return DriveConfig(url=url, username=data[FIELD_USERNAME], password=data[FIELD_PASSWORD])


def encode_drive_config(drive: DriveConfig) -> str:
    """Encode a DriveConfig the way clients send it in x-drive-config."""
    payload = {FIELD_URL: drive.url, FIELD_USERNAME: drive.username, FIELD_PASSWORD: drive.password}
    return base64.b64encode(json.dumps(payload).encode("utf-8")).decode("ascii")


def basic_auth_header(username: str, password: str) -> str:
    """Build an HTTP Basic Authorization header value."""
    credentials = base64.b64encode(f"{username}:{password}".encode()).decode("ascii")
    return f"Basic {credentials}"
