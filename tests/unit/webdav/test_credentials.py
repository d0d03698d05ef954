"""Unit tests for webdav/credentials.py: x-drive-config decoding."""

import base64
import json

import pytest

from infinicloud_proxy.webdav.credentials import (
    DriveConfigError,
    basic_auth_header,
    decode_drive_config,
    encode_drive_config,
)
from infinicloud_proxy.webdav.models import DriveConfig

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _encode(payload: object) -> str:
    return base64.b64encode(json.dumps(payload).encode("utf-8")).decode("ascii")


_VALID = {"url": "https://seto.teracloud.jp/dav/", "username": "alice", "password": "s3cret"}


# ---------------------------------------------------------------------------
# decode_drive_config tests
# ---------------------------------------------------------------------------


class TestDecodeDriveConfig:
    def test_decodes_valid_header(self) -> None:
        drive = decode_drive_config(_encode(_VALID))
        assert drive == DriveConfig(
            url="https://seto.teracloud.jp/dav/", username="alice", password="s3cret"
        )

    def test_non_ascii_password(self) -> None:
        drive = decode_drive_config(_encode({**_VALID, "password": "パスワード"}))
        assert drive.password == "パスワード"

    def test_round_trips_with_encode(self) -> None:
        drive = DriveConfig(url="https://x.teracloud.jp/dav", username="u", password="p")
        assert decode_drive_config(encode_drive_config(drive)) == drive

    @pytest.mark.parametrize("value", [None, ""])
    def test_missing_header_raises(self, value: str | None) -> None:
        with pytest.raises(DriveConfigError, match="Missing x-drive-config"):
            decode_drive_config(value)

    @pytest.mark.parametrize(
        "value",
        [
            "%%%not-base64%%%",
            base64.b64encode(b"not json").decode(),
            base64.b64encode(b"\xff\xfe").decode(),
        ],
    )
    def test_malformed_value_raises(self, value: str) -> None:
        with pytest.raises(DriveConfigError, match="Invalid x-drive-config format"):
            decode_drive_config(value)

    def test_non_object_json_raises(self) -> None:
        with pytest.raises(DriveConfigError, match="Invalid"):
            decode_drive_config(_encode(["https://x", "u", "p"]))

    @pytest.mark.parametrize("missing", ["url", "username", "password"])
    def test_missing_field_raises(self, missing: str) -> None:
        payload = {k: v for k, v in _VALID.items() if k != missing}
        with pytest.raises(DriveConfigError, match=missing):
            decode_drive_config(_encode(payload))

    @pytest.mark.parametrize("url", ["/dav/", "ftp://host/dav", "https://", "teracloud.jp"])
    def test_non_absolute_url_raises(self, url: str) -> None:
        with pytest.raises(DriveConfigError, match="absolute"):
            decode_drive_config(_encode({**_VALID, "url": url}))


# ---------------------------------------------------------------------------
# basic_auth_header tests
# ---------------------------------------------------------------------------


class TestBasicAuthHeader:
    def test_encodes_username_and_password(self) -> None:
        assert basic_auth_header("alice", "s3cret") == "Basic YWxpY2U6czNjcmV0"

    def test_utf8_credentials(self) -> None:
        header = basic_auth_header("ユーザー", "pw")
        decoded = base64.b64decode(header.removeprefix("Basic ")).decode("utf-8")
        assert decoded == "ユーザー:pw"
