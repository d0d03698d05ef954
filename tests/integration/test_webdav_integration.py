"""Integration tests against a real WebDAV drive.

These tests require real InfiniCLOUD credentials and are skipped in CI/CD
unless the IP_TEST_DRIVE_URL environment variable is set.
"""

import os
import uuid

import pytest

pytestmark = pytest.mark.skipif(
    not os.getenv("IP_TEST_DRIVE_URL"),
    reason="Real WebDAV credentials not available",
)


def _client():  # type: ignore[no-untyped-def]
    from infinicloud_proxy.webdav.client import WebDavClient
    from infinicloud_proxy.webdav.models import DriveConfig

    drive = DriveConfig(
        url=os.environ["IP_TEST_DRIVE_URL"],
        username=os.environ["IP_TEST_DRIVE_USERNAME"],
        password=os.environ["IP_TEST_DRIVE_PASSWORD"],
    )
    return WebDavClient(drive)


def test_list_root_real() -> None:
    """PROPFIND on the drive root returns a list without raising."""
    entries = _client().list_directory("/")

    assert isinstance(entries, list)


def test_folder_lifecycle_real() -> None:
    """Create, upload into, list, copy, move and delete a scratch folder."""
    client = _client()
    folder = f"/proxy-it-{uuid.uuid4().hex[:8]}"

    client.make_directory(folder)
    try:
        client.upload(f"{folder}/hello.txt", b"hello", content_type="text/plain")
        client.copy(f"{folder}/hello.txt", f"{folder}/copy.txt")
        client.move(f"{folder}/copy.txt", f"{folder}/moved.txt")

        names = sorted(e.basename for e in client.list_directory(f"{folder}/"))
        assert names == ["hello.txt", "moved.txt"]
        assert client.download(f"{folder}/hello.txt").content == b"hello"
    finally:
        client.delete(f"{folder}/")
