"""Unit tests for webdav/models.py: drive config and listing entries."""

import dataclasses

import pytest

from infinicloud_proxy.webdav.models import (
    DEFAULT_CONTENT_TYPE,
    ENTRY_TYPE_DIRECTORY,
    ENTRY_TYPE_FILE,
    DirectoryEntry,
    DownloadedFile,
    DriveConfig,
)


class TestDriveConfig:
    def test_base_url_strips_trailing_slash(self) -> None:
        drive = DriveConfig(url="https://seto.teracloud.jp/dav/", username="u", password="p")
        assert drive.base_url == "https://seto.teracloud.jp/dav"

    def test_base_url_without_trailing_slash_unchanged(self) -> None:
        drive = DriveConfig(url="https://seto.teracloud.jp/dav", username="u", password="p")
        assert drive.base_url == "https://seto.teracloud.jp/dav"

    def test_repr_masks_password(self) -> None:
        drive = DriveConfig(url="https://x/dav", username="alice", password="hunter2")
        assert "hunter2" not in repr(drive)
        assert "alice" in repr(drive)

    def test_is_immutable(self) -> None:
        drive = DriveConfig(url="https://x/dav", username="u", password="p")
        with pytest.raises(dataclasses.FrozenInstanceError):
            drive.url = "https://y/dav"  # type: ignore[misc]


class TestDirectoryEntry:
    def test_to_dict_has_exactly_wire_keys(self) -> None:
        entry = DirectoryEntry(
            filename="/Docs/a.txt", basename="a.txt", type=ENTRY_TYPE_FILE, size=10
        )
        assert entry.to_dict() == {
            "filename": "/Docs/a.txt",
            "basename": "a.txt",
            "type": "file",
            "size": 10,
        }

    def test_size_defaults_to_zero(self) -> None:
        entry = DirectoryEntry(filename="/Docs/", basename="Docs", type=ENTRY_TYPE_DIRECTORY)
        assert entry.size == 0


class TestDownloadedFile:
    def test_content_type_default(self) -> None:
        assert DownloadedFile(content=b"x").content_type == DEFAULT_CONTENT_TYPE
