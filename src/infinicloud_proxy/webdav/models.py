"""Data models for WebDAV drives and directory listings."""

from dataclasses import dataclass

# DirectoryEntry.type values
ENTRY_TYPE_FILE = "file"
ENTRY_TYPE_DIRECTORY = "directory"

# Drive config JSON field names
FIELD_URL = "url"
FIELD_USERNAME = "username"
FIELD_PASSWORD = "password"

DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class DriveConfig:
    """Connection details for one WebDAV drive, supplied per request."""

    url: str
    username: str
    password: str

    def __repr__(self) -> str:
        return f"DriveConfig(url={self.url!r}, username={self.username!r}, password='***')"

    @property
    def base_url(self) -> str:
        """Drive URL with any trailing slash removed."""
        return self.url.rstrip("/")


@dataclass
class DirectoryEntry:
    """A single child resource reported by a PROPFIND listing."""

    filename: str
    basename: str
    type: str
    size: int = 0

    def to_dict(self) -> dict[str, str | int]:
        """Serialize to the JSON shape returned by the gateway endpoint."""
        return {
            "filename": self.filename,
            "basename": self.basename,
            "type": self.type,
            "size": self.size,
        }


@dataclass
class DownloadedFile:
    """Body and content type of a file fetched from the drive."""

    content: bytes
    content_type: str = DEFAULT_CONTENT_TYPE
