"""Tolerant parser for WebDAV PROPFIND multistatus responses.

Servers disagree on namespace prefixes (``d:``, ``D:``, ``lp1:`` or none), so
elements are located by local name with a regular-expression scan rather
than a strict XML parser. A document that is not well-formed still yields
every ``<response>`` fragment that can be recognised; unusable fragments are
skipped, never raised.
"""

from __future__ import annotations

import html
import logging
import re
from collections.abc import Iterator
from urllib.parse import unquote

from infinicloud_proxy.webdav.models import (
    ENTRY_TYPE_DIRECTORY,
    ENTRY_TYPE_FILE,
    DirectoryEntry,
)

logger = logging.getLogger(__name__)

# Optional namespace prefix, e.g. "d:" or "lp1:".
_PREFIX = r"(?:[\w.-]+:)?"


def _element(name: str, content: str) -> re.Pattern[str]:
    """Compile a pattern matching <prefix:name attrs>content</prefix:name>."""
    return re.compile(
        rf"<{_PREFIX}{name}(?:\s[^<>]*)?>{content}</{_PREFIX}{name}\s*>",
        re.IGNORECASE | re.DOTALL,
    )


_RESPONSE_OPEN_RE = re.compile(rf"<{_PREFIX}response(?:\s[^<>]*)?>", re.IGNORECASE)
_RESPONSE_CLOSE_RE = re.compile(rf"</{_PREFIX}response\s*>", re.IGNORECASE)
_HREF_RE = _element("href", r"([^<]*)")
_DISPLAYNAME_RE = _element("displayname", r"([^<]*)")
_RESOURCETYPE_OPEN_RE = re.compile(rf"<{_PREFIX}resourcetype(?:\s[^<>]*)?>", re.IGNORECASE)
_RESOURCETYPE_CLOSE_RE = re.compile(rf"</{_PREFIX}resourcetype\s*>", re.IGNORECASE)
_COLLECTION_RE = re.compile(rf"<{_PREFIX}collection(?:\s[^<>]*)?/>", re.IGNORECASE)
_CONTENT_LENGTH_RE = _element("getcontentlength", r"\s*(\d+)\s*")


def parse_multistatus(xml: str, request_path: str) -> list[DirectoryEntry]:
    """Convert a PROPFIND multistatus body into directory entries.

    Args:
        xml: Response body of a Depth:1 PROPFIND request.
        request_path: Logical path that was listed (e.g. "/Docs/"). The
            response entry for this path is the collection itself and is
            excluded from the result.

    Returns:
        One DirectoryEntry per child resource, in document order. Empty when
        the body holds no recognisable response blocks.
    """
    if not xml:
        return []

    base = _strip_trailing_slash("/" + (request_path or "").lstrip("/"))
    entries: list[DirectoryEntry] = []
    skipped = 0

    for block in _fragments(xml, _RESPONSE_OPEN_RE, _RESPONSE_CLOSE_RE):
        entry = _parse_response_block(block, base)
        if entry is None:
            skipped += 1
            continue
        entries.append(entry)

    logger.debug(
        "[parse_multistatus] parsed listing; request_path:%s;entries:%d;skipped:%d",
        request_path,
        len(entries),
        skipped,
    )
    return entries


def _parse_response_block(block: str, base: str) -> DirectoryEntry | None:
    """Map one <response> fragment to a DirectoryEntry, or None to skip it."""
    href_match = _HREF_RE.search(block)
    if href_match is None:
        return None

    href = unquote(html.unescape(href_match.group(1).strip()))
    if not href:
        return None
    normalized = _strip_trailing_slash(href)
    if normalized == "" or normalized == base:
        return None

    basename = ""
    displayname_match = _DISPLAYNAME_RE.search(block)
    if displayname_match is not None:
        basename = html.unescape(displayname_match.group(1)).strip()
    if not basename:
        basename = _last_segment(normalized)
    if not basename:
        return None

    # Collections report no size even when the server sends a length (e.g. 4096).
    if _is_collection(block):
        return DirectoryEntry(filename=href, basename=basename, type=ENTRY_TYPE_DIRECTORY)

    size_match = _CONTENT_LENGTH_RE.search(block)
    return DirectoryEntry(
        filename=href,
        basename=basename,
        type=ENTRY_TYPE_FILE,
        size=int(size_match.group(1)) if size_match is not None else 0,
    )


def _fragments(text: str, open_re: re.Pattern[str], close_re: re.Pattern[str]) -> Iterator[str]:
    """Yield the text between each opening tag and the next closing tag.

    Scanning resumes after each closing tag and stops at the first opening
    tag that is never closed, so every character is examined a bounded
    number of times.
    """
    pos = 0
    while True:
        opening = open_re.search(text, pos)
        if opening is None:
            return
        closing = close_re.search(text, opening.end())
        if closing is None:
            return
        yield text[opening.end() : closing.start()]
        pos = closing.end()


def _is_collection(block: str) -> bool:
    for resourcetype in _fragments(block, _RESOURCETYPE_OPEN_RE, _RESOURCETYPE_CLOSE_RE):
        return _COLLECTION_RE.search(resourcetype) is not None
    return False


def _strip_trailing_slash(path: str) -> str:
    return path[:-1] if path.endswith("/") else path


def _last_segment(path: str) -> str:
    """Return the final non-empty segment of a slash-separated path."""
    segments = [s for s in path.split("/") if s]
    return segments[-1] if segments else ""
