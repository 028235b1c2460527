"""Helpers for reading Office Open XML (zip) packages."""

import html
import io
import re
import zipfile
import zlib

from metadata_ingest.extractors.exceptions import ArchiveEntryMissingError, ExtractionError

_WHITESPACE_RE = re.compile(r"\s+")


def open_archive(data: bytes) -> zipfile.ZipFile:
    """Open OOXML bytes as a zip archive.

    Raises:
        ExtractionError: if the bytes are not a readable zip archive.
    """
    try:
        return zipfile.ZipFile(io.BytesIO(data))
    except (zipfile.BadZipFile, ValueError) as exc:
        raise ExtractionError(f"Not a valid OOXML archive: {exc}") from exc


def read_entry(archive: zipfile.ZipFile, name: str) -> str:
    """Read a UTF-8 XML entry.

    Raises:
        ArchiveEntryMissingError: if the entry does not exist.
        ExtractionError: if the entry is corrupt, encrypted or uses an
            unsupported compression method.
    """
    try:
        raw = archive.read(name)
    except KeyError as exc:
        raise ArchiveEntryMissingError(f"Archive entry not found: {name}") from exc
    except (zipfile.BadZipFile, zlib.error, EOFError, NotImplementedError, RuntimeError) as exc:
        raise ExtractionError(f"Unreadable archive entry {name}: {exc}") from exc
    return raw.decode("utf-8", errors="replace")


def read_optional_entry(archive: zipfile.ZipFile, name: str) -> str | None:
    try:
        return read_entry(archive, name)
    except ArchiveEntryMissingError:
        return None


def text_runs(xml: str, tag: str) -> list[str]:
    """Unescaped contents of every ``<tag>`` run, in document order."""
    pattern = re.compile(rf"<{re.escape(tag)}(?:\s[^>]*)?>([^<]*)</{re.escape(tag)}>")
    return [html.unescape(match) for match in pattern.findall(xml)]


def first_element_text(xml: str, tag: str) -> str:
    pattern = re.compile(rf"<{re.escape(tag)}(?:\s[^>]*)?>([^<]*)</{re.escape(tag)}>")
    match = pattern.search(xml)
    return html.unescape(match.group(1)).strip() if match else ""


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()
