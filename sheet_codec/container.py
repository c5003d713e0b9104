"""
Zip + XML container access shared by the xlsx and ods parsers.

Both formats are zip archives of XML parts. This module:

- opens an in-memory archive (``open_archive``),
- reads one member as UTF-8 text by name suffix (``read_member``), so both
  ``xl/sharedStrings.xml`` and ``/xl/sharedStrings.xml`` style producers work,
- turns XML text into a forward-only stream of ``XmlEvent`` (``xml_events``).

The event stream is namespace-tolerant: tag and attribute names are reduced
to their local part (``table:table-cell`` -> ``table-cell``), so parsers do
not depend on the prefixes a producer chose. Text is trimmed, whitespace-only
text is dropped and adjacent text chunks are coalesced into one event.

Nothing here caches or keeps state between calls.
"""

from __future__ import annotations

import enum
import io
import logging
import zipfile
from collections.abc import Iterator
from dataclasses import dataclass, field

from lxml import etree

from sheet_codec.exceptions import (
    InvalidEncodingError,
    MalformedContainerError,
    MalformedXmlError,
)

logger = logging.getLogger(__name__)

_FEED_CHUNK_SIZE = 64 * 1024


class EventKind(enum.Enum):
    START = "start"
    END = "end"
    TEXT = "text"
    EOF = "eof"


@dataclass(frozen=True)
class XmlEvent:
    """One XML event. ``name`` is the local tag name (empty for TEXT/EOF)."""

    kind: EventKind
    name: str = ""
    attrs: dict[str, str] = field(default_factory=dict)
    text: str = ""


def local_name(qualified: str) -> str:
    """Strip an lxml ``{uri}`` namespace or a ``prefix:`` from a name."""
    if qualified.startswith("{"):
        return qualified.rpartition("}")[2]
    return qualified.rpartition(":")[2]


def open_archive(data: bytes) -> zipfile.ZipFile:
    """Open an in-memory zip archive.

    Raises:
        MalformedContainerError: If *data* is not a zip archive.
    """
    try:
        return zipfile.ZipFile(io.BytesIO(data))
    except (zipfile.BadZipFile, zipfile.LargeZipFile, ValueError) as exc:
        raise MalformedContainerError(f"Not a zip archive: {exc}") from exc


def read_member(archive: zipfile.ZipFile, suffix: str) -> str | None:
    """Return the first member whose name ends with *suffix*, decoded as UTF-8.

    Returns ``None`` when no member matches.

    Raises:
        InvalidEncodingError: If the member is not valid UTF-8.
        MalformedContainerError: If the member cannot be decompressed.
    """
    for name in archive.namelist():
        if not name.endswith(suffix):
            continue
        try:
            raw = archive.read(name)
        except (zipfile.BadZipFile, EOFError, NotImplementedError) as exc:
            raise MalformedContainerError(f"Cannot read {name}: {exc}") from exc
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidEncodingError(f"{name} is not valid UTF-8: {exc}") from exc
    logger.debug("No archive member ending with %s", suffix)
    return None


class _EventCollector:
    """lxml parser target that turns callbacks into ``XmlEvent`` objects."""

    def __init__(self) -> None:
        self.events: list[XmlEvent] = []
        self._text: list[str] = []

    def _flush_text(self) -> None:
        if self._text:
            text = "".join(self._text).strip()
            self._text.clear()
            if text:
                self.events.append(XmlEvent(EventKind.TEXT, text=text))

    def start(self, tag, attrib) -> None:
        self._flush_text()
        attrs = {local_name(k): v for k, v in attrib.items()}
        self.events.append(XmlEvent(EventKind.START, local_name(tag), attrs))

    def end(self, tag) -> None:
        self._flush_text()
        self.events.append(XmlEvent(EventKind.END, local_name(tag)))

    def data(self, data) -> None:
        self._text.append(data)

    def comment(self, text) -> None:
        pass

    def close(self) -> None:
        self._flush_text()

    def drain(self) -> list[XmlEvent]:
        events, self.events = self.events, []
        return events


def xml_events(text: str) -> Iterator[XmlEvent]:
    """Yield events for an XML document, ending with a single EOF event.

    Raises:
        MalformedXmlError: On any XML syntax error.
    """
    collector = _EventCollector()
    parser = etree.XMLParser(
        target=collector,
        resolve_entities=False,
        no_network=True,
        huge_tree=True,
    )
    data = text.encode("utf-8")
    if not data.strip():
        raise MalformedXmlError("document is empty")
    try:
        for offset in range(0, len(data), _FEED_CHUNK_SIZE):
            parser.feed(data[offset:offset + _FEED_CHUNK_SIZE])
            yield from collector.drain()
        parser.close()
    except etree.LxmlError as exc:
        raise MalformedXmlError(str(exc)) from exc
    yield from collector.drain()
    yield XmlEvent(EventKind.EOF)
