"""
Unit tests for zip/XML container access (sheet_codec.container).

Archives are built in memory; XML cursors are consumed with list().
"""

import pytest

from sheet_codec.container import EventKind, local_name, open_archive, read_member, xml_events
from sheet_codec.exceptions import (
    InvalidEncodingError,
    MalformedContainerError,
    MalformedXmlError,
)


class TestOpenArchive:
    """Tests for open_archive()."""

    def test_valid_zip(self, zip_bytes):
        archive = open_archive(zip_bytes({"a.txt": "hello"}))
        assert archive.namelist() == ["a.txt"]

    @pytest.mark.parametrize("data", [b"", b"not a zip at all", b"PK\x03\x04garbage"])
    def test_not_a_zip(self, data):
        with pytest.raises(MalformedContainerError, match="Not a zip archive"):
            open_archive(data)


class TestReadMember:
    """Tests for read_member()."""

    def test_suffix_match(self, zip_bytes):
        archive = open_archive(zip_bytes({"xl/worksheets/sheet1.xml": "<a/>"}))
        assert read_member(archive, "worksheets/sheet1.xml") == "<a/>"
        assert read_member(archive, "xl/worksheets/sheet1.xml") == "<a/>"

    def test_first_match_wins(self, zip_bytes):
        archive = open_archive(zip_bytes({"one/content.xml": "1", "two/content.xml": "2"}))
        assert read_member(archive, "content.xml") == "1"

    def test_missing_member(self, zip_bytes):
        archive = open_archive(zip_bytes({"a.txt": "x"}))
        assert read_member(archive, "content.xml") is None

    def test_utf8_decoding(self, zip_bytes):
        archive = open_archive(zip_bytes({"content.xml": "Größe".encode("utf-8")}))
        assert read_member(archive, "content.xml") == "Größe"

    def test_invalid_utf8(self, zip_bytes):
        archive = open_archive(zip_bytes({"content.xml": b"\xff\xfe\xfa"}))
        with pytest.raises(InvalidEncodingError, match="not valid UTF-8"):
            read_member(archive, "content.xml")


class TestXmlEvents:
    """Tests for xml_events()."""

    def test_event_sequence(self):
        events = list(xml_events("<root><item id='1'>  hello  </item></root>"))
        kinds = [(e.kind, e.name) for e in events]
        assert kinds == [
            (EventKind.START, "root"),
            (EventKind.START, "item"),
            (EventKind.TEXT, ""),
            (EventKind.END, "item"),
            (EventKind.END, "root"),
            (EventKind.EOF, ""),
        ]
        assert events[1].attrs == {"id": "1"}
        assert events[2].text == "hello"

    def test_whitespace_only_text_dropped(self):
        events = list(xml_events("<a>\n   <b/>\n</a>"))
        assert EventKind.TEXT not in {e.kind for e in events}

    def test_namespaces_reduced_to_local_names(self):
        xml = (
            '<t:table xmlns:t="urn:t" xmlns:o="urn:o">'
            '<t:cell o:value-type="float" o:value="3"/></t:table>'
        )
        start = [e for e in xml_events(xml) if e.kind is EventKind.START]
        assert [e.name for e in start] == ["table", "cell"]
        assert start[1].attrs == {"value-type": "float", "value": "3"}

    def test_entities_unescaped(self):
        events = list(xml_events("<a>x &amp; y &lt;z&gt;</a>"))
        assert [e.text for e in events if e.kind is EventKind.TEXT] == ["x & y <z>"]

    def test_text_split_around_children(self):
        events = list(xml_events("<a>one<b/>two</a>"))
        assert [e.text for e in events if e.kind is EventKind.TEXT] == ["one", "two"]

    def test_large_document_is_streamed(self):
        body = "".join(f"<r>{i}</r>" for i in range(20_000))
        texts = [e.text for e in xml_events(f"<rows>{body}</rows>") if e.kind is EventKind.TEXT]
        assert len(texts) == 20_000
        assert texts[-1] == "19999"

    @pytest.mark.parametrize("xml", ["<a><b></a>", "", "<a>", "not xml"])
    def test_malformed(self, xml):
        with pytest.raises(MalformedXmlError) as excinfo:
            list(xml_events(xml))
        assert excinfo.value.detail

    def test_local_name(self):
        assert local_name("{urn:x}cell") == "cell"
        assert local_name("table:table-cell") == "table-cell"
        assert local_name("row") == "row"
