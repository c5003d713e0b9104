"""
Shared test fixtures for sheet-codec tests.

Spreadsheet inputs are built in memory: ``make_xlsx`` and ``make_ods``
return factories that wrap hand-written XML fragments into zip archives,
so each test states exactly the cells it depends on.
"""

from __future__ import annotations

import io
import zipfile
from collections.abc import Callable, Sequence
from xml.sax.saxutils import escape

import pytest

XLSX_MAIN_NS = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"
XLSX_REL_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
PKG_REL_NS = "http://schemas.openxmlformats.org/package/2006/relationships"

ODS_NAMESPACES = (
    'xmlns:office="urn:oasis:names:tc:opendocument:xmlns:office:1.0" '
    'xmlns:table="urn:oasis:names:tc:opendocument:xmlns:table:1.0" '
    'xmlns:text="urn:oasis:names:tc:opendocument:xmlns:text:1.0"'
)


def build_zip(parts: dict[str, str | bytes]) -> bytes:
    """Zip the given ``{member name: content}`` mapping into bytes."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, content in parts.items():
            zf.writestr(name, content)
    return buffer.getvalue()


def shared_strings_xml(strings: Sequence[str]) -> str:
    items = "".join(f"<si><t>{escape(s)}</t></si>" for s in strings)
    return (
        f'<?xml version="1.0" encoding="UTF-8"?>'
        f'<sst xmlns="{XLSX_MAIN_NS}" count="{len(strings)}">{items}</sst>'
    )


def worksheet_xml(sheet_data: str, merges: Sequence[str] = ()) -> str:
    merge_xml = ""
    if merges:
        refs = "".join(f'<mergeCell ref="{m}"/>' for m in merges)
        merge_xml = f'<mergeCells count="{len(merges)}">{refs}</mergeCells>'
    return (
        f'<?xml version="1.0" encoding="UTF-8"?>'
        f'<worksheet xmlns="{XLSX_MAIN_NS}" xmlns:r="{XLSX_REL_NS}">'
        f"<sheetData>{sheet_data}</sheetData>{merge_xml}</worksheet>"
    )


def text_rows(rows: Sequence[Sequence[str]]) -> str:
    """Render rows of plain strings as ``<row>``/``<c t="str">`` sheet data."""
    out = []
    for r, values in enumerate(rows, start=1):
        cells = "".join(
            f'<c r="{chr(ord("A") + c)}{r}" t="str"><v>{escape(v)}</v></c>'
            for c, v in enumerate(values)
        )
        out.append(f'<row r="{r}">{cells}</row>')
    return "".join(out)


@pytest.fixture
def make_xlsx() -> Callable[..., bytes]:
    """Factory: ``make_xlsx(sheet_data, shared=None, merges=())`` -> xlsx bytes.

    *sheet_data* is the inner XML of ``<sheetData>``. Pass ``shared=None``
    to leave out the shared-strings part entirely.
    """

    def _make(
        sheet_data: str,
        shared: Sequence[str] | None = None,
        merges: Sequence[str] = (),
        sheet_part: str = "xl/worksheets/sheet1.xml",
        extra_parts: dict[str, str] | None = None,
    ) -> bytes:
        parts: dict[str, str | bytes] = {
            sheet_part: worksheet_xml(sheet_data, merges),
        }
        if shared is not None:
            parts["xl/sharedStrings.xml"] = shared_strings_xml(shared)
        parts.update(extra_parts or {})
        return build_zip(parts)

    return _make


@pytest.fixture
def zip_bytes() -> Callable[[dict[str, str | bytes]], bytes]:
    """The ``build_zip`` helper, for archives with arbitrary members."""
    return build_zip


@pytest.fixture
def sheet_rows() -> Callable[[Sequence[Sequence[str]]], str]:
    """The ``text_rows`` helper, for building plain-string sheet data."""
    return text_rows


@pytest.fixture
def make_ods() -> Callable[..., bytes]:
    """Factory: ``make_ods(table_body, extra_tables="")`` -> ods bytes.

    *table_body* is the inner XML of the first ``<table:table>``.
    """

    def _make(table_body: str, extra_tables: str = "") -> bytes:
        content = (
            f'<?xml version="1.0" encoding="UTF-8"?>'
            f"<office:document-content {ODS_NAMESPACES}>"
            f"<office:body><office:spreadsheet>"
            f'<table:table table:name="Sheet1">{table_body}</table:table>'
            f"{extra_tables}"
            f"</office:spreadsheet></office:body></office:document-content>"
        )
        return build_zip({
            "mimetype": "application/vnd.oasis.opendocument.spreadsheet",
            "content.xml": content,
        })

    return _make


# ---------------------------------------------------------------------------
# Pytest markers
# ---------------------------------------------------------------------------
def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (round trips through real writers)",
    )
