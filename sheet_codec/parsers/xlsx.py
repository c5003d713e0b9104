"""
Office Open XML (xlsx) parser for sheet-codec.

Reads only the first worksheet, in two passes over the archive's XML:

1. ``xl/sharedStrings.xml``: every ``<si>`` becomes one entry of the
   shared-string table (text of its ``<t>`` runs, phonetic ``<rPh>`` runs
   excluded). A workbook without this part is valid and gets an empty table.
2. The worksheet: cells are placed by their ``r`` reference (``"C7"`` ->
   row 6, column 2), falling back to "previous + 1" when a row or cell has no
   reference. ``<mergeCell>`` ranges are collected and flattened after the
   whole grid is read, unless the sheet is large
   (``CodecConfig.merge_row_limit``).

The first worksheet is found through ``xl/workbook.xml`` and its
relationships part; archives without them fall back to
``xl/worksheets/sheet1.xml``.
"""

from __future__ import annotations

import logging
import posixpath
import zipfile
from dataclasses import dataclass, field

from sheet_codec.container import EventKind, XmlEvent, open_archive, read_member, xml_events
from sheet_codec.exceptions import MissingPartError
from sheet_codec.parsers.base import BaseParser, CellKind, render_value
from sheet_codec.table import Table
from sheet_codec.transforms.dates import is_numeric
from sheet_codec.transforms.grid import Grid, MergeRange, parse_cell_ref, parse_merge_range

logger = logging.getLogger(__name__)

SHARED_STRINGS_PART = "xl/sharedStrings.xml"
WORKBOOK_PART = "xl/workbook.xml"
WORKBOOK_RELS_PART = "xl/_rels/workbook.xml.rels"
DEFAULT_SHEET_PART = "xl/worksheets/sheet1.xml"

# Elements whose text is a cell value: <v> for values, <t> for inline strings.
_VALUE_TAGS = frozenset({"v", "t"})

# Cell types that declare their value a string: inline strings and
# formula string results.
_STRING_TYPES = frozenset({"inlineStr", "str"})


def read_shared_strings(archive: zipfile.ZipFile) -> list[str]:
    """Build the shared-string table; empty when the part is absent."""
    xml = read_member(archive, SHARED_STRINGS_PART)
    if xml is None:
        logger.debug("No shared strings part; using an empty table")
        return []

    strings: list[str] = []
    parts: list[str] = []
    in_si = in_t = in_phonetic = False
    for event in xml_events(xml):
        if event.kind is EventKind.START:
            if event.name == "si":
                in_si = True
                parts = []
            elif event.name == "rPh":
                in_phonetic = True
            elif event.name == "t":
                in_t = True
        elif event.kind is EventKind.END:
            if event.name == "si":
                strings.append("".join(parts))
                in_si = False
            elif event.name == "rPh":
                in_phonetic = False
            elif event.name == "t":
                in_t = False
        elif event.kind is EventKind.TEXT:
            if in_si and in_t and not in_phonetic:
                parts.append(event.text)
    return strings


def first_sheet_part(archive: zipfile.ZipFile) -> str:
    """Resolve the archive path of the workbook's first worksheet."""
    workbook = read_member(archive, WORKBOOK_PART)
    rels = read_member(archive, WORKBOOK_RELS_PART)
    if workbook is None or rels is None:
        return DEFAULT_SHEET_PART

    rel_id = None
    for event in xml_events(workbook):
        if event.kind is EventKind.START and event.name == "sheet":
            rel_id = event.attrs.get("id")
            break
    if rel_id is None:
        return DEFAULT_SHEET_PART

    for event in xml_events(rels):
        if (
            event.kind is EventKind.START
            and event.name == "Relationship"
            and event.attrs.get("Id") == rel_id
        ):
            target = event.attrs.get("Target", "")
            if not target:
                break
            if target.startswith("/"):
                return target.lstrip("/")
            return posixpath.normpath(posixpath.join("xl", target))
    return DEFAULT_SHEET_PART


@dataclass
class _SheetState:
    """Mutable state of the worksheet pass."""

    row: int = -1
    col: int = -1
    in_cell: bool = False
    in_value: bool = False
    in_phonetic: bool = False
    cell_type: str = ""
    text: list[str] = field(default_factory=list)
    merges: list[MergeRange] = field(default_factory=list)


def classify_cell(cell_type: str, text: str) -> CellKind:
    """Resolve an xlsx cell's kind from its ``t`` attribute and value text."""
    if cell_type == "s":
        return CellKind.SHARED_STRING
    if cell_type == "d":
        return CellKind.DATE
    if cell_type in _STRING_TYPES:
        return CellKind.PLAIN_TEXT
    if is_numeric(text):
        return CellKind.INLINE_NUMERIC
    return CellKind.PLAIN_TEXT


def _shared_string(shared: list[str], text: str) -> str:
    try:
        index = int(text.strip())
    except ValueError:
        index = -1
    if 0 <= index < len(shared):
        return shared[index]
    logger.debug(
        "Unresolvable shared string index %r (table has %d entries); using \"\"",
        text, len(shared),
    )
    return ""


class XlsxParser(BaseParser):
    """Parser for the first worksheet of an xlsx workbook."""

    format_name = "xlsx"

    def parse(self, data: bytes) -> Table:
        with open_archive(data) as archive:
            shared = read_shared_strings(archive)
            sheet_part = first_sheet_part(archive)
            xml = read_member(archive, sheet_part)
        if xml is None:
            raise MissingPartError(f"Worksheet part not found: {sheet_part}")

        grid, merges = self._read_sheet(xml, shared)
        grid.apply_merges(merges, self.config.merge_row_limit)
        table = Table.from_raw_rows(grid.finalize())

        logger.info(
            "Parsed xlsx sheet %s: %d rows x %d columns, %d shared strings, %d merges",
            sheet_part, table.nrows, table.ncols, len(shared), len(merges),
        )
        return table

    def _read_sheet(self, xml: str, shared: list[str]) -> tuple[Grid, list[MergeRange]]:
        grid = Grid()
        state = _SheetState()
        for event in xml_events(xml):
            if event.kind is EventKind.START:
                self._on_start(event, state, grid)
            elif event.kind is EventKind.END:
                self._on_end(event, state, grid, shared)
            elif event.kind is EventKind.TEXT:
                if state.in_cell and state.in_value and not state.in_phonetic:
                    state.text.append(event.text)
        return grid, state.merges

    def _on_start(self, event: XmlEvent, state: _SheetState, grid: Grid) -> None:
        name = event.name
        if name == "row":
            r = event.attrs.get("r", "")
            state.row = int(r) - 1 if r.isdigit() and int(r) > 0 else state.row + 1
            state.col = -1
            grid.ensure_row(state.row)
        elif name == "c":
            if state.row < 0:
                state.row = 0
            ref = parse_cell_ref(event.attrs.get("r", ""))
            state.col = ref[1] if ref is not None else state.col + 1
            state.in_cell = True
            state.cell_type = event.attrs.get("t", "")
            state.text = []
        elif name in _VALUE_TAGS:
            state.in_value = True
        elif name == "rPh":
            state.in_phonetic = True
        elif name == "mergeCell":
            ref = event.attrs.get("ref", "")
            merge = parse_merge_range(ref)
            if merge is None:
                logger.warning("Ignoring unparseable merge range %r", ref)
            else:
                state.merges.append(merge)

    def _on_end(
        self, event: XmlEvent, state: _SheetState, grid: Grid, shared: list[str]
    ) -> None:
        name = event.name
        if name == "c":
            text = "".join(state.text)
            kind = classify_cell(state.cell_type, text)
            if kind is CellKind.SHARED_STRING:
                value = _shared_string(shared, text)
            else:
                value = render_value(kind, text)
            grid.set(state.row, state.col, value)
            state.in_cell = False
        elif name in _VALUE_TAGS:
            state.in_value = False
        elif name == "rPh":
            state.in_phonetic = False
