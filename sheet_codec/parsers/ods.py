"""
OpenDocument spreadsheet (ods) parser for sheet-codec.

Reads the first ``<table:table>`` of ``content.xml`` in a single pass.
Cell values are resolved in priority order:

1. ``office:date-value`` attribute -> ``DD.MM.YYYY``
2. ``office:value-type="date"`` -> the cell text parsed as an ISO date
3. ``office:value-type="float"`` with ``office:value`` -> serial-date
   heuristic on the attribute (a float may be a disguised date)
4. the trimmed cell text

Layout details handled here:

- ``table:covered-table-cell`` (hidden by a merge) counts as a blank cell,
  so later columns stay aligned.
- ``table:number-columns-repeated`` expands a cell; runs of repeated blank
  cells at the end of a row are dropped, since producers use them to pad
  rows to the full sheet width.
- ``table:number-rows-repeated`` repeats a row.
- Rows made only of blank cells keep their place when a row with a value
  follows them; blank rows at the end of the table are dropped, like
  trailing blank cells. Rows with no cell elements at all are dropped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sheet_codec.container import EventKind, XmlEvent, open_archive, read_member, xml_events
from sheet_codec.exceptions import MissingPartError
from sheet_codec.parsers.base import BaseParser, CellKind, render_value
from sheet_codec.table import Table
from sheet_codec.transforms.grid import Grid

logger = logging.getLogger(__name__)

CONTENT_PART = "content.xml"

_CELL_TAGS = frozenset({"table-cell", "covered-table-cell"})


def _repeat_count(raw: str | None) -> int:
    if raw is None or not raw.isdigit():
        return 1
    return max(int(raw), 1)


@dataclass
class _ContentState:
    """Mutable state of the content.xml pass."""

    tables_seen: int = 0
    in_table: bool = False
    in_cell: bool = False
    in_annotation: bool = False
    value_type: str = ""
    value: str = ""
    date_value: str = ""
    columns_repeated: int = 1
    rows_repeated: int = 1
    text: list[str] = field(default_factory=list)
    row: list[str] = field(default_factory=list)
    cells_seen: bool = False
    pending_blanks: int = 0
    pending_rows: int = 0


def classify_cell(value_type: str, value: str, date_value: str) -> tuple[CellKind, str]:
    """Pick the kind and the source text for an ods cell.

    Returns the kind plus the attribute value it applies to, or ``""`` when
    the cell text should be used.
    """
    if date_value:
        return CellKind.DATE, date_value
    if value_type == "date":
        return CellKind.DATE, ""
    if value_type == "float" and value:
        return CellKind.INLINE_NUMERIC, value
    return CellKind.PLAIN_TEXT, ""


class OdsParser(BaseParser):
    """Parser for the first table of an ods document."""

    format_name = "ods"

    def parse(self, data: bytes) -> Table:
        with open_archive(data) as archive:
            xml = read_member(archive, CONTENT_PART)
        if xml is None:
            raise MissingPartError(f"{CONTENT_PART} not found")

        grid = Grid()
        state = _ContentState()
        for event in xml_events(xml):
            if event.kind is EventKind.START:
                self._on_start(event, state)
            elif event.kind is EventKind.END:
                if self._on_end(event, state, grid):
                    break
            elif event.kind is EventKind.TEXT:
                if state.in_cell and not state.in_annotation:
                    state.text.append(event.text)

        table = Table.from_raw_rows(grid.finalize())
        logger.info("Parsed ods table: %d rows x %d columns", table.nrows, table.ncols)
        return table

    def _on_start(self, event: XmlEvent, state: _ContentState) -> None:
        name = event.name
        if name == "table":
            state.tables_seen += 1
            state.in_table = state.tables_seen == 1
        elif not state.in_table:
            return
        elif name == "table-row":
            state.row = []
            state.cells_seen = False
            state.pending_blanks = 0
            state.rows_repeated = _repeat_count(event.attrs.get("number-rows-repeated"))
        elif name in _CELL_TAGS:
            state.in_cell = True
            state.text = []
            state.value_type = event.attrs.get("value-type", "")
            state.value = event.attrs.get("value", "")
            state.date_value = event.attrs.get("date-value", "")
            state.columns_repeated = _repeat_count(
                event.attrs.get("number-columns-repeated")
            )
        elif name == "annotation":
            state.in_annotation = True

    def _on_end(self, event: XmlEvent, state: _ContentState, grid: Grid) -> bool:
        """Handle a closing tag; returns True once the first table is complete."""
        name = event.name
        if not state.in_table:
            return False
        if name == "table":
            state.in_table = False
            return True
        if name in _CELL_TAGS:
            state.in_cell = False
            state.cells_seen = True
            kind, source = classify_cell(state.value_type, state.value, state.date_value)
            value = render_value(kind, source or "".join(state.text))
            if not value and state.columns_repeated > 1:
                state.pending_blanks += state.columns_repeated
            else:
                state.row.extend([""] * state.pending_blanks)
                state.pending_blanks = 0
                state.row.extend([value] * state.columns_repeated)
        elif name == "annotation":
            state.in_annotation = False
        elif name == "table-row":
            if any(state.row):
                for _ in range(state.pending_rows):
                    grid.append_row([""])
                state.pending_rows = 0
                for _ in range(state.rows_repeated):
                    grid.append_row(state.row)
            elif state.cells_seen:
                # blank rows only count once a value follows them
                state.pending_rows += state.rows_repeated
        return False
