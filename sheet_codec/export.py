"""
Encoders for sheet-codec.

Writes a canonical table (header + string rows) into an in-memory xlsx or
ods file with a single sheet:

- row 0 holds the header, data rows follow in order,
- every cell is written as text; no numbers or dates are re-inferred, and a
  value starting with ``=`` is not turned into a formula.

The output is lossless relative to the string table, not relative to the
typed spreadsheet it may originally have come from.

Libraries:
- openpyxl for xlsx.
- odfpy for ods.
"""

from __future__ import annotations

import io
import logging
from collections.abc import Sequence

from odf.opendocument import OpenDocumentSpreadsheet
from odf.table import Table as OdfTable
from odf.table import TableCell, TableRow
from odf.text import P
from openpyxl import Workbook

from sheet_codec.config import CodecConfig
from sheet_codec.exceptions import EncodeError

logger = logging.getLogger(__name__)

SUPPORTED_ENCODE_FORMATS = ("xlsx", "ods")


def _with_header(
    columns: Sequence[str], rows: Sequence[Sequence[str]]
) -> list[Sequence[str]]:
    return [columns, *rows]


def build_xlsx(
    columns: Sequence[str],
    rows: Sequence[Sequence[str]],
    config: CodecConfig | None = None,
) -> bytes:
    """Serialize a table to xlsx bytes.

    Raises:
        EncodeError: If openpyxl rejects a value or the workbook cannot be saved.
    """
    config = config or CodecConfig()
    try:
        workbook = Workbook()
        sheet = workbook.active
        sheet.title = config.sheet_name
        for row_idx, values in enumerate(_with_header(columns, rows), start=1):
            for col_idx, value in enumerate(values, start=1):
                cell = sheet.cell(row=row_idx, column=col_idx, value=str(value))
                # keep "=..." as text
                cell.data_type = "s"
        buffer = io.BytesIO()
        workbook.save(buffer)
    except Exception as exc:
        raise EncodeError("xlsx", str(exc)) from exc

    data = buffer.getvalue()
    logger.info(
        "Built xlsx: %d rows x %d columns (%d bytes)", len(rows), len(columns), len(data)
    )
    return data


def build_ods(
    columns: Sequence[str],
    rows: Sequence[Sequence[str]],
    config: CodecConfig | None = None,
) -> bytes:
    """Serialize a table to ods bytes.

    Raises:
        EncodeError: If odfpy fails to build or write the document.
    """
    config = config or CodecConfig()
    try:
        document = OpenDocumentSpreadsheet()
        table = OdfTable(name=config.sheet_name)
        for values in _with_header(columns, rows):
            row = TableRow()
            for value in values:
                cell = TableCell(valuetype="string")
                cell.addElement(P(text=str(value)))
                row.addElement(cell)
            table.addElement(row)
        document.spreadsheet.addElement(table)
        buffer = io.BytesIO()
        document.write(buffer)
    except Exception as exc:
        raise EncodeError("ods", str(exc)) from exc

    data = buffer.getvalue()
    logger.info(
        "Built ods: %d rows x %d columns (%d bytes)", len(rows), len(columns), len(data)
    )
    return data
