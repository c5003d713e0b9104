"""
Base parser protocol / ABC for sheet-codec.

All format-specific parsers implement this interface. The contract is:
1. The parser is constructed with a ``CodecConfig`` (defaults if omitted).
2. parse() takes the raw bytes of one file and returns a rectangular
   ``Table`` whose header is the first row of the sheet.
3. Every failure is raised as a ``SheetCodecError`` subclass; parsers never
   let a third-party exception escape.

Parsers keep no state between parse() calls, so one instance may be reused
or shared between threads.
"""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod

from sheet_codec.config import CodecConfig
from sheet_codec.table import Table
from sheet_codec.transforms.dates import format_iso_date, try_format_as_date


class BaseParser(ABC):
    """Abstract base class for format parsers."""

    format_name: str = ""

    def __init__(self, config: CodecConfig | None = None) -> None:
        self.config = config or CodecConfig()

    @abstractmethod
    def parse(self, data: bytes) -> Table:
        """Parse one file.

        Args:
            data: The complete file contents.

        Returns:
            The decoded table (header split off, every row padded).

        Raises:
            SheetCodecError: If the file cannot be decoded.
        """


class CellKind(enum.Enum):
    """How a raw cell value is turned into its final string.

    Resolved once per cell by the spreadsheet parsers:

    - SHARED_STRING: the text is an index into the xlsx shared-string table.
    - INLINE_NUMERIC: a number, rendered through the serial-date heuristic.
    - DATE: an ISO date, rendered as ``DD.MM.YYYY``.
    - PLAIN_TEXT: kept as trimmed text.
    """

    SHARED_STRING = "shared-string"
    INLINE_NUMERIC = "inline-numeric"
    DATE = "date"
    PLAIN_TEXT = "plain-text"


def render_value(kind: CellKind, text: str) -> str:
    """Collapse a non-shared-string cell into its final string."""
    if kind is CellKind.DATE:
        return format_iso_date(text)
    if kind is CellKind.INLINE_NUMERIC:
        return try_format_as_date(text.strip())
    if kind is CellKind.PLAIN_TEXT:
        return text.strip()
    raise ValueError(f"{kind} cells need a shared-string table")
