"""
Cell grid transform for sheet-codec.

Spreadsheet XML addresses cells sparsely (rows and cells may be skipped), so
parsers write into a ``Grid`` that grows on demand. Once all cells are read,
merged ranges are flattened and the grid is rectangularized by ``finalize()``,
which may run exactly once: after it the grid is read-only.

Cell references use the A1 convention: base-26 column letters (``A`` = 1)
followed by a 1-based row number. Everything here is zero-based.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

_CELL_REF = re.compile(r"\$?([A-Za-z]+)\$?(\d*)")


@dataclass(frozen=True)
class MergeRange:
    """Inclusive, zero-based rectangle ``(row1, col1)`` .. ``(row2, col2)``."""

    row1: int
    col1: int
    row2: int
    col2: int


def column_index(letters: str) -> int:
    """Convert column letters to a zero-based index (``"A"`` -> 0, ``"AA"`` -> 26)."""
    n = 0
    for ch in letters.upper():
        n = n * 26 + (ord(ch) - ord("A") + 1)
    return n - 1


def parse_cell_ref(ref: str) -> tuple[int, int] | None:
    """Parse ``"C7"`` into ``(row, col)`` = ``(6, 2)``.

    A missing row number means row 0. Returns ``None`` when there are no
    column letters.
    """
    match = _CELL_REF.fullmatch(ref.strip())
    if match is None:
        return None
    letters, digits = match.groups()
    row = int(digits) - 1 if digits else 0
    return max(row, 0), column_index(letters)


def parse_merge_range(ref: str) -> MergeRange | None:
    """Parse ``"A1:C3"`` into ``MergeRange(0, 0, 2, 2)``.

    Returns ``None`` for anything that is not a two-corner range.
    """
    parts = ref.split(":")
    if len(parts) != 2:
        return None
    start = parse_cell_ref(parts[0])
    end = parse_cell_ref(parts[1])
    if start is None or end is None:
        return None
    return MergeRange(
        row1=min(start[0], end[0]),
        col1=min(start[1], end[1]),
        row2=max(start[0], end[0]),
        col2=max(start[1], end[1]),
    )


class Grid:
    """Row-major grid of string cells that grows on demand."""

    def __init__(self) -> None:
        self._rows: list[list[str]] = []
        self._finalized = False

    def __len__(self) -> int:
        return len(self._rows)

    def _check_open(self) -> None:
        if self._finalized:
            raise RuntimeError("Grid is finalized; no further writes allowed")

    def ensure_row(self, row: int) -> list[str]:
        """Grow the grid so that *row* exists and return it."""
        self._check_open()
        while len(self._rows) <= row:
            self._rows.append([])
        return self._rows[row]

    def set(self, row: int, col: int, value: str) -> None:
        cells = self.ensure_row(row)
        if len(cells) <= col:
            cells.extend([""] * (col + 1 - len(cells)))
        cells[col] = value

    def append_row(self, cells: Iterable[str]) -> None:
        self._check_open()
        self._rows.append(list(cells))

    def apply_merges(self, merges: list[MergeRange], row_limit: int) -> bool:
        """Flatten merged ranges: the origin keeps its value, covered cells are blanked.

        Skipped entirely when the grid has ``row_limit`` rows or more.
        Returns whether the merges were applied.
        """
        self._check_open()
        if not merges:
            return True
        if len(self._rows) >= row_limit:
            logger.info(
                "Skipping %d merged range(s): %d rows >= merge_row_limit %d",
                len(merges), len(self._rows), row_limit,
            )
            return False

        last_row = len(self._rows) - 1
        for m in merges:
            if m.row1 > last_row:
                continue
            for r in range(m.row1, min(m.row2, last_row) + 1):
                cells = self._rows[r]
                if len(cells) <= m.col2:
                    cells.extend([""] * (m.col2 + 1 - len(cells)))

            origin = self._rows[m.row1][m.col1]
            for r in range(m.row1, min(m.row2, last_row) + 1):
                cells = self._rows[r]
                for c in range(m.col1, m.col2 + 1):
                    if not (r == m.row1 and c == m.col1):
                        cells[c] = ""
            self._rows[m.row1][m.col1] = origin
        return True

    def finalize(self) -> list[list[str]]:
        """Pad every row to the widest row and freeze the grid.

        Must be called exactly once, after all writes and merges.
        """
        self._check_open()
        self._finalized = True
        width = max((len(r) for r in self._rows), default=0)
        for cells in self._rows:
            if len(cells) < width:
                cells.extend([""] * (width - len(cells)))
        return self._rows
