"""
Canonical table model for sheet-codec.

Every parser produces a ``Table`` and every encoder consumes one. A table is
a header (``columns``) plus data rows, all cells plain strings. The model is
frozen and rectangular: every row has exactly ``len(columns)`` cells, which
the constructor enforces so downstream consumers can index safely.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

import pandas as pd


@dataclass(frozen=True)
class Table:
    """Header + rows of string cells.

    Attributes:
        columns: Header cells, one per column.
        rows: Data rows; each row has ``len(columns)`` cells.
    """

    columns: tuple[str, ...] = ()
    rows: tuple[tuple[str, ...], ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "columns", tuple(self.columns))
        object.__setattr__(self, "rows", tuple(tuple(r) for r in self.rows))
        ncols = len(self.columns)
        for i, row in enumerate(self.rows):
            if len(row) != ncols:
                raise ValueError(
                    f"Row {i} has {len(row)} cells, expected {ncols}"
                )

    @property
    def ncols(self) -> int:
        return len(self.columns)

    @property
    def nrows(self) -> int:
        return len(self.rows)

    @classmethod
    def from_raw_rows(cls, raw: Sequence[Sequence[str]]) -> Table:
        """Split row 0 off as the header. Rows must already be rectangular."""
        if not raw:
            return cls()
        return cls(columns=tuple(raw[0]), rows=tuple(tuple(r) for r in raw[1:]))

    def to_dict(self) -> dict[str, list]:
        """JSON-ready ``{"columns": [...], "rows": [[...], ...]}``."""
        return {
            "columns": list(self.columns),
            "rows": [list(r) for r in self.rows],
        }

    def to_dataframe(self) -> pd.DataFrame:
        """Convert to a DataFrame of strings.

        Duplicate header cells are kept as-is, so column labels may repeat.
        """
        return pd.DataFrame(list(self.rows), columns=list(self.columns), dtype=str)

    @classmethod
    def from_dataframe(cls, df: pd.DataFrame) -> Table:
        """Build a table from a DataFrame; missing values become ``""``."""
        cells = df.astype(object).where(df.notna(), "")
        return cls(
            columns=tuple(str(c) for c in df.columns),
            rows=tuple(
                tuple(str(v) for v in row)
                for row in cells.itertuples(index=False, name=None)
            ),
        )
