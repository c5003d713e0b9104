"""
Delimited text parser for sheet-codec.

Exports from different locales use different field separators, and uploads
carry no metadata saying which. The delimiter is sniffed from the first
``csv_sample_size`` bytes (see ``detect.sniff_delimiter``) and the whole
buffer is then parsed once with pandas:

- every value is read as a string, no NA conversion,
- the first record is the header,
- records whose field count differs from the header are dropped, as are
  records the tokenizer cannot read (an unterminated quote, for example);
  the rest of the file still decodes.

The python engine is used because it reports a bad record to the caller and
carries on, where the C engine aborts the whole read. Short records come back
padded with missing values, which is how they are told apart from records
with genuinely empty fields.
"""

from __future__ import annotations

import io
import logging

import pandas as pd

from sheet_codec.detect import sniff_delimiter
from sheet_codec.exceptions import InvalidEncodingError, MalformedContainerError
from sheet_codec.parsers.base import BaseParser
from sheet_codec.table import Table

logger = logging.getLogger(__name__)


def _skip_long_record(fields: list[str]) -> None:
    logger.debug("Dropping record with %d fields: %r", len(fields), fields[:5])
    return None


class DelimitedParser(BaseParser):
    """Parser for csv-like text (``;``, ``,``, tab or ``|`` separated)."""

    format_name = "csv"

    def parse(self, data: bytes) -> Table:
        delimiter = sniff_delimiter(data[: self.config.csv_sample_size])
        logger.debug("Sniffed delimiter %r", delimiter)

        try:
            text = data.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise InvalidEncodingError(f"Delimited text is not valid UTF-8: {exc}") from exc

        try:
            df = pd.read_csv(
                io.StringIO(text),
                sep=delimiter,
                header=None,
                dtype=object,
                na_filter=False,
                engine="python",
                on_bad_lines=_skip_long_record,
            )
        except pd.errors.EmptyDataError:
            logger.info("Delimited input is empty")
            return Table()
        except pd.errors.ParserError as exc:
            raise MalformedContainerError(f"Unreadable delimited text: {exc}") from exc

        # padded cells of short records are the only missing values
        short = df.isna().any(axis=1)
        if short.any():
            logger.debug("Dropping %d record(s) with too few fields", int(short.sum()))
            df = df[~short]

        raw = [[str(v) for v in row] for row in df.itertuples(index=False, name=None)]
        table = Table.from_raw_rows(raw)

        logger.info(
            "Parsed delimited text: %d rows x %d columns (delimiter %r)",
            table.nrows, table.ncols, delimiter,
        )
        return table
