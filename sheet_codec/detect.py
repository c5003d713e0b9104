"""
Format detection for sheet-codec.

Two small decisions are made before any parsing happens:

1. Which container format a file is in. The boundary declares it, usually
   from the uploaded file name: ``format_from_filename`` does a
   case-insensitive suffix match and ``get_parser`` maps the format name to
   its parser class.
2. For delimited text, which field separator it uses. ``sniff_delimiter``
   counts each candidate in a leading sample and picks the most frequent,
   preferring the earlier candidate on ties and ``;`` when none occurs.

Design: Strategy Pattern
- get_parser() returns the parser class for a format name.
- New formats are added by registering a parser in ``_get_parser_map``.
"""

from __future__ import annotations

import logging
from pathlib import PurePath

from sheet_codec.exceptions import UnsupportedFormatError
from sheet_codec.parsers.base import BaseParser

logger = logging.getLogger(__name__)

# Order matters: earlier candidates win ties.
DELIMITER_CANDIDATES: tuple[str, ...] = (";", ",", "\t", "|")
DEFAULT_DELIMITER = ";"

SUPPORTED_FORMATS: tuple[str, ...] = ("csv", "xlsx", "ods")

_PARSER_MAP: dict[str, type[BaseParser]] = {}


def _get_parser_map() -> dict[str, type[BaseParser]]:
    """Lazily build the parser map to avoid circular imports."""
    if not _PARSER_MAP:
        from sheet_codec.parsers.delimited import DelimitedParser
        from sheet_codec.parsers.ods import OdsParser
        from sheet_codec.parsers.xlsx import XlsxParser

        _PARSER_MAP["csv"] = DelimitedParser
        _PARSER_MAP["xlsx"] = XlsxParser
        _PARSER_MAP["ods"] = OdsParser
    return _PARSER_MAP


def sniff_delimiter(sample: bytes) -> str:
    """Pick the most frequent delimiter candidate in *sample*.

    Ties go to the candidate listed first in ``DELIMITER_CANDIDATES``;
    a sample containing none of them gives ``DEFAULT_DELIMITER``.
    """
    counts = [(d, sample.count(d.encode("ascii"))) for d in DELIMITER_CANDIDATES]
    # sorted() is stable, so equal counts keep declaration order
    best, best_count = sorted(counts, key=lambda item: item[1], reverse=True)[0]
    if best_count == 0:
        return DEFAULT_DELIMITER
    return best


def normalize_format(fmt: str) -> str:
    """Lower-case a format name and drop a leading dot (``".XLSX"`` -> ``"xlsx"``)."""
    return fmt.strip().lower().lstrip(".")


def format_from_filename(filename: str) -> str:
    """Derive the format from a file name's extension, case-insensitively.

    Raises:
        UnsupportedFormatError: If the extension is not csv, xlsx or ods.
    """
    suffix = normalize_format(PurePath(filename).suffix)
    if suffix not in SUPPORTED_FORMATS:
        raise UnsupportedFormatError(
            f"Unsupported file extension for {filename!r}. "
            f"Supported formats: {list(SUPPORTED_FORMATS)}"
        )
    return suffix


def get_parser(fmt: str) -> type[BaseParser]:
    """Return the parser class for a format name.

    Raises:
        UnsupportedFormatError: If *fmt* is not a supported format.
    """
    parser_cls = _get_parser_map().get(normalize_format(fmt))
    if parser_cls is None:
        raise UnsupportedFormatError(
            f"Unsupported format: {fmt!r}. Supported formats: {list(SUPPORTED_FORMATS)}"
        )
    return parser_cls
