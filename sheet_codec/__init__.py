"""
sheet-codec: normalize csv, xlsx and ods files into one string table.

Public API surface:

- ``decode(fmt, data)`` -- parse the bytes of a csv/xlsx/ods file into a
  ``Table`` (header + rectangular string rows).
- ``decode_file(path)`` -- same, reading a file and taking the format from
  its extension.
- ``encode(fmt, columns, rows)`` -- write a table as xlsx or ods bytes.
- ``format_from_filename(name)`` -- map an uploaded file name to a format.

All failures are ``SheetCodecError`` subclasses (see ``exceptions.py``).
Calls share no state, so they are safe to run concurrently on worker
threads; the caller decides where the CPU-bound work runs.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from sheet_codec.config import CodecConfig, load_config
from sheet_codec.detect import format_from_filename, get_parser, normalize_format
from sheet_codec.exceptions import SheetCodecError
from sheet_codec.export import SUPPORTED_ENCODE_FORMATS, build_ods, build_xlsx
from sheet_codec.table import Table

__all__ = [
    "decode",
    "decode_file",
    "encode",
    "format_from_filename",
    "load_config",
    "CodecConfig",
    "SheetCodecError",
    "Table",
]

logger = logging.getLogger(__name__)


def decode(fmt: str, data: bytes, config: CodecConfig | None = None) -> Table:
    """Decode a csv, xlsx or ods file into a ``Table``.

    Args:
        fmt: ``"csv"``, ``"xlsx"`` or ``"ods"`` (case-insensitive, a leading
            dot is allowed).
        data: The complete file contents.
        config: Optional policy overrides; defaults apply when ``None``.

    Returns:
        The decoded table. Every row has ``len(table.columns)`` cells.

    Raises:
        UnsupportedFormatError: If *fmt* is not csv, xlsx or ods.
        MalformedContainerError: If an xlsx/ods buffer is not a zip archive.
        InvalidEncodingError: If text that must be UTF-8 is not.
        MissingPartError: If the worksheet / content part is absent.
        MalformedXmlError: If an XML part does not parse.
    """
    parser_cls = get_parser(fmt)
    logger.debug("decode() -- format=%s, %d bytes", normalize_format(fmt), len(data))
    return parser_cls(config).parse(data)


def decode_file(path: str | Path, config: CodecConfig | None = None) -> Table:
    """Read a file from disk and decode it, taking the format from its extension.

    Raises:
        FileNotFoundError: If *path* does not exist.
        SheetCodecError: As for ``decode()``.
    """
    path = Path(path)
    fmt = format_from_filename(path.name)
    return decode(fmt, path.read_bytes(), config)


def encode(
    fmt: str,
    columns: Sequence[str],
    rows: Sequence[Sequence[str]],
    config: CodecConfig | None = None,
) -> bytes:
    """Encode a table as xlsx or ods bytes.

    Unknown formats fall back to xlsx.

    Raises:
        EncodeError: If the writer fails; ``target_format`` names the format.
    """
    target = normalize_format(fmt)
    if target not in SUPPORTED_ENCODE_FORMATS:
        logger.warning("encode() -- unknown format %r, writing xlsx", fmt)
        target = "xlsx"
    if target == "ods":
        return build_ods(columns, rows, config)
    return build_xlsx(columns, rows, config)
