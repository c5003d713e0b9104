"""
Date formatting transform for sheet-codec.

Spreadsheet tools store dates as a day count (a "serial date") from the
1900 epoch. A bare number carries no type signal, so a number is *guessed*
to be a date when it falls inside a window:

    SERIAL_DATE_MIN < n < SERIAL_DATE_MAX

and is then rendered as ``DD.MM.YYYY``. The window misclassifies ordinary
numbers in range (an amount of 100 becomes a 1900 date) and never recognizes
dates outside it. Both are kept for compatibility with existing exports.

The day offset is ``n - 2`` from 1900-01-01: one day because serial 1 is
1900-01-01 itself, one for the phantom 29 Feb 1900 the epoch counts.
"""

from __future__ import annotations

import math
from datetime import date, datetime, timedelta

SERIAL_DATE_MIN = 59.0
SERIAL_DATE_MAX = 60000.0
SERIAL_EPOCH = date(1900, 1, 1)
SERIAL_EPOCH_OFFSET = 2

DATE_FORMAT = "%d.%m.%Y"


def try_format_as_date(text: str) -> str:
    """Render a serial-date number as ``DD.MM.YYYY``.

    Returns *text* unchanged if it is not a number, is outside the serial
    window, or does not produce a valid calendar date.

    >>> try_format_as_date("44200")
    '04.01.2021'
    >>> try_format_as_date("5")
    '5'
    """
    if "_" in text:
        return text
    try:
        n = float(text)
    except (TypeError, ValueError):
        return text
    if not math.isfinite(n) or not (SERIAL_DATE_MIN < n < SERIAL_DATE_MAX):
        return text
    try:
        result = SERIAL_EPOCH + timedelta(days=int(n) - SERIAL_EPOCH_OFFSET)
    except OverflowError:
        return text
    return result.strftime(DATE_FORMAT)


def format_iso_date(text: str) -> str:
    """Render an ISO date (``YYYY-MM-DD``, optional ``T`` time part) as ``DD.MM.YYYY``.

    Anything that does not parse is returned unchanged.
    """
    value = text.strip()
    day_part, sep, _time = value.partition("T")
    try:
        parsed = datetime.strptime(day_part, "%Y-%m-%d")
    except ValueError:
        return text
    if sep and not _time:
        return text
    return parsed.strftime(DATE_FORMAT)


def is_numeric(text: str) -> bool:
    """Whether *text* parses as a finite number."""
    if "_" in text:
        return False
    try:
        return math.isfinite(float(text))
    except ValueError:
        return False
