"""
Parsers sub-package for sheet-codec.

Contains format-specific parsers that turn an in-memory file into the
canonical ``Table``.

Design: Strategy Pattern
- base.py defines the BaseParser ABC (protocol).
- delimited.py implements DelimitedParser for csv/tsv-style text.
- xlsx.py implements XlsxParser for Office Open XML workbooks.
- ods.py implements OdsParser for OpenDocument spreadsheets.

Parsers are independent of each other. detect.py maps a format name to the
parser class at runtime.
"""
