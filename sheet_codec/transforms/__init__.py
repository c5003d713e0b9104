"""
Transforms sub-package for sheet-codec.

Small, format-agnostic steps shared by the spreadsheet parsers:

- dates.py: Serial-date heuristic and ISO date formatting (``DD.MM.YYYY``).
- grid.py: Growable cell grid, merged-range parsing, merge flattening and
  the final rectangularization pass.

Each step is independently testable and knows nothing about zip archives
or XML.
"""
