"""
Demo script: decode spreadsheet files via the public API.

Usage:
    python scripts/run_convert.py FILE [FILE ...]             # decode, log shapes
    python scripts/run_convert.py FILE --to ods               # also re-encode
    python scripts/run_convert.py FILE --config codec.yaml    # custom policies
    python scripts/run_convert.py FILE --save-config codec.yaml  # write a policy template

Each input is decoded by extension (csv / xlsx / ods). With ``--to``, the
decoded table is written next to the input as ``<stem>.converted.<fmt>``.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger("run_convert")


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main() -> None:
    import sheet_codec
    from sheet_codec.config import save_config

    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("files", nargs="+", help="csv / xlsx / ods files")
    parser.add_argument("--to", choices=["xlsx", "ods"], help="re-encode format")
    parser.add_argument("--config", help="YAML file with codec policies")
    parser.add_argument("--save-config", help="write the effective policies to this YAML file")
    args = parser.parse_args()

    config = sheet_codec.load_config(args.config) if args.config else sheet_codec.CodecConfig()
    if args.save_config:
        save_config(config, args.save_config)
        log.info("Saved codec config to %s", args.save_config)

    for input_path in args.files:
        path = Path(input_path)
        if not path.exists():
            log.warning("SKIP  %s  (file not found)", path)
            continue

        log.info("=" * 70)
        log.info("Processing: %s", path)
        try:
            table = sheet_codec.decode_file(path, config)
        except sheet_codec.SheetCodecError as exc:
            log.error("FAILED  %s  %s", path, exc)
            continue
        log.info("  %s rows x %d cols", f"{table.nrows:,}", table.ncols)
        log.info("  columns: %s", list(table.columns[:10]))

        if args.to:
            out = path.with_name(f"{path.stem}.converted.{args.to}")
            out.write_bytes(sheet_codec.encode(args.to, table.columns, table.rows, config))
            log.info("  wrote %s", out)

    log.info("All files processed.")


if __name__ == "__main__":
    main()
