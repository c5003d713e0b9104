"""
Configuration model and YAML I/O for sheet-codec.

The codec is stateless; the only tunables are policy knobs that a host may
want to change per deployment:

- merge_row_limit: sheets with at least this many rows skip merged-cell
  flattening (flattening cost grows with the merged area).
- csv_sample_size: number of leading bytes inspected by the delimiter sniffer.
- sheet_name: name of the single sheet written by the encoders.

Why Pydantic + YAML:
- Pydantic gives us strict validation and clear error messages.
- YAML is human-editable and matches how the host's other settings are kept.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from sheet_codec.exceptions import ConfigValidationError

logger = logging.getLogger(__name__)

DEFAULT_MERGE_ROW_LIMIT = 10_000
DEFAULT_CSV_SAMPLE_SIZE = 1024


class CodecConfig(BaseModel):
    """Tunable policies for decoding and encoding."""

    merge_row_limit: int = Field(
        DEFAULT_MERGE_ROW_LIMIT,
        ge=0,
        description="Skip merged-cell flattening for sheets with at least this many rows",
    )
    csv_sample_size: int = Field(
        DEFAULT_CSV_SAMPLE_SIZE,
        gt=0,
        description="Bytes of delimited text inspected when sniffing the delimiter",
    )
    sheet_name: str = Field(
        "Sheet1",
        min_length=1,
        max_length=31,
        description="Sheet name used by the xlsx/ods encoders",
    )


def load_config(path: str | Path) -> CodecConfig:
    """Read codec policies from a YAML mapping; absent keys keep their defaults.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ConfigValidationError: If the file is empty, is not valid YAML, or
            does not hold a mapping at the top level.
        pydantic.ValidationError: If a value is out of range or mistyped.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigValidationError(f"Config file is not valid YAML: {path}: {exc}") from exc
    if raw is None:
        raise ConfigValidationError(f"Config file is empty: {path}")
    if not isinstance(raw, dict):
        raise ConfigValidationError(
            f"Config file must hold a mapping of policies, got {type(raw).__name__}: {path}"
        )
    config = CodecConfig.model_validate(raw)
    logger.info("Loaded codec config from %s: %s", path, config.model_dump())
    return config


def save_config(config: CodecConfig, path: str | Path) -> None:
    """Write *config* as the YAML mapping ``load_config`` reads."""
    Path(path).write_text(
        yaml.safe_dump(config.model_dump(), sort_keys=False), encoding="utf-8"
    )
