from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class ParserConfig(BaseModel):
    """Tunables for transcript import and segment construction."""

    model_config = ConfigDict(extra="forbid")

    max_paragraph_chars: int = Field(
        400,
        ge=1,
        description="Plain-text paragraphs longer than this are split into sentences.",
    )
    segment_id_prefix: str = Field(
        "segment", min_length=1, description="Prefix for generated segment ids."
    )
    language: str = Field(
        "en-US", min_length=1, description="Language tag recorded on transcript assets."
    )


def load_parser_config(config_path: Path | None = None) -> ParserConfig:
    """Load a ParserConfig from JSON, or return defaults when no path is given."""
    if config_path is None:
        return ParserConfig()
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    data = json.loads(config_path.read_text(encoding="utf-8"))
    return ParserConfig.model_validate(data)
