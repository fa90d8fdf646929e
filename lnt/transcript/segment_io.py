"""Read and write segment lists and transcript assets as JSON."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, List

from lnt.schemas.asset import TranscriptAsset
from lnt.transcript.segment_schema import TranscriptSegment


def load_segments(segments_path: Path) -> List[TranscriptSegment]:
    """Load segments from a JSON list or from a transcript asset JSON object."""
    if not segments_path.exists():
        raise FileNotFoundError(f"Segments file not found: {segments_path}")
    data = json.loads(segments_path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        return TranscriptAsset.model_validate(data).segments
    if not isinstance(data, list):
        raise ValueError("Segments JSON must be a list or a transcript asset object.")
    return [TranscriptSegment.model_validate(item) for item in data]


def write_segments(segments: Iterable[TranscriptSegment], output_path: Path) -> None:
    """Write a segment list to JSON."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    data = [seg.model_dump(mode="json") for seg in segments]
    output_path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")


def write_asset(asset: TranscriptAsset, output_path: Path) -> None:
    """Write a transcript asset to JSON."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        json.dumps(asset.model_dump(mode="json"), ensure_ascii=False, indent=2),
        encoding="utf-8",
    )
