from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from lnt.transcript.segment_schema import TranscriptSegment
from lnt.transcript.text_normalize import build_transcript_text


class TranscriptAsset(BaseModel):
    """One recording or import together with its canonical segment list."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1, description="Asset id referenced by its segments.")
    source_type: Literal["live", "import"] = Field(
        "import", description="Live capture or imported transcript."
    )
    language: str = Field("en-US", description="Language tag of the transcript.")
    created_at: datetime = Field(
        default_factory=datetime.now, description="Creation time of the asset."
    )
    segments: list[TranscriptSegment] = Field(default_factory=list)
    transcript_text: str = Field(
        "", description="Final segment text joined in order, for downstream generation."
    )

    @classmethod
    def from_segments(
        cls,
        asset_id: str,
        segments: list[TranscriptSegment],
        source_type: Literal["live", "import"] = "import",
        language: str = "en-US",
        created_at: datetime | None = None,
    ) -> "TranscriptAsset":
        """Build an asset and derive its transcript text from final segments."""
        return cls(
            id=asset_id,
            source_type=source_type,
            language=language,
            created_at=created_at or datetime.now(),
            segments=segments,
            transcript_text=build_transcript_text(segments),
        )
