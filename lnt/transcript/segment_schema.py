from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


def new_segment_id(prefix: str = "segment") -> str:
    """Return a fresh unique id such as ``segment-3f2a...``."""
    return f"{prefix}-{uuid.uuid4().hex}"


class TranscriptSegment(BaseModel):
    """Single transcript segment with millisecond timing.

    Segments are frozen: the merge operations replace entries, never edit them.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str = Field(..., min_length=1, description="Unique segment id.")
    asset_id: str = Field(
        ..., min_length=1, description="Recording or import that owns this segment."
    )
    start_ms: int = Field(0, ge=0, description="Start time in ms.")
    end_ms: int = Field(0, ge=0, description="End time in ms.")
    text: str = Field(
        "", pattern=r"^[^\r\n]*$", description="Normalized single-line text."
    )
    is_final: bool = Field(True, description="False while the recognizer may revise it.")
    created_at: datetime = Field(..., description="Creation time supplied by the caller.")
    utterance_id: str | None = Field(
        None, description="Correlates interim and final results of one utterance."
    )
    speaker: str | None = Field(None, description="Speaker label, if known.")
    confidence: float | None = Field(
        None, ge=0.0, le=1.0, description="Recognizer confidence, if known."
    )
