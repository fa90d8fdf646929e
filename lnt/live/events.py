"""Streaming speech-recognition events and folding them into segment lists."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from lnt.live.segment_merge import finalize_segment, upsert_interim_segment
from lnt.transcript.segment_schema import TranscriptSegment, new_segment_id
from lnt.transcript.text_normalize import normalize_inline_text


class RecognizedWord(BaseModel):
    """One word of a recognition result."""

    model_config = ConfigDict(extra="forbid")

    word: str
    start_ms: int | None = Field(None, ge=0)
    end_ms: int | None = Field(None, ge=0)
    confidence: float | None = Field(None, ge=0.0, le=1.0)
    speaker: str | None = None


class RecognitionEvent(BaseModel):
    """Interim or final result emitted by the streaming recognizer."""

    model_config = ConfigDict(extra="forbid")

    text: str = ""
    is_final: bool = False
    utterance_id: str | None = None
    start_ms: int | None = Field(None, ge=0)
    end_ms: int | None = Field(None, ge=0)
    confidence: float | None = Field(None, ge=0.0, le=1.0)
    words: list[RecognizedWord] = Field(default_factory=list)


def _event_timing(event: RecognitionEvent) -> tuple[int, int]:
    word_starts = [w.start_ms for w in event.words if w.start_ms is not None]
    word_ends = [w.end_ms for w in event.words if w.end_ms is not None]
    start_ms = event.start_ms
    if start_ms is None:
        start_ms = min(word_starts) if word_starts else 0
    end_ms = event.end_ms
    if end_ms is None:
        end_ms = max(word_ends) if word_ends else start_ms
    return start_ms, end_ms


def _event_speaker(event: RecognitionEvent) -> str | None:
    return next((w.speaker for w in event.words if w.speaker), None)


def _in_flight_interim_id(segments: Sequence[TranscriptSegment]) -> str | None:
    return next((seg.id for seg in segments if not seg.is_final), None)


def apply_recognition_event(
    segments: Sequence[TranscriptSegment],
    event: RecognitionEvent,
    asset_id: str,
    created_at: datetime,
) -> List[TranscriptSegment]:
    """
    Fold one recognizer event into the segment list and return the new list.

    Interim events revise the in-flight interim segment; final events replace
    it. A final event without an utterance id replaces whichever interim is
    currently in flight.
    """
    start_ms, end_ms = _event_timing(event)
    segment = TranscriptSegment(
        id=new_segment_id(),
        asset_id=asset_id,
        start_ms=start_ms,
        end_ms=end_ms,
        text=normalize_inline_text(event.text),
        is_final=event.is_final,
        created_at=created_at,
        utterance_id=event.utterance_id,
        speaker=_event_speaker(event),
        confidence=event.confidence,
    )

    if not event.is_final:
        return upsert_interim_segment(segments, segment)

    interim_id = None if event.utterance_id else _in_flight_interim_id(segments)
    return finalize_segment(segments, segment, interim_id=interim_id)


def replay_recognition_events(
    events: Iterable[RecognitionEvent],
    asset_id: str,
    created_at: datetime,
    segments: Optional[Sequence[TranscriptSegment]] = None,
) -> List[TranscriptSegment]:
    """Apply events in delivery order, starting from ``segments`` or an empty list."""
    current: List[TranscriptSegment] = list(segments or [])
    for event in events:
        current = apply_recognition_event(current, event, asset_id, created_at)
    return current


def load_recognition_events(events_path: Path) -> List[RecognitionEvent]:
    """Load a JSON Lines file with one recognition event per line."""
    if not events_path.exists():
        raise FileNotFoundError(f"Events file not found: {events_path}")
    events: List[RecognitionEvent] = []
    for line in events_path.read_text(encoding="utf-8").splitlines():
        if not line.strip():
            continue
        events.append(RecognitionEvent.model_validate(json.loads(line)))
    return events
