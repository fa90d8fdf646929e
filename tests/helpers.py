"""Segment builders shared by the test modules."""

from datetime import datetime, timezone

from lnt.transcript.segment_schema import TranscriptSegment

CREATED_AT = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_segment(**overrides) -> TranscriptSegment:
    """Build a final segment for asset-1, overriding any field."""
    data = {
        "id": "segment-1",
        "asset_id": "asset-1",
        "start_ms": 0,
        "end_ms": 1000,
        "text": "hello",
        "is_final": True,
        "created_at": CREATED_AT,
    }
    data.update(overrides)
    return TranscriptSegment(**data)
