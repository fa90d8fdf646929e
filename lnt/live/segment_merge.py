"""Reconcile streaming interim/final recognition results into one segment list.

Every function takes the current list and returns a new one; callers own the
list and must serialize calls against it.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

from lnt.transcript.segment_schema import TranscriptSegment

logger = logging.getLogger(__name__)


def _same_utterance(a: TranscriptSegment, b: TranscriptSegment) -> bool:
    return a.utterance_id is not None and a.utterance_id == b.utterance_id


def _same_content(a: TranscriptSegment, b: TranscriptSegment) -> bool:
    return (a.text, a.start_ms, a.end_ms) == (b.text, b.start_ms, b.end_ms)


def upsert_interim_segment(
    segments: Sequence[TranscriptSegment], interim: TranscriptSegment
) -> List[TranscriptSegment]:
    """
    Insert or revise the in-flight interim segment.

    An entry with the same utterance id (or segment id) is replaced in place.
    Otherwise any older interim is discarded and the new one is appended, so
    the list never holds more than one interim segment. An interim for an
    utterance that is already final is ignored.
    """
    if interim.is_final:
        raise ValueError("upsert_interim_segment expects a non-final segment.")

    for idx, seg in enumerate(segments):
        if not (_same_utterance(seg, interim) or seg.id == interim.id):
            continue
        if seg.is_final:
            logger.debug(
                "Ignoring late interim for finalized segment %s", seg.utterance_id or seg.id
            )
            return list(segments)
        updated = list(segments)
        updated[idx] = interim
        return updated

    return [seg for seg in segments if seg.is_final] + [interim]


def finalize_segment(
    segments: Sequence[TranscriptSegment],
    final: TranscriptSegment,
    interim_id: Optional[str] = None,
) -> List[TranscriptSegment]:
    """
    Replace the interim for an utterance with its final result.

    Drops entries sharing the final's utterance id and the entry whose id is
    ``interim_id``, keeps the other final entries, and appends ``final``.
    Order is append order, not chronological.
    """
    if not final.is_final:
        raise ValueError("finalize_segment expects a final segment.")

    kept = [
        seg
        for seg in segments
        if seg.is_final
        and not _same_utterance(seg, final)
        and not (interim_id is not None and seg.id == interim_id)
    ]
    return kept + [final]


def merge_final_segments(
    existing: Iterable[TranscriptSegment], incoming: Iterable[TranscriptSegment]
) -> List[TranscriptSegment]:
    """
    Merge a batch of final segments into the persisted list.

    Interim entries are dropped. Each incoming segment replaces the entry with
    the same utterance id, or the same (text, start_ms, end_ms), and is
    appended otherwise. The result is stably sorted by ``start_ms``, so
    applying the same batch twice gives the same list.
    """
    merged: List[TranscriptSegment] = [seg for seg in existing if seg.is_final]

    for seg in incoming:
        if not seg.is_final:
            logger.debug("Skipping interim segment %s in final merge", seg.id)
            continue
        match_idx = next(
            (
                idx
                for idx, item in enumerate(merged)
                if _same_utterance(item, seg) or _same_content(item, seg)
            ),
            None,
        )
        if match_idx is None:
            merged.append(seg)
        else:
            merged[match_idx] = seg

    return sorted(merged, key=lambda s: s.start_ms)
