"""Parse imported transcript text (captions, timestamped notes, plain text)."""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Callable, List, NamedTuple, Sequence, Tuple

from lnt.schemas.config import ParserConfig
from lnt.transcript.segment_schema import TranscriptSegment, new_segment_id
from lnt.transcript.text_normalize import (
    normalize_inline_text,
    normalize_transcript_text,
    split_sentences,
)
from lnt.transcript.timestamps import TIMESTAMP_PATTERN, parse_timestamp_ms

logger = logging.getLogger(__name__)

# VTT cue settings may follow the end time ("00:01.000 --> 00:04.000 align:start").
_CUE_TIME_RE = re.compile(r"^(?P<start>.+?)\s*-->\s*(?P<end>\S+)(?:\s.*)?$")
# The stamp ends at "]", whitespace, ", " or "; ", a dash, or end of line, so
# "10:30pm" and caption "-->" lines are not inline timestamps.
_INLINE_RE = re.compile(
    rf"^\[?(?P<stamp>{TIMESTAMP_PATTERN})(?!\]?\s*-->)"
    r"(?:\]|\s|[,;]\s|[-\u2013\u2014]|$)"
    r"[\s,;\-\u2013\u2014]*(?P<rest>.*)$"
)
_PARAGRAPH_BREAK_RE = re.compile(r"\n\s*\n")


class TimedText(NamedTuple):
    """Timing and text found by a strategy, before ids are assigned."""

    start_ms: int
    end_ms: int
    text: str


ParseStrategy = Callable[[str, ParserConfig], List[TimedText]]


def parse_caption_blocks(text: str, config: ParserConfig) -> List[TimedText]:
    """Parse SRT/VTT-style cues; index lines and headers are ignored."""
    lines = text.split("\n")
    cues: List[TimedText] = []
    idx = 0

    while idx < len(lines):
        line = lines[idx].strip()
        if not line or line.isdigit():
            idx += 1
            continue

        match = _CUE_TIME_RE.match(line)
        if match is None:
            idx += 1
            continue

        start_ms = parse_timestamp_ms(match.group("start"))
        end_ms = parse_timestamp_ms(match.group("end"))
        if start_ms is None or end_ms is None:
            logger.debug("Skipping malformed cue time line: %r", line)
            idx += 1
            continue

        idx += 1
        body: List[str] = []
        while idx < len(lines) and lines[idx].strip():
            body.append(lines[idx])
            idx += 1

        cues.append(TimedText(start_ms, end_ms, normalize_inline_text(" ".join(body))))

    return cues


def parse_inline_timestamps(text: str, config: ParserConfig) -> List[TimedText]:
    """
    Parse notes where lines start with ``[HH:MM:SS]`` or ``MM:SS`` markers.

    Untimed lines continue the open segment and blank lines are soft breaks.
    Text before the first marker becomes a segment at 0 ms. Each segment ends
    where the next one starts; the last one has zero duration.
    """
    starts: List[Tuple[int, str]] = []
    preamble: List[str] = []
    current_start: int | None = None
    current_text: List[str] = []

    def flush() -> None:
        if current_start is None:
            return
        body = normalize_inline_text(" ".join(current_text))
        if body:
            starts.append((current_start, body))

    for raw_line in text.split("\n"):
        line = raw_line.strip()
        if not line:
            continue

        match = _INLINE_RE.match(line)
        start_ms = parse_timestamp_ms(match.group("stamp")) if match else None
        if start_ms is not None:
            flush()
            current_start = start_ms
            current_text = [match.group("rest")]
        elif current_start is None:
            preamble.append(line)
        else:
            current_text.append(line)

    if current_start is None:
        return []
    flush()

    preamble_text = normalize_inline_text(" ".join(preamble))
    if preamble_text:
        starts.insert(0, (0, preamble_text))

    spans: List[TimedText] = []
    for pos, (start_ms, body) in enumerate(starts):
        end_ms = starts[pos + 1][0] if pos + 1 < len(starts) else start_ms
        spans.append(TimedText(start_ms, end_ms, body))
    return spans


def parse_paragraphs(text: str, config: ParserConfig) -> List[TimedText]:
    """Fallback for untimed text: one segment per paragraph, long ones per sentence."""
    spans: List[TimedText] = []
    for paragraph in _PARAGRAPH_BREAK_RE.split(text):
        body = normalize_inline_text(paragraph)
        if not body:
            continue
        if len(body) > config.max_paragraph_chars:
            parts = split_sentences(body) or [body]
        else:
            parts = [body]
        spans.extend(TimedText(0, 0, part) for part in parts)
    return spans


PARSE_STRATEGIES: Sequence[Tuple[str, ParseStrategy]] = (
    ("caption", parse_caption_blocks),
    ("inline-timestamp", parse_inline_timestamps),
    ("paragraph", parse_paragraphs),
)


def parse_imported_transcript(
    text: str,
    asset_id: str,
    created_at: datetime,
    config: ParserConfig | None = None,
) -> List[TranscriptSegment]:
    """
    Turn imported transcript text into final segments.

    Args:
        text: Raw or already-normalized transcript text.
        asset_id: Id of the import that owns the segments.
        created_at: Creation time stamped on every segment.
        config: Optional parser settings; defaults apply when omitted.

    Returns:
        Segments from the first strategy (caption, inline timestamp,
        paragraph) that yields any segments; empty for empty input.
    """
    config = config or ParserConfig()
    normalized = normalize_transcript_text(text)
    if not normalized:
        return []

    for name, strategy in PARSE_STRATEGIES:
        spans = strategy(normalized, config)
        if not spans:
            continue
        logger.debug("Parsed %d segments with %s strategy", len(spans), name)
        return [
            TranscriptSegment(
                id=new_segment_id(config.segment_id_prefix),
                asset_id=asset_id,
                start_ms=span.start_ms,
                end_ms=span.end_ms,
                text=span.text,
                is_final=True,
                created_at=created_at,
            )
            for span in spans
        ]

    return []
