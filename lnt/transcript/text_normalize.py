"""Utilities to normalize raw transcript text and join segment text."""

from __future__ import annotations

import re
from typing import Iterable, List

from .segment_schema import TranscriptSegment

_BLANK_RUN_RE = re.compile(r"\n{3,}")
_SENTENCE_BREAK_RE = re.compile(r"(?<=[.!?])\s+")


def _normalize_line(line: str) -> str:
    return " ".join(line.strip().split())


def normalize_transcript_text(text: str) -> str:
    """
    Canonicalize raw transcript text.

    Line endings become ``\\n``, tabs and non-breaking spaces become spaces,
    whitespace runs inside each line collapse to one space, three or more
    newlines collapse to a single blank line, and the result is trimmed.
    Normalizing already-normalized text returns it unchanged.
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = text.replace("\t", " ").replace("\u00a0", " ")
    text = "\n".join(_normalize_line(line) for line in text.split("\n"))
    text = _BLANK_RUN_RE.sub("\n\n", text)
    return text.strip()


def normalize_inline_text(text: str) -> str:
    """Collapse any text, newlines included, to a single normalized line."""
    return " ".join(text.split())


def split_sentences(text: str) -> List[str]:
    """Split text after ``.``, ``!`` or ``?`` followed by whitespace."""
    return [p.strip() for p in _SENTENCE_BREAK_RE.split(text.strip()) if p.strip()]


def build_transcript_text(
    segments: Iterable[TranscriptSegment], include_interim: bool = False
) -> str:
    """Join segment text in list order, skipping interim segments by default."""
    return " ".join(
        seg.text for seg in segments if seg.text and (include_interim or seg.is_final)
    ).strip()
