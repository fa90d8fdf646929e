"""Tests for the live segment merge operations."""

import pytest

from tests.helpers import make_segment
from lnt.live.segment_merge import (
    finalize_segment,
    merge_final_segments,
    upsert_interim_segment,
)


def _non_final(segments):
    return [s for s in segments if not s.is_final]


class TestUpsertInterim:
    """Tests for upsert_interim_segment."""

    def test_appends_interim(self) -> None:
        """A new interim is appended after the finals."""
        base = make_segment(id="segment-final-1")
        interim = make_segment(id="segment-interim-1", start_ms=1000, text="interim", is_final=False)

        result = upsert_interim_segment([base], interim)

        assert [s.id for s in result] == ["segment-final-1", "segment-interim-1"]

    def test_revises_same_utterance_in_place(self) -> None:
        """A revision of the same utterance keeps its list position."""
        first = make_segment(id="i1", utterance_id="u1", text="hel", is_final=False)
        later_final = make_segment(id="f2", start_ms=5000, text="after")
        revised = make_segment(id="i1-v2", utterance_id="u1", text="hello", is_final=False)

        result = upsert_interim_segment([first, later_final], revised)

        assert [s.id for s in result] == ["i1-v2", "f2"]
        assert result[0].text == "hello"

    def test_revises_same_id_in_place(self) -> None:
        """Without utterance ids the segment id identifies the interim."""
        first = make_segment(id="i1", text="hel", is_final=False)
        revised = make_segment(id="i1", text="hello", is_final=False)

        result = upsert_interim_segment([first], revised)

        assert len(result) == 1
        assert result[0].text == "hello"

    def test_unrelated_interim_replaces_orphan(self) -> None:
        """An orphaned interim is discarded when a new utterance starts."""
        final = make_segment(id="f1")
        orphan = make_segment(id="i1", utterance_id="u1", is_final=False)
        fresh = make_segment(id="i2", utterance_id="u2", is_final=False)

        result = upsert_interim_segment([final, orphan], fresh)

        assert [s.id for s in result] == ["f1", "i2"]
        assert len(_non_final(result)) == 1

    def test_late_interim_for_finalized_utterance_is_ignored(self) -> None:
        """Once an utterance is final it never becomes interim again."""
        final = make_segment(id="f1", utterance_id="u1", text="done")
        late = make_segment(id="i1", utterance_id="u1", text="do", is_final=False)

        result = upsert_interim_segment([final], late)

        assert result == [final]

    def test_rejects_final_segment(self) -> None:
        """Passing a final segment is a contract violation."""
        with pytest.raises(ValueError):
            upsert_interim_segment([], make_segment())

    def test_input_list_untouched(self) -> None:
        """The caller's list is not modified."""
        segments = [make_segment(id="f1")]

        upsert_interim_segment(segments, make_segment(id="i1", is_final=False))

        assert [s.id for s in segments] == ["f1"]

    def test_at_most_one_interim_over_sequence(self) -> None:
        """A stream of mixed interim updates never leaves two interims."""
        segments = [make_segment(id="f1")]
        updates = [
            make_segment(id="a", utterance_id="u1", is_final=False),
            make_segment(id="b", utterance_id="u1", is_final=False),
            make_segment(id="c", is_final=False),
            make_segment(id="c", text="c2", is_final=False),
            make_segment(id="d", utterance_id="u3", is_final=False),
        ]

        for interim in updates:
            segments = upsert_interim_segment(segments, interim)
            assert len(_non_final(segments)) <= 1

        assert [s.id for s in segments] == ["f1", "d"]


class TestFinalizeSegment:
    """Tests for finalize_segment."""

    def test_replaces_interim_by_id(self) -> None:
        """The interim named by id is replaced by the final."""
        base = make_segment(id="segment-final-1")
        interim = make_segment(id="segment-interim-1", start_ms=1000, is_final=False)
        final = make_segment(id="segment-final-2", start_ms=1000, text="final")

        result = finalize_segment([base, interim], final, interim_id=interim.id)

        assert [s.id for s in result] == ["segment-final-1", "segment-final-2"]
        assert not _non_final(result)

    def test_replaces_interim_by_utterance(self) -> None:
        """A matching utterance id removes the interim without an explicit id."""
        base = make_segment(id="f1")
        interim = make_segment(id="i1", utterance_id="u1", is_final=False)
        final = make_segment(id="f2", utterance_id="u1", text="utterance final")

        result = finalize_segment([base, interim], final)

        assert [s.id for s in result] == ["f1", "f2"]
        assert sum(1 for s in result if s.id == "f2") == 1

    def test_drops_stray_interims(self) -> None:
        """No interim survives finalization."""
        interim = make_segment(id="i1", utterance_id="u1", is_final=False)
        final = make_segment(id="f9", utterance_id="u9")

        result = finalize_segment([interim], final)

        assert result == [final]

    def test_keeps_append_order(self) -> None:
        """Finals are appended, not sorted."""
        early = make_segment(id="f-late", start_ms=9000)
        final = make_segment(id="f-early", start_ms=1000)

        result = finalize_segment([early], final)

        assert [s.id for s in result] == ["f-late", "f-early"]

    def test_rejects_interim(self) -> None:
        """Passing an interim segment is a contract violation."""
        with pytest.raises(ValueError):
            finalize_segment([], make_segment(is_final=False))


class TestMergeFinalSegments:
    """Tests for merge_final_segments."""

    def test_merges_without_duplicates(self) -> None:
        """Matches by utterance id are replaced and new segments appended."""
        existing = [
            make_segment(id="f1", start_ms=0, text="hello"),
            make_segment(id="f2", start_ms=1000, end_ms=1500, text="final"),
            make_segment(id="f3", start_ms=1000, end_ms=1500, utterance_id="u1", text="utterance final"),
        ]
        incoming = [
            make_segment(id="f3-dup", start_ms=1000, end_ms=1500, utterance_id="u1", text="utterance final"),
            make_segment(id="f4", start_ms=2000, end_ms=2500, text="merged"),
        ]

        merged = merge_final_segments(existing, incoming)

        assert [s.id for s in merged] == ["f1", "f2", "f3-dup", "f4"]

    def test_matches_by_text_and_timing(self) -> None:
        """Segments without utterance ids match on text and timing."""
        existing = [make_segment(id="old", start_ms=100, end_ms=200, text="same")]
        incoming = [make_segment(id="new", start_ms=100, end_ms=200, text="same")]

        assert [s.id for s in merge_final_segments(existing, incoming)] == ["new"]

    def test_drops_interim_entries(self) -> None:
        """Interim segments are never persisted."""
        existing = [make_segment(id="f1"), make_segment(id="i1", is_final=False)]
        incoming = [make_segment(id="i2", start_ms=50, is_final=False)]

        merged = merge_final_segments(existing, incoming)

        assert [s.id for s in merged] == ["f1"]

    def test_sorted_by_start_and_stable(self) -> None:
        """Out-of-order finals come back in chronological order."""
        existing = [make_segment(id="b", start_ms=3000, text="b")]
        incoming = [
            make_segment(id="d", start_ms=5000, text="d"),
            make_segment(id="a", start_ms=1000, text="a"),
            make_segment(id="c1", start_ms=3000, text="c1"),
            make_segment(id="c2", start_ms=3000, text="c2"),
        ]

        merged = merge_final_segments(existing, incoming)

        assert [s.id for s in merged] == ["a", "b", "c1", "c2", "d"]

    def test_idempotent(self) -> None:
        """Applying the same batch twice yields the same list."""
        existing = [
            make_segment(id="x", start_ms=4000, text="x"),
            make_segment(id="y", start_ms=10, text="y", is_final=False),
        ]
        incoming = [
            make_segment(id="p", start_ms=2000, utterance_id="u1", text="p"),
            make_segment(id="q", start_ms=500, text="q"),
            make_segment(id="x2", start_ms=4000, text="x"),
        ]

        once = merge_final_segments(existing, incoming)
        twice = merge_final_segments(once, incoming)

        assert twice == once
        assert [s.start_ms for s in once] == sorted(s.start_ms for s in once)
