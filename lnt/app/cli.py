from __future__ import annotations

import logging
import time
from datetime import datetime
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from lnt.live.events import load_recognition_events, replay_recognition_events
from lnt.live.segment_merge import merge_final_segments
from lnt.schemas.asset import TranscriptAsset
from lnt.schemas.config import load_parser_config
from lnt.transcript.import_parser import parse_imported_transcript
from lnt.transcript.segment_io import load_segments, write_asset, write_segments
from lnt.transcript.segment_schema import TranscriptSegment, new_segment_id
from lnt.transcript.text_normalize import build_transcript_text
from lnt.transcript.timestamps import format_timestamp_ms

app = typer.Typer(help="Live Note Taker transcript ingestion CLI")
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Configure logging for every command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _print_preview(segments: list[TranscriptSegment], limit: int = 5) -> None:
    console.print(f"Preview (first {limit} segments):")
    for seg in segments[:limit]:
        stamp = format_timestamp_ms(seg.start_ms)
        console.print(f"[dim]\\[{stamp}][/] {escape(seg.text)}")
    if len(segments) > limit:
        console.print(f"... and {len(segments) - limit} more segments")


@app.command()
def info() -> None:
    """Print a quick reminder of what the tool is for."""
    console.print(
        "[bold]LNT[/] turns lecture transcripts into one ordered segment list.\n"
        "- Import: SRT/VTT captions, \\[HH:MM:SS] timestamped notes, or plain text.\n"
        "- Live: replay interim/final recognizer events into final segments.\n"
        "Pipeline: normalize → parse (caption → inline timestamp → paragraph) → merge."
    )


@app.command(name="import-transcript")
def import_transcript_cmd(
    transcript_file: Path = typer.Argument(
        ..., exists=True, help="Caption file, timestamped notes, or plain text"
    ),
    asset_id: str | None = typer.Option(
        None, help="Asset id for the import; defaults to a generated id."
    ),
    output_json: Path | None = typer.Option(
        None, help="Optional output path. Defaults to <file>.segments.json"
    ),
    config: Path | None = typer.Option(None, help="Optional parser config JSON."),
) -> None:
    """Parse an imported transcript and write it as a transcript asset JSON."""
    output_path = output_json or transcript_file.with_suffix(".segments.json")

    try:
        parser_config = load_parser_config(config)
        raw_text = transcript_file.read_text(encoding="utf-8")
    except Exception as exc:  # noqa: BLE001
        console.print(f"[red]Failed to load input:[/] {exc}")
        raise typer.Exit(code=1)

    asset_name = asset_id or new_segment_id("asset")
    segments = parse_imported_transcript(
        raw_text, asset_id=asset_name, created_at=datetime.now(), config=parser_config
    )
    asset = TranscriptAsset.from_segments(
        asset_name, segments, source_type="import", language=parser_config.language
    )

    try:
        write_asset(asset, output_path)
    except Exception as exc:  # noqa: BLE001
        console.print(f"[red]Failed to write transcript:[/] {exc}")
        raise typer.Exit(code=1)

    console.print(f"[green]Asset:[/] {asset.id}")
    console.print(f"Segments: {len(segments)}")
    console.print(f"Transcript written to: {output_path}")
    _print_preview(segments)


@app.command(name="replay-live")
def replay_live_cmd(
    events_file: Path = typer.Argument(
        ..., exists=True, help="JSON Lines file of recognizer events"
    ),
    asset_id: str | None = typer.Option(
        None, help="Asset id for the session; defaults to a timestamp-based id."
    ),
    existing_json: Path | None = typer.Option(
        None, help="Optional segments already persisted for this asset."
    ),
    output_json: Path | None = typer.Option(
        None, help="Optional output path. Defaults to <file>.segments.json"
    ),
) -> None:
    """Replay interim/final events and persist the resulting final segments."""
    asset_name = asset_id or time.strftime("live-%Y%m%d-%H%M%S")
    output_path = output_json or events_file.with_suffix(".segments.json")

    try:
        events = load_recognition_events(events_file)
        existing = load_segments(existing_json) if existing_json else []
    except Exception as exc:  # noqa: BLE001
        console.print(f"[red]Failed to load events:[/] {exc}")
        raise typer.Exit(code=1)

    live = replay_recognition_events(events, asset_id=asset_name, created_at=datetime.now())
    persisted = merge_final_segments(existing, live)
    asset = TranscriptAsset.from_segments(asset_name, persisted, source_type="live")

    try:
        write_asset(asset, output_path)
    except Exception as exc:  # noqa: BLE001
        console.print(f"[red]Failed to write transcript:[/] {exc}")
        raise typer.Exit(code=1)

    dropped = sum(1 for seg in live if not seg.is_final)
    console.print(f"[green]Asset:[/] {asset.id}")
    console.print(f"Events: {len(events)}")
    console.print(f"Final segments: {len(persisted)}")
    if dropped:
        console.print(f"[yellow]Discarded unfinished interim segments:[/] {dropped}")
    console.print(f"Transcript written to: {output_path}")


@app.command(name="merge-segments")
def merge_segments_cmd(
    existing_json: Path = typer.Argument(..., exists=True, help="Persisted segments"),
    incoming_json: Path = typer.Argument(..., exists=True, help="New final segments"),
    output_json: Path | None = typer.Option(
        None, help="Optional output path. Defaults to overwriting the existing file."
    ),
) -> None:
    """Merge a batch of final segments into a persisted segment list."""
    output_path = output_json or existing_json

    try:
        existing = load_segments(existing_json)
        incoming = load_segments(incoming_json)
    except Exception as exc:  # noqa: BLE001
        console.print(f"[red]Failed to load segments:[/] {exc}")
        raise typer.Exit(code=1)

    merged = merge_final_segments(existing, incoming)

    try:
        write_segments(merged, output_path)
    except Exception as exc:  # noqa: BLE001
        console.print(f"[red]Failed to write segments:[/] {exc}")
        raise typer.Exit(code=1)

    console.print(f"Existing: {len(existing)}  Incoming: {len(incoming)}")
    console.print(f"Merged segments: {len(merged)}")
    console.print(f"Segments written to: {output_path}")


@app.command(name="transcript-text")
def transcript_text_cmd(
    segments_json: Path = typer.Argument(..., exists=True, help="Segments or asset JSON"),
    include_interim: bool = typer.Option(
        False, help="Include interim segments in the joined text."
    ),
) -> None:
    """Print the joined transcript text used for downstream generation."""
    try:
        segments = load_segments(segments_json)
    except Exception as exc:  # noqa: BLE001
        console.print(f"[red]Failed to load segments:[/] {exc}")
        raise typer.Exit(code=1)

    typer.echo(build_transcript_text(segments, include_interim=include_interim))


if __name__ == "__main__":
    app()
