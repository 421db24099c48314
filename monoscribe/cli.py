"""Command-line interface for monoscribe.

Provides commands for:
- transcribe: Convert a monophonic recording to a note list (and MIDI/MusicXML)
- info: Show audio file information
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Dict, Any

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

app = typer.Typer(
    name="monoscribe",
    help="Monophonic audio to note transcription (McLeod Pitch Method)",
    rich_markup_mode="markdown",
)
console = Console()

MIDI_SUFFIXES = {".mid", ".midi"}
MUSICXML_SUFFIXES = {".musicxml", ".xml"}


@dataclass
class StageTimings:
    """Track timing of processing stages."""

    stages: Dict[str, float] = field(default_factory=dict)
    _current_stage: Optional[str] = field(default=None, repr=False)
    _start_time: float = field(default=0.0, repr=False)

    def start(self, stage: str) -> None:
        """Start timing a stage."""
        self._current_stage = stage
        self._start_time = time.perf_counter()

    def stop(self) -> float:
        """Stop timing the current stage, return duration."""
        if self._current_stage is None:
            return 0.0
        duration = time.perf_counter() - self._start_time
        self.stages[self._current_stage] = duration
        self._current_stage = None
        return duration

    @property
    def total_time(self) -> float:
        """Get total time across all stages."""
        return sum(self.stages.values())

    def print_summary(self) -> None:
        """Print timing summary to console."""
        console.print("\n[bold]Timing Summary:[/bold]")
        for stage, duration in self.stages.items():
            console.print(f"  {stage}: {duration:.2f}s")
        console.print(f"  [bold]Total: {self.total_time:.2f}s[/bold]")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "stages": self.stages,
            "total_time": self.total_time,
        }


def _configure_logging(verbose: bool) -> None:
    """Route library log records through rich when verbose output is on."""
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@app.command()
def transcribe(
    input_file: Path = typer.Argument(..., help="Input audio file (mono or multi-channel)"),
    output: Optional[Path] = typer.Option(
        None, "-o", "--output", help="Export to .mid/.midi or .musicxml/.xml"
    ),
    window_size: Optional[int] = typer.Option(
        None, "-w", "--window-size", help="Analysis window in samples (default 1024)"
    ),
    hop_size: Optional[int] = typer.Option(
        None, "--hop-size", help="Samples between frames (default window/2)"
    ),
    clarity_threshold: Optional[float] = typer.Option(
        None, "-k", "--clarity-threshold", help="MPM peak-picking threshold (default 0.93)"
    ),
    tolerance: Optional[float] = typer.Option(
        None, "--tolerance", help="Pitch continuation tolerance in semitones (default 0.5)"
    ),
    min_frames: Optional[int] = typer.Option(
        None, "--min-frames", help="Minimum frames per note (default 3)"
    ),
    sensitivity: str = typer.Option(
        "medium", "--sensitivity", "-s", help="Detection sensitivity: low/medium/high"
    ),
    workers: int = typer.Option(
        1, "--workers", "-j", help="Threads for per-frame pitch estimation"
    ),
    downmix: str = typer.Option(
        "mean", "--downmix", help="Multi-channel downmix: mean or left"
    ),
    verbose: bool = typer.Option(
        False, "-v", "--verbose", help="Verbose output"
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Output results as JSON (for scripting)"
    ),
):
    """Transcribe a monophonic recording into a list of notes.

    **Examples:**

        monoscribe transcribe melody.wav

        monoscribe transcribe melody.wav -o melody.mid -v

        monoscribe transcribe melody.wav --sensitivity high --json
    """
    from .core import TranscriptionConfig, TranscriptionError
    from .input import AudioLoader
    from .transcription import TranscriptionPipeline

    _configure_logging(verbose and not json_output)

    if not input_file.exists():
        console.print(f"[red]Error: File not found: {input_file}[/red]")
        raise typer.Exit(1)

    if output is not None and output.suffix.lower() not in MIDI_SUFFIXES | MUSICXML_SUFFIXES:
        console.print(f"[red]Error: Unsupported output format: {output.suffix}[/red]")
        raise typer.Exit(1)

    overrides = {
        "window_size": window_size,
        "hop_size": hop_size,
        "clarity_threshold": clarity_threshold,
        "continuation_tolerance": tolerance,
        "min_candidate_frames": min_frames,
    }
    overrides = {key: value for key, value in overrides.items() if value is not None}

    try:
        config = TranscriptionConfig.from_sensitivity(
            sensitivity, n_workers=workers, **overrides
        )
        pipeline = TranscriptionPipeline(config)
    except TranscriptionError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    timings = StageTimings()

    try:
        if not json_output:
            console.print(f"[blue]Loading audio:[/blue] {input_file}")
        timings.start("load")
        loader = AudioLoader(downmix=downmix)
        audio, sr = loader.load(str(input_file))
        timings.stop()

        if verbose and not json_output:
            console.print(
                f"  Duration: {loader.get_duration(audio, sr):.2f}s, Sample rate: {sr}Hz"
            )
            console.print("[blue]Transcribing...[/blue]")

        timings.start("transcribe")
        result, stats = pipeline.transcribe_with_stats(audio, sr)
        timings.stop()
    except (ValueError, FileNotFoundError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    except Exception as e:
        # Decoder failures (corrupt or undecodable files) surface here
        console.print(f"[red]Error: Cannot read audio file {input_file}: {escape(repr(e))}[/red]")
        raise typer.Exit(1)

    if output is not None:
        timings.start("export")
        _export(result, output)
        timings.stop()
        if not json_output:
            console.print(f"[blue]Exported to:[/blue] {output}")

    if json_output:
        data = {
            "input": str(input_file),
            "config": config.to_dict(),
            **result.to_dict(),
        }
        if output is not None:
            data["output"] = str(output)
        if verbose:
            data["stats"] = stats.to_dict()
            data["timings"] = timings.to_dict()
        console.print_json(data=data)
        return

    console.print(f"  Detected {len(result)} notes")
    if result:
        console.print(result.to_text())

    if verbose:
        if result:
            _show_notes_table(result)
        timings.print_summary()


def _export(result, output: Path) -> None:
    """Write result to MIDI or MusicXML depending on the file suffix."""
    from .output import MIDIExporter, MusicXMLExporter

    if output.suffix.lower() in MIDI_SUFFIXES:
        MIDIExporter().export(result, str(output))
    else:
        MusicXMLExporter().export(result, str(output))


@app.command()
def info(
    input_file: Path = typer.Argument(..., help="Input audio file"),
    window_size: int = typer.Option(
        1024, "-w", "--window-size", help="Analysis window in samples"
    ),
):
    """Show information about an audio file."""
    import soundfile as sf
    from .analysis import frame_count

    if not input_file.exists():
        console.print(f"[red]Error: File not found: {input_file}[/red]")
        raise typer.Exit(1)

    try:
        file_info = sf.info(str(input_file))
    except RuntimeError as e:
        console.print(f"[red]Error: Cannot read audio file: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    hop_size = max(1, window_size // 2)
    lowest = file_info.samplerate / (window_size // 2) if window_size >= 2 else 0.0

    console.print(f"\n[bold]Audio Info:[/bold] {input_file.name}")
    console.print(f"  Duration: {file_info.duration:.2f} seconds")
    console.print(f"  Sample rate: {file_info.samplerate} Hz")
    console.print(f"  Channels: {file_info.channels}")
    console.print(f"  Samples: {file_info.frames:,}")
    console.print(f"  Format: {file_info.format} ({file_info.subtype})")
    console.print(
        f"  Analysis frames: {frame_count(file_info.frames, hop_size):,} "
        f"(window {window_size}, hop {hop_size})"
    )
    console.print(f"  Lowest detectable pitch: {lowest:.1f} Hz")


def _show_notes_table(notes):
    """Display notes in a table."""
    table = Table(title="Detected Notes")
    table.add_column("Note", style="cyan")
    table.add_column("Onset (s)", style="green")
    table.add_column("Duration (s)", style="yellow")
    table.add_column("Frequency (Hz)", style="blue")
    table.add_column("Clarity", style="magenta")

    for note in notes:
        table.add_row(
            note.pitch_name,
            f"{note.onset:.3f}",
            f"{note.duration:.3f}",
            f"{note.frequency:.2f}",
            f"{note.clarity:.2f}",
        )

    console.print(table)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
