"""Command-line interface for PitchPlease.

Provides commands for:
- analyze: Detect the chord timeline of an audio file
- chord: Identify a chord from pitch classes or note names
- note: Show a MIDI pitch as note name, frequency and colour
- chords: List the chord template catalog
"""

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .core.constants import (
    DEFAULT_FFT_SIZE,
    DEFAULT_BIN_COUNT,
    DEFAULT_STABILITY_FRAMES,
    DEFAULT_FRAME_RATE,
)

app = typer.Typer(
    name="pitchplease",
    help="Polyphonic pitch and chord detection",
    rich_markup_mode="markdown",
)
console = Console()
err_console = Console(stderr=True)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True)],
        force=True,
    )


@app.command()
def analyze(
    input_file: Path = typer.Argument(..., help="Input audio file (WAV, MP3, FLAC, ...)"),
    midi_output: Optional[Path] = typer.Option(
        None, "-o", "--midi", help="Write the chord timeline to this MIDI file"
    ),
    fft_size: int = typer.Option(
        DEFAULT_FFT_SIZE, "--fft-size", help="FFT window size in samples"
    ),
    bin_count: int = typer.Option(
        DEFAULT_BIN_COUNT, "--bin-count", help="Number of low spectrum bins analysed"
    ),
    stability_frames: int = typer.Option(
        DEFAULT_STABILITY_FRAMES, "--stability-frames", help="Identical frames required per chord"
    ),
    frame_rate: float = typer.Option(
        DEFAULT_FRAME_RATE, "--frame-rate", help="Spectrum frames per second"
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Output results as JSON (for scripting)"
    ),
    verbose: bool = typer.Option(
        False, "-v", "--verbose", help="Verbose output"
    ),
):
    """Detect the chords played in an audio file.

    **Examples:**

        pitchplease analyze song.wav

        pitchplease analyze song.wav -o chords.mid --stability-frames 6
    """
    from .detection import DetectorConfig, PitchDetector
    from .inference import ChordTimeline
    from .input import AudioFileSpectrumSource
    from .output import ChordMIDIExporter

    _setup_logging(verbose)

    try:
        config = DetectorConfig(
            fft_size=fft_size,
            bin_count=bin_count,
            stability_frames=stability_frames,
        )
    except ValueError as e:
        err_console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if not json_output:
        console.print(f"[blue]Analyzing:[/blue] {input_file}")

    source = AudioFileSpectrumSource(input_file, fft_size=fft_size, frame_rate=frame_rate)
    timeline = ChordTimeline()
    errors: List[Exception] = []

    def on_update(result):
        if result.chord_changed:
            timeline.add(result.chord, source.frame_time(result.frame_index))

    detector = PitchDetector(config, on_update=on_update, on_error=errors.append)
    frames = detector.run(source)

    if errors:
        err_console.print(f"[red]Error: {errors[0]}[/red]")
        raise typer.Exit(1)

    events = timeline.finish(source.duration)

    if json_output:
        console.print_json(data={
            "input": str(input_file),
            "duration": round(source.duration, 3),
            "sample_rate": source.sample_rate,
            "frames": frames,
            "chords": timeline.to_dict(),
        })
    else:
        if verbose:
            console.print(
                f"  Duration: {source.duration:.2f}s, Sample rate: {source.sample_rate:.0f}Hz, "
                f"{frames} frames, {detector.hz_per_bin:.2f} Hz/bin"
            )
        if events:
            _show_events_table(events)
        else:
            console.print("[yellow]No chords detected![/yellow]")

    if midi_output is not None:
        ChordMIDIExporter().export(events, str(midi_output))
        if not json_output:
            console.print(f"[green]Wrote MIDI:[/green] {midi_output}")


@app.command()
def chord(
    notes: List[str] = typer.Argument(
        ..., help="Pitch classes as numbers (0-11) or note names (C, F#, Bb)"
    ),
):
    """Identify the chord formed by a set of notes.

    **Examples:**

        pitchplease chord C E G

        pitchplease chord 9 0 4 7
    """
    from .inference import match_chord, parse_pitch_classes

    try:
        pitch_classes = parse_pitch_classes(notes)
    except ValueError as e:
        err_console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    match = match_chord(pitch_classes)
    if match is None:
        console.print("[yellow]No chord matched[/yellow]")
        return

    console.print(f"[green]{match.full}[/green] ({match.root} {match.display_name})")


@app.command()
def note(
    midi: float = typer.Argument(..., help="MIDI pitch (may be fractional)"),
    octave: bool = typer.Option(
        True, "--octave/--no-octave", help="Include the octave in the note name"
    ),
):
    """Show note name, frequency, pitch class and display colour of a MIDI pitch."""
    from .core import (
        midi_to_note_name,
        midi_to_frequency,
        midi_to_pitch_class,
        pitch_class_to_color,
    )

    name = midi_to_note_name(midi, with_octave=octave)
    if not name:
        err_console.print(f"[red]Error: MIDI pitch {midi} is below the note range[/red]")
        raise typer.Exit(1)

    pitch_class = midi_to_pitch_class(midi)
    console.print(f"[cyan]{name}[/cyan]")
    console.print(f"  Frequency: {midi_to_frequency(midi):.2f} Hz")
    console.print(f"  Pitch class: {pitch_class}")
    console.print(f"  Colour: {pitch_class_to_color(pitch_class)}")


@app.command()
def chords():
    """List the chord templates used for matching."""
    from .inference import CHORD_TEMPLATES

    table = Table(title="Chord Templates")
    table.add_column("Name", style="cyan")
    table.add_column("Symbol", style="green")
    table.add_column("Intervals", style="yellow")

    for template in CHORD_TEMPLATES:
        table.add_row(
            template.display_name,
            f"C{template.abbreviation}",
            ", ".join(str(i) for i in template.intervals),
        )

    console.print(table)


def _show_events_table(events):
    """Display chord events in a table."""
    table = Table(title="Detected Chords")
    table.add_column("Chord", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Time", style="yellow")
    table.add_column("Duration (s)", style="magenta")

    for event in events:
        table.add_row(
            event.chord.full,
            f"{event.chord.root} {event.chord.display_name}",
            f"{event.onset:.2f}-{event.offset:.2f}s",
            f"{event.duration:.2f}",
        )

    console.print(table)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
