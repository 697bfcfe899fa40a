"""MIDI export of detected chord timelines."""

import pretty_midi
from typing import List, Sequence
from pathlib import Path

from ..inference import ChordEvent, ChordMatch


class ChordMIDIExporter:
    """Export chord events to MIDI as block chords."""

    def __init__(
        self,
        tempo: float = 120.0,
        octave: int = 4,
        velocity: int = 80,
        instrument_name: str = "Acoustic Grand Piano",
        instrument_program: int = 0,
    ):
        """
        Initialize ChordMIDIExporter.

        Args:
            tempo: Tempo in BPM
            octave: Octave of the chord root (4 puts C at MIDI 60)
            velocity: MIDI velocity of every chord note (0-127)
            instrument_name: MIDI instrument name
            instrument_program: MIDI program number (0-127)
        """
        self.tempo = tempo
        self.octave = octave
        self.velocity = velocity
        self.instrument_name = instrument_name
        self.instrument_program = instrument_program

    def voicing(self, chord: ChordMatch) -> List[int]:
        """MIDI pitches of a chord in close root position."""
        root = (self.octave + 1) * 12 + chord.root_pitch_class
        return [root] + [root + interval for interval in sorted(chord.intervals)]

    def export(self, events: Sequence[ChordEvent], output_path: str) -> None:
        """
        Export chord events to a MIDI file.

        Args:
            events: Chord events in time order
            output_path: Path to output MIDI file
        """
        midi = self.events_to_pretty_midi(events)

        # Ensure output directory exists
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)

        midi.write(str(output_path))

    def events_to_pretty_midi(self, events: Sequence[ChordEvent]) -> pretty_midi.PrettyMIDI:
        """Convert chord events to a PrettyMIDI object without saving."""
        midi = pretty_midi.PrettyMIDI(initial_tempo=self.tempo)

        instrument = pretty_midi.Instrument(
            program=self.instrument_program,
            name=self.instrument_name,
        )

        for event in events:
            if event.offset <= event.onset:
                continue
            for pitch in self.voicing(event.chord):
                instrument.notes.append(
                    pretty_midi.Note(
                        velocity=self.velocity,
                        pitch=pitch,
                        start=event.onset,
                        end=event.offset,
                    )
                )

        midi.instruments.append(instrument)
        return midi
