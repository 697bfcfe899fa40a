"""Output layer - Export detected chords."""

from .midi import ChordMIDIExporter

__all__ = [
    "ChordMIDIExporter",
]
