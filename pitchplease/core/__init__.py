"""Core types, constants and music math for PitchPlease."""

from .peak import Peak, Fundamental
from .constants import (
    NOTE_NAMES,
    C0_HZ,
    UNDEFINED_MIDI,
    DEFAULT_SAMPLE_RATE,
    DEFAULT_FRAME_RATE,
)
from .music import (
    round_midi,
    frequency_to_midi,
    midi_to_frequency,
    bin_to_midi,
    bin_midi_table,
    midi_to_note_name,
    midi_to_pitch_class,
    pitch_class_to_color,
)

__all__ = [
    "Peak",
    "Fundamental",
    "NOTE_NAMES",
    "C0_HZ",
    "UNDEFINED_MIDI",
    "DEFAULT_SAMPLE_RATE",
    "DEFAULT_FRAME_RATE",
    "round_midi",
    "frequency_to_midi",
    "midi_to_frequency",
    "bin_to_midi",
    "bin_midi_table",
    "midi_to_note_name",
    "midi_to_pitch_class",
    "pitch_class_to_color",
]
