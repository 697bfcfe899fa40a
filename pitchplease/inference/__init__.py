"""Inference layer - Musical understanding of detected pitches.

This layer turns per-frame pitch classes into harmony:
- Stability gating (debounce across frames)
- Chord identification against a template catalog

Pipeline: Pitch classes → [Stability] → Chord
"""

from .chords import (
    ChordTemplate,
    ChordMatch,
    ChordEvent,
    ChordTimeline,
    ChordMatcher,
    CHORD_TEMPLATES,
    match_chord,
    parse_pitch_classes,
)
from .stability import StabilityGate

__all__ = [
    # Chord matching
    "ChordTemplate",
    "ChordMatch",
    "ChordEvent",
    "ChordTimeline",
    "ChordMatcher",
    "CHORD_TEMPLATES",
    "match_chord",
    "parse_pitch_classes",
    # Stability
    "StabilityGate",
]
