"""PitchPlease - Polyphonic pitch and chord detection from live spectra.

Architecture Layers:
    1. core/      - Music math, note names, Peak/Fundamental types
    2. analysis/  - Spectrum analysis (noise floor, peaks, harmonic sieve)
    3. inference/ - Musical understanding (stability gate, chord matching)
    4. input/     - Spectrum sources (arrays, audio files)
    5. detection/ - Per-frame pipeline and detector driver
    6. output/    - Export (MIDI)
"""

__version__ = "0.1.0"

# Core types and music math
from .core import (
    Peak,
    Fundamental,
    NOTE_NAMES,
    frequency_to_midi,
    midi_to_frequency,
    bin_to_midi,
    midi_to_note_name,
    midi_to_pitch_class,
    pitch_class_to_color,
)

# Analysis layer
from .analysis import NoiseFloorTracker, PeakExtractor, HarmonicSieve

# Inference layer
from .inference import (
    ChordTemplate,
    ChordMatch,
    ChordEvent,
    ChordTimeline,
    ChordMatcher,
    CHORD_TEMPLATES,
    StabilityGate,
    match_chord,
)

# Input layer
from .input import (
    SpectrumSource,
    ArraySpectrumSource,
    AudioFileSpectrumSource,
    SourceUnavailableError,
)

# Detection layer
from .detection import DetectorConfig, FrameResult, PitchDetector, process_frame

# Output layer
from .output import ChordMIDIExporter

__all__ = [
    # Core
    "Peak",
    "Fundamental",
    "NOTE_NAMES",
    "frequency_to_midi",
    "midi_to_frequency",
    "bin_to_midi",
    "midi_to_note_name",
    "midi_to_pitch_class",
    "pitch_class_to_color",
    # Analysis
    "NoiseFloorTracker",
    "PeakExtractor",
    "HarmonicSieve",
    # Inference
    "ChordTemplate",
    "ChordMatch",
    "ChordEvent",
    "ChordTimeline",
    "ChordMatcher",
    "CHORD_TEMPLATES",
    "StabilityGate",
    "match_chord",
    # Input
    "SpectrumSource",
    "ArraySpectrumSource",
    "AudioFileSpectrumSource",
    "SourceUnavailableError",
    # Detection
    "DetectorConfig",
    "FrameResult",
    "PitchDetector",
    "process_frame",
    # Output
    "ChordMIDIExporter",
]
