"""Global constants for PitchPlease."""

# Pitch names
NOTE_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

# Frequency of MIDI note 0 (C-1), so that frequency_to_midi(C0_HZ) == 0
C0_HZ = 8.1757989156

# Returned for non-positive frequencies; outside the valid MIDI range
UNDEFINED_MIDI = -1.0

# Detector defaults
DEFAULT_SAMPLE_RATE = 44100.0
DEFAULT_FFT_SIZE = 16384
DEFAULT_BIN_COUNT = 500
DEFAULT_STABILITY_FRAMES = 4
DEFAULT_MAX_PEAKS = 64
DEFAULT_MAX_FUNDAMENTALS = 8
DEFAULT_NUM_HARMONICS = 6
DEFAULT_FRAME_RATE = 60.0  # one frame per display refresh

# Analyser byte scale
BYTE_MAGNITUDE_MAX = 255.0
DEFAULT_MIN_DECIBELS = -80.0
DEFAULT_MAX_DECIBELS = -30.0
