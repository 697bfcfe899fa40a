"""Analysis layer - Low-level spectrum analysis.

This layer turns one magnitude spectrum into pitch content:
- Byte-scaled spectra and the adaptive noise floor
- Peak extraction with sub-bin interpolation
- Harmonic sieve (overtones -> fundamentals)
"""

from .spectrum import NoiseFloorTracker, to_byte_spectrum, byte_spectrogram
from .peaks import PeakExtractor, parabolic_offset
from .harmonic import HarmonicSieve, pitch_classes

__all__ = [
    "NoiseFloorTracker",
    "to_byte_spectrum",
    "byte_spectrogram",
    "PeakExtractor",
    "parabolic_offset",
    "HarmonicSieve",
    "pitch_classes",
]
