"""Input layer - Spectrum sources feeding the detector."""

from .source import (
    SpectrumSource,
    ArraySpectrumSource,
    AudioFileSpectrumSource,
    SourceUnavailableError,
)

__all__ = [
    "SpectrumSource",
    "ArraySpectrumSource",
    "AudioFileSpectrumSource",
    "SourceUnavailableError",
]
