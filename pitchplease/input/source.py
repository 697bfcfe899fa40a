"""Spectrum sources - where per-frame magnitude spectra come from."""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterator, Optional, Sequence, Union

import numpy as np
import librosa

from ..analysis.spectrum import byte_spectrogram
from ..core.constants import (
    DEFAULT_FFT_SIZE,
    DEFAULT_FRAME_RATE,
    DEFAULT_SAMPLE_RATE,
    DEFAULT_MIN_DECIBELS,
    DEFAULT_MAX_DECIBELS,
)

logger = logging.getLogger(__name__)


class SourceUnavailableError(RuntimeError):
    """The upstream spectrum source could not be acquired."""


class SpectrumSource(ABC):
    """Abstract base class for per-frame spectrum providers."""

    def __init__(
        self,
        sample_rate: Optional[float] = DEFAULT_SAMPLE_RATE,
        fft_size: int = DEFAULT_FFT_SIZE,
        frame_rate: float = DEFAULT_FRAME_RATE,
    ):
        self.sample_rate = sample_rate
        self.fft_size = fft_size
        self.frame_rate = frame_rate

    @property
    def hz_per_bin(self) -> float:
        """Frequency resolution of the spectra."""
        if not self.sample_rate:
            raise RuntimeError("Sample rate unknown until the source is opened")
        return self.sample_rate / self.fft_size

    def open(self) -> None:
        """
        Acquire the source.

        Raises:
            SourceUnavailableError: If the source cannot be acquired
        """

    @abstractmethod
    def frames(self) -> Iterator[np.ndarray]:
        """Yield magnitude spectra, one per frame."""
        pass

    def close(self) -> None:
        """Release the source."""

    def frame_time(self, index: int) -> float:
        """Time in seconds at which frame ``index`` starts."""
        return index / self.frame_rate

    def __enter__(self) -> "SpectrumSource":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class ArraySpectrumSource(SpectrumSource):
    """Replay precomputed spectra."""

    def __init__(
        self,
        spectra: Union[np.ndarray, Sequence[Sequence[float]]],
        sample_rate: float = DEFAULT_SAMPLE_RATE,
        fft_size: int = DEFAULT_FFT_SIZE,
        frame_rate: float = DEFAULT_FRAME_RATE,
    ):
        super().__init__(sample_rate=sample_rate, fft_size=fft_size, frame_rate=frame_rate)
        self.spectra = spectra

    def frames(self) -> Iterator[np.ndarray]:
        for spectrum in self.spectra:
            yield np.asarray(spectrum, dtype=np.float64)

    def __len__(self) -> int:
        return len(self.spectra)


class AudioFileSpectrumSource(SpectrumSource):
    """Byte-scaled spectra of an audio file, one frame per display refresh."""

    SUPPORTED_FORMATS = {".wav", ".mp3", ".flac", ".ogg", ".m4a", ".mp4"}

    def __init__(
        self,
        path: Union[str, Path],
        fft_size: int = DEFAULT_FFT_SIZE,
        frame_rate: float = DEFAULT_FRAME_RATE,
        sample_rate: Optional[float] = None,
        min_db: float = DEFAULT_MIN_DECIBELS,
        max_db: float = DEFAULT_MAX_DECIBELS,
    ):
        """
        Initialize AudioFileSpectrumSource.

        Args:
            path: Path to audio file
            fft_size: FFT window size in samples
            frame_rate: Spectra per second of audio
            sample_rate: Resample to this rate; None keeps the file's rate
            min_db: Decibel value mapped to magnitude 0
            max_db: Decibel value mapped to magnitude 255
        """
        super().__init__(sample_rate=sample_rate, fft_size=fft_size, frame_rate=frame_rate)
        self.path = Path(path)
        self.target_sr = sample_rate
        self.min_db = min_db
        self.max_db = max_db
        self.hop_length = 0
        self.duration = 0.0
        self._spectra: Optional[np.ndarray] = None

    def open(self) -> None:
        """
        Load the audio file and compute its spectra.

        Raises:
            SourceUnavailableError: If the file is missing, unsupported or unreadable
        """
        if not self.path.exists():
            raise SourceUnavailableError(f"Audio file not found: {self.path}")

        if self.path.suffix.lower() not in self.SUPPORTED_FORMATS:
            raise SourceUnavailableError(
                f"Unsupported format: {self.path.suffix}. "
                f"Supported: {self.SUPPORTED_FORMATS}"
            )

        try:
            audio, sr = librosa.load(str(self.path), sr=self.target_sr, mono=True)
        except Exception as e:
            raise SourceUnavailableError(f"Failed to load audio {self.path}: {e}") from e

        self.sample_rate = float(sr)
        self.duration = len(audio) / sr
        self.hop_length = max(1, int(round(sr / self.frame_rate)))
        self._spectra = byte_spectrogram(
            audio,
            fft_size=self.fft_size,
            hop_length=self.hop_length,
            min_db=self.min_db,
            max_db=self.max_db,
        )
        logger.debug(
            "Opened %s: %.2fs at %d Hz, %d frames",
            self.path, self.duration, sr, len(self._spectra),
        )

    def frames(self) -> Iterator[np.ndarray]:
        if self._spectra is None:
            raise RuntimeError("Source not opened")
        for spectrum in self._spectra:
            yield spectrum

    def close(self) -> None:
        self._spectra = None

    def frame_time(self, index: int) -> float:
        if not self.sample_rate:
            return super().frame_time(index)
        return index * self.hop_length / self.sample_rate
