"""Spectrum utilities - byte-scaled magnitude spectra and adaptive noise floor."""

import numpy as np
import librosa

from ..core.constants import (
    BYTE_MAGNITUDE_MAX,
    DEFAULT_MIN_DECIBELS,
    DEFAULT_MAX_DECIBELS,
)


def to_byte_spectrum(
    magnitudes: np.ndarray,
    min_db: float = DEFAULT_MIN_DECIBELS,
    max_db: float = DEFAULT_MAX_DECIBELS,
) -> np.ndarray:
    """
    Map linear magnitudes onto the 0-255 analyser scale.

    The decibel range [min_db, max_db] is mapped linearly onto 0..255,
    values outside are clamped, and the result is floored to whole steps.

    Args:
        magnitudes: Linear magnitudes (any shape)
        min_db: Decibel value mapped to 0
        max_db: Decibel value mapped to 255

    Returns:
        Float array of the same shape with integral values in [0, 255]
    """
    if max_db <= min_db:
        raise ValueError(f"max_db ({max_db}) must be greater than min_db ({min_db})")

    db = librosa.amplitude_to_db(np.abs(magnitudes), ref=1.0, amin=1e-10, top_db=None)
    scaled = BYTE_MAGNITUDE_MAX * (db - min_db) / (max_db - min_db)
    return np.floor(np.clip(scaled, 0.0, BYTE_MAGNITUDE_MAX))


def byte_spectrogram(
    audio: np.ndarray,
    fft_size: int,
    hop_length: int,
    min_db: float = DEFAULT_MIN_DECIBELS,
    max_db: float = DEFAULT_MAX_DECIBELS,
) -> np.ndarray:
    """
    Compute byte-scaled magnitude spectra for successive frames of audio.

    Frames are Blackman-windowed, magnitudes normalised by the FFT size and
    the Nyquist bin is dropped, giving ``fft_size // 2`` bins per frame.

    Returns:
        Array of shape [n_frames, fft_size // 2]
    """
    if len(audio) < fft_size:
        audio = np.pad(audio, (0, fft_size - len(audio)))

    stft = librosa.stft(
        audio,
        n_fft=fft_size,
        hop_length=hop_length,
        window="blackman",
        center=False,
    )
    magnitudes = np.abs(stft[: fft_size // 2]) / fft_size
    return to_byte_spectrum(magnitudes, min_db=min_db, max_db=max_db).T


class NoiseFloorTracker:
    """Exponentially smoothed noise floor and the peak threshold it implies.

    Each frame, the quiet bins (sampled at a fixed stride, below
    ``floor_ratio`` of the frame maximum) are averaged and blended into the
    running floor. The active threshold is ``threshold_factor`` times the
    floor, capped at ``ceiling``.
    """

    def __init__(
        self,
        smoothing: float = 0.95,
        floor_ratio: float = 0.3,
        stride: int = 10,
        threshold_factor: float = 3.0,
        ceiling: float = BYTE_MAGNITUDE_MAX,
    ):
        """
        Initialize NoiseFloorTracker.

        Args:
            smoothing: Weight of the previous floor in the running average
            floor_ratio: Bins below this fraction of the frame max count as noise
            stride: Bin stride used when sampling the spectrum
            threshold_factor: Threshold as a multiple of the noise floor
            ceiling: Upper bound of the threshold (top of the magnitude scale)
        """
        self.smoothing = smoothing
        self.floor_ratio = floor_ratio
        self.stride = stride
        self.threshold_factor = threshold_factor
        self.ceiling = ceiling
        self.noise_floor = 0.0

    def estimate(self, spectrum: np.ndarray, frame_max: float) -> float:
        """Mean magnitude of the sampled bins quieter than the floor ratio."""
        samples = np.asarray(spectrum)[:: self.stride]
        quiet = samples[samples < frame_max * self.floor_ratio]
        if quiet.size == 0:
            return 0.0
        return float(quiet.mean())

    def update(self, spectrum: np.ndarray, frame_max: float) -> float:
        """Blend this frame into the noise floor and return the new threshold."""
        current = self.estimate(spectrum, frame_max)
        self.noise_floor = self.noise_floor * self.smoothing + current * (1 - self.smoothing)
        return self.threshold

    @property
    def threshold(self) -> float:
        return min(self.ceiling, self.noise_floor * self.threshold_factor)

    def reset(self) -> None:
        self.noise_floor = 0.0
