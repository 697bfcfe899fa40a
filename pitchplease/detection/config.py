"""Detector configuration."""

from dataclasses import dataclass

from ..core.constants import (
    BYTE_MAGNITUDE_MAX,
    DEFAULT_FFT_SIZE,
    DEFAULT_BIN_COUNT,
    DEFAULT_STABILITY_FRAMES,
    DEFAULT_MAX_PEAKS,
    DEFAULT_MAX_FUNDAMENTALS,
    DEFAULT_NUM_HARMONICS,
)


@dataclass
class DetectorConfig:
    """Configuration for the pitch and chord detector.

    Attributes:
        fft_size: FFT size of the spectrum source (default: 16384)
        bin_count: Number of low bins analysed per frame (default: 500)
        stability_frames: Identical frames required before a chord is reported (default: 4)
        max_peaks: Maximum spectral peaks per frame (default: 64)
        max_fundamentals: Maximum fundamentals per frame (default: 8)
        num_harmonics: Highest harmonic order used by the sieve (default: 6)
        magnitude_ceiling: Top of the magnitude scale, caps the peak
            threshold (default: 255 for byte spectra)
    """

    fft_size: int = DEFAULT_FFT_SIZE
    bin_count: int = DEFAULT_BIN_COUNT
    stability_frames: int = DEFAULT_STABILITY_FRAMES
    max_peaks: int = DEFAULT_MAX_PEAKS
    max_fundamentals: int = DEFAULT_MAX_FUNDAMENTALS
    num_harmonics: int = DEFAULT_NUM_HARMONICS
    magnitude_ceiling: float = BYTE_MAGNITUDE_MAX

    def __post_init__(self):
        for name in ("fft_size", "stability_frames", "max_peaks", "max_fundamentals"):
            value = getattr(self, name)
            if value < 1:
                raise ValueError(f"{name} must be positive, got {value}")
        if self.bin_count < 3:
            raise ValueError(f"bin_count must be at least 3, got {self.bin_count}")
        if self.bin_count > self.fft_size // 2:
            raise ValueError(
                f"bin_count ({self.bin_count}) exceeds the {self.fft_size // 2} bins "
                f"of a {self.fft_size}-point FFT"
            )
        if self.num_harmonics < 2:
            raise ValueError(f"num_harmonics must be at least 2, got {self.num_harmonics}")
        if self.magnitude_ceiling <= 0:
            raise ValueError(f"magnitude_ceiling must be positive, got {self.magnitude_ceiling}")
