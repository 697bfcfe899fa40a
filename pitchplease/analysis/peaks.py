"""Spectral peak extraction with parabolic sub-bin refinement."""

from typing import List

import numpy as np
from scipy.signal import argrelmax

from ..core import Peak

# Below this the parabola through three bins is treated as flat
MIN_CURVATURE = 1e-4


def parabolic_offset(prev: float, cur: float, next_: float) -> float:
    """
    Sub-bin offset of a peak from the parabola through three bins.

    Args:
        prev: Magnitude of the bin below the peak
        cur: Magnitude of the peak bin
        next_: Magnitude of the bin above the peak

    Returns:
        Offset in bins, clamped to [-0.5, 0.5]; 0.0 for a degenerate parabola
    """
    d = 2 * (prev - 2 * cur + next_)
    if abs(d) <= MIN_CURVATURE:
        return 0.0
    return float(np.clip((prev - next_) / d, -0.5, 0.5))


class PeakExtractor:
    """Find local maxima above a threshold in a magnitude spectrum."""

    def __init__(self, max_peaks: int = 64):
        """
        Initialize PeakExtractor.

        Args:
            max_peaks: Maximum peaks per frame. Scanning runs from low to high
                bins, so the lowest-frequency peaks are kept when the cap hits.
        """
        self.max_peaks = max_peaks

    def extract(self, spectrum: np.ndarray, threshold: float) -> List[Peak]:
        """
        Extract peaks from a spectrum.

        A bin is a peak when it is strictly greater than both neighbours and
        than the threshold. The first and last bins are never peaks.

        Args:
            spectrum: Magnitude spectrum
            threshold: Minimum magnitude for a peak

        Returns:
            Peaks ordered by ascending bin position
        """
        spectrum = np.asarray(spectrum, dtype=np.float64)
        if spectrum.size < 3 or self.max_peaks <= 0:
            return []

        candidates = argrelmax(spectrum)[0]
        candidates = candidates[spectrum[candidates] > threshold][: self.max_peaks]

        peaks = []
        for i in candidates:
            offset = parabolic_offset(spectrum[i - 1], spectrum[i], spectrum[i + 1])
            peaks.append(Peak(bin=float(i) + offset, energy=float(spectrum[i])))
        return peaks
