"""Harmonic sieve - collapse harmonic overtones onto their fundamentals.

A single played note shows up as a whole series of spectral peaks. The sieve
scores every plausible peak by how much of the spectrum its harmonic series
explains, then greedily picks the strongest candidates, removing each
pick's overtones from further consideration.
"""

import math
from typing import List, Sequence, Tuple

import numpy as np

from ..core import Peak, Fundamental, midi_to_pitch_class


class HarmonicSieve:
    """Select fundamental pitches from a set of spectral peaks."""

    # Fundamentals are only searched for in this MIDI range (C1 - C7)
    MIN_FUNDAMENTAL_MIDI = 24
    MAX_FUNDAMENTAL_MIDI = 96

    # Peaks within this many semitones of an expected harmonic belong to it
    HARMONIC_TOLERANCE = 0.5

    # Minimum normalized score for a peak to be picked as a fundamental
    SELECTION_THRESHOLD = 0.3

    def __init__(self, num_harmonics: int = 6, max_fundamentals: int = 8):
        """
        Initialize HarmonicSieve.

        Args:
            num_harmonics: Highest harmonic order considered (2..num_harmonics)
            max_fundamentals: Maximum fundamentals returned per frame
        """
        self.num_harmonics = num_harmonics
        self.max_fundamentals = max_fundamentals
        # Semitone offset of each harmonic above its fundamental
        self._harmonic_offsets = [
            (n, 12 * math.log2(n)) for n in range(2, num_harmonics + 1)
        ]

    def find_fundamentals(
        self,
        peaks: Sequence[Peak],
        hz_per_bin: float,
    ) -> List[Fundamental]:
        """
        Find fundamentals among the peaks.

        Args:
            peaks: Peaks of one spectrum frame
            hz_per_bin: Frequency resolution of the spectrum

        Returns:
            Fundamentals in selection order (strongest first)
        """
        if not peaks:
            return []

        midis = np.array([p.midi(hz_per_bin) for p in peaks], dtype=np.float64)
        energies = np.array([p.energy for p in peaks], dtype=np.float64)

        scores = self.score_peaks(midis, energies)
        return self._select(midis, scores)

    def score_peaks(self, midis: np.ndarray, energies: np.ndarray) -> np.ndarray:
        """
        Harmonic-support score of every peak, normalized to a maximum of 1.

        A candidate's score is its own energy plus ``energy / n`` of the first
        peak found at each harmonic order ``n``, scaled by the square root of
        the number of harmonics present (fundamental included). Peaks outside
        the fundamental range score 0.
        """
        count = len(midis)
        scores = np.zeros(count, dtype=np.float64)

        for i in range(count):
            m = midis[i]
            if m < self.MIN_FUNDAMENTAL_MIDI or m > self.MAX_FUNDAMENTAL_MIDI:
                continue

            score = energies[i]
            harmonics_found = 1
            for n, offset in self._harmonic_offsets:
                j = self._first_match(midis, m + offset, exclude=i)
                if j >= 0:
                    score += energies[j] / n
                    harmonics_found += 1
            scores[i] = score * math.sqrt(harmonics_found)

        max_score = scores.max() if count else 0.0
        if max_score > 0:
            scores /= max_score
        return scores

    def harmonic_positions(self, midi: float) -> List[float]:
        """Expected MIDI pitches of harmonics 2..num_harmonics of a fundamental."""
        return [midi + offset for _, offset in self._harmonic_offsets]

    def _first_match(self, midis: np.ndarray, expected: float, exclude: int) -> int:
        """Index of the first peak (other than ``exclude``) near ``expected``, or -1."""
        for j in range(len(midis)):
            if j != exclude and abs(midis[j] - expected) < self.HARMONIC_TOLERANCE:
                return j
        return -1

    def _select(self, midis: np.ndarray, scores: np.ndarray) -> List[Fundamental]:
        """Greedy pick of fundamentals, consuming each pick's harmonics."""
        used = np.zeros(len(midis), dtype=bool)
        fundamentals: List[Fundamental] = []

        while len(fundamentals) < self.max_fundamentals:
            best_index = -1
            best_score = self.SELECTION_THRESHOLD
            for i in range(len(midis)):
                if not used[i] and scores[i] > best_score:
                    best_score = scores[i]
                    best_index = i
            if best_index < 0:
                break

            fundamental_midi = float(midis[best_index])
            fundamentals.append(Fundamental(midi=fundamental_midi))
            used[best_index] = True

            for expected in self.harmonic_positions(fundamental_midi):
                used |= np.abs(midis - expected) < self.HARMONIC_TOLERANCE

        return fundamentals


def pitch_classes(fundamentals: Sequence[Fundamental]) -> Tuple[int, ...]:
    """Sorted, deduplicated pitch classes of a set of fundamentals."""
    return tuple(sorted({midi_to_pitch_class(f.midi) for f in fundamentals}))
