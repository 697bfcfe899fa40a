"""Real-time pitch and chord detector.

One call to :func:`process_frame` runs the whole per-frame pipeline:

    spectrum → peaks → fundamentals → pitch classes → stability → chord

All rolling state (noise floor, stability window, last reported chord) lives
in an explicit :class:`DetectorState`, so independent detectors never share
anything. :class:`PitchDetector` owns one config and state, dispatches
callbacks and drives a :class:`~pitchplease.input.SpectrumSource`.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

import numpy as np

from ..analysis import NoiseFloorTracker, PeakExtractor, HarmonicSieve, pitch_classes
from ..core import Peak, Fundamental, bin_midi_table
from ..core.constants import DEFAULT_SAMPLE_RATE
from ..inference import ChordMatch, StabilityGate, match_chord
from ..input import SpectrumSource, SourceUnavailableError
from .config import DetectorConfig

logger = logging.getLogger(__name__)


@dataclass
class DetectorState:
    """Rolling state carried from one frame to the next."""

    noise_floor: NoiseFloorTracker
    stability: StabilityGate
    last_chord: Optional[ChordMatch] = None
    frame_index: int = 0  # Number of frames processed so far

    @classmethod
    def for_config(cls, config: DetectorConfig) -> "DetectorState":
        return cls(
            noise_floor=NoiseFloorTracker(ceiling=config.magnitude_ceiling),
            stability=StabilityGate(frames=config.stability_frames),
        )

    def reset(self) -> None:
        self.noise_floor.reset()
        self.stability.reset()
        self.last_chord = None
        self.frame_index = 0


@dataclass
class FrameResult:
    """Everything the detector found in one frame."""

    spectrum: np.ndarray  # The analysed bins
    bin_midi: np.ndarray  # MIDI pitch of each bin
    peaks: List[Peak]
    fundamentals: List[Fundamental]
    pitch_classes: Tuple[int, ...]  # Sorted, deduplicated
    stable: bool
    chord: Optional[ChordMatch]  # Last reported chord
    chord_changed: bool  # True on the frame a new chord was reported
    frame_max_energy: float
    active_threshold: float
    frame_index: int = 0

    @property
    def peak_count(self) -> int:
        return len(self.peaks)

    @property
    def fundamental_count(self) -> int:
        return len(self.fundamentals)


def process_frame(
    spectrum: np.ndarray,
    hz_per_bin: float,
    config: DetectorConfig,
    state: DetectorState,
    bin_midi: Optional[np.ndarray] = None,
) -> FrameResult:
    """
    Run the detection pipeline on one spectrum.

    Args:
        spectrum: Magnitude spectrum with at least ``config.bin_count`` bins;
            only the first ``bin_count`` bins are analysed
        hz_per_bin: Frequency resolution of the spectrum
        config: Detector configuration
        state: Rolling state, updated in place
        bin_midi: Precomputed per-bin MIDI table (computed if omitted)

    Returns:
        FrameResult for this frame

    Raises:
        ValueError: If the spectrum has fewer than ``bin_count`` bins
    """
    spectrum = np.asarray(spectrum, dtype=np.float64)
    if spectrum.ndim != 1 or spectrum.size < config.bin_count:
        raise ValueError(
            f"Expected a 1-D spectrum of at least {config.bin_count} bins, "
            f"got shape {spectrum.shape}"
        )
    spectrum = spectrum[: config.bin_count]

    if bin_midi is None:
        bin_midi = bin_midi_table(config.bin_count, hz_per_bin)

    frame_max = float(spectrum.max())
    threshold = state.noise_floor.update(spectrum, frame_max)

    peaks = PeakExtractor(max_peaks=config.max_peaks).extract(spectrum, threshold)
    sieve = HarmonicSieve(
        num_harmonics=config.num_harmonics,
        max_fundamentals=config.max_fundamentals,
    )
    fundamentals = sieve.find_fundamentals(peaks, hz_per_bin)
    pcs = pitch_classes(fundamentals)

    stable = state.stability.update(pcs)

    # Edge-triggered: only a chord differing from the last one is reported
    chord_changed = False
    if stable and len(pcs) >= 2:
        chord = match_chord(pcs)
        if chord is not None and (state.last_chord is None or chord.full != state.last_chord.full):
            state.last_chord = chord
            chord_changed = True

    result = FrameResult(
        spectrum=spectrum,
        bin_midi=bin_midi,
        peaks=peaks,
        fundamentals=fundamentals,
        pitch_classes=pcs,
        stable=stable,
        chord=state.last_chord,
        chord_changed=chord_changed,
        frame_max_energy=frame_max,
        active_threshold=threshold,
        frame_index=state.frame_index,
    )
    state.frame_index += 1
    return result


class PitchDetector:
    """Polyphonic pitch and chord detector.

    Example::

        detector = PitchDetector(on_chord=lambda chord: print(chord.full))
        detector.run(AudioFileSpectrumSource("song.wav"))
    """

    def __init__(
        self,
        config: Optional[DetectorConfig] = None,
        sample_rate: float = DEFAULT_SAMPLE_RATE,
        on_update: Optional[Callable[[FrameResult], None]] = None,
        on_chord: Optional[Callable[[ChordMatch], None]] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
    ):
        """
        Initialize PitchDetector.

        Args:
            config: Detector configuration (defaults if omitted)
            sample_rate: Sample rate of the audio behind the spectra; replaced
                by the source's rate when running a source
            on_update: Called with the FrameResult of every processed frame
            on_chord: Called when a new stable chord is detected
            on_error: Called once if the spectrum source cannot be acquired
        """
        self.config = config or DetectorConfig()
        self.state = DetectorState.for_config(self.config)
        self.on_update = on_update
        self.on_chord = on_chord
        self.on_error = on_error or self._log_error
        self._running = False
        self._paused = False
        self.hz_per_bin = sample_rate / self.config.fft_size

    @property
    def hz_per_bin(self) -> float:
        return self._hz_per_bin

    @hz_per_bin.setter
    def hz_per_bin(self, value: float) -> None:
        self._hz_per_bin = value
        self._bin_midi = bin_midi_table(self.config.bin_count, value)

    @property
    def bin_midi(self) -> np.ndarray:
        """MIDI pitch of each analysed bin."""
        return self._bin_midi

    @property
    def running(self) -> bool:
        return self._running

    @property
    def paused(self) -> bool:
        return self._paused

    def process(self, spectrum: np.ndarray) -> FrameResult:
        """
        Process one spectrum frame and dispatch callbacks.

        Args:
            spectrum: Magnitude spectrum of at least ``bin_count`` bins

        Returns:
            FrameResult for this frame
        """
        result = process_frame(
            spectrum,
            self._hz_per_bin,
            self.config,
            self.state,
            bin_midi=self._bin_midi,
        )

        if result.chord_changed:
            logger.debug("Chord %s at frame %d", result.chord.full, result.frame_index)
            if self.on_chord:
                self.on_chord(result.chord)

        if self.on_update:
            self.on_update(result)

        return result

    def run(self, source: SpectrumSource) -> int:
        """
        Process frames from a source until it is exhausted or stopped.

        Frames arriving while paused are dropped. If the source cannot be
        acquired, the error is passed to ``on_error`` once and nothing runs.

        Args:
            source: Spectrum source to read from

        Returns:
            Number of frames processed
        """
        if self._running:
            raise RuntimeError("Detector is already running")

        try:
            source.open()
        except SourceUnavailableError as e:
            self.on_error(e)
            return 0

        self.hz_per_bin = source.hz_per_bin
        if source.fft_size != self.config.fft_size:
            logger.warning(
                "Source FFT size %d differs from configured %d",
                source.fft_size, self.config.fft_size,
            )

        self._running = True
        processed = 0
        logger.debug("Detector started (%.3f Hz/bin)", self._hz_per_bin)
        try:
            for spectrum in source.frames():
                if not self._running:
                    break
                if self._paused:
                    continue
                self.process(spectrum)
                processed += 1
        except SourceUnavailableError as e:
            self.on_error(e)
        finally:
            self._running = False
            source.close()
            logger.debug("Detector stopped after %d frames", processed)

        return processed

    def stop(self) -> None:
        """Stop a running detector after the current frame."""
        self._running = False

    def toggle_pause(self) -> bool:
        """Pause or resume processing. Returns the new paused state."""
        self._paused = not self._paused
        return self._paused

    def reset(self) -> None:
        """Forget the noise floor, stability window and last chord."""
        self.state.reset()

    @staticmethod
    def _log_error(error: Exception) -> None:
        logger.error("Spectrum source unavailable: %s", error)
