"""Tests for byte spectra and the adaptive noise floor."""

import numpy as np
import pytest

from pitchplease.analysis import NoiseFloorTracker, byte_spectrogram, to_byte_spectrum


# ============================================================================
# Noise floor
# ============================================================================

class TestNoiseFloorTracker:
    """Tests for NoiseFloorTracker."""

    @staticmethod
    def _flat_with_spike(level=4.0, spike=200.0):
        spectrum = np.full(100, level)
        spectrum[55] = spike  # Off the sampling stride
        return spectrum

    def test_estimate_uses_quiet_sampled_bins(self):
        tracker = NoiseFloorTracker()
        spectrum = self._flat_with_spike()
        assert tracker.estimate(spectrum, spectrum.max()) == pytest.approx(4.0)

    def test_estimate_skips_loud_samples(self):
        tracker = NoiseFloorTracker()
        spectrum = np.full(100, 4.0)
        spectrum[50] = 200.0  # On the stride, above 0.3 * max
        assert tracker.estimate(spectrum, 200.0) == pytest.approx(4.0)

    def test_estimate_without_quiet_bins(self):
        tracker = NoiseFloorTracker()
        assert tracker.estimate(np.zeros(100), 0.0) == 0.0

    def test_exponential_smoothing(self):
        tracker = NoiseFloorTracker()
        spectrum = self._flat_with_spike()

        assert tracker.update(spectrum, 200.0) == pytest.approx(0.6)
        assert tracker.noise_floor == pytest.approx(0.2)
        assert tracker.update(spectrum, 200.0) == pytest.approx(1.17)

    def test_converges_to_three_times_floor(self):
        tracker = NoiseFloorTracker()
        spectrum = self._flat_with_spike()
        for _ in range(300):
            tracker.update(spectrum, 200.0)
        assert tracker.threshold == pytest.approx(12.0, rel=1e-3)

    def test_threshold_capped_at_ceiling(self):
        tracker = NoiseFloorTracker(ceiling=10.0)
        spectrum = self._flat_with_spike()
        for _ in range(300):
            tracker.update(spectrum, 200.0)
        assert tracker.threshold == 10.0

    def test_reset(self):
        tracker = NoiseFloorTracker()
        tracker.update(self._flat_with_spike(), 200.0)
        tracker.reset()
        assert tracker.noise_floor == 0.0
        assert tracker.threshold == 0.0


# ============================================================================
# Byte spectra
# ============================================================================

class TestByteSpectrum:
    """Tests for decibel to byte scaling."""

    def test_range_endpoints(self):
        magnitudes = np.array([1e-5, 0.05, 10 ** (-55 / 20)])
        result = to_byte_spectrum(magnitudes)
        assert result[0] == 0.0
        assert result[1] == 255.0
        assert result[2] in (127.0, 128.0)

    def test_clamped(self):
        result = to_byte_spectrum(np.array([0.0, 1e-9, 1.0, 100.0]))
        assert list(result) == [0.0, 0.0, 255.0, 255.0]

    def test_values_are_whole_steps(self):
        result = to_byte_spectrum(np.geomspace(1e-5, 1e-1, 50))
        assert np.all(result == np.floor(result))
        assert np.all(np.diff(result) >= 0)

    def test_invalid_range(self):
        with pytest.raises(ValueError):
            to_byte_spectrum(np.ones(4), min_db=-30.0, max_db=-80.0)


class TestByteSpectrogram:
    """Tests for framed byte spectra of raw audio."""

    def test_shape(self):
        sr = 22050
        audio = np.zeros(sr, dtype=np.float32)
        spectra = byte_spectrogram(audio, fft_size=8192, hop_length=512)
        assert spectra.shape == (1 + (sr - 8192) // 512, 4096)

    def test_sine_peak_bin(self):
        sr = 22050
        t = np.arange(sr) / sr
        audio = (0.01 * np.sin(2 * np.pi * 440.0 * t)).astype(np.float32)

        spectra = byte_spectrogram(audio, fft_size=8192, hop_length=512)

        expected_bin = 440.0 / (sr / 8192)
        assert abs(int(np.argmax(spectra[0])) - expected_bin) <= 1.0
        assert 0 < spectra[0].max() < 255

    def test_silence_is_zero(self):
        spectra = byte_spectrogram(np.zeros(10000, dtype=np.float32), fft_size=4096, hop_length=1024)
        assert np.all(spectra == 0)

    def test_short_audio_is_padded(self):
        spectra = byte_spectrogram(np.zeros(1000, dtype=np.float32), fft_size=4096, hop_length=512)
        assert spectra.shape == (1, 2048)
