"""Music math - conversions between frequency, MIDI pitch and note names."""

import math

import numpy as np

from .constants import C0_HZ, NOTE_NAMES, UNDEFINED_MIDI


def round_midi(midi: float) -> int:
    """Round a (fractional) MIDI value to the nearest integer pitch.

    Every conversion that needs an integer pitch goes through here so that
    note names and pitch classes always agree for the same value.
    """
    return int(round(midi))


def frequency_to_midi(hz: float) -> float:
    """Convert frequency (Hz) to fractional MIDI pitch.

    Returns UNDEFINED_MIDI for non-positive frequencies.
    """
    if hz <= 0:
        return UNDEFINED_MIDI
    return 12 * math.log2(hz / C0_HZ)


def midi_to_frequency(midi: float) -> float:
    """Convert MIDI pitch to frequency (Hz)."""
    return C0_HZ * 2 ** (midi / 12.0)


def bin_to_midi(bin_index: float, hz_per_bin: float) -> float:
    """Convert a (fractional) FFT bin position to MIDI pitch."""
    return frequency_to_midi(bin_index * hz_per_bin)


def bin_midi_table(bin_count: int, hz_per_bin: float) -> np.ndarray:
    """MIDI pitch of every bin in a spectrum of ``bin_count`` bins."""
    table = np.full(bin_count, UNDEFINED_MIDI, dtype=np.float64)
    if bin_count > 1:
        bins = np.arange(1, bin_count, dtype=np.float64)
        table[1:] = 12 * np.log2(bins * hz_per_bin / C0_HZ)
    return table


def midi_to_note_name(midi: float, with_octave: bool = False) -> str:
    """
    Get note name for a MIDI pitch (e.g., 'C', or 'C4' with octave).

    Args:
        midi: MIDI pitch, may be fractional
        with_octave: Append the octave number (MIDI 60 = C4)

    Returns:
        Note name, or an empty string for negative pitches
    """
    rounded = round_midi(midi)
    if rounded < 0:
        return ""
    name = NOTE_NAMES[rounded % 12]
    if with_octave:
        return f"{name}{rounded // 12 - 1}"
    return name


def midi_to_pitch_class(midi: float) -> int:
    """Get pitch class (0-11, where 0=C)."""
    return round_midi(midi) % 12


def pitch_class_to_color(
    pitch_class: int,
    saturation: float = 80,
    lightness: float = 50,
    alpha: float = 1,
) -> str:
    """Display colour for a pitch class as a CSS ``hsla()`` string.

    Hues step 30 degrees per semitone around the colour wheel, C at 60.
    """
    hue = (360 - pitch_class * 30 + 60) % 360
    return f"hsla({hue},{saturation}%,{lightness}%,{alpha})"
