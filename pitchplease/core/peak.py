"""Peak and Fundamental data classes - the units of spectral detection."""

from dataclasses import dataclass

from .music import bin_to_midi, midi_to_frequency, midi_to_note_name, midi_to_pitch_class


@dataclass(frozen=True)
class Peak:
    """A local maximum in a magnitude spectrum."""

    bin: float  # Fractional bin position (parabolically interpolated)
    energy: float  # Magnitude of the peak bin (not interpolated)

    def midi(self, hz_per_bin: float) -> float:
        """MIDI pitch of the peak position."""
        return bin_to_midi(self.bin, hz_per_bin)

    def frequency(self, hz_per_bin: float) -> float:
        """Frequency of the peak position in Hz."""
        return self.bin * hz_per_bin


@dataclass(frozen=True)
class Fundamental:
    """A detected fundamental pitch."""

    midi: float  # Fractional MIDI pitch

    @property
    def pitch_class(self) -> int:
        """Get pitch class (0-11, where 0=C)."""
        return midi_to_pitch_class(self.midi)

    @property
    def pitch_name(self) -> str:
        """Get note name with octave (e.g., 'C4', 'A#3')."""
        return midi_to_note_name(self.midi, with_octave=True)

    @property
    def frequency(self) -> float:
        return midi_to_frequency(self.midi)
