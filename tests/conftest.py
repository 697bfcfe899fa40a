"""Shared fixtures: synthetic chord recordings."""

import pytest

from generate_test_audio import (
    A_MINOR,
    C_MAJOR,
    generate_chord,
    generate_chord_progression,
    save_wav,
)


@pytest.fixture
def c_major_wav(tmp_path):
    """1.5 seconds of a C major triad."""
    return save_wav(tmp_path / "c_major.wav", generate_chord(C_MAJOR, 1.5))


@pytest.fixture
def progression_wav(tmp_path):
    """C major for 1.5 seconds, then A minor for 1.5 seconds."""
    audio = generate_chord_progression([C_MAJOR, A_MINOR], [1.5, 1.5])
    return save_wav(tmp_path / "progression.wav", audio)
