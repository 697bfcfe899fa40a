"""Tests for chord templates and chord matching.

Tests cover:
- Rejection of too-small or empty inputs
- Triads, seventh chords and extensions
- Inversion, order and duplicate invariance
- Ambiguous and symmetric chords
- Matcher configuration and pitch-class parsing
"""

import dataclasses

import numpy as np

import pytest

from pitchplease.inference import (
    CHORD_TEMPLATES,
    ChordEvent,
    ChordMatch,
    ChordMatcher,
    ChordTimeline,
    ChordTemplate,
    match_chord,
    parse_pitch_classes,
)


# ============================================================================
# Insufficient input
# ============================================================================

class TestNoMatch:
    """Inputs that cannot define a chord."""

    def test_single_pitch_class(self):
        """A single note is not a chord."""
        assert match_chord([0]) is None
        assert match_chord([5]) is None

    def test_duplicates_of_one_pitch_class(self):
        assert match_chord([7, 7, 7]) is None

    def test_empty_and_missing_input(self):
        assert match_chord([]) is None
        assert match_chord(None) is None

    def test_incomplete_dyads(self):
        """Two notes covering only half a triad stay below the threshold."""
        assert match_chord([0, 4]) is None
        assert match_chord([9, 8]) is None  # A, G# - not a maj7


# ============================================================================
# Triads
# ============================================================================

class TestTriads:
    """Tests for triad identification."""

    def test_c_major(self):
        chord = match_chord([0, 4, 7])
        assert chord.root == "C"
        assert chord.root_pitch_class == 0
        assert chord.abbreviation == ""
        assert chord.display_name == "Major"
        assert chord.full == "C"

    def test_a_minor(self):
        """A minor is found even though A is not the lowest pitch class."""
        chord = match_chord([9, 0, 4])
        assert chord.root == "A"
        assert chord.root_pitch_class == 9
        assert chord.abbreviation == "m"
        assert chord.full == "Am"

    def test_d_minor(self):
        assert match_chord([2, 5, 9]).full == "Dm"

    def test_g_major(self):
        chord = match_chord([7, 11, 2])
        assert chord.root == "G"
        assert chord.full == "G"

    def test_f_sharp_diminished(self):
        chord = match_chord([6, 9, 0])
        assert chord.root == "F#"
        assert chord.abbreviation == "dim"

    def test_c_augmented(self):
        chord = match_chord([0, 4, 8])
        assert chord.root == "C"
        assert chord.abbreviation == "aug"

    def test_f_sus4(self):
        chord = match_chord([5, 10, 0])
        assert chord.root == "F"
        assert chord.abbreviation == "sus4"

    def test_d_sus2(self):
        chord = match_chord([2, 4, 9])
        assert chord.root == "D"
        assert chord.abbreviation == "sus2"

    def test_power_chord(self):
        """Root and fifth alone form a power chord."""
        assert match_chord([0, 7]).full == "C5"


# ============================================================================
# Seventh chords and extensions
# ============================================================================

class TestSeventhChords:
    """Tests for seventh and extended chords."""

    def test_c_major7(self):
        chord = match_chord([0, 4, 7, 11])
        assert chord.root == "C"
        assert chord.abbreviation == "maj7"
        assert chord.full == "Cmaj7"

    def test_g_dominant7(self):
        chord = match_chord([7, 11, 2, 5])
        assert chord.root == "G"
        assert chord.full == "G7"

    def test_c_minor_major7(self):
        assert match_chord([0, 3, 7, 11]).full == "Cm(maj7)"

    def test_c_ninth(self):
        assert match_chord([0, 4, 7, 10, 2]).full == "C9"

    def test_am7_or_c6_ambiguous(self):
        """Am7 and C6 share the same notes - either interpretation is valid."""
        chord = match_chord([9, 0, 4, 7])
        assert chord.full in ["Am7", "C6"]

    def test_diminished7_symmetric(self):
        """Dim7 is symmetric - any note can be the root."""
        chord = match_chord([11, 2, 5, 8])
        assert chord.abbreviation == "dim7"
        assert chord.root in ["B", "D", "F", "G#"]


# ============================================================================
# Invariance
# ============================================================================

class TestInvariance:
    """Order and duplicates must not change the result."""

    def test_input_order(self):
        c1 = match_chord([0, 4, 7])  # C, E, G
        c2 = match_chord([4, 7, 0])  # E, G, C
        c3 = match_chord([7, 0, 4])  # G, C, E
        assert c1.full == "C"
        assert c2.full == "C"
        assert c3.full == "C"
        assert c1 == c2 == c3

    def test_duplicate_pitch_classes(self):
        chord = match_chord([0, 0, 4, 4, 7, 7])
        assert chord.root == "C"
        assert chord.full == "C"

    def test_accepts_any_iterable(self):
        assert match_chord({9, 0, 4}).full == "Am"
        assert match_chord((9, 0, 4)).full == "Am"

    def test_float_and_numpy_pitch_classes(self):
        """Pitch classes computed as floats or numpy integers still name a root."""
        chord = match_chord([0.0, 4.0, 7.0])
        assert chord.full == "C"
        assert isinstance(chord.root_pitch_class, int)
        assert match_chord(np.array([9, 0, 4])).full == "Am"

    @pytest.mark.parametrize("pcs", [[9, 0, 4], [0, 4, 9], [4, 9, 0]])
    def test_deterministic_for_permutations(self, pcs):
        assert match_chord(pcs) == match_chord([0, 4, 9])


# ============================================================================
# Catalog and matcher
# ============================================================================

class TestChordTemplates:
    """Tests for the template catalog."""

    def test_catalog_order(self):
        """Catalog order breaks ties and must stay fixed."""
        abbreviations = [t.abbreviation for t in CHORD_TEMPLATES]
        assert abbreviations == [
            "", "m", "dim", "aug", "sus4", "sus2", "5",
            "maj7", "7", "m7", "m(maj7)", "dim7", "ø7", "aug7",
            "6", "m6",
            "add9", "madd9", "9", "m9", "maj9", "11", "13",
        ]

    def test_intervals_exclude_root(self):
        for template in CHORD_TEMPLATES:
            assert 0 not in template.intervals
            assert all(0 < i < 12 for i in template.intervals)

    def test_templates_are_immutable(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            CHORD_TEMPLATES[0].abbreviation = "M"


class TestChordMatcher:
    """Tests for ChordMatcher scoring and configuration."""

    def test_intervals_from_root(self):
        assert ChordMatcher.intervals_from_root([0, 4, 7], 0) == {4, 7}
        assert ChordMatcher.intervals_from_root([0, 4, 7], 4) == {3, 8}

    def test_score_full_match(self):
        matcher = ChordMatcher()
        major = matcher.template_for("")
        assert matcher.score_template({4, 7}, major) == pytest.approx(1.0)

    def test_score_penalizes_extra_notes(self):
        matcher = ChordMatcher()
        major = matcher.template_for("")
        assert matcher.score_template({4, 7, 11}, major) == pytest.approx(0.9)

    def test_score_partial_match(self):
        matcher = ChordMatcher()
        maj7 = matcher.template_for("maj7")
        assert matcher.score_template({4, 7}, maj7) == pytest.approx(2 / 3)

    def test_lower_min_score_accepts_dyads(self):
        """With a lower threshold a major third is reported as a major chord."""
        matcher = ChordMatcher(min_score=0.0)
        assert matcher.match([0, 4]).full == "C"

    def test_custom_catalog(self):
        templates = [ChordTemplate("Minor", "m", (3, 7))]
        matcher = ChordMatcher(templates=templates)
        assert matcher.match([0, 4, 7]) is None
        assert matcher.match([0, 3, 7]).full == "Cm"

    def test_template_lookup(self):
        matcher = ChordMatcher()
        assert matcher.template_for("m7").intervals == (3, 7, 10)
        assert matcher.template_for("nope") is None


class TestChordMatch:
    """Tests for ChordMatch and ChordEvent."""

    def test_match_carries_intervals(self):
        chord = match_chord([9, 0, 4])
        assert chord.intervals == (3, 7)
        assert chord.pitch_classes == (9, 0, 4)

    def test_event_duration(self):
        chord = match_chord([0, 4, 7])
        event = ChordEvent(chord=chord, onset=1.0, offset=2.5)
        assert event.duration == 1.5

    def test_match_equality(self):
        assert ChordMatch("C", 0, "Major", "", "C", (4, 7)) == match_chord([0, 4, 7])


class TestParsePitchClasses:
    """Tests for pitch class parsing."""

    def test_numbers(self):
        assert parse_pitch_classes(["0", "4", "7"]) == [0, 4, 7]
        assert parse_pitch_classes(["14"]) == [2]

    def test_note_names(self):
        assert parse_pitch_classes(["C", "e", "G#"]) == [0, 4, 8]

    def test_flats(self):
        assert parse_pitch_classes(["Bb", "Db", "Eb", "Gb", "Ab"]) == [10, 1, 3, 6, 8]

    def test_unknown_token(self):
        with pytest.raises(ValueError, match="Unknown pitch class"):
            parse_pitch_classes(["C", "H"])


class TestChordTimeline:
    """Tests for collecting chord changes into events."""

    def test_changes_close_previous_event(self):
        timeline = ChordTimeline()
        timeline.add(match_chord([0, 4, 7]), 0.5)
        timeline.add(match_chord([9, 0, 4]), 2.0)

        events = timeline.finish(3.0)

        assert [e.chord.full for e in events] == ["C", "Am"]
        assert (events[0].onset, events[0].offset) == (0.5, 2.0)
        assert (events[1].onset, events[1].offset) == (2.0, 3.0)

    def test_finish_never_ends_before_onset(self):
        timeline = ChordTimeline()
        timeline.add(match_chord([0, 4, 7]), 2.0)
        assert timeline.finish(1.0)[0].duration == 0.0

    def test_empty_timeline(self):
        timeline = ChordTimeline()
        assert timeline.finish(5.0) == []
        assert timeline.to_dict() == []

    def test_to_dict(self):
        timeline = ChordTimeline()
        timeline.add(match_chord([9, 0, 4]), 0.12345)
        timeline.finish(1.0)

        assert timeline.to_dict() == [
            {"chord": "Am", "root": "A", "name": "Minor", "onset": 0.123, "offset": 1.0}
        ]
