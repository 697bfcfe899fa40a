"""Chord matching - Identify a chord from a set of pitch classes.

Implements template-based chord identification:
- A fixed, ordered catalog of chord templates (intervals above the root)
- Every pitch class of the input is tried as the root
- Scoring rewards covering a template, penalizes unexplained notes
- Ties never override an earlier candidate, so results are deterministic
"""

from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Tuple
from dataclasses import dataclass, field

from ..core import NOTE_NAMES


@dataclass(frozen=True)
class ChordTemplate:
    """A named chord shape."""

    display_name: str  # e.g. "Minor", "Maj7"
    abbreviation: str  # Suffix after the root, e.g. "m", "maj7" ("" for major)
    intervals: Tuple[int, ...]  # Semitones above the root, root excluded


# Ordered catalog. Order breaks ties between equally scoring templates.
CHORD_TEMPLATES: Tuple[ChordTemplate, ...] = (
    # Triads
    ChordTemplate("Major", "", (4, 7)),
    ChordTemplate("Minor", "m", (3, 7)),
    ChordTemplate("Dim", "dim", (3, 6)),
    ChordTemplate("Aug", "aug", (4, 8)),
    ChordTemplate("Sus4", "sus4", (5, 7)),
    ChordTemplate("Sus2", "sus2", (2, 7)),
    ChordTemplate("5", "5", (7,)),
    # Seventh chords
    ChordTemplate("Maj7", "maj7", (4, 7, 11)),
    ChordTemplate("7", "7", (4, 7, 10)),
    ChordTemplate("m7", "m7", (3, 7, 10)),
    ChordTemplate("m(maj7)", "m(maj7)", (3, 7, 11)),
    ChordTemplate("dim7", "dim7", (3, 6, 9)),
    ChordTemplate("ø7", "ø7", (3, 6, 10)),
    ChordTemplate("aug7", "aug7", (4, 8, 10)),
    # Sixths
    ChordTemplate("6", "6", (4, 7, 9)),
    ChordTemplate("m6", "m6", (3, 7, 9)),
    # Added tones and extensions
    ChordTemplate("add9", "add9", (2, 4, 7)),
    ChordTemplate("madd9", "madd9", (2, 3, 7)),
    ChordTemplate("9", "9", (4, 7, 10, 2)),
    ChordTemplate("m9", "m9", (3, 7, 10, 2)),
    ChordTemplate("maj9", "maj9", (4, 7, 11, 2)),
    ChordTemplate("11", "11", (4, 7, 10, 2, 5)),
    ChordTemplate("13", "13", (4, 7, 10, 2, 9)),
)

# Flat spellings accepted when parsing note names
FLAT_NAMES = {"Db": 1, "Eb": 3, "Gb": 6, "Ab": 8, "Bb": 10}


@dataclass(frozen=True)
class ChordMatch:
    """Represents an identified chord."""

    root: str  # Root note name (e.g., "C", "F#")
    root_pitch_class: int  # Root as pitch class (0-11)
    display_name: str  # Template display name
    abbreviation: str  # Template abbreviation
    full: str  # Chord symbol, root + abbreviation (e.g., "Am", "Cmaj7")
    intervals: Tuple[int, ...] = ()  # Template intervals above the root

    @property
    def pitch_classes(self) -> Tuple[int, ...]:
        """Pitch classes of the matched template, root first."""
        return (self.root_pitch_class,) + tuple(
            (self.root_pitch_class + i) % 12 for i in self.intervals
        )


@dataclass
class ChordEvent:
    """A chord held over a span of time."""

    chord: ChordMatch
    onset: float  # Start time in seconds
    offset: float  # End time in seconds

    @property
    def duration(self) -> float:
        return self.offset - self.onset


@dataclass
class ChordTimeline:
    """Chord changes collected into back-to-back timed events."""

    events: List[ChordEvent] = field(default_factory=list)

    def add(self, chord: ChordMatch, time: float) -> ChordEvent:
        """
        Start a new chord event.

        Args:
            chord: Newly reported chord
            time: Time of the change in seconds; also closes the previous event

        Returns:
            The new, still open event
        """
        if self.events:
            self.events[-1].offset = time
        event = ChordEvent(chord=chord, onset=time, offset=time)
        self.events.append(event)
        return event

    def finish(self, end_time: float) -> List[ChordEvent]:
        """Close the last event at ``end_time`` and return all events."""
        if self.events:
            self.events[-1].offset = max(self.events[-1].onset, end_time)
        return self.events

    def to_dict(self) -> List[Dict[str, Any]]:
        """Convert to a list of dictionaries for JSON output."""
        return [
            {
                "chord": e.chord.full,
                "root": e.chord.root,
                "name": e.chord.display_name,
                "onset": round(e.onset, 3),
                "offset": round(e.offset, 3),
            }
            for e in self.events
        ]


class ChordMatcher:
    """Match pitch-class sets against a catalog of chord templates.

    For every candidate root, each template is scored as::

        matched / len(template) - unexplained_notes * extra_note_penalty

    The best (root, template) pair wins if its score strictly exceeds
    ``min_score`` and every earlier candidate's score.
    """

    def __init__(
        self,
        templates: Sequence[ChordTemplate] = CHORD_TEMPLATES,
        min_score: float = 0.5,
        extra_note_penalty: float = 0.1,
        min_notes_for_chord: int = 2,
    ):
        """
        Initialize ChordMatcher.

        Args:
            templates: Ordered chord catalog
            min_score: A match must score strictly above this
            extra_note_penalty: Score deducted per note the template doesn't explain
            min_notes_for_chord: Minimum distinct pitch classes to form a chord
        """
        self.templates = tuple(templates)
        self.min_score = min_score
        self.extra_note_penalty = extra_note_penalty
        self.min_notes_for_chord = min_notes_for_chord

    def match(self, pitch_classes: Optional[Iterable[int]]) -> Optional[ChordMatch]:
        """
        Identify the chord formed by a set of pitch classes.

        Args:
            pitch_classes: Pitch classes (0-11) in any order, duplicates allowed

        Returns:
            Best ChordMatch, or None for too few notes or no good match
        """
        if pitch_classes is None:
            return None

        pcs = sorted({int(pc) % 12 for pc in pitch_classes})
        if len(pcs) < self.min_notes_for_chord:
            return None

        best = None
        best_score = self.min_score

        for root in pcs:
            intervals = self.intervals_from_root(pcs, root)

            for template in self.templates:
                score = self.score_template(intervals, template)
                if score > best_score:
                    best_score = score
                    best = (root, template)

        if best is None:
            return None

        root, template = best
        root_name = NOTE_NAMES[root]
        return ChordMatch(
            root=root_name,
            root_pitch_class=root,
            display_name=template.display_name,
            abbreviation=template.abbreviation,
            full=root_name + template.abbreviation,
            intervals=template.intervals,
        )

    @staticmethod
    def intervals_from_root(pitch_classes: Iterable[int], root: int) -> Set[int]:
        """Intervals (1-11 semitones) of the other pitch classes above the root."""
        intervals = {((pc - root) % 12 + 12) % 12 for pc in pitch_classes}
        intervals.discard(0)
        return intervals

    def score_template(self, intervals: Set[int], template: ChordTemplate) -> float:
        """Score how well a set of intervals above a root fits a template."""
        matched = sum(1 for i in template.intervals if i in intervals)
        extra = len(intervals) - matched
        return matched / len(template.intervals) - extra * self.extra_note_penalty

    def template_for(self, abbreviation: str) -> Optional[ChordTemplate]:
        """Look up a catalog template by abbreviation."""
        for template in self.templates:
            if template.abbreviation == abbreviation:
                return template
        return None


_default_matcher = ChordMatcher()


def match_chord(pitch_classes: Optional[Iterable[int]]) -> Optional[ChordMatch]:
    """Match pitch classes against the default chord catalog."""
    return _default_matcher.match(pitch_classes)


def parse_pitch_classes(tokens: Iterable[str]) -> List[int]:
    """
    Parse pitch classes given as numbers or note names.

    Args:
        tokens: e.g. ["0", "4", "7"] or ["C", "E", "G"] or ["Bb", "D", "F"]

    Returns:
        Pitch classes (0-11) in input order

    Raises:
        ValueError: If a token is neither an integer nor a note name
    """
    result = []
    for token in tokens:
        token = token.strip()
        try:
            result.append(int(token) % 12)
            continue
        except ValueError:
            pass

        name = token[:1].upper() + token[1:]
        if name in NOTE_NAMES:
            result.append(NOTE_NAMES.index(name))
        elif name in FLAT_NAMES:
            result.append(FLAT_NAMES[name])
        else:
            raise ValueError(f"Unknown pitch class: {token!r}")
    return result
