"""Stability gate - debounce pitch-class sets across consecutive frames."""

from collections import deque
from typing import Iterable, Optional, Tuple


class StabilityGate:
    """Report a pitch-class set as stable once it repeats for N frames.

    Keeps the canonical (sorted, deduplicated) pitch-class set of the most
    recent frames, newest first. The gate is stable only while the window is
    full and every entry equals the newest one.
    """

    def __init__(self, frames: int = 4):
        if frames < 1:
            raise ValueError(f"frames must be at least 1, got {frames}")
        self.frames = frames
        self._window: deque = deque(maxlen=frames)

    @staticmethod
    def canonical(pitch_classes: Iterable[int]) -> Tuple[int, ...]:
        """Sorted, deduplicated tuple form of a pitch-class set."""
        return tuple(sorted(set(pitch_classes)))

    def update(self, pitch_classes: Iterable[int]) -> bool:
        """
        Push one frame's pitch classes and return whether the set is stable.

        Args:
            pitch_classes: Pitch classes detected in this frame

        Returns:
            True if the last ``frames`` frames all had this same set
        """
        # appendleft on a full deque drops the oldest entry from the right
        self._window.appendleft(self.canonical(pitch_classes))
        return self.is_stable

    @property
    def is_stable(self) -> bool:
        if len(self._window) < self.frames:
            return False
        first = self._window[0]
        return all(entry == first for entry in self._window)

    @property
    def current(self) -> Optional[Tuple[int, ...]]:
        """Newest pitch-class set, or None before the first frame."""
        return self._window[0] if self._window else None

    def reset(self) -> None:
        self._window.clear()

    def __len__(self) -> int:
        return len(self._window)
