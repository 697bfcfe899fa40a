"""Detection layer - The per-frame pipeline and its driver."""

from .config import DetectorConfig
from .detector import DetectorState, FrameResult, PitchDetector, process_frame

__all__ = [
    "DetectorConfig",
    "DetectorState",
    "FrameResult",
    "PitchDetector",
    "process_frame",
]
