"""Analysis layer - Frame-level signal analysis.

This layer turns raw samples into per-frame measurements:
- Framing (overlapping fixed-size windows)
- Pitch estimation (McLeod Pitch Method)
"""

from .framing import Frame, FrameSequence, FrameSegmenter, frame_count
from .pitch import PitchEstimate, PitchEstimator

__all__ = [
    "Frame",
    "FrameSequence",
    "FrameSegmenter",
    "frame_count",
    "PitchEstimate",
    "PitchEstimator",
]
