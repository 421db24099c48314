"""Transcription layer - Note-level detection from pitch estimates.

This layer converts per-frame pitch estimates into discrete note events:
- Onset tracking (where notes start and end)
- Note segmentation (candidate runs -> named notes)
- The end-to-end monophonic pipeline
"""

from .base import Transcriber
from .onset import Boundary, FrameEstimate, NoteCandidate, OnsetTracker
from .segmenter import NoteSegmenter, SegmentationStats
from .pipeline import TranscriptionPipeline

__all__ = [
    "Transcriber",
    "Boundary",
    "FrameEstimate",
    "NoteCandidate",
    "OnsetTracker",
    "NoteSegmenter",
    "SegmentationStats",
    "TranscriptionPipeline",
]
