"""Note segmentation - turn closed candidates into Notes."""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np

from .onset import NoteCandidate
from ..core import Note, NoteNamer

logger = logging.getLogger(__name__)


@dataclass
class SegmentationStats:
    """Statistics from one segmentation run."""

    candidates: int = 0
    notes: int = 0
    discarded: int = 0
    boundaries: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, object]:
        """Convert to dictionary for JSON output."""
        return {
            "candidates": self.candidates,
            "notes": self.notes,
            "discarded": self.discarded,
            "boundaries": dict(self.boundaries),
        }


class NoteSegmenter:
    """Finalizes note candidates into Notes, dropping too-short ones."""

    def __init__(
        self,
        sr: int,
        min_candidate_frames: int = 3,
        namer: Optional[NoteNamer] = None,
    ):
        """
        Initialize NoteSegmenter.

        Args:
            sr: Sample rate, used to convert sample positions to seconds
            min_candidate_frames: Candidates with fewer frames are discarded
            namer: NoteNamer used for pitch names (default: A4 = 440 Hz)
        """
        self.sr = sr
        self.min_candidate_frames = min_candidate_frames
        self.namer = namer or NoteNamer()
        self.notes: List[Note] = []
        self.stats = SegmentationStats()

    def finalize(self, candidate: NoteCandidate) -> Optional[Note]:
        """
        Close out a candidate.

        Args:
            candidate: Candidate returned by the onset tracker

        Returns:
            The new Note, or None if the candidate was too short
        """
        self.stats.candidates += 1
        if candidate.closed_by is not None:
            reason = candidate.closed_by.value
            self.stats.boundaries[reason] = self.stats.boundaries.get(reason, 0) + 1

        if candidate.n_frames < self.min_candidate_frames:
            self.stats.discarded += 1
            logger.debug(
                "Discarded %d-frame candidate (minimum %d)",
                candidate.n_frames,
                self.min_candidate_frames,
            )
            return None

        frequency = candidate.representative_frequency
        note_name = self.namer.name(frequency)

        note = Note(
            name=note_name.name,
            octave=note_name.octave,
            onset=candidate.start_sample / self.sr,
            duration=(candidate.end_sample - candidate.start_sample) / self.sr,
            frequency=frequency,
            clarity=candidate.mean_clarity,
            velocity=self._rms_to_velocity(candidate.mean_rms),
        )
        self.notes.append(note)
        self.stats.notes += 1
        return note

    def _rms_to_velocity(self, rms: float) -> int:
        """Convert RMS energy to MIDI velocity (0-127)."""
        # Map RMS to velocity range [20, 127]
        # Assuming normalized audio, RMS typically 0.01-0.5
        return int(np.clip(rms * 200, 20, 127))
