"""Onset tracking - decide where one note ends and the next begins."""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

import numpy as np

from ..analysis import PitchEstimate
from ..core import FrameOrderError

logger = logging.getLogger(__name__)


class Boundary(Enum):
    """Why a note candidate was closed."""

    NOTE_END = "note_end"  # Pitch disappeared
    PITCH_CHANGE = "pitch_change"  # Pitch moved beyond the tolerance
    LOW_CLARITY = "low_clarity"  # Two weak frames in a row
    END_OF_INPUT = "end_of_input"


@dataclass(frozen=True)
class FrameEstimate:
    """A pitch estimate tagged with the frame it came from."""

    index: int
    start: int  # Sample index of the frame start
    estimate: PitchEstimate


@dataclass
class NoteCandidate:
    """A run of consecutive pitched, pitch-consistent frames."""

    hop_size: int
    starts: List[int] = field(default_factory=list)
    frequencies: List[float] = field(default_factory=list)
    clarities: List[float] = field(default_factory=list)
    energies: List[float] = field(default_factory=list)
    closed_by: Optional[Boundary] = None

    def add(self, frame: FrameEstimate) -> None:
        self.starts.append(frame.start)
        self.frequencies.append(frame.estimate.frequency)
        self.clarities.append(frame.estimate.clarity)
        self.energies.append(frame.estimate.rms)

    def drop_last(self, count: int) -> None:
        """Remove the last count member frames."""
        if count <= 0:
            return
        del self.starts[-count:]
        del self.frequencies[-count:]
        del self.clarities[-count:]
        del self.energies[-count:]

    @property
    def n_frames(self) -> int:
        return len(self.starts)

    @property
    def start_sample(self) -> int:
        return self.starts[0]

    @property
    def end_sample(self) -> int:
        """Exclusive end: one hop past the last member frame's start."""
        return self.starts[-1] + self.hop_size

    @property
    def representative_frequency(self) -> float:
        """Median member frequency (robust to outlier frames)."""
        return float(np.median(self.frequencies))

    @property
    def mean_clarity(self) -> float:
        return float(np.mean(self.clarities))

    @property
    def mean_rms(self) -> float:
        return float(np.mean(self.energies))


class OnsetTracker:
    """Frame-by-frame boundary decisions for a single transcription run.

    A candidate is closed when:
        - the frame has no pitch (note end)
        - the frame's pitch is more than continuation_tolerance semitones
          from the candidate's running median (pitch change; the frame then
          opens the next candidate)
        - clarity stays below continuation_clarity for two consecutive frames
          (the weak frames are dropped as noise)

    Any pitched frame arriving while nothing is active opens a candidate.

    Notes that start at full amplitude on top of a decaying previous note,
    with no pitch change beyond the tolerance, are merged into that note.
    """

    def __init__(
        self,
        hop_size: int,
        continuation_tolerance: float = 0.5,
        continuation_clarity: float = 0.7,
    ):
        """
        Initialize OnsetTracker.

        Args:
            hop_size: Samples between frame starts
            continuation_tolerance: Allowed deviation from the running median
                in semitones
            continuation_clarity: Clarity below which a frame is weak
        """
        self.hop_size = hop_size
        self.continuation_tolerance = continuation_tolerance
        self.continuation_clarity = continuation_clarity

        self._active: Optional[NoteCandidate] = None
        self._weak_run = 0
        self._last_index = -1
        self.last_boundary: Optional[Boundary] = None

    @property
    def active(self) -> Optional[NoteCandidate]:
        """Candidate currently being extended, if any."""
        return self._active

    def update(self, frame: FrameEstimate) -> Optional[NoteCandidate]:
        """
        Feed the next frame estimate.

        Args:
            frame: Estimate for the frame after the previously fed one

        Returns:
            The candidate closed by this frame, or None

        Raises:
            FrameOrderError: If frame.index does not increase
        """
        if frame.index <= self._last_index:
            raise FrameOrderError(self._last_index, frame.index)
        self._last_index = frame.index

        estimate = frame.estimate
        if not estimate.is_pitched:
            return self._close(Boundary.NOTE_END)

        weak = estimate.clarity < self.continuation_clarity

        if self._active is None:
            self._open(frame, weak)
            return None

        if self._pitch_changed(estimate.frequency):
            closed = self._close(Boundary.PITCH_CHANGE)
            self._open(frame, weak)
            return closed

        if weak:
            self._weak_run += 1
            if self._weak_run >= 2:
                # Earlier weak frames are already members; the current one is not
                self._active.drop_last(self._weak_run - 1)
                return self._close(Boundary.LOW_CLARITY)
        else:
            self._weak_run = 0

        self._active.add(frame)
        return None

    def flush(self) -> Optional[NoteCandidate]:
        """Close the active candidate at end of input."""
        return self._close(Boundary.END_OF_INPUT)

    def _open(self, frame: FrameEstimate, weak: bool) -> None:
        self._active = NoteCandidate(hop_size=self.hop_size)
        self._active.add(frame)
        self._weak_run = 1 if weak else 0

    def _close(self, boundary: Boundary) -> Optional[NoteCandidate]:
        self._weak_run = 0
        candidate = self._active
        if candidate is None:
            return None

        self._active = None
        candidate.closed_by = boundary
        self.last_boundary = boundary
        logger.debug(
            "Closed candidate at sample %s (%d frames): %s",
            candidate.start_sample if candidate.n_frames else "-",
            candidate.n_frames,
            boundary.value,
        )
        return candidate

    def _pitch_changed(self, frequency: float) -> bool:
        reference = self._active.representative_frequency
        semitones = abs(12 * math.log2(frequency / reference))
        return semitones > self.continuation_tolerance
