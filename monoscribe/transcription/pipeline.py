"""Monophonic transcription pipeline built on the McLeod Pitch Method."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Iterator, Optional, Tuple

import numpy as np

from .base import Transcriber
from .onset import FrameEstimate, OnsetTracker
from .segmenter import NoteSegmenter, SegmentationStats
from ..analysis import FrameSegmenter, FrameSequence, PitchEstimator
from ..core import (
    NoteNamer,
    TranscriptionConfig,
    TranscriptionResult,
    InvalidConfigurationError,
    InvalidInputError,
)

logger = logging.getLogger(__name__)


class TranscriptionPipeline(Transcriber):
    """Transcribes monophonic audio into notes.

    samples -> frames -> MPM pitch estimates -> onset boundaries -> notes.

    The pipeline object only holds configuration. Tracking state lives in
    each transcribe() call, so one instance can serve concurrent calls on
    different inputs.
    """

    def __init__(self, config: Optional[TranscriptionConfig] = None, **options: Any):
        """
        Initialize TranscriptionPipeline.

        Args:
            config: Transcription configuration (default: TranscriptionConfig())
            **options: Individual TranscriptionConfig fields overriding config

        Raises:
            InvalidConfigurationError: If the configuration is invalid
        """
        config = config or TranscriptionConfig()
        if options:
            config = config.replace(**options)
        self.config = config.validate()

        self.hop_size = self.config.effective_hop_size
        self.segmenter = FrameSegmenter(self.config.window_size, self.hop_size)
        self.namer = NoteNamer()

    def transcribe(self, audio: np.ndarray, sr: int) -> TranscriptionResult:
        """Transcribe monophonic audio to notes (see transcribe_with_stats)."""
        result, _ = self.transcribe_with_stats(audio, sr)
        return result

    def transcribe_with_stats(
        self, audio: np.ndarray, sr: int
    ) -> Tuple[TranscriptionResult, SegmentationStats]:
        """
        Transcribe monophonic audio, also returning this call's segmentation stats.

        Args:
            audio: Mono audio array (normalized floats)
            sr: Sample rate

        Returns:
            Tuple of (TranscriptionResult with notes in temporal order,
            SegmentationStats for this call)

        Raises:
            InvalidConfigurationError: If sr is not a positive integer
            InvalidInputError: If audio is not one-dimensional
        """
        samples = self._check_input(audio, sr)
        sr = int(sr)
        duration = len(samples) / sr

        if len(samples) == 0:
            empty = TranscriptionResult(notes=(), sample_rate=sr, duration=0.0)
            return empty, SegmentationStats()

        estimator = PitchEstimator.from_config(self.config, sr)
        frames = self.segmenter.segment(samples)

        tracker = OnsetTracker(
            hop_size=self.hop_size,
            continuation_tolerance=self.config.continuation_tolerance,
            continuation_clarity=self.config.continuation_clarity,
        )
        note_segmenter = NoteSegmenter(
            sr=sr,
            min_candidate_frames=self.config.min_candidate_frames,
            namer=self.namer,
        )

        for frame_estimate in self._estimate_frames(frames, estimator):
            closed = tracker.update(frame_estimate)
            if closed is not None:
                note_segmenter.finalize(closed)

        closed = tracker.flush()
        if closed is not None:
            note_segmenter.finalize(closed)

        stats = note_segmenter.stats
        logger.info(
            "Transcribed %.2fs of audio: %d frames, %d notes (%d candidates discarded)",
            duration,
            len(frames),
            stats.notes,
            stats.discarded,
        )

        result = TranscriptionResult(
            notes=note_segmenter.notes,
            sample_rate=sr,
            duration=duration,
        )
        return result, stats

    def _estimate_frames(
        self, frames: FrameSequence, estimator: PitchEstimator
    ) -> Iterator[FrameEstimate]:
        """
        Estimate pitch for every frame, yielding results in frame order.

        With n_workers > 1 the estimates are computed on a thread pool;
        Executor.map returns results in submission order, so the tracker
        still sees frame 0, 1, 2, ...
        """

        def estimate(frame):
            return FrameEstimate(frame.index, frame.start, estimator.estimate(frame))

        if self.config.n_workers == 1:
            for frame in frames:
                yield estimate(frame)
            return

        with ThreadPoolExecutor(max_workers=self.config.n_workers) as executor:
            for frame_estimate in executor.map(estimate, frames):
                yield frame_estimate

    def _check_input(self, audio: np.ndarray, sr: int) -> np.ndarray:
        """Validate sample rate and shape, returning a 1-D array view."""
        if isinstance(sr, bool) or not isinstance(sr, (int, np.integer)) or sr <= 0:
            raise InvalidConfigurationError(
                f"Sample rate must be a positive integer, got {sr!r}"
            )

        samples = np.asarray(audio)
        if samples.ndim != 1:
            raise InvalidInputError(
                f"Expected mono (1-D) samples, got array with shape {samples.shape}; "
                "downmix multi-channel audio before transcribing"
            )
        return samples
