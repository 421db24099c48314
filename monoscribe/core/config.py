"""Transcription configuration."""

import dataclasses
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .constants import (
    DEFAULT_WINDOW_SIZE,
    DEFAULT_CLARITY_THRESHOLD,
    DEFAULT_MIN_CLARITY,
    DEFAULT_SILENCE_THRESHOLD,
    DEFAULT_CONTINUATION_TOLERANCE,
    DEFAULT_CONTINUATION_CLARITY,
    DEFAULT_MIN_CANDIDATE_FRAMES,
)
from .errors import InvalidConfigurationError


@dataclass(frozen=True)
class TranscriptionConfig:
    """Configuration for a transcription run.

    Attributes:
        window_size: Analysis window length in samples (default: 1024)
        hop_size: Samples between frame starts; None means window_size // 2
        clarity_threshold: MPM peak-picking coefficient k; the first key
            maximum reaching k times the highest one is chosen (default: 0.93)
        continuation_tolerance: Maximum pitch deviation, in semitones, from
            the running note frequency before a new note starts (default: 0.5)
        min_candidate_frames: Frames a note needs to be kept (default: 3)
        min_clarity: Absolute clarity below which a frame has no pitch
            (default: 0.5)
        continuation_clarity: Clarity below which a frame counts as weak; two
            weak frames in a row close the active note (default: 0.7)
        silence_threshold: Frame RMS below which a frame is silent
            (default: 0.01)
        fmin: Lowest frequency reported, in Hz (default: no limit)
        fmax: Highest frequency reported, in Hz (default: no limit)
        n_workers: Threads used for per-frame pitch estimation (default: 1)
    """

    window_size: int = DEFAULT_WINDOW_SIZE
    hop_size: Optional[int] = None
    clarity_threshold: float = DEFAULT_CLARITY_THRESHOLD
    continuation_tolerance: float = DEFAULT_CONTINUATION_TOLERANCE
    min_candidate_frames: int = DEFAULT_MIN_CANDIDATE_FRAMES
    min_clarity: float = DEFAULT_MIN_CLARITY
    continuation_clarity: float = DEFAULT_CONTINUATION_CLARITY
    silence_threshold: float = DEFAULT_SILENCE_THRESHOLD
    fmin: Optional[float] = None
    fmax: Optional[float] = None
    n_workers: int = 1

    @property
    def effective_hop_size(self) -> int:
        """Hop size with the window_size // 2 default applied."""
        if self.hop_size is None:
            return max(1, self.window_size // 2)
        return self.hop_size

    def validate(self) -> "TranscriptionConfig":
        """
        Check every option, raising on the first invalid one.

        Returns:
            self, so calls can be chained

        Raises:
            InvalidConfigurationError: If any option is out of range
        """
        if not isinstance(self.window_size, int) or self.window_size <= 0:
            raise InvalidConfigurationError(
                f"window_size must be a positive integer, got {self.window_size!r}"
            )
        if self.hop_size is not None:
            if not isinstance(self.hop_size, int) or self.hop_size <= 0:
                raise InvalidConfigurationError(
                    f"hop_size must be a positive integer, got {self.hop_size!r}"
                )
            if self.hop_size > self.window_size:
                raise InvalidConfigurationError(
                    f"hop_size ({self.hop_size}) must not exceed "
                    f"window_size ({self.window_size})"
                )

        for name in ("clarity_threshold", "min_clarity", "continuation_clarity"):
            value = getattr(self, name)
            if not 0.0 < value <= 1.0:
                raise InvalidConfigurationError(
                    f"{name} must be in (0, 1], got {value!r}"
                )

        if self.continuation_tolerance <= 0:
            raise InvalidConfigurationError(
                "continuation_tolerance must be positive, "
                f"got {self.continuation_tolerance!r}"
            )
        if self.silence_threshold <= 0:
            raise InvalidConfigurationError(
                f"silence_threshold must be positive, got {self.silence_threshold!r}"
            )
        if not isinstance(self.min_candidate_frames, int) or self.min_candidate_frames < 1:
            raise InvalidConfigurationError(
                "min_candidate_frames must be a positive integer, "
                f"got {self.min_candidate_frames!r}"
            )
        if not isinstance(self.n_workers, int) or self.n_workers < 1:
            raise InvalidConfigurationError(
                f"n_workers must be at least 1, got {self.n_workers!r}"
            )

        for name in ("fmin", "fmax"):
            value = getattr(self, name)
            if value is not None and value <= 0:
                raise InvalidConfigurationError(f"{name} must be positive, got {value!r}")
        if self.fmin is not None and self.fmax is not None and self.fmin >= self.fmax:
            raise InvalidConfigurationError(
                f"fmin ({self.fmin}) must be below fmax ({self.fmax})"
            )

        return self

    def replace(self, **changes: Any) -> "TranscriptionConfig":
        """Return a copy with the given options changed."""
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        data = dataclasses.asdict(self)
        data["hop_size"] = self.effective_hop_size
        return data

    @classmethod
    def from_sensitivity(cls, sensitivity: str, **overrides: Any) -> "TranscriptionConfig":
        """
        Build a config from a named sensitivity preset.

        Args:
            sensitivity: One of SENSITIVITY_PRESETS ('low', 'medium', 'high')
            **overrides: Options applied on top of the preset

        Raises:
            InvalidConfigurationError: If the preset name is unknown
        """
        key = sensitivity.lower()
        if key not in SENSITIVITY_PRESETS:
            raise InvalidConfigurationError(
                f"Unknown sensitivity '{sensitivity}'. "
                f"Choose from: {', '.join(SENSITIVITY_PRESETS)}"
            )
        options = dict(SENSITIVITY_PRESETS[key])
        options.update(overrides)
        return cls(**options)


# Higher sensitivity accepts quieter and less periodic frames.
SENSITIVITY_PRESETS: Dict[str, Dict[str, Any]] = {
    "low": {
        "min_clarity": 0.7,
        "continuation_clarity": 0.8,
        "silence_threshold": 0.02,
        "min_candidate_frames": 4,
    },
    "medium": {},
    "high": {
        "min_clarity": 0.4,
        "continuation_clarity": 0.55,
        "silence_threshold": 0.003,
        "min_candidate_frames": 2,
    },
}
