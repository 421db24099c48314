"""Core types and constants for monoscribe."""

from .note import Note
from .naming import NoteName, NoteNamer
from .result import TranscriptionResult
from .config import TranscriptionConfig, SENSITIVITY_PRESETS
from .errors import (
    TranscriptionError,
    InvalidConfigurationError,
    InvalidInputError,
    FrameOrderError,
)
from .constants import (
    PITCH_NAMES,
    DEFAULT_SR,
    DEFAULT_WINDOW_SIZE,
)

__all__ = [
    "Note",
    "NoteName",
    "NoteNamer",
    "TranscriptionResult",
    "TranscriptionConfig",
    "SENSITIVITY_PRESETS",
    "TranscriptionError",
    "InvalidConfigurationError",
    "InvalidInputError",
    "FrameOrderError",
    "PITCH_NAMES",
    "DEFAULT_SR",
    "DEFAULT_WINDOW_SIZE",
]
