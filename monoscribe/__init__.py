"""monoscribe - Monophonic audio to note transcription.

Architecture Layers:
    1. input/         - Audio loading and downmixing
    2. analysis/      - Framing and per-frame pitch estimation (MPM)
    3. transcription/ - Onset tracking, note segmentation, pipeline
    4. output/        - Export (MIDI, MusicXML)

core/ holds the shared types: Note, TranscriptionResult, configuration,
note naming and errors.
"""

__version__ = "0.3.0"

# Core types
from .core import (
    Note,
    NoteName,
    NoteNamer,
    TranscriptionResult,
    TranscriptionConfig,
    TranscriptionError,
    InvalidConfigurationError,
    InvalidInputError,
)

# Input layer
from .input import AudioLoader

# Analysis layer
from .analysis import FrameSegmenter, PitchEstimator, PitchEstimate

# Transcription layer
from .transcription import (
    OnsetTracker,
    NoteSegmenter,
    TranscriptionPipeline,
)

# Output layer
from .output import MIDIExporter, MusicXMLExporter

__all__ = [
    # Core
    "Note",
    "NoteName",
    "NoteNamer",
    "TranscriptionResult",
    "TranscriptionConfig",
    "TranscriptionError",
    "InvalidConfigurationError",
    "InvalidInputError",
    # Input
    "AudioLoader",
    # Analysis
    "FrameSegmenter",
    "PitchEstimator",
    "PitchEstimate",
    # Transcription
    "OnsetTracker",
    "NoteSegmenter",
    "TranscriptionPipeline",
    # Output
    "MIDIExporter",
    "MusicXMLExporter",
]
