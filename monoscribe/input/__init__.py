"""Input layer - Audio decoding and downmixing."""

from .loader import AudioLoader

__all__ = [
    "AudioLoader",
]
