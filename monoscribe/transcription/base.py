"""Base classes for transcription."""

from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

from ..core import TranscriptionResult
from ..input import AudioLoader


class Transcriber(ABC):
    """Turns mono samples into a TranscriptionResult.

    Subclasses implement transcribe(); reading files goes through an
    AudioLoader so every transcriber downmixes the same way.
    """

    @abstractmethod
    def transcribe(self, audio: np.ndarray, sr: int) -> TranscriptionResult:
        """Transcribe 1-D audio sampled at sr."""

    def transcribe_file(
        self, path: str, loader: Optional[AudioLoader] = None
    ) -> TranscriptionResult:
        """
        Load an audio file and transcribe it.

        Args:
            path: Path to audio file
            loader: AudioLoader to use (default: mean downmix, peak-normalized)

        Returns:
            TranscriptionResult for the whole file
        """
        loader = loader or AudioLoader()
        audio, sr = loader.load(path)
        return self.transcribe(audio, sr)
