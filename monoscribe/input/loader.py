"""Audio loading and preprocessing utilities."""

import logging
import numpy as np
import librosa
from pathlib import Path
from typing import Tuple, Optional

logger = logging.getLogger(__name__)


class AudioLoader:
    """Loads audio files as mono float samples ready for transcription."""

    SUPPORTED_FORMATS = {".wav", ".flac", ".ogg", ".mp3", ".aiff", ".aif"}
    DOWNMIX_MODES = ("mean", "left")

    def __init__(
        self,
        target_sr: Optional[int] = None,
        downmix: str = "mean",
        normalize: bool = True,
    ):
        """
        Initialize AudioLoader.

        Args:
            target_sr: Resample to this rate; None keeps the file's rate
            downmix: How to reduce multi-channel audio to mono:
                'mean' averages channels, 'left' keeps the first channel
            normalize: Peak-normalize audio amplitude if True
        """
        if downmix not in self.DOWNMIX_MODES:
            raise ValueError(
                f"Unknown downmix mode: {downmix}. Supported: {self.DOWNMIX_MODES}"
            )
        self.target_sr = target_sr
        self.downmix = downmix
        self.normalize = normalize

    def load(self, path: str) -> Tuple[np.ndarray, int]:
        """
        Load audio file and preprocess.

        Args:
            path: Path to audio file

        Returns:
            Tuple of (mono audio array, sample rate)

        Raises:
            ValueError: If file format not supported
            FileNotFoundError: If file doesn't exist
        """
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Audio file not found: {path}")

        if path.suffix.lower() not in self.SUPPORTED_FORMATS:
            raise ValueError(
                f"Unsupported format: {path.suffix}. "
                f"Supported: {self.SUPPORTED_FORMATS}"
            )

        # Keep channels so the downmix mode decides how they are combined
        audio, sr = librosa.load(str(path), sr=self.target_sr, mono=False)
        audio = self.to_mono(audio)

        if self.normalize:
            audio = self._normalize(audio)

        logger.debug("Loaded %s: %d samples at %d Hz", path.name, len(audio), sr)
        return audio, int(sr)

    def to_mono(self, audio: np.ndarray) -> np.ndarray:
        """
        Downmix (channels, samples) audio to one channel.

        Mono input is returned unchanged.
        """
        if audio.ndim == 1:
            return audio
        if self.downmix == "left":
            return np.ascontiguousarray(audio[0])
        return librosa.to_mono(audio)

    def _normalize(self, audio: np.ndarray) -> np.ndarray:
        """Normalize audio to [-1, 1] range using peak normalization."""
        peak = np.abs(audio).max() if len(audio) else 0.0
        if peak > 0:
            audio = audio / peak
        return audio

    def get_duration(self, audio: np.ndarray, sr: Optional[int] = None) -> float:
        """
        Get duration in seconds.

        Raises:
            ValueError: If sr is not given and the loader has no target_sr
        """
        sr = sr or self.target_sr
        if not sr:
            raise ValueError(
                "Sample rate unknown: pass sr or construct the loader with target_sr"
            )
        return len(audio) / sr
