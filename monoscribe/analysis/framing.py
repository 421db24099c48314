"""Frame segmentation - split samples into overlapping analysis windows."""

from dataclasses import dataclass
from typing import Iterator, Optional

import numpy as np


@dataclass(frozen=True)
class Frame:
    """A fixed-length window of samples."""

    index: int  # Position in the frame sequence
    start: int  # Sample index of the first sample
    samples: np.ndarray

    def __len__(self) -> int:
        return len(self.samples)


class FrameSequence:
    """Lazy, restartable sequence of frames over one sample buffer.

    Every iteration walks the buffer again from the start. Frames that run
    past the end of the buffer are zero-padded; frames read the caller's
    buffer without copying otherwise. Frames can also be fetched by index.
    """

    def __init__(
        self, samples: np.ndarray, window_size: int, hop_size: int, offset: int = 0
    ):
        self.samples = samples
        self.window_size = window_size
        self.hop_size = hop_size
        self.offset = offset  # Position of samples[0] in the full recording

    def __iter__(self) -> Iterator[Frame]:
        for index in range(len(self)):
            yield self[index]

    def __len__(self) -> int:
        return frame_count(len(self.samples), self.hop_size)

    def __getitem__(self, index: int) -> Frame:
        n_frames = len(self)
        if index < 0:
            index += n_frames
        if not 0 <= index < n_frames:
            raise IndexError(f"Frame index out of range (0-{n_frames - 1})")

        n_samples = len(self.samples)
        start = index * self.hop_size
        end = start + self.window_size
        if end <= n_samples:
            window = self.samples[start:end]
        else:
            window = np.zeros(self.window_size, dtype=self.samples.dtype)
            window[: n_samples - start] = self.samples[start:]
        return Frame(index=index, start=self.offset + start, samples=window)


def frame_count(n_samples: int, hop_size: int) -> int:
    """Number of frames whose start index falls inside n_samples."""
    if n_samples <= 0:
        return 0
    return (n_samples - 1) // hop_size + 1


class FrameSegmenter:
    """Slices a sample sequence into overlapping fixed-size frames."""

    def __init__(self, window_size: int = 1024, hop_size: int = 512):
        """
        Initialize FrameSegmenter.

        Args:
            window_size: Samples per frame
            hop_size: Samples between consecutive frame starts (<= window_size)
        """
        if window_size <= 0 or hop_size <= 0:
            raise ValueError("window_size and hop_size must be positive")
        if hop_size > window_size:
            raise ValueError(
                f"hop_size ({hop_size}) must not exceed window_size ({window_size})"
            )
        self.window_size = window_size
        self.hop_size = hop_size

    def segment(
        self, samples: np.ndarray, start: int = 0, end: Optional[int] = None
    ) -> FrameSequence:
        """
        Segment samples[start:end] into frames starting at start, start + hop, ...

        A frame is produced for every start index inside the range; the
        trailing ones are zero-padded to window_size rather than reading past
        end. An empty range gives an empty sequence. Frame.start stays an
        index into the full samples array.

        Args:
            samples: 1-D sample array
            start: First sample of the range (default: 0)
            end: Sample after the range (default: len(samples))

        Returns:
            FrameSequence that can be iterated any number of times

        Raises:
            ValueError: If the range is not inside samples
        """
        samples = np.asarray(samples)
        n_samples = len(samples)
        end = n_samples if end is None else end
        if not 0 <= start <= end <= n_samples:
            raise ValueError(
                f"Sample range [{start}, {end}) is outside 0..{n_samples}"
            )
        return FrameSequence(
            samples[start:end], self.window_size, self.hop_size, offset=start
        )

    def frame_start_time(self, index: int, sr: int) -> float:
        """Start time in seconds of the frame at index."""
        return index * self.hop_size / sr
