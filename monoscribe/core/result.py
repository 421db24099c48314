"""Transcription result container."""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Tuple, Union

from .note import Note


@dataclass(frozen=True)
class TranscriptionResult:
    """Ordered, immutable sequence of transcribed notes.

    Notes are stored in temporal order and never overlap.
    """

    notes: Tuple[Note, ...] = field(default_factory=tuple)
    sample_rate: int = 0
    duration: float = 0.0  # Input length in seconds

    def __post_init__(self):
        # Accept any iterable of notes but always store a tuple
        object.__setattr__(self, "notes", tuple(self.notes))

    def __iter__(self) -> Iterator[Note]:
        return iter(self.notes)

    def __len__(self) -> int:
        return len(self.notes)

    def __getitem__(self, index: Union[int, slice]):
        return self.notes[index]

    def __bool__(self) -> bool:
        return bool(self.notes)

    def names(self) -> List[str]:
        """Note names with octave, in order (e.g. ['C5', 'E5', 'G5'])."""
        return [note.pitch_name for note in self.notes]

    def to_text(self, separator: str = ", ") -> str:
        """Render as a comma-separated list such as 'C5, E5, G5'."""
        return separator.join(self.names())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "sample_rate": self.sample_rate,
            "duration": self.duration,
            "notes_count": len(self.notes),
            "notes": [note.to_dict() for note in self.notes],
        }
