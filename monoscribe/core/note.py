"""Note data class - the fundamental unit of musical transcription."""

from dataclasses import dataclass
from typing import Any, Dict

from .constants import PITCH_NAMES, A4_FREQUENCY, A4_MIDI


@dataclass(frozen=True)
class Note:
    """A finalized transcribed note."""

    name: str  # Pitch class with accidental, e.g. 'C#'
    octave: int
    onset: float  # Start time in seconds
    duration: float  # Length in seconds
    frequency: float  # Median detected frequency in Hz
    clarity: float = 1.0  # Mean MPM clarity of the note's frames
    velocity: int = 64  # MIDI velocity (0-127)

    @property
    def offset(self) -> float:
        """End time in seconds."""
        return self.onset + self.duration

    @property
    def pitch_name(self) -> str:
        """Get note name with octave (e.g., 'C4', 'A#3')."""
        return f"{self.name}{self.octave}"

    @property
    def pitch(self) -> int:
        """MIDI pitch of the named note."""
        return 12 * (self.octave + 1) + PITCH_NAMES.index(self.name)

    @property
    def pitch_class(self) -> int:
        """Get pitch class (0-11, where 0=C)."""
        return PITCH_NAMES.index(self.name)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "name": self.pitch_name,
            "pitch_class": self.name,
            "octave": self.octave,
            "onset": self.onset,
            "duration": self.duration,
            "frequency": self.frequency,
            "clarity": self.clarity,
            "velocity": self.velocity,
        }

    def __str__(self) -> str:
        return self.pitch_name

    @staticmethod
    def midi_to_freq(midi: int) -> float:
        """Convert MIDI pitch to frequency (Hz)."""
        return A4_FREQUENCY * (2 ** ((midi - A4_MIDI) / 12.0))
