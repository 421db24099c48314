"""Equal-tempered note naming."""

import math
from dataclasses import dataclass

from .constants import PITCH_NAMES, A4_FREQUENCY, A4_MIDI, A4_OCTAVE, A4_INDEX


@dataclass(frozen=True)
class NoteName:
    """Pitch class name (letter + accidental) and octave, e.g. ('C#', 4)."""

    name: str
    octave: int

    def __str__(self) -> str:
        return f"{self.name}{self.octave}"


class NoteNamer:
    """Maps frequencies to the nearest 12-tone equal-tempered note.

    Octaves follow scientific pitch notation, so middle C is C4 and sits
    nine semitones below the A4 reference.
    """

    def __init__(self, reference_frequency: float = A4_FREQUENCY):
        if not math.isfinite(reference_frequency) or reference_frequency <= 0:
            raise ValueError(
                f"reference_frequency must be positive, got {reference_frequency!r}"
            )
        self.reference_frequency = reference_frequency

    def semitone_offset(self, frequency: float) -> int:
        """
        Semitones between frequency and A4, rounded to the nearest integer.

        Exact half-semitone ties go to the even offset.

        Raises:
            ValueError: If frequency is not a finite positive number
        """
        if not math.isfinite(frequency) or frequency <= 0:
            raise ValueError(f"Frequency must be finite and positive, got {frequency!r}")
        return int(round(12 * math.log2(frequency / self.reference_frequency)))

    def name(self, frequency: float) -> NoteName:
        """Get the note name for a frequency (e.g. 261.6 Hz -> C4)."""
        from_c4 = self.semitone_offset(frequency) + A4_INDEX
        return NoteName(
            name=PITCH_NAMES[from_c4 % 12],
            octave=A4_OCTAVE + from_c4 // 12,
        )

    def midi_number(self, frequency: float) -> int:
        """Convert frequency (Hz) to MIDI note number."""
        return A4_MIDI + self.semitone_offset(frequency)

    def frequency(self, name: str, octave: int) -> float:
        """Equal-tempered frequency of a named note."""
        try:
            index = PITCH_NAMES.index(name)
        except ValueError:
            raise ValueError(f"Unknown pitch name: {name!r}") from None
        offset = index - A4_INDEX + 12 * (octave - A4_OCTAVE)
        return self.reference_frequency * 2 ** (offset / 12.0)

    __call__ = name
