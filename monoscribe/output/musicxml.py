"""MusicXML export functionality.

Durations are converted from seconds at a fixed tempo without rhythmic
quantization, so the output is a literal rendering rather than engraved
notation.
"""

from typing import Iterable
from pathlib import Path

from ..core import Note
from ..core.constants import MIDI_MIN, MIDI_MAX

# A 64th note; music21 cannot represent arbitrary float lengths
MIN_QUARTER_LENGTH = 1 / 16


class MusicXMLExporter:
    """Export notes to MusicXML format via music21."""

    def __init__(self, tempo: float = 120.0, time_signature: str = "4/4"):
        """
        Initialize MusicXMLExporter.

        Args:
            tempo: Tempo in BPM
            time_signature: Time signature (e.g., "4/4", "3/4")
        """
        self.tempo = tempo
        self.time_signature = time_signature

    def export(self, notes: Iterable[Note], output_path: str) -> None:
        """
        Export notes to MusicXML file.

        Args:
            notes: Notes or a TranscriptionResult
            output_path: Path to output MusicXML file
        """
        score = self.notes_to_score(notes)

        # Ensure output directory exists
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)

        score.write("musicxml", fp=str(output_path))

    def notes_to_score(self, notes: Iterable[Note]):
        """Build a music21 Score; gaps between notes become rests."""
        try:
            from music21 import stream, note as m21_note, tempo as m21_tempo
            from music21 import meter, metadata
        except ImportError:
            raise ImportError("music21 is required for MusicXML export")

        score = stream.Score()
        score.metadata = metadata.Metadata()
        score.metadata.title = "Transcribed Melody"

        part = stream.Part()
        part.append(m21_tempo.MetronomeMark(number=self.tempo))
        part.append(meter.TimeSignature(self.time_signature))

        # Positions are rounded from absolute times so rounding never accumulates
        cursor = 0.0
        for n in notes:
            start = max(self._quarter_position(n.onset), cursor)
            end = max(self._quarter_position(n.offset), start + MIN_QUARTER_LENGTH)
            if start > cursor:
                rest = m21_note.Rest()
                rest.duration.quarterLength = start - cursor
                part.append(rest)

            m21_n = m21_note.Note()
            m21_n.pitch.midi = min(max(n.pitch, MIDI_MIN), MIDI_MAX)
            m21_n.duration.quarterLength = end - start
            m21_n.volume.velocity = n.velocity
            part.append(m21_n)
            cursor = end

        score.append(part)
        return score

    def _quarter_position(self, seconds: float) -> float:
        """Time in seconds as quarter notes, rounded to a 64th note (1/16 quarter)."""
        quarters = seconds * self.tempo / 60.0
        return round(quarters / MIN_QUARTER_LENGTH) * MIN_QUARTER_LENGTH
