"""MIDI export functionality."""

import math
from pathlib import Path
from typing import Iterable

import pretty_midi

from ..core import Note
from ..core.constants import MIDI_MIN, MIDI_MAX

PITCH_BEND_MAX = 8191


class MIDIExporter:
    """Export a transcribed melody as a single-track MIDI file.

    Because the melody is monophonic, each note's tuning deviation can be
    carried as a channel pitch bend set at the note's onset.
    """

    def __init__(
        self,
        tempo: float = 120.0,
        instrument_name: str = "Acoustic Grand Piano",
        pitch_bends: bool = False,
        bend_range: float = 2.0,
    ):
        """
        Initialize MIDIExporter.

        Args:
            tempo: Tempo in BPM
            instrument_name: General MIDI instrument name (sets the program)
            pitch_bends: Add a pitch bend per note for the detected
                frequency's deviation from equal temperament
            bend_range: Synth pitch bend range in semitones
        """
        self.tempo = tempo
        self.instrument_name = instrument_name
        self.program = pretty_midi.instrument_name_to_program(instrument_name)
        self.pitch_bends = pitch_bends
        self.bend_range = bend_range

    def export(self, notes: Iterable[Note], output_path: str) -> None:
        """
        Export notes to MIDI file.

        Args:
            notes: Notes or a TranscriptionResult
            output_path: Path to output MIDI file
        """
        midi = self.notes_to_pretty_midi(notes)
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        midi.write(str(output_path))

    def notes_to_pretty_midi(self, notes: Iterable[Note]) -> pretty_midi.PrettyMIDI:
        """Convert notes to PrettyMIDI object without saving."""
        midi = pretty_midi.PrettyMIDI(initial_tempo=self.tempo)
        instrument = pretty_midi.Instrument(program=self.program, name=self.instrument_name)

        last_offset = 0.0
        for note in notes:
            pitch = min(max(note.pitch, MIDI_MIN), MIDI_MAX)
            instrument.notes.append(
                pretty_midi.Note(
                    velocity=note.velocity,
                    pitch=pitch,
                    start=note.onset,
                    end=note.offset,
                )
            )
            if self.pitch_bends:
                instrument.pitch_bends.append(
                    pretty_midi.PitchBend(self._bend(note.frequency, pitch), note.onset)
                )
            last_offset = note.offset

        if instrument.pitch_bends:
            instrument.pitch_bends.append(pretty_midi.PitchBend(0, last_offset))

        midi.instruments.append(instrument)
        return midi

    def _bend(self, frequency: float, pitch: int) -> int:
        """Pitch bend value moving pitch onto frequency."""
        semitones = 12 * math.log2(frequency / Note.midi_to_freq(pitch))
        bend = round(semitones / self.bend_range * PITCH_BEND_MAX)
        return int(min(max(bend, -PITCH_BEND_MAX - 1), PITCH_BEND_MAX))
