"""Tests for MIDI and MusicXML export."""

import pretty_midi
import pytest

from monoscribe import MIDIExporter, MusicXMLExporter, Note, TranscriptionResult


@pytest.fixture
def result():
    return TranscriptionResult(
        notes=[
            Note(name="C", octave=5, onset=0.0, duration=0.4, frequency=523.3, velocity=80),
            Note(name="E", octave=5, onset=0.5, duration=0.4, frequency=659.3, velocity=80),
            Note(name="G", octave=5, onset=1.0, duration=0.4, frequency=784.0, velocity=80),
        ],
        sample_rate=44100,
        duration=1.5,
    )


class TestMIDIExporter:
    """Tests for MIDIExporter."""

    def test_notes_to_pretty_midi(self, result):
        midi = MIDIExporter().notes_to_pretty_midi(result)

        notes = midi.instruments[0].notes
        assert [n.pitch for n in notes] == [72, 76, 79]
        assert notes[1].start == pytest.approx(0.5)
        assert notes[1].end == pytest.approx(0.9)
        assert notes[0].velocity == 80

    def test_export(self, result, tmp_path):
        path = tmp_path / "out" / "melody.mid"
        MIDIExporter().export(result, str(path))

        assert path.exists()
        midi = pretty_midi.PrettyMIDI(str(path))
        assert [n.pitch for n in midi.instruments[0].notes] == [72, 76, 79]

    def test_out_of_range_pitch_clamped(self):
        low = Note(name="C", octave=-2, onset=0.0, duration=0.5, frequency=4.1)
        midi = MIDIExporter().notes_to_pretty_midi([low])
        assert midi.instruments[0].notes[0].pitch == 0

    def test_empty(self):
        midi = MIDIExporter().notes_to_pretty_midi(TranscriptionResult())
        assert midi.instruments[0].notes == []
        assert midi.instruments[0].pitch_bends == []

    def test_no_pitch_bends_by_default(self, result):
        midi = MIDIExporter().notes_to_pretty_midi(result)
        assert midi.instruments[0].pitch_bends == []

    def test_pitch_bends(self):
        sharp = Note(name="A", octave=4, onset=0.0, duration=0.5, frequency=440.0 * 2 ** (0.25 / 12))
        flat = Note(name="A", octave=4, onset=0.5, duration=0.5, frequency=440.0 * 2 ** (-0.25 / 12))
        midi = MIDIExporter(pitch_bends=True).notes_to_pretty_midi([sharp, flat])

        bends = midi.instruments[0].pitch_bends
        assert [b.pitch for b in bends] == [1024, -1024, 0]
        assert [b.time for b in bends] == pytest.approx([0.0, 0.5, 1.0])

    def test_instrument_program(self):
        midi = MIDIExporter(instrument_name="Flute").notes_to_pretty_midi([])
        assert midi.instruments[0].program == 73
        assert midi.instruments[0].name == "Flute"


class TestMusicXMLExporter:
    """Tests for MusicXMLExporter."""

    def test_notes_to_score(self, result):
        pytest.importorskip("music21")
        score = MusicXMLExporter().notes_to_score(result)

        pitches = [n.pitch.midi for n in score.recurse().notes]
        assert pitches == [72, 76, 79]
        assert len(score.recurse().getElementsByClass("Rest")) == 2

    def test_export(self, result, tmp_path):
        pytest.importorskip("music21")
        path = tmp_path / "melody.musicxml"
        MusicXMLExporter().export(result, str(path))

        assert path.exists()
        assert "<score-partwise" in path.read_text()

    def test_quarter_position(self):
        exporter = MusicXMLExporter(tempo=120.0)
        assert exporter._quarter_position(0.5) == 1.0
        assert exporter._quarter_position(0.001) == 0.0
        assert exporter._quarter_position(0.03) == 1 / 16

    def test_very_short_note_gets_minimum_length(self):
        pytest.importorskip("music21")
        blip = Note(name="A", octave=4, onset=0.0, duration=0.001, frequency=440.0)
        score = MusicXMLExporter().notes_to_score([blip])

        assert [n.quarterLength for n in score.recurse().notes] == [1 / 16]

    def test_long_melody_positions_do_not_drift(self):
        pytest.importorskip("music21")
        exporter = MusicXMLExporter(tempo=120.0)
        notes = [
            Note(name="C", octave=5, onset=i * 0.33, duration=0.25, frequency=523.3)
            for i in range(200)
        ]
        part = exporter.notes_to_score(notes).parts[0]

        offsets = [float(n.getOffsetBySite(part)) for n in part.notes]
        expected = [exporter._quarter_position(n.onset) for n in notes]
        assert offsets == pytest.approx(expected)
