"""End-to-end tests for TranscriptionPipeline on synthetic audio."""

from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from monoscribe import (
    InvalidConfigurationError,
    InvalidInputError,
    NoteNamer,
    TranscriptionConfig,
    TranscriptionPipeline,
)

from audio_helpers import (
    C5,
    E5,
    G5,
    SR,
    apply_envelope,
    generate_harmonic_tone,
    generate_note_sequence,
    generate_sine_wave,
    silence,
)


@pytest.fixture
def pipeline():
    return TranscriptionPipeline()


@pytest.fixture
def arpeggio():
    """C5, E5, G5 for 0.4s each with 0.1s of silence between them."""
    return generate_note_sequence([C5, E5, G5], [0.4, 0.4, 0.4], gap=0.1, tail=0.1)


class TestSingleNotes:
    """Steady tones produce one correctly named note."""

    @pytest.mark.parametrize("freq", [220.0, 440.0, 523.25, 659.25, 880.0])
    def test_sine(self, pipeline, freq):
        audio = apply_envelope(generate_sine_wave(freq, 1.0))
        result = pipeline.transcribe(audio, SR)

        assert len(result) == 1
        assert result[0].pitch_name == str(NoteNamer().name(freq))
        assert result[0].frequency == pytest.approx(freq, rel=0.01)

    def test_note_spans_the_tone(self, pipeline):
        audio = np.concatenate([silence(0.25), apply_envelope(generate_sine_wave(440.0, 1.0))])
        note = pipeline.transcribe(audio, SR)[0]

        assert note.onset == pytest.approx(0.25, abs=0.03)
        assert note.duration == pytest.approx(1.0, abs=0.05)

    def test_harmonic_tone_named_by_fundamental(self, pipeline):
        tone = apply_envelope(generate_harmonic_tone(220.0, 1.0, partials=[(1, 0.3), (2, 1.0)]))
        result = pipeline.transcribe(tone, SR)

        assert result.names() == ["A3"]

    def test_other_sample_rate(self):
        sr = 22050
        audio = apply_envelope(generate_sine_wave(440.0, 1.0, sr=sr), sr=sr)
        result = TranscriptionPipeline().transcribe(audio, sr)

        assert result.names() == ["A4"]
        assert result.sample_rate == sr


class TestSequences:
    """Multi-note input."""

    def test_arpeggio(self, pipeline, arpeggio):
        result = pipeline.transcribe(arpeggio, SR)

        assert result.names() == ["C5", "E5", "G5"]
        assert result.to_text() == "C5, E5, G5"
        for note, expected_onset in zip(result, [0.0, 0.5, 1.0]):
            assert note.onset == pytest.approx(expected_onset, abs=0.05)

    def test_notes_ordered_and_disjoint(self, pipeline, arpeggio):
        notes = list(pipeline.transcribe(arpeggio, SR))
        for current, following in zip(notes, notes[1:]):
            assert current.onset < following.onset
            assert current.offset <= following.onset + 1e-9

    def test_notes_inside_input(self, pipeline, arpeggio):
        result = pipeline.transcribe(arpeggio, SR)
        hop = pipeline.hop_size / SR
        for note in result:
            assert note.onset >= 0.0
            assert note.duration >= hop - 1e-12
            assert note.onset < result.duration

    def test_adjacent_tones_without_gap(self, pipeline):
        audio = generate_note_sequence([C5, E5], [0.5, 0.5], envelope=False)
        result = pipeline.transcribe(audio, SR)

        # Frames straddling the change are too few to form a note
        assert result.names() == ["C5", "E5"]

    def test_repeated_pitch_separated_by_silence(self, pipeline):
        audio = generate_note_sequence([440.0, 440.0], [0.3, 0.3], gap=0.2)
        assert pipeline.transcribe(audio, SR).names() == ["A4", "A4"]


class TestNoNotes:
    """Input that contains no pitched material."""

    @pytest.mark.parametrize("n_samples", [0, 1, 100, 1024, SR])
    def test_silence(self, pipeline, n_samples):
        result = pipeline.transcribe(np.zeros(n_samples, dtype=np.float32), SR)
        assert len(result) == 0

    def test_empty_input(self, pipeline):
        result = pipeline.transcribe(np.array([], dtype=np.float32), SR)
        assert not result
        assert result.duration == 0.0
        assert result.sample_rate == SR

    def test_white_noise(self, pipeline):
        noise = np.random.default_rng(3).normal(scale=0.1, size=SR).astype(np.float32)
        assert len(pipeline.transcribe(noise, SR)) == 0

    def test_too_short_for_a_note(self, pipeline):
        # Two frames of tone is below the three-frame minimum
        audio = generate_sine_wave(440.0, 1024 / SR)
        assert len(pipeline.transcribe(audio, SR)) == 0


class TestDeterminism:
    """Identical input gives identical output."""

    def test_repeatable(self, pipeline, arpeggio):
        assert pipeline.transcribe(arpeggio, SR) == pipeline.transcribe(arpeggio, SR)

    def test_independent_pipelines(self, arpeggio):
        first = TranscriptionPipeline().transcribe(arpeggio, SR)
        second = TranscriptionPipeline().transcribe(arpeggio, SR)
        assert first == second

    def test_no_state_carried_between_calls(self, pipeline, arpeggio):
        expected = pipeline.transcribe(arpeggio, SR)
        pipeline.transcribe(apply_envelope(generate_sine_wave(220.0, 0.5)), SR)
        assert pipeline.transcribe(arpeggio, SR) == expected

    @pytest.mark.parametrize("n_workers", [2, 4])
    def test_parallel_matches_serial(self, arpeggio, n_workers):
        serial = TranscriptionPipeline().transcribe(arpeggio, SR)
        parallel = TranscriptionPipeline(n_workers=n_workers).transcribe(arpeggio, SR)
        assert parallel == serial

    def test_input_not_modified(self, pipeline, arpeggio):
        original = arpeggio.copy()
        pipeline.transcribe(arpeggio, SR)
        np.testing.assert_array_equal(arpeggio, original)


class TestConfiguration:
    """Configuration handling."""

    def test_defaults(self, pipeline):
        assert pipeline.config == TranscriptionConfig()
        assert pipeline.hop_size == 512

    def test_options_override_config(self):
        pipeline = TranscriptionPipeline(TranscriptionConfig(window_size=2048), hop_size=256)
        assert pipeline.config.window_size == 2048
        assert pipeline.hop_size == 256

    def test_default_hop_is_half_window(self):
        assert TranscriptionPipeline(window_size=2048).hop_size == 1024

    def test_larger_window_finds_low_notes(self):
        audio = apply_envelope(generate_sine_wave(65.41, 1.0))
        result = TranscriptionPipeline(window_size=2048).transcribe(audio, SR)
        assert result.names() == ["C2"]

    def test_fmax_excludes_notes(self, arpeggio):
        result = TranscriptionPipeline(fmax=700.0).transcribe(arpeggio, SR)
        assert result.names() == ["C5", "E5"]

    def test_stats_returned_per_call(self, pipeline, arpeggio):
        result, stats = pipeline.transcribe_with_stats(arpeggio, SR)
        assert stats.notes == len(result) == 3
        assert stats.candidates >= 3
        assert not hasattr(pipeline, "last_stats")

    def test_empty_input_stats(self, pipeline):
        result, stats = pipeline.transcribe_with_stats(np.zeros(0, dtype=np.float32), SR)
        assert len(result) == 0
        assert stats.candidates == 0

    def test_concurrent_calls_keep_their_own_stats(self, pipeline, arpeggio):
        inputs = [arpeggio, silence(1.0)] * 4
        with ThreadPoolExecutor(max_workers=4) as executor:
            outcomes = list(executor.map(lambda audio: pipeline.transcribe_with_stats(audio, SR), inputs))

        for audio, (result, stats) in zip(inputs, outcomes):
            expected = 3 if audio is arpeggio else 0
            assert len(result) == expected
            assert stats.notes == expected

    @pytest.mark.parametrize(
        "options",
        [
            {"window_size": 0},
            {"window_size": -1024},
            {"hop_size": 0},
            {"window_size": 512, "hop_size": 1024},
            {"clarity_threshold": 0.0},
            {"clarity_threshold": 1.5},
            {"continuation_tolerance": 0.0},
            {"min_candidate_frames": 0},
            {"silence_threshold": -0.1},
            {"n_workers": 0},
            {"fmin": 1000.0, "fmax": 500.0},
        ],
    )
    def test_invalid_config(self, options):
        with pytest.raises(InvalidConfigurationError):
            TranscriptionPipeline(**options)

    def test_invalid_config_is_value_error(self):
        with pytest.raises(ValueError):
            TranscriptionPipeline(clarity_threshold=2.0)

    @pytest.mark.parametrize("sr", [0, -44100, 44100.5, None])
    def test_invalid_sample_rate(self, pipeline, sr):
        with pytest.raises(InvalidConfigurationError):
            pipeline.transcribe(np.zeros(1024), sr)

    def test_numpy_sample_rate(self, pipeline):
        audio = apply_envelope(generate_sine_wave(440.0, 0.5))
        result = pipeline.transcribe(audio, np.int64(SR))
        assert result.sample_rate == SR
        assert isinstance(result.sample_rate, int)

    def test_multichannel_rejected(self, pipeline):
        stereo = np.zeros((2, SR), dtype=np.float32)
        with pytest.raises(InvalidInputError):
            pipeline.transcribe(stereo, SR)

    def test_sensitivity_presets(self):
        low = TranscriptionConfig.from_sensitivity("low")
        high = TranscriptionConfig.from_sensitivity("high", window_size=2048)

        assert low.min_clarity > TranscriptionConfig().min_clarity
        assert high.silence_threshold < TranscriptionConfig().silence_threshold
        assert high.window_size == 2048
        with pytest.raises(InvalidConfigurationError):
            TranscriptionConfig.from_sensitivity("extreme")
