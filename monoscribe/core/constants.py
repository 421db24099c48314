"""Global constants for monoscribe."""

# Pitch names
PITCH_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

# Tuning reference
A4_FREQUENCY = 440.0
A4_MIDI = 69
A4_OCTAVE = 4
A4_INDEX = 9  # position of A in PITCH_NAMES

# Analysis defaults
DEFAULT_SR = 44100
DEFAULT_WINDOW_SIZE = 1024
DEFAULT_CLARITY_THRESHOLD = 0.93
DEFAULT_MIN_CLARITY = 0.5
DEFAULT_SILENCE_THRESHOLD = 0.01  # frame RMS

# Segmentation defaults
DEFAULT_CONTINUATION_TOLERANCE = 0.5  # semitones
DEFAULT_CONTINUATION_CLARITY = 0.7
DEFAULT_MIN_CANDIDATE_FRAMES = 3

# MIDI ranges
MIDI_MIN = 0
MIDI_MAX = 127
