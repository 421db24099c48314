"""Output layer - Export to various formats.

This layer handles exporting transcribed notes to:
- MIDI files
- MusicXML (for notation software)
"""

from .midi import MIDIExporter
from .musicxml import MusicXMLExporter

__all__ = [
    "MIDIExporter",
    "MusicXMLExporter",
]
