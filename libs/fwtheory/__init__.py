"""Fretwise Music Theory

Notes, intervals, scales and chords for the fretboard/keyboard trainer.
"""

__version__ = "0.1.0"

from .pitch import (
    FormatError,
    RangeError,
    Note,
    Interval,
    IntervalQuality,
    midi_to_freq,
    freq_to_midi,
    interval_label,
)
from .scales import Scale, SCALES, get_scale, scale_names
from .chords import (
    Chord,
    ChordInversion,
    CHORDS,
    get_chord,
    chord_types,
    chord_display_name,
    analyze_chord,
    is_voicing_complete,
    get_missing_chord_tones,
)
from .answers import (
    Answer,
    SingleAnswer,
    MultipleAnswer,
    normalize_answer,
    is_correct,
    check_note_selection,
)

__all__ = [
    # Pitch model
    "FormatError",
    "RangeError",
    "Note",
    "Interval",
    "IntervalQuality",
    "midi_to_freq",
    "freq_to_midi",
    "interval_label",
    # Scales
    "Scale",
    "SCALES",
    "get_scale",
    "scale_names",
    # Chords
    "Chord",
    "ChordInversion",
    "CHORDS",
    "get_chord",
    "chord_types",
    "chord_display_name",
    "analyze_chord",
    "is_voicing_complete",
    "get_missing_chord_tones",
    # Quiz answers
    "Answer",
    "SingleAnswer",
    "MultipleAnswer",
    "normalize_answer",
    "is_correct",
    "check_note_selection",
]
