"""Pitch model: notes, intervals and MIDI/frequency conversion.

Notes are immutable (pitch class, octave) pairs with a spelling preference.
Intervals wrap a signed semitone count and carry the naming rules used for
display labels across the trainer.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Sequence

import numpy as np


A4_MIDI = 69
A4_HZ = 440.0
MIDDLE_C = 60
MIDI_MIN = 0
MIDI_MAX = 127
DEFAULT_OCTAVE = 3

NOTE_LETTERS = {"C": 0, "D": 2, "E": 4, "F": 5, "G": 7, "A": 9, "B": 11}
ACCIDENTALS = {"": 0, "#": 1, "♯": 1, "b": -1, "♭": -1}

SHARP_NOTE_NAMES = ("C", "C♯", "D", "D♯", "E", "F", "F♯", "G", "G♯", "A", "A♯", "B")
FLAT_NOTE_NAMES = ("C", "D♭", "D", "E♭", "E", "F", "G♭", "G", "A♭", "A", "B♭", "B")

# Roots that are spelled with flats
FLAT_ROOTS = frozenset({"F", "Bb", "Eb", "Ab", "Db", "Gb", "Cb"})

INTERVAL_LABELS = ("R", "♭2", "2", "♭3", "3", "4", "♭5", "5", "♭6", "6", "♭7", "7")
INTERVAL_NAMES = (
    "Unison",
    "Minor 2nd",
    "Major 2nd",
    "Minor 3rd",
    "Major 3rd",
    "Perfect 4th",
    "Tritone",
    "Perfect 5th",
    "Minor 6th",
    "Major 6th",
    "Minor 7th",
    "Major 7th",
)
COMPOUND_INTERVAL_NAMES = (
    "Octave",
    "Minor 9th",
    "Major 9th",
    "Minor 10th",
    "Major 10th",
    "Perfect 11th",
    "Augmented 11th",
    "Perfect 12th",
    "Minor 13th",
    "Major 13th",
    "Minor 14th",
    "Major 14th",
    "Double Octave",
)

CONSONANCE_VALUES = {
    0: 1.0,
    7: 0.9,
    5: 0.8,
    4: 0.7,
    3: 0.65,
    9: 0.6,
    8: 0.55,
    2: 0.4,
    10: 0.35,
    11: 0.3,
    1: 0.2,
    6: 0.1,
}

_NOTE_RE = re.compile(r"^([A-Ga-g])([#♯b♭]?)(-?\d+)?$")
_LABEL_RE = re.compile(r"^([♭♯]?)(\d+)$")


class FormatError(ValueError):
    """Raised when note text does not follow the note grammar."""


class RangeError(ValueError):
    """Raised when a pitch falls outside the MIDI range 0..127."""


def midi_to_freq(midi_pitch: float) -> float:
    """Convert MIDI pitch to frequency in Hz.

    Uses standard MIDI tuning: A4 (MIDI 69) = 440 Hz.
    """
    return A4_HZ * (2.0 ** ((midi_pitch - A4_MIDI) / 12.0))


def freq_to_midi(freq: float) -> float:
    """Convert frequency in Hz to MIDI pitch (float)."""
    if freq <= 0:
        raise ValueError(f"Frequency must be positive: {freq}")
    return A4_MIDI + 12.0 * float(np.log2(freq / A4_HZ))


def midi_to_freqs(midi_pitches: Sequence[int]) -> np.ndarray:
    """Vectorized MIDI to frequency conversion."""
    pitches = np.asarray(midi_pitches, dtype=float)
    return A4_HZ * np.power(2.0, (pitches - A4_MIDI) / 12.0)


def should_use_flats(root: str) -> bool:
    """Whether a root name is conventionally spelled with flats."""
    cleaned = root.strip().replace("♭", "b").replace("♯", "#")
    if cleaned:
        cleaned = cleaned[0].upper() + cleaned[1:]
    return cleaned in FLAT_ROOTS or cleaned.endswith("b")


def pitch_class_name(pitch_class: int, prefer_flats: bool = False) -> str:
    names = FLAT_NOTE_NAMES if prefer_flats else SHARP_NOTE_NAMES
    return names[pitch_class % 12]


def check_midi(midi: int) -> int:
    if not MIDI_MIN <= midi <= MIDI_MAX:
        raise RangeError(f"MIDI value out of range {MIDI_MIN}..{MIDI_MAX}: {midi}")
    return midi


@dataclass(frozen=True)
class Note:
    """A pitch class in a given octave.

    Equality ignores the spelling preference, so F♯4 == G♭4.
    """

    pitch_class: int
    octave: int
    prefer_flats: bool = field(default=False, compare=False)

    def __post_init__(self) -> None:
        carry, pc = divmod(self.pitch_class, 12)
        if carry:
            object.__setattr__(self, "pitch_class", pc)
            object.__setattr__(self, "octave", self.octave + carry)
        check_midi(self.midi)

    @classmethod
    def parse(cls, text: str) -> "Note":
        """Parse note text such as ``C4``, ``Bb3``, ``F♯-1`` or ``E``.

        A missing octave defaults to octave 3.

        Raises:
            FormatError: on an invalid letter or malformed accidental.
            RangeError: if the resulting MIDI value is outside 0..127.
        """
        match = _NOTE_RE.match(text.strip()) if isinstance(text, str) else None
        if match is None:
            raise FormatError(f"Invalid note format: {text!r}")

        letter, accidental, octave_text = match.groups()
        letter = letter.upper()
        octave = int(octave_text) if octave_text is not None else DEFAULT_OCTAVE

        # Accidentals wrap the pitch class within the written octave
        pitch_class = (NOTE_LETTERS[letter] + ACCIDENTALS[accidental]) % 12
        midi = (octave + 1) * 12 + pitch_class
        check_midi(midi)

        prefer_flats = should_use_flats(letter + accidental)
        return cls(pitch_class=pitch_class, octave=octave, prefer_flats=prefer_flats)

    @classmethod
    def from_midi(cls, midi: int, prefer_flats: bool = False) -> "Note":
        check_midi(midi)
        return cls(pitch_class=midi % 12, octave=midi // 12 - 1, prefer_flats=prefer_flats)

    @classmethod
    def from_frequency(cls, freq: float, prefer_flats: bool = False) -> "Note":
        """Nearest equal-tempered note for a frequency in Hz."""
        return cls.from_midi(int(round(freq_to_midi(freq))), prefer_flats=prefer_flats)

    @property
    def midi(self) -> int:
        return (self.octave + 1) * 12 + self.pitch_class

    @property
    def frequency(self) -> float:
        return midi_to_freq(self.midi)

    @property
    def name(self) -> str:
        return pitch_class_name(self.pitch_class, self.prefer_flats)

    @property
    def full_name(self) -> str:
        return f"{self.name}{self.octave}"

    # Alias used at the boundary with the rendering layer
    text = full_name

    @property
    def chromatic_octave(self) -> int:
        return (self.midi - 12) // 12

    @property
    def enharmonic(self) -> "Note":
        return Note(self.pitch_class, self.octave, prefer_flats=not self.prefer_flats)

    def transpose(self, semitones: int) -> "Note":
        return Note.from_midi(self.midi + semitones, prefer_flats=self.prefer_flats)

    def with_octave(self, octave: int) -> "Note":
        return Note(self.pitch_class, octave, prefer_flats=self.prefer_flats)

    def interval_to(self, other: "Note") -> int:
        """Absolute distance in semitones."""
        return abs(other.midi - self.midi)

    def in_scale(self, root_pitch_class: int, scale_intervals: Iterable[int]) -> bool:
        interval = (self.pitch_class - root_pitch_class) % 12
        return interval in {i % 12 for i in scale_intervals}

    def __str__(self) -> str:
        return self.full_name


class IntervalQuality(str, Enum):
    PERFECT = "perfect"
    MAJOR = "major"
    MINOR = "minor"
    AUGMENTED = "augmented"
    DIMINISHED = "diminished"

    @property
    def symbol(self) -> str:
        return _QUALITY_SYMBOLS[self]


_QUALITY_SYMBOLS = {
    IntervalQuality.PERFECT: "P",
    IntervalQuality.MAJOR: "M",
    IntervalQuality.MINOR: "m",
    IntervalQuality.AUGMENTED: "+",
    IntervalQuality.DIMINISHED: "°",
}


def _shift_label(simple_label: str, octaves: int) -> str:
    """Move a simple degree label up by whole octaves (2 -> 9, ♭3 -> ♭10)."""
    if simple_label == "R":
        simple_label = "1"
    match = _LABEL_RE.match(simple_label)
    accidental, number = match.group(1), int(match.group(2))
    return f"{accidental}{number + 7 * octaves}"


@dataclass(frozen=True, order=True)
class Interval:
    """A signed distance in semitones."""

    semitones: int

    @property
    def simple(self) -> int:
        return self.semitones % 12

    @property
    def octaves(self) -> int:
        return self.semitones // 12

    @property
    def name(self) -> str:
        if self.semitones < 0:
            return f"-{Interval(-self.semitones).name}"
        if self.semitones < 12:
            return INTERVAL_NAMES[self.semitones]
        if self.semitones <= 24:
            return COMPOUND_INTERVAL_NAMES[self.semitones - 12]
        return f"{INTERVAL_NAMES[self.simple]} + {self.octaves}oct"

    @property
    def label(self) -> str:
        """Short display label: R, ♭3, 5, 9, O2, -4."""
        if self.semitones < 0:
            return f"-{Interval(-self.semitones).label}"
        if self.octaves == 0:
            return INTERVAL_LABELS[self.simple]
        if self.simple == 0:
            return f"O{self.octaves}"
        return _shift_label(INTERVAL_LABELS[self.simple], self.octaves)

    @property
    def degree_label(self) -> str:
        """Degree label using the 8th-15th register for compound intervals."""
        if self.semitones < 0:
            return f"-{Interval(-self.semitones).degree_label}"
        if self.semitones < 12:
            return INTERVAL_LABELS[self.semitones]
        if self.semitones < 24:
            return _shift_label(INTERVAL_LABELS[self.semitones - 12], 1)
        if self.semitones == 24:
            return "15"
        return f"{INTERVAL_LABELS[self.simple]}+{self.octaves}oct"

    @property
    def quality(self) -> IntervalQuality:
        simple = self.simple
        if simple in (0, 5, 7):
            return IntervalQuality.PERFECT
        if simple in (2, 4, 9, 11):
            return IntervalQuality.MAJOR
        if simple in (1, 3, 8, 10):
            return IntervalQuality.MINOR
        return IntervalQuality.DIMINISHED

    @property
    def is_consonant(self) -> bool:
        return self.simple in (0, 3, 4, 7, 8, 9)

    @property
    def is_perfect(self) -> bool:
        return self.simple in (0, 5, 7)

    @property
    def consonance_value(self) -> float:
        return CONSONANCE_VALUES[self.simple]

    @property
    def inverted(self) -> "Interval":
        # Unison inverts to the octave
        return Interval(12 - self.simple)

    def __add__(self, other: "Interval") -> "Interval":
        if not isinstance(other, Interval):
            return NotImplemented
        return Interval(self.semitones + other.semitones)

    def __sub__(self, other: "Interval") -> "Interval":
        # Always the unsigned distance, regardless of operand order
        if not isinstance(other, Interval):
            return NotImplemented
        return Interval(abs(self.semitones - other.semitones))

    def __str__(self) -> str:
        return f"{self.name} ({self.semitones} semitones)"


Interval.UNISON = Interval(0)
Interval.MINOR_SECOND = Interval(1)
Interval.MAJOR_SECOND = Interval(2)
Interval.MINOR_THIRD = Interval(3)
Interval.MAJOR_THIRD = Interval(4)
Interval.PERFECT_FOURTH = Interval(5)
Interval.TRITONE = Interval(6)
Interval.PERFECT_FIFTH = Interval(7)
Interval.MINOR_SIXTH = Interval(8)
Interval.MAJOR_SIXTH = Interval(9)
Interval.MINOR_SEVENTH = Interval(10)
Interval.MAJOR_SEVENTH = Interval(11)
Interval.OCTAVE = Interval(12)


def interval_label(semitones: int) -> str:
    """Display label for a signed semitone count."""
    return Interval(semitones).label


def degree_role(semitones: int) -> str:
    """Role token shared by octave-equivalent intervals."""
    return INTERVAL_LABELS[semitones % 12]


__all__ = [
    "A4_MIDI",
    "A4_HZ",
    "MIDDLE_C",
    "MIDI_MIN",
    "MIDI_MAX",
    "DEFAULT_OCTAVE",
    "SHARP_NOTE_NAMES",
    "FLAT_NOTE_NAMES",
    "FLAT_ROOTS",
    "INTERVAL_LABELS",
    "INTERVAL_NAMES",
    "FormatError",
    "RangeError",
    "Note",
    "Interval",
    "IntervalQuality",
    "midi_to_freq",
    "freq_to_midi",
    "midi_to_freqs",
    "should_use_flats",
    "check_midi",
    "pitch_class_name",
    "interval_label",
    "degree_role",
]
