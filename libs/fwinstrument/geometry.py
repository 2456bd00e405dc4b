"""Instrument geometry: tuned fretboards, keyboards and the standard tuning catalog.

A geometry answers one question for the mapper and the optimizer: which MIDI
notes physically exist on the instrument, and where.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple, Union

from fwtheory.pitch import DEFAULT_OCTAVE, MIDI_MAX, MIDI_MIN, Note


class InstrumentType(str, Enum):
    GUITAR = "guitar"
    BASS = "bass"
    UKULELE = "ukulele"
    MANDOLIN = "mandolin"
    BANJO = "banjo"


# Open strings listed from the lowest-indexed string
STANDARD_TUNINGS: Dict[str, Tuple[str, ...]] = {
    "Guitar (6-string)": ("E2", "A2", "D3", "G3", "B3", "E4"),
    "Guitar (7-string)": ("B1", "E2", "A2", "D3", "G3", "B3", "E4"),
    "Guitar (8-string)": ("F#1", "B1", "E2", "A2", "D3", "G3", "B3", "E4"),
    "Bass (4-string)": ("E1", "A1", "D2", "G2"),
    "Bass (5-string)": ("B0", "E1", "A1", "D2", "G2"),
    "Bass (6-string)": ("B0", "E1", "A1", "D2", "G2", "C3"),
    "Ukulele": ("G4", "C4", "E4", "A4"),
    "Mandolin": ("G3", "D4", "A4", "E5"),
    "Banjo (5-string)": ("G4", "D3", "G3", "B3", "D4"),
    "Drop D": ("D2", "A2", "D3", "G3", "B3", "E4"),
    "Drop C": ("C2", "G2", "C3", "F3", "A3", "D4"),
    "Drop B": ("B1", "F#2", "B2", "E3", "G#3", "C#4"),
    "Open G": ("D2", "G2", "D3", "G3", "B3", "D4"),
    "Open D": ("D2", "A2", "D3", "F#3", "A3", "D4"),
    "Open E": ("E2", "B2", "E3", "G#3", "B3", "E4"),
    "DADGAD": ("D2", "A2", "D3", "G3", "A3", "D4"),
    "Nashville": ("E3", "A3", "D4", "G3", "B3", "E4"),
}

DEFAULT_TUNING = "Guitar (6-string)"


@dataclass(frozen=True)
class FretPosition:
    string_index: int
    fret_number: int
    midi: int

    @property
    def note(self) -> Note:
        return Note.from_midi(self.midi)


def _instrument_type(tuning_name: str) -> InstrumentType:
    lowered = tuning_name.lower()
    for instrument in (InstrumentType.BASS, InstrumentType.UKULELE, InstrumentType.MANDOLIN, InstrumentType.BANJO):
        if instrument.value in lowered:
            return instrument
    return InstrumentType.GUITAR


@dataclass(frozen=True)
class Tuning:
    """A named set of open strings."""

    name: str
    strings: Tuple[str, ...]

    @property
    def instrument_type(self) -> InstrumentType:
        return _instrument_type(self.name)

    @property
    def string_count(self) -> int:
        return len(self.strings)

    @property
    def string_notes(self) -> List[Note]:
        return [Note.parse(s) for s in self.strings]

    @property
    def lowest_note(self) -> Note:
        return min(self.string_notes, key=lambda n: n.midi)

    @property
    def highest_note(self) -> Note:
        return max(self.string_notes, key=lambda n: n.midi)

    @property
    def range(self) -> int:
        return self.highest_note.midi - self.lowest_note.midi

    def transpose(self, semitones: int) -> "Tuning":
        sign = "+" if semitones > 0 else ""
        return Tuning(
            name=f"{self.name} ({sign}{semitones})",
            strings=tuple(n.transpose(semitones).full_name for n in self.string_notes),
        )

    def fretboard(self, fret_end: int = 12, fret_start: int = 0) -> "Fretboard":
        return Fretboard(tuple(self.string_notes), fret_start=fret_start, fret_end=fret_end)


TUNINGS: Dict[str, Tuning] = {
    name: Tuning(name=name, strings=strings) for name, strings in STANDARD_TUNINGS.items()
}


def get_tuning(name: Optional[str]) -> Optional[Tuning]:
    if not name:
        return None
    return TUNINGS.get(name)


def tunings_for(instrument: InstrumentType) -> Dict[str, Tuning]:
    return {name: t for name, t in TUNINGS.items() if t.instrument_type == instrument}


@dataclass(frozen=True)
class Fretboard:
    """Open strings plus the inclusive fret window that is physically available."""

    tuning: Tuple[Note, ...]
    fret_start: int = 0
    fret_end: int = 12

    @classmethod
    def from_names(cls, strings: Sequence[str], fret_start: int = 0, fret_end: int = 12) -> "Fretboard":
        return cls(tuple(Note.parse(s) for s in strings), fret_start=fret_start, fret_end=fret_end)

    @property
    def string_count(self) -> int:
        return len(self.tuning)

    @property
    def frets(self) -> range:
        return range(max(self.fret_start, 0), self.fret_end + 1)

    def positions(self) -> List[FretPosition]:
        """Every in-range (string, fret) position, string-major then fret order."""
        return [
            FretPosition(string_index, fret, midi)
            for string_index, open_note in enumerate(self.tuning)
            for fret in self.frets
            if MIDI_MIN <= (midi := open_note.midi + fret) <= MIDI_MAX
        ]

    def positions_for_midi(self, midi: int) -> List[FretPosition]:
        return [p for p in self.positions() if p.midi == midi]

    def playable_midi(self) -> FrozenSet[int]:
        return frozenset(p.midi for p in self.positions())

    def contains(self, midi: int) -> bool:
        return any(
            (midi - open_note.midi) in self.frets for open_note in self.tuning
        )


@dataclass(frozen=True)
class Keyboard:
    """A contiguous run of keys starting at ``start_note``."""

    start_note: Note
    key_count: int = 25

    @classmethod
    def from_name(cls, start_note: str, key_count: int = 25) -> "Keyboard":
        return cls(Note.parse(start_note), key_count=key_count)

    @property
    def start_midi(self) -> int:
        return self.start_note.midi

    @property
    def end_midi(self) -> int:
        return min(self.start_midi + self.key_count - 1, MIDI_MAX)

    def playable_midi(self) -> FrozenSet[int]:
        return frozenset(range(self.start_midi, self.end_midi + 1))

    def contains(self, midi: int) -> bool:
        return self.key_count > 0 and self.start_midi <= midi <= self.end_midi


Geometry = Union[Fretboard, Keyboard]


def default_starting_octave(root: str, tuning: Sequence[Note]) -> int:
    """Octave of the first occurrence of ``root`` at or above the lowest open string."""
    if not tuning:
        return DEFAULT_OCTAVE
    root_pc = Note.parse(root).pitch_class
    lowest = min(tuning, key=lambda n: n.midi)
    return Note.from_midi(lowest.midi + (root_pc - lowest.pitch_class) % 12).octave


__all__ = [
    "InstrumentType",
    "STANDARD_TUNINGS",
    "DEFAULT_TUNING",
    "TUNINGS",
    "FretPosition",
    "Tuning",
    "get_tuning",
    "tunings_for",
    "Fretboard",
    "Keyboard",
    "Geometry",
    "default_starting_octave",
]
