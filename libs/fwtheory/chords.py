"""Chord catalog, inversions and voicing construction.

Provides chord structures (intervals from root in semitones), inversion
handling and helpers used to validate learner-selected chord tones.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Iterable, List, Optional, Protocol, Tuple, Union

from .pitch import Note, pitch_class_name
from .scales import validate_intervals


class ChordInversion(IntEnum):
    """Chord inversions; the value is the index of the bass chord tone."""

    ROOT = 0
    FIRST = 1
    SECOND = 2
    THIRD = 3
    FOURTH = 4
    FIFTH = 5
    SIXTH = 6

    @property
    def display_name(self) -> str:
        if self is ChordInversion.ROOT:
            return "Root Position"
        return f"{self.name.title()} Inversion"


class HasIntervalFromRoot(Protocol):
    interval_from_root: int


@dataclass(frozen=True)
class Chord:
    """A chord type: symbol, display name, category and intervals from the root."""

    type: str
    symbol: str
    display_name: str
    category: str
    intervals: Tuple[int, ...]

    def __post_init__(self) -> None:
        validate_intervals(self.type, self.intervals, min_size=2)

    @property
    def size(self) -> int:
        return len(self.intervals)

    @property
    def pitch_classes(self) -> List[int]:
        return [i % 12 for i in self.intervals]

    @property
    def available_inversions(self) -> List[ChordInversion]:
        return list(ChordInversion)[: self.size]

    def get_symbol(self, root: Union[Note, str]) -> str:
        root_name = root.name if isinstance(root, Note) else root
        return f"{root_name}{self.symbol}"

    def get_notes_for_root(self, root: Note) -> List[Note]:
        return [root.transpose(interval) for interval in self.intervals]

    def slot_for_interval(self, interval: int) -> Optional[int]:
        """Index of the chord tone matching an interval (mod 12), if any."""
        pcs = self.pitch_classes
        pc = interval % 12
        return pcs.index(pc) if pc in pcs else None

    def build_voicing(
        self,
        root: Note,
        inversion: Union[ChordInversion, int] = ChordInversion.ROOT,
    ) -> List[int]:
        """Absolute MIDI pitches of the chord, ascending, with the inversion's tone in the bass.

        Out-of-range inversions fall back to root position.
        """
        bass_index = int(inversion)
        if not 0 <= bass_index < self.size:
            bass_index = 0

        tones = [root.midi + interval for interval in self.intervals]
        bass = tones[bass_index]

        voicing = []
        for tone in tones:
            while tone < bass:
                tone += 12
            voicing.append(tone)
        return sorted(voicing)

    def __str__(self) -> str:
        return self.display_name


def _chord(type_: str, symbol: str, display_name: str, intervals: Tuple[int, ...], category: str) -> Chord:
    return Chord(type=type_, symbol=symbol, display_name=display_name, category=category, intervals=intervals)


_CHORD_DEFINITIONS: List[Chord] = [
    # Basic triads
    _chord("major", "", "Major", (0, 4, 7), "Basic Triads"),
    _chord("minor", "m", "Minor", (0, 3, 7), "Basic Triads"),
    _chord("diminished", "°", "Diminished", (0, 3, 6), "Basic Triads"),
    _chord("augmented", "+", "Augmented", (0, 4, 8), "Basic Triads"),
    # Suspended
    _chord("sus2", "sus2", "Suspended 2nd", (0, 2, 7), "Suspended"),
    _chord("sus4", "sus4", "Suspended 4th", (0, 5, 7), "Suspended"),
    _chord("7sus2", "7sus2", "7 Suspended 2nd", (0, 2, 7, 10), "Suspended"),
    _chord("7sus4", "7sus4", "7 Suspended 4th", (0, 5, 7, 10), "Suspended"),
    # Seventh chords
    _chord("major7", "maj7", "Major 7th", (0, 4, 7, 11), "Seventh Chords"),
    _chord("minor7", "m7", "Minor 7th", (0, 3, 7, 10), "Seventh Chords"),
    _chord("dominant7", "7", "Dominant 7th", (0, 4, 7, 10), "Seventh Chords"),
    _chord("diminished7", "°7", "Diminished 7th", (0, 3, 6, 9), "Seventh Chords"),
    _chord("half-diminished7", "ø7", "Half Diminished 7th", (0, 3, 6, 10), "Seventh Chords"),
    _chord("augmented7", "+7", "Augmented 7th", (0, 4, 8, 10), "Seventh Chords"),
    _chord("augmented-major7", "+maj7", "Augmented Major 7th", (0, 4, 8, 11), "Seventh Chords"),
    _chord("minor-major7", "m(maj7)", "Minor Major 7th", (0, 3, 7, 11), "Seventh Chords"),
    # Sixth chords
    _chord("major6", "6", "Major 6th", (0, 4, 7, 9), "Sixth Chords"),
    _chord("minor6", "m6", "Minor 6th", (0, 3, 7, 9), "Sixth Chords"),
    _chord("6/9", "6/9", "6/9", (0, 4, 7, 9, 14), "Sixth Chords"),
    _chord("m6/9", "m6/9", "Minor 6/9", (0, 3, 7, 9, 14), "Sixth Chords"),
    # Add chords
    _chord("add9", "add9", "Add 9th", (0, 4, 7, 14), "Add Chords"),
    _chord("add11", "add11", "Add 11th", (0, 4, 7, 17), "Add Chords"),
    _chord("add13", "add13", "Add 13th", (0, 4, 7, 21), "Add Chords"),
    _chord("madd9", "m(add9)", "Minor Add 9th", (0, 3, 7, 14), "Add Chords"),
    _chord("madd11", "m(add11)", "Minor Add 11th", (0, 3, 7, 17), "Add Chords"),
    _chord("add4", "add4", "Add 4th", (0, 4, 5, 7), "Add Chords"),
    # Extended (9ths)
    _chord("major9", "maj9", "Major 9th", (0, 4, 7, 11, 14), "Extended (9ths)"),
    _chord("minor9", "m9", "Minor 9th", (0, 3, 7, 10, 14), "Extended (9ths)"),
    _chord("dominant9", "9", "Dominant 9th", (0, 4, 7, 10, 14), "Extended (9ths)"),
    _chord("9sus4", "9sus4", "9 Suspended 4th", (0, 5, 7, 10, 14), "Extended (9ths)"),
    _chord("7b9", "7♭9", "7 Flat 9", (0, 4, 7, 10, 13), "Extended (9ths)"),
    _chord("7#9", "7♯9", "7 Sharp 9", (0, 4, 7, 10, 15), "Extended (9ths)"),
    _chord("maj7#9", "maj7♯9", "Major 7 Sharp 9", (0, 4, 7, 11, 15), "Extended (9ths)"),
    # Extended (11ths)
    _chord("major11", "maj11", "Major 11th", (0, 4, 7, 11, 14, 17), "Extended (11ths)"),
    _chord("minor11", "m11", "Minor 11th", (0, 3, 7, 10, 14, 17), "Extended (11ths)"),
    _chord("dominant11", "11", "Dominant 11th", (0, 4, 7, 10, 14, 17), "Extended (11ths)"),
    _chord("7#11", "7♯11", "7 Sharp 11", (0, 4, 7, 10, 18), "Extended (11ths)"),
    _chord("maj7#11", "maj7♯11", "Major 7 Sharp 11", (0, 4, 7, 11, 18), "Extended (11ths)"),
    _chord("m7b5add11", "m7♭5(add11)", "Minor 7 Flat 5 Add 11", (0, 3, 6, 10, 17), "Extended (11ths)"),
    # Extended (13ths)
    _chord("major13", "maj13", "Major 13th", (0, 4, 7, 11, 14, 17, 21), "Extended (13ths)"),
    _chord("minor13", "m13", "Minor 13th", (0, 3, 7, 10, 14, 17, 21), "Extended (13ths)"),
    _chord("dominant13", "13", "Dominant 13th", (0, 4, 7, 10, 14, 17, 21), "Extended (13ths)"),
    _chord("7b13", "7♭13", "7 Flat 13", (0, 4, 7, 10, 20), "Extended (13ths)"),
    # Power chords
    _chord("power-chord", "5", "Power Chord (5th)", (0, 7), "Power Chords"),
    _chord("power-sus2", "sus2(no5)", "Power Sus2", (0, 2), "Power Chords"),
    _chord("power-sus4", "5sus4", "Power Sus4", (0, 5, 7), "Power Chords"),
    # Altered chords
    _chord("7alt", "7alt", "7 Altered", (0, 4, 7, 10, 13, 15), "Altered Chords"),
    _chord("7b5", "7♭5", "7 Flat 5", (0, 4, 6, 10), "Altered Chords"),
    _chord("7#5", "7♯5", "7 Sharp 5", (0, 4, 8, 10), "Altered Chords"),
    _chord("maj7b5", "maj7♭5", "Major 7 Flat 5", (0, 4, 6, 11), "Altered Chords"),
    _chord("maj7#5", "maj7♯5", "Major 7 Sharp 5", (0, 4, 8, 11), "Altered Chords"),
    _chord("7b9b13", "7♭9♭13", "7 Flat 9 Flat 13", (0, 4, 7, 10, 13, 20), "Altered Chords"),
    _chord("7#9b13", "7♯9♭13", "7 Sharp 9 Flat 13", (0, 4, 7, 10, 15, 20), "Altered Chords"),
    # Jazz chords
    _chord("maj7#5#11", "maj7♯5♯11", "Major 7 Sharp 5 Sharp 11", (0, 4, 8, 11, 18), "Jazz Chords"),
    _chord("m7b9", "m7♭9", "Minor 7 Flat 9", (0, 3, 7, 10, 13), "Jazz Chords"),
    _chord("dim7add9", "°7(add9)", "Diminished 7 Add 9", (0, 3, 6, 9, 14), "Jazz Chords"),
    _chord("maj9#11", "maj9♯11", "Major 9 Sharp 11", (0, 4, 7, 11, 14, 18), "Jazz Chords"),
    _chord("m11b5", "m11♭5", "Minor 11 Flat 5", (0, 3, 6, 10, 14, 17), "Jazz Chords"),
    # The suspended 4th already is the 11th
    _chord("13sus4", "13sus4", "13 Suspended 4th", (0, 5, 7, 10, 14, 21), "Jazz Chords"),
    # Quartal chords
    _chord("quartal3", "Q3", "Quartal Triad", (0, 5, 10), "Quartal Chords"),
    _chord("quartal4", "Q4", "Quartal 4-note", (0, 5, 10, 15), "Quartal Chords"),
    _chord("quartal5", "Q5", "Quartal 5-note", (0, 5, 10, 15, 20), "Quartal Chords"),
    _chord("so-what", "SW", "So What Chord", (0, 5, 10, 15, 19), "Quartal Chords"),
    # Cluster chords
    _chord("cluster-maj", "CMaj", "Major Cluster", (0, 2, 4), "Cluster Chords"),
    _chord("cluster-min", "Cmin", "Minor Cluster", (0, 1, 3), "Cluster Chords"),
    _chord("cluster-chromatic", "CChr", "Chromatic Cluster", (0, 1, 2), "Cluster Chords"),
    # Polychords
    _chord("major-over-major", "|Maj", "Major over Major", (0, 4, 7, 14, 18, 21), "Polychords"),
    _chord("minor-over-major", "m|Maj", "Minor over Major", (0, 4, 7, 15, 18, 22), "Polychords"),
    # Special/exotic
    _chord("mystic", "Mys", "Mystic Chord", (0, 6, 10, 16, 21, 26), "Special/Exotic"),
    _chord("elektra", "Elek", "Elektra Chord", (0, 7, 9, 13, 16), "Special/Exotic"),
    _chord("dream", "Dream", "Dream Chord", (0, 5, 6, 7), "Special/Exotic"),
    _chord("farben", "Farb", "Farben Chord", (0, 8, 11, 16, 21), "Special/Exotic"),
    _chord("tristan", "Trist", "Tristan Chord", (0, 3, 6, 10), "Special/Exotic"),
    _chord("petrushka", "Petr", "Petrushka Chord", (0, 1, 4, 6, 7, 10), "Special/Exotic"),
    _chord("viennese-trichord", "VT", "Viennese Trichord", (0, 1, 6), "Special/Exotic"),
    # Omit chords
    _chord("major-no3", "(no3)", "Major (no 3rd)", (0, 7), "Omit Chords"),
    _chord("major7-no3", "maj7(no3)", "Major 7 (no 3rd)", (0, 7, 11), "Omit Chords"),
    _chord("major7-no5", "maj7(no5)", "Major 7 (no 5th)", (0, 4, 11), "Omit Chords"),
    _chord("7-no3", "7(no3)", "7 (no 3rd)", (0, 7, 10), "Omit Chords"),
    _chord("9-no3", "9(no3)", "9 (no 3rd)", (0, 7, 10, 14), "Omit Chords"),
    _chord("11-no5", "11(no5)", "11 (no 5th)", (0, 4, 10, 14, 17), "Omit Chords"),
    # Slash chords
    _chord("major-b3-bass", "/♭3", "Major/♭3 Bass", (0, 3, 4, 7), "Slash Chords"),
    _chord("minor-b7-bass", "m/♭7", "Minor/♭7 Bass", (0, 3, 7, 10), "Slash Chords"),
]

CHORDS: Dict[str, Chord] = {chord.type: chord for chord in _CHORD_DEFINITIONS}

COMMON_CHORD_TYPES = (
    "major",
    "minor",
    "major7",
    "minor7",
    "dominant7",
    "sus2",
    "sus4",
    "add9",
    "power-chord",
)


def get_chord(chord_type: Optional[str]) -> Optional[Chord]:
    """Look up a chord by type. Unknown types give None."""
    if not chord_type:
        return None
    return CHORDS.get(chord_type)


def chord_types() -> List[str]:
    return list(CHORDS)


def common_chords() -> List[Chord]:
    return [CHORDS[t] for t in COMMON_CHORD_TYPES]


def chords_by_category() -> Dict[str, List[Chord]]:
    result: Dict[str, List[Chord]] = {}
    for chord in CHORDS.values():
        result.setdefault(chord.category, []).append(chord)
    return result


def _as_root(root: Union[Note, str], octave: int = 3) -> Note:
    return root if isinstance(root, Note) else Note.parse(f"{root.strip()}{octave}")


def chord_symbol(root: str, chord_type: str) -> str:
    chord = get_chord(chord_type)
    return chord.get_symbol(root) if chord else root


def chord_display_name(
    root: str,
    chord_type: str,
    inversion: Union[ChordInversion, int] = ChordInversion.ROOT,
) -> str:
    """Chord symbol with slash bass for inversions, e.g. ``C/E``."""
    base = chord_symbol(root, chord_type)
    chord = get_chord(chord_type)
    index = int(inversion)
    if chord is None or index <= 0 or index >= chord.size:
        return base

    root_note = _as_root(root)
    bass_pc = root_note.pitch_class + chord.intervals[index]
    return f"{base}/{pitch_class_name(bass_pc, root_note.prefer_flats)}"


def chord_voicing_names(
    root: str,
    octave: int,
    chord_type: str,
    inversion: Union[ChordInversion, int] = ChordInversion.ROOT,
) -> List[str]:
    chord = get_chord(chord_type)
    if chord is None:
        return []
    root_note = _as_root(root, octave)
    return [
        Note.from_midi(midi, prefer_flats=root_note.prefer_flats).full_name
        for midi in chord.build_voicing(root_note, inversion)
        if 0 <= midi <= 127
    ]


def analyze_chord(notes: Iterable[Union[Note, str]]) -> Optional[str]:
    """Name the chord formed by a set of notes, trying each pitch class as root."""
    pitch_classes = sorted(
        {(n if isinstance(n, Note) else Note.parse(n)).pitch_class for n in notes}
    )
    if not pitch_classes:
        return None

    for root_pc in pitch_classes:
        intervals = sorted((pc - root_pc) % 12 for pc in pitch_classes)
        for chord in CHORDS.values():
            if sorted(chord.pitch_classes) == intervals:
                return chord.get_symbol(pitch_class_name(root_pc))
    return None


def is_voicing_complete(selected: Iterable[HasIntervalFromRoot], chord_type: str) -> bool:
    """True when every chord tone is represented by at least one selected position."""
    chord = get_chord(chord_type)
    if chord is None:
        return False
    present = {tone.interval_from_root % 12 for tone in selected}
    return all(pc in present for pc in chord.pitch_classes)


def get_missing_chord_tones(
    selected: Iterable[HasIntervalFromRoot],
    root: Union[Note, str],
    chord_type: str,
) -> List[str]:
    """Names of chord tones absent from the selection, spelled like the root."""
    chord = get_chord(chord_type)
    if chord is None:
        return []
    root_note = _as_root(root)
    present = {tone.interval_from_root % 12 for tone in selected}
    return [
        pitch_class_name(root_note.pitch_class + pc, root_note.prefer_flats)
        for pc in chord.pitch_classes
        if pc not in present
    ]


__all__ = [
    "Chord",
    "ChordInversion",
    "CHORDS",
    "COMMON_CHORD_TYPES",
    "get_chord",
    "chord_types",
    "common_chords",
    "chords_by_category",
    "chord_symbol",
    "chord_display_name",
    "chord_voicing_names",
    "analyze_chord",
    "is_voicing_complete",
    "get_missing_chord_tones",
]
