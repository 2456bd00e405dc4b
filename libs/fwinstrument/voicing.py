"""Chord voicing search on a fretted instrument.

The search is a pipeline: generate every (string, fret) position whose pitch
class is a chord tone, group positions by voicing slot, then pick one position
per slot. Tie-breaks live in sort keys so the outcome never depends on
iteration order.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence, Union

import numpy as np

from fwcore.config import get_settings
from fwtheory.chords import ChordInversion, get_chord
from fwtheory.pitch import INTERVAL_LABELS, Note, check_midi, midi_to_freqs

logger = logging.getLogger(__name__)

MUTED = "x"

TabEntry = Union[int, str]


@dataclass(frozen=True)
class ChordTone:
    """One physical position that sounds a chord tone."""

    string_index: int
    fret_number: int
    midi_note: int
    interval_from_root: int
    is_root: bool
    voicing_position: int

    @property
    def interval_name(self) -> str:
        return INTERVAL_LABELS[self.interval_from_root % 12]


class Difficulty(str, Enum):
    EASY = "easy"
    HARD = "hard"
    VERY_HARD = "very_hard"
    IMPOSSIBLE = "impossible"


@dataclass(frozen=True)
class FingeringAnalysis:
    playable: bool
    difficulty: Difficulty
    reason: Optional[str] = None
    string_span: int = 0
    fret_span: int = 0
    strings: List[int] = field(default_factory=list)
    frets: List[int] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        data = asdict(self)
        data["difficulty"] = self.difficulty.value
        return data


@dataclass(frozen=True)
class ChordDiagram:
    tablature: List[TabEntry]
    start_fret: int
    fret_span: int
    muted_strings: List[int]
    open_strings: List[int]
    show_position_marker: bool

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


def _as_note(value: Union[Note, str]) -> Note:
    return value if isinstance(value, Note) else Note.parse(value)


def build_chord_voicing(
    root: Union[Note, str],
    octave: int,
    chord_type: str,
    inversion: Union[ChordInversion, int] = ChordInversion.ROOT,
    tuning: Sequence[Union[Note, str]] = (),
    max_frets: Optional[int] = None,
) -> List[ChordTone]:
    """Every position on the neck that sounds a tone of the chord.

    A position matches when its pitch class is one of the chord's pitch
    classes. ``voicing_position`` is the slot of that tone in the inversion's
    voicing (0 is the bass), so all positions of one chord tone share it.
    Unknown chords, an empty tuning or ``max_frets <= 0`` give an empty list.
    An octave written in ``root`` is replaced by ``octave``.

    Raises:
        FormatError: if the root or a tuning note is malformed.
        RangeError: if the root lands outside the MIDI range.
    """
    chord = get_chord(chord_type)
    if max_frets is None:
        max_frets = get_settings().FW_MAX_FRETS
    if chord is None or not tuning or max_frets <= 0:
        return []

    root_note = _as_note(root).with_octave(octave)
    check_midi(root_note.midi)
    open_strings = [_as_note(note) for note in tuning]

    voicing = chord.build_voicing(root_note, inversion)
    slots = {}
    for position, midi in enumerate(voicing):
        slots.setdefault((midi - root_note.midi) % 12, position)

    tones = [
        ChordTone(
            string_index=string_index,
            fret_number=fret,
            midi_note=open_note.midi + fret,
            interval_from_root=interval,
            is_root=interval == 0,
            voicing_position=slots[interval],
        )
        for string_index, open_note in enumerate(open_strings)
        for fret in range(max_frets + 1)
        if (interval := (open_note.midi + fret - root_note.midi) % 12) in slots
        and open_note.midi + fret <= 127
    ]
    logger.debug(
        "Voicing search: %s%s inversion=%d strings=%d candidates=%d",
        root_note.full_name,
        chord.symbol,
        int(inversion),
        len(open_strings),
        len(tones),
    )
    return tones


def _by_slot(candidates: Sequence[ChordTone]) -> Dict[int, List[ChordTone]]:
    groups: Dict[int, List[ChordTone]] = {}
    for tone in candidates:
        groups.setdefault(tone.voicing_position, []).append(tone)
    return groups


def get_optimal_fingering(candidates: Sequence[ChordTone]) -> List[ChordTone]:
    """One position per voicing slot: lowest fret, then lowest string index.

    Two slots may end up on the same string.
    """
    groups = _by_slot(candidates)
    return [
        min(groups[slot], key=lambda t: (t.fret_number, t.string_index))
        for slot in sorted(groups)
    ]


def analyze_fingering_difficulty(selected: Sequence[ChordTone]) -> FingeringAnalysis:
    """Classify a fingering by its string and fret spans (open strings count as fret 0)."""
    if not selected:
        return FingeringAnalysis(
            playable=False,
            difficulty=Difficulty.IMPOSSIBLE,
            reason="No valid fingering found",
        )

    settings = get_settings()
    strings = sorted({t.string_index for t in selected})
    frets = sorted({t.fret_number for t in selected})
    string_span = strings[-1] - strings[0] + 1
    fret_span = frets[-1] - frets[0] + 1

    if string_span <= settings.FW_EASY_SPAN and fret_span <= settings.FW_EASY_SPAN:
        difficulty, reason = Difficulty.EASY, None
    elif string_span <= settings.FW_HARD_SPAN and fret_span <= settings.FW_HARD_SPAN:
        difficulty, reason = Difficulty.HARD, "Requires significant finger stretch"
    else:
        difficulty, reason = Difficulty.VERY_HARD, "May not be physically playable"

    return FingeringAnalysis(
        playable=difficulty is not Difficulty.VERY_HARD,
        difficulty=difficulty,
        reason=reason,
        string_span=string_span,
        fret_span=fret_span,
        strings=strings,
        frets=frets,
    )


def get_voicing_tablature(selected: Sequence[ChordTone], string_count: int) -> List[TabEntry]:
    """Fret per string, ``"x"`` where nothing is played.

    When several positions share a string the lowest fret is shown.
    """
    tab: List[TabEntry] = [MUTED] * max(string_count, 0)
    for tone in sorted(selected, key=lambda t: t.fret_number, reverse=True):
        if 0 <= tone.string_index < len(tab):
            tab[tone.string_index] = tone.fret_number
    return tab


def generate_chord_diagram(selected: Sequence[ChordTone], string_count: int) -> ChordDiagram:
    """Diagram layout; position and span come from fretted notes only (0 if all open)."""
    tab = get_voicing_tablature(selected, string_count)
    frets = [t.fret_number for t in selected if t.fret_number > 0]
    start_fret = min(frets) if frets else 0
    fret_span = max(frets) - start_fret + 1 if frets else 0
    return ChordDiagram(
        tablature=tab,
        start_fret=start_fret,
        fret_span=fret_span,
        muted_strings=[i for i, entry in enumerate(tab) if entry == MUTED],
        open_strings=[i for i, entry in enumerate(tab) if entry == 0],
        show_position_marker=start_fret > 0,
    )


def generate_all_voicings(
    candidates: Sequence[ChordTone],
    max_stretch: int = 4,
) -> List[List[ChordTone]]:
    """Every fingering with one position per slot and at most one slot per string.

    Fretted notes (open strings excluded) must fit within ``max_stretch`` frets.
    """
    groups = _by_slot(candidates)
    if not groups:
        return []

    options = [
        sorted(groups[slot], key=lambda t: (t.fret_number, t.string_index))
        for slot in sorted(groups)
    ]
    voicings = []
    for combo in itertools.product(*options):
        if len({t.string_index for t in combo}) != len(combo):
            continue
        fretted = [t.fret_number for t in combo if t.fret_number > 0]
        if fretted and max(fretted) - min(fretted) + 1 > max_stretch:
            continue
        voicings.append(list(combo))
    return voicings


def rank_voicings(voicings: Sequence[Sequence[ChordTone]], string_count: int) -> List[List[ChordTone]]:
    """Order fingerings by fret span, then average fret, then muted strings."""

    def score(voicing: Sequence[ChordTone]):
        frets = np.array([t.fret_number for t in voicing], dtype=float)
        span = float(frets.max() - frets.min()) if frets.size else 0.0
        average = float(frets.mean()) if frets.size else 0.0
        muted = string_count - len({t.string_index for t in voicing})
        layout = tuple(sorted((t.string_index, t.fret_number) for t in voicing))
        return (span, average, muted, layout)

    return [list(v) for v in sorted(voicings, key=score)]


def voicing_frequencies(selected: Sequence[ChordTone]) -> np.ndarray:
    """Frequencies in Hz of the selected positions, lowest string first."""
    ordered = sorted(selected, key=lambda t: (t.string_index, t.fret_number))
    return midi_to_freqs([t.midi_note for t in ordered])


__all__ = [
    "MUTED",
    "ChordTone",
    "Difficulty",
    "FingeringAnalysis",
    "ChordDiagram",
    "build_chord_voicing",
    "get_optimal_fingering",
    "analyze_fingering_difficulty",
    "get_voicing_tablature",
    "generate_chord_diagram",
    "generate_all_voicings",
    "rank_voicings",
    "voicing_frequencies",
]
