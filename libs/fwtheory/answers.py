"""Quiz answer normalization and checking.

Answers arrive from the quiz layer either as a single id or as a collection
of ids. They are normalized once on entry so checking never has to branch
on runtime type.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Iterable, Optional, Union

from .chords import get_chord
from .pitch import Note
from .scales import get_scale


@dataclass(frozen=True)
class SingleAnswer:
    id: str


@dataclass(frozen=True)
class MultipleAnswer:
    ids: FrozenSet[str]


Answer = Union[SingleAnswer, MultipleAnswer]


def _answer_id(value: object) -> str:
    # Option objects from the quiz layer carry their id as an attribute
    return str(getattr(value, "id", value)).strip()


def normalize_answer(raw: object) -> Answer:
    """Turn a raw selection (id, option object, or collection of either) into an Answer."""
    if isinstance(raw, (SingleAnswer, MultipleAnswer)):
        return raw
    if isinstance(raw, (list, tuple, set, frozenset)):
        return MultipleAnswer(frozenset(_answer_id(item) for item in raw))
    return SingleAnswer(_answer_id(raw))


def answer_ids(answer: Answer) -> FrozenSet[str]:
    if isinstance(answer, SingleAnswer):
        return frozenset({answer.id})
    return answer.ids


def is_correct(selected: object, expected: object) -> bool:
    """Compare a learner selection with the expected answer, order-insensitively."""
    return answer_ids(normalize_answer(selected)) == answer_ids(normalize_answer(expected))


def _pitch_classes(notes: Iterable[Union[Note, str]]) -> FrozenSet[int]:
    return frozenset(
        (note if isinstance(note, Note) else Note.parse(note)).pitch_class for note in notes
    )


def expected_pitch_classes(
    root: str,
    scale: Optional[str] = None,
    chord_type: Optional[str] = None,
) -> FrozenSet[int]:
    """Pitch classes of a scale or chord on a root; empty when the name is unknown."""
    root_pc = Note.parse(root).pitch_class
    if scale is not None:
        found = get_scale(scale)
        intervals = found.intervals if found else ()
    else:
        found = get_chord(chord_type)
        intervals = found.intervals if found else ()
    return frozenset((root_pc + i) % 12 for i in intervals)


def check_note_selection(
    selected: Iterable[Union[Note, str]],
    root: str,
    scale: Optional[str] = None,
    chord_type: Optional[str] = None,
) -> bool:
    """True when the selected notes spell exactly the requested scale or chord.

    Octaves and enharmonic spelling are ignored. Unknown scale or chord names
    never match.

    Raises:
        FormatError: if a selected note or the root is malformed.
    """
    expected = expected_pitch_classes(root, scale=scale, chord_type=chord_type)
    if not expected:
        return False
    return _pitch_classes(selected) == expected


__all__ = [
    "Answer",
    "SingleAnswer",
    "MultipleAnswer",
    "normalize_answer",
    "answer_ids",
    "is_correct",
    "expected_pitch_classes",
    "check_note_selection",
]
