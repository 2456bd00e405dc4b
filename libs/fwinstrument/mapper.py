"""Instrument mapper: turns a selection into a highlight map on a concrete instrument.

A highlight map is ``{midi: role}`` where the role is the degree label of the
note relative to the selection root (``"R"``, ``"♭3"``, ``"5"``, ...). Maps only
ever contain MIDI values the instrument can physically produce.

Every function here is a pure function of an ``InstrumentConfig``; updates
return new configs via ``dataclasses.replace``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Optional

from fwcore.config import get_settings
from fwtheory.chords import ChordInversion, get_chord
from fwtheory.pitch import MIDI_MAX, MIDI_MIN, Note, degree_role, interval_label
from fwtheory.scales import get_scale

from .geometry import Fretboard, Geometry, Keyboard

logger = logging.getLogger(__name__)

HighlightMap = Dict[int, str]

WHITE_KEY_PITCH_CLASSES = frozenset({0, 2, 4, 5, 7, 9, 11})


class ViewMode(str, Enum):
    INTERVALS = "intervals"
    SCALES = "scales"
    CHORD_INVERSIONS = "chord_inversions"
    OPEN_CHORDS = "open_chords"
    BARRE_CHORDS = "barre_chords"
    ADVANCED_CHORDS = "advanced_chords"


@dataclass(frozen=True)
class InstrumentConfig:
    """Everything the mapper needs to know about one instrument view."""

    root: str
    geometry: Geometry
    view_mode: ViewMode = ViewMode.SCALES
    selected_octaves: FrozenSet[int] = field(default_factory=frozenset)
    selected_intervals: FrozenSet[int] = field(default_factory=frozenset)
    scale: str = "Major"
    mode_index: int = 0
    chord_type: str = "major"
    chord_inversion: ChordInversion = ChordInversion.ROOT
    show_octave: bool = True
    show_additional_octaves: bool = False

    @property
    def reference_octave(self) -> int:
        """Lowest selected octave, or the configured default when none is selected."""
        if self.selected_octaves:
            return min(self.selected_octaves)
        return get_settings().FW_DEFAULT_OCTAVE

    @property
    def octaves(self) -> List[int]:
        return sorted(self.selected_octaves) or [self.reference_octave]

    @property
    def root_note(self) -> Note:
        return Note.parse(self.root)

    def root_midi(self, octave: Optional[int] = None) -> int:
        """MIDI number of the root in an octave; may lie outside 0..127."""
        octave = self.reference_octave if octave is None else octave
        return (octave + 1) * 12 + self.root_note.pitch_class


def _in_range(midi: int, playable: FrozenSet[int]) -> bool:
    return MIDI_MIN <= midi <= MIDI_MAX and midi in playable


def scale_highlight_map(config: InstrumentConfig) -> HighlightMap:
    """Scale (or mode) notes for every selected octave.

    Roles are relative to the mode root. Unknown scales give an empty map.
    """
    scale = get_scale(config.scale)
    if scale is None:
        return {}

    intervals = scale.get_mode_intervals(config.mode_index)
    if not config.show_octave:
        intervals = intervals[:-1]
    mode_offset = scale.intervals[config.mode_index % scale.length]
    playable = config.geometry.playable_midi()

    highlights: HighlightMap = {}
    for octave in config.octaves:
        mode_root = config.root_midi(octave) + mode_offset
        for interval in intervals:
            midi = mode_root + interval
            if _in_range(midi, playable):
                highlights.setdefault(midi, degree_role(interval))
    return highlights


def chord_highlight_map(config: InstrumentConfig) -> HighlightMap:
    """Chord voicing for the selected inversion, rooted in the reference octave."""
    chord = get_chord(config.chord_type)
    if chord is None:
        return {}

    root_midi = config.root_midi()
    if not MIDI_MIN <= root_midi <= MIDI_MAX:
        return {}
    voicing = chord.build_voicing(Note.from_midi(root_midi), config.chord_inversion)

    shifts = (0, -12, 12) if config.show_additional_octaves else (0,)
    playable = config.geometry.playable_midi()

    highlights: HighlightMap = {}
    for shift in shifts:
        for tone in voicing:
            midi = tone + shift
            if _in_range(midi, playable):
                highlights.setdefault(midi, degree_role(midi - root_midi))
    return highlights


def interval_highlight_map(config: InstrumentConfig) -> HighlightMap:
    """Signed intervals from the root in the reference octave.

    Candidates the instrument cannot produce are dropped, however large or
    negative the interval.
    """
    if not config.selected_intervals:
        return {}

    reference_midi = config.root_midi()
    playable = config.geometry.playable_midi()
    return {
        reference_midi + interval: degree_role(interval)
        for interval in sorted(config.selected_intervals)
        if _in_range(reference_midi + interval, playable)
    }


def get_highlight_map(config: InstrumentConfig) -> HighlightMap:
    """Dispatch on view mode. Unsupported chord-position modes give an empty map."""
    if config.view_mode is ViewMode.SCALES:
        highlights = scale_highlight_map(config)
    elif config.view_mode is ViewMode.INTERVALS:
        highlights = interval_highlight_map(config)
    elif config.view_mode is ViewMode.CHORD_INVERSIONS:
        highlights = chord_highlight_map(config)
    else:
        highlights = {}
    logger.debug(
        "Highlight map with %d notes",
        len(highlights),
        extra={"view_mode": config.view_mode.value, "root_name": config.root},
    )
    return highlights


def rebase_octaves(config: InstrumentConfig, new_octaves: Iterable[int]) -> InstrumentConfig:
    """Change the selected octaves while keeping the same absolute pitches highlighted.

    In interval mode the intervals are re-expressed against the new reference
    octave, so ``reference + interval`` yields the same MIDI numbers before and
    after. Other modes only swap the octave set.
    """
    new_octaves = frozenset(new_octaves)
    if config.view_mode is not ViewMode.INTERVALS:
        return replace(config, selected_octaves=new_octaves)
    return _with_octaves(config, new_octaves)


def _with_octaves(config: InstrumentConfig, new_octaves: FrozenSet[int]) -> InstrumentConfig:
    updated = replace(config, selected_octaves=new_octaves)
    shift = config.root_midi() - updated.root_midi()
    if shift == 0 or not config.selected_intervals:
        return updated

    intervals = frozenset(interval + shift for interval in config.selected_intervals)
    logger.debug(
        "Rebased %s from octave %d to %d: intervals %s -> %s",
        config.root,
        config.reference_octave,
        updated.reference_octave,
        sorted(config.selected_intervals),
        sorted(intervals),
    )
    return replace(updated, selected_intervals=intervals)


def toggle_interval(config: InstrumentConfig, midi: int) -> InstrumentConfig:
    """Apply a tap on ``midi`` in interval mode.

    With nothing selected the tapped note becomes the new root. Otherwise the
    tapped interval is removed if present, or added along with its octave.
    Adding an octave rebases the existing intervals, so notes already
    highlighted keep their pitch.
    """
    tapped = Note.from_midi(midi, prefer_flats=config.root_note.prefer_flats)

    if not config.selected_intervals:
        return replace(
            config,
            root=tapped.name,
            selected_intervals=frozenset({0}),
            selected_octaves=frozenset({tapped.octave}),
        )

    interval = midi - config.root_midi()
    if interval in config.selected_intervals:
        return replace(config, selected_intervals=config.selected_intervals - {interval})

    rebased = _with_octaves(config, config.selected_octaves | {tapped.octave})
    return replace(
        rebased,
        selected_intervals=rebased.selected_intervals | {midi - rebased.root_midi()},
    )


def tap_note(config: InstrumentConfig, midi: int) -> InstrumentConfig:
    """Handle a tap in any view mode; scale and chord views re-root on the tapped note."""
    if config.view_mode is ViewMode.INTERVALS:
        return toggle_interval(config, midi)
    tapped = Note.from_midi(midi, prefer_flats=config.root_note.prefer_flats)
    return replace(config, root=tapped.name)


@dataclass(frozen=True)
class KeyDescription:
    key_index: int
    midi: int
    note_name: str
    octave: int
    is_white_key: bool
    is_highlighted: bool
    role: Optional[str] = None
    interval_label: Optional[str] = None

    @property
    def display_label(self) -> str:
        return self.interval_label or self.note_name


def describe_keys(config: InstrumentConfig) -> List[KeyDescription]:
    """Per-key records for a keyboard view, lowest key first.

    Fretboards have no key layout and give an empty list.
    """
    geometry = config.geometry
    if not isinstance(geometry, Keyboard):
        return []

    highlights = get_highlight_map(config)
    prefer_flats = config.root_note.prefer_flats
    reference_midi = config.root_midi()

    keys = []
    for index, midi in enumerate(sorted(geometry.playable_midi())):
        note = Note.from_midi(midi, prefer_flats=prefer_flats)
        role = highlights.get(midi)
        label = None
        if role is not None:
            label = interval_label(midi - reference_midi) if config.view_mode is ViewMode.INTERVALS else role
        keys.append(
            KeyDescription(
                key_index=index,
                midi=midi,
                note_name=note.name,
                octave=note.octave,
                is_white_key=note.pitch_class in WHITE_KEY_PITCH_CLASSES,
                is_highlighted=role is not None,
                role=role,
                interval_label=label,
            )
        )
    return keys


def fret_highlights(config: InstrumentConfig) -> Dict[int, Dict[int, str]]:
    """Highlight map laid out per string: ``{string_index: {fret: role}}``."""
    geometry = config.geometry
    if not isinstance(geometry, Fretboard):
        return {}

    highlights = get_highlight_map(config)
    layout: Dict[int, Dict[int, str]] = {}
    for position in geometry.positions():
        role = highlights.get(position.midi)
        if role is not None:
            layout.setdefault(position.string_index, {})[position.fret_number] = role
    return layout


__all__ = [
    "HighlightMap",
    "ViewMode",
    "InstrumentConfig",
    "scale_highlight_map",
    "chord_highlight_map",
    "interval_highlight_map",
    "get_highlight_map",
    "rebase_octaves",
    "toggle_interval",
    "tap_note",
    "KeyDescription",
    "describe_keys",
    "fret_highlights",
]
