"""Scale catalog and mode rotation.

Scales are named interval sets (semitones from the root). Modes are derived
on demand by rotating a scale's intervals; they are never stored.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .pitch import INTERVAL_LABELS, Note


def validate_intervals(name: str, intervals: Tuple[int, ...], min_size: int = 1) -> None:
    """Check an interval set is ascending, rooted at 0 and free of duplicate pitch classes.

    Raises:
        ValueError: if the definition breaks any of those rules.
    """
    if len(intervals) < min_size:
        raise ValueError(f"{name}: needs at least {min_size} intervals")
    if intervals[0] != 0:
        raise ValueError(f"{name}: intervals must start at 0")
    if any(b <= a for a, b in zip(intervals, intervals[1:])):
        raise ValueError(f"{name}: intervals must be strictly increasing")
    if len({i % 12 for i in intervals}) != len(intervals):
        raise ValueError(f"{name}: duplicate pitch classes")


@dataclass(frozen=True)
class Scale:
    """A named scale with optional names for each of its modes."""

    name: str
    intervals: Tuple[int, ...]
    mode_names: Optional[Tuple[str, ...]] = None

    def __post_init__(self) -> None:
        validate_intervals(self.name, self.intervals)

    @property
    def length(self) -> int:
        return len(self.intervals)

    def __len__(self) -> int:
        return self.length

    @property
    def degrees(self) -> List[str]:
        """Degree labels, e.g. ['R', '2', '♭3', ...]."""
        return [INTERVAL_LABELS[i % 12] for i in self.intervals]

    def contains_pitch_class(self, root_pc: int, query_pc: int) -> bool:
        return (query_pc - root_pc) % 12 in {i % 12 for i in self.intervals}

    def get_notes_for_root(self, root: Note) -> List[Note]:
        """Scale notes from the root through the octave above it."""
        return [root.transpose(interval) for interval in (*self.intervals, 12)]

    def get_mode_intervals(self, mode_index: int) -> List[int]:
        """Intervals of a mode, closed by the compound octave (length + 1 items)."""
        mode = mode_index % self.length
        offset = self.intervals[mode]
        rotated = [
            (self.intervals[(i + mode) % self.length] - offset) % 12
            for i in range(self.length)
        ]
        return rotated + [12]

    def get_mode_root(self, root: Note, mode_index: int) -> Note:
        return root.transpose(self.intervals[mode_index % self.length])

    def get_mode_name(self, mode_index: int) -> str:
        mode = mode_index % self.length
        if self.mode_names and mode < len(self.mode_names):
            return self.mode_names[mode]
        return f"Mode {mode + 1}"

    def available_modes(self) -> List[str]:
        return [self.get_mode_name(i) for i in range(self.length)]

    def mode(self, mode_index: int) -> "Scale":
        """The mode as a scale of its own."""
        return Scale(
            name=self.get_mode_name(mode_index),
            intervals=tuple(self.get_mode_intervals(mode_index)[:-1]),
        )

    def __str__(self) -> str:
        return self.name


_SCALE_DEFINITIONS: List[Scale] = [
    # Common scales
    Scale("Chromatic", (0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11)),
    Scale(
        "Major",
        (0, 2, 4, 5, 7, 9, 11),
        ("Ionian", "Dorian", "Phrygian", "Lydian", "Mixolydian", "Aeolian", "Locrian"),
    ),
    Scale(
        "Natural Minor",
        (0, 2, 3, 5, 7, 8, 10),
        ("Natural Minor", "Locrian", "Ionian", "Dorian", "Phrygian", "Lydian", "Mixolydian"),
    ),
    Scale(
        "Harmonic Minor",
        (0, 2, 3, 5, 7, 8, 11),
        (
            "Harmonic Minor",
            "Locrian ♯6",
            "Ionian ♯5",
            "Dorian ♯4",
            "Phrygian Dominant",
            "Lydian ♯9",
            "Altered Dominant",
        ),
    ),
    Scale(
        "Melodic Minor",
        (0, 2, 3, 5, 7, 9, 11),
        (
            "Melodic Minor",
            "Dorian ♭2",
            "Lydian Augmented",
            "Lydian Dominant",
            "Mixolydian ♭6",
            "Locrian ♯2",
            "Altered",
        ),
    ),
    # Pentatonic scales
    Scale("Major Pentatonic", (0, 2, 4, 7, 9)),
    Scale("Minor Pentatonic", (0, 3, 5, 7, 10)),
    Scale("Blues", (0, 3, 5, 6, 7, 10)),
    # Church modes
    Scale("Dorian", (0, 2, 3, 5, 7, 9, 10)),
    Scale("Phrygian", (0, 1, 3, 5, 7, 8, 10)),
    Scale("Lydian", (0, 2, 4, 6, 7, 9, 11)),
    Scale("Mixolydian", (0, 2, 4, 5, 7, 9, 10)),
    Scale("Aeolian", (0, 2, 3, 5, 7, 8, 10)),
    Scale("Locrian", (0, 1, 3, 5, 6, 8, 10)),
    # Jazz scales
    Scale("Bebop Dominant", (0, 2, 4, 5, 7, 9, 10, 11)),
    Scale("Bebop Major", (0, 2, 4, 5, 7, 8, 9, 11)),
    Scale("Altered", (0, 1, 3, 4, 6, 8, 10)),
    Scale("Whole Tone", (0, 2, 4, 6, 8, 10)),
    Scale("Diminished", (0, 2, 3, 5, 6, 8, 9, 11)),
    # Ethnic scales
    Scale("Hungarian Minor", (0, 2, 3, 6, 7, 8, 11)),
    Scale("Japanese", (0, 1, 5, 7, 8)),
    Scale("Arabic", (0, 1, 4, 5, 7, 8, 11)),
    Scale("Gypsy", (0, 1, 4, 5, 7, 8, 10)),
    # Exotic scales
    Scale("Enigmatic", (0, 1, 4, 6, 8, 10, 11)),
    Scale("Double Harmonic", (0, 1, 4, 5, 7, 8, 11)),
    Scale("Neapolitan Major", (0, 1, 3, 5, 7, 9, 11)),
    Scale("Neapolitan Minor", (0, 1, 3, 5, 7, 8, 11)),
]

SCALES: Dict[str, Scale] = {scale.name: scale for scale in _SCALE_DEFINITIONS}
_SCALES_BY_KEY: Dict[str, Scale] = {name.lower(): scale for name, scale in SCALES.items()}


def get_scale(name: Optional[str]) -> Optional[Scale]:
    """Look up a scale by name (case-insensitive). Unknown names give None."""
    if not name:
        return None
    return SCALES.get(name) or _SCALES_BY_KEY.get(name.strip().lower())


def scale_names() -> List[str]:
    return list(SCALES)


__all__ = [
    "Scale",
    "SCALES",
    "get_scale",
    "scale_names",
    "validate_intervals",
]
