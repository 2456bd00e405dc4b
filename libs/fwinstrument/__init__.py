"""Fretwise Instruments

Fretboard and keyboard geometry, selection highlighting and chord voicing search.
"""

__version__ = "0.1.0"

from .geometry import Fretboard, Keyboard, Tuning, STANDARD_TUNINGS, get_tuning
from .mapper import (
    ViewMode,
    InstrumentConfig,
    get_highlight_map,
    rebase_octaves,
    toggle_interval,
    describe_keys,
)
from .voicing import (
    ChordTone,
    FingeringAnalysis,
    ChordDiagram,
    build_chord_voicing,
    get_optimal_fingering,
    analyze_fingering_difficulty,
    get_voicing_tablature,
    generate_chord_diagram,
)

__all__ = [
    # Geometry
    "Fretboard",
    "Keyboard",
    "Tuning",
    "STANDARD_TUNINGS",
    "get_tuning",
    # Highlighting
    "ViewMode",
    "InstrumentConfig",
    "get_highlight_map",
    "rebase_octaves",
    "toggle_interval",
    "describe_keys",
    # Voicings
    "ChordTone",
    "FingeringAnalysis",
    "ChordDiagram",
    "build_chord_voicing",
    "get_optimal_fingering",
    "analyze_fingering_difficulty",
    "get_voicing_tablature",
    "generate_chord_diagram",
]
