"""Theory Pod: FastAPI service for notes, scales, chords, highlights and voicings.

Stateless HTTP surface over fwtheory and fwinstrument. Every request carries
its full configuration; nothing is kept between calls.
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Literal, Optional, Union

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field, field_validator, model_validator

from fwcore.config import get_settings
from fwcore.logging import setup_logging, setup_tracing
from fwinstrument.geometry import DEFAULT_TUNING, Fretboard, Keyboard, get_tuning
from fwinstrument.mapper import InstrumentConfig, ViewMode, get_highlight_map
from fwinstrument.voicing import (
    analyze_fingering_difficulty,
    build_chord_voicing,
    generate_chord_diagram,
    get_optimal_fingering,
)
from fwtheory.answers import check_note_selection, is_correct
from fwtheory.chords import CHORDS, ChordInversion, chord_display_name, get_chord
from fwtheory.pitch import Interval, Note, midi_to_freqs
from fwtheory.scales import SCALES, get_scale

load_dotenv()

logger = logging.getLogger(__name__)

SERVICE_NAME = "theory"
SERVICE_VERSION = "0.1.0"
DEFAULT_PORT = 8010


class NoteInfo(BaseModel):
    """Single note in a response."""

    name: str
    midi: int
    frequency: float


class ScaleInfo(BaseModel):
    name: str
    intervals: List[int]
    degrees: List[str]
    modes: List[str]


class ChordInfo(BaseModel):
    type: str
    symbol: str
    display_name: str
    category: str
    intervals: List[int]


class NotesRequest(BaseModel):
    """Request payload for scale or chord note spelling."""

    root: str = Field(..., description="Root note, e.g. C4, Bb3")
    scale: Optional[str] = Field(default=None, description="Scale name")
    chord_type: Optional[str] = Field(default=None, description="Chord type key")
    mode_index: int = Field(default=0, ge=0)
    inversion: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def check_target(self) -> "NotesRequest":
        if (self.scale is None) == (self.chord_type is None):
            raise ValueError("Provide exactly one of scale or chord_type")
        return self


class NotesResponse(BaseModel):
    root: str
    label: str
    notes: List[NoteInfo]


class InstrumentSpec(BaseModel):
    """Fretboard (tuning + fret window) or keyboard (start note + key count)."""

    kind: Literal["fretboard", "keyboard"] = "fretboard"
    tuning: Optional[List[str]] = Field(default=None, description="Open strings, lowest first")
    tuning_name: str = Field(default=DEFAULT_TUNING)
    fret_start: int = Field(default=0, ge=0)
    fret_end: int = Field(default=12, ge=0, le=36)
    start_note: str = Field(default="C3")
    key_count: int = Field(default=25, ge=1, le=128)

    def build(self):
        if self.kind == "keyboard":
            return Keyboard.from_name(self.start_note, self.key_count)
        return Fretboard.from_names(
            resolve_tuning(self.tuning, self.tuning_name),
            fret_start=self.fret_start,
            fret_end=self.fret_end,
        )


class HighlightRequest(BaseModel):
    """Request payload for instrument highlighting."""

    root: str = Field(default="C")
    view_mode: ViewMode = ViewMode.SCALES
    selected_octaves: List[int] = Field(default_factory=list)
    selected_intervals: List[int] = Field(default_factory=list)
    scale: str = Field(default="Major")
    mode_index: int = Field(default=0, ge=0)
    chord_type: str = Field(default="major")
    chord_inversion: int = Field(default=0, ge=0, le=6)
    show_octave: bool = True
    show_additional_octaves: bool = False
    instrument: InstrumentSpec = Field(default_factory=InstrumentSpec)

    @field_validator("root")
    @classmethod
    def validate_root(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("root must be provided")
        return value.strip()


class Highlight(BaseModel):
    midi: int
    note: str
    role: str


class HighlightResponse(BaseModel):
    highlights: List[Highlight]
    count: int


class VoicingRequest(BaseModel):
    """Request payload for chord voicing search."""

    root: str = Field(default="C", description="Root name without octave")
    octave: int = Field(default=3, ge=-1, le=9)
    chord_type: str = Field(default="major")
    inversion: int = Field(default=0, ge=0, le=6)
    tuning: Optional[List[str]] = Field(default=None)
    tuning_name: str = Field(default=DEFAULT_TUNING)
    max_frets: Optional[int] = Field(default=None, le=36)


class ChordToneInfo(BaseModel):
    string_index: int
    fret_number: int
    midi_note: int
    interval_from_root: int
    interval_name: str
    is_root: bool
    voicing_position: int


class VoicingResponse(BaseModel):
    chord: str
    candidate_count: int
    fingering: List[ChordToneInfo]
    analysis: Dict[str, Any]
    diagram: Dict[str, Any]


class IntervalLabelRequest(BaseModel):
    semitones: int = Field(..., ge=-127, le=127)


class IntervalLabelResponse(BaseModel):
    semitones: int
    label: str
    degree_label: str
    name: str
    quality: str
    is_consonant: bool


class QuizCheckRequest(BaseModel):
    """Either compare answer ids, or check notes against a scale/chord on a root."""

    selected: Union[str, List[str]]
    expected: Optional[Union[str, List[str]]] = None
    root: Optional[str] = None
    scale: Optional[str] = None
    chord_type: Optional[str] = None

    @model_validator(mode="after")
    def check_mode(self) -> "QuizCheckRequest":
        if self.expected is None and self.root is None:
            raise ValueError("Provide expected ids or a root to check notes against")
        return self


class QuizCheckResponse(BaseModel):
    correct: bool


def resolve_tuning(tuning: Optional[List[str]], tuning_name: str) -> List[str]:
    if tuning is not None:
        return tuning
    found = get_tuning(tuning_name)
    if found is None:
        raise ValueError(f"Unknown tuning: {tuning_name}")
    return list(found.strings)


def _note_info(note: Note) -> NoteInfo:
    return NoteInfo(name=note.full_name, midi=note.midi, frequency=round(note.frequency, 4))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown hooks for logging/tracing."""
    try:
        setup_logging()
    except Exception as exc:  # pragma: no cover - logging fallback
        logging.basicConfig(level=logging.INFO)
        logger.warning(f"Logging fallback (missing env?): {exc}")

    try:
        setup_tracing(service_name=f"{SERVICE_NAME}-pod")
    except Exception as exc:  # pragma: no cover - optional tracing
        logger.info(f"Tracing not configured: {exc}")
    logger.info(f"{SERVICE_NAME} pod starting (v{SERVICE_VERSION})...")
    yield
    logger.info(f"{SERVICE_NAME} pod shutting down...")


app = FastAPI(
    title="Theory Pod",
    description="Music theory core for the fretboard/keyboard trainer",
    version=SERVICE_VERSION,
    lifespan=lifespan,
)


@app.get("/")
async def root():
    """API info endpoint."""
    return {
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "description": "Notes, scales, chords, instrument highlights and voicings",
        "endpoints": {
            "GET /": "This info",
            "POST /health": "Health check",
            "GET /scales": "Scale catalog",
            "GET /chords": "Chord catalog",
            "POST /notes": "Spell a scale or chord on a root",
            "POST /highlight": "Highlight map for an instrument",
            "POST /voicing": "Chord fingering on a fretted instrument",
            "POST /interval-label": "Labels for a semitone count",
            "POST /quiz/check": "Check a quiz answer",
        },
    }


@app.post("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok", "service": SERVICE_NAME, "version": SERVICE_VERSION}


@app.get("/scales", response_model=List[ScaleInfo])
async def list_scales():
    return [
        ScaleInfo(
            name=scale.name,
            intervals=list(scale.intervals),
            degrees=scale.degrees,
            modes=scale.available_modes(),
        )
        for scale in SCALES.values()
    ]


@app.get("/chords", response_model=List[ChordInfo])
async def list_chords(category: Optional[str] = None):
    return [
        ChordInfo(
            type=chord.type,
            symbol=chord.symbol,
            display_name=chord.display_name,
            category=chord.category,
            intervals=list(chord.intervals),
        )
        for chord in CHORDS.values()
        if category is None or chord.category == category
    ]


@app.post("/notes", response_model=NotesResponse)
async def notes(request: NotesRequest):
    """Spell a scale (or one of its modes) or a chord voicing. Unknown names give no notes."""
    try:
        root_note = Note.parse(request.root)

        if request.scale is not None:
            scale = get_scale(request.scale)
            if scale is None:
                return NotesResponse(root=root_note.full_name, label=request.scale, notes=[])
            mode_root = scale.get_mode_root(root_note, request.mode_index)
            spelled = [
                mode_root.transpose(i) for i in scale.get_mode_intervals(request.mode_index)
            ]
            label = f"{mode_root.name} {scale.get_mode_name(request.mode_index)}"
        else:
            chord = get_chord(request.chord_type)
            if chord is None:
                return NotesResponse(root=root_note.full_name, label=request.chord_type, notes=[])
            spelled = [
                Note.from_midi(midi, prefer_flats=root_note.prefer_flats)
                for midi in chord.build_voicing(root_note, request.inversion)
                if midi <= 127
            ]
            label = chord_display_name(root_note.name, chord.type, request.inversion)

        return NotesResponse(
            root=root_note.full_name,
            label=label,
            notes=[_note_info(n) for n in spelled],
        )

    except ValueError as exc:
        logger.error(f"Validation error: {exc}", extra={"endpoint": "/notes"})
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@app.post("/highlight", response_model=HighlightResponse)
async def highlight(request: HighlightRequest):
    """Highlight map restricted to notes the instrument can play."""
    try:
        config = InstrumentConfig(
            root=request.root,
            geometry=request.instrument.build(),
            view_mode=request.view_mode,
            selected_octaves=frozenset(request.selected_octaves),
            selected_intervals=frozenset(request.selected_intervals),
            scale=request.scale,
            mode_index=request.mode_index,
            chord_type=request.chord_type,
            chord_inversion=ChordInversion(request.chord_inversion),
            show_octave=request.show_octave,
            show_additional_octaves=request.show_additional_octaves,
        )
        prefer_flats = config.root_note.prefer_flats
        highlights = [
            Highlight(
                midi=midi,
                note=Note.from_midi(midi, prefer_flats=prefer_flats).full_name,
                role=role,
            )
            for midi, role in sorted(get_highlight_map(config).items())
        ]
        return HighlightResponse(highlights=highlights, count=len(highlights))

    except ValueError as exc:
        logger.error(f"Validation error: {exc}", extra={"endpoint": "/highlight"})
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@app.post("/voicing", response_model=VoicingResponse)
async def voicing(request: VoicingRequest):
    """Optimal fingering, difficulty and diagram for a chord inversion."""
    try:
        tuning = resolve_tuning(request.tuning, request.tuning_name)
        candidates = build_chord_voicing(
            root=request.root,
            octave=request.octave,
            chord_type=request.chord_type,
            inversion=request.inversion,
            tuning=tuning,
            max_frets=request.max_frets,
        )
        fingering = get_optimal_fingering(candidates)
        analysis = analyze_fingering_difficulty(fingering)
        diagram = generate_chord_diagram(fingering, len(tuning))

        if fingering:
            frequencies = midi_to_freqs([t.midi_note for t in fingering])
            logger.info(
                f"Voicing {request.root}{request.octave} {request.chord_type}: "
                f"{len(fingering)} notes, {frequencies.min():.1f}-{frequencies.max():.1f} Hz"
            )

        return VoicingResponse(
            chord=chord_display_name(request.root, request.chord_type, request.inversion),
            candidate_count=len(candidates),
            fingering=[
                ChordToneInfo(
                    string_index=t.string_index,
                    fret_number=t.fret_number,
                    midi_note=t.midi_note,
                    interval_from_root=t.interval_from_root,
                    interval_name=t.interval_name,
                    is_root=t.is_root,
                    voicing_position=t.voicing_position,
                )
                for t in fingering
            ],
            analysis=analysis.to_dict(),
            diagram=diagram.to_dict(),
        )

    except ValueError as exc:
        logger.error(f"Validation error: {exc}", extra={"endpoint": "/voicing"})
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@app.post("/interval-label", response_model=IntervalLabelResponse)
async def interval_label(request: IntervalLabelRequest):
    interval = Interval(request.semitones)
    return IntervalLabelResponse(
        semitones=interval.semitones,
        label=interval.label,
        degree_label=interval.degree_label,
        name=interval.name,
        quality=interval.quality.value,
        is_consonant=interval.is_consonant,
    )


@app.post("/quiz/check", response_model=QuizCheckResponse)
async def quiz_check(request: QuizCheckRequest):
    """Check answer ids, or notes against a scale/chord spelled on a root."""
    try:
        if request.root is not None:
            selected = [request.selected] if isinstance(request.selected, str) else request.selected
            correct = check_note_selection(
                selected,
                request.root,
                scale=request.scale,
                chord_type=request.chord_type,
            )
        else:
            correct = is_correct(request.selected, request.expected)
        return QuizCheckResponse(correct=correct)

    except ValueError as exc:
        logger.error(f"Validation error: {exc}", extra={"endpoint": "/quiz/check"})
        raise HTTPException(status_code=400, detail=str(exc)) from exc


if __name__ == "__main__":  # pragma: no cover
    import uvicorn

    port = int(os.getenv("THEORY_PORT", DEFAULT_PORT))
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=port,
        reload=get_settings().FW_ENV == "development",
        log_level="info",
    )
