"""Tests for fwinstrument.geometry."""

from fwinstrument.geometry import (
    STANDARD_TUNINGS,
    Fretboard,
    InstrumentType,
    Keyboard,
    default_starting_octave,
    get_tuning,
    tunings_for,
)
from fwtheory.pitch import Note


class TestFretboard:
    """Tests for fretted geometry."""

    def test_playable_midi_standard_guitar(self):
        board = Fretboard.from_names(STANDARD_TUNINGS["Guitar (6-string)"], fret_end=12)
        playable = board.playable_midi()
        assert min(playable) == 40  # E2
        assert max(playable) == 76  # E4 + 12
        assert board.string_count == 6

    def test_fret_window(self):
        board = Fretboard.from_names(["E2"], fret_start=5, fret_end=7)
        assert board.playable_midi() == frozenset({45, 46, 47})
        assert board.contains(46)
        assert not board.contains(44)

    def test_empty_window(self):
        board = Fretboard.from_names(["E2"], fret_start=8, fret_end=3)
        assert board.playable_midi() == frozenset()

    def test_clipped_to_midi_range(self):
        board = Fretboard.from_names(["E9"], fret_end=24)
        assert max(board.playable_midi()) == 127

    def test_positions_for_midi(self):
        board = Fretboard.from_names(STANDARD_TUNINGS["Guitar (6-string)"], fret_end=12)
        positions = board.positions_for_midi(Note.parse("E4").midi)
        assert {(p.string_index, p.fret_number) for p in positions} == {
            (5, 0),
            (4, 5),
            (3, 9),
        }
        assert positions[0].note.full_name == "E4"


class TestKeyboard:
    """Tests for keyboard geometry."""

    def test_key_range(self):
        keyboard = Keyboard.from_name("C3", key_count=25)
        playable = keyboard.playable_midi()
        assert len(playable) == 25
        assert min(playable) == 48
        assert max(playable) == 72
        assert keyboard.contains(60)
        assert not keyboard.contains(73)

    def test_clipped_at_top(self):
        keyboard = Keyboard.from_name("C9", key_count=88)
        assert max(keyboard.playable_midi()) == 127

    def test_no_keys(self):
        keyboard = Keyboard.from_name("C3", key_count=0)
        assert keyboard.playable_midi() == frozenset()
        assert not keyboard.contains(48)


class TestTunings:
    """Tests for the tuning catalog."""

    def test_lookup(self):
        tuning = get_tuning("Drop D")
        assert tuning.strings[0] == "D2"
        assert tuning.instrument_type is InstrumentType.GUITAR
        assert get_tuning("Nonexistent") is None

    def test_instrument_grouping(self):
        basses = tunings_for(InstrumentType.BASS)
        assert "Bass (4-string)" in basses
        assert all(t.instrument_type is InstrumentType.BASS for t in basses.values())

    def test_range_and_transpose(self):
        guitar = get_tuning("Guitar (6-string)")
        assert guitar.range == 24
        down = guitar.transpose(-2)
        assert down.strings[0] == "D2"
        assert down.lowest_note.midi == guitar.lowest_note.midi - 2

    def test_fretboard_from_tuning(self):
        board = get_tuning("Ukulele").fretboard(fret_end=0)
        assert board.playable_midi() == frozenset(n.midi for n in get_tuning("Ukulele").string_notes)

    def test_default_starting_octave(self):
        guitar = get_tuning("Guitar (6-string)").string_notes
        assert default_starting_octave("E", guitar) == 2
        assert default_starting_octave("C", guitar) == 3
        assert default_starting_octave("A", guitar) == 2
        assert default_starting_octave("C", []) == 3
