"""Tests for fwtheory.answers."""

from types import SimpleNamespace

import pytest

from fwtheory.answers import (
    MultipleAnswer,
    SingleAnswer,
    check_note_selection,
    expected_pitch_classes,
    is_correct,
    normalize_answer,
)
from fwtheory.pitch import FormatError, Note


class TestNormalizeAnswer:
    def test_single_id(self):
        assert normalize_answer("b") == SingleAnswer("b")

    def test_collection(self):
        assert normalize_answer(["a", "c"]) == MultipleAnswer(frozenset({"a", "c"}))
        assert normalize_answer(("c", "a")) == normalize_answer({"a", "c"})

    def test_option_objects(self):
        option = SimpleNamespace(id="opt-2", text="Perfect 5th")
        assert normalize_answer(option) == SingleAnswer("opt-2")
        assert normalize_answer([option]) == MultipleAnswer(frozenset({"opt-2"}))

    def test_already_normalized(self):
        answer = SingleAnswer("x")
        assert normalize_answer(answer) is answer


class TestIsCorrect:
    def test_single(self):
        assert is_correct("a", "a")
        assert not is_correct("a", "b")

    def test_multiple_is_order_insensitive(self):
        assert is_correct(["a", "b"], ["b", "a"])
        assert not is_correct(["a"], ["a", "b"])

    def test_single_matches_one_element_collection(self):
        assert is_correct("a", ["a"])


class TestNoteSelection:
    def test_scale_selection(self):
        selected = ["C4", "D4", "E4", "F4", "G4", "A4", "B4"]
        assert check_note_selection(selected, "C", scale="Major")
        assert not check_note_selection(selected[:-1], "C", scale="Major")

    def test_octaves_and_spelling_ignored(self):
        selected = [Note.parse("G2"), "B♭5", "D3"]
        assert check_note_selection(selected, "G", chord_type="minor")
        assert check_note_selection(["A#3", "D4", "F4"], "Bb", chord_type="major")

    def test_unknown_names_never_match(self):
        assert not check_note_selection(["C4"], "C", scale="Nonexistent")
        assert not check_note_selection(["C4"], "C", chord_type="nonexistent")
        assert expected_pitch_classes("C", chord_type="nonexistent") == frozenset()

    def test_malformed_note_raises(self):
        with pytest.raises(FormatError):
            check_note_selection(["X4"], "C", scale="Major")
