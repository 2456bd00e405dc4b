"""Tests for Theory Pod."""

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Add pod and project root to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "pods/theory"))

from pods.theory.main import app  # noqa: E402


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


class TestTheoryPodInfo:
    """Info, health and catalog endpoints."""

    def test_health(self, client):
        response = client.post("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["service"] == "theory"

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["service"] == "theory"
        assert "POST /voicing" in data["endpoints"]

    def test_scales(self, client):
        response = client.get("/scales")
        assert response.status_code == 200
        major = next(s for s in response.json() if s["name"] == "Major")
        assert major["intervals"] == [0, 2, 4, 5, 7, 9, 11]
        assert major["modes"][1] == "Dorian"

    def test_chords_by_category(self, client):
        response = client.get("/chords", params={"category": "Basic Triads"})
        assert response.status_code == 200
        types = {c["type"] for c in response.json()}
        assert types == {"major", "minor", "diminished", "augmented"}


class TestTheoryPodNotes:
    """Scale and chord spelling."""

    def test_c_major(self, client):
        response = client.post("/notes", json={"root": "C4", "scale": "Major"})
        assert response.status_code == 200
        data = response.json()
        assert [n["name"] for n in data["notes"]] == ["C4", "D4", "E4", "F4", "G4", "A4", "B4", "C5"]
        assert data["label"] == "C Ionian"

    def test_mode(self, client):
        response = client.post("/notes", json={"root": "C4", "scale": "Major", "mode_index": 1})
        data = response.json()
        assert data["notes"][0]["name"] == "D4"
        assert data["label"] == "D Dorian"

    def test_chord_inversion(self, client):
        response = client.post("/notes", json={"root": "C4", "chord_type": "major", "inversion": 1})
        assert response.status_code == 200
        data = response.json()
        assert data["notes"][0]["name"] == "E4"
        assert data["label"] == "C/E"

    def test_unknown_scale_is_empty(self, client):
        response = client.post("/notes", json={"root": "C4", "scale": "Nonexistent"})
        assert response.status_code == 200
        assert response.json()["notes"] == []

    def test_malformed_root(self, client):
        response = client.post("/notes", json={"root": "H4", "scale": "Major"})
        assert response.status_code == 400

    def test_requires_one_target(self, client):
        response = client.post("/notes", json={"root": "C4"})
        assert response.status_code == 422


class TestTheoryPodHighlight:
    """Instrument highlighting."""

    def test_keyboard_intervals(self, client):
        payload = {
            "root": "C",
            "view_mode": "intervals",
            "selected_octaves": [3],
            "selected_intervals": [-24, 0, 7, 16, 60],
            "instrument": {"kind": "keyboard", "start_note": "C3", "key_count": 25},
        }
        response = client.post("/highlight", json=payload)
        assert response.status_code == 200
        data = response.json()
        assert [(h["midi"], h["role"]) for h in data["highlights"]] == [
            (48, "R"),
            (55, "5"),
            (64, "3"),
        ]
        assert data["count"] == 3

    def test_fretboard_scale(self, client):
        payload = {
            "root": "E",
            "scale": "Minor Pentatonic",
            "selected_octaves": [2],
            "instrument": {"tuning": ["E2"], "fret_end": 5},
        }
        data = client.post("/highlight", json=payload).json()
        assert [h["note"] for h in data["highlights"]] == ["E2", "G2", "A2"]

    def test_unsupported_mode(self, client):
        response = client.post("/highlight", json={"view_mode": "barre_chords"})
        assert response.status_code == 200
        assert response.json()["count"] == 0

    def test_unknown_tuning(self, client):
        payload = {"instrument": {"tuning_name": "Nonexistent"}}
        assert client.post("/highlight", json=payload).status_code == 400


class TestTheoryPodVoicing:
    """Chord voicing search."""

    def test_c_major(self, client):
        response = client.post("/voicing", json={"root": "C", "octave": 3, "chord_type": "major", "max_frets": 12})
        assert response.status_code == 200
        data = response.json()
        assert data["chord"] == "C"
        assert data["diagram"]["tablature"] == [0, "x", "x", 0, 1, "x"]
        assert data["analysis"]["difficulty"] == "hard"
        assert len(data["fingering"]) == 3

    def test_unknown_chord(self, client):
        response = client.post("/voicing", json={"chord_type": "nonexistent"})
        assert response.status_code == 200
        data = response.json()
        assert data["fingering"] == []
        assert data["analysis"]["difficulty"] == "impossible"
        assert data["analysis"]["playable"] is False

    def test_malformed_tuning(self, client):
        response = client.post("/voicing", json={"tuning": ["E2", "Q2"]})
        assert response.status_code == 400


class TestTheoryPodLabelsAndQuiz:
    """Interval labels and quiz checks."""

    @pytest.mark.parametrize(
        "semitones,label",
        [(14, "9"), (6, "♭5"), (24, "O2"), (0, "R"), (-7, "-5")],
    )
    def test_interval_label(self, client, semitones, label):
        response = client.post("/interval-label", json={"semitones": semitones})
        assert response.status_code == 200
        assert response.json()["label"] == label

    def test_interval_details(self, client):
        data = client.post("/interval-label", json={"semitones": 7}).json()
        assert data["name"] == "Perfect 5th"
        assert data["quality"] == "perfect"
        assert data["is_consonant"] is True

    def test_quiz_ids(self, client):
        response = client.post("/quiz/check", json={"selected": ["b", "a"], "expected": ["a", "b"]})
        assert response.json()["correct"] is True
        response = client.post("/quiz/check", json={"selected": "a", "expected": "c"})
        assert response.json()["correct"] is False

    def test_quiz_notes(self, client):
        payload = {"selected": ["G3", "B3", "D4", "F4"], "root": "G", "chord_type": "dominant7"}
        assert client.post("/quiz/check", json=payload).json()["correct"] is True

    def test_quiz_malformed_note(self, client):
        payload = {"selected": ["X3"], "root": "G", "chord_type": "major"}
        assert client.post("/quiz/check", json=payload).status_code == 400

    def test_quiz_requires_expected_or_root(self, client):
        assert client.post("/quiz/check", json={"selected": "a"}).status_code == 422
