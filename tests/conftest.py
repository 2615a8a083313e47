from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pytest
from typer.testing import CliRunner

from exmatch.core.models import CanonicalExercise


class FakeProvider:
    """In-memory stand-in for YouTubeAPI keyed by query text."""

    def __init__(
        self,
        results: Optional[Dict[str, List[Dict[str, Any]]]] = None,
        details: Optional[Dict[str, Dict[str, Any]]] = None,
        errors: Optional[Dict[str, Exception]] = None,
    ) -> None:
        self.results = results or {}
        self.details = details or {}
        self.errors = errors or {}
        self.queries: List[str] = []

    def search(self, query: str, max_results: int = 10) -> List[Dict[str, Any]]:
        self.queries.append(query)
        if query in self.errors:
            raise self.errors[query]
        return list(self.results.get(query, []))[:max_results]

    def video_details(self, ids: Sequence[str]) -> List[Dict[str, Any]]:
        return [dict(self.details[video_id], id=video_id) for video_id in ids if video_id in self.details]

    def key_status(self) -> Dict[str, Any]:
        return {
            "total_keys": 1,
            "active_key": 1,
            "keys_remaining": 1,
            "quota_day": "2026-01-01",
            "quota_reset": "midnight America/Los_Angeles",
        }


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("EXMATCH_CONFIG_FILE", str(tmp_path / "missing-config.toml"))
    monkeypatch.setenv("EXMATCH_DATA_DIR", str(tmp_path / "data"))
    for name in ("EXMATCH_CATALOG", "YOUTUBE_API_KEY", "YOUTUBE_API_KEY_2", "YOUTUBE_API_KEY_3"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def sample_exercises() -> List[CanonicalExercise]:
    return [
        CanonicalExercise(id=1, slug="barbell-row", name="Barbell Row", category="strength"),
        CanonicalExercise(id=2, slug="arm-circles", name="Arm Circles", category="warmup", video_id="abc123def45"),
        CanonicalExercise(id=3, slug="jumping-jacks", name="Jumping Jacks", category="cardio"),
        CanonicalExercise(id=4, slug="hamstring-stretch", name="Hamstring Stretch", category="flexibility"),
        CanonicalExercise(id=7, slug="treadmill-jogging", name="Treadmill Jogging", category="cardio"),
    ]


@pytest.fixture()
def write_temp_json(tmp_path: Path):
    def _write(name: str, payload: Any) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(payload, indent=2) + "\n")
        return path

    return _write


@pytest.fixture()
def write_temp_toml(tmp_path: Path):
    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.write_text(content.strip() + "\n")
        return path

    return _write


@pytest.fixture()
def catalog_file(write_temp_json, sample_exercises: List[CanonicalExercise]) -> Path:
    return write_temp_json("catalog.json", {"exercises": [exercise.to_dict() for exercise in sample_exercises]})


@pytest.fixture()
def fake_provider_factory():
    return FakeProvider
