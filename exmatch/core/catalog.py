"""Canonical exercise catalog storage."""

from __future__ import annotations

import json
import threading
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

from exmatch.core.constants import CATEGORIES, GENERAL
from exmatch.core.models import CanonicalExercise

_IMMUTABLE_FIELDS = {"id", "slug"}


class CatalogError(RuntimeError):
    """Raised when the catalog file cannot be read or updated."""


class DuplicateSlug(CatalogError):
    """Raised when creating an exercise whose slug already exists."""

    def __init__(self, slug: str) -> None:
        super().__init__(f"Exercise slug already exists: {slug}")
        self.slug = slug


class CatalogStore(Protocol):
    def list_exercises(self) -> List[CanonicalExercise]: ...

    def get_exercise(self, exercise_id: int) -> Optional[CanonicalExercise]: ...

    def create_exercise(self, fields: Dict[str, Any]) -> CanonicalExercise: ...

    def update_exercise(self, exercise_id: int, **fields: Any) -> CanonicalExercise: ...


class JsonCatalogStore:
    """Catalog persisted as a JSON document; every write goes through one lock."""

    def __init__(self, path: Path, autosave: bool = True) -> None:
        self.path = path
        self.autosave = autosave
        self._lock = threading.RLock()
        self._exercises: Optional[Dict[int, CanonicalExercise]] = None

    def _load(self) -> Dict[int, CanonicalExercise]:
        if self._exercises is not None:
            return self._exercises

        exercises: Dict[int, CanonicalExercise] = {}
        if self.path.exists():
            try:
                raw = json.loads(self.path.read_text() or "[]")
            except json.JSONDecodeError as exc:
                raise CatalogError(f"Invalid JSON in catalog file {self.path}: {exc}") from exc
            if isinstance(raw, dict):
                raw = raw.get("exercises", [])
            if not isinstance(raw, list):
                raise CatalogError(f"Catalog file {self.path} must contain a list of exercises")
            for item in raw:
                try:
                    exercise = CanonicalExercise.from_dict(item)
                except (KeyError, TypeError, ValueError) as exc:
                    raise CatalogError(f"Invalid exercise record in {self.path}: {item!r}") from exc
                exercises[exercise.id] = exercise

        self._exercises = exercises
        return exercises

    def _save(self) -> None:
        if not self.autosave:
            return
        exercises = self._load()
        payload = {"exercises": [exercise.to_dict() for exercise in exercises.values()]}
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(payload, indent=2) + "\n")
        tmp_path.replace(self.path)

    def list_exercises(self) -> List[CanonicalExercise]:
        with self._lock:
            return [replace(exercise) for exercise in sorted(self._load().values(), key=lambda item: item.id)]

    def get_exercise(self, exercise_id: int) -> Optional[CanonicalExercise]:
        with self._lock:
            exercise = self._load().get(int(exercise_id))
            return replace(exercise) if exercise is not None else None

    def create_exercise(self, fields: Dict[str, Any]) -> CanonicalExercise:
        with self._lock:
            exercises = self._load()
            slug = str(fields["slug"])
            if any(existing.slug == slug for existing in exercises.values()):
                raise DuplicateSlug(slug)

            category = str(fields.get("category") or GENERAL)
            if category not in CATEGORIES:
                raise CatalogError(f"Unknown category: {category}")

            next_id = max(exercises, default=0) + 1
            exercise = CanonicalExercise.from_dict({**fields, "id": next_id, "category": category})
            exercises[next_id] = exercise
            self._save()
            return replace(exercise)

    def update_exercise(self, exercise_id: int, **fields: Any) -> CanonicalExercise:
        with self._lock:
            exercises = self._load()
            exercise = exercises.get(int(exercise_id))
            if exercise is None:
                raise CatalogError(f"Exercise {exercise_id} not found")

            blocked = _IMMUTABLE_FIELDS.intersection(fields)
            if blocked:
                raise CatalogError(f"Cannot update immutable field(s): {', '.join(sorted(blocked))}")
            for key, value in fields.items():
                if key not in CanonicalExercise.__dataclass_fields__:
                    raise CatalogError(f"Unknown exercise field: {key}")
                setattr(exercise, key, value)
            self._save()
            return replace(exercise)
