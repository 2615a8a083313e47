"""Lightweight data models used across commands."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from exmatch.core.constants import GENERAL


@dataclass
class CanonicalExercise:
    """Deduplicated catalog record an exercise name resolves to."""

    id: int
    slug: str
    name: str
    category: str = GENERAL
    video_id: Optional[str] = None
    thumbnail_url: Optional[str] = None
    difficulty: str = "beginner"
    muscle_groups: List[str] = field(default_factory=list)
    equipment: List[str] = field(default_factory=list)
    instructions: List[str] = field(default_factory=list)

    @property
    def has_video(self) -> bool:
        return bool(self.video_id)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CanonicalExercise":
        return cls(
            id=int(data["id"]),
            slug=str(data["slug"]),
            name=str(data["name"]),
            category=str(data.get("category") or GENERAL),
            video_id=data.get("video_id"),
            thumbnail_url=data.get("thumbnail_url"),
            difficulty=str(data.get("difficulty") or "beginner"),
            muscle_groups=list(data.get("muscle_groups") or []),
            equipment=list(data.get("equipment") or []),
            instructions=list(data.get("instructions") or []),
        )


@dataclass(frozen=True)
class Mention:
    """Raw exercise name awaiting resolution, with the slot it came from."""

    text: str
    slot: Optional[str] = None
    workout_id: Optional[int] = None
    current_id: Optional[int] = None


@dataclass(frozen=True)
class MatchCandidate:
    exercise: CanonicalExercise
    score: int


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving a single mention against the catalog."""

    mention: Mention
    exercise: CanonicalExercise
    score: Optional[int] = None
    created: bool = False
    redirected: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mention": self.mention.text,
            "slot": self.mention.slot,
            "workout_id": self.mention.workout_id,
            "previous_id": self.mention.current_id,
            "exercise_id": self.exercise.id,
            "exercise": self.exercise.name,
            "slug": self.exercise.slug,
            "score": self.score,
            "created": self.created,
            "redirected": self.redirected,
        }


@dataclass(frozen=True)
class VideoCandidate:
    """Search result enriched with provider-side detail fields."""

    id: str
    title: str
    channel_title: str = ""
    duration_seconds: int = 0
    view_count: int = 0
    like_count: int = 0
    thumbnail_url: Optional[str] = None


@dataclass(frozen=True)
class ScoredVideo:
    candidate: VideoCandidate
    score: int

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self.candidate)
        payload["score"] = self.score
        return payload


@dataclass
class BatchReport:
    """Per-item tally for batch operations."""

    succeeded: int = 0
    failed: int = 0
    skipped: int = 0
    no_match: int = 0
    errors: Dict[str, str] = field(default_factory=dict)
    quota_exhausted: bool = False
    cancelled: bool = False

    @property
    def total(self) -> int:
        return self.succeeded + self.failed + self.skipped + self.no_match

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["total"] = self.total
        return payload
