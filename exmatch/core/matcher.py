"""Fuzzy matching of raw exercise names against the canonical catalog."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from exmatch.core.constants import (
    ARM_CONTEXT,
    ARM_GATE_MIN_OVERLAP,
    BREATHING_CONTEXT,
    CARDIO_CONTEXT,
    EXACT_MATCH_SCORE,
    MATCH_THRESHOLD,
    MIN_WORD_LENGTH,
    NORMALIZED_MATCH_SCORE,
    OVERLAP_BANDS,
    STRETCH_CONTEXT,
)
from exmatch.core.models import CanonicalExercise, MatchCandidate
from exmatch.utils.text import name_words, normalize_name


def _has_context(normalized: str, keywords: Iterable[str]) -> bool:
    return any(keyword in normalized for keyword in keywords)


def movement_contexts(normalized: str) -> Tuple[bool, bool, bool, bool]:
    """Return (breathing, stretch, cardio, arm/circles) flags for a normalized name."""
    return (
        _has_context(normalized, BREATHING_CONTEXT),
        _has_context(normalized, STRETCH_CONTEXT),
        _has_context(normalized, CARDIO_CONTEXT),
        _has_context(normalized, ARM_CONTEXT),
    )


def overlap_ratio(target_words: Sequence[str], candidate_words: Sequence[str]) -> float:
    if not target_words or not candidate_words:
        return 0.0
    common = [word for word in target_words if word in candidate_words]
    return len(common) / max(len(target_words), len(candidate_words))


def overlap_band(ratio: float) -> int:
    """Map a word-overlap ratio onto its score band."""
    for minimum, score in OVERLAP_BANDS:
        if ratio >= minimum:
            return score
    return 0


def _context_gated(target: str, candidate: str, ratio: float) -> bool:
    breathing, stretch, cardio, arm = movement_contexts(target)
    cand_breathing, cand_stretch, cand_cardio, cand_arm = movement_contexts(candidate)

    if breathing and not cand_breathing:
        return True
    if stretch and not cand_stretch:
        return True
    if cardio and not cand_cardio:
        return True
    return arm and not cand_arm and ratio < ARM_GATE_MIN_OVERLAP


def score_names(raw_name: str, candidate_name: str) -> int:
    """Score a raw mention against one catalog name on a 0-100 scale."""
    raw = (raw_name or "").lower().strip()
    other = (candidate_name or "").lower().strip()
    if raw and raw == other:
        return EXACT_MATCH_SCORE

    target = normalize_name(raw)
    candidate = normalize_name(other)
    if target and target == candidate:
        return NORMALIZED_MATCH_SCORE

    target_words = name_words(target, MIN_WORD_LENGTH)
    candidate_words = name_words(candidate, MIN_WORD_LENGTH)
    if not target_words or not candidate_words:
        return 0

    ratio = overlap_ratio(target_words, candidate_words)
    if _context_gated(target, candidate, ratio):
        return 0
    return overlap_band(ratio)


def score_match(raw_name: str, exercise: CanonicalExercise) -> int:
    return score_names(raw_name, exercise.name)


def rank_matches(
    raw_name: str,
    catalog: Iterable[CanonicalExercise],
    limit: Optional[int] = None,
) -> List[MatchCandidate]:
    """Score every catalog entry, best first; equal scores keep catalog order."""
    scored = [MatchCandidate(exercise=exercise, score=score_match(raw_name, exercise)) for exercise in catalog]
    scored.sort(key=lambda candidate: candidate.score, reverse=True)
    return scored[:limit] if limit is not None else scored


def match_exercise(
    raw_name: str,
    catalog: Iterable[CanonicalExercise],
    threshold: int = MATCH_THRESHOLD,
) -> Optional[MatchCandidate]:
    """Return the best catalog candidate scoring at least ``threshold``."""
    best: Optional[MatchCandidate] = None
    for exercise in catalog:
        score = score_match(raw_name, exercise)
        if best is None or score > best.score:
            best = MatchCandidate(exercise=exercise, score=score)

    if best is None or best.score < threshold:
        return None
    return best
