from __future__ import annotations

from exmatch.core.matcher import match_exercise, overlap_band, rank_matches, score_names
from exmatch.core.models import CanonicalExercise


def test_exact_and_normalized_scores() -> None:
    assert score_names("barbell row", "Barbell Row") == 100
    assert score_names("Light treadmill jogging", "Treadmill Jogging") == 95
    assert score_names("Running on treadmill", "Treadmill Jogging") == 85


def test_overlap_bands_are_monotonic() -> None:
    ratios = [0.0, 0.1, 0.2, 0.3, 0.4, 0.5, 0.6, 0.7, 0.8, 0.9, 1.0]
    bands = [overlap_band(ratio) for ratio in ratios]
    assert bands == sorted(bands)
    assert overlap_band(0.8) == 85
    assert overlap_band(0.6) == 75
    assert overlap_band(0.4) == 60
    assert overlap_band(0.2) == 40
    assert overlap_band(0.19) == 0


def test_breathing_context_gate() -> None:
    assert score_names("Deep breathing and relaxation", "Barbell Row") == 0
    # Half the words overlap, but the candidate has no breathing context.
    assert score_names("Deep breathing stretch", "Hamstring Stretch") == 0


def test_stretch_context_gate() -> None:
    assert score_names("Hamstring Stretch", "Hamstring Curl") == 0
    assert score_names("Hamstring Stretch", "Standing Hamstring Stretch") == 75


def test_arm_gate_only_applies_below_half_overlap() -> None:
    assert score_names("Arm circles forward", "Forward Lunge") == 0
    assert score_names("Arm hold", "Hold Plank") == 60


def test_short_words_are_ignored() -> None:
    assert score_names("Up", "Push Up") == 0


def test_match_exercise_scenario_treadmill(sample_exercises) -> None:
    match = match_exercise("Light treadmill jogging", sample_exercises)
    assert match is not None
    assert match.exercise.id == 7
    assert match.score >= 75


def test_match_exercise_returns_none_below_threshold() -> None:
    catalog = [CanonicalExercise(id=1, slug="barbell-row", name="Barbell Row")]
    assert match_exercise("Deep breathing and relaxation", catalog) is None
    assert match_exercise("Barbell Curl", catalog) is None
    assert match_exercise("Barbell Curl", catalog, threshold=60) is not None


def test_match_exercise_first_seen_wins_ties() -> None:
    catalog = [
        CanonicalExercise(id=10, slug="push-up", name="Push Up"),
        CanonicalExercise(id=11, slug="push-up-2", name="Push Up"),
    ]
    match = match_exercise("push up", catalog)
    assert match is not None
    assert match.exercise.id == 10


def test_match_exercise_empty_catalog() -> None:
    assert match_exercise("Plank", []) is None


def test_rank_matches_orders_best_first(sample_exercises) -> None:
    ranked = rank_matches("Treadmill Jogging", sample_exercises, limit=2)
    assert len(ranked) == 2
    assert ranked[0].exercise.id == 7
    assert ranked[0].score == 100
    assert ranked[0].score >= ranked[1].score
    assert len(rank_matches("Treadmill Jogging", sample_exercises)) == len(sample_exercises)
