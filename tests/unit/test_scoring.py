from __future__ import annotations

import pytest

from exmatch.core.models import VideoCandidate
from exmatch.core.scoring import (
    duration_bonus,
    is_acceptable,
    is_confident,
    score_breakdown,
    score_video,
)


def _video(title: str = "Untitled", duration: int = 90, **extra) -> VideoCandidate:
    return VideoCandidate(id="vid00000001", title=title, duration_seconds=duration, **extra)


def test_warmup_scenario_rejects_long_and_scores_short() -> None:
    too_long = _video("Arm Circles Warm Up Exercise Technique", duration=310, view_count=10**6, like_count=10**4)
    short = _video("Arm Circles Form Tutorial", duration=90)

    assert score_video(too_long, "warmup") == -100
    assert score_video(short, "warmup") == 45


@pytest.mark.parametrize("category", ["strength", "cardio", "flexibility", "warmup", "general"])
def test_long_videos_always_rejected(category: str) -> None:
    candidate = _video(
        "Stretch exercise workout form technique tutorial",
        duration=301,
        channel_title="Athlean-X",
        view_count=10**7,
        like_count=10**5,
    )
    assert score_video(candidate, category) == -100


@pytest.mark.parametrize(
    ("duration", "expected"),
    [(0, 10), (29, 10), (30, 20), (59, 20), (60, 30), (300, 30)],
)
def test_duration_bands(duration: int, expected: int) -> None:
    assert duration_bonus(duration) == expected


def test_category_keyword_groups_award_once() -> None:
    assert score_video(_video("Squat form and technique"), "strength") == 30 + 25
    assert score_video(_video("Hamstring stretch for flexibility"), "flexibility") == 30 + 25
    assert score_video(_video("Plank exercise workout"), "general") == 30 + 10 + 8


def test_popularity_thresholds_are_strict() -> None:
    assert score_video(_video(view_count=10_001, like_count=101), "general") == 30 + 15
    assert score_video(_video(view_count=10_000, like_count=100), "general") == 30


def test_preferred_channel_bonus() -> None:
    assert score_video(_video(channel_title="ATHLEAN-X™"), "general") == 30 + 40
    assert score_video(_video(channel_title="Athlean-X"), "general", preferred_channels=[]) == 30


def test_off_topic_titles_are_penalized() -> None:
    assert score_video(_video("Squat FAIL compilation"), "strength") == 30 - 50 - 25
    # Whole words only: "failure" is not "fail".
    assert score_video(_video("Squat to failure"), "strength") == 30


def test_breakdown_matches_score() -> None:
    candidate = _video("How to do a squat: proper form", channel_title="Jeff Nippard", view_count=50_000)
    breakdown = dict(score_breakdown(candidate, "strength"))
    assert sum(breakdown.values()) == score_video(candidate, "strength")
    assert breakdown["channel"] == 40
    assert score_breakdown(_video(duration=400), "strength") == [("duration over limit", -100)]


def test_acceptance_thresholds() -> None:
    assert is_acceptable(41) is True
    assert is_acceptable(40) is False
    assert is_acceptable(41, threshold=60) is False
    assert is_confident(71) is True
    assert is_confident(70) is False
