"""Video candidate scoring."""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Sequence, Tuple

from exmatch.core.constants import (
    CONFIDENT_VIDEO_SCORE,
    DURATION_BANDS,
    EARLY_EXIT_SCORE,
    GENERAL,
    LIKE_COUNT_BONUS,
    LIKE_COUNT_THRESHOLD,
    MAX_VIDEO_SECONDS,
    PREFERRED_CHANNEL_BONUS,
    PREFERRED_CHANNELS,
    REJECTED_SCORE,
    TITLE_KEYWORD_BONUSES,
    TITLE_PENALTIES,
    VIEW_COUNT_BONUS,
    VIEW_COUNT_THRESHOLD,
)
from exmatch.core.models import VideoCandidate


def _phrase_in(text: str, phrase: str) -> bool:
    return re.search(r"\b" + re.escape(phrase) + r"\b", text) is not None


def duration_bonus(duration_seconds: int) -> int:
    for minimum, bonus in DURATION_BANDS:
        if duration_seconds >= minimum:
            return bonus
    return DURATION_BANDS[-1][1]


def title_bonus(title: str, category: str) -> int:
    text = title.lower()
    table = TITLE_KEYWORD_BONUSES.get(category, TITLE_KEYWORD_BONUSES[GENERAL])
    return sum(points for keywords, points in table if any(keyword in text for keyword in keywords))


def title_penalty(title: str, penalties: Dict[str, int] = TITLE_PENALTIES) -> int:
    text = title.lower()
    return sum(points for phrase, points in penalties.items() if _phrase_in(text, phrase))


def channel_bonus(channel_title: str, preferred: Sequence[str] = PREFERRED_CHANNELS) -> int:
    channel = channel_title.lower()
    if channel and any(name.lower() in channel for name in preferred):
        return PREFERRED_CHANNEL_BONUS
    return 0


def popularity_bonus(view_count: int, like_count: int) -> int:
    bonus = 0
    if view_count > VIEW_COUNT_THRESHOLD:
        bonus += VIEW_COUNT_BONUS
    if like_count > LIKE_COUNT_THRESHOLD:
        bonus += LIKE_COUNT_BONUS
    return bonus


def score_video(
    candidate: VideoCandidate,
    category: str,
    preferred_channels: Optional[Sequence[str]] = None,
) -> int:
    """Score a video for a movement category; anything over five minutes is rejected."""
    if candidate.duration_seconds > MAX_VIDEO_SECONDS:
        return REJECTED_SCORE

    score = duration_bonus(candidate.duration_seconds)
    score += title_bonus(candidate.title, category)
    score += popularity_bonus(candidate.view_count, candidate.like_count)
    score += channel_bonus(
        candidate.channel_title,
        PREFERRED_CHANNELS if preferred_channels is None else preferred_channels,
    )
    score -= title_penalty(candidate.title)
    return score


def score_breakdown(
    candidate: VideoCandidate,
    category: str,
    preferred_channels: Optional[Sequence[str]] = None,
) -> List[Tuple[str, int]]:
    """Itemized score components, for display."""
    if candidate.duration_seconds > MAX_VIDEO_SECONDS:
        return [("duration over limit", REJECTED_SCORE)]
    channels = PREFERRED_CHANNELS if preferred_channels is None else preferred_channels
    parts = [
        ("duration", duration_bonus(candidate.duration_seconds)),
        ("title keywords", title_bonus(candidate.title, category)),
        ("popularity", popularity_bonus(candidate.view_count, candidate.like_count)),
        ("channel", channel_bonus(candidate.channel_title, channels)),
        ("penalties", -title_penalty(candidate.title)),
    ]
    return [(label, points) for label, points in parts if points]


def is_acceptable(score: int, threshold: int = EARLY_EXIT_SCORE) -> bool:
    """Good enough to stop trying further queries."""
    return score > threshold


def is_confident(score: int) -> bool:
    """Good enough for single-shot acceptance."""
    return score > CONFIDENT_VIDEO_SCORE
