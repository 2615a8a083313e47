"""Formatting helpers used by exports and console output."""

from __future__ import annotations

from typing import Optional

from exmatch.core.constants import CATEGORY_LABELS, YOUTUBE_WATCH_URL


def format_seconds(seconds: Optional[int]) -> str:
    """Format seconds as H:MM:SS or M:SS."""
    if not seconds:
        return "N/A"
    h, rem = divmod(int(seconds), 3600)
    m, s = divmod(rem, 60)
    if h:
        return f"{h}:{m:02d}:{s:02d}"
    return f"{m}:{s:02d}"


def format_count(value: Optional[int]) -> str:
    """Compact view/like counts: 1.2M, 34.5K."""
    if not value:
        return "0"
    number = float(value)
    if number >= 1_000_000:
        return f"{number / 1_000_000:.1f}M"
    if number >= 1_000:
        return f"{number / 1_000:.1f}K"
    return str(int(number))


def format_category(category: Optional[str]) -> str:
    return CATEGORY_LABELS.get(category or "", category or "-")


def video_url(video_id: Optional[str]) -> str:
    if not video_id:
        return "-"
    return YOUTUBE_WATCH_URL.format(video_id=video_id)
