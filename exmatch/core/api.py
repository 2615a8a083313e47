"""YouTube Data API client with retry, rate limiting and key failover."""

from __future__ import annotations

import logging
import threading
import time
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Sequence
from zoneinfo import ZoneInfo

import requests

from exmatch.core.constants import YOUTUBE_API_BASE
from exmatch.utils.parsing import coerce_int, parse_duration

logger = logging.getLogger(__name__)

QUOTA_REASONS = {"quotaExceeded", "dailyLimitExceeded"}
# Daily quota resets at midnight Pacific time.
QUOTA_TIMEZONE = ZoneInfo("America/Los_Angeles")
MAX_IDS_PER_DETAILS_CALL = 50


class APIError(RuntimeError):
    """Raised for API failures after retries."""


class QuotaExhaustedError(APIError):
    """Raised when every configured API key has run out of quota.

    ``partial`` holds the best result found before quota ran out, if any.
    """

    def __init__(self, message: str = "All YouTube API keys exhausted", partial: Any = None) -> None:
        super().__init__(message)
        self.partial = partial


def _quota_day() -> date:
    return datetime.now(QUOTA_TIMEZONE).date()


def _error_reason(response: requests.Response) -> Optional[str]:
    try:
        payload = response.json()
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None
    error = payload.get("error")
    if not isinstance(error, dict):
        return None
    errors = error.get("errors")
    if isinstance(errors, list) and errors and isinstance(errors[0], dict):
        reason = errors[0].get("reason")
        return str(reason) if reason else None
    return None


def _thumbnail_url(snippet: Dict[str, Any]) -> Optional[str]:
    thumbnails = snippet.get("thumbnails") or {}
    for quality in ("high", "medium", "default"):
        url = (thumbnails.get(quality) or {}).get("url")
        if isinstance(url, str) and url.strip():
            return url
    return None


class YouTubeAPI:
    """Thin wrapper around the YouTube Data API v3 search and videos endpoints."""

    def __init__(
        self,
        api_keys: Sequence[str],
        base_url: str = YOUTUBE_API_BASE,
        rate_limit_delay: float = 1.0,
        max_retries: int = 3,
        timeout_seconds: int = 30,
    ) -> None:
        self.api_keys = [key for key in api_keys if key]
        self.base_url = base_url.rstrip("/")
        self.rate_limit_delay = rate_limit_delay
        self.max_retries = max_retries
        self.timeout_seconds = timeout_seconds
        self._key_index = 0
        self._quota_day = _quota_day()
        self._key_lock = threading.Lock()
        self._throttle_lock = threading.Lock()
        self._last_request_at: Optional[float] = None

    def _current_key(self) -> str:
        if not self.api_keys:
            raise APIError("No YouTube API keys configured")
        with self._key_lock:
            today = _quota_day()
            if today != self._quota_day:
                if self._key_index:
                    logger.info("Daily quota reset detected, returning to the first API key")
                self._key_index = 0
                self._quota_day = today
            if self._key_index >= len(self.api_keys):
                raise QuotaExhaustedError("All YouTube API keys exhausted")
            return self.api_keys[self._key_index]

    def _rotate_key(self, exhausted_key: str) -> None:
        with self._key_lock:
            # Another thread may already have rotated past this key.
            if self._key_index < len(self.api_keys) and self.api_keys[self._key_index] == exhausted_key:
                self._key_index += 1
                logger.warning(
                    "Quota exceeded for API key %s/%s",
                    self._key_index,
                    len(self.api_keys),
                )

    def _throttle(self) -> None:
        with self._throttle_lock:
            if self.rate_limit_delay > 0 and self._last_request_at is not None:
                wait = self._last_request_at + self.rate_limit_delay - time.monotonic()
                if wait > 0:
                    time.sleep(wait)
            self._last_request_at = time.monotonic()

    def key_status(self) -> Dict[str, Any]:
        with self._key_lock:
            return {
                "total_keys": len(self.api_keys),
                "active_key": min(self._key_index + 1, len(self.api_keys)),
                "keys_remaining": max(len(self.api_keys) - self._key_index, 0),
                "quota_day": self._quota_day.isoformat(),
                "quota_reset": "midnight America/Los_Angeles",
            }

    def _request(self, path: str, params: Dict[str, Any]) -> Any:
        url = f"{self.base_url}{path}"
        last_error: Optional[Exception] = None

        attempt = 0
        while attempt < self.max_retries:
            attempt += 1
            key = self._current_key()
            try:
                self._throttle()
                response = requests.request(
                    method="GET",
                    url=url,
                    params={**params, "key": key},
                    timeout=self.timeout_seconds,
                )
                if response.status_code == 403 and _error_reason(response) in QUOTA_REASONS:
                    self._rotate_key(key)
                    # Switching keys does not count as a retry.
                    attempt -= 1
                    continue
                if response.status_code in (429, 500, 502, 503, 504):
                    raise requests.HTTPError(response.text, response=response)
                response.raise_for_status()

                if not response.text:
                    return {}
                return response.json()
            except (requests.RequestException, ValueError) as exc:
                last_error = exc
                if attempt >= self.max_retries:
                    break
                time.sleep(min(2**attempt, 8))

        raise APIError(f"API request failed for GET {path}: {last_error}")

    def search(self, query: str, max_results: int = 10) -> List[Dict[str, Any]]:
        """Search embeddable videos; returns id/title/channel/thumbnail records."""
        payload = self._request(
            "/search",
            {
                "part": "snippet",
                "type": "video",
                "q": query,
                "maxResults": max(1, min(int(max_results), 50)),
                "videoEmbeddable": "true",
                "relevanceLanguage": "en",
                "safeSearch": "strict",
            },
        )
        results: List[Dict[str, Any]] = []
        for item in (payload or {}).get("items") or []:
            item_id = item.get("id")
            video_id = item_id.get("videoId") if isinstance(item_id, dict) else None
            if not video_id:
                continue
            snippet = item.get("snippet") or {}
            results.append(
                {
                    "id": str(video_id),
                    "title": str(snippet.get("title") or ""),
                    "channel_title": str(snippet.get("channelTitle") or ""),
                    "thumbnail_url": _thumbnail_url(snippet),
                }
            )
        return results

    def video_details(self, ids: Sequence[str]) -> List[Dict[str, Any]]:
        """Fetch duration and statistics for video ids."""
        details: List[Dict[str, Any]] = []
        unique_ids = list(dict.fromkeys(video_id for video_id in ids if video_id))
        for start in range(0, len(unique_ids), MAX_IDS_PER_DETAILS_CALL):
            chunk = unique_ids[start : start + MAX_IDS_PER_DETAILS_CALL]
            payload = self._request(
                "/videos",
                {"part": "contentDetails,statistics", "id": ",".join(chunk)},
            )
            for item in (payload or {}).get("items") or []:
                statistics = item.get("statistics") or {}
                duration_token = (item.get("contentDetails") or {}).get("duration")
                details.append(
                    {
                        "id": str(item.get("id") or ""),
                        "duration": duration_token,
                        "duration_seconds": parse_duration(duration_token),
                        "view_count": coerce_int(statistics.get("viewCount")),
                        "like_count": coerce_int(statistics.get("likeCount")),
                    }
                )
        return details
