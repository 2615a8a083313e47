"""Multi-query video search orchestration."""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, Tuple

from exmatch.core.api import APIError, QuotaExhaustedError
from exmatch.core.catalog import CatalogError, CatalogStore
from exmatch.core.classify import Rules, search_category
from exmatch.core.constants import CATEGORY_RULES, EARLY_EXIT_SCORE, YOUTUBE_THUMBNAIL_URL
from exmatch.core.models import BatchReport, CanonicalExercise, ScoredVideo, VideoCandidate
from exmatch.core.queries import generate_queries
from exmatch.core.scoring import is_acceptable, score_video
from exmatch.utils.parsing import coerce_int

logger = logging.getLogger(__name__)


class VideoProvider(Protocol):
    def search(self, query: str, max_results: int = 10) -> List[Dict[str, Any]]: ...

    def video_details(self, ids: Sequence[str]) -> List[Dict[str, Any]]: ...


def build_candidates(
    results: Sequence[Dict[str, Any]],
    details: Sequence[Dict[str, Any]],
) -> List[VideoCandidate]:
    """Join search hits with their detail records; hits without details are dropped."""
    by_id = {str(detail.get("id")): detail for detail in details}
    candidates: List[VideoCandidate] = []
    for result in results:
        video_id = str(result.get("id") or "")
        detail = by_id.get(video_id)
        if not video_id or detail is None:
            continue
        candidates.append(
            VideoCandidate(
                id=video_id,
                title=str(result.get("title") or ""),
                channel_title=str(result.get("channel_title") or ""),
                duration_seconds=coerce_int(detail.get("duration_seconds")),
                view_count=coerce_int(detail.get("view_count")),
                like_count=coerce_int(detail.get("like_count")),
                thumbnail_url=result.get("thumbnail_url") or YOUTUBE_THUMBNAIL_URL.format(video_id=video_id),
            )
        )
    return candidates


class SearchOrchestrator:
    """Try generated queries in order and keep the best scoring video.

    Spacing between provider calls is enforced by the provider client, which
    is shared by every worker.
    """

    def __init__(
        self,
        provider: VideoProvider,
        max_results: int = 10,
        max_queries: Optional[int] = None,
        early_exit_score: int = EARLY_EXIT_SCORE,
        preferred_channels: Optional[Sequence[str]] = None,
    ) -> None:
        self.provider = provider
        self.max_results = max_results
        self.max_queries = max_queries
        self.early_exit_score = early_exit_score
        self.preferred_channels = preferred_channels

    def candidates_for_query(self, query: str) -> List[VideoCandidate]:
        """Search and enrich one query; transport failures yield no candidates."""
        try:
            results = self.provider.search(query, self.max_results)
            if not results:
                return []
            details = self.provider.video_details([str(result.get("id")) for result in results])
        except QuotaExhaustedError:
            raise
        except APIError as exc:
            logger.warning("Search for %r failed, skipping query: %s", query, exc)
            return []
        return build_candidates(results, details)

    def select_video(
        self,
        name: str,
        category: str,
        cancel: Optional[threading.Event] = None,
    ) -> Optional[ScoredVideo]:
        """Return the best positively scored video for an exercise, or None."""
        best: Optional[ScoredVideo] = None
        queries = generate_queries(name, category, self.max_queries)
        logger.info("Searching videos for %r (%s, %s queries)", name, category, len(queries))

        for index, query in enumerate(queries, start=1):
            if cancel is not None and cancel.is_set():
                logger.info("Search for %r cancelled after %s queries", name, index - 1)
                break

            logger.debug("Query %s/%s: %r", index, len(queries), query)
            try:
                candidates = self.candidates_for_query(query)
            except QuotaExhaustedError as exc:
                if best is None:
                    raise
                logger.warning("Quota ran out while searching %r, keeping best so far (score %s)", name, best.score)
                raise QuotaExhaustedError(str(exc), partial=best) from exc

            for candidate in candidates:
                score = score_video(candidate, category, self.preferred_channels)
                logger.debug("  %s %r by %s scored %s", candidate.id, candidate.title, candidate.channel_title, score)
                if score > 0 and (best is None or score > best.score):
                    best = ScoredVideo(candidate=candidate, score=score)

            if best is not None and is_acceptable(best.score, self.early_exit_score):
                break

        if best is None:
            logger.info("No acceptable video for %r", name)
        else:
            logger.info("Selected %s %r for %r (score %s)", best.candidate.id, best.candidate.title, name, best.score)
        return best


def populate_videos(
    exercises: Sequence[CanonicalExercise],
    orchestrator: SearchOrchestrator,
    store: Optional[CatalogStore] = None,
    batch_size: int = 5,
    batch_delay: float = 2.0,
    force: bool = False,
    cancel: Optional[threading.Event] = None,
    rules: Rules = CATEGORY_RULES,
    sleep: Callable[[float], None] = time.sleep,
) -> Tuple[Dict[int, Optional[ScoredVideo]], BatchReport]:
    """Select videos for exercises in parallel batches and write winners to the store.

    Exercises that already have a video are skipped unless ``force`` is set.
    Exercises with no acceptable video count as ``no_match``, not failures.
    Quota exhaustion stops scheduling further batches; results computed so far,
    including the best video an interrupted search had already found, are
    stored and returned with ``report.quota_exhausted`` set.
    """
    results: Dict[int, Optional[ScoredVideo]] = {}
    report = BatchReport()

    pending: List[CanonicalExercise] = []
    for exercise in exercises:
        if exercise.has_video and not force:
            report.skipped += 1
            continue
        pending.append(exercise)

    size = max(1, batch_size)
    for start in range(0, len(pending), size):
        if cancel is not None and cancel.is_set():
            report.cancelled = True
            report.skipped += len(pending) - start
            break
        if start:
            sleep(batch_delay)

        batch = pending[start : start + size]
        logger.info(
            "Processing batch %s/%s (%s exercises)",
            start // size + 1,
            (len(pending) + size - 1) // size,
            len(batch),
        )
        with ThreadPoolExecutor(max_workers=len(batch)) as executor:
            future_to_exercise = {
                executor.submit(
                    orchestrator.select_video,
                    exercise.name,
                    search_category(exercise.category, exercise.name, rules),
                    cancel,
                ): exercise
                for exercise in batch
            }
            for future in as_completed(future_to_exercise):
                exercise = future_to_exercise[future]
                try:
                    video = future.result()
                except QuotaExhaustedError as exc:
                    if not report.quota_exhausted:
                        logger.error("Video provider quota exhausted: %s", exc)
                    report.quota_exhausted = True
                    if exc.partial is None:
                        report.failed += 1
                        report.errors[exercise.name] = str(exc)
                        continue
                    video = exc.partial
                except APIError as exc:
                    logger.warning("Video search for %r failed: %s", exercise.name, exc)
                    report.failed += 1
                    report.errors[exercise.name] = str(exc)
                    continue

                results[exercise.id] = video
                if video is None:
                    report.no_match += 1
                    continue

                if store is not None:
                    try:
                        store.update_exercise(
                            exercise.id,
                            video_id=video.candidate.id,
                            thumbnail_url=video.candidate.thumbnail_url,
                        )
                    except CatalogError as exc:
                        logger.error("Could not store video for %r: %s", exercise.name, exc)
                        report.failed += 1
                        report.errors[exercise.name] = str(exc)
                        continue
                report.succeeded += 1

        if report.quota_exhausted:
            report.skipped += len(pending) - (start + len(batch))
            break

    return results, report
