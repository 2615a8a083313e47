"""Lookup-or-create resolution of exercise mentions against the catalog."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Dict, List, Optional, Sequence, Tuple

from exmatch.core.catalog import CatalogError, CatalogStore, DuplicateSlug
from exmatch.core.constants import DEFAULT_EXERCISE_FIELDS, GENERAL, MATCH_THRESHOLD
from exmatch.core.matcher import match_exercise
from exmatch.core.models import BatchReport, CanonicalExercise, MatchCandidate, Mention, Resolution
from exmatch.utils.text import slugify

logger = logging.getLogger(__name__)


def new_exercise_fields(name: str, slug: str) -> Dict[str, Any]:
    """Default metadata for an exercise first seen in a planner mention."""
    clean = name.strip()
    return {
        "slug": slug,
        "name": clean,
        # Creation does not classify; video search classifies generic records by name.
        "category": GENERAL,
        "difficulty": DEFAULT_EXERCISE_FIELDS["difficulty"],
        "muscle_groups": list(DEFAULT_EXERCISE_FIELDS["muscle_groups"]),
        "equipment": list(DEFAULT_EXERCISE_FIELDS["equipment"]),
        "instructions": [f"Perform {clean.lower()} as instructed"],
    }


class EntityResolver:
    """Resolve mentions to canonical exercises, creating records when nothing matches.

    Matching reads the caller's catalog snapshot. Creation is serialized through
    a single writer lock, and every record created by this resolver is matched
    again under that lock so two workers never create the same exercise.
    """

    def __init__(
        self,
        store: CatalogStore,
        threshold: int = MATCH_THRESHOLD,
        max_slug_attempts: int = 20,
    ) -> None:
        self.store = store
        self.threshold = threshold
        self.max_slug_attempts = max(1, max_slug_attempts)
        self._write_lock = threading.Lock()
        self._created: List[CanonicalExercise] = []

    @property
    def created(self) -> List[CanonicalExercise]:
        return list(self._created)

    def _hit(self, mention: Mention, candidate: MatchCandidate) -> Resolution:
        redirected = mention.current_id is not None and mention.current_id != candidate.exercise.id
        if redirected:
            logger.info(
                "Redirecting %r from exercise %s to %s (%s, score %s)",
                mention.text,
                mention.current_id,
                candidate.exercise.id,
                candidate.exercise.name,
                candidate.score,
            )
        return Resolution(
            mention=mention,
            exercise=candidate.exercise,
            score=candidate.score,
            redirected=redirected,
        )

    def _create(self, mention: Mention) -> CanonicalExercise:
        base_slug = slugify(mention.text)
        for attempt in range(1, self.max_slug_attempts + 1):
            slug = base_slug if attempt == 1 else f"{base_slug}-{attempt}"
            try:
                exercise = self.store.create_exercise(new_exercise_fields(mention.text, slug))
            except DuplicateSlug:
                logger.debug("Slug %s taken, trying next suffix", slug)
                continue
            logger.info("Created exercise %s (%s) for %r", exercise.id, exercise.slug, mention.text)
            return exercise
        raise DuplicateSlug(base_slug)

    def resolve(self, mention: Mention, catalog: Sequence[CanonicalExercise]) -> Resolution:
        """Return the matched exercise, or create one when no candidate reaches the threshold."""
        candidate = match_exercise(mention.text, catalog, self.threshold)
        if candidate is not None:
            return self._hit(mention, candidate)

        with self._write_lock:
            candidate = match_exercise(mention.text, self._created, self.threshold)
            if candidate is not None:
                return self._hit(mention, candidate)
            exercise = self._create(mention)
            self._created.append(exercise)

        redirected = mention.current_id is not None and mention.current_id != exercise.id
        return Resolution(mention=mention, exercise=exercise, created=True, redirected=redirected)


def resolve_mentions(
    mentions: Sequence[Mention],
    catalog: Sequence[CanonicalExercise],
    resolver: EntityResolver,
    workers: int = 5,
    cancel: Optional[threading.Event] = None,
) -> Tuple[Dict[Mention, Resolution], BatchReport]:
    """Resolve mentions concurrently against one catalog snapshot."""
    results: Dict[Mention, Resolution] = {}
    report = BatchReport()
    unique = list(dict.fromkeys(mentions))
    if not unique:
        return results, report

    def process(mention: Mention) -> Optional[Resolution]:
        if cancel is not None and cancel.is_set():
            return None
        return resolver.resolve(mention, catalog)

    with ThreadPoolExecutor(max_workers=max(1, workers)) as executor:
        future_to_mention = {executor.submit(process, mention): mention for mention in unique}
        for future in as_completed(future_to_mention):
            mention = future_to_mention[future]
            try:
                resolution = future.result()
            except (CatalogError, OSError) as exc:
                logger.error("Failed to resolve %r: %s", mention.text, exc)
                report.failed += 1
                report.errors[mention.text] = str(exc)
                continue

            if resolution is None:
                report.skipped += 1
                report.cancelled = True
                continue
            results[mention] = resolution
            report.succeeded += 1

    ordered = {mention: results[mention] for mention in unique if mention in results}
    return ordered, report
