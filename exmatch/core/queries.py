"""Search phrase generation for tutorial video lookups."""

from __future__ import annotations

from typing import List, Optional

from exmatch.core.constants import GENERAL_QUERY_TEMPLATES, QUERY_TEMPLATES


def generate_queries(name: str, category: str, limit: Optional[int] = None) -> List[str]:
    """Build category-specific search phrases in the order they should be tried."""
    clean = " ".join((name or "").split())
    if not clean:
        return []

    templates = QUERY_TEMPLATES.get(category, GENERAL_QUERY_TEMPLATES)
    queries = list(dict.fromkeys(template.format(name=clean) for template in templates))
    if limit is not None and limit > 0:
        return queries[:limit]
    return queries
