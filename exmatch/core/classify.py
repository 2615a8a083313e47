"""Exercise classification utilities."""

from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from exmatch.core.constants import CATEGORIES, CATEGORY_RULES, GENERAL, SLOT_CATEGORIES

Rules = Sequence[Tuple[str, Sequence[str]]]


def _keyword_pattern(keyword: str) -> re.Pattern[str]:
    # Anchor at a word start only, so "run" matches "running" but not "crunch".
    return re.compile(r"\b" + re.escape(keyword.lower()))


def _matches_any(text: str, keywords: Iterable[str]) -> bool:
    return any(_keyword_pattern(keyword).search(text) for keyword in keywords)


def classify_exercise(name: str, rules: Rules = CATEGORY_RULES) -> str:
    """Assign a movement category; the first matching rule wins."""
    text = (name or "").lower().strip()
    for category, keywords in rules:
        if _matches_any(text, keywords):
            return category
    return GENERAL


def category_for_slot(slot: Optional[str], name: str, rules: Rules = CATEGORY_RULES) -> str:
    """Map a workout slot to a search category, classifying by name otherwise."""
    key = (slot or "").strip().lower().replace("-", "_")
    if key in SLOT_CATEGORIES:
        return SLOT_CATEGORIES[key]
    return classify_exercise(name, rules)


def search_category(category: Optional[str], name: str, rules: Rules = CATEGORY_RULES) -> str:
    """Category used for video search; generic records are classified by name."""
    if category in CATEGORIES and category != GENERAL:
        return str(category)
    return classify_exercise(name, rules)


def classification_rules_from_config(config: Dict[str, Any]) -> List[Tuple[str, List[str]]]:
    """Build rules from config if provided, otherwise defaults."""
    configured = config.get("classification", {}).get("rules", {})
    if not isinstance(configured, dict) or not configured:
        return [(k, list(v)) for k, v in CATEGORY_RULES]

    rules: List[Tuple[str, List[str]]] = []
    for key, value in configured.items():
        if str(key) not in CATEGORIES:
            continue
        if isinstance(value, Iterable) and not isinstance(value, str):
            rules.append((str(key), [str(item).lower() for item in value]))
    return rules or [(k, list(v)) for k, v in CATEGORY_RULES]
