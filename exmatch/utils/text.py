"""Text helpers."""

from __future__ import annotations

import re
import unicodedata

from exmatch.core.constants import INTENSITY_MODIFIERS, SYNONYM_GROUPS

_MODIFIER_RE = re.compile(r"\b(?:" + "|".join(INTENSITY_MODIFIERS) + r")\b")
_SYNONYM_RES = [
    (re.compile(r"\b(?:" + "|".join(re.escape(v) for v in variants) + r")\b"), canonical)
    for canonical, variants in SYNONYM_GROUPS
]
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_name(raw: str) -> str:
    """Canonicalize an exercise name for comparison."""
    text = (raw or "").lower().strip()
    text = _WHITESPACE_RE.sub(" ", _MODIFIER_RE.sub("", text))
    # Repeat until stable: "on on treadmill" collapses in two steps.
    previous = None
    while text != previous:
        previous = text
        for pattern, canonical in _SYNONYM_RES:
            text = pattern.sub(canonical, text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def name_words(normalized: str, min_length: int = 3) -> list[str]:
    """Split a normalized name into comparison words."""
    return [word for word in normalized.split(" ") if len(word) >= min_length]


def ascii_fold(value: str) -> str:
    return unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")


def slugify(value: str, max_len: int = 80) -> str:
    """Generate URL-safe slug."""
    slug = re.sub(r"[^a-z0-9]+", "-", ascii_fold(value).lower()).strip("-")
    if not slug:
        slug = "exercise"
    return slug[:max_len].rstrip("-")
