"""Parsing helpers for provider payloads and mention input files."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from exmatch.core.models import Mention

DURATION_PATTERN = re.compile(
    r"^(?:P(?:(?P<days>\d+)D)?)?T?"
    r"(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+)S)?$",
    re.IGNORECASE,
)


def parse_duration(token: Optional[str]) -> int:
    """Parse a provider duration token such as ``PT4M30S`` into seconds.

    Every field is optional and missing fields count as zero. Anything that
    does not parse yields 0 rather than an error.
    """
    if not isinstance(token, str):
        return 0
    matched = DURATION_PATTERN.match(token.strip())
    if matched is None:
        return 0

    days = int(matched.group("days") or 0)
    hours = int(matched.group("hours") or 0)
    minutes = int(matched.group("minutes") or 0)
    seconds = int(matched.group("seconds") or 0)
    return days * 86_400 + hours * 3_600 + minutes * 60 + seconds


def coerce_int(raw_value: Any, default: int = 0) -> int:
    """Coerce provider counters (often strings) to int."""
    if isinstance(raw_value, bool):
        return int(raw_value)
    if isinstance(raw_value, int):
        return raw_value
    if isinstance(raw_value, float):
        return int(raw_value)
    if isinstance(raw_value, str):
        try:
            return int(raw_value.strip())
        except ValueError:
            return default
    return default


def _optional_int(raw_value: Any) -> Optional[int]:
    if raw_value is None or raw_value == "":
        return None
    value = coerce_int(raw_value, default=-1)
    return value if value >= 0 else None


def mention_from_item(item: Any) -> Optional[Mention]:
    """Build a mention from a bare string or a mapping payload."""
    if isinstance(item, str):
        text = item.strip()
        return Mention(text=text) if text else None
    if not isinstance(item, dict):
        return None

    text = str(item.get("exercise") or item.get("name") or item.get("text") or "").strip()
    if not text:
        return None
    slot = item.get("slot") or item.get("type")
    return Mention(
        text=text,
        slot=str(slot) if slot else None,
        workout_id=_optional_int(item.get("workout_id") or item.get("workoutId")),
        current_id=_optional_int(item.get("exercise_id") or item.get("exerciseId")),
    )


def _mentions_from_workout(workout: Dict[str, Any]) -> List[Mention]:
    mentions: List[Mention] = []
    workout_id = _optional_int(workout.get("id"))
    for slot_key, slot in (("warmUp", "warmup"), ("warm_up", "warmup"), ("coolDown", "cooldown"), ("cool_down", "cooldown")):
        section = workout.get(slot_key)
        if not isinstance(section, dict):
            continue
        for activity in section.get("activities") or []:
            if not isinstance(activity, dict):
                continue
            payload = dict(activity)
            payload.setdefault("slot", slot)
            payload.setdefault("workout_id", workout_id)
            mention = mention_from_item(payload)
            if mention:
                mentions.append(mention)

    for exercise in workout.get("exercises") or []:
        if not isinstance(exercise, dict):
            continue
        payload = dict(exercise)
        payload.setdefault("slot", "main")
        payload.setdefault("workout_id", workout_id)
        mention = mention_from_item(payload)
        if mention:
            mentions.append(mention)
    return mentions


def mentions_from_payload(raw_data: Any) -> List[Mention]:
    """Extract mentions from a list of names/objects or workout payloads."""
    if isinstance(raw_data, dict):
        if "mentions" in raw_data:
            raw_data = raw_data["mentions"]
        elif "workouts" in raw_data:
            raw_data = raw_data["workouts"]
        else:
            raw_data = [raw_data]
    if not isinstance(raw_data, list):
        return []

    mentions: List[Mention] = []
    for item in raw_data:
        if isinstance(item, dict) and any(
            key in item for key in ("warmUp", "warm_up", "coolDown", "cool_down", "exercises")
        ):
            mentions.extend(_mentions_from_workout(item))
            continue
        mention = mention_from_item(item)
        if mention:
            mentions.append(mention)
    return mentions


def load_mention_input(file_path: Optional[Path], read_stdin: bool, stdin_text: str = "") -> List[Mention]:
    """Load mentions from a JSON/YAML file or stdin text."""
    raw_data: Any
    if file_path:
        text = file_path.read_text()
        if file_path.suffix.lower() in {".yaml", ".yml"}:
            raw_data = yaml.safe_load(text)
        else:
            raw_data = json.loads(text)
    elif read_stdin:
        text = stdin_text.strip()
        if not text:
            return []
        try:
            raw_data = json.loads(text)
        except json.JSONDecodeError:
            raw_data = yaml.safe_load(text)
    else:
        return []

    return mentions_from_payload(raw_data)
