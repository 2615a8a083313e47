"""JSON export helpers."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from exmatch.core.models import BatchReport, Resolution, ScoredVideo


def write_json(path: Path, payload: Any) -> Path:
    """Write payload as pretty JSON and return path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2) + "\n")
    return path


def resolutions_payload(resolutions: Mapping[Any, Resolution], report: BatchReport) -> Dict[str, Any]:
    return {
        "resolutions": [resolution.to_dict() for resolution in resolutions.values()],
        "summary": report.to_dict(),
    }


def videos_payload(
    videos: Mapping[int, Optional[ScoredVideo]],
    names: Mapping[int, str],
    report: BatchReport,
) -> Dict[str, Any]:
    return {
        "videos": [
            {
                "exercise_id": exercise_id,
                "exercise": names.get(exercise_id),
                "video": video.to_dict() if video is not None else None,
            }
            for exercise_id, video in videos.items()
        ],
        "summary": report.to_dict(),
    }
