from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

import pytest
import typer
from rich.console import Console
from rich.logging import RichHandler

from exmatch.commands.common import build_api, build_orchestrator, get_state, open_catalog
from exmatch.commands.report import build_report
from exmatch.core.logging_config import configure_logging, resolve_log_level
from exmatch.core.models import BatchReport, CanonicalExercise, Mention, Resolution
from exmatch.core.state import CLIState
from exmatch.exporters.json_export import resolutions_payload, write_json
from exmatch.utils.formatting import format_count, format_seconds, video_url


@dataclass
class FakeContext:
    obj: Any


def _state(config: Dict[str, Any] | None = None, catalog_path: Path | None = None) -> CLIState:
    return CLIState(
        json_output=False,
        plain_output=True,
        verbose=False,
        quiet=False,
        config_path=Path("/tmp/config.toml"),
        config=config
        or {
            "api": {"rate_limit_delay": 0.0, "max_retries": 5, "timeout_seconds": 12},
            "youtube": {"api_key_envs": ["TEST_YT_KEY"], "max_results": 7},
            "search": {"max_queries": 2, "preferred_channels": ["MadFit"]},
        },
        console=Console(record=True),
        catalog_path=catalog_path,
    )


def test_get_state_returns_cli_state() -> None:
    state = _state()
    assert get_state(FakeContext(obj=state)) is state


def test_get_state_raises_on_invalid_obj() -> None:
    with pytest.raises(typer.Exit):
        get_state(FakeContext(obj={"not": "state"}))


def test_build_api_uses_configured_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TEST_YT_KEY", "key-abc")
    state = _state()

    api = build_api(state)
    orchestrator = build_orchestrator(state, api)

    assert api.api_keys == ["key-abc"]
    assert api.max_retries == 5
    assert api.timeout_seconds == 12
    assert orchestrator.max_results == 7
    assert orchestrator.max_queries == 2
    assert orchestrator.preferred_channels == ["MadFit"]


def test_build_api_without_keys_exits_with_usage_code(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("TEST_YT_KEY", raising=False)
    with pytest.raises(typer.Exit) as exc_info:
        build_api(_state())
    assert exc_info.value.exit_code == 2


def test_open_catalog_honours_dry_run(tmp_path: Path) -> None:
    store = open_catalog(_state(catalog_path=tmp_path / "catalog.json"), dry_run=True)
    assert store.path == (tmp_path / "catalog.json").resolve()
    assert store.autosave is False


def test_configure_logging_installs_single_rich_handler() -> None:
    console = Console(record=True)
    configure_logging(console, verbose=True)
    logger = configure_logging(console, quiet=True)

    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0], RichHandler)
    assert logger.level == logging.ERROR
    assert resolve_log_level(verbose=False, quiet=False) == logging.WARNING
    assert resolve_log_level(verbose=True, quiet=False) == logging.INFO


def test_formatting_helpers() -> None:
    assert format_seconds(90) == "1:30"
    assert format_seconds(3723) == "1:02:03"
    assert format_seconds(None) == "N/A"
    assert format_count(1_234_567) == "1.2M"
    assert format_count(34_500) == "34.5K"
    assert format_count(999) == "999"
    assert video_url("abc") == "https://www.youtube.com/watch?v=abc"
    assert video_url(None) == "-"


def test_build_report_counts_and_duplicates(sample_exercises) -> None:
    catalog = sample_exercises + [CanonicalExercise(id=8, slug="treadmill-running", name="Running on treadmill")]

    report = build_report(catalog)

    assert report["total"] == 6
    assert report["with_video"] == 1
    assert report["by_category"]["cardio"] == 2
    assert report["by_category"]["general"] == 1
    assert [item["id"] for item in report["missing_videos"]] == [1, 3, 4, 7, 8]
    assert report["duplicates"] == []

    catalog.append(CanonicalExercise(id=9, slug="light-treadmill-jogging", name="Light Treadmill Jogging"))
    duplicates = build_report(catalog)["duplicates"]
    assert duplicates == [
        {
            "normalized": "treadmill jogging",
            "exercises": [{"id": 7, "name": "Treadmill Jogging"}, {"id": 9, "name": "Light Treadmill Jogging"}],
        }
    ]


def test_write_json_resolutions_payload(tmp_path: Path) -> None:
    exercise = CanonicalExercise(id=7, slug="treadmill-jogging", name="Treadmill Jogging", category="cardio")
    mention = Mention(text="Light treadmill jogging", slot="cardio", current_id=3)
    report = BatchReport(succeeded=1)
    payload = resolutions_payload({mention: Resolution(mention=mention, exercise=exercise, score=95, redirected=True)}, report)

    path = write_json(tmp_path / "out" / "resolutions.json", payload)

    saved = json.loads(path.read_text())
    assert saved["resolutions"][0]["exercise_id"] == 7
    assert saved["resolutions"][0]["redirected"] is True
    assert saved["summary"]["total"] == 1
