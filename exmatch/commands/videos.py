"""Video lookup commands: videos, search and quota."""

from __future__ import annotations

from contextlib import nullcontext
from typing import Any, Dict, List, Optional

import typer
from rich.table import Table

from exmatch.commands.common import (
    build_api,
    build_orchestrator,
    get_state,
    load_catalog,
    open_catalog,
    print_json_payload,
    report_error,
    summary_rows,
)
from exmatch.core.api import APIError, QuotaExhaustedError
from exmatch.core.classify import classification_rules_from_config, search_category
from exmatch.core.constants import CATEGORIES
from exmatch.core.queries import generate_queries
from exmatch.core.scoring import is_confident, score_breakdown
from exmatch.core.search import populate_videos
from exmatch.exporters.json_export import videos_payload
from exmatch.utils.formatting import format_category, format_count, format_seconds, video_url

QUOTA_EXIT_CODE = 3


def videos_command(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", help="Search again for exercises that already have a video"),
    exercise_ids: Optional[List[int]] = typer.Option(None, "--id", help="Only these exercise IDs (repeatable)"),
    batch_size: Optional[int] = typer.Option(None, help="Exercises searched concurrently per batch"),
) -> None:
    """Find and store a demonstration video for catalog exercises."""
    state = get_state(ctx)
    store = open_catalog(state)
    catalog = load_catalog(state, store)

    if exercise_ids:
        wanted = set(exercise_ids)
        missing = sorted(wanted - {exercise.id for exercise in catalog})
        if missing:
            report_error(state, f"Unknown exercise id(s): {', '.join(str(item) for item in missing)}", code=2)
        catalog = [exercise for exercise in catalog if exercise.id in wanted]

    api = build_api(state)
    orchestrator = build_orchestrator(state, api)
    search_cfg = state.config.get("search", {})

    status_ctx = (
        state.console.status(f"Searching videos for {len(catalog)} exercise(s)...")
        if not state.plain_output
        else nullcontext()
    )
    with status_ctx:
        videos, report = populate_videos(
            catalog,
            orchestrator,
            store=store,
            batch_size=batch_size or int(search_cfg.get("batch_size", 5)),
            batch_delay=float(search_cfg.get("batch_delay", 2.0)),
            force=force,
            rules=classification_rules_from_config(state.config),
        )

    names = {exercise.id: exercise.name for exercise in catalog}
    payload = videos_payload(videos, names, report)
    payload["keys"] = api.key_status()

    if state.json_output:
        print_json_payload(state, payload)
    elif state.plain_output:
        typer.echo("exercise_id\texercise\tvideo_id\tscore\ttitle")
        for exercise_id, video in videos.items():
            typer.echo(
                "\t".join(
                    [
                        str(exercise_id),
                        names.get(exercise_id, ""),
                        video.candidate.id if video else "-",
                        str(video.score) if video else "-",
                        video.candidate.title if video else "-",
                    ]
                )
            )
        for key, value in summary_rows(report).items():
            typer.echo(f"{key}\t{value}")
        typer.echo(f"quota_exhausted\t{str(report.quota_exhausted).lower()}")
    else:
        table = Table(title=f"Exercise videos ({len(videos)} searched)")
        table.add_column("ID")
        table.add_column("Exercise")
        table.add_column("Video")
        table.add_column("Score")
        table.add_column("Duration")
        table.add_column("Title")
        for exercise_id, video in videos.items():
            table.add_row(
                str(exercise_id),
                names.get(exercise_id, ""),
                video_url(video.candidate.id) if video else "no match",
                str(video.score) if video else "-",
                format_seconds(video.candidate.duration_seconds) if video else "-",
                video.candidate.title if video else "-",
            )
        state.console.print(table)
        state.console.print(
            f"Stored {report.succeeded} video(s); {report.no_match} without a match, "
            f"{report.failed} failed, {report.skipped} skipped"
        )
        if report.quota_exhausted:
            state.console.print("YouTube quota exhausted for every key; rerun after the daily reset")

    if report.quota_exhausted:
        raise typer.Exit(code=QUOTA_EXIT_CODE)


def search_command(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Exercise name"),
    category: Optional[str] = typer.Option(None, help="Category: " + "|".join(CATEGORIES)),
) -> None:
    """Search videos for one exercise name without touching the catalog."""
    state = get_state(ctx)
    if category is not None and category not in CATEGORIES:
        raise typer.BadParameter(f"category must be one of: {', '.join(CATEGORIES)}")

    effective = search_category(category, name, classification_rules_from_config(state.config))
    api = build_api(state)
    orchestrator = build_orchestrator(state, api)
    queries = generate_queries(name, effective, orchestrator.max_queries)

    status_ctx = state.console.status(f"Searching videos for '{name}'...") if not state.plain_output else nullcontext()
    quota_exhausted = False
    try:
        with status_ctx:
            best = orchestrator.select_video(name, effective)
    except QuotaExhaustedError as exc:
        if exc.partial is None:
            report_error(state, str(exc), code=QUOTA_EXIT_CODE)
        best = exc.partial
        quota_exhausted = True

    breakdown = score_breakdown(best.candidate, effective, orchestrator.preferred_channels) if best else []
    payload: Dict[str, Any] = {
        "name": name,
        "category": effective,
        "queries": queries,
        "video": best.to_dict() if best else None,
        "confident": is_confident(best.score) if best else False,
        "breakdown": [{"component": label, "points": points} for label, points in breakdown],
        "quota_exhausted": quota_exhausted,
    }

    if state.json_output:
        print_json_payload(state, payload)
        return

    if state.plain_output:
        typer.echo(f"category\t{effective}")
        if best is None:
            typer.echo("video\t-")
            return
        typer.echo(f"video\t{best.candidate.id}")
        typer.echo(f"title\t{best.candidate.title}")
        typer.echo(f"channel\t{best.candidate.channel_title}")
        typer.echo(f"duration\t{best.candidate.duration_seconds}")
        typer.echo(f"score\t{best.score}")
        for label, points in breakdown:
            typer.echo(f"{label}\t{points}")
        return

    state.console.print(f"Category: {format_category(effective)}")
    if best is None:
        state.console.print(f"No acceptable video found for '{name}' ({len(queries)} queries)")
        return

    candidate = best.candidate
    state.console.print(f"Video: {candidate.title}")
    state.console.print(f"Channel: {candidate.channel_title}")
    state.console.print(f"URL: {video_url(candidate.id)}")
    state.console.print(
        f"Duration: {format_seconds(candidate.duration_seconds)}  "
        f"Views: {format_count(candidate.view_count)}  Likes: {format_count(candidate.like_count)}"
    )
    table = Table(title=f"Score {best.score}{' (confident)' if payload['confident'] else ''}")
    table.add_column("Component")
    table.add_column("Points")
    for label, points in breakdown:
        table.add_row(label, f"{points:+d}")
    state.console.print(table)


def quota_command(ctx: typer.Context) -> None:
    """Probe the YouTube API with each configured key and report quota status."""
    state = get_state(ctx)
    api = build_api(state)

    status = "ok"
    message = None
    try:
        api.search("exercise", max_results=1)
    except QuotaExhaustedError as exc:
        status = "exhausted"
        message = str(exc)
    except APIError as exc:
        status = "error"
        message = str(exc)

    payload = {"status": status, "message": message, **api.key_status()}

    if state.json_output:
        print_json_payload(state, payload)
    elif state.plain_output:
        for key, value in payload.items():
            typer.echo(f"{key}\t{value if value is not None else '-'}")
    else:
        state.console.print(f"Status: {status}")
        state.console.print(
            f"Active key: {payload['active_key']}/{payload['total_keys']} ({payload['keys_remaining']} remaining)"
        )
        state.console.print(f"Quota resets at {payload['quota_reset']}")
        if message:
            state.console.print(f"Message: {message}")

    if status == "exhausted":
        raise typer.Exit(code=QUOTA_EXIT_CODE)
    if status == "error":
        raise typer.Exit(code=1)
