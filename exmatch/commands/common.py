"""Shared command helpers."""

from __future__ import annotations

import json
from typing import Any, Dict, List, NoReturn

import typer

from exmatch.core.api import YouTubeAPI
from exmatch.core.catalog import CatalogError, JsonCatalogStore
from exmatch.core.config import resolve_api_keys, resolve_catalog_path
from exmatch.core.models import BatchReport, CanonicalExercise
from exmatch.core.search import SearchOrchestrator
from exmatch.core.state import CLIState


def get_state(ctx: typer.Context) -> CLIState:
    """Extract validated CLI state from Typer context."""
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=2)
    return state


def print_json_payload(state: CLIState, payload: Any) -> None:
    """Print JSON payload with plain-mode fallback for piping."""
    if state.plain_output:
        typer.echo(json.dumps(payload, separators=(",", ":")))
        return
    state.console.print_json(data=payload)


def report_error(state: CLIState, message: str, code: int = 1) -> NoReturn:
    """Print an error in the active output mode and exit."""
    if state.json_output:
        print_json_payload(state, {"status": "error", "message": message})
    elif state.plain_output:
        typer.echo("status\terror")
        typer.echo(f"message\t{message}")
    else:
        state.console.print(f"Error: {message}")
    raise typer.Exit(code=code)


def open_catalog(state: CLIState, dry_run: bool = False) -> JsonCatalogStore:
    """Open the configured catalog; dry runs keep every write in memory."""
    path = resolve_catalog_path(state.config, explicit=state.catalog_path)
    return JsonCatalogStore(path, autosave=not dry_run)


def load_catalog(state: CLIState, store: JsonCatalogStore) -> List[CanonicalExercise]:
    """Read the catalog snapshot, exiting cleanly on an unreadable file."""
    try:
        return store.list_exercises()
    except CatalogError as exc:
        report_error(state, str(exc))


def build_api(state: CLIState) -> YouTubeAPI:
    """Create the video provider client from config; missing keys exit with code 2."""
    keys = resolve_api_keys(state.config)
    if not keys:
        env_names = state.config.get("youtube", {}).get("api_key_envs") or ["YOUTUBE_API_KEY"]
        if isinstance(env_names, str):
            env_names = [env_names]
        report_error(
            state,
            f"No YouTube API key found. Set one of: {', '.join(str(name) for name in env_names)}",
            code=2,
        )

    api_cfg = state.config.get("api", {})
    return YouTubeAPI(
        api_keys=keys,
        rate_limit_delay=float(api_cfg.get("rate_limit_delay", 1.0)),
        max_retries=int(api_cfg.get("max_retries", 3)),
        timeout_seconds=int(api_cfg.get("timeout_seconds", 30)),
    )


def build_orchestrator(state: CLIState, api: YouTubeAPI) -> SearchOrchestrator:
    search_cfg = state.config.get("search", {})
    youtube_cfg = state.config.get("youtube", {})
    max_queries = int(search_cfg.get("max_queries", 0) or 0)
    return SearchOrchestrator(
        provider=api,
        max_results=int(youtube_cfg.get("max_results", 10)),
        max_queries=max_queries or None,
        preferred_channels=search_cfg.get("preferred_channels"),
    )


def summary_rows(report: BatchReport) -> Dict[str, Any]:
    return {
        "succeeded": report.succeeded,
        "failed": report.failed,
        "skipped": report.skipped,
        "no_match": report.no_match,
        "total": report.total,
    }

