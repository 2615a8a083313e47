"""Resolve workout exercise mentions against the catalog."""

from __future__ import annotations

import json
import sys
from contextlib import nullcontext
from pathlib import Path
from typing import Optional

import typer
import yaml
from rich.table import Table

from exmatch.commands.common import (
    get_state,
    load_catalog,
    open_catalog,
    print_json_payload,
    report_error,
    summary_rows,
)
from exmatch.core.resolver import EntityResolver, resolve_mentions
from exmatch.exporters.json_export import resolutions_payload, write_json
from exmatch.utils.parsing import load_mention_input


def _status(created: bool, redirected: bool) -> str:
    if created:
        return "created"
    if redirected:
        return "redirected"
    return "matched"


def resolve_command(
    ctx: typer.Context,
    file: Optional[Path] = typer.Argument(None, help="JSON/YAML file with exercise mentions or workouts"),
    stdin: bool = typer.Option(False, "--stdin", help="Read mentions from stdin"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Resolve without writing new exercises to the catalog"),
    workers: Optional[int] = typer.Option(None, help="Concurrent resolver workers"),
    output: Optional[Path] = typer.Option(None, help="Also write results to this JSON file"),
) -> None:
    """Match each mention to a catalog exercise, creating exercises for names with no match."""
    state = get_state(ctx)

    stdin_text = sys.stdin.read() if stdin else ""
    try:
        mentions = load_mention_input(file_path=file, read_stdin=stdin, stdin_text=stdin_text)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as exc:
        report_error(state, f"Could not read mentions: {exc}", code=2)

    if not mentions:
        raise typer.BadParameter("Provide a FILE or --stdin with at least one exercise mention")

    resolver_cfg = state.config.get("resolver", {})
    store = open_catalog(state, dry_run=dry_run)
    catalog = load_catalog(state, store)
    resolver = EntityResolver(
        store,
        threshold=int(resolver_cfg.get("threshold", 70)),
        max_slug_attempts=int(resolver_cfg.get("max_slug_attempts", 20)),
    )

    status_ctx = (
        state.console.status(f"Resolving {len(mentions)} mention(s)...")
        if not state.plain_output
        else nullcontext()
    )
    with status_ctx:
        resolutions, report = resolve_mentions(
            mentions,
            catalog,
            resolver,
            workers=workers or int(resolver_cfg.get("workers", 5)),
        )

    payload = resolutions_payload(resolutions, report)
    payload["dry_run"] = dry_run
    payload["catalog"] = str(store.path)
    if output:
        write_json(output, payload)

    if state.json_output:
        print_json_payload(state, payload)
    elif state.plain_output:
        typer.echo("mention\tstatus\texercise_id\texercise\tscore")
        for resolution in resolutions.values():
            typer.echo(
                "\t".join(
                    [
                        resolution.mention.text,
                        _status(resolution.created, resolution.redirected),
                        str(resolution.exercise.id),
                        resolution.exercise.name,
                        str(resolution.score),
                    ]
                )
            )
        for key, value in summary_rows(report).items():
            typer.echo(f"{key}\t{value}")
    else:
        table = Table(title=f"Resolved mentions ({len(resolutions)})")
        table.add_column("Mention")
        table.add_column("Status")
        table.add_column("ID")
        table.add_column("Exercise")
        table.add_column("Score")
        for resolution in resolutions.values():
            table.add_row(
                resolution.mention.text,
                _status(resolution.created, resolution.redirected),
                str(resolution.exercise.id),
                resolution.exercise.name,
                str(resolution.score) if not resolution.created else "-",
            )
        state.console.print(table)
        created = sum(1 for resolution in resolutions.values() if resolution.created)
        state.console.print(
            f"Resolved {report.succeeded}/{report.total} mention(s): {created} created, {report.failed} failed"
        )
        for text, message in report.errors.items():
            state.console.print(f"Failed: {text}: {message}")
        if dry_run:
            state.console.print("Dry run: catalog not modified")
        if output:
            state.console.print(f"Exported to: {output}")

    if report.failed:
        raise typer.Exit(code=1)
