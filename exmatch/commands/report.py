"""Catalog health report."""

from __future__ import annotations

from collections import Counter, defaultdict
from typing import Any, Dict, List, Sequence

import typer
from rich.table import Table

from exmatch.commands.common import get_state, load_catalog, open_catalog, print_json_payload
from exmatch.core.constants import CATEGORIES
from exmatch.core.models import CanonicalExercise
from exmatch.utils.formatting import format_category
from exmatch.utils.text import normalize_name


def duplicate_groups(catalog: Sequence[CanonicalExercise]) -> List[Dict[str, Any]]:
    """Exercises whose names normalize to the same text."""
    groups: Dict[str, List[CanonicalExercise]] = defaultdict(list)
    for exercise in catalog:
        groups[normalize_name(exercise.name)].append(exercise)
    return [
        {
            "normalized": normalized,
            "exercises": [{"id": exercise.id, "name": exercise.name} for exercise in members],
        }
        for normalized, members in groups.items()
        if len(members) > 1
    ]


def build_report(catalog: Sequence[CanonicalExercise]) -> Dict[str, Any]:
    by_category = Counter(exercise.category for exercise in catalog)
    missing = [exercise for exercise in catalog if not exercise.has_video]
    return {
        "total": len(catalog),
        "with_video": len(catalog) - len(missing),
        "by_category": {**{category: 0 for category in CATEGORIES}, **by_category},
        "missing_videos": [{"id": exercise.id, "name": exercise.name} for exercise in missing],
        "duplicates": duplicate_groups(catalog),
    }


def report_command(
    ctx: typer.Context,
    show_missing: bool = typer.Option(False, "--missing", help="List exercises without a video"),
) -> None:
    """Summarize the catalog: categories, video coverage and likely duplicates."""
    state = get_state(ctx)
    catalog = load_catalog(state, open_catalog(state))
    report = build_report(catalog)

    if state.json_output:
        print_json_payload(state, report)
        return

    if state.plain_output:
        typer.echo(f"total\t{report['total']}")
        typer.echo(f"with_video\t{report['with_video']}")
        for category, count in report["by_category"].items():
            typer.echo(f"category.{category}\t{count}")
        typer.echo(f"missing_videos\t{len(report['missing_videos'])}")
        if show_missing:
            for item in report["missing_videos"]:
                typer.echo(f"missing\t{item['id']}\t{item['name']}")
        for group in report["duplicates"]:
            ids = ",".join(str(item["id"]) for item in group["exercises"])
            typer.echo(f"duplicate\t{group['normalized']}\t{ids}")
        return

    table = Table(title=f"Catalog ({report['total']} exercises)")
    table.add_column("Category")
    table.add_column("Exercises")
    for category, count in report["by_category"].items():
        table.add_row(format_category(category), str(count))
    state.console.print(table)
    state.console.print(f"With video: {report['with_video']}/{report['total']}")

    if show_missing and report["missing_videos"]:
        state.console.print("Missing videos:")
        for item in report["missing_videos"]:
            state.console.print(f"  {item['id']}: {item['name']}")

    if report["duplicates"]:
        state.console.print("Possible duplicates:")
        for group in report["duplicates"]:
            names = ", ".join(f"{item['name']} ({item['id']})" for item in group["exercises"])
            state.console.print(f"  {group['normalized']}: {names}")
