"""Name inspection commands: normalize, classify and match."""

from __future__ import annotations

from typing import Optional

import typer
from rich.table import Table

from exmatch.commands.common import get_state, load_catalog, open_catalog, print_json_payload
from exmatch.core.classify import category_for_slot, classification_rules_from_config, classify_exercise
from exmatch.core.matcher import match_exercise, movement_contexts, rank_matches
from exmatch.utils.formatting import format_category
from exmatch.utils.text import name_words, normalize_name, slugify


def normalize_command(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Exercise name as written in a workout"),
) -> None:
    """Show the normalized form, match words, movement contexts and slug for a name."""
    state = get_state(ctx)
    normalized = normalize_name(name)
    breathing, stretch, cardio, arm = movement_contexts(normalized)
    contexts = [
        label
        for label, present in (("breathing", breathing), ("stretch", stretch), ("cardio", cardio), ("arm", arm))
        if present
    ]
    payload = {
        "input": name,
        "normalized": normalized,
        "words": name_words(normalized),
        "contexts": contexts,
        "slug": slugify(name),
    }

    if state.json_output:
        print_json_payload(state, payload)
        return

    if state.plain_output:
        typer.echo(f"input\t{name}")
        typer.echo(f"normalized\t{normalized}")
        typer.echo(f"words\t{' '.join(payload['words'])}")
        typer.echo(f"contexts\t{','.join(contexts) or '-'}")
        typer.echo(f"slug\t{payload['slug']}")
        return

    state.console.print(f"Normalized: {normalized or '(empty)'}")
    state.console.print(f"Words: {', '.join(payload['words']) or '-'}")
    state.console.print(f"Contexts: {', '.join(contexts) or '-'}")
    state.console.print(f"Slug: {payload['slug']}")


def classify_command(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Exercise name"),
    slot: Optional[str] = typer.Option(None, help="Workout slot: warmup|main|cooldown"),
) -> None:
    """Classify an exercise name into a movement category."""
    state = get_state(ctx)
    rules = classification_rules_from_config(state.config)
    category = category_for_slot(slot, name, rules) if slot else classify_exercise(name, rules)
    payload = {"name": name, "slot": slot, "category": category}

    if state.json_output:
        print_json_payload(state, payload)
        return

    if state.plain_output:
        typer.echo(f"{name}\t{category}")
        return

    state.console.print(f"{name}: {format_category(category)}")


def match_command(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Exercise name to match against the catalog"),
    limit: int = typer.Option(5, help="Number of ranked candidates to show"),
) -> None:
    """Rank catalog exercises against a name and show which one would be reused."""
    state = get_state(ctx)
    catalog = load_catalog(state, open_catalog(state))
    threshold = int(state.config.get("resolver", {}).get("threshold", 70))

    best = match_exercise(name, catalog, threshold=threshold)
    ranked = rank_matches(name, catalog, limit=max(limit, 0))
    payload = {
        "name": name,
        "normalized": normalize_name(name),
        "threshold": threshold,
        "match": (
            {"exercise_id": best.exercise.id, "exercise": best.exercise.name, "score": best.score}
            if best
            else None
        ),
        "candidates": [
            {
                "exercise_id": candidate.exercise.id,
                "exercise": candidate.exercise.name,
                "slug": candidate.exercise.slug,
                "category": candidate.exercise.category,
                "score": candidate.score,
            }
            for candidate in ranked
        ],
    }

    if state.json_output:
        print_json_payload(state, payload)
        return

    if state.plain_output:
        typer.echo("id\tscore\tname\tslug")
        for candidate in ranked:
            typer.echo(
                "\t".join(
                    [
                        str(candidate.exercise.id),
                        str(candidate.score),
                        candidate.exercise.name,
                        candidate.exercise.slug,
                    ]
                )
            )
        typer.echo(f"match\t{best.exercise.id if best else '-'}")
        return

    table = Table(title=f"Matches for '{name}' (threshold {threshold})")
    table.add_column("ID")
    table.add_column("Exercise")
    table.add_column("Category")
    table.add_column("Score")
    for candidate in ranked:
        table.add_row(
            str(candidate.exercise.id),
            candidate.exercise.name,
            format_category(candidate.exercise.category),
            str(candidate.score),
        )
    state.console.print(table)
    if best:
        state.console.print(f"Match: {best.exercise.name} (id {best.exercise.id}, score {best.score})")
    else:
        state.console.print("No match; resolving this name would create a new exercise")
