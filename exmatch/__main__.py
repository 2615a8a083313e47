"""Entry point for exmatch."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from exmatch import __version__
from exmatch.commands.inspect import classify_command, match_command, normalize_command
from exmatch.commands.report import report_command
from exmatch.commands.resolve import resolve_command
from exmatch.commands.videos import quota_command, search_command, videos_command
from exmatch.core.config import ConfigError, default_config_path, load_config
from exmatch.core.logging_config import configure_logging
from exmatch.core.state import CLIState

app = typer.Typer(
    add_completion=False,
    help="Resolve free-text exercise names to a canonical catalog and find tutorial videos",
    invoke_without_command=True,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    json_output: bool = typer.Option(False, "--json", help="Output JSON where available"),
    plain_output: bool = typer.Option(
        False,
        "--plain",
        help="Output plain text (no rich formatting/tables)",
    ),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to config file"),
    catalog: Optional[Path] = typer.Option(None, "--catalog", help="Path to the exercise catalog JSON file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Quiet output"),
    version: bool = typer.Option(False, "--version", help="Show version and exit"),
) -> None:
    """Initialize global CLI state."""
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if json_output and plain_output:
        typer.echo("Options --json and --plain are mutually exclusive.")
        raise typer.Exit(code=2)

    cfg_path = (config or default_config_path()).expanduser().resolve()
    try:
        cfg = load_config(cfg_path)
    except ConfigError as exc:
        typer.echo(f"Config error: {exc}")
        raise typer.Exit(code=2)

    console = Console(
        quiet=quiet,
        no_color=plain_output,
        log_time=False,
        log_path=False,
    )
    configure_logging(console, verbose=verbose, quiet=quiet)
    ctx.obj = CLIState(
        json_output=(json_output and not plain_output),
        plain_output=plain_output,
        verbose=verbose,
        quiet=quiet,
        config_path=cfg_path,
        config=cfg,
        console=console,
        catalog_path=catalog,
    )

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=0)


app.command("normalize")(normalize_command)
app.command("classify")(classify_command)
app.command("match")(match_command)
app.command("resolve")(resolve_command)
app.command("videos")(videos_command)
app.command("search")(search_command)
app.command("quota")(quota_command)
app.command("report")(report_command)


def main() -> None:
    """Console script entrypoint."""
    app()


if __name__ == "__main__":
    main()
