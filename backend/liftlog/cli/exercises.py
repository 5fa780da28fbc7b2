"""Flask CLI commands maintaining the global exercise catalog."""

from __future__ import annotations

import click
from flask.cli import with_appcontext

from liftlog.services._shared.errors import ServiceError
from liftlog.services.exercises import ExerciseCatalogService


@click.group("exercises")
def exercises_cli() -> None:
    """Inspect and seed the exercise catalog."""


@exercises_cli.command("seed")
@click.argument("names", nargs=-1)
@with_appcontext
def seed_command(names: tuple[str, ...]) -> None:
    """Get-or-create NAMES (or the default catalog when none are given)."""
    try:
        result = ExerciseCatalogService().seed(list(names) or None)
    except ServiceError as exc:
        raise click.ClickException(f"Seeding failed: {exc}") from exc
    click.echo(f"Exercises: created={len(result.created)} existing={len(result.existing)}")
    for name in result.created:
        click.echo(f"  + {name}")


@exercises_cli.command("list")
@with_appcontext
def list_command() -> None:
    """Print the catalog ordered by name."""
    rows = ExerciseCatalogService().list_all()
    if not rows:
        click.echo("(no exercises)")
        return
    width = max(len(str(r.id)) for r in rows)
    for row in rows:
        click.echo(f"{str(row.id).rjust(width)}  {row.name}")
