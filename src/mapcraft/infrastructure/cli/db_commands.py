"""CLI commands for database setup."""

from __future__ import annotations

import click

from mapcraft.domain.exceptions import DomainException
from mapcraft.infrastructure.cli.context import services
from mapcraft.infrastructure.seed import seed


@click.command("init")
@click.option("--seed", "with_seed", is_flag=True, default=False, help="Load the starter catalog.")
def db_init(with_seed: bool) -> None:
    """Create the schema (and optionally load starter data)."""
    svc = services()
    if not with_seed:
        click.echo("Database initialised.")
        return

    try:
        seed(svc.catalog, svc.ledger, svc.products)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo("Database initialised with starter catalog.")
