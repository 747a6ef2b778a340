import click

from mapcraft import config
from mapcraft.infrastructure.cli.db_commands import db_init
from mapcraft.infrastructure.cli.inventory_commands import (
    inventory_low,
    inventory_restock,
    inventory_show,
    material_list,
)
from mapcraft.infrastructure.cli.order_commands import (
    order_cancel,
    order_fulfill,
    order_place,
    order_refund,
    order_return,
    order_show,
)
from mapcraft.infrastructure.cli.product_commands import (
    product_check,
    product_list,
    product_show,
)
from mapcraft.logging_config import configure_logging


@click.group()
@click.option(
    "--database-url",
    envvar="MAPCRAFT_DATABASE_URL",
    default=None,
    help="SQLAlchemy database URL (defaults to a SQLite file under data/).",
)
@click.pass_context
def cli(ctx: click.Context, database_url: str | None) -> None:
    """mapcraft: framed map configuration and material inventory"""
    configure_logging(level=config.LOG_LEVEL)
    ctx.ensure_object(dict)
    ctx.obj["database_url"] = database_url


@cli.group()
def db() -> None:
    """Manage the database."""


@cli.group()
def material() -> None:
    """Browse the material catalog."""


@cli.group()
def inventory() -> None:
    """Manage material inventory."""


@cli.group()
def product() -> None:
    """Browse and check map products."""


@cli.group()
def order() -> None:
    """Manage order reservations."""


# Register subcommands
db.add_command(db_init)
material.add_command(material_list)
inventory.add_command(inventory_show)
inventory.add_command(inventory_low)
inventory.add_command(inventory_restock)
product.add_command(product_list)
product.add_command(product_show)
product.add_command(product_check)
order.add_command(order_place)
order.add_command(order_show)
order.add_command(order_fulfill)
order.add_command(order_cancel)
order.add_command(order_refund)
order.add_command(order_return)
