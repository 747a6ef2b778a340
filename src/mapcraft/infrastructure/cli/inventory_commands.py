"""CLI commands for materials and inventory."""

from __future__ import annotations

import click

from mapcraft.application.dto import InventoryLineDTO
from mapcraft.application.restock_material import RestockMaterialHandler
from mapcraft.application.show_inventory import ShowInventoryHandler
from mapcraft.domain.exceptions import DomainException
from mapcraft.infrastructure.cli.context import services


@click.command("list")
def material_list() -> None:
    """List catalogued materials."""
    materials = services().catalog.list_all()

    if not materials:
        click.echo("No materials found.")
        return

    click.echo(f"{'ID':<16} {'Name':<20} {'Kind':<8} {'Unit cost':>10}")
    click.echo("-" * 57)
    for m in materials:
        click.echo(f"{m.id:<16} {m.name:<20} {m.kind.value:<8} {str(m.unit_cost):>10}")


def _print_lines(lines: list[InventoryLineDTO]) -> None:
    click.echo(
        f"{'Material':<16} {'On hand':>8} {'Reserved':>10} {'Available':>10} {'Low at':>7}"
    )
    click.echo("-" * 55)
    for line in lines:
        flag = "  LOW" if line.low else ""
        click.echo(
            f"{line.material_id:<16} {line.on_hand:>8} {line.reserved:>10} "
            f"{line.available:>10} {line.low_threshold:>7}{flag}"
        )


@click.command("show")
def inventory_show() -> None:
    """Show current inventory levels."""
    lines = ShowInventoryHandler(services().ledger).handle()

    if not lines:
        click.echo("No inventory records found.")
        return
    _print_lines(lines)


@click.command("low")
def inventory_low() -> None:
    """Show materials at or below their low-stock threshold."""
    lines = ShowInventoryHandler(services().ledger).handle(low_only=True)

    if not lines:
        click.echo("No materials are low on stock.")
        return
    _print_lines(lines)


@click.command("restock")
@click.option("--material", "material_id", required=True, help="Material ID, e.g. WOOD_WALNUT.")
@click.option("--quantity", required=True, type=int, help="Units received.")
def inventory_restock(material_id: str, quantity: int) -> None:
    """Add received stock for a material."""
    handler = RestockMaterialHandler(services().ledger)

    try:
        line = handler.handle(material_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"{line.material_id} restocked, {line.available} available.")
