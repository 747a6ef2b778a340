"""CLI commands for order reservations."""

from __future__ import annotations

import json

import click

from mapcraft.application.cancel_order import CancelOrderHandler
from mapcraft.application.dto import ReservationDTO
from mapcraft.application.fulfill_order import FulfillOrderHandler
from mapcraft.application.place_order import PlaceOrderHandler
from mapcraft.application.return_order import ReturnOrderHandler
from mapcraft.application.show_order import ShowOrderHandler
from mapcraft.domain.exceptions import DomainException
from mapcraft.infrastructure.cli.context import services


def _display_reservation(dto: ReservationDTO) -> None:
    """Shared formatting for displaying a reservation."""
    click.echo(f"Reservation #{dto.id}  (status={dto.status})")
    click.echo(f"Quantity: {dto.quantity}")
    click.echo(f"Created:  {dto.created_at}")
    if dto.release_reason:
        click.echo(f"Released: {dto.release_reason}")
    if dto.rejection:
        hint = "try again later" if dto.retryable else "fix the design"
        click.echo(f"Rejected: {dto.rejection} ({hint})")
    if dto.requirements:
        click.echo()
        click.echo(f"  {'Material':<16} {'Units':>6}")
        click.echo(f"  {'-'*23}")
        for material_id, units in dto.requirements.items():
            click.echo(f"  {material_id:<16} {units:>6}")


@click.command("place")
@click.option("--product", "product_id", default=None, help="Catalog product ID.")
@click.option(
    "--design",
    type=click.File("r"),
    default=None,
    help="JSON file with a custom configuration.",
)
@click.option("--quantity", default=1, type=int, help="Copies to order.")
def order_place(product_id: str | None, design, quantity: int) -> None:
    """Reserve materials for a new order line."""
    if (product_id is None) == (design is None):
        raise click.UsageError("Give exactly one of --product or --design.")

    svc = services()
    handler = PlaceOrderHandler(svc.products, svc.coordinator)

    try:
        if product_id is not None:
            dto = handler.handle(product_id, quantity)
        else:
            try:
                raw = json.load(design)
            except json.JSONDecodeError as exc:
                raise click.BadParameter(f"Design file is not valid JSON: {exc}")
            dto = handler.handle_custom(raw, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_reservation(dto)
    if dto.status == "REJECTED":
        click.get_current_context().exit(1)


@click.command("show")
@click.option("--id", "reservation_id", required=True, type=int, help="Reservation ID.")
def order_show(reservation_id: int) -> None:
    """Show an order reservation."""
    handler = ShowOrderHandler(services().coordinator)

    try:
        dto = handler.handle(reservation_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_reservation(dto)


@click.command("fulfill")
@click.option("--id", "reservation_id", required=True, type=int, help="Reservation ID.")
def order_fulfill(reservation_id: int) -> None:
    """Fulfill an order (consumes reserved materials)."""
    handler = FulfillOrderHandler(services().coordinator)

    try:
        handler.handle(reservation_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Reservation #{reservation_id} fulfilled; materials consumed.")


@click.command("cancel")
@click.option("--id", "reservation_id", required=True, type=int, help="Reservation ID.")
def order_cancel(reservation_id: int) -> None:
    """Cancel an order before fulfillment (releases materials)."""
    handler = CancelOrderHandler(services().coordinator)

    try:
        handler.handle(reservation_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Reservation #{reservation_id} cancelled; materials released.")


@click.command("refund")
@click.option("--id", "reservation_id", required=True, type=int, help="Reservation ID.")
def order_refund(reservation_id: int) -> None:
    """Refund an order before fulfillment (releases materials)."""
    handler = CancelOrderHandler(services().coordinator)

    try:
        handler.handle(reservation_id, refund=True)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Reservation #{reservation_id} refunded; materials released.")


@click.command("return")
@click.option("--id", "reservation_id", required=True, type=int, help="Reservation ID.")
@click.option("--reason", default="refund", help="Why the piece came back.")
def order_return(reservation_id: int, reason: str) -> None:
    """Restock materials from a fulfilled order that was sent back."""
    handler = ReturnOrderHandler(services().coordinator)

    try:
        dto = handler.handle(reservation_id, reason)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Return #{dto.id} recorded for reservation #{reservation_id}.")
    for material_id, units in dto.restocked.items():
        click.echo(f"  {material_id:<16} +{units}")
