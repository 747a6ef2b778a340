"""CLI commands for map products."""

from __future__ import annotations

import click

from mapcraft.application.check_product import CheckProductHandler
from mapcraft.application.dto import ProductDTO
from mapcraft.domain.exceptions import DomainException
from mapcraft.infrastructure.cli.context import services


@click.command("list")
@click.option("--category", default=None, help="Only list products in this category.")
def product_list(category: str | None) -> None:
    """List products in the catalog."""
    repo = services().products
    products = repo.list_by_category(category) if category else repo.list_all()

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<26} {'Name':<32} {'Layers':>6} {'Price':>10}")
    click.echo("-" * 77)
    for p in products:
        click.echo(
            f"{p.id:<26} {p.name:<32} {len(p.configuration.layers):>6} {str(p.price):>10}"
        )


@click.command("show")
@click.option("--id", "product_id", required=True, help="Product ID.")
def product_show(product_id: str) -> None:
    """Show a product's full configuration."""
    product = services().products.get_by_id(product_id)
    if product is None:
        raise click.ClickException(f"Product '{product_id}' not found")

    dto = ProductDTO.from_domain(product)
    click.echo(f"{dto.name}  ({dto.id}, {dto.category})")
    click.echo(f"Price:    {dto.price}")
    click.echo(f"Location: {dto.location}")
    click.echo(f"Frame:    {dto.frame}")
    click.echo(f"Size:     {dto.size}")
    click.echo("Layers:")
    for layer in dto.layers:
        color = f" ({layer.color})" if layer.color else ""
        click.echo(f"  {layer.depth}. {layer.material}{color}")


@click.command("check")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--quantity", default=1, type=int, help="Copies to check for.")
def product_check(product_id: str, quantity: int) -> None:
    """Check whether a product can be built from current stock."""
    svc = services()
    handler = CheckProductHandler(svc.products, svc.catalog, svc.validator)

    try:
        dto = handler.handle(product_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if dto.buildable:
        click.echo(f"'{product_id}' x{quantity} is buildable (material cost {dto.material_cost}).")
        for material_id, units in dto.requirements.items():
            click.echo(f"  {material_id:<16} {units:>4}")
        return

    label = "needs a design fix" if dto.kind == "STRUCTURAL" else "is out of stock"
    click.echo(f"'{product_id}' x{quantity} {label}:")
    for problem in dto.problems:
        click.echo(f"  - {problem}")
