"""Application service: Check Product use case (query).

Tells the storefront whether a product can be built right now and what
its materials cost. The answer is advisory; only placing the order
actually claims stock.
"""

from __future__ import annotations

from dataclasses import dataclass

from mapcraft.domain.exceptions import EntityNotFoundError
from mapcraft.domain.repository.material_catalog import MaterialCatalog
from mapcraft.domain.repository.product_repository import ProductRepository
from mapcraft.domain.service.configuration_rules import configuration_cost
from mapcraft.domain.service.configuration_validator import (
    Buildable,
    ConfigurationValidator,
)


@dataclass(frozen=True)
class BuildabilityDTO:

    product_id: str
    quantity: int
    buildable: bool
    kind: str | None
    problems: list[str]
    requirements: dict[str, int]
    material_cost: str | None


class CheckProductHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        catalog: MaterialCatalog,
        validator: ConfigurationValidator,
    ) -> None:
        self._product_repo = product_repo
        self._catalog = catalog
        self._validator = validator

    def handle(self, product_id: str, quantity: int = 1) -> BuildabilityDTO:
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product '{product_id}' not found")

        result = self._validator.check(product.configuration, quantity)
        if isinstance(result, Buildable):
            return BuildabilityDTO(
                product_id=product_id,
                quantity=quantity,
                buildable=True,
                kind=None,
                problems=[],
                requirements=result.requirements,
                material_cost=str(
                    configuration_cost(product.configuration, self._catalog, quantity)
                ),
            )
        return BuildabilityDTO(
            product_id=product_id,
            quantity=quantity,
            buildable=False,
            kind=result.kind.value,
            problems=list(result.defects) + [str(s) for s in result.shortages],
            requirements={},
            material_cost=None,
        )
