"""Domain service: Configuration Validator.

Answers "could this be built right now?" without reserving anything.
The answer is advisory: a concurrent order can claim the stock between
``check()`` and a later reservation, which is where correctness is
actually enforced.
"""

from __future__ import annotations

from dataclasses import dataclass

from mapcraft.domain.exceptions import Shortage, StructuralError, ValidationError
from mapcraft.domain.model.configuration import ProductConfiguration
from mapcraft.domain.model.reservation import RejectionKind
from mapcraft.domain.service.configuration_rules import validate_structure
from mapcraft.domain.service.inventory_ledger import InventoryLedger
from mapcraft.domain.repository.material_catalog import MaterialCatalog


@dataclass(frozen=True)
class Buildable:

    requirements: dict[str, int]

    @property
    def buildable(self) -> bool:
        return True


@dataclass(frozen=True)
class Unbuildable:

    kind: RejectionKind
    defects: tuple[str, ...] = ()
    shortages: tuple[Shortage, ...] = ()

    @property
    def buildable(self) -> bool:
        return False

    @property
    def retryable(self) -> bool:
        return self.kind is RejectionKind.OUT_OF_STOCK


CheckResult = Buildable | Unbuildable


class ConfigurationValidator:

    def __init__(self, catalog: MaterialCatalog, ledger: InventoryLedger) -> None:
        self._catalog = catalog
        self._ledger = ledger

    def check(self, config: ProductConfiguration, quantity: int = 1) -> CheckResult:
        try:
            validate_structure(config, self._catalog)
        except StructuralError as exc:
            return Unbuildable(RejectionKind.STRUCTURAL, defects=exc.defects)

        try:
            required = config.requirements(quantity)
        except ValidationError as exc:
            return Unbuildable(RejectionKind.STRUCTURAL, defects=(str(exc),))

        shortages = []
        for material_id, units in required.items():
            available = self._ledger.available(material_id)
            if available < units:
                shortages.append(Shortage(material_id, units, available))

        if shortages:
            return Unbuildable(RejectionKind.OUT_OF_STOCK, shortages=tuple(shortages))
        return Buildable(required)
