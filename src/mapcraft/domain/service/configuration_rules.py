"""Domain service: structural validation and costing of configurations.

Both functions are pure with respect to inventory: they consult the
material catalog but never read or write stock.
"""

from __future__ import annotations

from mapcraft.domain.exceptions import StructuralError, UnknownMaterial
from mapcraft.domain.model.configuration import ProductConfiguration
from mapcraft.domain.model.value_objects import Money
from mapcraft.domain.repository.material_catalog import MaterialCatalog


def validate_structure(config: ProductConfiguration, catalog: MaterialCatalog) -> None:
    """Raise StructuralError listing every defect in *config*."""
    defects = config.structural_defects()

    if catalog.get(config.frame.material_id) is None:
        defects.append(f"Frame material '{config.frame.material_id}' is not catalogued")
    for layer in config.layers:
        if catalog.get(layer.material_id) is None:
            defects.append(
                f"Layer {layer.depth} material '{layer.material_id}' is not catalogued"
            )

    if defects:
        raise StructuralError(defects)


def configuration_cost(
    config: ProductConfiguration, catalog: MaterialCatalog, quantity: int = 1
) -> Money:
    """Sum of material unit costs for *quantity* copies."""
    total = Money.zero()
    for material_id, units in config.requirements(quantity).items():
        material = catalog.get(material_id)
        if material is None:
            raise UnknownMaterial(material_id)
        total = total + material.unit_cost * units
    return total
