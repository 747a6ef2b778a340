"""MapProduct aggregate.

A sellable map as the storefront lists it: marketing fields plus the full
configuration tree. Template products are predefined designs; shoppers'
custom designs are saved the same way with ``is_template=False``.
"""

from __future__ import annotations

from dataclasses import dataclass

from mapcraft.domain.model.configuration import ProductConfiguration
from mapcraft.domain.model.value_objects import Money


@dataclass
class MapProduct:

    id: str
    name: str
    price: Money
    category: str
    configuration: ProductConfiguration
    description: str = ""
    is_template: bool = True
