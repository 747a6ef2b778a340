"""ProductConfiguration: one buildable laser-cut map.

A configuration is a tree of typed parts: where the map shows (Location),
what surrounds it (FrameStyle), how big it is (Size) and the ordered stack
of material slabs that make up the relief (Layers).

Configurations are frozen snapshots. The frame and every layer reference a
Material by id only; a placed order keeps the configuration it was built
from even if the catalog changes afterwards.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from enum import Enum

from mapcraft.domain.exceptions import ValidationError
from mapcraft.domain.model.value_objects import Quantity

BASE_DEPTH = 1
MIN_ZOOM = 1
MAX_ZOOM = 20


class MapStyle(Enum):
    MINIMAL = "MINIMAL"
    ROAD = "ROAD"
    TERRAIN = "TERRAIN"
    WATERCOLOR = "WATERCOLOR"


@dataclass(frozen=True)
class Location:
    """Descriptive only; never affects inventory."""

    name: str
    latitude: float
    longitude: float
    zoom_level: int

    def defects(self) -> list[str]:
        found: list[str] = []
        if not self.name or not self.name.strip():
            found.append("Location name is required")
        if not -90.0 <= self.latitude <= 90.0:
            found.append(f"Latitude {self.latitude} outside [-90, 90]")
        if not -180.0 <= self.longitude <= 180.0:
            found.append(f"Longitude {self.longitude} outside [-180, 180]")
        if not MIN_ZOOM <= self.zoom_level <= MAX_ZOOM:
            found.append(
                f"Zoom level {self.zoom_level} outside [{MIN_ZOOM}, {MAX_ZOOM}]"
            )
        return found


@dataclass(frozen=True)
class FrameStyle:

    style: str
    material_id: str
    color: str | None = None


@dataclass(frozen=True)
class Size:
    """Finished piece dimensions in millimetres."""

    width: int
    height: int


@dataclass(frozen=True)
class Layer:
    """One material slab; ``depth`` orders the slabs from the back."""

    depth: int
    material_id: str
    color: str | None = None


@dataclass(frozen=True)
class ProductConfiguration:

    location: Location
    frame: FrameStyle
    size: Size
    layers: tuple[Layer, ...]
    map_style: MapStyle = MapStyle.MINIMAL
    custom_text: str | None = None

    def __post_init__(self) -> None:
        # Accept any sequence but store an immutable, depth-ordered tuple.
        object.__setattr__(
            self, "layers", tuple(sorted(self.layers, key=lambda layer: layer.depth))
        )

    @property
    def material_ids(self) -> set[str]:
        return {self.frame.material_id} | {layer.material_id for layer in self.layers}

    def structural_defects(self) -> list[str]:
        """Every self-consistency problem that needs no catalog lookup."""
        found = self.location.defects()

        if not self.frame.style or not self.frame.style.strip():
            found.append("Frame style name is required")
        if self.size.width <= 0 or self.size.height <= 0:
            found.append(
                f"Size {self.size.width}x{self.size.height} must be strictly positive"
            )

        if not self.layers:
            found.append("Configuration must have at least one layer")
            return found

        depths = [layer.depth for layer in self.layers]
        duplicates = sorted(d for d, n in Counter(depths).items() if n > 1)
        if duplicates:
            found.append(f"Duplicate layer depths: {duplicates}")
        expected = list(range(BASE_DEPTH, BASE_DEPTH + len(set(depths))))
        if sorted(set(depths)) != expected:
            found.append(
                f"Layer depths {sorted(set(depths))} must be contiguous from {BASE_DEPTH}"
            )
        return found

    def requirements(self, quantity: int) -> dict[str, int]:
        """Units of each material needed to build *quantity* copies.

        The frame and every layer each take one unit of their material.
        The result is ordered by material id.
        """
        copies = Quantity(quantity).value
        per_copy = Counter([self.frame.material_id])
        per_copy.update(layer.material_id for layer in self.layers)
        return {mid: per_copy[mid] * copies for mid in sorted(per_copy)}


def configuration_from_dict(raw: dict) -> ProductConfiguration:
    """Build a configuration from plain data (CLI / JSON input)."""
    try:
        return ProductConfiguration(
            location=Location(
                name=raw["location"]["name"],
                latitude=float(raw["location"]["latitude"]),
                longitude=float(raw["location"]["longitude"]),
                zoom_level=int(raw["location"]["zoom_level"]),
            ),
            frame=FrameStyle(
                style=raw["frame"]["style"],
                material_id=raw["frame"]["material"],
                color=raw["frame"].get("color"),
            ),
            size=Size(width=int(raw["size"]["width"]), height=int(raw["size"]["height"])),
            layers=tuple(
                Layer(
                    depth=int(layer["depth"]),
                    material_id=layer["material"],
                    color=layer.get("color"),
                )
                for layer in raw.get("layers", [])
            ),
            map_style=MapStyle(raw.get("map_style", MapStyle.MINIMAL.value)),
            custom_text=raw.get("custom_text"),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ValidationError(f"Malformed configuration data: {exc}") from exc


def configuration_to_dict(config: ProductConfiguration) -> dict:
    return {
        "location": {
            "name": config.location.name,
            "latitude": config.location.latitude,
            "longitude": config.location.longitude,
            "zoom_level": config.location.zoom_level,
        },
        "frame": {
            "style": config.frame.style,
            "material": config.frame.material_id,
            "color": config.frame.color,
        },
        "size": {"width": config.size.width, "height": config.size.height},
        "layers": [
            {"depth": layer.depth, "material": layer.material_id, "color": layer.color}
            for layer in config.layers
        ],
        "map_style": config.map_style.value,
        "custom_text": config.custom_text,
    }
