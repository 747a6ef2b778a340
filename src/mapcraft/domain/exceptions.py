"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.

Each exception carries the structured detail a caller needs to render a
precise message (material id, shortfall, offending state) and a
``retryable`` flag separating "fix your design" from "come back later".
"""

from __future__ import annotations

from dataclasses import dataclass


class DomainException(Exception):
    """Base class for all domain errors."""

    retryable = False


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class StructuralError(ValidationError):
    """A product configuration is malformed.

    Non-retryable: the caller must correct the configuration first.
    """

    def __init__(self, defects: list[str]) -> None:
        self.defects = tuple(defects)
        super().__init__("Invalid configuration: " + "; ".join(self.defects))


class UnknownMaterial(DomainException):
    """A material id is not in the catalog (data-integrity defect)."""

    def __init__(self, material_id: str) -> None:
        self.material_id = material_id
        super().__init__(f"Unknown material '{material_id}'")


@dataclass(frozen=True)
class Shortage:
    """How many units of a material are missing for a reservation."""

    material_id: str
    required: int
    available: int

    @property
    def shortfall(self) -> int:
        return self.required - self.available

    def __str__(self) -> str:
        return (
            f"{self.material_id} short by {self.shortfall} "
            f"(need {self.required}, have {self.available} available)"
        )


class InsufficientStock(DomainException):
    """Not enough available stock to reserve.

    Retryable later: stock may free up after a restock or a release.
    ``shortages`` is ordered by material id; ``material_id`` and
    ``shortfall`` describe the first one.
    """

    retryable = True

    def __init__(self, shortages: list[Shortage]) -> None:
        if not shortages:
            raise ValueError("InsufficientStock requires at least one shortage")
        self.shortages = tuple(sorted(shortages, key=lambda s: s.material_id))
        first = self.shortages[0]
        self.material_id = first.material_id
        self.shortfall = first.shortfall
        super().__init__(
            "Insufficient stock: " + ", ".join(str(s) for s in self.shortages)
        )


class OverRelease(DomainException):
    """Releasing or consuming more than is reserved (programming error)."""

    def __init__(self, material_id: str, requested: int, reserved: int) -> None:
        self.material_id = material_id
        self.requested = requested
        self.reserved = reserved
        super().__init__(
            f"Cannot release {requested} of {material_id} "
            f"(only {reserved} currently reserved)"
        )


class InvalidTransition(DomainException):
    """A reservation was asked to move to a state it cannot reach."""

    def __init__(self, reservation_id: int | None, current: str, attempted: str) -> None:
        self.reservation_id = reservation_id
        self.current = current
        self.attempted = attempted
        super().__init__(
            f"Cannot {attempted} reservation #{reservation_id} "
            f"(current status is {current})"
        )
