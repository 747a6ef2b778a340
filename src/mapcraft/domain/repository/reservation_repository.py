"""Abstract repository for Reservation aggregates and return audit rows."""

from __future__ import annotations

from abc import ABC, abstractmethod

from mapcraft.domain.model.reservation import Reservation, ReturnRecord


class ReservationRepository(ABC):

    @abstractmethod
    def get_by_id(self, reservation_id: int) -> Reservation | None:
        """Return a reservation by its ID, or None if not found."""

    @abstractmethod
    def get_for_update(self, reservation_id: int) -> Reservation | None:
        """Like get_by_id, but hold the row locked until the surrounding unit of work ends."""

    @abstractmethod
    def save(self, reservation: Reservation) -> None:
        """Persist a new or updated reservation, assigning an ID if new."""

    @abstractmethod
    def add_return(self, record: ReturnRecord) -> ReturnRecord:
        """Persist a return audit record and return it with its ID."""

    @abstractmethod
    def list_returns(self, reservation_id: int) -> list[ReturnRecord]:
        """Return the audit records written for a reservation."""
