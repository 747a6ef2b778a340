"""Unit tests for the InventoryLedger domain service."""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from mapcraft.domain.exceptions import (
    InsufficientStock,
    OverRelease,
    UnknownMaterial,
    ValidationError,
)
from mapcraft.domain.model.events import LowStockCleared, LowStockRaised
from mapcraft.domain.model.inventory import LowStockPolicy
from tests.builders import ledger_with
from tests.fakes import material


def _snapshot(repo):
    return {(r.material_id, r.on_hand, r.reserved) for r in repo.list_all()}


class TestAvailable:

    def test_returns_on_hand_minus_reserved(self):
        ledger, _, _ = ledger_with(("WOOD_OAK", 10, 3, 0))
        assert ledger.available("WOOD_OAK") == 7

    def test_unknown_material_rejected(self):
        ledger, _, _ = ledger_with(("WOOD_OAK", 10, 0, 0))
        with pytest.raises(UnknownMaterial) as exc_info:
            ledger.available("WOOD_EBONY")
        assert exc_info.value.material_id == "WOOD_EBONY"


class TestReserve:

    def test_reserves_every_material(self):
        ledger, repo, _ = ledger_with(("WOOD_OAK", 10, 0, 0), ("ACRYLIC_BLUE", 5, 0, 0))

        ledger.reserve({"WOOD_OAK": 4, "ACRYLIC_BLUE": 2})

        assert repo.get("WOOD_OAK").reserved == 4
        assert repo.get("ACRYLIC_BLUE").reserved == 2

    def test_all_or_nothing_on_shortage(self):
        """Oak has plenty, blue acrylic is short: neither is reserved."""
        ledger, repo, _ = ledger_with(("WOOD_OAK", 10, 0, 0), ("ACRYLIC_BLUE", 1, 0, 0))
        before = _snapshot(repo)

        with pytest.raises(InsufficientStock) as exc_info:
            ledger.reserve({"WOOD_OAK": 4, "ACRYLIC_BLUE": 2})

        assert _snapshot(repo) == before
        assert exc_info.value.material_id == "ACRYLIC_BLUE"
        assert exc_info.value.shortfall == 1

    def test_reports_every_shortage_in_material_order(self):
        ledger, _, _ = ledger_with(
            ("WOOD_WALNUT", 1, 0, 0), ("ACRYLIC_BLUE", 0, 0, 0), ("WOOD_OAK", 9, 0, 0)
        )

        with pytest.raises(InsufficientStock) as exc_info:
            ledger.reserve({"WOOD_WALNUT": 3, "WOOD_OAK": 1, "ACRYLIC_BLUE": 2})

        shortages = exc_info.value.shortages
        assert [(s.material_id, s.shortfall) for s in shortages] == [
            ("ACRYLIC_BLUE", 2),
            ("WOOD_WALNUT", 2),
        ]
        assert exc_info.value.retryable is True

    def test_counts_existing_reservations(self):
        ledger, _, _ = ledger_with(("WOOD_OAK", 10, 8, 0))
        with pytest.raises(InsufficientStock):
            ledger.reserve({"WOOD_OAK": 3})

    def test_unknown_material_mutates_nothing(self):
        ledger, repo, _ = ledger_with(("WOOD_OAK", 10, 0, 0))
        before = _snapshot(repo)

        with pytest.raises(UnknownMaterial):
            ledger.reserve({"WOOD_OAK": 1, "WOOD_EBONY": 1})

        assert _snapshot(repo) == before

    def test_locks_materials_in_id_order(self):
        ledger, repo, _ = ledger_with(("WOOD_OAK", 10, 0, 0), ("ACRYLIC_BLUE", 5, 0, 0))

        ledger.reserve({"WOOD_OAK": 1, "ACRYLIC_BLUE": 1})

        assert repo.lock_order[-1] == ["ACRYLIC_BLUE", "WOOD_OAK"]

    @pytest.mark.parametrize("bad", [{}, {"WOOD_OAK": 0}, {"WOOD_OAK": -1}])
    def test_malformed_requirements_rejected(self, bad):
        ledger, _, _ = ledger_with(("WOOD_OAK", 10, 0, 0))
        with pytest.raises(ValidationError):
            ledger.reserve(bad)


class TestReleaseAndConsume:

    def test_release_after_reserve_restores_available(self):
        ledger, _, _ = ledger_with(("WOOD_OAK", 10, 2, 0), ("ACRYLIC_BLUE", 6, 0, 0))
        wanted = {"WOOD_OAK": 5, "ACRYLIC_BLUE": 6}
        before = {mid: ledger.available(mid) for mid in wanted}

        ledger.reserve(wanted)
        ledger.release(wanted)

        assert {mid: ledger.available(mid) for mid in wanted} == before

    def test_over_release_mutates_nothing(self):
        ledger, repo, _ = ledger_with(("WOOD_OAK", 10, 5, 0), ("ACRYLIC_BLUE", 6, 1, 0))
        before = _snapshot(repo)

        with pytest.raises(OverRelease) as exc_info:
            ledger.release({"WOOD_OAK": 2, "ACRYLIC_BLUE": 2})

        assert exc_info.value.material_id == "ACRYLIC_BLUE"
        assert _snapshot(repo) == before

    def test_consume_removes_stock(self):
        ledger, repo, _ = ledger_with(("WOOD_OAK", 10, 4, 0))

        ledger.consume({"WOOD_OAK": 4})

        rec = repo.get("WOOD_OAK")
        assert rec.on_hand == 6
        assert rec.reserved == 0

    def test_consume_more_than_reserved_rejected(self):
        ledger, _, _ = ledger_with(("WOOD_OAK", 10, 1, 0))
        with pytest.raises(OverRelease):
            ledger.consume({"WOOD_OAK": 2})

    def test_restock_unknown_material_rejected(self):
        ledger, _, _ = ledger_with(("WOOD_OAK", 10, 0, 0))
        with pytest.raises(UnknownMaterial):
            ledger.restock("WOOD_EBONY", 5)

    def test_restock_all_updates_every_material(self):
        ledger, repo, _ = ledger_with(("ACRYLIC_BLUE", 1, 0, 0), ("WOOD_OAK", 2, 0, 0))

        ledger.restock_all({"WOOD_OAK": 3, "ACRYLIC_BLUE": 4})

        assert _snapshot(repo) == {("ACRYLIC_BLUE", 5, 0), ("WOOD_OAK", 5, 0)}
        assert repo.lock_order[-1] == ["ACRYLIC_BLUE", "WOOD_OAK"]

    def test_restock_all_is_all_or_nothing(self):
        ledger, repo, catalog = ledger_with(("WOOD_OAK", 2, 0, 0))
        catalog.save(material("WOOD_TEAK"))

        with pytest.raises(UnknownMaterial):
            ledger.restock_all({"WOOD_OAK": 3, "WOOD_TEAK": 1})

        assert repo.get("WOOD_OAK").on_hand == 2


class TestRegister:

    def test_creates_record_for_catalogued_material(self):
        ledger, repo, catalog = ledger_with(("WOOD_OAK", 10, 0, 0))
        catalog.save(material("WOOD_CHERRY"))
        ledger.register("WOOD_CHERRY", on_hand=3, low_threshold=5)

        rec = repo.get("WOOD_CHERRY")
        assert rec.on_hand == 3
        assert rec.low_stock_flagged is True

    def test_duplicate_registration_rejected(self):
        ledger, _, _ = ledger_with(("WOOD_OAK", 10, 0, 0))
        with pytest.raises(ValidationError, match="already exists"):
            ledger.register("WOOD_OAK", on_hand=1)

    def test_uncatalogued_material_rejected(self):
        ledger, _, _ = ledger_with(("WOOD_OAK", 10, 0, 0))
        with pytest.raises(UnknownMaterial):
            ledger.register("WOOD_EBONY", on_hand=1)


class TestLowStockSignals:

    def test_reserve_to_threshold_raises_signal(self):
        ledger, repo, _ = ledger_with(("WOOD_WALNUT", 5, 0, 2))
        events = []
        ledger.subscribe(events.append)

        ledger.reserve({"WOOD_WALNUT": 3})

        assert events == [LowStockRaised("WOOD_WALNUT", available=2, threshold=2)]
        assert repo.get("WOOD_WALNUT").low_stock_flagged is True
        assert [r.material_id for r in ledger.low_stock()] == ["WOOD_WALNUT"]

    def test_below_policy_waits_for_strictly_below(self):
        ledger, _, _ = ledger_with(("WOOD_WALNUT", 5, 0, 2), policy=LowStockPolicy.BELOW)
        events = []
        ledger.subscribe(events.append)

        ledger.reserve({"WOOD_WALNUT": 3})
        assert events == []

        ledger.reserve({"WOOD_WALNUT": 1})
        assert events == [LowStockRaised("WOOD_WALNUT", available=1, threshold=2)]

    def test_restock_above_threshold_clears_signal(self):
        ledger, repo, _ = ledger_with(("WOOD_WALNUT", 5, 0, 2))
        events = []
        ledger.subscribe(events.append)
        ledger.reserve({"WOOD_WALNUT": 4})
        events.clear()

        ledger.restock("WOOD_WALNUT", 10)

        assert events == [LowStockCleared("WOOD_WALNUT", available=11, threshold=2)]
        assert repo.get("WOOD_WALNUT").low_stock_flagged is False
        assert ledger.low_stock() == []

    def test_no_signal_while_healthy(self):
        ledger, _, _ = ledger_with(("WOOD_WALNUT", 50, 0, 2))
        events = []
        ledger.subscribe(events.append)

        ledger.reserve({"WOOD_WALNUT": 3})
        ledger.release({"WOOD_WALNUT": 3})

        assert events == []

    def test_failed_reserve_publishes_nothing(self):
        ledger, _, _ = ledger_with(("WOOD_WALNUT", 2, 0, 5))
        events = []
        ledger.subscribe(events.append)

        with pytest.raises(InsufficientStock):
            ledger.reserve({"WOOD_WALNUT": 3})

        assert events == []

    def test_failing_subscriber_does_not_undo_mutation(self):
        ledger, repo, _ = ledger_with(("WOOD_WALNUT", 5, 0, 2))
        received = []

        def broken(event):
            raise RuntimeError("alerting is down")

        ledger.subscribe(broken)
        ledger.subscribe(received.append)

        ledger.reserve({"WOOD_WALNUT": 3})

        assert repo.get("WOOD_WALNUT").reserved == 3
        assert len(received) == 1


_operations = st.lists(
    st.tuples(
        st.sampled_from(["reserve", "release", "consume", "restock"]),
        st.integers(min_value=1, max_value=6),
    ),
    max_size=40,
)


class TestLedgerInvariants:

    @settings(max_examples=200, deadline=None)
    @given(on_hand=st.integers(min_value=0, max_value=10), ops=_operations)
    def test_reserved_stays_between_zero_and_on_hand(self, on_hand, ops):
        ledger, repo, _ = ledger_with(("WOOD_OAK", on_hand, 0, 3))
        expected_on_hand, expected_reserved = on_hand, 0

        for op, qty in ops:
            available = expected_on_hand - expected_reserved
            if op == "restock":
                ledger.restock("WOOD_OAK", qty)
                expected_on_hand += qty
            elif op == "reserve":
                if qty > available:
                    with pytest.raises(InsufficientStock):
                        ledger.reserve({"WOOD_OAK": qty})
                else:
                    ledger.reserve({"WOOD_OAK": qty})
                    expected_reserved += qty
            elif qty > expected_reserved:
                with pytest.raises(OverRelease):
                    getattr(ledger, op)({"WOOD_OAK": qty})
            else:
                getattr(ledger, op)({"WOOD_OAK": qty})
                expected_reserved -= qty
                if op == "consume":
                    expected_on_hand -= qty

            rec = repo.get("WOOD_OAK")
            assert 0 <= rec.reserved <= rec.on_hand
            assert (rec.on_hand, rec.reserved) == (expected_on_hand, expected_reserved)
