"""Unit tests for domain value objects."""

from decimal import Decimal

import pytest

from mapcraft.domain.exceptions import ValidationError
from mapcraft.domain.model.value_objects import Money, Quantity


# ── Money ────────────────────────────────────────────────────────────────────


class TestMoney:

    def test_of_coerces_to_decimal(self):
        assert Money.of("11.00").amount == Decimal("11.00")
        assert Money.of(7).amount == Decimal("7")

    def test_float_amount_rejected(self):
        with pytest.raises(ValidationError, match="must be a Decimal"):
            Money(6.5)  # type: ignore[arg-type]

    def test_garbage_rejected(self):
        with pytest.raises(ValidationError, match="Invalid money amount"):
            Money.of("six fifty")

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Money(Decimal("-1"))

    def test_sheet_costs_add_up(self):
        total = Money.zero() + Money.of("11.00") * 2 + Money.of("7.80")
        assert total == Money.of("29.80")

    def test_currency_mismatch_rejected(self):
        with pytest.raises(ValidationError, match="Cannot combine"):
            Money(Decimal("10"), "USD") + Money(Decimal("5"), "EUR")

    def test_multiplying_by_a_float_is_a_type_error(self):
        with pytest.raises(TypeError):
            Money.of("5") * 1.5  # type: ignore[operator]

    def test_str_formatting(self):
        assert str(Money.of("149.99")) == "$149.99"
        assert str(Money.of("9.5")) == "$9.50"


# ── Quantity ─────────────────────────────────────────────────────────────────


class TestQuantity:

    def test_valid_quantity(self):
        assert Quantity(3).value == 3

    @pytest.mark.parametrize("value", [0, -3])
    def test_below_one_rejected(self, value):
        with pytest.raises(ValidationError, match="at least 1"):
            Quantity(value)

    def test_bool_is_not_a_quantity(self):
        with pytest.raises(ValidationError, match="must be an integer"):
            Quantity(True)

    def test_str(self):
        assert str(Quantity(7)) == "7"
