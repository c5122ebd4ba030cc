"""Tests for fixed-point money arithmetic."""

from decimal import Decimal

import pytest

from checkout.pricing import PricedLine, price_lines, to_major_units, to_minor_units, total_cents
from checkout.cart.planning import RequestedLine
from checkout.catalogue.reader import ProductSnapshot


class TestMinorUnits:
    @pytest.mark.parametrize(
        "amount, cents",
        [
            (12.5, 1250),
            ("12.50", 1250),
            (Decimal("0.125"), 13),
            (0.1, 10),
            (19.999, 2000),
            (0, 0),
            (7, 700),
        ],
    )
    def test_to_minor_units(self, amount, cents):
        assert to_minor_units(amount) == cents

    def test_bool_is_not_an_amount(self):
        with pytest.raises(TypeError):
            to_minor_units(True)

    def test_to_major_units_keeps_two_places(self):
        assert to_major_units(2500) == Decimal("25.00")
        assert str(to_major_units(5)) == "0.05"


class TestTotals:
    def test_float_prices_do_not_drift(self):
        lines = [PricedLine("p1", "A", 3, to_minor_units(0.1)), PricedLine("p2", "B", 1, to_minor_units(0.2))]
        assert to_major_units(total_cents(lines)) == Decimal("0.50")

    def test_empty_total_is_zero(self):
        assert total_cents([]) == 0

    def test_line_total(self):
        line = PricedLine("p1", "Blue Train", 2, 1250)
        assert line.line_total_cents == 2500
        assert line.unit_price == Decimal("12.50")


class TestPriceLines:
    def test_snapshots_name_and_price_in_supplied_order(self):
        snapshots = {
            "p1": ProductSnapshot(id="p1", name="Kind of Blue", price=Decimal("19.99"), stock=3),
            "p2": ProductSnapshot(id="p2", name="Blue Train", price=Decimal("12.5"), stock=3),
        }
        priced = price_lines([RequestedLine("p2", 2), RequestedLine("p1", 1)], snapshots)

        assert [line.product_id for line in priced] == ["p2", "p1"]
        assert priced[0].product_name == "Blue Train"
        assert priced[0].unit_price_cents == 1250
        assert total_cents(priced) == 4499
