"""Fixed-point money arithmetic.

Amounts are converted to minor units (cents) before any multiplication or
summation and converted back to major units only for presentation. Unit prices
are rounded half-up to the nearest cent on the way in.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


def to_minor_units(amount) -> int:
    """Convert a major-unit amount (float, str, int or Decimal) to integer cents."""
    if isinstance(amount, bool):
        raise TypeError("Amount must be numeric")
    value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    return int((value.quantize(CENT, rounding=ROUND_HALF_UP) * 100).to_integral_value())


def to_major_units(cents: int) -> Decimal:
    return (Decimal(cents) / 100).quantize(CENT)


@dataclass(frozen=True)
class PricedLine:
    """One order line with its price frozen at compile time."""

    product_id: str
    product_name: str
    quantity: int
    unit_price_cents: int

    @property
    def line_total_cents(self) -> int:
        return self.unit_price_cents * self.quantity

    @property
    def unit_price(self) -> Decimal:
        return to_major_units(self.unit_price_cents)


def price_lines(requested, snapshots) -> list[PricedLine]:
    """Snapshot name and unit price for each requested line, keeping input order."""
    priced = []
    for line in requested:
        snapshot = snapshots[line.product_id]
        priced.append(
            PricedLine(
                product_id=line.product_id,
                product_name=snapshot.name,
                quantity=line.quantity,
                unit_price_cents=to_minor_units(snapshot.price),
            )
        )
    return priced


def total_cents(lines) -> int:
    """Sum of unit price x quantity, accumulated in the order the lines are given."""
    total = 0
    for line in lines:
        total += line.unit_price_cents * line.quantity
    return total
