"""Product aggregate: the slice of the catalogue the checkout pipeline reads.

Price is kept in major units as entered by catalogue administrators; stock is
the available-to-sell count. Stock only moves through `take` and `restock`,
so it can never be driven below zero.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Integer, String, Text

from checkout.domain import checkout


@checkout.aggregate
class Product:
    name = String(required=True, max_length=255)
    description = Text()
    price = Float(required=True, min_value=0.0)
    stock = Integer(default=0, min_value=0)
    product_type = String(max_length=50)
    thumbnail = String(max_length=1024)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, name, price, stock=0, description=None, product_type=None, thumbnail=None):
        now = datetime.now(UTC)
        return cls(
            name=name,
            price=price,
            stock=stock,
            description=description,
            product_type=product_type,
            thumbnail=thumbnail,
            created_at=now,
            updated_at=now,
        )

    def take(self, quantity):
        """Remove `quantity` units from available stock."""
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})
        if quantity > self.stock:
            raise ValidationError({"stock": [f"Only {self.stock} units of {self.name} available"]})
        self.stock -= quantity
        self.updated_at = datetime.now(UTC)

    def restock(self, quantity):
        """Put `quantity` units back into available stock."""
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})
        self.stock += quantity
        self.updated_at = datetime.now(UTC)
