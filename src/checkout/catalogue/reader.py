"""Catalogue reader: read-only product lookups plus the stock decrement primitive.

`take_stock` is an atomic decrement-if-available: the check and the write
happen inside one command, committed before the lock is released, so two
callers in this process can never both take the last unit. Across processes
the guarantee is only as strong as the persistence provider's single-document
write.
"""

import threading
from dataclasses import dataclass
from decimal import Decimal

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from checkout.catalogue.management import ReturnStock, TakeStock
from checkout.catalogue.product import Product
from checkout.errors import ProductNotFound
from checkout.utils.logging import get_logger

logger = get_logger(__name__)

_stock_lock = threading.Lock()


@dataclass(frozen=True)
class ProductSnapshot:
    """Point-in-time view of a product. Never refreshed after it is taken."""

    id: str
    name: str
    price: Decimal
    stock: int
    product_type: str | None = None
    thumbnail: str | None = None


class CatalogueReader:
    def find_product(self, product_id: str) -> ProductSnapshot:
        try:
            product = current_domain.repository_for(Product).get(product_id)
        except ObjectNotFoundError as exc:
            raise ProductNotFound(f"Product {product_id} not found", product_id=product_id) from exc

        return ProductSnapshot(
            id=str(product.id),
            name=product.name,
            price=Decimal(str(product.price)),
            stock=product.stock,
            product_type=product.product_type,
            thumbnail=product.thumbnail,
        )

    def find_products(self, product_ids) -> dict[str, ProductSnapshot]:
        """Snapshot each distinct product once; fails on the first unresolvable id."""
        snapshots: dict[str, ProductSnapshot] = {}
        for product_id in product_ids:
            if product_id not in snapshots:
                snapshots[product_id] = self.find_product(product_id)
        return snapshots

    def take_stock(self, product_id: str, quantity: int) -> bool:
        with _stock_lock:
            try:
                taken = current_domain.process(
                    TakeStock(product_id=product_id, quantity=quantity),
                    asynchronous=False,
                )
            except ObjectNotFoundError as exc:
                raise ProductNotFound(f"Product {product_id} not found", product_id=product_id) from exc

        logger.debug("stock_take_attempted", product_id=product_id, quantity=quantity, taken=taken)
        return bool(taken)

    def return_stock(self, product_id: str, quantity: int) -> None:
        with _stock_lock:
            current_domain.process(
                ReturnStock(product_id=product_id, quantity=quantity),
                asynchronous=False,
            )
        logger.info("stock_returned", product_id=product_id, quantity=quantity)
