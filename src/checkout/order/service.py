"""Order queries and post-compile transitions initiated by the owner."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from checkout.catalogue.reader import CatalogueReader
from checkout.errors import InvalidInput, NotFound
from checkout.order.cancellation import CancelOrder, MarkOrderReturned
from checkout.order.order import Order, OrderStatus
from checkout.utils.logging import get_logger

logger = get_logger(__name__)

MAX_PAGE_SIZE = 100


class OrderService:
    def __init__(self, reader: CatalogueReader | None = None) -> None:
        self.reader = reader or CatalogueReader()

    def load(self, order_id: str) -> Order:
        try:
            return current_domain.repository_for(Order).get(order_id)
        except ObjectNotFoundError as exc:
            raise NotFound("Order not found", order_id=order_id) from exc

    def get_for_user(self, order_id: str, user_id: str) -> Order:
        """Load an order owned by `user_id`; someone else's order is reported as absent."""
        order = self.load(order_id)
        if str(order.user_id) != str(user_id):
            raise NotFound("Order not found", order_id=order_id)
        return order

    def list_for_user(self, user_id: str, page: int = 1, limit: int = 10) -> dict:
        if page < 1:
            raise InvalidInput("Page must be a positive number")
        if limit < 1 or limit > MAX_PAGE_SIZE:
            raise InvalidInput(f"Limit must be between 1 and {MAX_PAGE_SIZE}")

        orders, total = current_domain.repository_for(Order).page_for_user(user_id, (page - 1) * limit, limit)
        total_pages = (total + limit - 1) // limit
        return {
            "orders": orders,
            "pagination": {
                "total": total,
                "page": page,
                "limit": limit,
                "total_pages": total_pages,
                "has_next_page": page < total_pages,
                "has_prev_page": page > 1,
            },
        }

    def cancel(self, order_id: str, user_id: str, reason: str | None = None) -> Order:
        """Cancel a pending order and put its stock back on sale."""
        order = self.get_for_user(order_id, user_id)
        if OrderStatus(order.status) != OrderStatus.PENDING:
            raise InvalidInput(f"Only pending orders can be canceled, order is {order.status}")

        current_domain.process(CancelOrder(order_id=order_id, reason=reason), asynchronous=False)
        for line in order.ordered_lines():
            self.reader.return_stock(str(line.product_id), line.quantity)

        logger.info("order_canceled", order_id=order_id, user_id=user_id)
        return self.load(order_id)

    def mark_returned(self, order_id: str) -> Order:
        order = self.load(order_id)
        if OrderStatus(order.status) != OrderStatus.PENDING:
            raise InvalidInput(f"Only pending orders can be marked returned, order is {order.status}")

        current_domain.process(MarkOrderReturned(order_id=order_id), asynchronous=False)
        logger.info("order_returned", order_id=order_id)
        return self.load(order_id)
