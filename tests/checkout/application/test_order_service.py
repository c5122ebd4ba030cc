"""Application tests for order queries, cancellation and returns."""

import pytest

from checkout.catalogue.reader import CatalogueReader
from checkout.errors import InvalidInput, NotFound
from checkout.order.compiler import OrderCompiler
from checkout.order.order import OrderStatus
from checkout.order.service import OrderService


@pytest.fixture()
def product_id(register_product):
    return register_product(price=12.50, stock=10)


def _place(product_id, user_id="user-001", quantity=1):
    return OrderCompiler().compile_order(user_id, [{"product_id": product_id, "quantity": quantity}])


class TestGetForUser:
    def test_owner_can_read_order(self, product_id):
        order = _place(product_id)
        assert OrderService().get_for_user(str(order.id), "user-001").id == order.id

    def test_other_user_sees_nothing(self, product_id):
        order = _place(product_id)
        with pytest.raises(NotFound):
            OrderService().get_for_user(str(order.id), "user-002")

    def test_unknown_order(self):
        with pytest.raises(NotFound):
            OrderService().load("missing-order")


class TestListForUser:
    def test_pagination(self, product_id):
        placed = {str(_place(product_id).id) for _ in range(3)}
        _place(product_id, user_id="user-002")

        first = OrderService().list_for_user("user-001", page=1, limit=2)
        second = OrderService().list_for_user("user-001", page=2, limit=2)

        assert first["pagination"] == {
            "total": 3,
            "page": 1,
            "limit": 2,
            "total_pages": 2,
            "has_next_page": True,
            "has_prev_page": False,
        }
        assert len(first["orders"]) == 2
        assert len(second["orders"]) == 1
        assert second["pagination"]["has_prev_page"] is True
        assert {str(order.id) for order in first["orders"] + second["orders"]} == placed

    @pytest.mark.slow
    def test_more_orders_than_one_query_page(self, register_product):
        product_id = register_product(stock=200)
        for _ in range(120):
            _place(product_id)

        first = OrderService().list_for_user("user-001", page=1, limit=100)
        second = OrderService().list_for_user("user-001", page=2, limit=100)

        assert first["pagination"]["total"] == 120
        assert first["pagination"]["total_pages"] == 2
        assert len(first["orders"]) == 100
        assert len(second["orders"]) == 20
        assert {order.id for order in first["orders"]}.isdisjoint(order.id for order in second["orders"])

    def test_newest_first(self, product_id):
        older = _place(product_id)
        newer = _place(product_id)

        orders = OrderService().list_for_user("user-001")["orders"]
        assert [order.id for order in orders] == [newer.id, older.id]

    def test_no_orders(self):
        result = OrderService().list_for_user("user-001")
        assert result["orders"] == []
        assert result["pagination"]["total_pages"] == 0

    @pytest.mark.parametrize("page, limit", [(0, 10), (1, 0), (1, 101)])
    def test_invalid_paging(self, page, limit):
        with pytest.raises(InvalidInput):
            OrderService().list_for_user("user-001", page=page, limit=limit)


class TestCancel:
    def test_cancel_returns_stock(self, product_id):
        order = _place(product_id, quantity=4)
        assert CatalogueReader().find_product(product_id).stock == 6

        canceled = OrderService().cancel(str(order.id), "user-001", reason="ordered twice")

        assert canceled.status == OrderStatus.CANCELED.value
        assert canceled.cancellation_reason == "ordered twice"
        assert CatalogueReader().find_product(product_id).stock == 10

    def test_cancel_twice_is_rejected(self, product_id):
        order = _place(product_id)
        OrderService().cancel(str(order.id), "user-001")
        with pytest.raises(InvalidInput):
            OrderService().cancel(str(order.id), "user-001")

    def test_cannot_cancel_someone_elses_order(self, product_id):
        order = _place(product_id)
        with pytest.raises(NotFound):
            OrderService().cancel(str(order.id), "user-002")


class TestMarkReturned:
    def test_pending_order_can_be_returned(self, product_id):
        order = _place(product_id)
        returned = OrderService().mark_returned(str(order.id))
        assert returned.status == OrderStatus.RETURNED.value

    def test_canceled_order_cannot_be_returned(self, product_id):
        order = _place(product_id)
        OrderService().cancel(str(order.id), "user-001")
        with pytest.raises(InvalidInput):
            OrderService().mark_returned(str(order.id))
