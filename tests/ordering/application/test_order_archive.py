"""Application tests for the order archive and history view."""

from datetime import UTC, datetime
from decimal import Decimal

import pytest

from inventory.stock import catalogue
from ordering.cart import store
from ordering.checkout.checkout import checkout
from ordering.order import archive
from ordering.order.archive import REMOVED_PRODUCT_NAME, OrderArchive, order_history
from ordering.order.order import Order, OrderLine
from shared.database import session_scope
from shared.exceptions import OrderImmutable

USER = "user-001"


def _place_order(product, quantity=1, user_id=USER):
    for _ in range(quantity):
        store.add_one(user_id, product.id)
    return checkout(user_id)


class TestRecord:
    def test_record_assigns_id(self):
        with session_scope() as session:
            order = OrderArchive(session).record(Order.create(USER, [("prod-001", 1, "5.00")]))
        assert order.id is not None

    def test_recorded_order_reads_back(self):
        with session_scope() as session:
            order = OrderArchive(session).record(Order.create(USER, [("prod-001", 2, "5.00")]))

        [stored] = list(archive.list_for_user(USER))
        assert stored.id == order.id
        assert stored.total == Decimal("10.70")
        assert stored.lines[0].quantity == 2


class TestListForUser:
    def test_newest_first(self, make_product):
        product = make_product(stock=5)
        first = _place_order(product)
        second = _place_order(product)

        assert [order.id for order in archive.list_for_user(USER)] == [second.id, first.id]

    def test_ties_broken_by_identifier(self):
        created_at = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)
        with session_scope() as session:
            orders = []
            for _ in range(3):
                order = Order.create(USER, [("prod-001", 1, "1.00")])
                order.created_at = created_at
                orders.append(OrderArchive(session).record(order))

        assert [order.id for order in archive.list_for_user(USER)] == [o.id for o in reversed(orders)]

    def test_only_the_users_orders(self, make_product):
        product = make_product(stock=5)
        _place_order(product, user_id="alice")

        assert list(archive.list_for_user("bob")) == []
        assert len(list(archive.list_for_user("alice"))) == 1

    def test_history_is_re_iterable_and_live(self, make_product):
        product = make_product(stock=5)
        history = archive.list_for_user(USER)
        assert list(history) == []

        _place_order(product)

        assert len(list(history)) == 1
        assert len(list(history)) == 1


class TestImmutability:
    def test_order_cannot_be_updated(self, make_product):
        order = _place_order(make_product(stock=5))

        with pytest.raises(OrderImmutable):
            with session_scope() as session:
                stored = session.get(Order, order.id)
                stored.total = Decimal("1.00")

        assert next(iter(archive.list_for_user(USER))).total == order.total

    def test_order_line_cannot_be_updated(self, make_product):
        order = _place_order(make_product(stock=5))

        with pytest.raises(OrderImmutable):
            with session_scope() as session:
                line = session.get(OrderLine, order.lines[0].id)
                line.quantity = 99


class TestOrderHistoryView:
    def test_lines_show_current_product_details(self, make_product):
        product = make_product(name="Wireless Headphones", price="199.00", category="Audio")
        order = _place_order(product, 2)

        [entry] = order_history(USER)
        assert entry.order_id == order.id
        assert entry.total == order.total
        [line] = entry.lines
        assert line.name == "Wireless Headphones"
        assert line.category == "Audio"
        assert line.quantity == 2
        assert line.unit_price == Decimal("199.00")

    def test_deleted_product_reads_as_removed(self, make_product):
        product = make_product(name="Gone Soon", category="Audio")
        _place_order(product)
        catalogue.delete_product(product.id)

        [entry] = order_history(USER)
        assert entry.lines[0].name == REMOVED_PRODUCT_NAME
        assert entry.lines[0].category == ""
        assert entry.lines[0].product_id == product.id
