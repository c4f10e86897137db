"""Tests for Order aggregate creation."""

from decimal import Decimal

import pytest

from ordering.order.order import Order
from ordering.pricing import price


class TestOrderCreation:
    def test_create_prices_the_lines(self):
        order = Order.create("user-001", [("prod-001", 2, "10.00"), ("prod-002", 3, "5.00")])
        assert order.subtotal == Decimal("35.00")
        assert order.tax == Decimal("2.45")
        assert order.total == Decimal("37.45")

    def test_create_uses_given_quote(self):
        quote = price([(Decimal("20.00"), 3)])
        order = Order.create("user-001", [("prod-001", 3, Decimal("20.00"))], quote)
        assert order.total == Decimal("64.20")

    def test_lines_snapshot_price_and_position(self):
        order = Order.create("user-001", [("prod-001", 2, "10.00"), ("prod-002", 1, "5.50")])
        assert [line.position for line in order.lines] == [0, 1]
        assert order.lines[0].unit_price == Decimal("10.00")
        assert order.lines[0].line_total == Decimal("20.00")
        assert order.lines[1].product_id == "prod-002"

    def test_item_count(self):
        order = Order.create("user-001", [("prod-001", 2, "10.00"), ("prod-002", 3, "5.00")])
        assert order.item_count == 5

    def test_create_sets_owner_and_timestamp(self):
        order = Order.create("user-001", [("prod-001", 1, "1.00")])
        assert order.user_id == "user-001"
        assert order.created_at is not None

    def test_order_needs_lines(self):
        with pytest.raises(ValueError):
            Order.create("user-001", [])
