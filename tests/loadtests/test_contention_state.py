"""Tests for the end-of-run accounting of the last-unit contention scenario."""

from loadtests.helpers.state import ContentionState

UNITS = 5


class TestOversold:
    def test_every_unit_sold_once(self):
        state = ContentionState(product_id="p-1", orders_placed=5, orders_rejected=40)
        assert not state.oversold(UNITS, final_stock=0)

    def test_partial_sell_through(self):
        state = ContentionState(product_id="p-1", orders_placed=2)
        assert not state.oversold(UNITS, final_stock=3)

    def test_more_orders_than_units(self):
        state = ContentionState(product_id="p-1", orders_placed=6)
        assert state.oversold(UNITS, final_stock=0)

    def test_stock_disagrees_with_orders(self):
        state = ContentionState(product_id="p-1", orders_placed=3)
        assert state.oversold(UNITS, final_stock=1)

    def test_counters_start_at_zero(self):
        state = ContentionState()
        assert (state.product_id, state.orders_placed, state.orders_rejected) == (None, 0, 0)
        assert not state.oversold(UNITS, final_stock=UNITS)
