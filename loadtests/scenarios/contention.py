"""Stock contention scenario.

Many shoppers race to buy the last few units of a single product. After the
run, the product's stock must equal SCARCE_UNITS minus the successful
checkouts, and there can be no more successful checkouts than units; any
other outcome means the checkout serialization is broken.

The contended product is created once per test run, before any user starts.
The end-of-run check assumes a single (local) runner, since each Locust
process keeps its own counters.
"""

import requests
from locust import HttpUser, constant_pacing, events, task
from locust.runners import LocalRunner, MasterRunner

from loadtests.data_generators import product_data, shopper_id
from loadtests.helpers.response import extract_error_detail, is_expected_conflict
from loadtests.helpers.state import ContentionState

SCARCE_UNITS = 5


class LastUnitContentionUser(HttpUser):
    """Stress test: every user buys one unit of the same scarce product.

    Target: concurrent checkouts on one product row.
    Monitor: 201s stop after SCARCE_UNITS; every other checkout is a 409
    insufficient_stock.
    """

    wait_time = constant_pacing(0.2)
    state = ContentionState()

    @task
    def buy_one(self):
        product_id = self.state.product_id
        if product_id is None:
            return
        headers = {"X-User-Id": shopper_id()}
        self.client.post(
            "/cart/items",
            json={"product_id": product_id},
            headers=headers,
            name="[CONTENTION] POST /cart/items",
        )
        with self.client.post(
            "/checkout",
            headers=headers,
            catch_response=True,
            name="[CONTENTION] POST /checkout",
        ) as resp:
            if resp.status_code == 201:
                self.state.orders_placed += 1
            elif is_expected_conflict(resp):
                self.state.orders_rejected += 1
                resp.success()
            else:
                resp.failure(f"Checkout failed: {resp.status_code}: {extract_error_detail(resp)}")


def _contention_selected(environment) -> bool:
    return LastUnitContentionUser in (environment.user_classes or [])


@events.test_start.add_listener
def create_contended_product(environment, **_kwargs):
    """Create the scarce product once, before any LastUnitContentionUser runs."""
    if not _contention_selected(environment) or isinstance(environment.runner, MasterRunner):
        return

    state = LastUnitContentionUser.state = ContentionState()
    resp = requests.post(
        f"{environment.host}/products",
        json={**product_data(stock=SCARCE_UNITS), "name": "Contended Item"},
        timeout=10,
    )
    resp.raise_for_status()
    state.product_id = resp.json()["id"]
    print(f"[CONTENTION] Created product {state.product_id} with {SCARCE_UNITS} units")


@events.test_stop.add_listener
def report_contention(environment, **_kwargs):
    """Print checkout outcomes and fail the run if stock and orders disagree."""
    state = LastUnitContentionUser.state
    if not _contention_selected(environment) or state.product_id is None:
        return

    print("\n[CONTENTION] Results:")
    print(f"  orders placed:   {state.orders_placed}")
    print(f"  orders rejected: {state.orders_rejected}")

    try:
        resp = requests.get(f"{environment.host}/products/{state.product_id}", timeout=5)
        resp.raise_for_status()
    except requests.RequestException as e:
        print(f"[CONTENTION] Could not fetch final stock: {e}\n")
        return

    stock = resp.json()["stock"]
    print(f"  final stock:     {stock}\n")

    if not isinstance(environment.runner, LocalRunner):
        return
    if state.oversold(SCARCE_UNITS, stock):
        print(f"[CONTENTION] FAILED: {state.orders_placed} orders placed against {SCARCE_UNITS} units, stock {stock}\n")
        environment.process_exit_code = 1
