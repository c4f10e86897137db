"""Storefront load test scenarios.

Three journeys covering the shopper's view of the store: browsing the
catalogue, filling and editing a cart before abandoning it, and buying what
is in the cart. Stock conflicts (409) and empty carts (400) are expected
outcomes under load and are recorded as successes.
"""

import random

from locust import SequentialTaskSet, task

from loadtests.data_generators import product_data, restock_data, shopper_id, target_quantity
from loadtests.helpers.response import extract_error_detail, is_expected_conflict
from loadtests.helpers.state import ShopperState


class _ShopperJourney(SequentialTaskSet):
    def on_start(self):
        self.state = ShopperState(user_id=shopper_id())

    def browse(self):
        with self.client.get("/products", catch_response=True, name="GET /products") as resp:
            if resp.status_code != 200:
                resp.failure(f"List products failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()
                return []
            products = [p for p in resp.json() if p["stock"] > 0]
            self.state.product_ids = [p["id"] for p in products]
            return products

    def add_to_cart(self, product_id):
        with self.client.post(
            "/cart/items",
            json={"product_id": product_id},
            headers=self.state.headers,
            catch_response=True,
            name="POST /cart/items",
        ) as resp:
            if resp.status_code == 200:
                self.state.cart_quantities[product_id] = resp.json()["quantity"]
            elif is_expected_conflict(resp):
                resp.success()
            else:
                resp.failure(f"Add to cart failed: {resp.status_code} — {extract_error_detail(resp)}")


class BrowseCatalogueJourney(SequentialTaskSet):
    """List Products -> View a Product -> View another Product.

    Read-only traffic. These requests run in read-only transactions, so they
    do not queue behind checkouts holding the database write lock.
    """

    @task
    def list_products(self):
        resp = self.client.get("/products", name="GET /products")
        self.product_ids = [p["id"] for p in resp.json()] if resp.status_code == 200 else []

    @task
    def view_products(self):
        for product_id in random.sample(self.product_ids, k=min(2, len(self.product_ids))):
            self.client.get(f"/products/{product_id}", name="GET /products/{id}")

    @task
    def done(self):
        self.interrupt()


class CartEditingJourney(_ShopperJourney):
    """Browse -> Add Items -> Change Quantity -> Remove Item -> Clear.

    Models a customer who changes their mind and never checks out.
    """

    @task
    def add_items(self):
        products = self.browse()
        for product in random.sample(products, k=min(3, len(products))):
            self.add_to_cart(product["id"])

    @task
    def change_quantity(self):
        if not self.state.cart_quantities:
            return
        product_id = random.choice(list(self.state.cart_quantities))
        quantity = target_quantity(self.state.cart_quantities[product_id] + 1)
        with self.client.put(
            f"/cart/items/{product_id}",
            json={"quantity": quantity},
            headers=self.state.headers,
            catch_response=True,
            name="PUT /cart/items/{product_id}",
        ) as resp:
            if resp.status_code == 200:
                self.state.cart_quantities[product_id] = resp.json()["quantity"]
            elif is_expected_conflict(resp):
                resp.success()
            else:
                resp.failure(f"Update quantity failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def remove_item(self):
        if not self.state.cart_quantities:
            return
        product_id = self.state.cart_quantities.popitem()[0]
        self.client.delete(
            f"/cart/items/{product_id}",
            headers=self.state.headers,
            name="DELETE /cart/items/{product_id}",
        )

    @task
    def view_and_clear(self):
        self.client.get("/cart", headers=self.state.headers, name="GET /cart")
        self.client.delete("/cart", headers=self.state.headers, name="DELETE /cart")
        self.state.cart_quantities.clear()

    @task
    def done(self):
        self.interrupt()


class CheckoutJourney(_ShopperJourney):
    """Browse -> Add Items -> View Cart -> Checkout -> Order History.

    The conversion path. Checkouts that lose a stock race come back as 409
    and leave the cart intact, which the journey then clears.
    """

    @task
    def fill_cart(self):
        products = self.browse()
        for product in random.sample(products, k=min(2, len(products))):
            self.add_to_cart(product["id"])

    @task
    def view_cart(self):
        self.client.get("/cart", headers=self.state.headers, name="GET /cart")

    @task
    def checkout(self):
        with self.client.post(
            "/checkout",
            headers=self.state.headers,
            catch_response=True,
            name="POST /checkout",
        ) as resp:
            if resp.status_code == 201:
                self.state.order_ids.append(resp.json()["id"])
            elif is_expected_conflict(resp):
                resp.success()
                self.client.delete("/cart", headers=self.state.headers, name="DELETE /cart")
            else:
                resp.failure(f"Checkout failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def view_orders(self):
        self.client.get("/orders/my", headers=self.state.headers, name="GET /orders/my")

    @task
    def done(self):
        self.interrupt()


class CatalogueAdminJourney(SequentialTaskSet):
    """Add Product -> Restock -> (occasionally) Delete.

    Keeps the catalogue supplied while shoppers drain it; deletions exercise
    carts and orders that still reference removed products.
    """

    @task
    def add_product(self):
        with self.client.post("/products", json=product_data(), catch_response=True, name="POST /products") as resp:
            if resp.status_code == 201:
                self.product_id = resp.json()["id"]
            else:
                resp.failure(f"Add product failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def restock_existing(self):
        resp = self.client.get("/products", name="GET /products")
        if resp.status_code != 200 or not resp.json():
            return
        product = min(resp.json(), key=lambda p: p["stock"])
        self.client.post(
            f"/products/{product['id']}/restock",
            json=restock_data(),
            name="POST /products/{id}/restock",
        )

    @task
    def maybe_delete(self):
        if random.random() < 0.2:
            self.client.delete(f"/products/{self.product_id}", name="DELETE /products/{id}")

    @task
    def done(self):
        self.interrupt()
