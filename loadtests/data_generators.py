"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the API's Pydantic request
schemas (non-negative two-place prices, non-negative stock).
"""

import random
import uuid

from faker import Faker

fake = Faker()

CATEGORIES = ["Electronics", "Audio", "Books", "Home", "Outdoors"]


def shopper_id() -> str:
    """Generate unique user identifiers like 'LT-a1b2c3d4'."""
    return f"LT-{uuid.uuid4().hex[:8]}"


def product_price() -> str:
    """Generate a price string between 1.00 and 1500.00."""
    return f"{random.randint(100, 150000) / 100:.2f}"


def product_data(stock: int | None = None) -> dict:
    """Generate AddProductRequest payload matching schema field names."""
    return {
        "name": f"{fake.catch_phrase()[:200]} {uuid.uuid4().hex[:4]}",
        "price": product_price(),
        "stock": random.randint(5, 200) if stock is None else stock,
        "category": random.choice(CATEGORIES),
        "description": fake.sentence(nb_words=12),
    }


def restock_data() -> dict:
    return {"quantity": random.randint(5, 50)}


def target_quantity(available: int) -> int:
    """Pick a cart quantity that usually fits, occasionally exceeds, stock."""
    if available <= 0:
        return 1
    return random.choice([1, 1, 2, min(available, 3), available + 1])
