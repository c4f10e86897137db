"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance keeps its own ShopperState. ContentionState is the
exception: one instance is shared by every contention user in a process.
State tracks the shopper identity and the products seen while browsing so
follow-up requests can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class ShopperState:
    """Tracks state for a single simulated shopper."""

    user_id: str | None = None
    product_ids: list[str] = field(default_factory=list)
    cart_quantities: dict[str, int] = field(default_factory=dict)
    order_ids: list[int] = field(default_factory=list)

    @property
    def headers(self) -> dict:
        return {"X-User-Id": self.user_id}


@dataclass
class ContentionState:
    """Tracks outcomes of racing for a scarce product."""

    product_id: str | None = None
    orders_placed: int = 0
    orders_rejected: int = 0

    def oversold(self, units: int, final_stock: int) -> bool:
        """True when the placed orders and the remaining stock do not add up to `units`."""
        return self.orders_placed > units or final_stock != units - self.orders_placed
