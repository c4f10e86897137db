"""Order archive — append-only store of placed orders and the history view.

`list_for_user` returns an `OrderHistory` rather than a list: every iteration
runs the query again, so a history held across a checkout sees the new order.
Orders come back newest first; orders created at the same instant are
ordered by descending identifier.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from inventory.stock.ledger import InventoryLedger
from ordering.domain import logger
from ordering.order.order import Order
from shared.database import session_scope

REMOVED_PRODUCT_NAME = "Product removed"


class OrderHistory:
    """A user's orders, newest first. Re-iterable; each pass re-reads storage."""

    def __init__(self, user_id, session: Session | None = None):
        self.user_id = str(user_id)
        self._session = session

    def _statement(self):
        return (
            select(Order)
            .where(Order.user_id == self.user_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
        )

    def __iter__(self) -> Iterator[Order]:
        if self._session is not None:
            return iter(list(self._session.scalars(self._statement())))
        with session_scope(read_only=True) as session:
            return iter(list(session.scalars(self._statement())))

    def __repr__(self) -> str:
        return f"<OrderHistory user={self.user_id}>"


class OrderArchive:
    def __init__(self, session: Session):
        self.session = session

    def record(self, order: Order) -> Order:
        """Append `order`; its identifier is assigned here."""
        self.session.add(order)
        self.session.flush()
        logger.info(
            "Order recorded",
            order_id=order.id,
            user_id=order.user_id,
            total=str(order.total),
        )
        return order

    def list_for_user(self, user_id) -> OrderHistory:
        return OrderHistory(user_id, self.session)


def list_for_user(user_id) -> OrderHistory:
    return OrderHistory(user_id)


# ---------------------------------------------------------------------------
# History view
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class HistoryLine:
    product_id: str
    name: str
    category: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal


@dataclass(frozen=True)
class HistoryEntry:
    order_id: int
    created_at: datetime
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    lines: list[HistoryLine]


def order_history(user_id) -> list[HistoryEntry]:
    """The user's orders with each line labelled by the product's current name.

    Lines whose product has since been deleted read "Product removed".
    """
    with session_scope(read_only=True) as session:
        orders = list(OrderArchive(session).list_for_user(user_id))
        products = InventoryLedger(session).find_many(
            line.product_id for order in orders for line in order.lines
        )

        entries = []
        for order in orders:
            lines = []
            for line in order.lines:
                product = products.get(line.product_id)
                lines.append(
                    HistoryLine(
                        product_id=line.product_id,
                        name=product.name if product else REMOVED_PRODUCT_NAME,
                        category=(product.category or "") if product else "",
                        quantity=line.quantity,
                        unit_price=line.unit_price,
                        line_total=line.line_total,
                    )
                )
            entries.append(
                HistoryEntry(
                    order_id=order.id,
                    created_at=order.created_at,
                    subtotal=order.subtotal,
                    tax=order.tax,
                    total=order.total,
                    lines=lines,
                )
            )
    return entries
