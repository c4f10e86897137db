"""Order aggregate — the immutable record of one successful checkout.

An order is written exactly once, in the same transaction that withdraws its
stock and clears the cart. Each line snapshots the product identifier, the
quantity and the unit price at the moment of purchase; later catalogue edits
(or deletion of the product) never reach it.

Amounts:
    subtotal = sum of line totals
    tax      = round2(subtotal * TAX_RATE)
    total    = subtotal + tax
"""

from collections.abc import Iterable
from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, event
from sqlalchemy.orm import Mapped, mapped_column, object_session, relationship

from ordering.pricing import PriceQuote, line_total, price
from shared.database import Base
from shared.exceptions import OrderImmutable
from shared.money import Money, round2


class OrderLine(Base):
    __tablename__ = "order_lines"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    # Weak reference: the product may since have been deleted
    product_id: Mapped[str] = mapped_column(String(36), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(Money, nullable=False)
    line_total: Mapped[Decimal] = mapped_column(Money, nullable=False)

    def __repr__(self) -> str:
        return f"<OrderLine {self.product_id} x{self.quantity} @ {self.unit_price}>"


class Order(Base):
    __tablename__ = "orders"
    __table_args__ = (Index("ix_orders_user_id_created_at", "user_id", "created_at"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    subtotal: Mapped[Decimal] = mapped_column(Money, nullable=False)
    tax: Mapped[Decimal] = mapped_column(Money, nullable=False)
    total: Mapped[Decimal] = mapped_column(Money, nullable=False)
    lines: Mapped[list[OrderLine]] = relationship(
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by=OrderLine.position,
    )

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, user_id, lines: Iterable[tuple], quote: PriceQuote | None = None):
        """Build an order from `(product_id, quantity, unit_price)` triples.

        `quote` is computed from the lines when not supplied.
        """
        lines = [(str(product_id), quantity, round2(unit_price)) for product_id, quantity, unit_price in lines]
        if not lines:
            raise ValueError("An order needs at least one line")
        quote = quote or price((unit_price, quantity) for _, quantity, unit_price in lines)

        return cls(
            user_id=str(user_id),
            created_at=datetime.now(UTC),
            subtotal=quote.subtotal,
            tax=quote.tax,
            total=quote.total,
            lines=[
                OrderLine(
                    position=position,
                    product_id=product_id,
                    quantity=quantity,
                    unit_price=unit_price,
                    line_total=line_total(unit_price, quantity),
                )
                for position, (product_id, quantity, unit_price) in enumerate(lines)
            ],
        )

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    def __repr__(self) -> str:
        return f"<Order {self.id} user={self.user_id} total={self.total}>"


# ---------------------------------------------------------------------------
# Immutability
# ---------------------------------------------------------------------------
@event.listens_for(Order, "before_update")
@event.listens_for(OrderLine, "before_update")
def _reject_order_changes(mapper, connection, target):
    session = object_session(target)
    if session is not None and session.is_modified(target, include_collections=False):
        order_id = target.id if isinstance(target, Order) else target.order_id
        raise OrderImmutable(order_id)
