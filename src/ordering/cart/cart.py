"""Shopping Cart aggregate — one pending selection per user.

The cart is keyed by user identifier and stored apart from any user profile.
Lines refer to products by identifier only and carry no price: the price is
read live whenever the cart is viewed or checked out. Stock checks made here
are advisory, nothing is reserved until checkout.
"""

from datetime import UTC, datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inventory.stock.product import Product
from shared.database import Base
from shared.exceptions import ItemNotInCart


class CartLine(Base):
    __tablename__ = "cart_lines"
    __table_args__ = (CheckConstraint("quantity >= 1", name="ck_cart_lines_quantity_positive"),)

    user_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("carts.user_id", ondelete="CASCADE"), primary_key=True
    )
    # No foreign key: products may be deleted while still referenced here
    product_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    added_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"<CartLine {self.product_id} x{self.quantity}>"


class Cart(Base):
    __tablename__ = "carts"

    user_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    created_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    lines: Mapped[list[CartLine]] = relationship(
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by=[CartLine.added_at, CartLine.product_id],
    )

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, user_id):
        now = datetime.now(UTC)
        return cls(user_id=str(user_id), lines=[], created_at=now, updated_at=now)

    # -------------------------------------------------------------------
    # Line management
    # -------------------------------------------------------------------
    def line_for(self, product_id) -> CartLine | None:
        return next((line for line in self.lines if line.product_id == str(product_id)), None)

    def add_one(self, product: Product) -> int:
        """Add one unit of `product`, merging with an existing line.

        Raises InsufficientStock, leaving the cart untouched, when the
        resulting quantity would exceed the product's current stock.
        """
        existing = self.line_for(product.id)
        new_quantity = (existing.quantity if existing else 0) + 1
        product.ensure_available(new_quantity)

        now = datetime.now(UTC)
        if existing:
            existing.quantity = new_quantity
        else:
            self.lines.append(CartLine(product_id=product.id, quantity=new_quantity, added_at=now))
        self.updated_at = now
        return new_quantity

    def set_quantity(self, product: Product, quantity: int) -> int:
        """Replace the quantity of an existing line with `quantity` (>= 1)."""
        line = self.line_for(product.id)
        if line is None:
            raise ItemNotInCart(product.id)
        if quantity < 1:
            raise ValueError("Quantity must be at least 1; remove the line instead")
        product.ensure_available(quantity)

        line.quantity = quantity
        self.updated_at = datetime.now(UTC)
        return quantity

    def remove(self, product_id) -> bool:
        """Drop the line for `product_id`. Returns False when there was none."""
        line = self.line_for(product_id)
        if line is None:
            return False
        self.lines.remove(line)
        self.updated_at = datetime.now(UTC)
        return True

    def clear(self) -> None:
        self.lines.clear()
        self.updated_at = datetime.now(UTC)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def __repr__(self) -> str:
        return f"<Cart {self.user_id} lines={len(self.lines)}>"
