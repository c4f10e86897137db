"""Product aggregate — catalogue entry plus its sellable stock count.

Stock Model:
    stock:  Units currently sellable. Never negative; enforced by the
            aggregate methods and by a CHECK constraint on the table.
    price:  Current unit price. Orders snapshot it at checkout, so later
            price changes never reach historical orders.
"""

from datetime import UTC, datetime
from decimal import Decimal
from uuid import uuid4

from sqlalchemy import CheckConstraint, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from shared.database import Base
from shared.exceptions import InsufficientStock, StockLimitExceeded
from shared.money import MAX_AMOUNT, Money, round2

# Stock column is a 32-bit integer on PostgreSQL
MAX_STOCK = 2_147_483_647


def _new_id() -> str:
    return str(uuid4())


class Product(Base):
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),
        CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str | None] = mapped_column(String(100))
    description: Mapped[str | None] = mapped_column(Text)
    image: Mapped[str | None] = mapped_column(String(500))
    price: Mapped[Decimal] = mapped_column(Money, nullable=False)
    stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, name, price, stock=0, category=None, description=None, image=None, product_id=None):
        if not 0 <= stock <= MAX_STOCK:
            raise ValueError(f"Stock must be between 0 and {MAX_STOCK}")
        price = round2(price)
        if not 0 <= price <= MAX_AMOUNT:
            raise ValueError(f"Price must be between 0 and {MAX_AMOUNT}")

        now = datetime.now(UTC)
        return cls(
            id=product_id or _new_id(),
            name=name,
            category=category,
            description=description,
            image=image,
            price=price,
            stock=stock,
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Stock
    # -------------------------------------------------------------------
    def can_supply(self, quantity: int) -> bool:
        return quantity <= self.stock

    def ensure_available(self, quantity: int) -> None:
        """Raise InsufficientStock unless `quantity` units can be sold right now."""
        if not self.can_supply(quantity):
            raise InsufficientStock(self.id, requested=quantity, available=self.stock, product_name=self.name)

    def decrement(self, amount: int) -> int:
        """Remove up to `amount` units, stopping at zero."""
        if amount < 0:
            raise ValueError("Decrement amount cannot be negative")
        self.stock = max(self.stock - amount, 0)
        self.updated_at = datetime.now(UTC)
        return self.stock

    def receive(self, amount: int) -> int:
        """Add `amount` units; raises StockLimitExceeded rather than overflow the column."""
        if amount <= 0:
            raise ValueError("Restock amount must be positive")
        if self.stock + amount > MAX_STOCK:
            raise StockLimitExceeded(self.id, requested=amount, available=self.stock, limit=MAX_STOCK)
        self.stock += amount
        self.updated_at = datetime.now(UTC)
        return self.stock

    def __repr__(self) -> str:
        return f"<Product {self.id} {self.name!r} stock={self.stock}>"
