"""Inventory ledger — reads and conditional writes of product stock.

All writes to one product are serialized: rows are read with
``SELECT ... FOR UPDATE``, always in identifier order, and on SQLite the
whole write transaction holds the database write lock from its first
statement.
`withdraw` additionally performs the decrement as a single compare-and-set
UPDATE, so stock cannot go below zero even if a caller skipped the locked read.
"""

from collections.abc import Iterable

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from inventory.domain import logger
from inventory.stock.product import Product
from shared.database import session_scope
from shared.exceptions import InsufficientStock, ProductNotFound


class InventoryLedger:
    """Stock operations bound to one open transaction."""

    def __init__(self, session: Session):
        self.session = session

    def find(self, product_id) -> Product | None:
        return self.session.get(Product, str(product_id))

    def get(self, product_id) -> Product:
        product = self.find(product_id)
        if product is None:
            raise ProductNotFound(product_id)
        return product

    def get_stock(self, product_id) -> int:
        return self.get(product_id).stock

    def find_many(self, product_ids: Iterable[str]) -> dict[str, Product]:
        """Products keyed by identifier; unknown identifiers are left out."""
        ids = sorted({str(pid) for pid in product_ids})
        if not ids:
            return {}
        stmt = select(Product).where(Product.id.in_(ids))
        return {product.id: product for product in self.session.scalars(stmt)}

    def lock(self, product_ids: Iterable[str]) -> dict[str, Product]:
        """Fresh, locked read of the given products, keyed by identifier.

        Identifiers that no longer resolve are simply absent from the result.
        """
        ids = sorted({str(pid) for pid in product_ids})
        if not ids:
            return {}
        stmt = (
            select(Product)
            .where(Product.id.in_(ids))
            .order_by(Product.id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return {product.id: product for product in self.session.scalars(stmt)}

    def _lock_one(self, product_id) -> Product:
        product = self.lock([product_id]).get(str(product_id))
        if product is None:
            raise ProductNotFound(product_id)
        return product

    def decrement_stock(self, product_id, amount: int) -> int:
        """Remove `amount` units, clamping at zero. Missing products are not written."""
        product = self._lock_one(product_id)
        previous = product.stock
        new_stock = product.decrement(amount)
        self.session.flush()

        logger.info(
            "Stock decremented",
            product_id=product.id,
            amount=amount,
            previous_stock=previous,
            new_stock=new_stock,
        )
        return new_stock

    def withdraw(self, product_id, amount: int) -> int:
        """Decrement only if `amount` units are still on hand at write time.

        Raises InsufficientStock when a concurrent sale got there first,
        leaving the row untouched.
        """
        if amount <= 0:
            raise ValueError("Withdrawal amount must be positive")

        product_id = str(product_id)
        result = self.session.execute(
            update(Product)
            .where(Product.id == product_id, Product.stock >= amount)
            .values(stock=Product.stock - amount)
        )
        if result.rowcount != 1:
            product = self._lock_one(product_id)
            logger.warning(
                "Stock withdrawal rejected",
                product_id=product_id,
                requested=amount,
                available=product.stock,
            )
            raise InsufficientStock(product_id, requested=amount, available=product.stock, product_name=product.name)

        new_stock = self.session.scalar(select(Product.stock).where(Product.id == product_id))
        logger.info("Stock withdrawn", product_id=product_id, amount=amount, new_stock=new_stock)
        return new_stock

    def restock(self, product_id, amount: int) -> int:
        product = self._lock_one(product_id)
        new_stock = product.receive(amount)
        self.session.flush()
        logger.info("Stock received", product_id=product.id, amount=amount, new_stock=new_stock)
        return new_stock


# ---------------------------------------------------------------------------
# Standalone operations (one transaction each)
# ---------------------------------------------------------------------------
def get_stock(product_id) -> int:
    with session_scope(read_only=True) as session:
        return InventoryLedger(session).get_stock(product_id)


def decrement_stock(product_id, amount: int) -> int:
    with session_scope() as session:
        return InventoryLedger(session).decrement_stock(product_id, amount)


def restock(product_id, amount: int) -> int:
    with session_scope() as session:
        return InventoryLedger(session).restock(product_id, amount)
