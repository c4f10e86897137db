"""Cart store — per-user cart operations checked against live stock.

Every write runs in its own transaction and locks the user's cart row, so
two requests for the same user apply one after the other. Stock is read but
never reserved; checkout makes the final decision.

A user's first add inserts the cart row with ON CONFLICT DO NOTHING and then
locks whichever row exists, so two concurrent first adds both succeed.
"""

from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from inventory.stock.ledger import InventoryLedger
from ordering.cart.cart import Cart
from ordering.domain import logger
from ordering.pricing import PriceQuote, line_total, price
from shared.database import session_scope
from shared.exceptions import ItemNotInCart

_CONFLICT_IGNORING_INSERTS = {"postgresql": postgresql.insert, "sqlite": sqlite.insert}


@dataclass(frozen=True)
class CartItem:
    """A cart line joined with the product it currently resolves to."""

    product_id: str
    name: str
    category: str | None
    unit_price: Decimal
    quantity: int

    @property
    def line_total(self) -> Decimal:
        return line_total(self.unit_price, self.quantity)


@dataclass(frozen=True)
class CartSummary:
    items: list[CartItem]
    quote: PriceQuote

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)


class CartStore:
    def __init__(self, session: Session):
        self.session = session
        self.ledger = InventoryLedger(session)

    def load(self, user_id, *, for_update=False, create=False) -> Cart | None:
        cart = self._select(user_id, for_update)
        if cart is None and create:
            self._insert_if_absent(user_id)
            cart = self._select(user_id, for_update)
        return cart

    def _select(self, user_id, for_update: bool) -> Cart | None:
        stmt = select(Cart).where(Cart.user_id == str(user_id))
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        return self.session.scalar(stmt)

    def _insert_if_absent(self, user_id) -> None:
        """Insert an empty cart row unless a concurrent request already has."""
        cart = Cart.create(user_id)
        insert = _CONFLICT_IGNORING_INSERTS.get(self.session.get_bind().dialect.name)
        if insert is not None:
            self.session.execute(
                insert(Cart)
                .values(user_id=cart.user_id, created_at=cart.created_at, updated_at=cart.updated_at)
                .on_conflict_do_nothing(index_elements=["user_id"])
            )
            return

        try:
            with self.session.begin_nested():
                self.session.add(cart)
        except IntegrityError:
            logger.debug("Cart created concurrently", user_id=cart.user_id)

    def items(self, user_id) -> list[CartItem]:
        cart = self.load(user_id)
        if cart is None:
            return []

        products = self.ledger.find_many(line.product_id for line in cart.lines)
        items = []
        for line in cart.lines:
            product = products.get(line.product_id)
            if product is None:
                # Deleted products drop out of the view; the stored line stays
                continue
            items.append(
                CartItem(
                    product_id=product.id,
                    name=product.name,
                    category=product.category,
                    unit_price=product.price,
                    quantity=line.quantity,
                )
            )
        return items


# ---------------------------------------------------------------------------
# Operations (one transaction each)
# ---------------------------------------------------------------------------
def get(user_id) -> list[CartItem]:
    with session_scope(read_only=True) as session:
        return CartStore(session).items(user_id)


def add_one(user_id, product_id) -> int:
    with session_scope() as session:
        store = CartStore(session)
        cart = store.load(user_id, for_update=True, create=True)
        product = store.ledger.get(product_id)
        quantity = cart.add_one(product)

    logger.info("Added item to cart", user_id=str(user_id), product_id=str(product_id), quantity=quantity)
    return quantity


def set_quantity(user_id, product_id, quantity: int) -> int:
    """Set a line's quantity; zero or less removes the line and returns 0."""
    with session_scope() as session:
        store = CartStore(session)
        cart = store.load(user_id, for_update=True)
        if cart is None or cart.line_for(product_id) is None:
            raise ItemNotInCart(product_id)

        if quantity <= 0:
            cart.remove(product_id)
            quantity = 0
        else:
            product = store.ledger.get(product_id)
            cart.set_quantity(product, quantity)

    logger.info("Updated cart quantity", user_id=str(user_id), product_id=str(product_id), quantity=quantity)
    return quantity


def remove(user_id, product_id) -> None:
    with session_scope() as session:
        cart = CartStore(session).load(user_id, for_update=True)
        removed = cart is not None and cart.remove(product_id)

    if removed:
        logger.info("Removed item from cart", user_id=str(user_id), product_id=str(product_id))


def clear(user_id) -> None:
    with session_scope() as session:
        cart = CartStore(session).load(user_id, for_update=True)
        if cart is not None:
            cart.clear()

    logger.info("Cleared cart", user_id=str(user_id))


def summary(user_id) -> CartSummary:
    """Current cart items with a price preview at today's prices."""
    with session_scope(read_only=True) as session:
        items = CartStore(session).items(user_id)
    return CartSummary(items=items, quote=price((item.unit_price, item.quantity) for item in items))
