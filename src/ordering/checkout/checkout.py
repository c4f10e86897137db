"""Checkout — converts a user's cart into an order while withdrawing stock.

Flow (one database transaction):
    1. Lock the user's cart row and read every referenced product fresh,
       under row locks taken in product identifier order.
    2. An empty cart fails with EmptyCart.
    3. Every line must fit the stock just read, else InsufficientStock
       naming the first product that falls short.
    4. Price the lines, snapshotting each unit price.
    5. Withdraw stock line by line (compare-and-decrement).
    6. Record the order.
    7. Clear the cart.

Any exception rolls the whole transaction back: stock, cart and archive are
left exactly as they were. A failed checkout can simply be retried, since
every attempt validates from scratch.
"""

from inventory.stock.ledger import InventoryLedger
from ordering.cart.store import CartStore
from ordering.domain import logger
from ordering.order.archive import OrderArchive
from ordering.order.order import Order
from ordering.pricing import price
from shared.database import session_scope
from shared.exceptions import EmptyCart, ProductNotFound, StorefrontError


def checkout(user_id) -> Order:
    user_id = str(user_id)
    try:
        with session_scope() as session:
            ledger = InventoryLedger(session)
            cart = CartStore(session).load(user_id, for_update=True)
            lines = list(cart.lines) if cart is not None else []

            products = ledger.lock(line.product_id for line in lines)
            for line in lines:
                if line.product_id not in products:
                    raise ProductNotFound(line.product_id)

            if not lines:
                raise EmptyCart(user_id)

            for line in lines:
                products[line.product_id].ensure_available(line.quantity)

            purchase = [(line.product_id, line.quantity, products[line.product_id].price) for line in lines]
            quote = price((unit_price, quantity) for _, quantity, unit_price in purchase)

            for product_id, quantity, _ in purchase:
                ledger.withdraw(product_id, quantity)

            order = OrderArchive(session).record(Order.create(user_id, purchase, quote))
            cart.clear()
    except StorefrontError as exc:
        logger.info("Checkout rejected", user_id=user_id, code=exc.code, reason=exc.message)
        raise

    logger.info(
        "Order placed",
        order_id=order.id,
        user_id=user_id,
        line_count=len(order.lines),
        total=str(order.total),
    )
    return order
