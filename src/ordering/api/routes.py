"""FastAPI routes for the Ordering domain — cart, checkout and order history."""

from fastapi import APIRouter

from ordering.api.schemas import (
    AddToCartRequest,
    CartItemResponse,
    CartResponse,
    OrderHistoryResponse,
    OrderResponse,
    QuantityResponse,
    StatusResponse,
    UpdateCartQuantityRequest,
)
from ordering.cart import store
from ordering.checkout.checkout import checkout
from ordering.order.archive import order_history
from shared.api import UserId


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
def get_cart(user_id: UserId) -> CartResponse:
    summary = store.summary(user_id)
    return CartResponse(
        items=[CartItemResponse.model_validate(item) for item in summary.items],
        item_count=summary.item_count,
        subtotal=summary.quote.subtotal,
        tax=summary.quote.tax,
        total=summary.quote.total,
    )


@cart_router.post("/items", response_model=QuantityResponse)
def add_cart_item(user_id: UserId, body: AddToCartRequest) -> QuantityResponse:
    quantity = store.add_one(user_id, body.product_id)
    return QuantityResponse(product_id=body.product_id, quantity=quantity)


@cart_router.put("/items/{product_id}", response_model=QuantityResponse)
def update_cart_item_quantity(user_id: UserId, product_id: str, body: UpdateCartQuantityRequest) -> QuantityResponse:
    quantity = store.set_quantity(user_id, product_id, body.quantity)
    return QuantityResponse(product_id=product_id, quantity=quantity)


@cart_router.delete("/items/{product_id}", response_model=StatusResponse)
def remove_cart_item(user_id: UserId, product_id: str) -> StatusResponse:
    store.remove(user_id, product_id)
    return StatusResponse()


@cart_router.delete("", response_model=StatusResponse)
def clear_cart(user_id: UserId) -> StatusResponse:
    store.clear(user_id)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Checkout Router
# ---------------------------------------------------------------------------
checkout_router = APIRouter(prefix="/checkout", tags=["checkout"])


@checkout_router.post("", status_code=201, response_model=OrderResponse)
def place_order(user_id: UserId) -> OrderResponse:
    """Convert the caller's cart into an order.

    1. Validate every line against fresh stock
    2. Withdraw stock and record the order
    3. Clear the cart
    """
    return OrderResponse.model_validate(checkout(user_id))


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.get("/my", response_model=list[OrderHistoryResponse])
def my_orders(user_id: UserId) -> list[OrderHistoryResponse]:
    return [OrderHistoryResponse.model_validate(entry) for entry in order_history(user_id)]
