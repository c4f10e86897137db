"""Pydantic request/response schemas for the Ordering API.

These are external contracts, separate from the SQLAlchemy cart and order
models.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from inventory.stock.product import MAX_STOCK


# ---------------------------------------------------------------------------
# Cart Request Schemas
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    product_id: str

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"product_id": "3f8e2a5c-1b7d-4c8e-9a6f-2d4b8c1e7f90"},
            ]
        }
    }


class UpdateCartQuantityRequest(BaseModel):
    """Zero or a negative quantity removes the line."""

    quantity: int = Field(le=MAX_STOCK)


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class CartItemResponse(BaseModel):
    model_config = {"from_attributes": True}

    product_id: str
    name: str
    category: str | None = None
    unit_price: Decimal
    quantity: int
    line_total: Decimal


class CartResponse(BaseModel):
    items: list[CartItemResponse] = Field(default_factory=list)
    item_count: int = 0
    subtotal: Decimal
    tax: Decimal
    total: Decimal


class QuantityResponse(BaseModel):
    product_id: str
    quantity: int


class OrderLineResponse(BaseModel):
    model_config = {"from_attributes": True}

    product_id: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal


class OrderResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    user_id: str
    created_at: datetime
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    lines: list[OrderLineResponse]


class OrderHistoryLineResponse(BaseModel):
    model_config = {"from_attributes": True}

    product_id: str
    name: str
    category: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal


class OrderHistoryResponse(BaseModel):
    model_config = {"from_attributes": True}

    order_id: int
    created_at: datetime
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    lines: list[OrderHistoryLineResponse]


class StatusResponse(BaseModel):
    status: str = "ok"
