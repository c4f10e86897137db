"""Pydantic request/response schemas for the Inventory API.

These are external contracts, separate from the SQLAlchemy Product model.
"""

from decimal import Decimal

from pydantic import BaseModel, Field

from inventory.stock.product import MAX_STOCK
from shared.money import MAX_AMOUNT


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class AddProductRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    price: Decimal = Field(ge=0, le=MAX_AMOUNT, decimal_places=2)
    stock: int = Field(ge=0, le=MAX_STOCK, default=0)
    category: str | None = None
    description: str | None = None
    image: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Wireless Headphones",
                    "price": "199.00",
                    "stock": 9,
                    "category": "Audio",
                }
            ]
        }
    }


class RestockRequest(BaseModel):
    quantity: int = Field(ge=1, le=MAX_STOCK)


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class ProductResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    name: str
    category: str | None = None
    description: str | None = None
    image: str | None = None
    price: Decimal
    stock: int


class StockResponse(BaseModel):
    product_id: str
    stock: int


class StatusResponse(BaseModel):
    status: str = "ok"
