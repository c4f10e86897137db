"""FastAPI routes for the Inventory domain — catalogue and stock levels."""

from fastapi import APIRouter

from inventory.api.schemas import (
    AddProductRequest,
    ProductResponse,
    RestockRequest,
    StatusResponse,
    StockResponse,
)
from inventory.stock import catalogue, ledger

# ---------------------------------------------------------------------------
# Product Router
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.get("", response_model=list[ProductResponse])
def list_products() -> list[ProductResponse]:
    return [ProductResponse.model_validate(product) for product in catalogue.list_products()]


@product_router.post("", status_code=201, response_model=ProductResponse)
def add_product(body: AddProductRequest) -> ProductResponse:
    product = catalogue.add_product(
        name=body.name,
        price=body.price,
        stock=body.stock,
        category=body.category,
        description=body.description,
        image=body.image,
    )
    return ProductResponse.model_validate(product)


@product_router.get("/{product_id}", response_model=ProductResponse)
def get_product(product_id: str) -> ProductResponse:
    return ProductResponse.model_validate(catalogue.get_product(product_id))


@product_router.delete("/{product_id}", response_model=StatusResponse)
def delete_product(product_id: str) -> StatusResponse:
    catalogue.delete_product(product_id)
    return StatusResponse()


@product_router.post("/{product_id}/restock", response_model=StockResponse)
def restock(product_id: str, body: RestockRequest) -> StockResponse:
    stock = ledger.restock(product_id, body.quantity)
    return StockResponse(product_id=product_id, stock=stock)
