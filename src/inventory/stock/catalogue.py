"""Catalogue lookups and administration of Product records.

Deleting a product only removes the product row. Cart lines and order lines
keep the identifier; readers treat an unresolved identifier as "removed".
"""

from decimal import Decimal

from sqlalchemy import func, select

from inventory.domain import logger
from inventory.stock.ledger import InventoryLedger
from inventory.stock.product import Product
from shared.database import session_scope

SAMPLE_PRODUCTS = [
    {
        "name": "Laptop Pro 14",
        "category": "Electronics",
        "description": "14-inch laptop with 16 GB RAM and 512 GB SSD.",
        "image": "/images/laptop.jpg",
        "price": Decimal("1299.00"),
        "stock": 3,
    },
    {
        "name": "Wireless Headphones",
        "category": "Audio",
        "description": "Over-ear headphones with active noise cancelling.",
        "image": "/images/headphones.jpg",
        "price": Decimal("199.00"),
        "stock": 9,
    },
    {
        "name": "Programming Book: JavaScript Basics",
        "category": "Books",
        "description": "A beginner friendly introduction to JavaScript.",
        "image": "/images/js-book.jpg",
        "price": Decimal("39.00"),
        "stock": 6,
    },
]


def get_product(product_id) -> Product:
    with session_scope(read_only=True) as session:
        return InventoryLedger(session).get(product_id)


def list_products() -> list[Product]:
    with session_scope(read_only=True) as session:
        return list(session.scalars(select(Product).order_by(Product.name, Product.id)))


def add_product(name, price, stock=0, category=None, description=None, image=None) -> Product:
    product = Product.create(
        name=name,
        price=price,
        stock=stock,
        category=category,
        description=description,
        image=image,
    )
    with session_scope() as session:
        session.add(product)

    logger.info("Product added", product_id=product.id, name=product.name, stock=product.stock)
    return product


def delete_product(product_id) -> None:
    with session_scope() as session:
        product = InventoryLedger(session).get(product_id)
        session.delete(product)

    logger.info("Product deleted", product_id=str(product_id))


def seed_products() -> int:
    """Insert the sample catalogue into an empty products table.

    Returns the number of products inserted (0 when products already exist).
    """
    with session_scope() as session:
        if session.scalar(select(func.count()).select_from(Product)):
            logger.debug("Catalogue already populated, skipping seed")
            return 0
        session.add_all(Product.create(**data) for data in SAMPLE_PRODUCTS)

    logger.info("Seeded sample products", count=len(SAMPLE_PRODUCTS))
    return len(SAMPLE_PRODUCTS)
