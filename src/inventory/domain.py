"""Inventory bounded context — Products and authoritative stock levels.

Owns the product records that the catalogue reads and the stock counts that
checkout decrements. Carts and orders refer to products by identifier only,
so a product can be deleted without touching either.
"""

import structlog

logger = structlog.get_logger(__name__)
