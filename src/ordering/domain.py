"""Ordering bounded context — Shopping Cart, Checkout and Order history.

Handles the per-user cart kept against live stock levels, the checkout that
converts a cart into an immutable order, and the archive those orders are
read back from.
"""

import structlog

logger = structlog.get_logger(__name__)
