"""Expected, caller-recoverable failures of storefront operations.

Each kind carries a stable ``code`` and message so callers (and the HTTP
layer) can tell "out of stock" apart from "cart empty" without parsing text.
Storage failures are not wrapped: SQLAlchemy errors propagate as they are.
"""


class StorefrontError(Exception):
    code = "storefront_error"
    status_code = 400
    default_message = "Request could not be completed"

    def __init__(self, message=None, **context):
        self.message = message or self.default_message
        self.context = context
        super().__init__(self.message)

    def to_dict(self):
        return {"code": self.code, "message": self.message, **self.context}


class NotFound(StorefrontError):
    code = "not_found"
    status_code = 404
    default_message = "Not found"


class ProductNotFound(NotFound):
    code = "product_not_found"
    default_message = "Product not found"

    def __init__(self, product_id, message=None):
        self.product_id = str(product_id)
        super().__init__(message, product_id=self.product_id)


class ItemNotInCart(NotFound):
    code = "item_not_in_cart"
    default_message = "Item not found in cart"

    def __init__(self, product_id):
        self.product_id = str(product_id)
        super().__init__(product_id=self.product_id)


class InsufficientStock(StorefrontError):
    code = "insufficient_stock"
    status_code = 409
    default_message = "Not enough stock for this product."

    def __init__(self, product_id, requested, available, product_name=None):
        self.product_id = str(product_id)
        self.requested = requested
        self.available = available
        message = f'Not enough stock for "{product_name}".' if product_name else None
        super().__init__(
            message,
            product_id=self.product_id,
            requested=requested,
            available=available,
        )


class EmptyCart(StorefrontError):
    code = "empty_cart"
    default_message = "Cart is empty"

    def __init__(self, user_id):
        self.user_id = str(user_id)
        super().__init__()


class OrderImmutable(StorefrontError):
    code = "order_immutable"
    status_code = 409
    default_message = "Orders cannot be changed once placed"

    def __init__(self, order_id):
        self.order_id = order_id
        super().__init__(order_id=order_id)


class StockLimitExceeded(StorefrontError):
    code = "stock_limit_exceeded"
    status_code = 422
    default_message = "Stock level would exceed the largest storable quantity"

    def __init__(self, product_id, requested, available, limit):
        self.product_id = str(product_id)
        super().__init__(product_id=self.product_id, requested=requested, available=available, limit=limit)
