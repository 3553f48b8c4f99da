"""
Cart error taxonomy.

Errors are raised inside the reducer and persistence adapter and caught at
the boundary of the operation that produced them; callers receive them as
values, never as propagating exceptions.
"""

from enum import Enum
from typing import Optional


class CartErrorCode(str, Enum):
    INVALID_QUANTITY = "invalid-quantity"
    INVALID_PRODUCT = "invalid-product"
    INVALID_COUPON_CODE = "invalid-coupon-code"
    EMPTY_CART = "empty-cart"
    PERSISTENCE_FAILURE = "persistence-failure"


class CartError(Exception):
    """Base class for recoverable cart errors"""

    code: CartErrorCode

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        return {"code": self.code.value, "message": self.message}


class InvalidQuantity(CartError):
    """Quantity is non-positive or not an integer"""

    code = CartErrorCode.INVALID_QUANTITY

    def __init__(self, quantity: object):
        super().__init__(f"Quantity must be a positive integer, got {quantity!r}")
        self.quantity = quantity


class InvalidProduct(CartError):
    code = CartErrorCode.INVALID_PRODUCT

    def __init__(self, product_id: object):
        super().__init__(f"Invalid product id: {product_id!r}")
        self.product_id = product_id


class InvalidCouponCode(CartError):
    code = CartErrorCode.INVALID_COUPON_CODE

    def __init__(self, code: object):
        super().__init__(f"Invalid coupon code: {code!r}")
        self.coupon_code = code


class EmptyCart(CartError):
    code = CartErrorCode.EMPTY_CART

    def __init__(self):
        super().__init__("Cannot apply a coupon to an empty cart")


class PersistenceFailure(CartError):
    """Reading or writing the local store failed"""

    code = CartErrorCode.PERSISTENCE_FAILURE

    def __init__(self, operation: str, reason: Optional[str] = None):
        message = f"Cart {operation} failed"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.operation = operation
        self.reason = reason
