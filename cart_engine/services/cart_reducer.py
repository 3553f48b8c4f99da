"""
Cart Reducer

Pure state transitions over the Cart aggregate. Each operation takes the
current cart and returns a Transition holding the next cart. Invalid input
leaves the cart unchanged and is reported through ``Transition.error``.
"""

import logging
from dataclasses import dataclass
from functools import wraps
from typing import Callable, Optional

from ..core.errors import (
    CartError,
    EmptyCart,
    InvalidCouponCode,
    InvalidProduct,
    InvalidQuantity,
)
from ..models.cart import Cart, CartItem, LineKey

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Transition:
    """Result of a reducer operation"""
    cart: Cart
    error: Optional[CartError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def empty_cart() -> Cart:
    return Cart(items=[], coupon_code=None)


def _transition(operation: Callable[..., Cart]) -> Callable[..., Transition]:
    """Run an operation, turning CartError into an unchanged-state Transition"""

    @wraps(operation)
    def wrapper(cart: Cart, *args, **kwargs) -> Transition:
        try:
            next_cart = operation(cart, *args, **kwargs)
        except CartError as e:
            logger.debug(f"{operation.__name__} rejected: {e.message}")
            return Transition(cart=cart, error=e)
        return Transition(cart=_settle(next_cart))

    return wrapper


def _settle(cart: Cart) -> Cart:
    """An empty cart never carries a coupon"""
    if cart.is_empty and cart.coupon_code is not None:
        return cart.model_copy(update={"coupon_code": None})
    return cart


def _check_quantity(quantity: object) -> int:
    # bool is an int subclass but never a quantity
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidQuantity(quantity)
    return quantity


def _check_product_id(product_id: object) -> str:
    if not isinstance(product_id, str) or not product_id.strip():
        raise InvalidProduct(product_id)
    return product_id


def _without(cart: Cart, key: LineKey) -> Cart:
    items = [item for item in cart.items if not key.matches(item)]
    return cart.model_copy(update={"items": items})


@_transition
def add_item(cart: Cart, item: CartItem, quantity: Optional[int] = None) -> Cart:
    """
    Add a line, or merge into the line with the same product and variant.

    When ``quantity`` is omitted the item's own quantity is added.
    """
    _check_product_id(item.product_id)
    quantity = _check_quantity(item.quantity if quantity is None else quantity)
    if quantity <= 0:
        raise InvalidQuantity(quantity)

    key = item.key
    existing = cart.find(key)
    if existing is None:
        items = [*cart.items, item.model_copy(update={"quantity": quantity})]
    else:
        items = [
            line.model_copy(update={"quantity": line.quantity + quantity})
            if key.matches(line) else line
            for line in cart.items
        ]
    return cart.model_copy(update={"items": items})


@_transition
def remove_item(cart: Cart, key: LineKey) -> Cart:
    """Delete the matching line; a missing line is not an error"""
    _check_product_id(key.product_id)
    return _without(cart, key)


@_transition
def update_quantity(cart: Cart, key: LineKey, quantity: int) -> Cart:
    """Set a line's quantity; zero or below removes the line"""
    _check_product_id(key.product_id)
    quantity = _check_quantity(quantity)
    if quantity <= 0:
        return _without(cart, key)

    items = [
        line.model_copy(update={"quantity": quantity}) if key.matches(line) else line
        for line in cart.items
    ]
    return cart.model_copy(update={"items": items})


@_transition
def apply_coupon(cart: Cart, code: str) -> Cart:
    """Store a coupon code; whether it is usable is decided at pricing time"""
    if not isinstance(code, str) or not code.strip():
        raise InvalidCouponCode(code)
    if cart.is_empty:
        raise EmptyCart()
    return cart.model_copy(update={"coupon_code": code.strip().upper()})


@_transition
def remove_coupon(cart: Cart) -> Cart:
    return cart.model_copy(update={"coupon_code": None})


@_transition
def clear(cart: Cart) -> Cart:
    return empty_cart()


@_transition
def normalize(cart: Cart) -> Cart:
    """Merge duplicate lines, e.g. in a cart read back from storage"""
    merged = empty_cart()
    for item in cart.items:
        merged = add_item(merged, item).cart
    coupon_code = cart.coupon_code.strip().upper() if cart.coupon_code else None
    return merged.model_copy(update={"coupon_code": coupon_code or None})
