# Cart Engine Models

from .coupon import Coupon, CouponKind, CouponError
from .cart import (
    Variant,
    variants_equal,
    LineKey,
    CartItem,
    Cart,
    Totals,
    CartSnapshot,
    AddToCartRequest,
    UpdateCartItemRequest,
    ApplyCouponRequest,
    CartResponse,
)
from .product import Product, ProductCategory, ProductSearchResponse

__all__ = [
    "Coupon",
    "CouponKind",
    "CouponError",
    "Variant",
    "variants_equal",
    "LineKey",
    "CartItem",
    "Cart",
    "Totals",
    "CartSnapshot",
    "AddToCartRequest",
    "UpdateCartItemRequest",
    "ApplyCouponRequest",
    "CartResponse",
    "Product",
    "ProductCategory",
    "ProductSearchResponse",
]
