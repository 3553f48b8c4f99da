# Database modules

from .products import product_db, ProductDatabase, create_cart_item_from_product
from .coupons import coupon_db, CouponDatabase
from .local_store import LocalStore
from .carts import CartStore

__all__ = [
    "product_db",
    "ProductDatabase",
    "create_cart_item_from_product",
    "coupon_db",
    "CouponDatabase",
    "LocalStore",
    "CartStore",
]
