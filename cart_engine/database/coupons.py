"""Coupon storage for the cart engine"""

from typing import Optional

from ..models.coupon import Coupon, CouponKind

# Seed promotions, amounts in paise
COUPONS: list[Coupon] = [
    Coupon(code="WELCOME10", kind=CouponKind.PERCENTAGE, value=10, max_discount=10000),
    Coupon(code="HEALTH20", kind=CouponKind.PERCENTAGE, value=20, min_subtotal=100000),
    Coupon(code="FIRST15", kind=CouponKind.PERCENTAGE, value=15),
    Coupon(code="SAVE10", kind=CouponKind.PERCENTAGE, value=10, min_subtotal=1000),
    Coupon(code="FLAT100", kind=CouponKind.FIXED_AMOUNT, value=10000, min_subtotal=50000),
]


class CouponDatabase:
    """In-memory coupon lookup, case-insensitive on code"""

    def __init__(self, coupons: Optional[list[Coupon]] = None):
        self.coupons: dict[str, Coupon] = {}
        for coupon in COUPONS if coupons is None else coupons:
            self.add_coupon(coupon)

    def get_coupon(self, code: str) -> Optional[Coupon]:
        """Get a coupon by code, None when unknown"""
        if not code:
            return None
        return self.coupons.get(code.strip().upper())

    def add_coupon(self, coupon: Coupon) -> Coupon:
        """Register or replace a coupon"""
        self.coupons[coupon.code] = coupon
        return coupon

    def list_coupons(self) -> list[Coupon]:
        return list(self.coupons.values())


# Singleton instance
coupon_db = CouponDatabase()
