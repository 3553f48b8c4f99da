"""
Pricing Calculator

Derives subtotal, tax, shipping, discount and grand total from a list of
cart items and an optional coupon code. Pure: the coupon lookup, pricing
policy and current time are all passed in.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Protocol

from ..models.cart import CartItem, Totals
from ..models.coupon import Coupon, CouponError, CouponKind


class CouponLookup(Protocol):
    """Anything that resolves a coupon code to a Coupon"""

    def get_coupon(self, code: str) -> Optional[Coupon]:
        ...


@dataclass(frozen=True)
class PricingPolicy:
    """Tax and shipping rules, amounts in the smallest currency unit"""
    tax_rate: float = 0.05
    free_shipping_threshold: int = 50000
    shipping_fee: int = 5000
    currency: str = "INR"


def round_half_up(amount: Decimal) -> int:
    return int(amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def calculate_subtotal(items: Iterable[CartItem]) -> int:
    return sum(item.unit_price * item.quantity for item in items)


def calculate_tax(subtotal: int, policy: PricingPolicy) -> int:
    return round_half_up(Decimal(subtotal) * Decimal(str(policy.tax_rate)))


def calculate_shipping(subtotal: int, policy: PricingPolicy) -> int:
    """Flat fee below the free-shipping threshold; nothing ships for an empty cart"""
    if subtotal <= 0 or subtotal >= policy.free_shipping_threshold:
        return 0
    return policy.shipping_fee


def calculate_discount(coupon: Coupon, subtotal: int) -> int:
    """Discount for a coupon already known to be valid, never above subtotal"""
    if coupon.kind == CouponKind.PERCENTAGE:
        discount = round_half_up(Decimal(subtotal) * Decimal(str(coupon.value)) / 100)
        if coupon.max_discount is not None:
            discount = min(discount, coupon.max_discount)
    else:
        discount = round_half_up(Decimal(str(coupon.value)))
    return max(0, min(discount, subtotal))


def validate_coupon(
    coupon: Optional[Coupon],
    subtotal: int,
    now: datetime,
) -> Optional[CouponError]:
    """Return the reason a coupon cannot be used, or None if it can"""
    if coupon is None:
        return CouponError.NOT_FOUND
    if coupon.is_expired(now):
        return CouponError.EXPIRED
    if subtotal < coupon.min_subtotal:
        return CouponError.MINIMUM_NOT_MET
    return None


def compute_totals(
    items: Iterable[CartItem],
    coupon_code: Optional[str],
    coupons: CouponLookup,
    policy: PricingPolicy = PricingPolicy(),
    now: Optional[datetime] = None,
) -> Totals:
    """
    Compute cart totals.

    An unusable coupon does not fail the computation: totals are returned as
    if no coupon were applied and ``coupon_error`` says why.

    Args:
        items: Current cart lines
        coupon_code: Applied coupon code, if any
        coupons: Coupon collaborator used to resolve the code
        policy: Tax and shipping rules
        now: Time used for expiry checks (defaults to current UTC time)
    """
    items = list(items)
    now = now or datetime.now(timezone.utc)

    subtotal = calculate_subtotal(items)
    tax = calculate_tax(subtotal, policy)
    shipping = calculate_shipping(subtotal, policy)

    discount = 0
    coupon_error = None
    if coupon_code:
        coupon = coupons.get_coupon(coupon_code)
        coupon_error = validate_coupon(coupon, subtotal, now)
        if coupon_error is None:
            discount = calculate_discount(coupon, subtotal)

    return Totals(
        subtotal=subtotal,
        tax=tax,
        shipping=shipping,
        discount=discount,
        total=max(0, subtotal + tax + shipping - discount),
        total_items=sum(item.quantity for item in items),
        currency=policy.currency,
        coupon_code=coupon_code,
        coupon_error=coupon_error,
    )
