"""Shared fixtures for the cart engine tests"""

from datetime import datetime, timedelta, timezone

import pytest

from cart_engine.database.carts import CartStore
from cart_engine.database.coupons import CouponDatabase
from cart_engine.database.local_store import LocalStore
from cart_engine.models.cart import CartItem, Variant
from cart_engine.services.analytics import AnalyticsNotifier
from cart_engine.services.cart_facade import CartFacade
from cart_engine.services.pricing import PricingPolicy


class FakeClock:
    """Settable clock for coupon expiry"""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def policy():
    return PricingPolicy(tax_rate=0.05, free_shipping_threshold=50000, shipping_fee=5000)


@pytest.fixture
def coupons():
    return CouponDatabase()


@pytest.fixture
def local_store(tmp_path):
    return LocalStore(str(tmp_path / "storage"))


@pytest.fixture
def cart_store(local_store):
    return CartStore(local_store, "cart")


@pytest.fixture
def events():
    return []


@pytest.fixture
def facade(cart_store, coupons, policy, clock, events):
    return CartFacade(
        cart_store,
        coupons,
        policy=policy,
        notifier=AnalyticsNotifier([events.append]),
        clock=clock,
    )


@pytest.fixture
def make_item():
    def _make_item(product_id="P1", unit_price=500, quantity=1, size=None, flavor=None):
        variant = Variant(size=size, flavor=flavor) if size or flavor else None
        return CartItem(
            product_id=product_id,
            name=f"Product {product_id}",
            image=f"/images/{product_id}.jpg",
            unit_price=unit_price,
            quantity=quantity,
            variant=variant,
        )

    return _make_item
