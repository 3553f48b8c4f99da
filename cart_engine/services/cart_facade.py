"""
Cart Facade

The one object consumers talk to: it holds the current cart, routes every
change through the reducer, persists the result, computes live totals and
emits analytics events.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from ..core.errors import CartError
from ..database.carts import CartStore
from ..database.products import create_cart_item_from_product
from ..models.cart import Cart, CartItem, CartSnapshot, LineKey, Totals, Variant
from ..models.product import Product
from . import cart_reducer
from .analytics import AnalyticsNotifier, CartEvent, CartEventType
from .cart_reducer import Transition
from .pricing import CouponLookup, PricingPolicy, compute_totals

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CartResult:
    """Snapshot after an operation, plus the error if it was rejected"""
    snapshot: CartSnapshot
    error: Optional[CartError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class CartFacade:
    """Cart operations and derived totals for a single cart"""

    def __init__(
        self,
        store: CartStore,
        coupons: CouponLookup,
        policy: Optional[PricingPolicy] = None,
        notifier: Optional[AnalyticsNotifier] = None,
        clock: Optional[Clock] = None,
    ):
        self.store = store
        self.coupons = coupons
        self.policy = policy or PricingPolicy()
        self.notifier = notifier or AnalyticsNotifier()
        self.clock = clock or utc_now
        self._cart = store.load()

    @property
    def cart(self) -> Cart:
        return self._cart

    @property
    def totals(self) -> Totals:
        """Totals recomputed from the current cart and clock"""
        return compute_totals(
            self._cart.items,
            self._cart.coupon_code,
            self.coupons,
            self.policy,
            now=self.clock(),
        )

    def snapshot(self) -> CartSnapshot:
        return CartSnapshot(
            items=list(self._cart.items),
            coupon_code=self._cart.coupon_code,
            totals=self.totals,
        )

    def _commit(self, transition: Transition) -> CartResult:
        if transition.ok and transition.cart != self._cart:
            self._cart = transition.cart
            self.store.save(self._cart)
        return CartResult(snapshot=self.snapshot(), error=transition.error)

    def _emit(self, event: CartEventType, item: CartItem, quantity: int) -> None:
        self.notifier.notify(
            CartEvent(
                event=event,
                product_id=item.product_id,
                quantity=quantity,
                price=item.unit_price,
                variant=item.variant,
            )
        )

    def add_item(self, item: CartItem, quantity: Optional[int] = None) -> CartResult:
        """Add an item, merging with an existing line of the same product and variant"""
        result = self._commit(cart_reducer.add_item(self._cart, item, quantity))
        if result.ok:
            self._emit(
                CartEventType.ADD_TO_CART,
                item,
                item.quantity if quantity is None else quantity,
            )
        return result

    def add_product(
        self,
        product: Product,
        quantity: int = 1,
        variant: Optional[Variant] = None,
    ) -> CartResult:
        """Add a catalog product"""
        item = create_cart_item_from_product(product, variant=variant)
        return self.add_item(item, quantity)

    def remove_item(self, key: LineKey) -> CartResult:
        removed = self._cart.find(key)
        result = self._commit(cart_reducer.remove_item(self._cart, key))
        if result.ok and removed is not None:
            self._emit(CartEventType.REMOVE_FROM_CART, removed, removed.quantity)
        return result

    def update_quantity(self, key: LineKey, quantity: int) -> CartResult:
        existing = self._cart.find(key)
        result = self._commit(cart_reducer.update_quantity(self._cart, key, quantity))
        if result.ok and existing is not None and self._cart.find(key) is None:
            self._emit(CartEventType.REMOVE_FROM_CART, existing, existing.quantity)
        return result

    def apply_coupon(self, code: str) -> CartResult:
        """Store a coupon code; the event says whether it currently discounts"""
        result = self._commit(cart_reducer.apply_coupon(self._cart, code))
        if result.ok:
            coupon_error = result.snapshot.totals.coupon_error
            self.notifier.notify(
                CartEvent(
                    event=CartEventType.COUPON_REJECTED if coupon_error else CartEventType.COUPON_APPLIED,
                    coupon_code=result.snapshot.coupon_code,
                    price=result.snapshot.totals.discount,
                    reason=coupon_error.value if coupon_error else None,
                )
            )
        return result

    def remove_coupon(self) -> CartResult:
        return self._commit(cart_reducer.remove_coupon(self._cart))

    def clear(self) -> CartResult:
        """Empty the cart and drop its coupon, e.g. after an order is placed"""
        cleared = self.totals
        result = self._commit(cart_reducer.clear(self._cart))
        if result.ok and cleared.total_items:
            self.notifier.notify(
                CartEvent(
                    event=CartEventType.CART_CLEARED,
                    quantity=cleared.total_items,
                    price=cleared.subtotal,
                )
            )
        return result

    def is_in_cart(self, product_id: str) -> bool:
        return any(item.product_id == product_id for item in self._cart.items)

    def get_item_quantity(self, product_id: str) -> int:
        """Quantity of a product summed over all its variants"""
        return sum(item.quantity for item in self._cart.items if item.product_id == product_id)

    def find_line(self, product_id: str, variant: Optional[Variant] = None) -> Optional[CartItem]:
        """Exact line for a variant, or the first line of the product when no variant is given"""
        if variant is not None:
            return self._cart.find(LineKey(product_id=product_id, variant=variant))
        return next((item for item in self._cart.items if item.product_id == product_id), None)
