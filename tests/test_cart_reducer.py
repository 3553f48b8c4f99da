"""Tests for cart reducer transitions"""

import pytest

from cart_engine.core.errors import (
    CartErrorCode,
    EmptyCart,
    InvalidCouponCode,
    InvalidProduct,
    InvalidQuantity,
)
from cart_engine.models.cart import Cart, LineKey, Variant, variants_equal
from cart_engine.services import cart_reducer
from cart_engine.services.cart_reducer import empty_cart


def cart_with(*items) -> Cart:
    cart = empty_cart()
    for item in items:
        cart = cart_reducer.add_item(cart, item).cart
    return cart


class TestVariantIdentity:
    def test_none_equals_empty_variant(self):
        assert variants_equal(None, Variant())

    def test_different_sizes_differ(self):
        assert not variants_equal(Variant(size="1kg"), Variant(size="2kg"))

    def test_unknown_variant_fields_rejected(self):
        with pytest.raises(ValueError):
            Variant(color="red")

    def test_line_key_matches_product_and_variant(self, make_item):
        item = make_item("P1", size="M")
        assert LineKey(product_id="P1", variant=Variant(size="M")).matches(item)
        assert not LineKey(product_id="P1").matches(item)
        assert not LineKey(product_id="P2", variant=Variant(size="M")).matches(item)


class TestAddItem:
    def test_add_new_line(self, make_item):
        transition = cart_reducer.add_item(empty_cart(), make_item(), 2)
        assert transition.ok
        assert len(transition.cart.items) == 1
        assert transition.cart.items[0].quantity == 2

    def test_defaults_to_item_quantity(self, make_item):
        cart = cart_reducer.add_item(empty_cart(), make_item(quantity=4)).cart
        assert cart.items[0].quantity == 4

    @pytest.mark.parametrize("quantities", [[1], [2, 1], [1, 1, 1, 1], [5, 3, 7]])
    def test_same_identity_merges(self, make_item, quantities):
        cart = empty_cart()
        for quantity in quantities:
            cart = cart_reducer.add_item(cart, make_item(size="M"), quantity).cart
        assert len(cart.items) == 1
        assert cart.items[0].quantity == sum(quantities)

    def test_different_variant_is_new_line(self, make_item):
        cart = cart_with(make_item(size="M"), make_item(size="L"), make_item())
        assert [item.variant.size if item.variant else None for item in cart.items] == ["M", "L", None]

    def test_merge_preserves_order(self, make_item):
        cart = cart_with(make_item("P1"), make_item("P2"), make_item("P1"))
        assert [item.product_id for item in cart.items] == ["P1", "P2"]
        assert cart.items[0].quantity == 2

    @pytest.mark.parametrize("quantity", [0, -1, 1.5, float("nan"), "2", True])
    def test_invalid_quantity_rejected(self, make_item, quantity):
        start = cart_with(make_item())
        transition = cart_reducer.add_item(start, make_item(), quantity)
        assert isinstance(transition.error, InvalidQuantity)
        assert transition.error.code == CartErrorCode.INVALID_QUANTITY
        assert transition.cart is start

    def test_blank_product_id_rejected(self, make_item):
        transition = cart_reducer.add_item(empty_cart(), make_item(product_id="  "))
        assert isinstance(transition.error, InvalidProduct)
        assert transition.cart.is_empty

    def test_does_not_mutate_input(self, make_item):
        start = cart_with(make_item())
        cart_reducer.add_item(start, make_item(), 3)
        assert start.items[0].quantity == 1


class TestRemoveAndUpdate:
    def test_remove_item(self, make_item):
        cart = cart_with(make_item("P1"), make_item("P2"))
        cart = cart_reducer.remove_item(cart, LineKey(product_id="P1")).cart
        assert [item.product_id for item in cart.items] == ["P2"]

    def test_remove_missing_is_noop(self, make_item):
        start = cart_with(make_item("P1"))
        transition = cart_reducer.remove_item(start, LineKey(product_id="NOPE"))
        assert transition.ok
        assert transition.cart == start

    def test_remove_is_idempotent(self, make_item):
        start = cart_with(make_item("P1"), make_item("P2"))
        key = LineKey(product_id="P1")
        once = cart_reducer.remove_item(start, key).cart
        twice = cart_reducer.remove_item(once, key).cart
        assert once == twice

    def test_remove_only_matching_variant(self, make_item):
        cart = cart_with(make_item(size="M"), make_item(size="L"))
        cart = cart_reducer.remove_item(cart, LineKey(product_id="P1", variant=Variant(size="M"))).cart
        assert len(cart.items) == 1
        assert cart.items[0].variant.size == "L"

    def test_update_quantity(self, make_item):
        cart = cart_with(make_item("P1"), make_item("P2"))
        cart = cart_reducer.update_quantity(cart, LineKey(product_id="P2"), 7).cart
        assert cart.items[1].quantity == 7
        assert cart.items[0].quantity == 1

    @pytest.mark.parametrize("quantity", [0, -3])
    def test_update_to_non_positive_equals_remove(self, make_item, quantity):
        start = cart_with(make_item("P1"), make_item("P2"))
        key = LineKey(product_id="P1")
        assert cart_reducer.update_quantity(start, key, quantity).cart == cart_reducer.remove_item(start, key).cart

    def test_update_rejects_non_integer(self, make_item):
        start = cart_with(make_item())
        transition = cart_reducer.update_quantity(start, LineKey(product_id="P1"), 2.5)
        assert isinstance(transition.error, InvalidQuantity)
        assert transition.cart is start

    def test_emptying_cart_clears_coupon(self, make_item):
        cart = cart_with(make_item())
        cart = cart_reducer.apply_coupon(cart, "SAVE10").cart
        cart = cart_reducer.update_quantity(cart, LineKey(product_id="P1"), 0).cart
        assert cart.is_empty
        assert cart.coupon_code is None


class TestCoupons:
    def test_apply_normalises_code(self, make_item):
        cart = cart_reducer.apply_coupon(cart_with(make_item()), "  save10 ").cart
        assert cart.coupon_code == "SAVE10"

    def test_apply_does_not_validate(self, make_item):
        transition = cart_reducer.apply_coupon(cart_with(make_item()), "NOT-A-REAL-CODE")
        assert transition.ok
        assert transition.cart.coupon_code == "NOT-A-REAL-CODE"

    def test_apply_blank_code_rejected(self, make_item):
        transition = cart_reducer.apply_coupon(cart_with(make_item()), "   ")
        assert isinstance(transition.error, InvalidCouponCode)
        assert transition.cart.coupon_code is None

    def test_apply_to_empty_cart_rejected(self):
        transition = cart_reducer.apply_coupon(empty_cart(), "SAVE10")
        assert isinstance(transition.error, EmptyCart)
        assert transition.cart.coupon_code is None

    def test_remove_coupon(self, make_item):
        cart = cart_reducer.apply_coupon(cart_with(make_item()), "SAVE10").cart
        cart = cart_reducer.remove_coupon(cart).cart
        assert cart.coupon_code is None
        assert len(cart.items) == 1


class TestClearAndNormalize:
    def test_clear(self, make_item):
        cart = cart_reducer.apply_coupon(cart_with(make_item("P1"), make_item("P2")), "SAVE10").cart
        cart = cart_reducer.clear(cart).cart
        assert cart.items == []
        assert cart.coupon_code is None

    def test_clear_empty_cart(self):
        assert cart_reducer.clear(empty_cart()).cart == empty_cart()

    def test_normalize_merges_duplicates(self, make_item):
        cart = Cart(items=[make_item(quantity=2), make_item("P2"), make_item(quantity=3)], coupon_code="save10")
        cart = cart_reducer.normalize(cart).cart
        assert [(item.product_id, item.quantity) for item in cart.items] == [("P1", 5), ("P2", 1)]
        assert cart.coupon_code == "SAVE10"

    def test_normalize_drops_coupon_on_empty_cart(self):
        cart = cart_reducer.normalize(Cart(items=[], coupon_code="SAVE10")).cart
        assert cart.coupon_code is None
