"""Cart models for the cart engine"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .coupon import CouponError


class Variant(BaseModel):
    """Closed variant record; part of a cart line's identity"""

    model_config = ConfigDict(frozen=True, extra="forbid")

    size: Optional[str] = None
    flavor: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.size is None and self.flavor is None


def variants_equal(a: Optional[Variant], b: Optional[Variant]) -> bool:
    """Value equality over variants; None and an empty variant are the same"""
    a = a or Variant()
    b = b or Variant()
    return a.size == b.size and a.flavor == b.flavor


class LineKey(BaseModel):
    """Identity of a cart line"""

    model_config = ConfigDict(frozen=True)

    product_id: str
    variant: Optional[Variant] = None

    def matches(self, item: "CartItem") -> bool:
        return item.product_id == self.product_id and variants_equal(item.variant, self.variant)


class CartItem(BaseModel):
    """Item in a shopping cart"""

    model_config = ConfigDict(frozen=True)

    product_id: str
    name: str
    image: str = ""
    unit_price: int = Field(ge=0)
    quantity: int = Field(default=1, gt=0)
    variant: Optional[Variant] = None

    @property
    def key(self) -> LineKey:
        return LineKey(product_id=self.product_id, variant=self.variant)

    @property
    def line_total(self) -> int:
        return self.unit_price * self.quantity


class Cart(BaseModel):
    """Shopping cart aggregate; derived totals are never stored here"""

    model_config = ConfigDict(frozen=True)

    items: list[CartItem] = []
    coupon_code: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.items

    def find(self, key: LineKey) -> Optional[CartItem]:
        return next((item for item in self.items if key.matches(item)), None)


class Totals(BaseModel):
    """Monetary figures derived from a cart"""

    subtotal: int = 0
    tax: int = 0
    shipping: int = 0
    discount: int = 0
    total: int = 0
    total_items: int = 0
    currency: str = "INR"
    coupon_code: Optional[str] = None
    coupon_error: Optional[CouponError] = None


class CartSnapshot(BaseModel):
    """Read-only view of the cart handed to the UI and checkout"""

    items: list[CartItem]
    coupon_code: Optional[str] = None
    totals: Totals


class AddToCartRequest(BaseModel):
    """Request to add item to cart"""
    product_id: str
    quantity: int = 1
    variant: Optional[Variant] = None


class UpdateCartItemRequest(BaseModel):
    """Request to update cart item quantity"""
    quantity: int
    variant: Optional[Variant] = None


class ApplyCouponRequest(BaseModel):
    """Request to apply a coupon code"""
    code: str


class CartResponse(BaseModel):
    """Cart API response"""
    session_id: str
    cart: CartSnapshot
    message: Optional[str] = None
