"""Cart API routes for the cart engine"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Depends, Query, Request

from ..models.cart import (
    AddToCartRequest,
    ApplyCouponRequest,
    CartResponse,
    LineKey,
    UpdateCartItemRequest,
    Variant,
)
from ..database.products import product_db
from ..services.cart_facade import CartFacade, CartResult
from ..services.sessions import CartSessionManager

router = APIRouter(prefix="/api/cart", tags=["Cart"])


def get_session_manager(request: Request) -> CartSessionManager:
    """Session registry attached to the application"""
    return request.app.state.sessions


def get_cart(
    session_id: str,
    sessions: CartSessionManager = Depends(get_session_manager),
) -> CartFacade:
    """Resolve the cart for a session or 404"""
    facade = sessions.get_session(session_id)
    if facade is None:
        raise HTTPException(status_code=404, detail="Cart not found")
    return facade


def variant_from_query(
    size: Optional[str] = Query(None, description="Variant size"),
    flavor: Optional[str] = Query(None, description="Variant flavor"),
) -> Optional[Variant]:
    if size is None and flavor is None:
        return None
    return Variant(size=size, flavor=flavor)


def _respond(session_id: str, result: CartResult, message: str) -> CartResponse:
    if result.error is not None:
        raise HTTPException(status_code=400, detail=result.error.to_dict())
    return CartResponse(session_id=session_id, cart=result.snapshot, message=message)


@router.post("", response_model=CartResponse)
async def create_cart(sessions: CartSessionManager = Depends(get_session_manager)):
    """Create a new shopping cart session"""
    session_id, facade = sessions.create_session()
    return CartResponse(session_id=session_id, cart=facade.snapshot(), message="Cart created")


@router.get("/{session_id}", response_model=CartResponse)
async def read_cart(session_id: str, facade: CartFacade = Depends(get_cart)):
    """Get cart with live totals"""
    return CartResponse(session_id=session_id, cart=facade.snapshot())


@router.post("/{session_id}/items", response_model=CartResponse)
async def add_to_cart(
    session_id: str,
    request: AddToCartRequest,
    facade: CartFacade = Depends(get_cart),
):
    """Add an item to the cart"""
    product = product_db.get_product(request.product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    # Stock covers every variant of the product already in the cart
    in_cart = facade.get_item_quantity(product.id)
    if not product.in_stock or product.stock_quantity < in_cart + request.quantity:
        raise HTTPException(
            status_code=400,
            detail=f"Insufficient stock. Available: {product.stock_quantity}",
        )

    result = facade.add_product(product, request.quantity, request.variant)
    return _respond(session_id, result, f"Added {request.quantity}x {product.name} to cart")


@router.put("/{session_id}/items/{product_id}", response_model=CartResponse)
async def update_cart_item(
    session_id: str,
    product_id: str,
    request: UpdateCartItemRequest,
    facade: CartFacade = Depends(get_cart),
):
    """Update item quantity in cart; zero or less removes the line"""
    line = facade.find_line(product_id, request.variant)
    if line is None:
        raise HTTPException(status_code=404, detail="Item not in cart")

    product = product_db.get_product(product_id)
    other_lines = facade.get_item_quantity(product_id) - line.quantity
    if product and other_lines + request.quantity > product.stock_quantity:
        raise HTTPException(
            status_code=400,
            detail=f"Insufficient stock. Available: {product.stock_quantity}",
        )

    result = facade.update_quantity(line.key, request.quantity)
    return _respond(session_id, result, "Cart updated")


@router.delete("/{session_id}/items/{product_id}", response_model=CartResponse)
async def remove_from_cart(
    session_id: str,
    product_id: str,
    variant: Optional[Variant] = Depends(variant_from_query),
    facade: CartFacade = Depends(get_cart),
):
    """Remove an item from the cart; removing a missing item is not an error"""
    line = facade.find_line(product_id, variant)
    key = line.key if line else LineKey(product_id=product_id, variant=variant)
    result = facade.remove_item(key)
    return _respond(session_id, result, "Item removed")


@router.post("/{session_id}/coupon", response_model=CartResponse)
async def apply_coupon(
    session_id: str,
    request: ApplyCouponRequest,
    facade: CartFacade = Depends(get_cart),
):
    """Apply a coupon code; validity is reported in the totals"""
    result = facade.apply_coupon(request.code)
    if result.error is None and result.snapshot.totals.coupon_error is not None:
        message = f"Coupon {result.snapshot.coupon_code} is not valid: {result.snapshot.totals.coupon_error.value}"
    else:
        message = f"Coupon {result.snapshot.coupon_code} applied"
    return _respond(session_id, result, message)


@router.delete("/{session_id}/coupon", response_model=CartResponse)
async def remove_coupon(session_id: str, facade: CartFacade = Depends(get_cart)):
    """Remove the applied coupon"""
    return _respond(session_id, facade.remove_coupon(), "Coupon removed")


@router.delete("/{session_id}", response_model=CartResponse)
async def clear_cart(session_id: str, facade: CartFacade = Depends(get_cart)):
    """Clear all items and the coupon from the cart"""
    return _respond(session_id, facade.clear(), "Cart cleared")
