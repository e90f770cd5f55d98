"""Cart API routes"""

import logging
from fastapi import APIRouter, HTTPException, Depends

from ..core.context import AppContext, get_context
from ..core.policy import max_quantity_for
from ..core.store import CartStore
from ..models.cart import (
    AddToCartRequest,
    CartAnalytics,
    CartResponse,
    CartSnapshot,
    CartStats,
    CartValidation,
    Discount,
    LineItem,
    LineItemVariant,
    ShippingSelection,
    UpdateCartItemRequest,
)
from ..services.sync import SYNC_ERROR

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cart", tags=["Cart"])


def get_store(cart_id: str, context: AppContext = Depends(get_context)) -> CartStore:
    """Resolve the cart from the path, or 404"""
    store = context.carts.get_cart(cart_id)
    if not store:
        raise HTTPException(status_code=404, detail="Cart not found")
    return store


@router.post("", response_model=CartResponse)
async def create_cart(context: AppContext = Depends(get_context)):
    """Create a new shopping cart"""
    cart_id, store = context.carts.create_cart()
    return CartResponse(cart_id=cart_id, cart=store.state, message="Cart created")


@router.get("/{cart_id}", response_model=CartResponse)
async def get_cart(cart_id: str, store: CartStore = Depends(get_store)):
    """Get cart by ID"""
    return CartResponse(cart_id=cart_id, cart=store.state)


@router.delete("/{cart_id}", response_model=CartResponse)
async def clear_cart(cart_id: str, store: CartStore = Depends(get_store)):
    """Remove all items, discounts and shipping from the cart"""
    store.clear_cart()
    return CartResponse(cart_id=cart_id, cart=store.state, message="Cart cleared")


@router.post("/{cart_id}/items", response_model=CartResponse)
async def add_to_cart(
    cart_id: str,
    request: AddToCartRequest,
    store: CartStore = Depends(get_store),
    context: AppContext = Depends(get_context),
):
    """Add a product (optionally a specific variant) to the cart"""
    product = context.catalog.get_product(request.product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    variant = None
    if request.variant_id:
        product_variant = product.get_variant(request.variant_id)
        if not product_variant:
            raise HTTPException(status_code=404, detail="Variant not found")
        variant = LineItemVariant.from_variant(product_variant)

    item = LineItem.create(product.model_copy(deep=True), request.quantity, variant)

    existing = store.get_cart_item(item.product_id, item.variant_id)
    requested = request.quantity + (existing.quantity if existing else 0)
    available = max_quantity_for(item, context.settings.max_item_quantity)
    if requested > available:
        raise HTTPException(
            status_code=400,
            detail=f"Insufficient stock. Available: {available}",
        )

    service = context.cart_service(store)
    if not service.add_item_safely(item):
        raise HTTPException(status_code=400, detail=store.state.error)

    return CartResponse(
        cart_id=cart_id,
        cart=store.state,
        message=f"Added {request.quantity}x {product.name} to cart",
    )


@router.put("/{cart_id}/items/{item_id}", response_model=CartResponse)
async def update_cart_item(
    cart_id: str,
    item_id: str,
    request: UpdateCartItemRequest,
    store: CartStore = Depends(get_store),
    context: AppContext = Depends(get_context),
):
    """Update item quantity in cart"""
    if not store.get_item(item_id):
        raise HTTPException(status_code=404, detail="Item not in cart")

    service = context.cart_service(store)
    if not service.update_quantity_safely(item_id, request.quantity):
        raise HTTPException(status_code=400, detail=store.state.error)

    return CartResponse(cart_id=cart_id, cart=store.state, message="Cart updated")


@router.delete("/{cart_id}/items/{item_id}", response_model=CartResponse)
async def remove_from_cart(
    cart_id: str,
    item_id: str,
    store: CartStore = Depends(get_store),
    context: AppContext = Depends(get_context),
):
    """Remove an item from the cart"""
    service = context.cart_service(store)
    if not service.remove_item_safely(item_id):
        raise HTTPException(status_code=404, detail=store.state.error)

    return CartResponse(cart_id=cart_id, cart=store.state, message="Item removed")


@router.post("/{cart_id}/discounts", response_model=CartResponse)
async def apply_discount(
    cart_id: str,
    discount: Discount,
    store: CartStore = Depends(get_store),
    context: AppContext = Depends(get_context),
):
    """Apply a discount code"""
    service = context.cart_service(store)
    if not service.apply_discount_safely(discount):
        raise HTTPException(status_code=400, detail=store.state.error)

    return CartResponse(
        cart_id=cart_id,
        cart=store.state,
        message=f"Discount {discount.code} applied",
    )


@router.delete("/{cart_id}/discounts/{code}", response_model=CartResponse)
async def remove_discount(
    cart_id: str,
    code: str,
    store: CartStore = Depends(get_store),
    context: AppContext = Depends(get_context),
):
    """Remove a discount code"""
    context.cart_service(store).remove_discount_safely(code)
    return CartResponse(cart_id=cart_id, cart=store.state, message="Discount removed")


@router.put("/{cart_id}/shipping", response_model=CartResponse)
async def set_shipping(
    cart_id: str,
    shipping: ShippingSelection,
    store: CartStore = Depends(get_store),
):
    """Select the shipping method"""
    store.set_shipping_method(shipping)
    return CartResponse(cart_id=cart_id, cart=store.state, message="Shipping updated")


@router.get("/{cart_id}/validate", response_model=CartValidation)
async def validate_cart(
    store: CartStore = Depends(get_store),
    context: AppContext = Depends(get_context),
):
    """Check cart contents against the current catalog"""
    return context.cart_service(store).validate_cart(context.catalog)


@router.get("/{cart_id}/stats", response_model=CartStats)
async def get_cart_stats(
    store: CartStore = Depends(get_store),
    context: AppContext = Depends(get_context),
):
    return context.cart_service(store).stats()


@router.get("/{cart_id}/analytics", response_model=CartAnalytics)
async def get_cart_analytics(
    store: CartStore = Depends(get_store),
    context: AppContext = Depends(get_context),
):
    return context.cart_service(store).get_analytics()


@router.get("/{cart_id}/snapshot", response_model=CartSnapshot)
async def get_snapshot(store: CartStore = Depends(get_store)):
    """Durable cart contents, as exchanged during reconciliation"""
    return store.state.to_snapshot()


@router.put("/{cart_id}/snapshot", response_model=CartSnapshot)
async def put_snapshot(
    cart_id: str,
    snapshot: CartSnapshot,
    context: AppContext = Depends(get_context),
):
    """
    Replace the server copy of a cart.

    Clients merge before pushing, so the pushed snapshot wins outright.
    The cart is created under the given ID if it does not exist yet.
    """
    store = context.carts.open_cart(cart_id)
    store.replace(snapshot)
    logger.info(f"Cart {cart_id} replaced from client snapshot")
    return store.state.to_snapshot()


@router.post("/{cart_id}/sync", response_model=CartResponse)
async def sync_cart(
    cart_id: str,
    store: CartStore = Depends(get_store),
    context: AppContext = Depends(get_context),
):
    """Reconcile the cart with the upstream server"""
    await context.synchronizer(cart_id, store).sync_with_server()
    if store.state.error == SYNC_ERROR:
        raise HTTPException(status_code=502, detail=SYNC_ERROR)

    return CartResponse(cart_id=cart_id, cart=store.state, message="Cart synced")
