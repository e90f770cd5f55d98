"""Preconditions checked before a cart mutation is attempted"""

from typing import Iterable

from ..models.cart import Discount, DiscountKind, LineItem
from .errors import CartValidationError


def check_discount(discount: Discount, active: Iterable[Discount]) -> None:
    """Reject duplicate codes and out-of-range discount values"""
    if any(d.code == discount.code for d in active):
        raise CartValidationError("Discount code already applied")

    if discount.value <= 0:
        raise CartValidationError("Discount value must be greater than 0")

    if discount.kind == DiscountKind.PERCENTAGE and discount.value > 100:
        raise CartValidationError("Percentage discount cannot exceed 100%")


def check_new_item(item: LineItem) -> None:
    """Reject items that cannot be added to a cart"""
    # model_copy and model_construct skip the ge=1 field check
    if item.quantity <= 0:
        raise CartValidationError("Quantity must be greater than 0")

    if not item.product.is_active:
        raise CartValidationError("Product is not available")

    variant_stock = item.variant is not None and (item.variant.inventory or 0) > 0
    if not (item.product.is_in_stock or variant_stock):
        raise CartValidationError("Product is out of stock")


def max_quantity_for(item: LineItem, fallback: int) -> int:
    """Largest quantity allowed for a line item"""
    if item.variant and item.variant.inventory:
        return item.variant.inventory
    return item.product.inventory_quantity or fallback


def check_quantity(item: LineItem, quantity: int, fallback_max: int) -> None:
    """Reject a quantity change that goes negative or beyond available stock"""
    if quantity < 0:
        raise CartValidationError("Quantity cannot be negative")

    max_quantity = max_quantity_for(item, fallback_max)
    if quantity > max_quantity:
        raise CartValidationError(f"Only {max_quantity} items available in stock")
