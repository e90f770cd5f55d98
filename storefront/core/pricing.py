"""
Cart Pricing

Computes the cart summary from line items, discounts and the shipping
selection. Everything here is a pure function of its arguments.
"""

from typing import Iterable, Optional

from ..models.cart import CartSummary, Discount, DiscountKind, LineItem, ShippingSelection

DEFAULT_TAX_RATE = 0.08


def round_money(amount: float) -> float:
    """Round a currency amount to cents"""
    return round(amount, 2)


def compute_summary(
    items: Iterable[LineItem],
    discounts: Iterable[Discount],
    shipping: Optional[ShippingSelection] = None,
    tax_rate: float = DEFAULT_TAX_RATE,
) -> CartSummary:
    """
    Compute the cart summary.

    Discounts are applied in the order given and stack with each other.
    A free-shipping discount zeroes the shipping amount no matter how many
    times it appears.

    Args:
        items: Line items in the cart
        discounts: Active discounts, in application order
        shipping: Selected shipping method, if any
        tax_rate: Flat tax rate applied to the discounted subtotal

    Returns:
        CartSummary with amounts rounded to cents. The total is built from
        the rounded parts, so it always equals
        max(subtotal - discount_amount, 0) + tax_amount + shipping_amount
        to the cent. discount_amount is the full accumulated discount, even
        when it exceeds the subtotal.
    """
    items = list(items)

    subtotal = sum(item.total for item in items)
    item_count = sum(item.quantity for item in items)
    weight = sum((item.product.shipping_weight or 0) * item.quantity for item in items)

    shipping_amount = shipping.cost if shipping else 0.0
    discount_amount = 0.0

    for discount in discounts:
        if discount.kind == DiscountKind.PERCENTAGE:
            discount_amount += subtotal * discount.value / 100
        elif discount.kind == DiscountKind.FIXED_AMOUNT:
            discount_amount += min(discount.value, subtotal)
        elif discount.kind == DiscountKind.FREE_SHIPPING:
            shipping_amount = 0.0

    subtotal = round_money(subtotal)
    discount_amount = round_money(discount_amount)
    shipping_amount = round_money(shipping_amount)

    # Stacked discounts can exceed the subtotal; never tax or charge below zero
    taxable_amount = max(subtotal - discount_amount, 0.0)
    tax_amount = round_money(taxable_amount * tax_rate)
    total = round_money(taxable_amount + tax_amount + shipping_amount)

    return CartSummary(
        subtotal=subtotal,
        tax_amount=tax_amount,
        shipping_amount=shipping_amount,
        discount_amount=discount_amount,
        total=total,
        item_count=item_count,
        weight=weight,
    )
