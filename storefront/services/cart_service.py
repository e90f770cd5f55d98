"""
Cart Service

Caller-facing cart operations. Each "safe" operation checks its
preconditions first; a rejected operation leaves the cart untouched, puts a
human-readable message on ``CartState.error`` and returns False instead of
raising.
"""

import logging
from typing import Iterable, Optional

from ..core.errors import CartValidationError
from ..core.policy import check_discount, check_new_item, check_quantity
from ..core.store import CartStore
from ..database.products import ProductCatalog
from ..models.cart import (
    CartAnalytics,
    CartStats,
    CartValidation,
    CategoryShare,
    Discount,
    DiscountUsage,
    LineItem,
)

logger = logging.getLogger(__name__)


class CartService:
    """Validating wrapper around a CartStore"""

    def __init__(self, store: CartStore, max_item_quantity: int = 999):
        self.store = store
        self.max_item_quantity = max_item_quantity

    @property
    def state(self):
        return self.store.state

    def _reject(self, action: str, error: CartValidationError) -> bool:
        logger.warning(f"Failed to {action}: {error}")
        self.store.set_error(str(error))
        return False

    def _accept(self) -> bool:
        self.store.clear_error()
        return True

    # ==================== Safe operations ====================

    def add_item_safely(self, item: LineItem) -> bool:
        """Add an item if the product is active and in stock"""
        try:
            check_new_item(item)
        except CartValidationError as e:
            return self._reject("add item to cart", e)

        self.store.add_item(item)
        return self._accept()

    def update_quantity_safely(self, item_id: str, quantity: int) -> bool:
        """Change an item's quantity within the available stock; 0 removes it"""
        try:
            if quantity < 0:
                raise CartValidationError("Quantity cannot be negative")

            item = self.store.get_item(item_id)
            if not item:
                raise CartValidationError("Item not found in cart")

            if quantity > 0:
                check_quantity(item, quantity, self.max_item_quantity)
        except CartValidationError as e:
            return self._reject("update quantity", e)

        if quantity == 0:
            self.store.remove_item(item_id)
        else:
            self.store.update_quantity(item_id, quantity)
        return self._accept()

    def remove_item_safely(self, item_id: str) -> bool:
        if not self.store.get_item(item_id):
            return self._reject("remove item", CartValidationError("Item not found in cart"))

        self.store.remove_item(item_id)
        return self._accept()

    def clear_cart_safely(self) -> bool:
        if not self.state.items:
            return self._reject("clear cart", CartValidationError("Cart is already empty"))

        self.store.clear_cart()
        return self._accept()

    def apply_discount_safely(self, discount: Discount) -> bool:
        """Apply a discount unless its code is already active or its value is out of range"""
        try:
            check_discount(discount, self.state.discounts)
        except CartValidationError as e:
            return self._reject("apply discount", e)

        self.store.apply_discount(discount)
        logger.info(f"Applied discount {discount.code} ({discount.kind.value})")
        return self._accept()

    def remove_discount_safely(self, code: str) -> bool:
        self.store.remove_discount(code)
        return self._accept()

    def clear_all_discounts(self) -> None:
        for code in [d.code for d in self.state.discounts]:
            self.store.remove_discount(code)

    # ==================== Bulk operations ====================

    def add_multiple_items(self, items: Iterable[LineItem]) -> list[bool]:
        """Add several items; each one succeeds or fails on its own"""
        return [self.add_item_safely(item) for item in items]

    def update_multiple_quantities(self, updates: Iterable[tuple[str, int]]) -> list[bool]:
        return [self.update_quantity_safely(item_id, quantity) for item_id, quantity in updates]

    def increase_quantity(self, item_id: str) -> bool:
        item = self.store.get_item(item_id)
        if not item:
            return False
        return self.update_quantity_safely(item_id, item.quantity + 1)

    def decrease_quantity(self, item_id: str) -> bool:
        """Decrease quantity by one, never below one"""
        item = self.store.get_item(item_id)
        if not item or item.quantity <= 1:
            return False
        return self.update_quantity_safely(item_id, item.quantity - 1)

    # ==================== Validation ====================

    def validate_cart(self, catalog: Optional[ProductCatalog] = None) -> CartValidation:
        """
        Check cart contents for availability.

        Args:
            catalog: When given, each item is checked against the current
                catalog entry instead of the snapshot stored in the cart

        Returns:
            CartValidation with one message per problem found
        """
        errors: list[str] = []

        for item in self.state.items:
            product = item.product
            if catalog:
                product = catalog.get_product(item.product_id)
                if not product:
                    errors.append(f"{item.product.name} is no longer available")
                    continue

            if not product.is_active:
                errors.append(f"{product.name} is no longer available")

            if not product.is_in_stock:
                errors.append(f"{product.name} is out of stock")

            if item.variant:
                inventory = item.variant.inventory
                if catalog:
                    variant = product.get_variant(item.variant.id)
                    inventory = variant.inventory if variant else 0
                if inventory is not None and inventory < item.quantity:
                    errors.append(
                        f"Only {inventory} {product.name} ({item.variant.name}) available"
                    )

        return CartValidation(is_valid=not errors, errors=errors)

    # ==================== Projections ====================

    def stats(self) -> CartStats:
        summary = self.state.summary
        return CartStats(
            total_items=self.store.get_total_items(),
            total_weight=self.store.get_total_weight(),
            is_empty=not self.state.items,
            subtotal=summary.subtotal,
            total=summary.total,
            tax_amount=summary.tax_amount,
            shipping_amount=summary.shipping_amount,
            discount_amount=summary.discount_amount,
            applied_discounts=len(self.state.discounts),
        )

    def items_by_category(self) -> dict[str, list[LineItem]]:
        """Group items by product category; an item appears once per category"""
        groups: dict[str, list[LineItem]] = {}
        for item in self.state.items:
            for category in item.product.categories:
                groups.setdefault(category, []).append(item)
        return groups

    def featured_items(self) -> list[LineItem]:
        return [i for i in self.state.items if i.product.featured]

    def out_of_stock_items(self) -> list[LineItem]:
        return [i for i in self.state.items if not i.product.is_in_stock]

    def get_analytics(self) -> CartAnalytics:
        summary = self.state.summary
        items = self.state.items
        total_items = self.store.get_total_items()

        return CartAnalytics(
            total_value=summary.subtotal,
            average_item_price=round(summary.subtotal / total_items, 2) if total_items else 0.0,
            most_expensive_item=max(items, key=lambda i: i.unit_price, default=None),
            cheapest_item=min(items, key=lambda i: i.unit_price, default=None),
            category_distribution=[
                CategoryShare(
                    category=category,
                    count=len(group),
                    value=round(sum(i.total for i in group), 2),
                )
                for category, group in self.items_by_category().items()
            ],
            discount_usage=DiscountUsage(
                total_saved=summary.discount_amount,
                discount_codes=[d.code for d in self.state.discounts],
            ),
        )
