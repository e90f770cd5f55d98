"""
Cart State Store

Single owner of a CartState. Every mutation recomputes the summary before
returning and, once the store is initialized, writes a snapshot through the
persistence adapter.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from ..models.cart import (
    CartSnapshot,
    CartState,
    CartSummary,
    Discount,
    LineItem,
    ShippingSelection,
    make_item_id,
)
from ..database.storage import CartPersistence
from .pricing import DEFAULT_TAX_RATE, compute_summary

logger = logging.getLogger(__name__)


class CartStore:
    """
    Holds one cart and exposes its mutations.

    Mutations are not thread-safe; callers run them one at a time on a
    single thread or event loop.

    Usage:
        store = CartStore(CartPersistence(MemoryStorage(), "cart"))
        store.initialize()
        store.add_item(LineItem.create(product, quantity=2))
        print(store.state.summary.total)
    """

    def __init__(
        self,
        persistence: Optional[CartPersistence] = None,
        tax_rate: float = DEFAULT_TAX_RATE,
    ):
        self.persistence = persistence
        self.tax_rate = tax_rate
        self._state = CartState()

    @property
    def state(self) -> CartState:
        return self._state

    # ==================== Lifecycle ====================

    def initialize(self) -> CartState:
        """
        Hydrate the cart from storage.

        Runs once; later calls return the current state untouched. A missing
        or unreadable snapshot leaves an empty cart.
        """
        if self._state.is_initialized:
            return self._state

        self._state.is_loading = True
        loaded = None
        if self.persistence:
            try:
                loaded = self.persistence.load()
            except (OSError, ValueError) as e:
                logger.error(f"Failed to load cart from {self.persistence.key}: {e}")

        self._state = loaded or CartState()
        self._state.is_initialized = True
        self._state.is_loading = False
        self._commit()
        return self._state

    def reset(self) -> None:
        """Discard everything, including transient flags"""
        self._state = CartState(is_initialized=True)
        self._commit()

    def replace(self, snapshot: CartSnapshot) -> None:
        """Install a full snapshot as the current cart"""
        self._state = CartState.from_snapshot(snapshot)
        self._state.is_initialized = True
        self._commit()

    # ==================== Items ====================

    def add_item(self, item: LineItem) -> None:
        """Add an item, merging with an existing line for the same product/variant"""
        existing = self.get_cart_item(item.product_id, item.variant_id)

        if existing:
            existing.set_quantity(existing.quantity + item.quantity)
        else:
            new_item = item.model_copy(
                deep=True,
                update={"id": make_item_id(item.product_id, item.variant_id)},
            )
            new_item.set_quantity(item.quantity)
            self._state.items.append(new_item)

        self._commit()

    def remove_item(self, item_id: str) -> None:
        """Remove an item; unknown IDs are ignored"""
        remaining = [i for i in self._state.items if i.id != item_id]
        if len(remaining) == len(self._state.items):
            return

        self._state.items = remaining
        self._commit()

    def update_quantity(self, item_id: str, quantity: int) -> None:
        """Set an item's quantity; zero or less removes it"""
        if quantity <= 0:
            self.remove_item(item_id)
            return

        item = self.get_item(item_id)
        if not item:
            return

        item.set_quantity(quantity)
        self._commit()

    def clear_cart(self) -> None:
        """Remove all items, discounts and the shipping selection"""
        self._state.items = []
        self._state.discounts = []
        self._state.shipping = None
        self._commit()

    # ==================== Discounts & shipping ====================

    def apply_discount(self, discount: Discount) -> None:
        """Apply a discount, replacing any active discount with the same code"""
        applied = discount.model_copy()
        if applied.applied_at is None:
            applied.applied_at = datetime.now(timezone.utc)

        self._state.discounts = [
            d for d in self._state.discounts if d.code != discount.code
        ] + [applied]
        self._commit()

    def remove_discount(self, code: str) -> None:
        """Remove a discount by code; unknown codes are ignored"""
        remaining = [d for d in self._state.discounts if d.code != code]
        if len(remaining) == len(self._state.discounts):
            return

        self._state.discounts = remaining
        self._commit()

    def set_shipping_method(self, shipping: Optional[ShippingSelection]) -> None:
        """Replace the shipping selection; None clears it"""
        self._state.shipping = shipping.model_copy() if shipping else None
        self._commit()

    def calculate_summary(self) -> CartSummary:
        """Recompute the summary from the current contents"""
        self._commit()
        return self._state.summary

    # ==================== Reads ====================

    def get_item(self, item_id: str) -> Optional[LineItem]:
        """Get an item by its line item ID"""
        return next((i for i in self._state.items if i.id == item_id), None)

    def get_cart_item(
        self,
        product_id: str,
        variant_id: Optional[str] = None,
    ) -> Optional[LineItem]:
        """Get the line for a product/variant pair"""
        return next(
            (i for i in self._state.items if i.matches(product_id, variant_id)),
            None,
        )

    def is_in_cart(self, product_id: str, variant_id: Optional[str] = None) -> bool:
        return self.get_cart_item(product_id, variant_id) is not None

    def get_total_items(self) -> int:
        return self._state.summary.item_count

    def get_total_weight(self) -> float:
        return self._state.summary.weight

    # ==================== Transient flags ====================

    def set_error(self, message: Optional[str]) -> None:
        self._state.error = message

    def clear_error(self) -> None:
        self._state.error = None

    def set_loading(self, is_loading: bool) -> None:
        self._state.is_loading = is_loading

    # ==================== Internal ====================

    def _commit(self) -> None:
        """Recompute the summary and persist the new snapshot"""
        self._state.summary = compute_summary(
            self._state.items,
            self._state.discounts,
            self._state.shipping,
            tax_rate=self.tax_rate,
        )

        if not (self._state.is_initialized and self.persistence):
            return

        # A failed save keeps the in-memory change
        try:
            self.persistence.save(self._state)
        except Exception:
            logger.exception(f"Failed to save cart to {self.persistence.key}")
