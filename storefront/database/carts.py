"""Cart registry"""

import uuid
import logging
from collections import OrderedDict
from typing import Optional

from ..core.pricing import DEFAULT_TAX_RATE
from ..core.store import CartStore
from .storage import CartPersistence, KeyValueStorage

logger = logging.getLogger(__name__)


class CartDatabase:
    """
    Keeps one CartStore per cart ID.

    Each cart is persisted under its own key (``<prefix>:<cart_id>``), so a
    cart evicted from memory, or saved by another process sharing the same
    storage, is reloaded on next access. At most ``max_cached`` carts stay in
    memory; the least recently used one is evicted first.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        key_prefix: str = "onicommerce-cart",
        tax_rate: float = DEFAULT_TAX_RATE,
        max_cached: int = 1000,
    ):
        self.storage = storage
        self.key_prefix = key_prefix
        self.tax_rate = tax_rate
        self.max_cached = max_cached
        self.carts: OrderedDict[str, CartStore] = OrderedDict()

    def _key(self, cart_id: str) -> str:
        return f"{self.key_prefix}:{cart_id}"

    def _open(self, cart_id: str) -> CartStore:
        store = CartStore(
            persistence=CartPersistence(self.storage, self._key(cart_id)),
            tax_rate=self.tax_rate,
        )
        # initialize() saves, so an evicted cart can always be reloaded
        store.initialize()
        self.carts[cart_id] = store
        self._evict()
        return store

    def _evict(self) -> None:
        while len(self.carts) > self.max_cached:
            cart_id, _ = self.carts.popitem(last=False)
            logger.debug(f"Evicted cart {cart_id} from memory")

    def create_cart(self) -> tuple[str, CartStore]:
        """Create a new empty cart"""
        cart_id = str(uuid.uuid4())
        logger.info(f"Created cart {cart_id}")
        return cart_id, self._open(cart_id)

    def get_cart(self, cart_id: str) -> Optional[CartStore]:
        """Get a cart by ID, loading it from storage if needed"""
        if cart_id in self.carts:
            self.carts.move_to_end(cart_id)
            return self.carts[cart_id]
        if self.storage.get(self._key(cart_id)) is not None:
            return self._open(cart_id)
        return None

    def open_cart(self, cart_id: str) -> CartStore:
        """Get a cart by ID, creating it under that ID if it does not exist"""
        return self.get_cart(cart_id) or self._open(cart_id)

    def delete_cart(self, cart_id: str) -> bool:
        """Delete a cart from memory and storage"""
        store = self.carts.pop(cart_id, None)
        stored = self.storage.get(self._key(cart_id)) is not None
        if stored:
            self.storage.delete(self._key(cart_id))
        return store is not None or stored
