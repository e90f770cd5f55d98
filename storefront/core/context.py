"""Application context shared by request handlers"""

import logging
from dataclasses import dataclass, field
from typing import Optional

import httpx
from fastapi import Request

from .config import Settings
from .store import CartStore
from ..database.carts import CartDatabase
from ..database.products import ProductCatalog
from ..database.storage import create_storage
from ..services.cart_service import CartService
from ..services.sync import CartSynchronizer, ServerCartClient

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Long-lived collaborators, created at startup and closed at shutdown"""
    settings: Settings
    catalog: ProductCatalog
    carts: CartDatabase
    sync_client: Optional[ServerCartClient] = None
    synchronizers: dict[str, CartSynchronizer] = field(default_factory=dict)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        sync_transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "AppContext":
        storage = create_storage(settings.cart_storage_backend, settings.cart_storage_dir)
        logger.info(f"Cart storage: {settings.cart_storage_backend}")

        sync_client = None
        if settings.sync_configured:
            sync_client = ServerCartClient(
                base_url=settings.sync_base_url,
                token=settings.sync_token,
                timeout=settings.sync_timeout,
                transport=sync_transport,
            )
            logger.info(f"Server cart sync enabled: {settings.sync_base_url}")

        return cls(
            settings=settings,
            catalog=ProductCatalog(),
            carts=CartDatabase(
                storage,
                key_prefix=settings.cart_storage_key,
                tax_rate=settings.tax_rate,
                max_cached=settings.max_cached_carts,
            ),
            sync_client=sync_client,
        )

    def cart_service(self, store: CartStore) -> CartService:
        return CartService(store, max_item_quantity=self.settings.max_item_quantity)

    def synchronizer(self, cart_id: str, store: CartStore) -> CartSynchronizer:
        """Per-cart synchronizer, kept across requests together with its merge base"""
        synchronizer = self.synchronizers.get(cart_id)
        if synchronizer is None:
            synchronizer = CartSynchronizer(store, cart_id, client=self.sync_client)
            self.synchronizers[cart_id] = synchronizer
        # The registry may have reloaded the cart into a new store
        synchronizer.store = store
        return synchronizer

    async def close(self) -> None:
        if self.sync_client:
            await self.sync_client.close()


def get_context(request: Request) -> AppContext:
    """FastAPI dependency returning the application context"""
    return request.app.state.context
