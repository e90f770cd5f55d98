# Service modules

from .cart_service import CartService
from .sync import CartSynchronizer, ServerCartClient, merge_server_cart

__all__ = ["CartService", "CartSynchronizer", "ServerCartClient", "merge_server_cart"]
