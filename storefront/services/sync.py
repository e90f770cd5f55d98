"""
Server Cart Reconciliation

Merges a locally held cart with the copy kept by a storefront server and
pushes the merged result back.
"""

import logging
from typing import Any, Optional

import httpx

from ..core.store import CartStore
from ..models.cart import CartSnapshot

logger = logging.getLogger(__name__)

SYNC_ERROR = "Failed to sync cart with server"


class ServerCartClient:
    """
    Client for the server-side cart snapshot API.

    Usage:
        client = ServerCartClient("https://shop.example.com", token="...")
        snapshot = await client.fetch_cart(cart_id)
        await client.close()
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize server cart client.

        Args:
            base_url: Base URL of the storefront server
            token: Bearer token identifying the current user
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self._token = token
        self._http_client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def close(self) -> None:
        """Close HTTP client"""
        await self._http_client.aclose()

    def _generate_headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        body: Optional[str] = None,
        allow_missing: bool = False,
    ) -> Optional[dict[str, Any]]:
        """Make an HTTP request; returns None for a 404 when allow_missing is set"""
        url = f"{self.base_url}{path}"

        response = await self._http_client.request(
            method=method,
            url=url,
            headers=self._generate_headers(),
            content=body,
        )

        if allow_missing and response.status_code == 404:
            return None

        if response.status_code >= 400:
            logger.error(f"Request failed: {response.status_code} - {response.text}")
            response.raise_for_status()

        return response.json()

    async def fetch_cart(self, cart_id: str) -> Optional[CartSnapshot]:
        """Get the server copy of a cart, or None if the server has none"""
        data = await self._request(
            "GET",
            f"/api/cart/{cart_id}/snapshot",
            allow_missing=True,
        )
        if data is None:
            return None
        return CartSnapshot.model_validate(data)

    async def push_cart(self, cart_id: str, snapshot: CartSnapshot) -> CartSnapshot:
        """Replace the server copy of a cart"""
        data = await self._request(
            "PUT",
            f"/api/cart/{cart_id}/snapshot",
            body=snapshot.model_dump_json(),
        )
        return CartSnapshot.model_validate(data)


def merge_server_cart(
    store: CartStore,
    remote: CartSnapshot,
    base: Optional[CartSnapshot] = None,
) -> None:
    """
    Merge a server snapshot into the local cart.

    ``base`` is the snapshot both sides last agreed on (the last one pushed).
    Each line, discount and the shipping selection is resolved against it:
    whatever the local cart changed since the base is kept, and server-side
    changes are applied only where the local cart still matches the base.
    So local removals, decreases and clears survive a sync.

    Without a base (first sync) lines only the server has are added, lines
    on both sides keep the larger quantity, discounts are merged by code and
    the server shipping is used only when none is selected locally.

    Merging the same snapshot twice changes nothing the second time.
    """
    base = base or CartSnapshot()
    base_items = {item.id: item for item in base.items}
    remote_ids = {item.id for item in remote.items}

    for remote_item in remote.items:
        local = store.get_item(remote_item.id)
        base_item = base_items.get(remote_item.id)
        if base_item is None:
            if local is None:
                store.add_item(remote_item)
            elif remote_item.quantity > local.quantity:
                store.update_quantity(local.id, remote_item.quantity)
        elif (
            local is not None
            and local.quantity == base_item.quantity
            and remote_item.quantity != base_item.quantity
        ):
            store.update_quantity(local.id, remote_item.quantity)

    for item_id, base_item in base_items.items():
        local = store.get_item(item_id)
        if item_id not in remote_ids and local and local.quantity == base_item.quantity:
            store.remove_item(item_id)

    base_codes = {d.code for d in base.discounts}
    remote_codes = {d.code for d in remote.discounts}
    local_codes = {d.code for d in store.state.discounts}
    for discount in remote.discounts:
        if discount.code not in local_codes and discount.code not in base_codes:
            store.apply_discount(discount)
    for code in (base_codes & local_codes) - remote_codes:
        store.remove_discount(code)

    local_shipping = store.state.shipping
    if local_shipping == base.shipping and remote.shipping != base.shipping:
        store.set_shipping_method(remote.shipping)


class CartSynchronizer:
    """
    Reconciles one local cart with the server.

    Without a client this is a no-op. The snapshot last pushed is kept as the
    merge base for the next sync. The cart stays usable while a sync is in
    flight; the merge runs against whatever the cart holds when the server
    answers, and changes made during the push are kept by the next sync.
    """

    def __init__(
        self,
        store: CartStore,
        cart_id: str,
        client: Optional[ServerCartClient] = None,
    ):
        self.store = store
        self.cart_id = cart_id
        self.client = client
        self.base: Optional[CartSnapshot] = None

    async def sync_with_server(self) -> None:
        """Pull, merge and push the cart; failures end up on the cart error"""
        self.store.set_loading(True)
        try:
            if not self.client:
                logger.debug(f"No server cart configured, skipping sync for {self.cart_id}")
                return

            logger.info(f"Syncing cart {self.cart_id} with server...")
            remote = await self.client.fetch_cart(self.cart_id)
            if remote:
                merge_server_cart(self.store, remote, self.base)

            self.base = await self.client.push_cart(self.cart_id, self.store.state.to_snapshot())

            if self.store.state.error == SYNC_ERROR:
                self.store.clear_error()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Cart sync failed for {self.cart_id}: {e}")
            self.store.set_error(SYNC_ERROR)
        finally:
            self.store.set_loading(False)
