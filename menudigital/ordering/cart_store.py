"""
Persistent Cart Store

Keeps one tenant's cart (and the checkout step the shopper is on) in the
shopper's session storage, so the cart survives page reloads.

Keys inside the session storage:
    cart-<slug>       JSON array of cart items
    checkout-<slug>   current checkout step
"""

import json
import logging
from typing import Optional

from menudigital.ordering.cart import Cart
from menudigital.services.kv.base import SessionStorage

logger = logging.getLogger(__name__)


class CartStore:
    """Serializes a tenant's cart to the shopper's session storage."""

    def __init__(
        self,
        storage: SessionStorage,
        slug: str,
        ttl_seconds: Optional[int] = None,
    ):
        self.storage = storage
        self.slug = slug
        self.ttl_seconds = ttl_seconds

    @property
    def cart_key(self) -> str:
        return f"cart-{self.slug}"

    @property
    def step_key(self) -> str:
        return f"checkout-{self.slug}"

    def load(self) -> Cart:
        """Return the stored cart, or an empty one when nothing is stored."""
        raw = self.storage.get(self.cart_key)
        if raw is None:
            return Cart()

        try:
            return Cart.from_list(json.loads(raw))
        except (ValueError, TypeError, KeyError) as e:
            logger.warning(f"Discarding unreadable cart {self.cart_key}: {e}")
            return Cart()

    def save(self, cart: Cart) -> None:
        """Write the whole cart back under the tenant key."""
        payload = json.dumps(cart.to_list(), ensure_ascii=False)
        self.storage.set(self.cart_key, payload, ttl=self.ttl_seconds)
        logger.debug(f"Saved {self.cart_key}: {len(cart)} lines")

    def clear(self) -> None:
        """Delete the stored cart entry for this tenant."""
        self.storage.delete(self.cart_key)

    def load_step(self) -> Optional[str]:
        return self.storage.get(self.step_key)

    def save_step(self, step: str) -> None:
        self.storage.set(self.step_key, step, ttl=self.ttl_seconds)
