"""
Cart persistence adapter

Serializes the cart to a single versioned JSON blob in the local store.
Neither ``load`` nor ``save`` raises: failures are logged as warnings and
the in-memory cart stays authoritative.
"""

import json
import logging
from typing import Optional

from ..core.errors import PersistenceFailure
from ..models.cart import Cart
from ..services import cart_reducer
from .local_store import LocalStore

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


def serialize_cart(cart: Cart) -> str:
    payload = {"version": SCHEMA_VERSION}
    payload.update(cart.model_dump(mode="json"))
    return json.dumps(payload, separators=(",", ":"))


def deserialize_cart(raw: str) -> Cart:
    """
    Parse a stored blob.

    Raises:
        ValueError: Invalid JSON, unknown version or schema mismatch
    """
    payload = json.loads(raw)
    if not isinstance(payload, dict):
        raise ValueError("cart blob is not an object")

    version = payload.get("version")
    if version != SCHEMA_VERSION:
        raise ValueError(f"unsupported cart schema version: {version!r}")

    return Cart.model_validate(
        {"items": payload.get("items", []), "coupon_code": payload.get("coupon_code")}
    )


class CartStore:
    """Loads and saves one cart under one storage key"""

    def __init__(self, local_store: LocalStore, key: str = "cart"):
        self.local_store = local_store
        self.key = key
        self.last_error: Optional[PersistenceFailure] = None

    def load(self) -> Cart:
        """Read the persisted cart, falling back to an empty cart"""
        try:
            raw = self.local_store.get_item(self.key)
        except (OSError, UnicodeDecodeError) as e:
            return self._fail_load(str(e))

        if raw is None:
            return cart_reducer.empty_cart()

        try:
            cart = deserialize_cart(raw)
        except (ValueError, TypeError) as e:
            return self._fail_load(str(e))

        self.last_error = None
        return cart_reducer.normalize(cart).cart

    def save(self, cart: Cart) -> bool:
        """Write the cart; returns False if the write failed"""
        try:
            self.local_store.set_item(self.key, serialize_cart(cart))
        except OSError as e:
            self.last_error = PersistenceFailure("write", str(e))
            logger.warning(f"{self.last_error.message}; keeping in-memory cart")
            return False

        self.last_error = None
        return True

    def clear(self) -> bool:
        """Remove the persisted blob"""
        try:
            return self.local_store.remove_item(self.key)
        except OSError as e:
            self.last_error = PersistenceFailure("delete", str(e))
            logger.warning(self.last_error.message)
            return False

    def _fail_load(self, reason: str) -> Cart:
        self.last_error = PersistenceFailure("read", reason)
        logger.warning(f"{self.last_error.message}; starting with an empty cart")
        return cart_reducer.empty_cart()
