"""Per-session cart registry"""

import uuid
import logging
from collections import OrderedDict
from typing import Optional

from ..database.carts import CartStore
from ..database.local_store import LocalStore
from .analytics import AnalyticsNotifier
from .cart_facade import CartFacade, Clock
from .pricing import CouponLookup, PricingPolicy

logger = logging.getLogger(__name__)


class CartSessionManager:
    """
    Maps session ids to their own CartFacade, one storage key each.

    At most ``max_sessions`` facades stay in memory; the least recently used
    one is evicted and rehydrated from storage on its next access. Every
    change is already persisted, so eviction loses nothing.
    """

    def __init__(
        self,
        local_store: LocalStore,
        coupons: CouponLookup,
        policy: Optional[PricingPolicy] = None,
        notifier: Optional[AnalyticsNotifier] = None,
        storage_key: str = "cart",
        clock: Optional[Clock] = None,
        max_sessions: int = 1024,
    ):
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        self.local_store = local_store
        self.coupons = coupons
        self.policy = policy or PricingPolicy()
        self.notifier = notifier or AnalyticsNotifier()
        self.storage_key = storage_key
        self.clock = clock
        self.max_sessions = max_sessions
        self.sessions: OrderedDict[str, CartFacade] = OrderedDict()

    def _storage_key(self, session_id: str) -> str:
        return f"{self.storage_key}-{session_id}"

    def _open(self, session_id: str) -> CartFacade:
        store = CartStore(self.local_store, self._storage_key(session_id))
        facade = CartFacade(
            store,
            self.coupons,
            policy=self.policy,
            notifier=self.notifier,
            clock=self.clock,
        )
        self.sessions[session_id] = facade
        while len(self.sessions) > self.max_sessions:
            evicted, _ = self.sessions.popitem(last=False)
            logger.debug(f"Evicted cart session {evicted} from memory")
        return facade

    def create_session(self) -> tuple[str, CartFacade]:
        """Start a session with an empty, already persisted cart"""
        session_id = uuid.uuid4().hex
        facade = self._open(session_id)
        facade.store.save(facade.cart)
        logger.info(f"Created cart session {session_id}")
        return session_id, facade

    def get_session(self, session_id: str) -> Optional[CartFacade]:
        """Get a live session, rehydrating it from storage if needed"""
        facade = self.sessions.get(session_id)
        if facade is not None:
            self.sessions.move_to_end(session_id)
            return facade

        try:
            if not self.local_store.has_item(self._storage_key(session_id)):
                return None
        except ValueError:
            return None

        logger.info(f"Rehydrating cart session {session_id}")
        return self._open(session_id)

    def drop_session(self, session_id: str) -> bool:
        """Forget a session and delete its stored cart"""
        facade = self.get_session(session_id)
        if facade is None:
            return False
        facade.store.clear()
        del self.sessions[session_id]
        logger.info(f"Dropped cart session {session_id}")
        return True
