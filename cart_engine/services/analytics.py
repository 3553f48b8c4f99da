"""
Cart analytics notifications

Fire-and-forget delivery of cart events to any number of sinks. A failing
sink is logged and skipped; the cart never waits on or fails because of
analytics.
"""

import asyncio
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional

import httpx
from pydantic import BaseModel, Field

from ..models.cart import Variant

logger = logging.getLogger(__name__)


class CartEventType(str, Enum):
    ADD_TO_CART = "add_to_cart"
    REMOVE_FROM_CART = "remove_from_cart"
    COUPON_APPLIED = "coupon_applied"
    COUPON_REJECTED = "coupon_rejected"
    CART_CLEARED = "cart_cleared"


class CartEvent(BaseModel):
    """Analytics payload for a cart change"""
    event: CartEventType
    product_id: Optional[str] = None
    quantity: int = 0
    price: int = 0
    variant: Optional[Variant] = None
    coupon_code: Optional[str] = None
    reason: Optional[str] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


CartEventSink = Callable[[CartEvent], None]


class AnalyticsNotifier:
    """Fans cart events out to subscribed sinks"""

    def __init__(self, sinks: Optional[list[CartEventSink]] = None):
        self.sinks: list[CartEventSink] = list(sinks or [])

    def subscribe(self, sink: CartEventSink) -> None:
        self.sinks.append(sink)

    def notify(self, event: CartEvent) -> None:
        for sink in self.sinks:
            try:
                sink(event)
            except Exception as e:
                logger.warning(f"Analytics sink failed for {event.event.value}: {e}")


class HttpAnalyticsSink:
    """
    Posts cart events as JSON to an analytics endpoint.

    Calling the sink only schedules the POST on the running event loop and
    returns immediately. Outside an event loop the event is dropped.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 2.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self._http_client = httpx.AsyncClient(timeout=timeout, transport=transport)
        self._pending: set[asyncio.Task] = set()

    def __call__(self, event: CartEvent) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(f"No running event loop, dropping {event.event.value} event")
            return

        task = loop.create_task(self._deliver(event))
        self._pending.add(task)
        task.add_done_callback(self._on_done)

    async def _deliver(self, event: CartEvent) -> None:
        try:
            response = await self._http_client.post(
                self.url,
                content=event.model_dump_json(),
                headers={"Content-Type": "application/json"},
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(f"Analytics delivery to {self.url} failed: {e}")
            return
        logger.debug(f"Delivered {event.event.value} event")

    def _on_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.warning(f"Analytics delivery to {self.url} failed: {task.exception()}")

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def flush(self) -> None:
        """Wait for deliveries already scheduled"""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    async def close(self) -> None:
        """Flush pending deliveries and close HTTP client"""
        await self.flush()
        await self._http_client.aclose()
