"""Post-commit event bus.

QuotationService publishes a SystemEvent only after its transaction has
committed. Subscribers register for specific event types, or for all of them.

Inside the application lifespan (between `start_event_system` and
`stop_event_system`) events go through a queue drained by one background
worker, so a slow subscriber never holds up a quotation request. Outside it
(scripts, tests) `emit` dispatches inline and returns once every subscriber
has run.

Usage:
    from motorquote.events.bus import emit, subscribe

    subscribe(send_quotation_pdf, EventType.QUOTATION_GENERATED)
    await emit(SystemEvent.for_quotation(EventType.QUOTATION_GENERATED, quotation))
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable

from motorquote.schemas.events import EventType, SystemEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[SystemEvent], Awaitable[None]]


def _handler_name(handler: EventHandler) -> str:
    return getattr(handler, "__name__", type(handler).__name__)


class EventBus:
    """Fan-out of committed events to subscribers; one failing subscriber never blocks the rest."""

    def __init__(self) -> None:
        # None keys the subscribers that receive every event
        self._handlers: defaultdict[EventType | None, list[EventHandler]] = defaultdict(list)
        self._queue: asyncio.Queue[SystemEvent] | None = None
        self._worker: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    def subscribe(self, handler: EventHandler, *event_types: EventType) -> None:
        """Register `handler` for the given types; no types means every event."""
        for key in event_types or (None,):
            self._handlers[key].append(handler)
        logger.info(
            "Subscribed %s to %s",
            _handler_name(handler),
            [t.value for t in event_types] if event_types else "all events",
        )

    def handlers_for(self, event_type: EventType) -> list[EventHandler]:
        return [*self._handlers[None], *self._handlers.get(event_type, ())]

    async def emit(self, event: SystemEvent) -> None:
        """Publish a committed event: queued while the worker runs, inline otherwise."""
        if self._queue is not None and self.running:
            await self._queue.put(event)
        else:
            await self._dispatch(event)
        logger.debug("Event published: %s (quotation=%s)", event.event_type.value, event.quotation_id)

    # ── Lifecycle ────────────────────────────────────────────────────

    async def start(self) -> None:
        if self.running:
            return
        self._queue = asyncio.Queue()
        self._worker = asyncio.create_task(self._drain(self._queue))
        logger.info(
            "Event bus started with %d subscriptions",
            sum(len(handlers) for handlers in self._handlers.values()),
        )

    async def stop(self) -> None:
        """Deliver everything already queued, then stop the worker."""
        if self._queue is not None and self.running:
            await self._queue.join()
        if self._worker is not None:
            self._worker.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._worker
        self._queue = None
        self._worker = None
        logger.info("Event bus stopped")

    # ── Delivery ─────────────────────────────────────────────────────

    async def _drain(self, queue: asyncio.Queue[SystemEvent]) -> None:
        while True:
            event = await queue.get()
            try:
                await self._dispatch(event)
            finally:
                queue.task_done()

    async def _dispatch(self, event: SystemEvent) -> None:
        handlers = self.handlers_for(event.event_type)
        if not handlers:
            return

        results = await asyncio.gather(*(handler(event) for handler in handlers), return_exceptions=True)
        for handler, result in zip(handlers, results):
            if isinstance(result, Exception):
                logger.error(
                    "Subscriber %s failed on %s (quotation=%s)",
                    _handler_name(handler),
                    event.event_type.value,
                    event.quotation_id,
                    exc_info=result,
                )


# Module-level singleton and the functions the rest of the app imports
event_bus = EventBus()

emit = event_bus.emit
subscribe = event_bus.subscribe
start_event_system = event_bus.start
stop_event_system = event_bus.stop
