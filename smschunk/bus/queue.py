"""Async message bus between the platform adapter, the listener and the app."""

import asyncio
from typing import Callable, Iterable

from loguru import logger

from smschunk.bus.events import BusEvent, InboundSegment


class MessageBus:
    """
    Async message bus for routing SMS traffic.

    Provides queues for inbound segment batches (gateway → listener) and for
    named events (bridge → application). Gateways usually run on a platform
    callback thread, so both directions have a thread-safe entry point once
    an event loop has been attached.
    """

    def __init__(self):
        self._segments: asyncio.Queue[list[InboundSegment]] = asyncio.Queue()
        self._events: asyncio.Queue[BusEvent] = asyncio.Queue()
        self._event_handlers: list[Callable[[BusEvent], None]] = []
        self._loop: asyncio.AbstractEventLoop | None = None

    def attach_loop(self, loop: asyncio.AbstractEventLoop) -> None:
        """Attach the event loop that owns the queues."""
        self._loop = loop

    def _in_loop(self) -> bool:
        if self._loop is None:
            return True
        try:
            return asyncio.get_running_loop() is self._loop
        except RuntimeError:
            return False

    def _put(self, queue: asyncio.Queue, item) -> None:
        if self._in_loop():
            queue.put_nowait(item)
        else:
            self._loop.call_soon_threadsafe(queue.put_nowait, item)

    async def publish_segments(self, batch: Iterable[InboundSegment]) -> None:
        """Publish a batch of inbound segments."""
        await self._segments.put(list(batch))

    def publish_segments_threadsafe(self, batch: Iterable[InboundSegment]) -> None:
        """Publish a batch from any thread."""
        self._put(self._segments, list(batch))

    async def consume_segments(self) -> list[InboundSegment]:
        """Consume the next inbound batch (blocks until available)."""
        return await self._segments.get()

    def emit(self, event_name: str, payload: str) -> None:
        """Queue a named event and notify handlers. Safe from any thread."""
        event = BusEvent(name=event_name, payload=payload)
        self._put(self._events, event)
        for handler in self._event_handlers:
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Event handler failed for {event_name}: {e}")

    async def consume_event(self) -> BusEvent:
        """Consume the next event."""
        return await self._events.get()

    def on_event(self, handler: Callable[[BusEvent], None]) -> None:
        """Register a handler called for every emitted event."""
        self._event_handlers.append(handler)

    @property
    def pending_events(self) -> int:
        return self._events.qsize()
