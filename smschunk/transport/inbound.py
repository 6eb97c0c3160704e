"""Inbound listener - decodes arriving segments and publishes them."""

import asyncio
from typing import Iterable

from loguru import logger

from smschunk.bus import CHUNK_RECEIVED, PLAIN_RECEIVED, EventBridge, InboundSegment, MessageBus
from smschunk.protocol.codec import decode
from smschunk.protocol.errors import MalformedSegmentError


class InboundListener:
    """
    Entry point for segments arriving from the platform.

    Each segment is decoded and published on the bridge as a chunk event,
    in batch order. Text that is not a valid segment is logged and dropped
    (or forwarded as a plain message when ``forward_unchunked`` is set);
    it never raises back into the receive path. Reassembly is left to the
    subscriber.
    """

    def __init__(self, bridge: EventBridge, forward_unchunked: bool = False):
        self.bridge = bridge
        self.forward_unchunked = forward_unchunked
        self._running = False

    def on_segments_arrived(self, batch: Iterable[InboundSegment]) -> int:
        """Process one batch. Returns the number of chunk events published."""
        published = 0
        for segment in batch:
            if not isinstance(segment.raw_text, str):
                logger.warning(
                    f"Dropped segment from {segment.source_address}: "
                    f"body is {type(segment.raw_text).__name__}, not text"
                )
                continue
            try:
                chunk = decode(segment.raw_text)
            except MalformedSegmentError as e:
                self._on_malformed(segment, e)
                continue

            payload = {
                "from": segment.source_address,
                "messageId": chunk.message_id,
                "index": chunk.index,
                "total": chunk.total,
                "payload": chunk.payload,
            }
            if self.bridge.publish(CHUNK_RECEIVED, payload):
                published += 1
        return published

    def _on_malformed(self, segment: InboundSegment, error: MalformedSegmentError) -> None:
        if self.forward_unchunked:
            self.bridge.publish(
                PLAIN_RECEIVED,
                {"from": segment.source_address, "text": segment.raw_text},
            )
            return
        logger.warning(f"Dropped segment from {segment.source_address}: {error}")

    async def run(self, bus: MessageBus) -> None:
        """Consume batches from the bus until stopped."""
        self._running = True
        bus.attach_loop(asyncio.get_running_loop())
        logger.info("Inbound listener started")

        while self._running:
            try:
                batch = await asyncio.wait_for(bus.consume_segments(), timeout=1.0)
            except asyncio.TimeoutError:
                continue

            try:
                self.on_segments_arrived(batch)
            except Exception as e:
                logger.error(f"Error processing inbound batch of {len(batch)}: {e}")

    def stop(self) -> None:
        """Stop the listener loop."""
        self._running = False
        logger.info("Inbound listener stopping")
