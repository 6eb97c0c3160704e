"""Outbound transport - submits encoded chunks through a gateway."""

import asyncio
import threading
from concurrent.futures import Future
from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence

from loguru import logger

from smschunk.channels.base import BaseGateway, StatusCallback
from smschunk.protocol.codec import encode
from smschunk.protocol.errors import InvalidInputError, SendError


class SegmentStatus(str, Enum):
    """Delivery state of one submitted segment."""

    PENDING = "pending"
    DELIVERED = "delivered"
    FAILED = "failed"


@dataclass
class SendReport:
    """Per-segment outcome of one send operation.

    ``delivery`` resolves once submission has finished and every segment
    has settled: True if all were delivered, False if any failed. It stays
    pending for gateways that never report delivery.
    """

    message_id: str
    peer_address: str
    statuses: list[SegmentStatus]
    delivery: Future = field(default_factory=Future)
    _lock: threading.RLock = field(default_factory=threading.RLock, init=False, repr=False)
    _sealed: bool = field(default=False, init=False, repr=False)

    @classmethod
    def create(cls, message_id: str, peer_address: str, total: int) -> "SendReport":
        return cls(message_id, peer_address, [SegmentStatus.PENDING] * total)

    @property
    def total(self) -> int:
        return len(self.statuses)

    @property
    def delivered_count(self) -> int:
        with self._lock:
            return sum(1 for s in self.statuses if s == SegmentStatus.DELIVERED)

    @property
    def failed_indices(self) -> list[int]:
        with self._lock:
            return [i for i, s in enumerate(self.statuses) if s == SegmentStatus.FAILED]

    @property
    def settled(self) -> bool:
        with self._lock:
            return SegmentStatus.PENDING not in self.statuses

    def record(self, index: int, delivered: bool) -> None:
        """Record the delivery outcome of one segment. Later reports are ignored."""
        with self._lock:
            if self.statuses[index] != SegmentStatus.PENDING:
                return
            self.statuses[index] = SegmentStatus.DELIVERED if delivered else SegmentStatus.FAILED
            self._resolve()

    def fail_from(self, index: int) -> None:
        """Mark ``index`` and every later segment failed, overriding any report."""
        with self._lock:
            for i in range(index, self.total):
                self.statuses[i] = SegmentStatus.FAILED

    def seal(self) -> None:
        """Mark submission as finished so the delivery result may resolve."""
        with self._lock:
            self._sealed = True
            self._resolve()

    def _resolve(self) -> None:
        # caller holds the lock
        if not self._sealed or SegmentStatus.PENDING in self.statuses:
            return
        if not self.delivery.done():
            self.delivery.set_result(SegmentStatus.FAILED not in self.statuses)

    def status_callback(self, index: int) -> StatusCallback:
        return lambda delivered: self.record(index, delivered)

    async def wait(self, timeout: float | None = None) -> bool:
        """Wait until every segment settled; True if all were delivered."""
        future = asyncio.wrap_future(self.delivery)
        return await asyncio.wait_for(asyncio.shield(future), timeout=timeout)


class OutboundTransport:
    """
    Sends a pre-chunked message through a gateway.

    Segments are submitted one by one in ascending index order. The call
    returns as soon as every segment was accepted for sending; delivery is
    tracked on the returned report but never awaited here. Nothing is
    retried.
    """

    def __init__(self, gateway: BaseGateway):
        self.gateway = gateway

    def send(self, peer_address: str, message_id: str, chunks: Sequence[str]) -> SendReport:
        """
        Send ``chunks`` to ``peer_address`` as one logical message.

        Args:
            peer_address: Destination phone number.
            message_id: Caller-chosen ID, unique among in-flight messages.
            chunks: Ordered payload pieces.

        Returns:
            A SendReport tracking per-segment delivery.

        Raises:
            InvalidInputError: If the arguments cannot be encoded. Nothing
                is submitted in that case.
            SendError: If the gateway rejected a segment. Later segments
                are not submitted.
        """
        if not peer_address:
            raise InvalidInputError("peer_address must not be empty")
        if not chunks:
            raise InvalidInputError("a message needs at least one chunk")

        total = len(chunks)
        bodies = [encode(message_id, total, i, chunk) for i, chunk in enumerate(chunks)]
        report = SendReport.create(message_id, peer_address, total)

        for index, body in enumerate(bodies):
            try:
                self.gateway.submit(peer_address, body, report.status_callback(index))
            except Exception as e:
                report.fail_from(index)
                report.seal()
                logger.error(
                    f"Send {message_id} to {peer_address} failed at segment {index + 1}/{total}: {e}"
                )
                raise SendError(
                    f"failed to submit segment {index} of {message_id}: {e}",
                    message_id=message_id,
                    index=index,
                    submitted=index,
                    report=report,
                ) from e
            logger.debug(f"Submitted {message_id} segment {index + 1}/{total} ({len(body)} chars)")

        report.seal()
        logger.info(f"Submitted {total} segment(s) of {message_id} to {peer_address}")
        return report
