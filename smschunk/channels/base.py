"""Base class for SMS gateways."""

from abc import ABC, abstractmethod
from typing import Callable, Iterable

from loguru import logger

from smschunk.bus import InboundSegment, MessageBus

StatusCallback = Callable[[bool], None]


class GatewayError(Exception):
    """Raised when a gateway cannot submit a message."""


class BaseGateway(ABC):
    """Abstract base class for the platform send/receive primitive."""

    name: str = "base"

    def __init__(self):
        self.bus: MessageBus | None = None

    def attach(self, bus: MessageBus) -> None:
        """Route inbound batches to ``bus``."""
        self.bus = bus

    @abstractmethod
    def submit(
        self,
        peer_address: str,
        body: str,
        on_status: StatusCallback | None = None,
    ) -> None:
        """
        Submit one text message for sending.

        Returns once the platform accepted the message; it does not wait
        for delivery. If ``on_status`` is given, the gateway may call it
        later, from any thread, with True on delivery or False on failure.

        Raises:
            GatewayError: If the platform rejected the submission.
        """
        pass

    def _deliver(self, segments: Iterable[InboundSegment]) -> None:
        """Helper to hand a batch of inbound segments to the bus."""
        if self.bus is None:
            logger.warning(f"{self.name}: inbound batch dropped, no bus attached")
            return
        self.bus.publish_segments_threadsafe(segments)
