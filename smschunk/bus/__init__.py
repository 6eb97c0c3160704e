"""Message bus and event bridge."""

from smschunk.bus.bridge import EventBridge, EventSubscriber
from smschunk.bus.events import (
    CHUNK_RECEIVED,
    PLAIN_RECEIVED,
    BusEvent,
    InboundSegment,
)
from smschunk.bus.queue import MessageBus

__all__ = [
    "CHUNK_RECEIVED",
    "PLAIN_RECEIVED",
    "BusEvent",
    "EventBridge",
    "EventSubscriber",
    "InboundSegment",
    "MessageBus",
]
