"""Event bus bridge - forwards decoded events to the bound subscriber."""

import json
import threading
from typing import Any, Protocol

from loguru import logger


class EventSubscriber(Protocol):
    """Anything that can receive named events, e.g. a MessageBus."""

    def emit(self, event_name: str, payload: str) -> None: ...


class EventBridge:
    """
    Publish surface bound to at most one subscriber at a time.

    Publishing while nothing is bound is a silent no-op: during startup the
    host application may not be ready yet, and the receive path must not
    fail because of it. Binding a new subscriber replaces the old one
    without draining anything already published.
    """

    def __init__(self):
        self._subscriber: EventSubscriber | None = None
        self._lock = threading.Lock()

    def bind(self, subscriber: EventSubscriber) -> None:
        """Bind a subscriber, replacing any previous one."""
        with self._lock:
            self._subscriber = subscriber

    def unbind(self) -> None:
        with self._lock:
            self._subscriber = None

    @property
    def is_bound(self) -> bool:
        with self._lock:
            return self._subscriber is not None

    def publish(self, event_name: str, payload: str | dict[str, Any]) -> bool:
        """
        Forward an event to the bound subscriber.

        Args:
            event_name: Event name.
            payload: JSON text, or a dict that will be serialized to JSON.

        Returns:
            True if a subscriber received the event.
        """
        with self._lock:
            subscriber = self._subscriber
        if subscriber is None:
            return False

        if not isinstance(payload, str):
            payload = json.dumps(payload)

        try:
            subscriber.emit(event_name, payload)
        except Exception as e:
            logger.error(f"Subscriber failed to handle {event_name}: {e}")
            return False
        return True
