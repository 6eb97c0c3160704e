"""Event types for the message bus."""

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

# Decoded chunk plus sender address.
CHUNK_RECEIVED = "SMS_CHUNK_RECEIVED"
# Plain, un-chunked text (only published when forwarding is enabled).
PLAIN_RECEIVED = "SMS_RECEIVED"


@dataclass
class InboundSegment:
    """Raw text segment handed over by the platform."""

    source_address: str   # Sender phone number
    raw_text: str         # Message body as received
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class BusEvent:
    """Named event published to the application."""

    name: str
    payload: str          # JSON document
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def data(self) -> Any:
        """Decode the JSON payload."""
        return json.loads(self.payload)
