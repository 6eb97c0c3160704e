"""Chunk codec - converts chunks to and from SMS wire segments.

A segment is ``<message_id>|<index>|<total>|<payload>``. Only the first three
fields are header; everything after the third delimiter is payload, so the
payload may itself contain ``|``.
"""

import re
import uuid
from dataclasses import asdict, dataclass
from typing import Any

from smschunk.protocol.errors import InvalidInputError, MalformedSegmentError

DELIMITER = "|"
DEFAULT_CHUNK_SIZE = 1200

_NUMBER = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class Chunk:
    """One addressable piece of a logical message."""

    message_id: str
    index: int
    total: int
    payload: str

    def encode(self) -> str:
        """Encode this chunk as a wire segment."""
        return encode(self.message_id, self.total, self.index, self.payload)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def encode(message_id: str, total: int, index: int, payload: str) -> str:
    """
    Encode one chunk into its wire segment.

    Args:
        message_id: Correlation key shared by every chunk of a message.
        total: Number of chunks in the message.
        index: Zero-based position of this chunk.
        payload: Chunk body. May contain the delimiter.

    Returns:
        The segment text.

    Raises:
        InvalidInputError: If the message ID is empty or contains the
            delimiter, or if index/total are out of range.
    """
    if not message_id:
        raise InvalidInputError("message_id must not be empty")
    if DELIMITER in message_id:
        raise InvalidInputError(f"message_id must not contain {DELIMITER!r}: {message_id!r}")
    if total < 1:
        raise InvalidInputError(f"total must be at least 1, got {total}")
    if not 0 <= index < total:
        raise InvalidInputError(f"index {index} out of range for total {total}")

    return DELIMITER.join((message_id, str(index), str(total), payload))


def _parse_count(field: str, name: str, raw: str) -> int:
    if not _NUMBER.fullmatch(field):
        raise MalformedSegmentError(f"{name} is not a non-negative integer: {field!r}", raw)
    return int(field)


def decode(raw: str) -> Chunk:
    """
    Decode a wire segment into a Chunk.

    Raises:
        MalformedSegmentError: If the header is missing or invalid.
    """
    parts = raw.split(DELIMITER, 3)
    if len(parts) < 3:
        raise MalformedSegmentError("segment has fewer than three header fields", raw)

    message_id, index_field, total_field = parts[:3]
    payload = parts[3] if len(parts) == 4 else ""

    if not message_id:
        raise MalformedSegmentError("segment has an empty message ID", raw)

    index = _parse_count(index_field, "index", raw)
    total = _parse_count(total_field, "total", raw)
    if total == 0:
        raise MalformedSegmentError("total must be at least 1", raw)
    if index >= total:
        raise MalformedSegmentError(f"index {index} is not below total {total}", raw)

    return Chunk(message_id=message_id, index=index, total=total, payload=payload)


def split_payload(data: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> list[str]:
    """Slice a payload into pieces of at most ``chunk_size`` characters.

    An empty payload still yields a single empty piece.
    """
    if chunk_size < 1:
        raise InvalidInputError(f"chunk_size must be at least 1, got {chunk_size}")
    if not data:
        return [""]
    return [data[i:i + chunk_size] for i in range(0, len(data), chunk_size)]


def new_message_id() -> str:
    """Generate a short random message ID."""
    return uuid.uuid4().hex[:12]
