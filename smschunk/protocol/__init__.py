"""Wire protocol: chunk codec and error types."""

from smschunk.protocol.codec import (
    DELIMITER,
    Chunk,
    decode,
    encode,
    new_message_id,
    split_payload,
)
from smschunk.protocol.errors import (
    InvalidInputError,
    MalformedSegmentError,
    SendError,
    SmsChunkError,
)

__all__ = [
    "DELIMITER",
    "Chunk",
    "decode",
    "encode",
    "new_message_id",
    "split_payload",
    "InvalidInputError",
    "MalformedSegmentError",
    "SendError",
    "SmsChunkError",
]
