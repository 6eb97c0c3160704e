"""Error types raised by the chunk transport."""

from typing import Any


class SmsChunkError(Exception):
    """Base class for all smschunk errors."""


class InvalidInputError(SmsChunkError, ValueError):
    """Raised when a caller passes values that violate codec preconditions."""


class MalformedSegmentError(SmsChunkError, ValueError):
    """Raised when inbound text does not parse into a valid chunk."""

    def __init__(self, message: str, raw: str = ""):
        self.raw = raw
        super().__init__(message)


class SendError(SmsChunkError):
    """Raised when the gateway rejects submission of a segment.

    The originating exception is available as ``__cause__``. ``report`` is
    the SendReport of the aborted send, with the failed and unsent segments
    marked failed.
    """

    def __init__(
        self,
        message: str,
        message_id: str = "",
        index: int | None = None,
        submitted: int = 0,
        report: Any = None,
    ):
        self.message_id = message_id
        self.index = index
        self.submitted = submitted  # segments handed off before the failure
        self.report = report
        super().__init__(message)
