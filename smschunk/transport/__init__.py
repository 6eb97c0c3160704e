"""Outbound and inbound halves of the chunk transport."""

from smschunk.transport.inbound import InboundListener
from smschunk.transport.outbound import OutboundTransport, SegmentStatus, SendReport

__all__ = ["InboundListener", "OutboundTransport", "SegmentStatus", "SendReport"]
