"""SMS gateway implementations."""

from smschunk.channels.base import BaseGateway, GatewayError, StatusCallback
from smschunk.channels.loopback import LoopbackGateway

__all__ = ["BaseGateway", "GatewayError", "LoopbackGateway", "StatusCallback"]
