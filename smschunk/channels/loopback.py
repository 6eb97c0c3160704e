"""In-process loopback gateway."""

from loguru import logger

from smschunk.bus import InboundSegment
from smschunk.channels.base import BaseGateway, GatewayError, StatusCallback


class LoopbackGateway(BaseGateway):
    """
    Gateway that delivers straight to a paired gateway in the same process.

    Each submitted body arrives at the peer as a one-segment batch. The
    failure knobs let callers exercise the error paths of the transport.
    """

    name = "loopback"

    def __init__(
        self,
        address: str,
        fail_after: int | None = None,
        report_failure: bool = False,
    ):
        super().__init__()
        self.address = address
        self.fail_after = fail_after          # reject submissions after N successes
        self.report_failure = report_failure  # report every delivery as failed
        self.peer: "LoopbackGateway | None" = None
        self.submitted: list[tuple[str, str]] = []

    @classmethod
    def pair(cls, a: str, b: str) -> tuple["LoopbackGateway", "LoopbackGateway"]:
        """Create two gateways wired to each other."""
        first, second = cls(a), cls(b)
        first.peer, second.peer = second, first
        return first, second

    def submit(
        self,
        peer_address: str,
        body: str,
        on_status: StatusCallback | None = None,
    ) -> None:
        if self.fail_after is not None and len(self.submitted) >= self.fail_after:
            raise GatewayError(f"no service: cannot reach {peer_address}")
        if self.peer is None or self.peer.address != peer_address:
            raise GatewayError(f"unknown address: {peer_address}")

        self.submitted.append((peer_address, body))
        logger.debug(f"loopback {self.address} -> {peer_address}: {len(body)} chars")

        delivered = not self.report_failure
        if delivered:
            self.peer._deliver([InboundSegment(source_address=self.address, raw_text=body)])
        if on_status:
            on_status(delivered)
