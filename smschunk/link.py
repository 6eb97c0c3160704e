"""SMS link - the assembled transport for one device."""

from loguru import logger

from smschunk.bus import EventBridge, MessageBus
from smschunk.channels.base import BaseGateway
from smschunk.config.schema import Config
from smschunk.protocol.codec import new_message_id, split_payload
from smschunk.transport import InboundListener, OutboundTransport, SendReport


class SmsLink:
    """
    Wires a gateway to the chunk transport.

    Inbound: gateway → bus segment queue → listener → bridge → bus events.
    Outbound: payload → fixed-size chunks → transport → gateway.
    """

    def __init__(
        self,
        gateway: BaseGateway,
        bus: MessageBus | None = None,
        config: Config | None = None,
    ):
        self.config = config or Config()
        self.bus = bus or MessageBus()
        self.gateway = gateway
        self.gateway.attach(self.bus)

        self.bridge = EventBridge()
        self.bridge.bind(self.bus)
        self.listener = InboundListener(
            self.bridge,
            forward_unchunked=self.config.receiver.forward_unchunked,
        )
        self.transport = OutboundTransport(gateway)

    def send_payload(
        self,
        peer_address: str,
        payload: str,
        message_id: str | None = None,
    ) -> SendReport:
        """Split ``payload`` into chunks and send them as one message."""
        message_id = message_id or new_message_id()
        chunks = split_payload(payload, self.config.transport.chunk_size)
        logger.info(f"Sending {message_id} to {peer_address} in {len(chunks)} SMS")
        return self.transport.send(peer_address, message_id, chunks)

    async def run(self) -> None:
        """Process inbound segments until stopped."""
        await self.listener.run(self.bus)

    def stop(self) -> None:
        self.listener.stop()
