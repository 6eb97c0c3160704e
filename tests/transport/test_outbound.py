"""Tests for the outbound transport."""

import asyncio
import inspect

import pytest

from conftest import RecordingGateway
from smschunk.channels import GatewayError
from smschunk.protocol import InvalidInputError, SendError
from smschunk.transport import OutboundTransport, SegmentStatus, SendReport


class TestSend:
    """Tests for OutboundTransport.send()."""

    def test_two_chunk_message(self, gateway):
        transport = OutboundTransport(gateway)
        transport.send("+15551234567", "m1", ["first", "second"])

        assert gateway.calls == [
            ("+15551234567", "m1|0|2|first"),
            ("+15551234567", "m1|1|2|second"),
        ]

    def test_submission_order_is_ascending(self, gateway):
        chunks = [f"part{i}" for i in range(12)]
        OutboundTransport(gateway).send("+1555", "order", chunks)

        bodies = [body for _, body in gateway.calls]
        assert bodies == [f"order|{i}|12|part{i}" for i in range(12)]

    def test_returns_pending_report(self, gateway):
        report = OutboundTransport(gateway).send("+1555", "m1", ["a", "b", "c"])

        assert report.message_id == "m1"
        assert report.peer_address == "+1555"
        assert report.total == 3
        assert report.statuses == [SegmentStatus.PENDING] * 3
        assert not report.settled
        assert not report.delivery.done()

    def test_empty_chunks_rejected(self, gateway):
        with pytest.raises(InvalidInputError):
            OutboundTransport(gateway).send("+1555", "m1", [])
        assert gateway.calls == []

    def test_empty_peer_rejected(self, gateway):
        with pytest.raises(InvalidInputError):
            OutboundTransport(gateway).send("", "m1", ["a"])

    def test_invalid_message_id_submits_nothing(self, gateway):
        with pytest.raises(InvalidInputError):
            OutboundTransport(gateway).send("+1555", "", ["a", "b"])
        assert gateway.calls == []

    def test_payload_may_contain_delimiter(self, gateway):
        OutboundTransport(gateway).send("+1555", "m1", ["a|b"])
        assert gateway.calls == [("+1555", "m1|0|1|a|b")]


class TestSendFailure:
    """Synchronous submission failures."""

    def test_stops_at_failing_segment(self):
        gateway = RecordingGateway(fail_at=1)

        with pytest.raises(SendError) as exc_info:
            OutboundTransport(gateway).send("+1555", "m1", ["a", "b", "c"])

        assert len(gateway.calls) == 1
        error = exc_info.value
        assert error.message_id == "m1"
        assert error.index == 1
        assert error.submitted == 1

    def test_keeps_original_cause(self):
        gateway = RecordingGateway(fail_at=0)

        with pytest.raises(SendError) as exc_info:
            OutboundTransport(gateway).send("+1555", "m1", ["a"])

        assert isinstance(exc_info.value.__cause__, GatewayError)
        assert "no signal" in str(exc_info.value)

    def test_any_exception_becomes_send_error(self):
        class BrokenGateway(RecordingGateway):
            def submit(self, peer_address, body, on_status=None):
                raise RuntimeError("radio off")

        with pytest.raises(SendError) as exc_info:
            OutboundTransport(BrokenGateway()).send("+1555", "m1", ["a"])
        assert isinstance(exc_info.value.__cause__, RuntimeError)


    def test_status_reported_before_failure_is_overridden(self):
        class ReportThenFail(RecordingGateway):
            def submit(self, peer_address, body, on_status=None):
                super().submit(peer_address, body, on_status)
                on_status(True)
                if len(self.calls) == 2:
                    raise GatewayError("rejected after report")

        with pytest.raises(SendError) as exc_info:
            OutboundTransport(ReportThenFail()).send("+1555", "m1", ["a", "b", "c"])

        report = exc_info.value.report
        assert report.statuses == [
            SegmentStatus.DELIVERED,
            SegmentStatus.FAILED,
            SegmentStatus.FAILED,
        ]
        assert report.delivery.result() is False

    def test_send_error_carries_report(self):
        gateway = RecordingGateway(fail_at=2)

        with pytest.raises(SendError) as exc_info:
            OutboundTransport(gateway).send("+1555", "m1", ["a", "b", "c"])

        report = exc_info.value.report
        assert report.message_id == "m1"
        assert report.failed_indices == [2]
        assert not report.delivery.done()

        gateway.callbacks[0](True)
        gateway.callbacks[1](True)

        assert report.delivered_count == 2
        assert report.delivery.result() is False


class TestDeliveryTracking:
    """Delivery reports arriving after send() returned."""

    def test_all_delivered(self, gateway):
        report = OutboundTransport(gateway).send("+1555", "m1", ["a", "b"])

        gateway.callbacks[1](True)
        assert not report.delivery.done()
        gateway.callbacks[0](True)

        assert report.settled
        assert report.delivered_count == 2
        assert report.delivery.result() is True

    def test_one_failed(self, gateway):
        report = OutboundTransport(gateway).send("+1555", "m1", ["a", "b"])

        gateway.callbacks[0](True)
        gateway.callbacks[1](False)

        assert report.failed_indices == [1]
        assert report.delivery.result() is False

    def test_first_report_wins(self, gateway):
        report = OutboundTransport(gateway).send("+1555", "m1", ["a"])

        gateway.callbacks[0](False)
        gateway.callbacks[0](True)

        assert report.statuses == [SegmentStatus.FAILED]
        assert report.delivery.result() is False

    async def test_wait(self, gateway):
        report = OutboundTransport(gateway).send("+1555", "m1", ["a", "b"])

        loop = asyncio.get_running_loop()
        loop.call_later(0.01, gateway.callbacks[0], True)
        loop.call_later(0.02, gateway.callbacks[1], True)

        assert await report.wait(timeout=1.0) is True

    async def test_wait_timeout(self, gateway):
        report = OutboundTransport(gateway).send("+1555", "m1", ["a"])

        with pytest.raises(asyncio.TimeoutError):
            await report.wait(timeout=0.05)

    async def test_report_from_other_thread(self, gateway):
        report = OutboundTransport(gateway).send("+1555", "m1", ["a"])

        await asyncio.to_thread(gateway.callbacks[0], True)

        assert await report.wait(timeout=1.0) is True


class TestSendReport:
    def test_create(self):
        report = SendReport.create("m1", "+1555", 2)
        assert report.statuses == [SegmentStatus.PENDING, SegmentStatus.PENDING]
        assert report.failed_indices == []

    def test_internal_state_not_in_constructor(self):
        params = inspect.signature(SendReport).parameters
        assert "_lock" not in params
        assert "_sealed" not in params

    def test_unsealed_report_does_not_resolve(self):
        report = SendReport.create("m1", "+1555", 1)

        report.record(0, True)
        assert not report.delivery.done()

        report.seal()
        assert report.delivery.result() is True

    def test_status_values(self):
        assert SegmentStatus.PENDING == "pending"
        assert SegmentStatus.DELIVERED == "delivered"
        assert SegmentStatus.FAILED == "failed"
