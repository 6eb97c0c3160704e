"""Pytest fixtures for smschunk tests."""

import tempfile
from pathlib import Path

import pytest

from smschunk.bus import EventBridge, MessageBus
from smschunk.channels import BaseGateway, GatewayError


class RecordingGateway(BaseGateway):
    """Gateway double that records submissions and keeps status callbacks."""

    name = "recording"

    def __init__(self, fail_at: int | None = None):
        super().__init__()
        self.fail_at = fail_at
        self.calls: list[tuple[str, str]] = []
        self.callbacks = []

    def submit(self, peer_address, body, on_status=None):
        if self.fail_at is not None and len(self.calls) == self.fail_at:
            raise GatewayError("no signal")
        self.calls.append((peer_address, body))
        self.callbacks.append(on_status)


class RecordingSubscriber:
    """Subscriber double for the event bridge."""

    def __init__(self):
        self.events: list[tuple[str, str]] = []

    def emit(self, event_name, payload):
        self.events.append((event_name, payload))


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def gateway():
    return RecordingGateway()


@pytest.fixture
def subscriber():
    return RecordingSubscriber()


@pytest.fixture
def bridge(subscriber):
    """Bridge already bound to a recording subscriber."""
    bridge = EventBridge()
    bridge.bind(subscriber)
    return bridge


@pytest.fixture
def bus():
    return MessageBus()
