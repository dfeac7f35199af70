"""Shared fixtures for the trafficlens test suite."""

from __future__ import annotations

import pytest
from loguru import logger

from trafficlens.models import ConnectionInfo, InterfaceStats
from trafficlens.provider.base import StatsProvider


class FakeProvider(StatsProvider):
    """In-memory provider; set ``interfaces``/``connections`` or an exception to raise."""

    def __init__(
        self,
        interfaces: list[InterfaceStats] | None = None,
        connections: list[ConnectionInfo] | None = None,
    ) -> None:
        self.interfaces = interfaces or []
        self.connections = connections or []
        self.interface_error: Exception | None = None
        self.connection_error: Exception | None = None
        self.interface_calls = 0
        self.connection_calls = 0

    def get_interface_stats(self) -> list[InterfaceStats]:
        self.interface_calls += 1
        if self.interface_error is not None:
            raise self.interface_error
        return list(self.interfaces)

    def get_connections(self) -> list[ConnectionInfo]:
        self.connection_calls += 1
        if self.connection_error is not None:
            raise self.connection_error
        return list(self.connections)


# ── provider data ─────────────────────────────────────────────────────


@pytest.fixture()
def mock_interfaces():
    """Single 'eth0' interface: up, 1000 B received, 2000 B sent, 100/200 B/s."""
    return [
        InterfaceStats(
            interface_id="eth0",
            oper_state="up",
            rx_bytes=1000,
            tx_bytes=2000,
            rx_per_sec=100,
            tx_per_sec=200,
        ),
    ]


@pytest.fixture()
def mock_connections():
    """Two established connections on local port 1080 via 'eth0'."""
    return [
        ConnectionInfo(
            protocol="tcp",
            local_address="eth0",
            local_port="1080",
            peer_address="remote",
            peer_port="12345",
            state="ESTABLISHED",
            pid=1234,
            process_name="proxy",
        ),
        ConnectionInfo(
            protocol="tcp",
            local_address="eth0",
            local_port="1080",
            peer_address="remote",
            peer_port="12346",
            state="ESTABLISHED",
            pid=1234,
            process_name="proxy",
        ),
    ]


@pytest.fixture()
def fake_provider(mock_interfaces, mock_connections):
    """FakeProvider preloaded with the eth0 / port 1080 data."""
    return FakeProvider(interfaces=mock_interfaces, connections=mock_connections)


@pytest.fixture()
def make_interface():
    """Factory fixture returning an InterfaceStats with customizable fields."""

    def _make(**kwargs):
        defaults = {
            "interface_id": "eth0",
            "oper_state": "up",
            "rx_bytes": 0,
            "tx_bytes": 0,
            "rx_per_sec": 0.0,
            "tx_per_sec": 0.0,
        }
        defaults.update(kwargs)
        return InterfaceStats(**defaults)

    return _make


# ── logging ───────────────────────────────────────────────────────────


@pytest.fixture()
def log_messages():
    """Capture loguru messages emitted by the trafficlens package."""
    messages: list[str] = []
    logger.enable("trafficlens")
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
    logger.disable("trafficlens")


@pytest.fixture()
def make_provider():
    """Factory fixture returning a FakeProvider."""
    return FakeProvider
