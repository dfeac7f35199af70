"""Sampler — per-tick captures of interface counters and the proxy view."""

from __future__ import annotations

import concurrent.futures
import time

from loguru import logger

from trafficlens.models import (
    InterfaceCapture,
    InterfaceStats,
    NetworkMetrics,
    NetworkSnapshot,
    ProxyView,
)
from trafficlens.provider.base import StatsProvider


def _now_ms() -> int:
    return int(time.time() * 1000)


def select_primary_interface(interfaces: list[InterfaceStats]) -> InterfaceStats | None:
    """Return the first interface that is up and has received at least one byte."""
    for iface in interfaces:
        if iface.oper_state == "up" and (iface.rx_bytes or 0) > 0:
            return iface
    return None


class Sampler:
    """Query a stats provider once per tick without ever raising.

    Provider failures are logged and turned into degraded results so the
    monitoring loop keeps running.
    """

    def __init__(self, provider: StatsProvider) -> None:
        self.provider = provider

    def capture_interface_snapshot(self) -> InterfaceCapture:
        """Snapshot the primary interface, or report why there is none."""
        try:
            interfaces = self.provider.get_interface_stats()
        except Exception as e:
            logger.error(f"Error getting network stats: {e}")
            return InterfaceCapture.unavailable(f"provider error: {e}")

        primary = select_primary_interface(interfaces)
        if primary is None:
            logger.debug(f"No active interface among {len(interfaces)} reported")
            return InterfaceCapture.unavailable("no active interface")

        metrics = NetworkMetrics.from_interface(primary)
        return InterfaceCapture.ok(NetworkSnapshot(**metrics.model_dump(), timestamp=_now_ms()))

    def capture_proxy_view(self, proxy_port: int) -> ProxyView:
        """Count connections on *proxy_port* and find the interface they use."""
        try:
            connections = self.provider.get_connections()
            interfaces = self.provider.get_interface_stats()
        except Exception as e:
            logger.error(f"Error checking proxy connections: {e}")
            return ProxyView()

        port = str(proxy_port)
        proxy_conns = [c for c in connections if c.local_port == port]

        proxy_iface = next(
            (i for i in interfaces if any(i.interface_id in c.local_address for c in proxy_conns)),
            None,
        )
        if proxy_iface is None and proxy_conns:
            logger.debug(f"{len(proxy_conns)} connection(s) on port {port} but no matching interface")

        return ProxyView(
            active_connections=len(proxy_conns),
            stats=NetworkMetrics.from_interface(proxy_iface) if proxy_iface is not None else None,
        )

    def capture(self, proxy_port: int) -> tuple[InterfaceCapture, ProxyView]:
        """Run both captures concurrently and return once both have finished."""
        with concurrent.futures.ThreadPoolExecutor(max_workers=2, thread_name_prefix="trafficlens-sample") as pool:
            snapshot_future = pool.submit(self.capture_interface_snapshot)
            proxy_future = pool.submit(self.capture_proxy_view, proxy_port)
            return snapshot_future.result(), proxy_future.result()
