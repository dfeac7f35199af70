"""Stats provider backed by psutil."""

from __future__ import annotations

import socket
import threading
import time
from dataclasses import dataclass
from typing import Callable

import psutil
from loguru import logger

from trafficlens.exceptions import ProviderError
from trafficlens.models import ConnectionInfo, InterfaceStats
from trafficlens.provider.base import StatsProvider
from trafficlens.provider.factory import register_provider


@dataclass
class _RateSample:
    """Baseline reading used to derive per-second rates for one NIC."""

    ts_monotonic: float
    rx_bytes: int
    tx_bytes: int
    rx_per_sec: float | None = None
    tx_per_sec: float | None = None


def _rate(current: int, previous: int, dt: float) -> float:
    # Counter wrapped or NIC was reset
    if current < previous:
        return 0.0
    return (current - previous) / dt


def _protocol_name(family: int, kind: int) -> str:
    proto = "tcp" if kind == socket.SOCK_STREAM else "udp"
    return proto + "6" if family == socket.AF_INET6 else proto


@register_provider("psutil")
class PsutilProvider(StatsProvider):
    """Read interface counters and connections from the local host via psutil.

    psutil only exposes cumulative counters, so per-second rates are derived
    from this provider's previous reading of the same NIC. Readings closer
    together than ``min_rate_window`` seconds re-report the last rate
    without moving the baseline.
    """

    def __init__(
        self,
        min_rate_window: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.min_rate_window = min_rate_window
        self._clock = clock
        self._samples: dict[str, _RateSample] = {}
        self._lock = threading.Lock()

    def get_interface_stats(self) -> list[InterfaceStats]:
        try:
            counters = psutil.net_io_counters(pernic=True)
            if_stats = psutil.net_if_stats()
        except (psutil.Error, OSError) as e:
            raise ProviderError(f"Failed to read interface counters: {e}", source="interfaces") from e

        now = self._clock()
        result: list[InterfaceStats] = []
        with self._lock:
            for name, io in counters.items():
                st = if_stats.get(name)
                if st is None:
                    oper_state = "unknown"
                else:
                    oper_state = "up" if st.isup else "down"

                rx_sec, tx_sec = self._update_rates(name, now, int(io.bytes_recv), int(io.bytes_sent))
                result.append(
                    InterfaceStats(
                        interface_id=name,
                        oper_state=oper_state,
                        rx_bytes=int(io.bytes_recv),
                        tx_bytes=int(io.bytes_sent),
                        rx_per_sec=rx_sec,
                        tx_per_sec=tx_sec,
                    )
                )
        return result

    def _update_rates(self, name: str, now: float, rx_bytes: int, tx_bytes: int) -> tuple[float | None, float | None]:
        """Return (rx_per_sec, tx_per_sec) for *name*, advancing the baseline when due."""
        prev = self._samples.get(name)
        if prev is None:
            self._samples[name] = _RateSample(now, rx_bytes, tx_bytes)
            return None, None

        dt = now - prev.ts_monotonic
        if dt < self.min_rate_window or dt <= 0:
            return prev.rx_per_sec, prev.tx_per_sec

        rx_sec = _rate(rx_bytes, prev.rx_bytes, dt)
        tx_sec = _rate(tx_bytes, prev.tx_bytes, dt)
        self._samples[name] = _RateSample(now, rx_bytes, tx_bytes, rx_sec, tx_sec)
        return rx_sec, tx_sec

    def get_connections(self) -> list[ConnectionInfo]:
        try:
            conns = psutil.net_connections(kind="inet")
        except (psutil.Error, OSError) as e:
            raise ProviderError(f"Failed to read connection table: {e}", source="connections") from e

        names: dict[int, str] = {}
        result: list[ConnectionInfo] = []
        for c in conns:
            laddr = c.laddr or ()
            raddr = c.raddr or ()
            result.append(
                ConnectionInfo(
                    protocol=_protocol_name(c.family, c.type),
                    local_address=str(laddr[0]) if laddr else "",
                    local_port=str(laddr[1]) if laddr else "",
                    peer_address=str(raddr[0]) if raddr else "",
                    peer_port=str(raddr[1]) if raddr else "",
                    state=c.status or "",
                    pid=c.pid,
                    process_name=self._process_name(c.pid, names),
                )
            )
        return result

    @staticmethod
    def _process_name(pid: int | None, cache: dict[int, str]) -> str:
        if pid is None:
            return ""
        if pid not in cache:
            try:
                cache[pid] = psutil.Process(pid).name()
            except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess) as e:
                logger.debug(f"Cannot resolve process name for pid {pid}: {e}")
                cache[pid] = ""
        return cache[pid]
