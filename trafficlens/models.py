"""Pydantic models for traffic samples, provider records and monitor configuration."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator

MIN_UPDATE_INTERVAL_MS = 3000
DEFAULT_UPDATE_INTERVAL_MS = 5000


# ── Provider records ──────────────────────────────────────────────────


class InterfaceStats(BaseModel):
    """Counters for one network interface as reported by a stats provider."""

    interface_id: str
    oper_state: str = "unknown"  # "up", "down", "unknown", ...
    rx_bytes: int = 0
    tx_bytes: int = 0
    rx_per_sec: float | None = None
    tx_per_sec: float | None = None


class ConnectionInfo(BaseModel):
    """One row of the host connection table."""

    protocol: str = ""
    local_address: str = ""
    local_port: str = ""
    peer_address: str = ""
    peer_port: str = ""
    state: str = ""
    pid: int | None = None
    process_name: str = ""


# ── Traffic metrics ───────────────────────────────────────────────────


class VolumeMetrics(BaseModel):
    """Cumulative byte counters."""

    upload: int = 0
    download: int = 0


class SpeedMetrics(BaseModel):
    """Rates in bytes per second."""

    upload_speed: float = 0
    download_speed: float = 0


class NetworkMetrics(VolumeMetrics, SpeedMetrics):
    """Volume and speed for one slice of traffic."""

    @classmethod
    def from_interface(cls, iface: InterfaceStats) -> NetworkMetrics:
        """Project provider counters onto upload (tx) / download (rx) metrics."""
        return cls(
            upload=iface.tx_bytes or 0,
            download=iface.rx_bytes or 0,
            upload_speed=iface.tx_per_sec or 0,
            download_speed=iface.rx_per_sec or 0,
        )

    def __sub__(self, other: NetworkMetrics) -> NetworkMetrics:
        # Not clamped: a negative result means the subtrahend was not a subset.
        return NetworkMetrics(
            upload=self.upload - other.upload,
            download=self.download - other.download,
            upload_speed=self.upload_speed - other.upload_speed,
            download_speed=self.download_speed - other.download_speed,
        )


class NetworkSnapshot(NetworkMetrics):
    """Counters of the primary interface at one instant."""

    timestamp: int  # milliseconds since the epoch


class ProxyMetrics(NetworkMetrics):
    """Traffic attributed to the configured proxy port."""

    active_connections: int = 0


class TrafficStats(BaseModel):
    """Proxied / direct split published on every tick."""

    proxied: ProxyMetrics = Field(default_factory=ProxyMetrics)
    direct: NetworkMetrics = Field(default_factory=NetworkMetrics)
    timestamp: int = 0


# ── Capture results ───────────────────────────────────────────────────


class CaptureStatus(str, Enum):
    OK = "ok"
    UNAVAILABLE = "unavailable"


class InterfaceCapture(BaseModel):
    """Outcome of one interface capture: a snapshot, or the reason there is none."""

    status: CaptureStatus
    snapshot: NetworkSnapshot | None = None
    reason: str = ""

    @classmethod
    def ok(cls, snapshot: NetworkSnapshot) -> InterfaceCapture:
        return cls(status=CaptureStatus.OK, snapshot=snapshot)

    @classmethod
    def unavailable(cls, reason: str) -> InterfaceCapture:
        return cls(status=CaptureStatus.UNAVAILABLE, reason=reason)

    @property
    def is_ok(self) -> bool:
        return self.status is CaptureStatus.OK and self.snapshot is not None


class ProxyView(BaseModel):
    """Connections on the proxy port and the counters of the interface they use."""

    active_connections: int = 0
    stats: NetworkMetrics | None = None


# ── Configuration ─────────────────────────────────────────────────────


class MonitorConfig(BaseModel):
    """Construction parameters of a monitor."""

    proxy_port: int = Field(gt=0, le=65535)
    update_interval: int = DEFAULT_UPDATE_INTERVAL_MS  # milliseconds

    @field_validator("update_interval")
    @classmethod
    def _check_interval(cls, value: int) -> int:
        if value < MIN_UPDATE_INTERVAL_MS:
            raise ValueError(f"Update interval must be at least {MIN_UPDATE_INTERVAL_MS} ms (got {value} ms)")
        return value

    @property
    def interval_seconds(self) -> float:
        return self.update_interval / 1000.0
