"""Human-readable formatting of byte counts, rates and traffic stats."""

from __future__ import annotations

from tabulate import tabulate

from trafficlens.models import TrafficStats

_UNITS = ("B", "KB", "MB", "GB")


def format_bytes(num_bytes: float) -> str:
    """Format a byte count with binary prefixes, e.g. ``1024 -> "1.00 KB"``.

    Scaling stops at GB; larger values are shown as a GB count.
    """
    size = float(num_bytes)
    unit_index = 0
    while size >= 1024 and unit_index < len(_UNITS) - 1:
        size /= 1024
        unit_index += 1
    return f"{size:.2f} {_UNITS[unit_index]}"


def format_speed(bytes_per_sec: float) -> str:
    """Format a rate in bytes per second, e.g. ``1024 -> "1.00 KB/s"``."""
    return f"{format_bytes(bytes_per_sec)}/s"


def format_traffic_table(stats: TrafficStats) -> str:
    """Render a TrafficStats as a plain-text table (one row per traffic class)."""
    p = stats.proxied
    d = stats.direct
    rows = [
        [
            "proxied",
            format_bytes(p.upload),
            format_bytes(p.download),
            format_speed(p.upload_speed),
            format_speed(p.download_speed),
            p.active_connections,
        ],
        [
            "direct",
            format_bytes(d.upload),
            format_bytes(d.download),
            format_speed(d.upload_speed),
            format_speed(d.download_speed),
            "-",
        ],
    ]
    headers = ["Traffic", "Upload", "Download", "Up speed", "Down speed", "Connections"]
    return tabulate(rows, headers=headers, tablefmt="simple", disable_numparse=True)
