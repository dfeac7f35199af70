"""CLI entry point for the traffic monitor — standalone-capable.

Examples:
  # Watch a local SOCKS proxy on port 1080, refreshing every 5 s
  trafficlens --proxy-port 1080

  # Three updates as JSON lines, 3 s apart
  trafficlens --proxy-port 7890 --interval 3000 --count 3 --format json
"""

from __future__ import annotations

import argparse
import sys
import threading

from loguru import logger

from trafficlens.exceptions import TrafficLensError
from trafficlens.formatting import format_traffic_table
from trafficlens.models import DEFAULT_UPDATE_INTERVAL_MS, MIN_UPDATE_INTERVAL_MS, TrafficStats
from trafficlens.monitor import TrafficLens
from trafficlens.provider import create_provider, list_providers


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Build argparse parser for the monitor CLI."""
    parser = argparse.ArgumentParser(
        prog="trafficlens",
        description="Monitor network traffic, split into proxied and direct traffic.",
    )
    parser.add_argument(
        "-p",
        "--proxy-port",
        type=int,
        required=True,
        help="Local port of the proxy server",
    )
    parser.add_argument(
        "-i",
        "--interval",
        type=int,
        default=DEFAULT_UPDATE_INTERVAL_MS,
        help=f"Update interval in milliseconds (default: {DEFAULT_UPDATE_INTERVAL_MS}, minimum: {MIN_UPDATE_INTERVAL_MS})",
    )
    parser.add_argument(
        "--provider",
        choices=list_providers(),
        default="psutil",
        help="Stats provider (default: psutil)",
    )
    parser.add_argument(
        "-n",
        "--count",
        type=int,
        default=0,
        help="Exit after N published updates (default: 0, run until interrupted)",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["table", "json"],
        default="table",
        help="Output format (default: table)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose logging",
    )
    return parser.parse_args(args)


def render(stats: TrafficStats, fmt: str) -> str:
    """Render one update in the requested output format."""
    if fmt == "json":
        return stats.model_dump_json()
    return format_traffic_table(stats) + "\n"


def main(args: list[str] | None = None) -> None:
    """Main entry point for the monitor CLI."""
    parsed = parse_args(args)

    if not parsed.verbose:
        logger.remove()
        logger.add(sys.stderr, level="INFO")

    try:
        monitor = TrafficLens(
            proxy_port=parsed.proxy_port,
            update_interval=parsed.interval,
            provider=create_provider(parsed.provider),
        )
    except (TrafficLensError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    done = threading.Event()
    published = 0

    def on_update(stats: TrafficStats) -> None:
        nonlocal published
        print(render(stats, parsed.format), flush=True)
        published += 1
        if parsed.count and published >= parsed.count:
            done.set()

    monitor.subscribe(on_update)
    logger.info(f"Waiting for first update (seed sample after {parsed.interval} ms, first update after two intervals)")

    try:
        monitor.start()
        while not done.wait(0.5):
            pass
    except KeyboardInterrupt:
        print("\nAborted.", file=sys.stderr)
        monitor.stop()
        sys.exit(130)
    monitor.stop()


if __name__ == "__main__":
    main()
