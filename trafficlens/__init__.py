"""Proxy-aware network traffic monitor.

Periodically samples host interface counters and the connection table,
splits traffic attributable to a local proxy port from direct traffic and
publishes the resulting rates to subscribers.
"""

__version__ = "0.0.1"

import os
import sys
from typing import Any, Callable, Dict

from loguru import logger as glogger

glogger.disable(__name__)


def _loguru_skiplog_filter(record: dict) -> bool:  # type: ignore[type-arg]
    """Filter function to hide records with ``extra['skiplog']`` set."""
    return not record.get("extra", {}).get("skiplog", False)


def configure_logging(
    loguru_filter: Callable[[Dict[str, Any]], bool] = _loguru_skiplog_filter,
) -> None:
    """Configure a default ``loguru`` sink with a convenient format and filter."""
    os.environ["LOGURU_LEVEL"] = os.getenv("LOGURU_LEVEL", "DEBUG")
    glogger.remove()
    logger_fmt: str = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{module}</cyan>::<cyan>{extra[classname]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
    )
    glogger.add(sys.stderr, level=os.getenv("LOGURU_LEVEL"), format=logger_fmt, filter=loguru_filter)  # type: ignore[arg-type]
    glogger.configure(extra={"classname": "None", "skiplog": False})
    glogger.enable(__name__)


from trafficlens.exceptions import (  # noqa: E402
    ConfigurationError,
    MonitorAlreadyRunningError,
    MonitorStateError,
    ProviderError,
    TrafficLensError,
)
from trafficlens.formatting import format_bytes, format_speed, format_traffic_table  # noqa: E402
from trafficlens.models import (  # noqa: E402
    MonitorConfig,
    NetworkMetrics,
    ProxyMetrics,
    SpeedMetrics,
    TrafficStats,
)
from trafficlens.monitor import TrafficLens  # noqa: E402
from trafficlens.provider import StatsProvider, create_provider, list_providers  # noqa: E402

__all__ = [
    "glogger",
    "configure_logging",
    "TrafficLens",
    "MonitorConfig",
    "NetworkMetrics",
    "ProxyMetrics",
    "SpeedMetrics",
    "TrafficStats",
    "StatsProvider",
    "create_provider",
    "list_providers",
    "format_bytes",
    "format_speed",
    "format_traffic_table",
    "TrafficLensError",
    "ConfigurationError",
    "MonitorStateError",
    "MonitorAlreadyRunningError",
    "ProviderError",
]
