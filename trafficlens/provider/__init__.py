"""Host stats providers — interface counters and connection tables."""

from trafficlens.provider.base import StatsProvider
from trafficlens.provider.factory import create_provider, list_providers, register_provider
from trafficlens.provider.psutil_provider import PsutilProvider  # registers "psutil"

__all__ = [
    "StatsProvider",
    "PsutilProvider",
    "create_provider",
    "list_providers",
    "register_provider",
]
