"""Abstract base stats provider."""

from __future__ import annotations

from abc import ABC, abstractmethod

from trafficlens.models import ConnectionInfo, InterfaceStats


class StatsProvider(ABC):
    """Abstract source of host network information.

    Both queries may raise; callers are expected to degrade instead of
    propagating the failure.
    """

    @abstractmethod
    def get_interface_stats(self) -> list[InterfaceStats]:
        """Return counters for every interface, in provider order."""

    @abstractmethod
    def get_connections(self) -> list[ConnectionInfo]:
        """Return the current connection table."""
