"""Exception hierarchy for the traffic monitor."""


class TrafficLensError(Exception):
    """Base exception for all traffic monitor errors."""


class ConfigurationError(TrafficLensError, ValueError):
    """Monitor configuration is invalid (e.g. update interval below minimum)."""


class MonitorStateError(TrafficLensError):
    """Operation not allowed in the monitor's current state."""


class MonitorAlreadyRunningError(MonitorStateError):
    """start() called on a monitor that is already running."""

    def __init__(self, message: str = "Monitor is already running"):
        super().__init__(message)


class ProviderError(TrafficLensError):
    """Stats provider query failed."""

    def __init__(self, message: str, source: str | None = None):
        self.source = source
        super().__init__(message)
