"""Tests for trafficlens exception hierarchy."""

import pytest

from trafficlens.exceptions import (
    ConfigurationError,
    MonitorAlreadyRunningError,
    MonitorStateError,
    ProviderError,
    TrafficLensError,
)


class TestExceptionHierarchy:
    """Test exception inheritance and structure."""

    def test_base_inherits_from_exception(self):
        assert issubclass(TrafficLensError, Exception)
        exc = TrafficLensError("test")
        assert str(exc) == "test"

    def test_configuration_error(self):
        """ConfigurationError is both a TrafficLensError and a ValueError."""
        assert issubclass(ConfigurationError, TrafficLensError)
        assert issubclass(ConfigurationError, ValueError)
        exc = ConfigurationError("bad interval")
        assert str(exc) == "bad interval"

    def test_monitor_state_errors(self):
        assert issubclass(MonitorStateError, TrafficLensError)
        assert issubclass(MonitorAlreadyRunningError, MonitorStateError)

    def test_already_running_default_message(self):
        assert str(MonitorAlreadyRunningError()) == "Monitor is already running"

    def test_provider_error_inherits_from_base(self):
        assert issubclass(ProviderError, TrafficLensError)


class TestProviderError:
    """Test ProviderError specific functionality."""

    def test_with_source(self):
        exc = ProviderError("query failed", source="connections")
        assert exc.source == "connections"
        assert str(exc) == "query failed"

    def test_without_source(self):
        exc = ProviderError("query failed")
        assert exc.source is None

    def test_can_be_caught_as_base(self):
        with pytest.raises(TrafficLensError):
            raise ProviderError("x")
