"""TrafficLens — the monitoring loop that splits proxied from direct traffic."""

from __future__ import annotations

import threading
import time
from types import TracebackType
from typing import Callable, Self

from loguru import logger
from pydantic import ValidationError

from trafficlens.exceptions import ConfigurationError, MonitorAlreadyRunningError
from trafficlens.formatting import format_bytes, format_speed
from trafficlens.models import (
    DEFAULT_UPDATE_INTERVAL_MS,
    InterfaceCapture,
    MonitorConfig,
    NetworkMetrics,
    NetworkSnapshot,
    ProxyMetrics,
    ProxyView,
    SpeedMetrics,
    TrafficStats,
)
from trafficlens.provider.base import StatsProvider
from trafficlens.sampler import Sampler
from trafficlens.subscriptions import SubscriptionRegistry

MonitorCallback = Callable[[TrafficStats], None]

_STOP_JOIN_TIMEOUT = 10.0


class TrafficLens:
    """Network traffic monitor with proxy awareness.

    Every ``update_interval`` milliseconds the monitor samples the primary
    interface and the connections on ``proxy_port``, then publishes a
    :class:`TrafficStats` split into proxied and direct traffic. The first
    successful sample after :meth:`start` only seeds state and is not
    published.

    Example::

        monitor = TrafficLens(proxy_port=1080, update_interval=5000)
        unsubscribe = monitor.subscribe(lambda s: print(s.proxied.upload_speed))
        monitor.start()
        ...
        monitor.stop()
    """

    def __init__(
        self,
        proxy_port: int,
        update_interval: int = DEFAULT_UPDATE_INTERVAL_MS,
        provider: StatsProvider | None = None,
    ) -> None:
        try:
            self.config = MonitorConfig(proxy_port=proxy_port, update_interval=update_interval)
        except ValidationError as e:
            msgs = "; ".join(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors())
            raise ConfigurationError(f"Invalid monitor configuration: {msgs}") from e

        if provider is None:
            from trafficlens.provider.psutil_provider import PsutilProvider

            provider = PsutilProvider()

        self.sampler = Sampler(provider)
        self._log = logger.bind(classname=self.__class__.__name__)

        self._stats = TrafficStats(timestamp=int(time.time() * 1000))
        self._last_snapshot: NetworkSnapshot | None = None
        self._subscribers: SubscriptionRegistry[TrafficStats] = SubscriptionRegistry()

        self._state_lock = threading.RLock()
        self._publish_lock = threading.RLock()
        self._tick_lock = threading.Lock()
        self._running = False
        self._generation = 0
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    # ── Lifecycle ─────────────────────────────────────────────────────

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Arm the recurring tick.

        Raises:
            MonitorAlreadyRunningError: If the monitor is already running.
        """
        with self._state_lock:
            if self._running:
                raise MonitorAlreadyRunningError()
            self._running = True
            self._generation += 1
            self._last_snapshot = None
            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._run,
                args=(self._generation, self._stop_event),
                name=f"trafficlens-{self.config.proxy_port}",
                daemon=True,
            )
            self._thread.start()

        self._log.info(
            f"Monitoring started (proxy port {self.config.proxy_port}, interval {self.config.update_interval} ms)"
        )

    def stop(self) -> None:
        """Disarm the recurring tick. No-op if not running."""
        with self._state_lock:
            if not self._running:
                return
            self._running = False
            self._generation += 1
            self._stop_event.set()
            thread = self._thread
            self._thread = None

        # Wait out a fan-out already in progress; later ones see the new generation.
        with self._publish_lock:
            pass

        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=_STOP_JOIN_TIMEOUT)
            if thread.is_alive():
                self._log.warning("Tick still in flight after stop(); it will not publish")

        self._log.info("Monitoring stopped")

    def _run(self, generation: int, stop_event: threading.Event) -> None:
        interval = self.config.interval_seconds
        while not stop_event.wait(interval):
            self._tick(generation)

    def __enter__(self) -> Self:
        self.start()
        return self

    def __exit__(
        self, exc_type: type[BaseException] | None, exc_val: BaseException | None, exc_tb: TracebackType | None
    ) -> None:
        self.stop()

    # ── Tick ──────────────────────────────────────────────────────────

    def tick(self) -> bool:
        """Run one sampling cycle now. Returns True if an update was published."""
        return self._tick(self._generation)

    def _tick(self, generation: int) -> bool:
        if not self._tick_lock.acquire(blocking=False):
            self._log.debug("Previous tick still running, skipping")
            return False
        try:
            capture, proxy_view = self.sampler.capture(self.config.proxy_port)
            return self._apply(generation, capture, proxy_view)
        finally:
            self._tick_lock.release()

    def _apply(self, generation: int, capture: InterfaceCapture, proxy_view: ProxyView) -> bool:
        if not capture.is_ok:
            self._log.debug(f"No interface data this tick ({capture.reason})")
            return False
        assert capture.snapshot is not None
        current = capture.snapshot

        with self._state_lock:
            if not self._running or generation != self._generation:
                return False

            if self._last_snapshot is None:
                self._last_snapshot = current
                self._log.debug("Seed sample stored")
                return False

            proxy_stats = proxy_view.stats or NetworkMetrics()
            self._stats.proxied = ProxyMetrics(
                **proxy_stats.model_dump(),
                active_connections=proxy_view.active_connections,
            )
            self._stats.direct = current - proxy_stats
            # Never move backwards, even if the wall clock does.
            self._stats.timestamp = max(int(time.time() * 1000), self._stats.timestamp)
            self._last_snapshot = current
            published = self._stats.model_copy(deep=True)

        # Fan-out holds only the publish lock; accessors stay available to other threads.
        with self._publish_lock:
            with self._state_lock:
                if not self._running or generation != self._generation:
                    return False
            self._publish(published)
        return True

    def _publish(self, stats: TrafficStats) -> None:
        for callback in self._subscribers.snapshot():
            try:
                callback(stats.model_copy(deep=True))
            except Exception as e:
                self._log.exception(f"Subscriber {callback!r} raised: {e}")

    # ── Subscriptions & accessors ─────────────────────────────────────

    def subscribe(self, callback: MonitorCallback) -> Callable[[], None]:
        """Register *callback* for traffic updates; returns an unsubscribe function."""
        return self._subscribers.subscribe(callback)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def get_traffic_stats(self) -> TrafficStats:
        """Return a copy of the most recent traffic statistics."""
        with self._state_lock:
            return self._stats.model_copy(deep=True)

    def get_proxy_speed(self) -> SpeedMetrics:
        with self._state_lock:
            p = self._stats.proxied
            return SpeedMetrics(upload_speed=p.upload_speed, download_speed=p.download_speed)

    def get_direct_speed(self) -> SpeedMetrics:
        with self._state_lock:
            d = self._stats.direct
            return SpeedMetrics(upload_speed=d.upload_speed, download_speed=d.download_speed)

    format_bytes = staticmethod(format_bytes)
    format_speed = staticmethod(format_speed)
