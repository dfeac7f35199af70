"""Ordered registry of traffic-update callbacks."""

from __future__ import annotations

import threading
from typing import Callable, Generic, TypeVar

T = TypeVar("T")


class SubscriptionRegistry(Generic[T]):
    """Thread-safe, ordered list of callbacks.

    Fan-out iterates over :meth:`snapshot`, so callbacks may subscribe or
    unsubscribe while being notified.
    """

    def __init__(self) -> None:
        self._callbacks: list[Callable[[T], None]] = []
        self._lock = threading.Lock()

    def subscribe(self, callback: Callable[[T], None]) -> Callable[[], None]:
        """Append *callback* and return a disposer that removes this registration."""
        with self._lock:
            self._callbacks.append(callback)

        disposed = False

        def dispose() -> None:
            nonlocal disposed
            with self._lock:
                if disposed:
                    return
                disposed = True
                # Identity match; removes one registration even if subscribed twice.
                for i, cb in enumerate(self._callbacks):
                    if cb is callback:
                        del self._callbacks[i]
                        break

        return dispose

    def snapshot(self) -> tuple[Callable[[T], None], ...]:
        with self._lock:
            return tuple(self._callbacks)

    def __len__(self) -> int:
        with self._lock:
            return len(self._callbacks)
