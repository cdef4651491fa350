"""
Focus/visibility signal raised by the consuming surface.
Subscribers receive a Subscription handle they must cancel on teardown.
"""

import threading
from typing import Callable

Listener = Callable[[], None]


class Subscription:
    def __init__(self, signal: "FocusSignal", listener: Listener) -> None:
        self._signal = signal
        self._listener = listener
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        if self._active:
            self._signal._remove(self._listener)
            self._active = False


class FocusSignal:
    def __init__(self) -> None:
        self._listeners: list[Listener] = []
        self._lock = threading.Lock()

    def subscribe(self, listener: Listener) -> Subscription:
        with self._lock:
            self._listeners.append(listener)
        return Subscription(self, listener)

    def emit(self) -> None:
        """Notify every current subscriber that the surface regained focus."""
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener()

    def _remove(self, listener: Listener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def __len__(self) -> int:
        with self._lock:
            return len(self._listeners)
