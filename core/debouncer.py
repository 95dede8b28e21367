"""
Debouncing of bursty filesystem notifications.

Saving a file usually produces several notifications in quick succession
(create, a few modifies, sometimes a temp-file rename). The Debouncer turns
such a burst into one delayed action.
"""

import threading
from typing import Callable, Hashable, Protocol

Action = Callable[[], None]


class TimerHandle(Protocol):
    """The part of threading.Timer the debouncer relies on."""

    def start(self) -> None: ...

    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Action], TimerHandle]


def thread_timer(delay: float, action: Action) -> TimerHandle:
    """Default timer factory: a daemon threading.Timer."""
    timer = threading.Timer(delay, action)
    timer.daemon = True
    return timer


class Debouncer:
    """
    Coalesces scheduled actions per key.

    Only one action per key is pending at a time. Scheduling again for a
    pending key cancels the previous action and restarts the delay; once the
    delay passes without another schedule, the latest action runs exactly once.

    `call()` is the global mode: every caller shares one key, so a burst of
    changes to many different files collapses into a single settle point.

    After `dispose()` all pending actions are cancelled and further scheduling
    is ignored. An action that has already started running is not interrupted.
    """

    _GLOBAL_KEY = object()

    def __init__(
        self,
        delay: float = 0.5,
        timer_factory: TimerFactory | None = None,
    ):
        """
        Args:
            delay: Default delay in seconds.
            timer_factory: Builds a startable, cancellable timer. Defaults to
                `thread_timer`; tests pass a manual timer.
        """
        self.delay = delay
        self._timer_factory = timer_factory if timer_factory is not None else thread_timer
        self._timers: dict[Hashable, TimerHandle] = {}
        self._lock = threading.Lock()
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def pending_keys(self) -> list[Hashable]:
        with self._lock:
            return [k for k in self._timers if k is not self._GLOBAL_KEY]

    def has_pending(self) -> bool:
        with self._lock:
            return bool(self._timers)

    def schedule(self, key: Hashable, action: Action, delay: float | None = None) -> None:
        """
        Run `action` once `delay` seconds pass without another schedule for `key`.

        Args:
            key: Unit of work the action belongs to.
            action: Zero-argument callable.
            delay: Seconds to wait. Defaults to the debouncer's delay.
        """
        wait = self.delay if delay is None else delay
        with self._lock:
            if self._disposed:
                return
            previous = self._timers.pop(key, None)
            if previous is not None:
                previous.cancel()

            timer = self._timer_factory(wait, lambda: self._fire(key, timer, action))
            self._timers[key] = timer
            timer.start()

    def call(self, action: Action, delay: float | None = None) -> None:
        """Schedule `action` on the single shared timer."""
        self.schedule(self._GLOBAL_KEY, action, delay)

    def cancel(self, key: Hashable) -> bool:
        """Cancel the pending action for `key`. Returns True if one was pending."""
        with self._lock:
            timer = self._timers.pop(key, None)
        if timer is None:
            return False
        timer.cancel()
        return True

    def dispose(self) -> None:
        """Cancel everything pending without running it. Safe to call repeatedly."""
        with self._lock:
            self._disposed = True
            timers = list(self._timers.values())
            self._timers.clear()
        for timer in timers:
            timer.cancel()

    def _fire(self, key: Hashable, timer: TimerHandle, action: Action) -> None:
        with self._lock:
            # A timer that was cancelled after it started firing must not run.
            if self._timers.get(key) is not timer:
                return
            del self._timers[key]
        action()
