"""
Debounce and throttle helpers with explicit timer state.
Both run on a single event loop; nothing here is thread safe.
"""

import asyncio
import time
from typing import Any, Callable, Optional


def _loop_call_later(delay: float, callback: Callable[[], Any]):
    """Schedule on the running asyncio loop; None when no loop is running."""
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        return None
    return loop.call_later(delay, callback)


class Debouncer:
    """Run ``callback`` once input has been quiet for ``delay`` seconds.

    ``call_later`` returns a cancellable handle, or None when nothing can be
    scheduled (no running event loop); the call then runs immediately.
    """

    def __init__(
        self,
        delay: float,
        callback: Callable[..., Any],
        call_later: Optional[Callable[[float, Callable[[], Any]], Any]] = None,
    ):
        self.delay = delay
        self.callback = callback
        self.call_later = call_later or _loop_call_later
        self._handle = None
        self._args: tuple = ()

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def __call__(self, *args) -> None:
        self.cancel()
        self._args = args
        self._handle = self.call_later(self.delay, self._fire)
        if self._handle is None:
            self.callback(*args)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def flush(self) -> bool:
        """Run the pending call immediately. Returns False if none was pending."""
        if self._handle is None:
            return False
        self.cancel()
        self.callback(*self._args)
        return True

    def _fire(self) -> None:
        self._handle = None
        self.callback(*self._args)


class Throttler:
    """Run ``callback`` at most once per ``interval``; calls in between are dropped."""

    def __init__(
        self,
        interval: float,
        callback: Callable[..., Any],
        clock: Callable[[], float] = time.monotonic,
    ):
        self.interval = interval
        self.callback = callback
        self.clock = clock
        self._last_call: Optional[float] = None

    def __call__(self, *args) -> bool:
        now = self.clock()
        if self._last_call is not None and now - self._last_call < self.interval:
            return False
        self._last_call = now
        self.callback(*args)
        return True
