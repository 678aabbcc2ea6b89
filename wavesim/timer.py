"""Fixed-rate periodic timer."""

import logging
import numbers
import threading
import time

logger = logging.getLogger(__name__)


class PeriodicTimer:
    """Call a function every ``interval`` seconds until cancelled.

    Works like ``threading.Timer`` but repeats. Calls are scheduled at a fixed
    rate (``start + n * interval``). When a call overruns, the missed calls
    are made back to back until the schedule is caught up, so the number of
    calls always tracks wall-clock time.
    """

    def __init__(self, interval: float, function, args=None, kwargs=None):
        if interval <= 0:
            raise ValueError("Interval must be positive")
        self.interval = interval
        self.function = function
        self.args = args if args is not None else []
        self.kwargs = kwargs if kwargs is not None else {}
        self._finished = threading.Event()
        self._thread = threading.Thread(target=self._run, daemon=True,
                                        name=f"PeriodicTimer-{interval:g}s")

    def start(self):
        self._thread.start()

    def _run(self):
        next_time = time.monotonic()
        while not self._finished.is_set():
            self.function(*self.args, **self.kwargs)
            next_time += self.interval
            now = time.monotonic()
            if now - next_time > self.interval:
                logger.debug("Timer fell behind by %.4fs, catching up", now - next_time)
            self._finished.wait(max(0.0, next_time - now))

    def cancel(self, wait: bool = True):
        """Stop the timer.

        With ``wait`` the call blocks until a running call has finished. When
        called from inside the timed function itself it returns without
        waiting; no further call is made after the current one either way.
        """
        self._finished.set()
        if wait and self._thread.is_alive() and threading.current_thread() is not self._thread:
            self._thread.join()

    @property
    def cancelled(self) -> bool:
        return self._finished.is_set()

    def is_alive(self) -> bool:
        return self._thread.is_alive()


def check_step(milliseconds) -> int:
    """Validate a manual clock step: a non-negative whole number of milliseconds."""
    if isinstance(milliseconds, bool) or not isinstance(milliseconds, numbers.Integral):
        raise ValueError(f"Step must be a whole number of milliseconds, got {milliseconds!r}")
    if milliseconds < 0:
        raise ValueError(f"Step must not be negative, got {milliseconds}")
    return int(milliseconds)
