"""
Tick Scheduler
==============

Paces the simulation at a configurable rate with one cancellable repeating task.

Guarantees:
    - Exactly one callback per firing; ticks never overlap
    - Changing the rate cancels the running task and arms a new one,
      so the old timer can never fire again after the swap
    - An exception in the callback stops the task and is re-raised on
      the caller's thread via raise_if_failed()
"""

import threading
import time
from typing import Callable, Optional

import sys
sys.path.append('../..')
from src.utils.logger import get_logger, log_speed_change

_logger = get_logger(__name__)


class _RepeatingTask:
    """Background thread calling `fire(task)` every `interval` seconds until cancelled."""

    def __init__(self, interval: float, fire: Callable[['_RepeatingTask'], None]):
        self.interval = interval
        self._fire = fire
        self._cancelled = threading.Event()
        self._thread = threading.Thread(target=self._run, name='tick-scheduler', daemon=True)

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def thread(self) -> threading.Thread:
        return self._thread

    def start(self) -> None:
        self._thread.start()

    def cancel(self) -> None:
        self._cancelled.set()

    def join(self, timeout: Optional[float] = None) -> None:
        if self._thread is not threading.current_thread() and self._thread.is_alive():
            self._thread.join(timeout)

    def _run(self) -> None:
        next_time = time.perf_counter() + self.interval
        while not self._cancelled.wait(max(0.0, next_time - time.perf_counter())):
            self._fire(self)
            next_time += self.interval
            # Behind schedule: realign instead of bursting to catch up
            now = time.perf_counter()
            if next_time < now:
                next_time = now


class TickScheduler:
    """
    Owns the repeating task that drives `callback` at `rate` ticks per second.

    Example:
        >>> scheduler = TickScheduler(sim.tick, rate=120, min_rate=120, max_rate=1000)
        >>> scheduler.start()
        >>> scheduler.set_rate(500)   # old task cancelled, new one armed
        >>> scheduler.stop()
    """

    def __init__(
        self,
        callback: Callable[[], object],
        rate: float,
        min_rate: Optional[float] = None,
        max_rate: Optional[float] = None,
    ):
        """
        Initialize the scheduler (not started).

        Args:
            callback: Function run once per tick
            rate: Ticks per second
            min_rate: Lower clamp for rate changes (None = no clamp)
            max_rate: Upper clamp for rate changes (None = no clamp)
        """
        self._callback = callback
        self.min_rate = min_rate
        self.max_rate = max_rate
        self.rate = self._clamp(rate)

        # Guards task replacement
        self._swap_lock = threading.Lock()
        # Held for the duration of a tick, so at most one runs at a time
        self._tick_lock = threading.Lock()

        self._task: Optional[_RepeatingTask] = None
        self.ticks_run = 0
        self.error: Optional[BaseException] = None

    def _clamp(self, rate: float) -> float:
        if rate <= 0:
            raise ValueError(f"Tick rate must be positive, got {rate}")
        if self.min_rate is not None:
            rate = max(self.min_rate, rate)
        if self.max_rate is not None:
            rate = min(self.max_rate, rate)
        return float(rate)

    @property
    def running(self) -> bool:
        task = self._task
        return task is not None and not task.cancelled

    @property
    def interval(self) -> float:
        return 1.0 / self.rate

    def start(self) -> None:
        """Arm the repeating task (no-op if already running)."""
        with self._swap_lock:
            if self.running:
                return
            self.error = None
            self._arm()

    def stop(self, timeout: Optional[float] = 1.0) -> None:
        """Cancel the task and wait for an in-flight tick to finish."""
        with self._swap_lock:
            task = self._task
            self._task = None
        if task is not None:
            task.cancel()
            task.join(timeout)

    def set_rate(self, rate: float) -> float:
        """
        Change the tick rate, replacing the running task if there is one.

        Returns:
            The rate actually applied after clamping
        """
        new_rate = self._clamp(rate)
        with self._swap_lock:
            self.rate = new_rate
            if self.running:
                old = self._task
                if old is not None:
                    old.cancel()
                self._arm()
        log_speed_change(new_rate)
        return new_rate

    def _arm(self) -> None:
        task = _RepeatingTask(self.interval, self._fire)
        self._task = task
        task.start()

    def _fire(self, task: _RepeatingTask) -> None:
        with self._tick_lock:
            # A task cancelled while waiting for the lock must not tick
            if task.cancelled:
                return
            try:
                self._callback()
            except Exception as e:
                _logger.exception(f"Tick failed, stopping scheduler: {e}")
                self.error = e
                task.cancel()
                return
            self.ticks_run += 1

    def raise_if_failed(self) -> None:
        """Re-raise a tick exception captured on the scheduler thread."""
        if self.error is not None:
            raise self.error
