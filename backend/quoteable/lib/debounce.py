"""
So Quoteable Backend — Debounce Scheduler
==========================================

What:  Wraps a callback so that bursts of calls collapse into one delayed call
       made with the most recent arguments.
Why:   Rate-limits work triggered by noisy sources (per-request housekeeping,
       save-draft style calls) without a queue.
How:   A small state machine (Idle / Pending) owned by each Debounced
       instance: one captured-arguments slot, one timer handle, one lock.

State machine:
    Idle    --call-->   Pending  (arm timer, capture args)
    Pending --call-->   Pending  (disarm, re-arm, replace args)
    Pending --fire-->   Idle     (clear state, THEN invoke callback)
    Pending --flush-->  Idle     (disarm, clear state, THEN invoke callback)
    Pending --cancel--> Idle     (disarm, drop args, no invocation)
    Idle    --flush/cancel-->   Idle (no-op)

    State is cleared before the callback runs, so a callback that calls the
    same debounced instance again starts a fresh Pending cycle.

Timer facility:
    A scheduler is anything with `call_later(delay_seconds, fn) -> handle`
    where `handle.cancel()` disarms the timer. Two are provided:
    - ThreadingScheduler: one daemon `threading.Timer` per arm (default)
    - AsyncioScheduler:   `loop.call_later` on a given event loop

    Cancelling a thread timer can race with a fire that already started, so
    every arm gets a generation number and a fire for an old generation is
    ignored.
"""

import asyncio
import logging
import threading
from typing import Any, Callable, Dict, Optional, Protocol, Tuple

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> Any:
        ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        ...


class ThreadingScheduler:
    """Runs each timer on its own daemon `threading.Timer` thread."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer


class AsyncioScheduler:
    """
    Runs timers on an asyncio event loop.

    Calls must come from the loop's own thread; exceptions raised by the
    callback go to the loop's exception handler.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(delay, callback)


class Debounced:
    """
    A debounced callable with `cancel()` and `flush()` control.

    Calling the instance always returns None; the wrapped callback's return
    value is discarded.
    """

    def __init__(
        self,
        func: Callable[..., Any],
        delay_ms: float,
        scheduler: Optional[Scheduler] = None,
    ):
        if delay_ms < 0:
            raise ValueError(f"delay_ms must be >= 0, got {delay_ms}")

        self._func = func
        self._delay_ms = delay_ms
        self._scheduler = scheduler or ThreadingScheduler()
        self._lock = threading.Lock()

        self._handle: Optional[TimerHandle] = None
        self._args: Optional[Tuple[Any, ...]] = None
        self._kwargs: Optional[Dict[str, Any]] = None
        self._generation = 0

    @property
    def delay_ms(self) -> float:
        return self._delay_ms

    @property
    def pending(self) -> bool:
        """True while an invocation is armed."""
        with self._lock:
            return self._handle is not None

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        with self._lock:
            if self._handle is not None:
                self._handle.cancel()

            self._generation += 1
            generation = self._generation
            self._args = args
            self._kwargs = kwargs
            self._handle = self._scheduler.call_later(
                self._delay_ms / 1000.0,
                lambda: self._fire(generation),
            )

    def cancel(self) -> None:
        """Drop the pending invocation, if any, without calling the callback."""
        with self._lock:
            if self._handle is None:
                return
            self._handle.cancel()
            self._clear()

    def flush(self) -> None:
        """Run the pending invocation now, if any. Callback errors propagate."""
        with self._lock:
            if self._handle is None:
                return
            self._handle.cancel()
            args, kwargs = self._args or (), self._kwargs or {}
            self._clear()

        self._func(*args, **kwargs)

    def _fire(self, generation: int) -> None:
        with self._lock:
            if self._handle is None or generation != self._generation:
                logger.debug("Ignoring stale debounce timer (generation %d)", generation)
                return
            args, kwargs = self._args or (), self._kwargs or {}
            self._clear()

        self._func(*args, **kwargs)

    def _clear(self) -> None:
        # Caller holds the lock. Releasing args avoids pinning large payloads.
        self._handle = None
        self._args = None
        self._kwargs = None

    def __repr__(self) -> str:
        return f"<Debounced func={getattr(self._func, '__name__', self._func)!r} delay_ms={self._delay_ms}>"


def debounce(
    func: Callable[..., Any],
    delay_ms: float,
    scheduler: Optional[Scheduler] = None,
) -> Debounced:
    """
    Create a debounced version of `func`.

    Example:
        save = debounce(store_draft, 300)
        save("a"); save("ab"); save("abc")   # store_draft("abc") once, 300ms later
        save.cancel()                        # or drop it
        save.flush()                         # or run it now
    """
    return Debounced(func, delay_ms, scheduler=scheduler)
