"""
Token-bucket rate limiter shared by every dispatch of one client.

Waiters queue in arrival order and are woken by a timer scheduled for the
moment the next token becomes available. The bucket counters are only touched
under ``_lock``, and the lock is never held across an ``await``.
"""

from __future__ import annotations

import asyncio
import collections
import threading
import time
from typing import Callable, Deque, Optional

import structlog

logger = structlog.get_logger(__name__)


class TokenBucket:
    """
    Rate governor with capacity ``capacity`` refilled at ``rate`` tokens/second.

    Features:
    - Starts full
    - Lazy refill computed from elapsed monotonic time, capped at capacity
    - Approximately FIFO admission for any number of concurrent waiters
    - A waiter cancelled while queued leaves without consuming a token
    """

    def __init__(self, rate: float, capacity: int, clock: Callable[[], float] = time.monotonic):
        if rate <= 0:
            raise ValueError("rate must be positive")
        if capacity < 1:
            raise ValueError("capacity must be at least 1")

        self._rate = float(rate)
        self._capacity = int(capacity)
        self._clock = clock

        self._tokens = float(capacity)
        self._last_refill = clock()
        self._waiters: Deque[asyncio.Future[None]] = collections.deque()
        self._wakeup: Optional[asyncio.TimerHandle] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._lock = threading.Lock()

    @property
    def rate(self) -> float:
        return self._rate

    @property
    def capacity(self) -> int:
        return self._capacity

    def _refill(self) -> None:
        now = self._clock()
        elapsed = now - self._last_refill
        if elapsed > 0:
            self._tokens = min(float(self._capacity), self._tokens + elapsed * self._rate)
        self._last_refill = now

    def _bind_loop(self, loop: asyncio.AbstractEventLoop) -> None:
        # Timer and waiters left behind by a previous, possibly closed, loop can
        # never fire or be resolved from this one.
        if self._loop is loop:
            return
        if self._loop is not None:
            logger.debug("Token bucket moved to a new event loop", dropped_waiters=len(self._waiters))
        if self._wakeup is not None:
            self._wakeup.cancel()
            self._wakeup = None
        self._waiters.clear()
        self._loop = loop

    def _has_live_waiters(self) -> bool:
        while self._waiters and self._waiters[0].done():
            self._waiters.popleft()
        return bool(self._waiters)

    async def acquire(self) -> float:
        """
        Take one token, suspending until one is available.

        Returns:
            Seconds spent waiting.
        """
        loop = asyncio.get_running_loop()
        started = self._clock()

        with self._lock:
            self._bind_loop(loop)
            self._refill()
            if not self._has_live_waiters() and self._tokens >= 1.0:
                self._tokens -= 1.0
                return 0.0
            waiter: asyncio.Future[None] = loop.create_future()
            self._waiters.append(waiter)
            self._schedule_wakeup(loop)

        try:
            await waiter
        except asyncio.CancelledError:
            with self._lock:
                if waiter.done() and not waiter.cancelled():
                    # Token was granted just as we were cancelled; put it back.
                    self._tokens = min(float(self._capacity), self._tokens + 1.0)
                    self._grant_ready()
                else:
                    try:
                        self._waiters.remove(waiter)
                    except ValueError:
                        pass
                if self._waiters:
                    self._schedule_wakeup(loop)
            raise

        waited = self._clock() - started
        logger.debug("Rate-limit token acquired after wait", waited=round(waited, 4))
        return waited

    def _grant_ready(self) -> None:
        self._refill()
        while self._tokens >= 1.0 and self._has_live_waiters():
            waiter = self._waiters.popleft()
            self._tokens -= 1.0
            waiter.set_result(None)

    def _schedule_wakeup(self, loop: asyncio.AbstractEventLoop) -> None:
        if self._wakeup is not None or not self._waiters:
            return
        delay = max(0.0, (1.0 - self._tokens) / self._rate)
        self._wakeup = loop.call_later(delay, self._on_wakeup, loop)

    def _on_wakeup(self, loop: asyncio.AbstractEventLoop) -> None:
        with self._lock:
            if loop is not self._loop:
                return
            self._wakeup = None
            self._grant_ready()
            if self._waiters:
                self._schedule_wakeup(loop)

    def close(self) -> None:
        """Cancel the pending timer and fail any queued waiters."""
        with self._lock:
            if self._wakeup is not None:
                self._wakeup.cancel()
                self._wakeup = None
            while self._waiters:
                waiter = self._waiters.popleft()
                if not waiter.done():
                    waiter.cancel()
