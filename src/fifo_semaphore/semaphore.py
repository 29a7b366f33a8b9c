"""FIFO semaphore for bounding cooperative concurrency."""

import asyncio
import contextlib
import logging
from collections import deque
from typing import Any

from fifo_semaphore.base import PermitGateBase
from fifo_semaphore.errors import ConfigurationError, ImbalanceError


logger = logging.getLogger(__name__)

_DEFAULT: Any = object()


class _Waiter:
    """A pending acquire() request."""

    __slots__ = ("label", "future")

    def __init__(self, label: str, future: "asyncio.Future[None]"):
        self.label = label
        self.future = future


class Semaphore(PermitGateBase):
    """Semaphore that grants permits in strict first-come, first-served order.

    At most ``capacity`` permits are held at any time. A caller that finds no
    free permit is queued and suspends until a later release() hands the
    permit directly to it. Queued callers are always served in the order they
    called acquire(), regardless of who releases.

    The semaphore is meant to be used from a single event loop. All state
    changes happen synchronously between suspension points, so no lock is
    needed.

    Args:
        capacity: Maximum number of permits held at once (must be >= 1)
        name: Optional name used in log records and repr
        acquire_timeout: Default timeout in seconds for acquire() calls that
            do not pass one (None = wait forever)

    Example:
        # Allow at most 2 deployments at a time
        semaphore = Semaphore(capacity=2, name="deploys")

        await semaphore.acquire("api")
        try:
            await deploy("api")
        finally:
            semaphore.release()

        # Or as a context manager
        async with semaphore.slot("worker"):
            await deploy("worker")

    Raises:
        ConfigurationError: If capacity < 1 or acquire_timeout is negative or NaN
    """

    def __init__(
        self,
        capacity: int,
        *,
        name: str | None = None,
        acquire_timeout: float | None = None,
    ):
        if isinstance(capacity, bool) or not isinstance(capacity, int):
            raise ConfigurationError(
                f"capacity must be an int, got {type(capacity).__name__}"
            )
        if capacity < 1:
            raise ConfigurationError(f"capacity must be >= 1, got {capacity}")
        # Also rejects NaN, which compares false against everything.
        if acquire_timeout is not None and not acquire_timeout >= 0:
            raise ConfigurationError(
                f"acquire_timeout must be >= 0, got {acquire_timeout}"
            )

        self._capacity = capacity
        self._name = name
        self._acquire_timeout = acquire_timeout

        self._held = 0
        self._waiters: deque[_Waiter] = deque()

    async def acquire(self, label: str, *, timeout: float | None = _DEFAULT) -> None:
        """Acquire one permit.

        Returns immediately if a permit is free. Otherwise the request is
        queued behind every earlier request and this coroutine suspends until
        release() grants it a permit.

        Args:
            label: Identifies the requester in logs and in ``waiting``. Has no
                effect on scheduling and need not be unique.
            timeout: Seconds to wait before giving up. Defaults to the
                semaphore's ``acquire_timeout``; None waits forever.

        Raises:
            TimeoutError: If the timeout expires before a permit is granted
        """
        if self._held < self._capacity:
            self._held += 1
            logger.debug(
                "%s: granted permit to %r (%d/%d held)",
                self._display_name, label, self._held, self._capacity,
            )
            return

        if timeout is _DEFAULT:
            timeout = self._acquire_timeout

        waiter = _Waiter(label, asyncio.get_running_loop().create_future())
        self._waiters.append(waiter)
        logger.debug(
            "%s: queued %r behind %d waiter(s)",
            self._display_name, label, len(self._waiters) - 1,
        )

        try:
            if timeout is None:
                await waiter.future
            else:
                await asyncio.wait_for(waiter.future, timeout)
        except (asyncio.CancelledError, asyncio.TimeoutError):
            self._abandon(waiter)
            raise

    def try_acquire(self, label: str) -> bool:
        """Acquire a permit only if one is free right now.

        Never queues and never suspends.

        Returns:
            True if a permit was granted, False otherwise
        """
        if self._held >= self._capacity:
            return False
        self._held += 1
        logger.debug(
            "%s: granted permit to %r without waiting (%d/%d held)",
            self._display_name, label, self._held, self._capacity,
        )
        return True

    def release(self) -> None:
        """Return one permit.

        If requests are queued the permit passes straight to the oldest one
        and ``held`` does not change. Otherwise ``held`` is decremented.

        Raises:
            ImbalanceError: If no permit is held and nobody is waiting
        """
        while self._waiters:
            waiter = self._waiters.popleft()
            # Cancelled while queued.
            if waiter.future.done():
                continue
            waiter.future.set_result(None)
            logger.debug(
                "%s: transferred permit to %r (%d waiting)",
                self._display_name, waiter.label, len(self._waiters),
            )
            return

        if self._held == 0:
            raise ImbalanceError(
                f"{self._display_name}: release() called without a matching acquire()"
            )
        self._held -= 1
        logger.debug(
            "%s: released permit (%d/%d held)",
            self._display_name, self._held, self._capacity,
        )

    def _abandon(self, waiter: _Waiter) -> None:
        """Clean up after a queued acquire() was cancelled or timed out.

        Must run before the CancelledError/TimeoutError leaves acquire().
        """
        if waiter.future.done() and not waiter.future.cancelled():
            # release() already handed us the permit; pass it on.
            logger.debug(
                "%s: %r was granted a permit after cancellation, passing it on",
                self._display_name, waiter.label,
            )
            self.release()
            return

        waiter.future.cancel()
        with contextlib.suppress(ValueError):
            self._waiters.remove(waiter)
        logger.debug("%s: %r gave up waiting", self._display_name, waiter.label)

    def locked(self) -> bool:
        """Return True if acquire() would have to wait."""
        return self._held >= self._capacity

    @property
    def capacity(self) -> int:
        """Maximum number of permits held at once."""
        return self._capacity

    @property
    def held(self) -> int:
        """Number of permits currently granted."""
        return self._held

    @property
    def available(self) -> int:
        """Number of permits that can be granted without waiting."""
        return self._capacity - self._held

    @property
    def waiting(self) -> tuple[str, ...]:
        """Labels of queued requests, in the order they will be granted.

        Note: This is a snapshot and may change immediately after reading.
        """
        return tuple(w.label for w in self._waiters if not w.future.done())

    @property
    def name(self) -> str | None:
        return self._name

    @property
    def acquire_timeout(self) -> float | None:
        return self._acquire_timeout

    @property
    def _display_name(self) -> str:
        return self._name or f"Semaphore@{id(self):#x}"

    def __repr__(self) -> str:
        return (
            f"<Semaphore name={self._name!r} capacity={self._capacity} "
            f"held={self._held} waiting={len(self.waiting)}>"
        )
