"""Run many coroutines while holding permits from a gate."""

import asyncio
from collections.abc import Awaitable, Iterable, Sequence
from typing import Any, TypeVar

from fifo_semaphore.base import AsyncPermitGate, PermitSlot


T = TypeVar("T")


def _close_coroutines(aws: Iterable[Awaitable[Any]]) -> None:
    for aw in aws:
        if asyncio.iscoroutine(aw):
            aw.close()


async def bounded_gather(
    gate: AsyncPermitGate,
    *aws: Awaitable[T],
    labels: Sequence[str] | None = None,
    return_exceptions: bool = False,
) -> list[Any]:
    """Like asyncio.gather(), but each coroutine runs while holding a permit.

    Coroutines are admitted in argument order, so with a FIFO gate they also
    start in that order. Results are returned in argument order.

    Tasks and futures are rejected: they are already scheduled and would run
    outside the gate. If the arguments are rejected, the passed coroutines
    are closed so they never trigger "never awaited" warnings.

    Args:
        gate: Gate to draw permits from
        *aws: Coroutines to run
        labels: One label per coroutine (default ``"task-<index>"``)
        return_exceptions: Passed through to asyncio.gather()

    Returns:
        List of results, in the same order as ``aws``

    Raises:
        TypeError: If any argument is a Task or Future
        ValueError: If ``labels`` does not match the number of coroutines

    Example:
        semaphore = Semaphore(capacity=3)
        pages = await bounded_gather(semaphore, *(fetch(url) for url in urls))
    """
    scheduled = [i for i, aw in enumerate(aws) if asyncio.isfuture(aw)]
    if scheduled:
        _close_coroutines(aws)
        raise TypeError(
            "bounded_gather() needs unscheduled coroutines, got a Task or "
            f"Future at position(s) {scheduled}"
        )
    if labels is None:
        labels = [f"task-{i}" for i in range(len(aws))]
    elif len(labels) != len(aws):
        _close_coroutines(aws)
        raise ValueError(
            f"expected {len(aws)} labels, got {len(labels)}"
        )

    async def run(aw: Awaitable[T], label: str) -> T:
        async with PermitSlot(gate, label):
            return await aw

    return await asyncio.gather(
        *(run(aw, label) for aw, label in zip(aws, labels)),
        return_exceptions=return_exceptions,
    )
