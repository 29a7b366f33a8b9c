"""Example usage of the FIFO semaphore."""
# mypy: ignore-errors

import asyncio
import logging
import time

from fifo_semaphore import (
    ImbalanceError,
    Semaphore,
    SemaphoreSettings,
    bounded_gather,
)


async def example_fifo_order()->None:
    """Example: queued deployments run in the order they were requested."""
    print("\n=== FIFO Order Example ===")
    print("Two deployment slots, five services queued")

    semaphore = Semaphore(capacity=2, name="deploys")

    async def deploy(service: str)->None:
        async with semaphore.slot(service):
            print(f"  Deploying {service} (held: {semaphore.held}, waiting: {list(semaphore.waiting)})")
            await asyncio.sleep(0.05)

    tasks = []
    for service in ["api", "web", "worker", "cron", "docs"]:
        tasks.append(asyncio.create_task(deploy(service)))
        await asyncio.sleep(0)

    await asyncio.gather(*tasks)


async def example_transfer()->None:
    """Example: a release hands the permit straight to the next waiter."""
    print("\n=== Permit Transfer Example ===")

    semaphore = Semaphore(capacity=2)
    await semaphore.acquire("a")
    await semaphore.acquire("b")
    print(f"a and b acquired, held={semaphore.held}")

    waiter = asyncio.create_task(semaphore.acquire("c"))
    await asyncio.sleep(0)
    print(f"c is waiting: {semaphore.waiting}")

    semaphore.release()
    await waiter
    print(f"released once, c granted, held={semaphore.held}")

    semaphore.release()
    semaphore.release()
    print(f"released twice more, held={semaphore.held}")

    try:
        semaphore.release()
    except ImbalanceError as e:
        print(f"fourth release rejected: {e}")


async def example_bounded_gather()->None:
    """Example: fetch many pages, at most three at a time."""
    print("\n=== Bounded Gather Example ===")

    semaphore = Semaphore(capacity=3, name="fetch")

    async def fetch(page: int)->str:
        await asyncio.sleep(0.05)
        return f"page-{page}"

    start = time.time()
    pages = await bounded_gather(semaphore, *[fetch(i) for i in range(9)])
    elapsed = time.time() - start
    print(f"Fetched {len(pages)} pages in {elapsed:.2f} seconds: {pages}")


async def example_timeout()->None:
    """Example: give up waiting after a deadline."""
    print("\n=== Timeout Example ===")

    semaphore = SemaphoreSettings(capacity=1, acquire_timeout=0.1, name="report").create()

    async with semaphore.slot("long report"):
        try:
            await semaphore.acquire("impatient report")
        except asyncio.TimeoutError:
            print(f"  Gave up after {semaphore.acquire_timeout}s, waiting={semaphore.waiting}")


async def main()->None:
    await example_fifo_order()
    await example_transfer()
    await example_bounded_gather()
    await example_timeout()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
