"""FIFO semaphore for bounding concurrency in asyncio programs."""

from fifo_semaphore.base import AsyncPermitGate, PermitGateBase, PermitSlot
from fifo_semaphore.config import SemaphoreSettings
from fifo_semaphore.errors import ConfigurationError, ImbalanceError, SemaphoreError
from fifo_semaphore.gather import bounded_gather
from fifo_semaphore.semaphore import Semaphore


__all__ = [
    "AsyncPermitGate",
    "ConfigurationError",
    "ImbalanceError",
    "PermitGateBase",
    "PermitSlot",
    "Semaphore",
    "SemaphoreError",
    "SemaphoreSettings",
    "bounded_gather",
]
