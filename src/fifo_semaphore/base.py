"""Base classes and protocols for permit gates."""

import asyncio
import functools
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, Protocol, TypeVar, cast


F = TypeVar("F", bound=Callable[..., Any])


class AsyncPermitGate(Protocol):
    """Protocol defining the interface for permit gates.

    Anything that hands out labelled permits and takes them back can be
    used wherever a gate is expected.
    """

    async def acquire(self, label: str) -> None:
        """Acquire one permit, waiting until one is available."""
        ...

    def release(self) -> None:
        """Return one permit."""
        ...


class PermitSlot:
    """Async context manager holding one permit under an explicit label."""

    def __init__(self, gate: AsyncPermitGate, label: str):
        self._gate = gate
        self._label = label

    @property
    def label(self) -> str:
        return self._label

    async def __aenter__(self) -> None:
        """Enter the async context manager by acquiring a permit."""
        await self._gate.acquire(self._label)

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit the async context manager by releasing the permit."""
        self._gate.release()


class PermitGateBase(ABC):
    """Abstract base class for permit gates.

    Provides default implementations for context manager and decorator patterns.
    Subclasses only need to implement acquire() and release().

    The context manager pattern is the canonical usage:
        async with gate:
            await operation()

    When the permit should carry a meaningful label:
        async with gate.slot("deploy:api"):
            await operation()

    The decorator pattern is a convenience wrapper:
        @gate
        async def my_function():
            await operation()
    """

    @abstractmethod
    async def acquire(self, label: str) -> None:
        """Acquire one permit.

        This method will wait until a permit is available.
        Subclasses must implement this method.
        """
        raise NotImplementedError

    @abstractmethod
    def release(self) -> None:
        """Return one permit to the gate.

        Subclasses must implement this method.
        """
        raise NotImplementedError

    def slot(self, label: str) -> PermitSlot:
        """Get a context manager that holds one permit under ``label``.

        Args:
            label: Diagnostic label for the permit request

        Returns:
            Context manager that acquires on enter and releases on exit
        """
        return PermitSlot(self, label)

    async def __aenter__(self) -> None:
        """Enter the async context manager, labelled with the current task name."""
        await self.acquire(_current_task_label())

    async def __aexit__(
        self, exc_type: Any, exc_val: Any, exc_tb: Any
    ) -> None:
        """Exit the async context manager by releasing the permit."""
        self.release()

    def __call__(self, func: F) -> F:
        """Decorate an async function so each call holds a permit.

        Args:
            func: The async function to decorate

        Returns:
            The decorated function, labelled with its qualified name
        """
        if not callable(func):
            raise TypeError(f"Expected callable, got {type(func).__name__}")

        label = getattr(func, "__qualname__", repr(func))

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            async with self.slot(label):
                return await func(*args, **kwargs)

        return cast(F, wrapper)


def _current_task_label() -> str:
    task = asyncio.current_task()
    if task is None:
        return "<no task>"
    return task.get_name()
