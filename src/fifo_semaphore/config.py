"""Environment-driven settings for semaphores."""

import math
import os
from dataclasses import dataclass

from fifo_semaphore.errors import ConfigurationError
from fifo_semaphore.semaphore import Semaphore


def _env_str(name: str) -> str | None:
    v = os.getenv(name)
    return None if v is None or v.strip() == "" else v.strip()


def _env_int(name: str, default: int) -> int:
    v = _env_str(name)
    if v is None:
        return default
    try:
        return int(v)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {v!r}") from None


def _env_float(name: str, default: float | None) -> float | None:
    v = _env_str(name)
    if v is None:
        return default
    try:
        value = float(v)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {v!r}") from None
    if math.isnan(value):
        raise ConfigurationError(f"{name} must be a number, got {v!r}")
    return value


@dataclass(frozen=True)
class SemaphoreSettings:
    """Settings for building a Semaphore.

    Example:
        # SEMAPHORE_CAPACITY=4 SEMAPHORE_ACQUIRE_TIMEOUT=30
        semaphore = SemaphoreSettings.from_env().create()
    """

    capacity: int = 1
    acquire_timeout: float | None = None
    name: str | None = None

    @staticmethod
    def from_env(prefix: str = "SEMAPHORE_") -> "SemaphoreSettings":
        """Read settings from ``<prefix>CAPACITY``, ``<prefix>ACQUIRE_TIMEOUT``
        and ``<prefix>NAME``. Unset or blank variables keep their defaults.

        Raises:
            ConfigurationError: If a variable cannot be parsed
        """
        return SemaphoreSettings(
            capacity=_env_int(f"{prefix}CAPACITY", 1),
            acquire_timeout=_env_float(f"{prefix}ACQUIRE_TIMEOUT", None),
            name=_env_str(f"{prefix}NAME"),
        )

    def create(self) -> Semaphore:
        """Build a Semaphore from these settings.

        Raises:
            ConfigurationError: If the settings are out of range
        """
        return Semaphore(
            self.capacity, name=self.name, acquire_timeout=self.acquire_timeout
        )
