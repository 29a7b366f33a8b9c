"""Exceptions raised by fifo_semaphore."""


class SemaphoreError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(SemaphoreError, ValueError):
    """Exception raised when a gate is constructed with invalid settings.

    Raised at construction time (for example ``capacity < 1``), so a
    misconfigured gate never comes into existence.
    """


class ImbalanceError(SemaphoreError, RuntimeError):
    """Exception raised when release() has no matching acquire().

    This always indicates a caller bug such as a double release. The
    semaphore refuses to clamp its count, since that would hide a leaked
    or duplicated permit elsewhere.
    """
