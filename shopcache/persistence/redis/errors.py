"""
Cache error taxonomy.

These never leave the persistence layer: ops.py catches them and turns them
into soft defaults. They exist so the failure kind stays inspectable on a
CacheResult.
"""


class CacheError(Exception):
    """Base class for any failure of a cache primitive."""

    def __init__(self, message: str, *, key: str | None = None, store: str | None = None):
        super().__init__(message)
        self.key = key
        self.store = store


class CacheConnectionError(CacheError):
    """Store unreachable, client not set up, or the server rejected the command."""


class CacheTimeoutError(CacheError):
    """Primitive did not complete within the configured operation timeout."""


class CacheDecodeError(CacheError):
    """Stored value is not valid JSON."""
