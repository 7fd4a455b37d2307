"""Exceptions raised by the URL shortener service layer.

Classes:
    ShortenerError:
        Generic base class for service exceptions.

    StorageError:
        Raised when the durable store (PostgreSQL) fails or times out.

    CacheError:
        Raised when the fast cache (Redis) fails or times out.

    NotFoundError:
        Raised when no mapping exists for a short id. This is an expected
        outcome, not an infrastructure fault.

Example:
    >>> from shortener.exceptions import NotFoundError
    >>> raise NotFoundError("Ab3dE9x")
    Traceback (most recent call last):
        ...
    shortener.exceptions.NotFoundError: No mapping for short id 'Ab3dE9x'
"""

__all__ = ["ShortenerError", "StorageError", "CacheError", "NotFoundError"]


class ShortenerError(Exception):
    """Generic base class for service exceptions."""

    pass


class StorageError(ShortenerError):
    """Exception raised when the durable store fails.

    e.g. connection issues, timeouts, constraint violations, etc.
    """

    pass


class CacheError(ShortenerError):
    """Exception raised when the fast cache fails."""

    pass


class NotFoundError(ShortenerError):
    """Exception raised when a short id has no mapping in the durable store."""

    def __init__(self, short_id: str):
        super().__init__(f"No mapping for short id '{short_id}'")
        self.short_id = short_id
