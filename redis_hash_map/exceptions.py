"""
Custom exceptions raised by the Redis hash map adapter.

Keeping library-specific errors in one module gives users a predictable
import surface for catching and handling operational edge cases.
"""

from redis.exceptions import RedisError


class HashMapError(Exception):
    """Base error type for all library-level exceptions."""


class TypeMismatchError(HashMapError, TypeError):
    """
    Raised when a key or value is not a ``str``.

    The check runs before any command is sent to Redis, so a rejected call
    never touches the remote hash.
    """


class InvalidArgumentError(HashMapError, ValueError):
    """
    Raised when ``None`` is passed where absence is not allowed.

    Examples include a ``None`` key or value for :meth:`RedisHashMap.put` and a
    ``None`` source mapping (or entry) for :meth:`RedisHashMap.put_all`.
    """


class RemoteUnavailableError(HashMapError, RedisError):
    """
    Raised when a connection cannot be leased or a Redis command fails.

    The original redis exception is kept as ``__cause__``. The adapter never
    retries and never rolls back a partially applied command sequence.
    """


class ConfigurationError(HashMapError, ValueError):
    """
    Raised when configuration values or factory options are invalid.
    """
