"""
Connection provider used by :class:`redis_hash_map.hash_map.RedisHashMap`.

The adapter depends on the small :class:`ConnectionProvider` surface rather
than on a concrete pool, so any object that can hand out and take back a
``redis.Redis`` client can be injected.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Protocol

from redis import ConnectionPool, Redis
from redis.exceptions import RedisError

from .config import HashMapConfig
from .exceptions import RemoteUnavailableError

_LOGGER = logging.getLogger(__name__)


class ConnectionProvider(Protocol):
    """
    Behavioral contract for connection sources.

    Implementations are expected to be safe for concurrent access, because
    several threads can lease connections at the same time.
    """

    def acquire(self) -> Redis:
        """Return a client bound to one connection, blocking or failing if none is available."""

    def release(self, connection: Redis) -> None:
        """Return ``connection`` to the provider. Calling it twice is harmless."""


class RedisConnectionPool:
    """
    :class:`ConnectionProvider` backed by ``redis.ConnectionPool``.

    ``acquire`` returns a single-connection ``Redis`` client, which checks one
    connection out of the pool when created. ``release`` closes that client,
    which puts the connection back.

    Parameters
    ----------
    pool:
        Shared redis connection pool. It is not closed by :meth:`release`; call
        :meth:`close` when the whole pool is no longer needed.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    @classmethod
    def from_url(
        cls,
        url: str,
        *,
        max_connections: int | None = None,
        socket_timeout_seconds: float | None = None,
    ) -> "RedisConnectionPool":
        """Build a pool that decodes replies to ``str``."""
        options: dict[str, object] = {"decode_responses": True}
        if max_connections is not None:
            options["max_connections"] = max_connections
        if socket_timeout_seconds is not None:
            options["socket_timeout"] = socket_timeout_seconds
        _LOGGER.debug("Creating redis connection pool url=%s options=%s", url, options)
        return cls(ConnectionPool.from_url(url, **options))

    @classmethod
    def from_config(cls, config: HashMapConfig) -> "RedisConnectionPool":
        return cls.from_url(
            config.redis_url,
            max_connections=config.max_connections,
            socket_timeout_seconds=config.socket_timeout_seconds,
        )

    @property
    def connection_pool(self) -> ConnectionPool:
        """Return the wrapped redis connection pool."""
        return self._pool

    def acquire(self) -> Redis:
        return Redis(connection_pool=self._pool, single_connection_client=True)

    def release(self, connection: Redis) -> None:
        connection.close()

    def close(self) -> None:
        """Disconnect every pooled connection."""
        _LOGGER.debug("Disconnecting redis connection pool")
        self._pool.disconnect()

    def __enter__(self) -> "RedisConnectionPool":
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> bool:
        self.close()
        return False


@contextmanager
def lease(provider: ConnectionProvider) -> Iterator[Redis]:
    """
    Lease one connection from ``provider`` for the duration of a ``with`` block.

    The connection is released on every exit path. Redis failures raised while
    acquiring or inside the block are re-raised as
    :class:`~redis_hash_map.exceptions.RemoteUnavailableError` with the
    original error as cause; other exceptions pass through untouched.
    """
    try:
        connection = provider.acquire()
    except RemoteUnavailableError:
        raise
    except RedisError as exc:
        _LOGGER.warning("Failed to acquire redis connection: %s", exc)
        raise RemoteUnavailableError(f"Could not acquire a Redis connection: {exc}") from exc
    _LOGGER.debug("Leased redis connection id=%s", id(connection))
    try:
        yield connection
    except RemoteUnavailableError:
        raise
    except RedisError as exc:
        _LOGGER.warning("Redis command failed: %s", exc)
        raise RemoteUnavailableError(f"Redis command failed: {exc}") from exc
    finally:
        provider.release(connection)
        _LOGGER.debug("Released redis connection id=%s", id(connection))
