"""
Configuration model for Redis hash map adapters.

Settings cover the Redis endpoint, the connection pool limits handed to
``redis.ConnectionPool`` and the update mode used by
:meth:`redis_hash_map.hash_map.RedisHashMap.put` and
:meth:`redis_hash_map.hash_map.RedisHashMap.remove`.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from .exceptions import ConfigurationError

ENV_PREFIX = "REDIS_HASH_MAP_"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


def _env_bool(raw: str, name: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean flag, got {raw!r}.")


def _env_number(raw: str, name: str, kind: type) -> int | float:
    try:
        return kind(raw.strip())
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a {kind.__name__}, got {raw!r}.") from exc


@dataclass(slots=True)
class HashMapConfig:
    """
    Runtime settings for :class:`redis_hash_map.hash_map.RedisHashMap`.

    Parameters
    ----------
    redis_url:
        Redis connection URL used to build the connection pool.
    namespace:
        Optional key prefix. When set, hash ``name`` is stored under the Redis
        key ``"{namespace}:{name}"``; otherwise the key is ``name`` itself.
    atomic_updates:
        When true, ``put`` and ``remove`` run as one server-side Lua script so
        the returned previous value is exactly the value that was replaced.
        When false (default), they are a read followed by a separate write and
        a concurrent writer can slip in between.
    max_connections:
        Upper bound for pooled connections. ``None`` keeps the redis default.
    socket_timeout_seconds:
        Socket timeout applied by the redis client. ``None`` blocks.
    """

    redis_url: str = "redis://127.0.0.1:6379/0"
    namespace: str = ""
    atomic_updates: bool = False
    max_connections: int | None = None
    socket_timeout_seconds: float | None = None

    def __post_init__(self) -> None:
        """Validate configuration values at construction time."""
        if not self.redis_url or not self.redis_url.strip():
            raise ConfigurationError("HashMapConfig.redis_url must be non-empty.")
        if self.namespace != self.namespace.strip():
            raise ConfigurationError(
                "HashMapConfig.namespace must not have leading or trailing whitespace."
            )
        if self.max_connections is not None and self.max_connections <= 0:
            raise ConfigurationError("HashMapConfig.max_connections must be >= 1.")
        if self.socket_timeout_seconds is not None and self.socket_timeout_seconds <= 0:
            raise ConfigurationError("HashMapConfig.socket_timeout_seconds must be > 0.")

    def remote_key(self, name: str) -> str:
        """
        Return the Redis key that stores hash ``name``.

        Raises
        ------
        ConfigurationError
            If ``name`` is not a non-blank string.
        """
        if not isinstance(name, str) or not name.strip():
            raise ConfigurationError("Hash name must be a non-empty string.")
        if self.namespace:
            return f"{self.namespace}:{name}"
        return name

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "HashMapConfig":
        """
        Build configuration from ``REDIS_HASH_MAP_*`` environment variables.

        Recognized variables are ``REDIS_HASH_MAP_URL``,
        ``REDIS_HASH_MAP_NAMESPACE``, ``REDIS_HASH_MAP_ATOMIC``,
        ``REDIS_HASH_MAP_MAX_CONNECTIONS`` and
        ``REDIS_HASH_MAP_SOCKET_TIMEOUT``. Missing variables keep defaults.
        """
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}

        url = env.get(f"{ENV_PREFIX}URL")
        if url is not None:
            values["redis_url"] = url
        namespace = env.get(f"{ENV_PREFIX}NAMESPACE")
        if namespace is not None:
            values["namespace"] = namespace
        atomic = env.get(f"{ENV_PREFIX}ATOMIC")
        if atomic is not None:
            values["atomic_updates"] = _env_bool(atomic, f"{ENV_PREFIX}ATOMIC")
        max_connections = env.get(f"{ENV_PREFIX}MAX_CONNECTIONS")
        if max_connections:
            values["max_connections"] = _env_number(
                max_connections, f"{ENV_PREFIX}MAX_CONNECTIONS", int
            )
        timeout = env.get(f"{ENV_PREFIX}SOCKET_TIMEOUT")
        if timeout:
            values["socket_timeout_seconds"] = _env_number(
                timeout, f"{ENV_PREFIX}SOCKET_TIMEOUT", float
            )
        return cls(**values)  # type: ignore[arg-type]
