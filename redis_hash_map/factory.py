"""
Factory helpers for building pools and hash maps in one step.

This module gives application developers a uniform way to open a Redis hash
map from keyword options without writing pool wiring code.
"""

from __future__ import annotations

from typing import Any

from .config import HashMapConfig
from .exceptions import ConfigurationError
from .hash_map import RedisHashMap
from .pool import ConnectionProvider, RedisConnectionPool

_CONFIG_OPTIONS = frozenset(
    {
        "redis_url",
        "namespace",
        "atomic_updates",
        "max_connections",
        "socket_timeout_seconds",
    }
)


def _resolve_config(config: HashMapConfig | None, options: dict[str, Any]) -> HashMapConfig:
    """
    Merge a prebuilt config with keyword options.

    Options may not be combined with ``config``; unknown names are rejected.
    """
    unknown = set(options) - _CONFIG_OPTIONS
    if unknown:
        names = ", ".join(sorted(str(key) for key in unknown))
        valid = ", ".join(sorted(_CONFIG_OPTIONS))
        raise ConfigurationError(f"Unknown hash map options: {names}. Supported: {valid}.")
    if config is not None:
        if options:
            raise ConfigurationError("Pass either config or keyword options, not both.")
        return config
    return HashMapConfig(**options)


def create_pool(config: HashMapConfig | None = None, **options: Any) -> RedisConnectionPool:
    """
    Build a :class:`RedisConnectionPool` from a config or keyword options.

    ``create_pool(redis_url="redis://cache:6379/1", max_connections=16)``
    """
    return RedisConnectionPool.from_config(_resolve_config(config, options))


def create_hash_map(
    name: str,
    *,
    config: HashMapConfig | None = None,
    provider: ConnectionProvider | None = None,
    **options: Any,
) -> RedisHashMap:
    """
    Build a :class:`RedisHashMap` for hash ``name``.

    When ``provider`` is omitted a new :class:`RedisConnectionPool` is created
    from the resolved configuration. Share one provider between maps to share
    the underlying connections.
    """
    resolved = _resolve_config(config, options)
    if provider is None:
        provider = RedisConnectionPool.from_config(resolved)
    return RedisHashMap(provider, name, config=resolved)
