"""
redis_hash_map
==============

Use one named Redis hash as a Python ``MutableMapping[str, str]``.

Every operation is a round trip to Redis through a pooled connection that is
leased for that single call:

* :class:`redis_hash_map.hash_map.RedisHashMap` - the mapping adapter
* :class:`redis_hash_map.pool.RedisConnectionPool` - default connection provider
* :class:`redis_hash_map.config.HashMapConfig` - runtime settings

Nothing is cached locally and no operation spanning several Redis commands is
atomic unless ``atomic_updates`` is enabled, in which case ``put`` and
``remove`` run as single Lua scripts.

Typical usage::

    from redis_hash_map import create_hash_map

    users = create_hash_map("users", redis_url="redis://127.0.0.1:6379/0")
    users.put("u-1", "Alice")
    users["u-2"] = "Bob"
    assert users.get("u-1") == "Alice"
    assert users.key_set() == {"u-1", "u-2"}
    users.clear()

Sharing one pool between maps::

    from redis_hash_map import RedisConnectionPool, RedisHashMap

    with RedisConnectionPool.from_url("redis://127.0.0.1:6379/0") as pool:
        sessions = RedisHashMap(pool, "sessions")
        carts = RedisHashMap(pool, "carts")
"""

from .config import HashMapConfig
from .exceptions import (
    ConfigurationError,
    HashMapError,
    InvalidArgumentError,
    RemoteUnavailableError,
    TypeMismatchError,
)
from .factory import create_hash_map, create_pool
from .hash_map import RedisHashMap
from .pool import ConnectionProvider, RedisConnectionPool, lease

__all__ = [
    "ConfigurationError",
    "ConnectionProvider",
    "HashMapConfig",
    "HashMapError",
    "InvalidArgumentError",
    "RedisConnectionPool",
    "RedisHashMap",
    "RemoteUnavailableError",
    "TypeMismatchError",
    "create_hash_map",
    "create_pool",
    "lease",
]
