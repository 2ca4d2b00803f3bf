"""
Shared fixtures for hash map unit tests.

Redis is replaced by ``fakeredis``. Its connection pool is wrapped by the real
:class:`redis_hash_map.pool.RedisConnectionPool`, so leasing, decoding and
release follow the production path.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any

import fakeredis
from redis import Redis

from redis_hash_map import HashMapConfig, RedisConnectionPool, RedisHashMap

HASH_COMMANDS = frozenset(
    {"hlen", "hexists", "hget", "hset", "hdel", "hkeys", "hvals", "hgetall", "delete", "evalsha"}
)


def fake_pool(server: fakeredis.FakeServer | None = None) -> RedisConnectionPool:
    """Return a pool whose connections talk to an in-process fake server."""
    client = fakeredis.FakeRedis(server=server or fakeredis.FakeServer(), decode_responses=True)
    return RedisConnectionPool(client.connection_pool)


class RecordingClient:
    """
    Proxy around a leased client that records hash command names.

    ``before`` callbacks keyed by command name run right before that command
    is forwarded, which lets tests interleave other writers deterministically.
    """

    def __init__(self, client: Redis, owner: "RecordingProvider") -> None:
        self._client = client
        self._owner = owner

    def __getattr__(self, name: str) -> Any:
        attribute = getattr(self._client, name)
        if name not in HASH_COMMANDS:
            return attribute

        def call(*args: Any, **kwargs: Any) -> Any:
            self._owner.record(name)
            hook = self._owner.before.pop(name, None)
            if hook is not None:
                hook()
            return attribute(*args, **kwargs)

        return call

    def register_script(self, script: str) -> Any:
        self._owner.record("script")
        return self._client.register_script(script)


class RecordingProvider:
    """Connection provider that counts leases and proxies leased clients."""

    def __init__(self, inner: RedisConnectionPool) -> None:
        self.inner = inner
        self.acquired = 0
        self.released = 0
        self.commands: list[str] = []
        self.before: dict[str, Callable[[], None]] = {}
        self._lock = threading.Lock()

    def record(self, command: str) -> None:
        with self._lock:
            self.commands.append(command)

    def acquire(self) -> Any:
        client = self.inner.acquire()
        with self._lock:
            self.acquired += 1
        return RecordingClient(client, self)

    def release(self, connection: Any) -> None:
        with self._lock:
            self.released += 1
        self.inner.release(connection._client)

    def reset(self) -> None:
        self.acquired = 0
        self.released = 0
        self.commands.clear()


def make_map(
    name: str = "testMap",
    *,
    server: fakeredis.FakeServer | None = None,
    **config_options: Any,
) -> tuple[RedisHashMap, RecordingProvider]:
    """Build a recording provider and a hash map on top of it."""
    provider = RecordingProvider(fake_pool(server))
    config = HashMapConfig(**config_options)
    return RedisHashMap(provider, name, config=config), provider
