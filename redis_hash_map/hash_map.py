"""
Mutable mapping view over one named Redis hash.

:class:`RedisHashMap` exposes familiar mapping APIs while delegating every read
and mutation to Redis hash commands. No state is cached locally: each call
leases one pooled connection, runs its commands and releases the connection
before returning.

Atomicity
---------
Every single Redis command is atomic, but the adapter does not make sequences
of commands atomic. By default :meth:`RedisHashMap.put` and
:meth:`RedisHashMap.remove` read the previous value and then write in a second
command, so a concurrent writer can change the field in between and the
returned previous value may be stale. Enable
:attr:`HashMapConfig.atomic_updates` to run both steps as one Lua script.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, MutableMapping
from typing import Any

from .config import HashMapConfig
from .exceptions import InvalidArgumentError, TypeMismatchError
from .pool import ConnectionProvider, lease

_PUT_LUA = """
local previous = redis.call('HGET', KEYS[1], ARGV[1])
redis.call('HSET', KEYS[1], ARGV[1], ARGV[2])
return previous
"""

_REMOVE_LUA = """
local previous = redis.call('HGET', KEYS[1], ARGV[1])
if previous then
  redis.call('HDEL', KEYS[1], ARGV[1])
end
return previous
"""


def _check_text(value: Any, role: str) -> str:
    if value is None:
        raise InvalidArgumentError(f"{role} must not be None.")
    if not isinstance(value, str):
        raise TypeMismatchError(f"{role} must be str, got {type(value).__name__}.")
    return value


def _decode_text(value: bytes | str | None) -> str | None:
    if value is None or value is False:
        return None
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return str(value)


class RedisHashMap(MutableMapping[str, str]):
    """
    String-to-string mapping stored in a Redis hash.

    Parameters
    ----------
    provider:
        Connection source shared with the rest of the process. The map never
        closes it.
    name:
        Logical hash name. The Redis key is derived from it through
        :meth:`HashMapConfig.remote_key`.
    config:
        Optional settings. Only ``namespace`` and ``atomic_updates`` are read
        here; pool settings apply when the provider is built.

    Notes
    -----
    * An absent hash and an empty hash look the same: size 0.
    * ``key_set``, ``values`` and ``entry_set`` return immutable snapshots
      taken from a single read. They do not track later changes.
    * ``contains_value`` and ``entry_set`` read the whole hash.
    """

    def __init__(
        self,
        provider: ConnectionProvider,
        name: str,
        *,
        config: HashMapConfig | None = None,
    ) -> None:
        self._config = config or HashMapConfig()
        self._provider = provider
        self._name = name
        self._key = self._config.remote_key(name)

    @property
    def name(self) -> str:
        """Return the logical hash name."""
        return self._name

    @property
    def key(self) -> str:
        """Return the Redis key holding the hash."""
        return self._key

    @property
    def atomic_updates(self) -> bool:
        """Return ``True`` when put/remove run as single atomic scripts."""
        return self._config.atomic_updates

    # ------------------------------------------------------------------ #
    # Size and membership
    # ------------------------------------------------------------------ #

    def size(self) -> int:
        """Return the number of fields, 0 when the hash does not exist."""
        with lease(self._provider) as connection:
            return int(connection.hlen(self._key))

    def is_empty(self) -> bool:
        """Return ``True`` when the hash has no fields."""
        return self.size() == 0

    def contains_key(self, key: str) -> bool:
        """Return ``True`` when ``key`` is a field of the hash."""
        field = _check_text(key, "key")
        with lease(self._provider) as connection:
            return bool(connection.hexists(self._key, field))

    def contains_value(self, value: Any) -> bool:
        """
        Return ``True`` when some field holds exactly ``value``.

        The whole hash is read and scanned locally. Matching is exact and
        case-sensitive.
        """
        with lease(self._provider) as connection:
            raw = connection.hgetall(self._key)
        return any(_decode_text(item) == value for item in raw.values())

    # ------------------------------------------------------------------ #
    # Single field access
    # ------------------------------------------------------------------ #

    def get(self, key: str, default: str | None = None) -> str | None:
        """Return the value of ``key``, or ``default`` when it is missing."""
        field = _check_text(key, "key")
        with lease(self._provider) as connection:
            value = _decode_text(connection.hget(self._key, field))
        return default if value is None else value

    def put(self, key: str, value: str) -> str | None:
        """
        Set ``key`` to ``value`` and return the previous value.

        Returns
        -------
        str | None
            Previous value, or ``None`` if the field was absent. Without
            ``atomic_updates`` this is read in a separate command before the
            write and may not be the value actually overwritten.
        """
        field = _check_text(key, "key")
        text = _check_text(value, "value")
        with lease(self._provider) as connection:
            if self._config.atomic_updates:
                script = connection.register_script(_PUT_LUA)
                return _decode_text(script(keys=[self._key], args=[field, text]))
            previous = _decode_text(connection.hget(self._key, field))
            connection.hset(self._key, field, text)
            return previous

    def remove(self, key: str) -> str | None:
        """
        Delete ``key`` and return the value it held.

        Returns
        -------
        str | None
            Removed value, or ``None`` if the field did not exist. Without
            ``atomic_updates`` the value is read before a separate delete.
        """
        field = _check_text(key, "key")
        with lease(self._provider) as connection:
            if self._config.atomic_updates:
                script = connection.register_script(_REMOVE_LUA)
                return _decode_text(script(keys=[self._key], args=[field]))
            previous = _decode_text(connection.hget(self._key, field))
            connection.hdel(self._key, field)
            return previous

    # ------------------------------------------------------------------ #
    # Bulk operations
    # ------------------------------------------------------------------ #

    def put_all(self, entries: Mapping[str, str]) -> None:
        """
        Set every entry of ``entries`` with one ``HSET`` command.

        All keys and values are validated before Redis is contacted. An empty
        mapping is a no-op and sends nothing.
        """
        if entries is None:
            raise InvalidArgumentError("entries must not be None.")
        if not isinstance(entries, Mapping):
            raise TypeMismatchError(
                f"entries must be a mapping, got {type(entries).__name__}."
            )
        payload = {
            _check_text(key, "key"): _check_text(value, "value")
            for key, value in entries.items()
        }
        if not payload:
            return
        with lease(self._provider) as connection:
            connection.hset(self._key, mapping=payload)

    def clear(self) -> None:
        """Delete the whole Redis key."""
        with lease(self._provider) as connection:
            connection.delete(self._key)

    # ------------------------------------------------------------------ #
    # Snapshots
    # ------------------------------------------------------------------ #

    def key_set(self) -> frozenset[str]:
        """Return a snapshot of all field names."""
        with lease(self._provider) as connection:
            raw = connection.hkeys(self._key)
        return frozenset(_decode_text(item) for item in raw)

    def values(self) -> tuple[str, ...]:  # type: ignore[override]
        """Return a snapshot of all field values."""
        with lease(self._provider) as connection:
            raw = connection.hvals(self._key)
        return tuple(_decode_text(item) for item in raw)

    def entry_set(self) -> frozenset[tuple[str, str]]:
        """Return a snapshot of all ``(field, value)`` pairs."""
        return frozenset(self.items_dict().items())

    def items_dict(self) -> dict[str, str]:
        """Return a full dictionary snapshot of the hash."""
        with lease(self._provider) as connection:
            raw = connection.hgetall(self._key)
        return {_decode_text(field): _decode_text(value) for field, value in raw.items()}

    def keys(self) -> frozenset[str]:  # type: ignore[override]
        return self.key_set()

    def items(self) -> frozenset[tuple[str, str]]:  # type: ignore[override]
        return self.entry_set()

    # ------------------------------------------------------------------ #
    # Mapping protocol
    # ------------------------------------------------------------------ #

    def __getitem__(self, key: str) -> str:
        value = self.get(key)
        if value is None:
            raise KeyError(key)
        return value

    def __setitem__(self, key: str, value: str) -> None:
        field = _check_text(key, "key")
        text = _check_text(value, "value")
        with lease(self._provider) as connection:
            connection.hset(self._key, field, text)

    def __delitem__(self, key: str) -> None:
        field = _check_text(key, "key")
        with lease(self._provider) as connection:
            removed = int(connection.hdel(self._key, field))
        if not removed:
            raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        return self.contains_key(key)  # type: ignore[arg-type]

    def __iter__(self) -> Iterator[str]:
        return iter(self.key_set())

    def __len__(self) -> int:
        return self.size()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r}, key={self._key!r})"
