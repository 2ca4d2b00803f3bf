"""
Integration test against a real Redis server.

Set ``REDIS_HASH_MAP_TEST_URL`` (for example ``redis://127.0.0.1:6379/15``)
to run it; otherwise the test case is skipped. Keys are namespaced with a
random prefix and removed afterwards.
"""

from __future__ import annotations

import os
import unittest
import uuid

from redis_hash_map import HashMapConfig, RedisConnectionPool, RedisHashMap, create_hash_map

REDIS_URL = os.environ.get("REDIS_HASH_MAP_TEST_URL")


@unittest.skipUnless(REDIS_URL, "REDIS_HASH_MAP_TEST_URL is not set")
class LiveRedisHashMapTest(unittest.TestCase):
    def setUp(self) -> None:
        self.pool = RedisConnectionPool.from_url(REDIS_URL)
        self.addCleanup(self.pool.close)
        self.namespace = f"it-{uuid.uuid4().hex}"
        self.map = create_hash_map("testMap", provider=self.pool, namespace=self.namespace)
        self.addCleanup(self.map.clear)

    def test_round_trip_through_live_server(self) -> None:
        self.assertTrue(self.map.is_empty())
        self.assertIsNone(self.map.put("name", "Vanya"))
        self.assertEqual("Vanya", self.map.put("name", "Ivan"))
        self.map.put_all({"age": "32", "city": "Kazan"})

        self.assertEqual(3, self.map.size())
        self.assertEqual(frozenset({"name", "age", "city"}), self.map.key_set())
        self.assertEqual({"name": "Ivan", "age": "32", "city": "Kazan"}, dict(self.map.entry_set()))
        self.assertTrue(self.map.contains_value("Kazan"))
        self.assertFalse(self.map.contains_value("kazan"))

        self.assertEqual("32", self.map.remove("age"))
        self.map.clear()
        self.assertEqual(0, self.map.size())

    def test_atomic_updates_on_live_server(self) -> None:
        atomic = create_hash_map(
            "atomicMap",
            provider=self.pool,
            namespace=self.namespace,
            atomic_updates=True,
        )
        self.addCleanup(atomic.clear)
        self.assertIsNone(atomic.put("k", "v1"))
        self.assertEqual("v1", atomic.put("k", "v2"))
        self.assertEqual("v2", atomic.remove("k"))

    def test_two_adapters_share_one_hash(self) -> None:
        other = RedisHashMap(self.pool, "testMap", config=HashMapConfig(namespace=self.namespace))
        self.map.put("shared", "1")
        self.assertEqual("1", other.get("shared"))


if __name__ == "__main__":
    unittest.main()
