import unittest

from database import (
    Direction,
    MemoryDocumentStore,
    StoreWriteError,
    entries_collection,
    entry_path,
    user_path,
)
from database.paths import split_path


class TestPaths(unittest.TestCase):
    def test_layout(self):
        self.assertEqual(user_path("u1"), "users/u1")
        self.assertEqual(entry_path("u1", "2025-03-10"), "users/u1/entries/2025-03-10")
        self.assertEqual(split_path(entry_path("u1", "2025-03-10")), ("users/u1/entries", "2025-03-10"))

    def test_rejects_segments_with_slashes_and_collection_paths(self):
        with self.assertRaises(ValueError):
            user_path("a/b")
        with self.assertRaises(ValueError):
            split_path(entries_collection("u1"))


class TestMemoryDocumentStore(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.store = MemoryDocumentStore()

    async def test_merge_keeps_fields_absent_from_payload(self):
        path = user_path("u1")
        await self.store.set_document(path, {"displayName": "Ann", "morningRoutine": ["a"]})
        await self.store.set_document(path, {"displayName": "Anna"}, merge=True)

        document = await self.store.get_document(path)

        self.assertEqual(document.id, "u1")
        self.assertEqual(document.data, {"displayName": "Anna", "morningRoutine": ["a"]})

    async def test_replace_without_merge(self):
        path = user_path("u1")
        await self.store.set_document(path, {"displayName": "Ann", "morningRoutine": ["a"]})
        await self.store.set_document(path, {"displayName": "Anna"}, merge=False)

        document = await self.store.get_document(path)
        self.assertEqual(document.data, {"displayName": "Anna"})

    async def test_returned_documents_are_copies(self):
        path = user_path("u1")
        await self.store.set_document(path, {"morningRoutine": ["a"]})

        document = await self.store.get_document(path)
        document.data["morningRoutine"].append("b")

        self.assertEqual((await self.store.get_document(path)).data["morningRoutine"], ["a"])

    async def test_query_orders_limits_and_skips_nested_documents(self):
        collection = entries_collection("u1")
        await self.store.set_document(entry_path("u1", "2025-03-08"), {"timestamp": "2025-03-08T10:00:00"})
        await self.store.set_document(entry_path("u1", "2025-03-09"), {"timestamp": "2025-03-09T10:00:00"})
        await self.store.set_document(entry_path("u1", "2025-03-07"), {"timestamp": "2025-03-10T10:00:00"})
        await self.store.set_document(entry_path("u1", "2025-03-06"), {})
        await self.store.set_document(entry_path("u2", "2025-03-09"), {"timestamp": "2025-03-11T10:00:00"})

        recent = await self.store.query_collection(collection, order_by="timestamp",
                                                   direction=Direction.DESCENDING, limit=2)
        everything = await self.store.query_collection(collection, order_by="timestamp",
                                                       direction=Direction.ASCENDING)
        users = await self.store.query_collection("users")

        self.assertEqual([d.id for d in recent], ["2025-03-07", "2025-03-09"])
        self.assertEqual([d.id for d in everything], ["2025-03-08", "2025-03-09", "2025-03-07", "2025-03-06"])
        self.assertEqual(users, [])

    async def test_batch_applies_all_or_nothing(self):
        path = user_path("u1")
        await self.store.set_document(path, {"displayName": "Ann"})
        before = self.store.dump()

        batch = self.store.batch()
        batch.set(user_path("u2"), {"displayName": "Bob"})
        batch.set(path, ["not", "a", "mapping"], merge=True)

        with self.assertRaises(StoreWriteError):
            await batch.commit()

        self.assertEqual(self.store.dump(), before)
        self.assertEqual(self.store.failed_operations, 1)

    async def test_batch_cannot_be_reused(self):
        batch = self.store.batch().set(user_path("u1"), {"displayName": "Ann"})
        await batch.commit()

        with self.assertRaises(RuntimeError):
            batch.set(user_path("u2"), {})
        with self.assertRaises(RuntimeError):
            await batch.commit()

    async def test_batch_payload_is_copied_when_staged(self):
        fields = {"morningRoutine": ["a"]}
        batch = self.store.batch().set(user_path("u1"), fields)
        fields["morningRoutine"].append("b")
        await batch.commit()

        document = await self.store.get_document(user_path("u1"))
        self.assertEqual(document.data["morningRoutine"], ["a"])

    def test_health_check(self):
        health = self.store.health_check()
        self.assertEqual(health["status"], "ok")
        self.assertEqual(health["backend"], "memory")


if __name__ == "__main__":
    unittest.main(verbosity=2)
