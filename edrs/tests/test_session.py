import json
import tempfile
import unittest
from pathlib import Path

from edrs.session import FileSessionStore, InMemorySessionStore


class InMemorySessionStoreTests(unittest.TestCase):
    def test_set_and_clear(self):
        store = InMemorySessionStore()
        store.set_token("abc")
        store.set_user({"username": "ana"})
        self.assertEqual(store.get_token(), "abc")
        self.assertEqual(store.get_user(), {"username": "ana"})

        store.clear()
        store.clear()
        self.assertIsNone(store.get_token())
        self.assertIsNone(store.get_user())


class FileSessionStoreTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "nested" / "session.json"

    def tearDown(self):
        self._tmp.cleanup()

    def test_persists_between_instances(self):
        FileSessionStore(self.path).set_token("abc")
        FileSessionStore(self.path).set_user({"id": 7})

        store = FileSessionStore(self.path)
        self.assertEqual(store.get_token(), "abc")
        self.assertEqual(store.get_user(), {"id": 7})
        self.assertEqual(
            json.loads(self.path.read_text(encoding="utf-8")),
            {"token": "abc", "user": {"id": 7}},
        )

    def test_missing_file_reads_empty(self):
        store = FileSessionStore(self.path)
        self.assertIsNone(store.get_token())
        self.assertIsNone(store.get_user())

    def test_clear_is_idempotent(self):
        store = FileSessionStore(self.path)
        store.set_token("abc")
        store.clear()
        store.clear()
        self.assertFalse(self.path.exists())
        self.assertIsNone(store.get_token())

    def test_unreadable_file_is_ignored(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_text("{not json", encoding="utf-8")
        store = FileSessionStore(self.path)
        self.assertIsNone(store.get_token())
        store.set_token("fresh")
        self.assertEqual(store.get_token(), "fresh")

    def test_set_user_none_removes_user(self):
        store = FileSessionStore(self.path)
        store.set_user({"id": 1})
        store.set_user(None)
        self.assertIsNone(store.get_user())


if __name__ == "__main__":
    unittest.main()
