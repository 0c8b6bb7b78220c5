import io
import os
import tempfile
import unittest
from unittest.mock import patch

from portal.exceptions import StorageError
from portal.storage import (
    InMemoryStorageClient,
    LocalStorageClient,
    join_url,
    make_locator,
    unique_blob_name,
)


class BlobNameTests(unittest.TestCase):
    def test_keeps_original_basename(self):
        with patch("portal.storage.time.time", return_value=1700000000.123):
            name = unique_blob_name("notes.pdf")
        self.assertTrue(name.startswith("1700000000123-"))
        self.assertTrue(name.endswith("-notes.pdf"))

    def test_drops_directories(self):
        self.assertTrue(unique_blob_name("../../etc/passwd").endswith("-passwd"))
        self.assertTrue(unique_blob_name("C:\\docs\\a.pdf").endswith("-a.pdf"))
        self.assertTrue(unique_blob_name("").endswith("-upload"))

    def test_same_file_same_instant_differs(self):
        with patch("portal.storage.time.time", return_value=1.0):
            self.assertNotEqual(unique_blob_name("a.pdf"), unique_blob_name("a.pdf"))

    def test_join_url(self):
        self.assertEqual(
            join_url("http://localhost:3000/", "/uploads/a.pdf"),
            "http://localhost:3000/uploads/a.pdf",
        )

    def test_make_locator_normalizes_prefix(self):
        self.assertEqual(make_locator("/files/", "a.pdf"), "files/a.pdf")
        self.assertEqual(make_locator("", "a.pdf"), "a.pdf")


class LocalStorageClientTests(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.root = os.path.join(self.tmp.name, "uploads")
        self.storage = LocalStorageClient(root=self.root, base_url="http://h:3000")

    def tearDown(self):
        self.tmp.cleanup()

    def test_save_writes_blob(self):
        locator = self.storage.save("a.pdf", io.BytesIO(b"%PDF-1.4"))
        self.assertTrue(locator.startswith("uploads/"))
        name = locator.split("/", 1)[1]
        with open(os.path.join(self.root, name), "rb") as f:
            self.assertEqual(f.read(), b"%PDF-1.4")
        self.assertEqual(self.storage.public_url(locator), f"http://h:3000/{locator}")

    def test_save_under_configured_prefix(self):
        storage = LocalStorageClient(
            root=self.root, base_url="http://h:3000", prefix="files"
        )
        locator = storage.save("a.pdf", io.BytesIO(b"x"))
        self.assertTrue(locator.startswith("files/"))
        self.assertEqual(storage.public_url(locator), f"http://h:3000/{locator}")

    def test_write_failure_is_storage_error(self):
        with patch("portal.storage.open", side_effect=OSError("disk full"), create=True):
            with self.assertRaises(StorageError):
                self.storage.save("a.pdf", io.BytesIO(b"x"))


class InMemoryStorageClientTests(unittest.TestCase):
    def test_save_and_read(self):
        storage = InMemoryStorageClient()
        locator = storage.save("a.pdf", io.BytesIO(b"data"))
        self.assertEqual(storage.get_bytes(locator), b"data")
        self.assertEqual(storage.public_url(locator), f"https://example.test/{locator}")
        with self.assertRaises(FileNotFoundError):
            storage.get_bytes("uploads/missing")


if __name__ == "__main__":
    unittest.main()
