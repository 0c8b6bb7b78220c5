import io
import tempfile
import unittest
from unittest.mock import patch

from portal import dependencies
from portal.config import Settings


class StorageClientWiringTests(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        dependencies._storage_client = None
        self.addCleanup(setattr, dependencies, "_storage_client", None)

    def _storage_with(self, **overrides):
        values = {
            "upload_dir": self.tmp.name,
            "public_base_url": "http://localhost:3000",
            "use_in_memory_backends": False,
            "cos_bucket": None,
        }
        values.update(overrides)
        with patch(
            "portal.dependencies.get_settings", return_value=Settings(**values)
        ):
            return dependencies.get_storage_client()

    def test_local_locators_follow_url_prefix(self):
        storage = self._storage_with(upload_url_prefix="/files")
        locator = storage.save("a.pdf", io.BytesIO(b"x"))
        self.assertTrue(locator.startswith("files/"))
        self.assertEqual(
            storage.public_url(locator), f"http://localhost:3000/{locator}"
        )

    @patch("portal.storage.boto3.client")
    def test_bucket_locators_use_public_base_url(self, mock_client):
        storage = self._storage_with(
            cos_bucket="submissions",
            public_base_url="https://cdn.example.test",
        )
        locator = storage.save("a.pdf", io.BytesIO(b"x"))
        self.assertTrue(locator.startswith("uploads/"))
        mock_client.return_value.upload_fileobj.assert_called_once()
        self.assertEqual(
            storage.public_url(locator), f"https://cdn.example.test/{locator}"
        )
        mock_client.return_value.generate_presigned_url.assert_not_called()


if __name__ == "__main__":
    unittest.main()
