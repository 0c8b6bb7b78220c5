import unittest
from unittest.mock import patch

from portal.db import InMemoryDbClient
from portal.passwords import PasswordHasher
from scripts import create_account


class CreateAccountScriptTests(unittest.TestCase):
    def setUp(self):
        self.db = InMemoryDbClient()
        db_patch = patch.object(create_account, "get_db_client", return_value=self.db)
        hasher_patch = patch.object(
            create_account, "get_password_hasher", return_value=PasswordHasher(rounds=4)
        )
        db_patch.start()
        hasher_patch.start()
        self.addCleanup(db_patch.stop)
        self.addCleanup(hasher_patch.stop)

    def _run(self, email="a@x.com"):
        return create_account.main(
            [
                "--name",
                "Alice",
                "--email",
                email,
                "--role",
                "senior",
                "--password",
                "pw123",
            ]
        )

    def test_registers_account(self):
        self.assertEqual(self._run(), 0)
        self.assertEqual(self.db.find_account_by_email("a@x.com").role, "senior")

    def test_duplicate_returns_error_code(self):
        self.assertEqual(self._run(), 0)
        self.assertEqual(self._run(), 1)
        self.assertEqual(len(self.db.accounts), 1)

    @patch("scripts.create_account.getpass.getpass", return_value="typed-pw")
    def test_prompts_for_password(self, mock_getpass):
        code = create_account.main(
            ["--name", "Bob", "--email", "b@x.com", "--role", "junior"]
        )
        self.assertEqual(code, 0)
        mock_getpass.assert_called_once()


if __name__ == "__main__":
    unittest.main()
