import unittest

from portal.exceptions import HashingError
from portal.passwords import PasswordHasher, exceeds_bcrypt_limit


class PasswordHasherTests(unittest.TestCase):
    def test_default_work_factor(self):
        digest = PasswordHasher().hash("pw123")
        self.assertTrue(digest.startswith("$2b$10$"))
        self.assertNotEqual(digest, "pw123")

    def test_verify(self):
        hasher = PasswordHasher(rounds=4)
        digest = hasher.hash("pw123")
        self.assertTrue(hasher.verify("pw123", digest))
        self.assertFalse(hasher.verify("pw124", digest))

    def test_hashes_are_salted(self):
        hasher = PasswordHasher(rounds=4)
        self.assertNotEqual(hasher.hash("pw123"), hasher.hash("pw123"))

    def test_malformed_digest_is_an_error(self):
        with self.assertRaises(HashingError):
            PasswordHasher(rounds=4).verify("pw123", "not-a-bcrypt-digest")

    def test_bcrypt_limit(self):
        self.assertFalse(exceeds_bcrypt_limit("x" * 72))
        self.assertTrue(exceeds_bcrypt_limit("x" * 73))
        # 3 bytes per character in UTF-8.
        self.assertTrue(exceeds_bcrypt_limit("€" * 25))


if __name__ == "__main__":
    unittest.main()
