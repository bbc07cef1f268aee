"""Unit tests for smartcity.core.security: bcrypt hashing and verification."""

import unittest

from smartcity.core.security import PasswordHasher


class TestPasswordHasher(unittest.TestCase):
    """hash/verify round trip, fresh salt per hash, and no exceptions on bad input."""

    def setUp(self) -> None:
        self.hasher = PasswordHasher(rounds=4)

    def test_verify_accepts_original_password(self) -> None:
        hashed = self.hasher.hash("secret1")
        self.assertTrue(self.hasher.verify("secret1", hashed))

    def test_verify_rejects_wrong_password(self) -> None:
        hashed = self.hasher.hash("secret1")
        self.assertFalse(self.hasher.verify("secret2", hashed))

    def test_same_password_hashes_differ(self) -> None:
        self.assertNotEqual(self.hasher.hash("secret1"), self.hasher.hash("secret1"))

    def test_hash_embeds_cost_and_is_not_plaintext(self) -> None:
        hashed = self.hasher.hash("secret1")
        self.assertTrue(hashed.startswith("$2b$04$"))
        self.assertNotIn("secret1", hashed)

    def test_malformed_hash_returns_false(self) -> None:
        self.assertFalse(self.hasher.verify("secret1", "not-a-bcrypt-hash"))
        self.assertFalse(self.hasher.verify("secret1", ""))

    def test_non_string_hash_returns_false(self) -> None:
        self.assertFalse(self.hasher.verify("secret1", None))  # type: ignore[arg-type]

    def test_input_beyond_72_bytes_is_ignored(self) -> None:
        base = "x" * 72
        hashed = self.hasher.hash(base + "tail-one")
        self.assertTrue(self.hasher.verify(base + "tail-two", hashed))

    def test_verify_dummy_always_false(self) -> None:
        self.assertFalse(self.hasher.verify_dummy("secret1"))
        self.assertFalse(self.hasher.verify_dummy("secret1"))
