"""Password hashing for stored credentials."""

import secrets

import bcrypt

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
DEFAULT_BCRYPT_ROUNDS = 12

# bcrypt only looks at the first 72 bytes of input.
BCRYPT_MAX_BYTES = 72

# Length limits enforced on registration and password change.
PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 128


class PasswordHasher:
    """
    One-way salted hashing with bcrypt.

    The returned hash is self-describing ($2b$<cost>$<salt><digest>), so
    verification needs nothing but the stored string.
    """

    def __init__(self, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> None:
        self.rounds = rounds
        self._dummy_hash: str | None = None

    def hash(self, password: str) -> str:
        """Hash a plain-text password for storage with a fresh salt."""
        pw_bytes = password.encode("utf-8")[:BCRYPT_MAX_BYTES]
        return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, password: str, hashed: str) -> bool:
        """Verify a plain password against a stored hash. Never raises."""
        try:
            pw_bytes = password.encode("utf-8")[:BCRYPT_MAX_BYTES]
            return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
        except (ValueError, TypeError, AttributeError):
            return False

    def verify_dummy(self, password: str) -> bool:
        """
        Run a full verification against a throwaway hash and return False.

        Used when no account matches, so a failed login costs the same whether
        or not the email exists.
        """
        if self._dummy_hash is None:
            self._dummy_hash = self.hash(secrets.token_urlsafe(16))
        self.verify(password, self._dummy_hash)
        return False
