"""Password hashing.

Stored format: ``pbkdf2_sha256$<iterations>$<salt_hex>$<hash_hex>``.
Comparison is constant time. The hasher is injected into the Basic verifier
and the bearer-token issuer, so tests can lower the iteration count.
"""

from __future__ import annotations

import hashlib
import hmac
import secrets
from typing import Protocol, runtime_checkable


ALGORITHM = "pbkdf2_sha256"
DEFAULT_ITERATIONS = 600_000
SALT_BYTES = 16


@runtime_checkable
class PasswordHasher(Protocol):
    """Pluggable password comparison."""

    def hash(self, password: str) -> str:
        """Return an encoded hash for ``password``."""
        ...

    def verify(self, password: str, encoded: str) -> bool:
        """Check ``password`` against an encoded hash."""
        ...


class Pbkdf2PasswordHasher:
    """PBKDF2-HMAC-SHA256 with a random per-password salt."""

    def __init__(self, iterations: int = DEFAULT_ITERATIONS) -> None:
        if iterations < 1:
            msg = "iterations must be positive"
            raise ValueError(msg)
        self.iterations = iterations
        # Verified against when the user does not exist, so unknown
        # usernames cost the same as wrong passwords.
        self._dummy_hash = self.hash(secrets.token_hex(16))

    def hash(self, password: str) -> str:
        salt = secrets.token_bytes(SALT_BYTES)
        digest = _derive(password, salt, self.iterations)
        return f"{ALGORITHM}${self.iterations}${salt.hex()}${digest.hex()}"

    def verify(self, password: str, encoded: str) -> bool:
        try:
            algorithm, iterations, salt_hex, hash_hex = encoded.split("$")
            rounds = int(iterations)
            salt = bytes.fromhex(salt_hex)
            expected = bytes.fromhex(hash_hex)
        except ValueError:
            return False
        if algorithm != ALGORITHM or rounds < 1 or not expected:
            return False
        return hmac.compare_digest(_derive(password, salt, rounds), expected)

    def burn(self, password: str) -> None:
        """Spend one verification on the dummy hash and discard the result."""
        self.verify(password, self._dummy_hash)


def _derive(password: str, salt: bytes, iterations: int) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)


__all__ = ["DEFAULT_ITERATIONS", "PasswordHasher", "Pbkdf2PasswordHasher"]
