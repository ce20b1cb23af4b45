"""Port for password hashing and verification."""

from __future__ import annotations

from typing import Protocol

from password_security.domain.algorithms import HashAlgorithm
from password_security.domain.outcome import VerificationOutcome


class PasswordHasherPort(Protocol):
    """Password hashing/verification contract shared by every algorithm family."""

    @property
    def algorithm(self) -> HashAlgorithm:
        """Family used for newly produced hashes."""

    def hash_password(self, *, user: object, password: str) -> str:
        """Hash plaintext password into a self-describing encoded string."""

    def verify_password(
        self,
        *,
        user: object,
        password_hash: str,
        password: str,
    ) -> VerificationOutcome:
        """Verify plaintext password against a stored encoded hash."""
