"""Application service for credential checks with transparent hash upgrades."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from password_security.application.ports.password_hasher_port import PasswordHasherPort
from password_security.domain.outcome import VerificationOutcome

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CredentialCheckResult:
    """Credential check result model.

    `replacement_hash` is set only when the stored hash should be replaced;
    persisting it is the caller's responsibility.
    """

    outcome: VerificationOutcome
    replacement_hash: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.outcome.is_success


class CredentialService:
    """Hash new credentials and verify stored ones, issuing upgraded hashes."""

    def __init__(self, *, password_hasher: PasswordHasherPort) -> None:
        self._password_hasher = password_hasher

    def hash_new(self, *, user: object, password: str) -> str:
        """Hash a password chosen at registration or password change."""

        return self._password_hasher.hash_password(user=user, password=password)

    def check(self, *, user: object, password_hash: str, password: str) -> CredentialCheckResult:
        """Verify credentials and rehash with current settings when warranted."""

        outcome = self._password_hasher.verify_password(
            user=user,
            password_hash=password_hash,
            password=password,
        )
        if outcome is not VerificationOutcome.SUCCESS_REHASH_NEEDED:
            logger.info(
                "credential_check_result algorithm=%s outcome=%s",
                self._password_hasher.algorithm.value,
                outcome.value,
            )
            return CredentialCheckResult(outcome=outcome)

        replacement_hash = self._password_hasher.hash_password(user=user, password=password)
        logger.info(
            "credential_check_result algorithm=%s outcome=%s replacement_issued=true",
            self._password_hasher.algorithm.value,
            outcome.value,
        )
        return CredentialCheckResult(outcome=outcome, replacement_hash=replacement_hash)
