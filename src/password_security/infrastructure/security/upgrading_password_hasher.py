"""Hasher that migrates stored hashes from any known family to the preferred one."""

from __future__ import annotations

import logging
from typing import Any

from password_security.domain.algorithms import HashAlgorithm
from password_security.domain.codecs.detection import detect_algorithm
from password_security.domain.credentials import (
    require_password,
    require_password_hash,
    require_user,
)
from password_security.domain.options import AlgorithmOptions
from password_security.domain.outcome import VerificationOutcome
from password_security.infrastructure.security.codec_password_hasher import CodecPasswordHasher
from password_security.infrastructure.security.hasher_factory import build_password_hasher

logger = logging.getLogger(__name__)


class UpgradingPasswordHasher:
    """Hash with the preferred family and accept hashes of every supported family.

    Hashes from another family verify with the parameters embedded in them
    and always report `SUCCESS_REHASH_NEEDED` so callers move them over.
    """

    def __init__(
        self,
        *,
        preferred: HashAlgorithm | str,
        options: AlgorithmOptions | None = None,
    ) -> None:
        self._preferred = build_password_hasher(preferred, options)
        # Legacy families only verify, so their own cost configuration is irrelevant.
        self._legacy: dict[HashAlgorithm, CodecPasswordHasher[Any]] = {
            algorithm: build_password_hasher(algorithm)
            for algorithm in HashAlgorithm
            if algorithm is not self._preferred.algorithm
        }

    @property
    def algorithm(self) -> HashAlgorithm:
        return self._preferred.algorithm

    def hash_password(self, *, user: object, password: str) -> str:
        """Hash plaintext password with the preferred family."""

        return self._preferred.hash_password(user=user, password=password)

    def verify_password(
        self,
        *,
        user: object,
        password_hash: str,
        password: str,
    ) -> VerificationOutcome:
        """Verify against whichever family produced the stored hash."""

        require_user(user=user)
        encoded = require_password_hash(password_hash=password_hash)
        require_password(password=password, allow_empty=True)

        stored_algorithm = detect_algorithm(encoded)
        if stored_algorithm is None:
            logger.warning("password_hash_family_unknown preferred=%s", self.algorithm.value)
            return VerificationOutcome.FAILED
        if stored_algorithm is self.algorithm:
            return self._preferred.verify_password(
                user=user,
                password_hash=encoded,
                password=password,
            )

        outcome = self._legacy[stored_algorithm].verify_password(
            user=user,
            password_hash=encoded,
            password=password,
        )
        if outcome is VerificationOutcome.FAILED:
            return outcome
        logger.info(
            "password_hash_family_upgrade_needed stored=%s preferred=%s",
            stored_algorithm.value,
            self.algorithm.value,
        )
        return VerificationOutcome.SUCCESS_REHASH_NEEDED

