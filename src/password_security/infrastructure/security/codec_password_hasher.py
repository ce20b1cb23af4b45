"""Shared hash/verify flow for codec-backed password hasher adapters."""

from __future__ import annotations

import hmac
import logging
import secrets
from abc import ABC, abstractmethod
from typing import ClassVar, Generic, TypeVar

from password_security.domain.algorithms import HashAlgorithm
from password_security.domain.codecs.decoded_hash import DecodedHash
from password_security.domain.credentials import (
    require_password,
    require_password_hash,
    require_user,
)
from password_security.domain.errors import HashDecodeError, InvalidArgumentError
from password_security.domain.options import AlgorithmOptions
from password_security.domain.outcome import VerificationOutcome
from password_security.domain.policy import HashParameters, needs_rehash

ParamsT = TypeVar("ParamsT", bound=HashParameters)

SALT_BYTES = 16
logger = logging.getLogger(__name__)


class CodecPasswordHasher(ABC, Generic[ParamsT]):
    """Hash with configured parameters; verify with the parameters stored in the hash."""

    algorithm: ClassVar[HashAlgorithm]
    digest_length: ClassVar[int]

    def __init__(self, options: AlgorithmOptions | None = None) -> None:
        self._options = options if options is not None else AlgorithmOptions()
        self._parameters = self._resolve_parameters(self._options)

    @property
    def options(self) -> AlgorithmOptions:
        return self._options

    @property
    def parameters(self) -> ParamsT:
        """Cost parameters applied to newly produced hashes."""

        return self._parameters

    def hash_password(self, *, user: object, password: str) -> str:
        """Hash plaintext password with a fresh salt and the configured parameters."""

        require_user(user=user)
        secret = require_password(password=password).encode("utf-8")
        if not self._accepts_password(secret):
            raise InvalidArgumentError(f"password is not accepted by {self.algorithm.value}")

        salt = secrets.token_bytes(SALT_BYTES)
        digest = self._derive_digest(
            password=secret,
            salt=salt,
            parameters=self._parameters,
            digest_length=self.digest_length,
        )
        logger.debug("password_hash_created algorithm=%s", self.algorithm.value)
        return self._encode(parameters=self._parameters, salt=salt, digest=digest)

    def verify_password(
        self,
        *,
        user: object,
        password_hash: str,
        password: str,
    ) -> VerificationOutcome:
        """Verify candidate password and flag stored hashes weaker than configured."""

        require_user(user=user)
        encoded = require_password_hash(password_hash=password_hash)
        secret = require_password(password=password, allow_empty=True).encode("utf-8")

        try:
            decoded = self._decode(encoded)
        except HashDecodeError as error:
            logger.warning(
                "password_hash_decode_failed algorithm=%s reason=%s",
                self.algorithm.value,
                error.reason,
            )
            return VerificationOutcome.FAILED

        if not secret or not self._accepts_password(secret):
            return VerificationOutcome.FAILED

        candidate = self._derive_digest(
            password=secret,
            salt=decoded.salt,
            parameters=decoded.parameters,
            digest_length=len(decoded.digest),
        )
        if not hmac.compare_digest(candidate, decoded.digest):
            return VerificationOutcome.FAILED

        if needs_rehash(stored=decoded.parameters, current=self._parameters):
            logger.info("password_rehash_needed algorithm=%s", self.algorithm.value)
            return VerificationOutcome.SUCCESS_REHASH_NEEDED
        return VerificationOutcome.SUCCESS

    def decode(self, encoded: str) -> DecodedHash[ParamsT]:
        """Parse one encoded hash of this family; raises HashDecodeError."""

        return self._decode(encoded)

    def _accepts_password(self, password: bytes) -> bool:
        return True

    @abstractmethod
    def _resolve_parameters(self, options: AlgorithmOptions) -> ParamsT:
        """Resolve and validate family parameters; raises InvalidConfigurationError."""

    @abstractmethod
    def _derive_digest(
        self,
        *,
        password: bytes,
        salt: bytes,
        parameters: ParamsT,
        digest_length: int,
    ) -> bytes:
        """Run the underlying primitive."""

    @abstractmethod
    def _encode(self, *, parameters: ParamsT, salt: bytes, digest: bytes) -> str:
        """Encode parameters, salt and digest into the family grammar."""

    @abstractmethod
    def _decode(self, encoded: str) -> DecodedHash[ParamsT]:
        """Decode the family grammar; raises HashDecodeError."""
