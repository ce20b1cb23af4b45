"""Dispatch from the closed algorithm set to concrete hasher adapters."""

from __future__ import annotations

from typing import Any, Final

from password_security.domain.algorithms import HashAlgorithm
from password_security.domain.errors import InvalidConfigurationError
from password_security.domain.options import AlgorithmOptions
from password_security.infrastructure.security.argon2_password_hasher import (
    Argon2idPasswordHasher,
)
from password_security.infrastructure.security.bcrypt_password_hasher import BcryptPasswordHasher
from password_security.infrastructure.security.codec_password_hasher import CodecPasswordHasher
from password_security.infrastructure.security.scrypt_password_hasher import ScryptPasswordHasher

_HASHER_TYPES: Final[dict[HashAlgorithm, type[CodecPasswordHasher[Any]]]] = {
    HashAlgorithm.ARGON2ID: Argon2idPasswordHasher,
    HashAlgorithm.BCRYPT: BcryptPasswordHasher,
    HashAlgorithm.SCRYPT: ScryptPasswordHasher,
}


def resolve_algorithm(algorithm: HashAlgorithm | str) -> HashAlgorithm:
    """Return the algorithm enum member or raise InvalidConfigurationError."""

    try:
        return HashAlgorithm(algorithm)
    except ValueError as exc:
        raise InvalidConfigurationError(f"unknown hash algorithm: {algorithm!r}") from exc


def build_password_hasher(
    algorithm: HashAlgorithm | str,
    options: AlgorithmOptions | None = None,
) -> CodecPasswordHasher[Any]:
    """Build the hasher for one family, validating its parameters eagerly."""

    return _HASHER_TYPES[resolve_algorithm(algorithm)](options)
