"""Closed set of supported password hashing algorithm families."""

from __future__ import annotations

from enum import StrEnum


class HashAlgorithm(StrEnum):
    """Algorithm families with a codec, a hasher and a rehash policy."""

    ARGON2ID = "argon2id"
    BCRYPT = "bcrypt"
    SCRYPT = "scrypt"


class BcryptRevision(StrEnum):
    """Bcrypt salt revision tags accepted in the `$<rev>$` prefix."""

    REVISION_2 = "2"
    REVISION_2A = "2a"
    REVISION_2B = "2b"
    REVISION_2X = "2x"
    REVISION_2Y = "2y"
