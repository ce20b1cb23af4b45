"""Family detection for stored encoded hashes."""

from __future__ import annotations

from password_security.domain.algorithms import HashAlgorithm
from password_security.domain.codecs.argon2_codec import ARGON2ID_PREFIX
from password_security.domain.codecs.bcrypt_codec import is_bcrypt_hash
from password_security.domain.codecs.scrypt_codec import is_scrypt_hash


def detect_algorithm(encoded: str) -> HashAlgorithm | None:
    """Return the family tagged in an encoded hash, or None when unknown.

    Detection only inspects the family marker; full validation is left to the codec.
    """

    if encoded.startswith(ARGON2ID_PREFIX):
        return HashAlgorithm.ARGON2ID
    if is_bcrypt_hash(encoded):
        return HashAlgorithm.BCRYPT
    if is_scrypt_hash(encoded):
        return HashAlgorithm.SCRYPT
    return None
