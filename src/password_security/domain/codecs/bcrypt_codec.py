"""Modular crypt codec for bcrypt hashes: `$<rev>$<cost>$<salt22><digest31>`."""

from __future__ import annotations

import re
from typing import Final

from password_security.domain.algorithms import BcryptRevision
from password_security.domain.codecs.decoded_hash import DecodedHash
from password_security.domain.codecs.encoding import bcrypt_b64decode, bcrypt_b64encode
from password_security.domain.errors import MalformedHashError, UnsupportedRevisionError
from password_security.domain.options import (
    MAX_WORK_FACTOR,
    MIN_BCRYPT_WORK_FACTOR,
    BcryptParameters,
)

SALT_BYTES: Final[int] = 16
DIGEST_BYTES: Final[int] = 23
SALT_CHARS: Final[int] = 22
DIGEST_CHARS: Final[int] = 31
_PREFIX = re.compile(r"\$(2[a-z]?)\$")
_BODY = re.compile(r"(\d{2})\$([./A-Za-z0-9]{22})([./A-Za-z0-9]{31})")


def is_bcrypt_hash(encoded: str) -> bool:
    """Return whether the string carries a bcrypt-style `$2..$` prefix."""

    return _PREFIX.match(encoded) is not None


def encode_bcrypt(*, parameters: BcryptParameters, salt: bytes, digest: bytes) -> str:
    """Encode bcrypt revision, cost, salt and digest into the crypt string."""

    return (
        f"${parameters.revision.value}${parameters.work_factor:02d}$"
        f"{bcrypt_b64encode(salt)}{bcrypt_b64encode(digest)}"
    )


def decode_bcrypt(encoded: str) -> DecodedHash[BcryptParameters]:
    """Parse one bcrypt crypt string without running the primitive."""

    prefix = _PREFIX.match(encoded)
    if prefix is None:
        raise MalformedHashError("invalid_bcrypt_prefix")
    try:
        revision = BcryptRevision(prefix.group(1))
    except ValueError as error:
        raise UnsupportedRevisionError(f"unsupported_bcrypt_revision_{prefix.group(1)}") from error

    body = _BODY.fullmatch(encoded[prefix.end() :])
    if body is None:
        raise MalformedHashError("invalid_bcrypt_structure")
    cost_text, salt_text, digest_text = body.groups()
    work_factor = int(cost_text)
    if not MIN_BCRYPT_WORK_FACTOR <= work_factor <= MAX_WORK_FACTOR:
        raise MalformedHashError("bcrypt_cost_out_of_range")

    # Some implementations leave the unused salt bits set; only the digest must be canonical.
    salt = bcrypt_b64decode(salt_text, field="salt", length=SALT_BYTES, canonical=False)
    digest = bcrypt_b64decode(digest_text, field="digest", length=DIGEST_BYTES)
    return DecodedHash(
        parameters=BcryptParameters(revision=revision, work_factor=work_factor),
        salt=salt,
        digest=digest,
    )
