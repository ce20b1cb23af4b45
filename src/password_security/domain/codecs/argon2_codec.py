"""PHC string codec for Argon2id hashes.

Grammar: `$argon2id$v=<version>$m=<KiB>,t=<iterations>,p=<parallelism>$<salt>$<digest>`
where salt and digest use standard base64 without padding. A missing
`v=` segment denotes version 16, as in the reference implementation.
"""

from __future__ import annotations

import re
from typing import Final

from password_security.domain.codecs.decoded_hash import DecodedHash
from password_security.domain.codecs.encoding import b64decode_unpadded, b64encode_unpadded
from password_security.domain.errors import MalformedHashError, UnsupportedRevisionError
from password_security.domain.options import (
    ARGON2_MAX_ITERATIONS,
    ARGON2_MAX_MEMORY_KIB,
    ARGON2_MAX_PARALLELISM,
    SUPPORTED_ARGON2_VERSIONS,
    Argon2Parameters,
)

ARGON2ID_TAG: Final[str] = "argon2id"
ARGON2ID_PREFIX: Final[str] = f"${ARGON2ID_TAG}$"
MIN_SALT_BYTES: Final[int] = 8
MIN_DIGEST_BYTES: Final[int] = 4
_LEGACY_VERSION: Final[int] = 0x10
_VERSION_SEGMENT = re.compile(r"v=(\d{1,10})")
_COST_SEGMENT = re.compile(r"m=(\d{1,10}),t=(\d{1,10}),p=(\d{1,10})")


def encode_argon2id(*, parameters: Argon2Parameters, salt: bytes, digest: bytes) -> str:
    """Encode Argon2id parameters, salt and digest as a PHC string."""

    return (
        f"{ARGON2ID_PREFIX}v={parameters.version}"
        f"$m={parameters.memory_kib},t={parameters.iterations},p={parameters.parallelism}"
        f"${b64encode_unpadded(salt)}${b64encode_unpadded(digest)}"
    )


def decode_argon2id(encoded: str) -> DecodedHash[Argon2Parameters]:
    """Parse one Argon2id PHC string without running the primitive."""

    segments = encoded.split("$")
    if len(segments) not in (5, 6) or segments[0] != "" or segments[1] != ARGON2ID_TAG:
        raise MalformedHashError("invalid_argon2id_structure")

    if len(segments) == 6:
        version = _parse_version(segments[2])
        cost_segment, salt_segment, digest_segment = segments[3:]
    else:
        version = _LEGACY_VERSION
        cost_segment, salt_segment, digest_segment = segments[2:]

    cost_match = _COST_SEGMENT.fullmatch(cost_segment)
    if cost_match is None:
        raise MalformedHashError("invalid_argon2id_cost_segment")
    memory_kib, iterations, parallelism = (int(value) for value in cost_match.groups())
    if not (
        1 <= iterations <= ARGON2_MAX_ITERATIONS
        and 1 <= parallelism <= ARGON2_MAX_PARALLELISM
        and 8 * parallelism <= memory_kib <= ARGON2_MAX_MEMORY_KIB
    ):
        raise MalformedHashError("argon2id_cost_out_of_range")

    salt = b64decode_unpadded(salt_segment, field="salt")
    digest = b64decode_unpadded(digest_segment, field="digest")
    if len(salt) < MIN_SALT_BYTES:
        raise MalformedHashError("argon2id_salt_too_short")
    if len(digest) < MIN_DIGEST_BYTES:
        raise MalformedHashError("argon2id_digest_too_short")

    return DecodedHash(
        parameters=Argon2Parameters(
            memory_kib=memory_kib,
            iterations=iterations,
            parallelism=parallelism,
            version=version,
        ),
        salt=salt,
        digest=digest,
    )


def _parse_version(segment: str) -> int:
    match = _VERSION_SEGMENT.fullmatch(segment)
    if match is None:
        raise MalformedHashError("invalid_argon2id_version_segment")
    version = int(match.group(1))
    if version not in SUPPORTED_ARGON2_VERSIONS:
        raise UnsupportedRevisionError(f"unsupported_argon2id_version_{version}")
    return version
