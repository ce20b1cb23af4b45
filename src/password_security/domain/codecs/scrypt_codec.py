"""Packed binary codec for scrypt hashes.

Layout before base64: version (u8) | log2 N (u8) | r (u32 BE) | p (u32 BE)
| salt (16 bytes) | digest (32 bytes). The whole record is one padded
standard base64 token.
"""

from __future__ import annotations

import struct
from typing import Final

from password_security.domain.codecs.decoded_hash import DecodedHash
from password_security.domain.codecs.encoding import b64decode_padded, b64encode_padded
from password_security.domain.errors import MalformedHashError, UnsupportedRevisionError
from password_security.domain.options import ScryptParameters

SCRYPT_FORMAT_VERSION: Final[int] = 1
SALT_BYTES: Final[int] = 16
DIGEST_BYTES: Final[int] = 32
_HEADER = struct.Struct(">BBII")
_RECORD_BYTES: Final[int] = _HEADER.size + SALT_BYTES + DIGEST_BYTES


def encode_scrypt(*, parameters: ScryptParameters, salt: bytes, digest: bytes) -> str:
    """Pack scrypt parameters, salt and digest into one base64 token.

    Callers supply a 16 byte salt and a 32 byte digest; other sizes produce a
    record that `decode_scrypt` rejects as malformed.
    """

    header = _HEADER.pack(
        SCRYPT_FORMAT_VERSION,
        parameters.work_factor,
        parameters.block_size,
        parameters.parallelism,
    )
    return b64encode_padded(header + salt + digest)


def decode_scrypt(encoded: str) -> DecodedHash[ScryptParameters]:
    """Unpack one scrypt token without running the primitive."""

    record = b64decode_padded(encoded, field="scrypt_record")
    if len(record) < _HEADER.size:
        raise MalformedHashError("scrypt_record_too_short")

    version, work_factor, block_size, parallelism = _HEADER.unpack_from(record)
    if version != SCRYPT_FORMAT_VERSION:
        raise UnsupportedRevisionError(f"unsupported_scrypt_version_{version}")
    if len(record) != _RECORD_BYTES:
        raise MalformedHashError("invalid_scrypt_record_length")
    if not 1 <= work_factor <= 63 or block_size < 1 or parallelism < 1:
        raise MalformedHashError("scrypt_cost_out_of_range")

    salt_end = _HEADER.size + SALT_BYTES
    return DecodedHash(
        parameters=ScryptParameters(
            work_factor=work_factor,
            block_size=block_size,
            parallelism=parallelism,
        ),
        salt=record[_HEADER.size : salt_end],
        digest=record[salt_end:],
    )


def is_scrypt_hash(encoded: str) -> bool:
    """Return whether the string is a base64 token carrying a known scrypt version."""

    try:
        record = b64decode_padded(encoded, field="scrypt_record")
    except MalformedHashError:
        return False
    return len(record) == _RECORD_BYTES and record[0] == SCRYPT_FORMAT_VERSION
