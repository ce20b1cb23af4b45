"""Bcrypt password hasher adapter.

Every revision tag is verified through pyca/bcrypt's `$2b$` algorithm. The
tag itself is only carried in the encoding. Hashes produced by the buggy
crypt_blowfish `$2x$` variant for passwords with 8-bit characters therefore
never verify; such hashes need a password reset.
"""

from __future__ import annotations

import bcrypt

from password_security.domain.algorithms import HashAlgorithm
from password_security.domain.codecs.bcrypt_codec import (
    DIGEST_BYTES,
    DIGEST_CHARS,
    decode_bcrypt,
    encode_bcrypt,
)
from password_security.domain.codecs.decoded_hash import DecodedHash
from password_security.domain.codecs.encoding import bcrypt_b64decode, bcrypt_b64encode
from password_security.domain.options import (
    AlgorithmOptions,
    BcryptParameters,
    resolve_bcrypt_parameters,
)
from password_security.infrastructure.security.codec_password_hasher import CodecPasswordHasher

MAX_PASSWORD_BYTES = 72
# pyca/bcrypt derives the same digest for every revision; the tag is kept in the encoding only.
_PRIMITIVE_REVISION = "2b"


class BcryptPasswordHasher(CodecPasswordHasher[BcryptParameters]):
    """Password hashing adapter using bcrypt."""

    algorithm = HashAlgorithm.BCRYPT
    digest_length = DIGEST_BYTES

    def _resolve_parameters(self, options: AlgorithmOptions) -> BcryptParameters:
        return resolve_bcrypt_parameters(options)

    def _accepts_password(self, password: bytes) -> bool:
        return b"\x00" not in password

    def _derive_digest(
        self,
        *,
        password: bytes,
        salt: bytes,
        parameters: BcryptParameters,
        digest_length: int,
    ) -> bytes:
        setting = f"${_PRIMITIVE_REVISION}${parameters.work_factor:02d}${bcrypt_b64encode(salt)}"
        hashed = bcrypt.hashpw(password[:MAX_PASSWORD_BYTES], setting.encode("ascii"))
        return bcrypt_b64decode(
            hashed[-DIGEST_CHARS:].decode("ascii"),
            field="digest",
            length=digest_length,
        )

    def _encode(self, *, parameters: BcryptParameters, salt: bytes, digest: bytes) -> str:
        return encode_bcrypt(parameters=parameters, salt=salt, digest=digest)

    def _decode(self, encoded: str) -> DecodedHash[BcryptParameters]:
        return decode_bcrypt(encoded)
