"""Scrypt password hasher adapter backed by OpenSSL through hashlib."""

from __future__ import annotations

import hashlib

from password_security.domain.algorithms import HashAlgorithm
from password_security.domain.codecs.decoded_hash import DecodedHash
from password_security.domain.codecs.scrypt_codec import (
    DIGEST_BYTES,
    decode_scrypt,
    encode_scrypt,
)
from password_security.domain.errors import MalformedHashError
from password_security.domain.options import (
    AlgorithmOptions,
    ScryptParameters,
    resolve_scrypt_parameters,
    scrypt_limit_violation,
)
from password_security.infrastructure.security.codec_password_hasher import CodecPasswordHasher


class ScryptPasswordHasher(CodecPasswordHasher[ScryptParameters]):
    """Password hashing adapter using scrypt."""

    algorithm = HashAlgorithm.SCRYPT
    digest_length = DIGEST_BYTES

    def _resolve_parameters(self, options: AlgorithmOptions) -> ScryptParameters:
        return resolve_scrypt_parameters(options)

    def _derive_digest(
        self,
        *,
        password: bytes,
        salt: bytes,
        parameters: ScryptParameters,
        digest_length: int,
    ) -> bytes:
        return hashlib.scrypt(
            password,
            salt=salt,
            n=parameters.n,
            r=parameters.block_size,
            p=parameters.parallelism,
            maxmem=parameters.required_memory_bytes,
            dklen=digest_length,
        )

    def _encode(self, *, parameters: ScryptParameters, salt: bytes, digest: bytes) -> str:
        return encode_scrypt(parameters=parameters, salt=salt, digest=digest)

    def _decode(self, encoded: str) -> DecodedHash[ScryptParameters]:
        decoded = decode_scrypt(encoded)
        if scrypt_limit_violation(decoded.parameters) is not None:
            raise MalformedHashError("scrypt_cost_exceeds_primitive_limits")
        return decoded
