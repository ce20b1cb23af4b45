"""Argon2id password hasher adapter."""

from __future__ import annotations

from argon2.low_level import Type, hash_secret_raw

from password_security.domain.algorithms import HashAlgorithm
from password_security.domain.codecs.argon2_codec import decode_argon2id, encode_argon2id
from password_security.domain.codecs.decoded_hash import DecodedHash
from password_security.domain.options import (
    AlgorithmOptions,
    Argon2Parameters,
    resolve_argon2_parameters,
)
from password_security.infrastructure.security.codec_password_hasher import CodecPasswordHasher


class Argon2idPasswordHasher(CodecPasswordHasher[Argon2Parameters]):
    """Password hashing adapter using Argon2id via argon2-cffi's raw API."""

    algorithm = HashAlgorithm.ARGON2ID
    digest_length = 32

    def _resolve_parameters(self, options: AlgorithmOptions) -> Argon2Parameters:
        return resolve_argon2_parameters(options)

    def _derive_digest(
        self,
        *,
        password: bytes,
        salt: bytes,
        parameters: Argon2Parameters,
        digest_length: int,
    ) -> bytes:
        return hash_secret_raw(
            secret=password,
            salt=salt,
            time_cost=parameters.iterations,
            memory_cost=parameters.memory_kib,
            parallelism=parameters.parallelism,
            hash_len=digest_length,
            type=Type.ID,
            version=parameters.version,
        )

    def _encode(self, *, parameters: Argon2Parameters, salt: bytes, digest: bytes) -> str:
        return encode_argon2id(parameters=parameters, salt=salt, digest=digest)

    def _decode(self, encoded: str) -> DecodedHash[Argon2Parameters]:
        return decode_argon2id(encoded)
