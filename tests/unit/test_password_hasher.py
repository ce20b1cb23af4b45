from __future__ import annotations

import base64
import hashlib
import logging
import struct
from typing import Any

import argon2
import bcrypt
import pytest

from password_security.domain.algorithms import BcryptRevision, HashAlgorithm
from password_security.domain.codecs.detection import detect_algorithm
from password_security.domain.errors import InvalidArgumentError, InvalidConfigurationError
from password_security.domain.options import AlgorithmOptions
from password_security.domain.outcome import VerificationOutcome
from password_security.domain.strength import StrengthTier
from password_security.infrastructure.security.argon2_password_hasher import (
    Argon2idPasswordHasher,
)
from password_security.infrastructure.security.bcrypt_password_hasher import BcryptPasswordHasher
from password_security.infrastructure.security.codec_password_hasher import CodecPasswordHasher
from password_security.infrastructure.security.hasher_factory import build_password_hasher
from password_security.infrastructure.security.scrypt_password_hasher import ScryptPasswordHasher

USER = "user-42"
PASSWORD = "super-secret-password"

_CUSTOM = StrengthTier.CUSTOM
WEAK_OPTIONS: dict[HashAlgorithm, AlgorithmOptions] = {
    HashAlgorithm.ARGON2ID: AlgorithmOptions(
        strength_tier=_CUSTOM,
        memory_limit_bytes=64 * 1024,
        ops_limit=1,
        parallelism=1,
    ),
    HashAlgorithm.BCRYPT: AlgorithmOptions(strength_tier=_CUSTOM, work_factor=4),
    HashAlgorithm.SCRYPT: AlgorithmOptions(strength_tier=_CUSTOM, work_factor=4),
}
STRONG_OPTIONS: dict[HashAlgorithm, AlgorithmOptions] = {
    HashAlgorithm.ARGON2ID: AlgorithmOptions(
        strength_tier=_CUSTOM,
        memory_limit_bytes=128 * 1024,
        ops_limit=2,
        parallelism=1,
    ),
    HashAlgorithm.BCRYPT: AlgorithmOptions(strength_tier=_CUSTOM, work_factor=5),
    HashAlgorithm.SCRYPT: AlgorithmOptions(strength_tier=_CUSTOM, work_factor=5),
}


@pytest.fixture(params=list(HashAlgorithm), ids=lambda algorithm: algorithm.value)
def algorithm(request: pytest.FixtureRequest) -> HashAlgorithm:
    return request.param


@pytest.fixture
def hasher(algorithm: HashAlgorithm) -> CodecPasswordHasher[Any]:
    return build_password_hasher(algorithm, WEAK_OPTIONS[algorithm])


def test_hash_password_never_stores_plaintext_and_verifies(
    hasher: CodecPasswordHasher[Any],
) -> None:
    password_hash = hasher.hash_password(user=USER, password=PASSWORD)

    assert password_hash != PASSWORD
    assert PASSWORD not in password_hash
    assert detect_algorithm(password_hash) is hasher.algorithm
    outcome = hasher.verify_password(user=USER, password_hash=password_hash, password=PASSWORD)
    assert outcome is VerificationOutcome.SUCCESS


def test_wrong_password_fails_verification(hasher: CodecPasswordHasher[Any]) -> None:
    password_hash = hasher.hash_password(user=USER, password="correct")

    outcome = hasher.verify_password(user=USER, password_hash=password_hash, password="wrong")

    assert outcome is VerificationOutcome.FAILED


def test_same_password_hashes_differently_and_both_verify(
    hasher: CodecPasswordHasher[Any],
) -> None:
    first = hasher.hash_password(user=USER, password=PASSWORD)
    second = hasher.hash_password(user=USER, password=PASSWORD)

    assert first != second
    for password_hash in (first, second):
        outcome = hasher.verify_password(user=USER, password_hash=password_hash, password=PASSWORD)
        assert outcome is VerificationOutcome.SUCCESS


def test_unicode_password_round_trips(hasher: CodecPasswordHasher[Any]) -> None:
    password = "pässwörd-密码-🔑"
    password_hash = hasher.hash_password(user=USER, password=password)

    assert hasher.verify_password(
        user=USER,
        password_hash=password_hash,
        password=password,
    ) is VerificationOutcome.SUCCESS
    assert hasher.verify_password(
        user=USER,
        password_hash=password_hash,
        password="passwords-密码-🔑",
    ) is VerificationOutcome.FAILED


def test_user_identifier_is_not_mixed_into_digest(hasher: CodecPasswordHasher[Any]) -> None:
    password_hash = hasher.hash_password(user="alice", password=PASSWORD)

    outcome = hasher.verify_password(user="bob", password_hash=password_hash, password=PASSWORD)

    assert outcome is VerificationOutcome.SUCCESS


def test_tampered_digest_fails_verification(
    algorithm: HashAlgorithm,
    hasher: CodecPasswordHasher[Any],
) -> None:
    password_hash = hasher.hash_password(user=USER, password=PASSWORD)

    for tampered in _tampered_digests(algorithm, password_hash):
        assert tampered != password_hash
        outcome = hasher.verify_password(user=USER, password_hash=tampered, password=PASSWORD)
        assert outcome is VerificationOutcome.FAILED


@pytest.mark.parametrize(
    ("user", "password"),
    [(None, "x"), (USER, None), ("", "x"), ("   ", "x"), (USER, "")],
)
def test_hash_rejects_missing_arguments(
    hasher: CodecPasswordHasher[Any],
    user: object,
    password: Any,
) -> None:
    with pytest.raises(InvalidArgumentError):
        hasher.hash_password(user=user, password=password)


@pytest.mark.parametrize(
    ("user", "password_hash", "password"),
    [(None, "h", "x"), (USER, None, "x"), (USER, "h", None), (USER, "", "x"), ("", "h", "x")],
)
def test_verify_rejects_missing_arguments(
    hasher: CodecPasswordHasher[Any],
    user: object,
    password_hash: Any,
    password: Any,
) -> None:
    with pytest.raises(InvalidArgumentError):
        hasher.verify_password(user=user, password_hash=password_hash, password=password)


def test_malformed_stored_hash_returns_failed_and_logs_reason(
    hasher: CodecPasswordHasher[Any],
    caplog: pytest.LogCaptureFixture,
) -> None:
    with caplog.at_level(logging.WARNING):
        outcome = hasher.verify_password(
            user=USER,
            password_hash="not-a-valid-hash",
            password="x",
        )

    assert outcome is VerificationOutcome.FAILED
    assert "password_hash_decode_failed" in caplog.text
    assert "not-a-valid-hash" not in caplog.text


def test_hash_of_another_family_returns_failed(algorithm: HashAlgorithm) -> None:
    other = next(candidate for candidate in HashAlgorithm if candidate is not algorithm)
    foreign_hash = build_password_hasher(other, WEAK_OPTIONS[other]).hash_password(
        user=USER,
        password=PASSWORD,
    )
    hasher = build_password_hasher(algorithm, WEAK_OPTIONS[algorithm])

    outcome = hasher.verify_password(user=USER, password_hash=foreign_hash, password=PASSWORD)

    assert outcome is VerificationOutcome.FAILED


def test_empty_candidate_password_fails_without_error(hasher: CodecPasswordHasher[Any]) -> None:
    password_hash = hasher.hash_password(user=USER, password=PASSWORD)

    outcome = hasher.verify_password(user=USER, password_hash=password_hash, password="")

    assert outcome is VerificationOutcome.FAILED


def test_verification_runs_with_stored_parameters_and_flags_weaker_hashes(
    algorithm: HashAlgorithm,
) -> None:
    weak = build_password_hasher(algorithm, WEAK_OPTIONS[algorithm])
    strong = build_password_hasher(algorithm, STRONG_OPTIONS[algorithm])
    weak_hash = weak.hash_password(user=USER, password=PASSWORD)
    strong_hash = strong.hash_password(user=USER, password=PASSWORD)

    assert strong.verify_password(
        user=USER,
        password_hash=weak_hash,
        password=PASSWORD,
    ) is VerificationOutcome.SUCCESS_REHASH_NEEDED
    assert weak.verify_password(
        user=USER,
        password_hash=strong_hash,
        password=PASSWORD,
    ) is VerificationOutcome.SUCCESS
    assert strong.verify_password(
        user=USER,
        password_hash=weak_hash,
        password="wrong",
    ) is VerificationOutcome.FAILED


def test_argon2_interactive_hash_needs_rehash_under_sensitive_tier() -> None:
    interactive = Argon2idPasswordHasher(AlgorithmOptions(strength_tier=StrengthTier.INTERACTIVE))
    sensitive = Argon2idPasswordHasher(AlgorithmOptions(strength_tier=StrengthTier.SENSITIVE))

    password_hash = interactive.hash_password(user=USER, password=PASSWORD)

    assert password_hash.startswith("$argon2id$v=19$m=65536,t=2,p=1$")
    assert sensitive.verify_password(
        user=USER,
        password_hash=password_hash,
        password=PASSWORD,
    ) is VerificationOutcome.SUCCESS_REHASH_NEEDED


def test_bcrypt_tier_changes_are_monotonic() -> None:
    interactive = BcryptPasswordHasher(AlgorithmOptions(strength_tier=StrengthTier.INTERACTIVE))
    sensitive = BcryptPasswordHasher(AlgorithmOptions(strength_tier=StrengthTier.SENSITIVE))

    interactive_hash = interactive.hash_password(user=USER, password=PASSWORD)
    sensitive_hash = sensitive.hash_password(user=USER, password=PASSWORD)

    assert sensitive.verify_password(
        user=USER,
        password_hash=interactive_hash,
        password=PASSWORD,
    ) is VerificationOutcome.SUCCESS_REHASH_NEEDED
    assert interactive.verify_password(
        user=USER,
        password_hash=sensitive_hash,
        password=PASSWORD,
    ) is VerificationOutcome.SUCCESS


@pytest.mark.parametrize("revision", list(BcryptRevision))
def test_bcrypt_every_salt_revision_round_trips(revision: BcryptRevision) -> None:
    hasher = BcryptPasswordHasher(
        AlgorithmOptions(strength_tier=_CUSTOM, work_factor=4, salt_revision=revision)
    )

    password_hash = hasher.hash_password(user=USER, password=PASSWORD)

    assert password_hash.startswith(f"${revision.value}$04$")
    assert hasher.verify_password(
        user=USER,
        password_hash=password_hash,
        password=PASSWORD,
    ) is VerificationOutcome.SUCCESS


def test_bcrypt_2a_hash_verifies_after_default_revision_moves_to_2b() -> None:
    legacy = BcryptPasswordHasher(
        AlgorithmOptions(strength_tier=_CUSTOM, work_factor=4, salt_revision="2a")  # type: ignore[arg-type]
    )
    current = BcryptPasswordHasher(
        AlgorithmOptions(strength_tier=_CUSTOM, work_factor=4, salt_revision="2b")  # type: ignore[arg-type]
    )
    legacy_hash = legacy.hash_password(user=USER, password=PASSWORD)

    outcome = current.verify_password(user=USER, password_hash=legacy_hash, password=PASSWORD)

    assert legacy_hash.startswith("$2a$04$")
    assert outcome.is_success
    assert outcome is VerificationOutcome.SUCCESS_REHASH_NEEDED
    assert current.verify_password(
        user=USER,
        password_hash=legacy_hash,
        password="wrong",
    ) is VerificationOutcome.FAILED


@pytest.mark.parametrize("prefix", [b"2a", b"2b"])
def test_bcrypt_interoperates_with_pyca_bcrypt(prefix: bytes) -> None:
    hasher = BcryptPasswordHasher(
        AlgorithmOptions(strength_tier=_CUSTOM, work_factor=4, salt_revision=prefix.decode())  # type: ignore[arg-type]
    )
    foreign_hash = bcrypt.hashpw(PASSWORD.encode(), bcrypt.gensalt(rounds=4, prefix=prefix))
    own_hash = hasher.hash_password(user=USER, password=PASSWORD)

    assert hasher.verify_password(
        user=USER,
        password_hash=foreign_hash.decode(),
        password=PASSWORD,
    ) is VerificationOutcome.SUCCESS
    assert bcrypt.checkpw(PASSWORD.encode(), own_hash.encode()) is True


def test_bcrypt_2x_tag_is_verified_with_the_2b_algorithm() -> None:
    password = "pässwörd-ÿ"
    hasher = BcryptPasswordHasher(
        AlgorithmOptions(strength_tier=_CUSTOM, work_factor=4, salt_revision="2x")  # type: ignore[arg-type]
    )
    hash_2b = bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=4, prefix=b"2b")).decode()
    retagged = "$2x$" + hash_2b[len("$2b$"):]

    assert hasher.verify_password(
        user=USER,
        password_hash=retagged,
        password=password,
    ) is VerificationOutcome.SUCCESS


def test_bcrypt_rejects_nul_bytes_on_hash_and_fails_on_verify() -> None:
    hasher = BcryptPasswordHasher(WEAK_OPTIONS[HashAlgorithm.BCRYPT])
    password_hash = hasher.hash_password(user=USER, password=PASSWORD)

    with pytest.raises(InvalidArgumentError):
        hasher.hash_password(user=USER, password="nul\x00byte")
    assert hasher.verify_password(
        user=USER,
        password_hash=password_hash,
        password="nul\x00byte",
    ) is VerificationOutcome.FAILED


def test_bcrypt_only_considers_first_72_password_bytes() -> None:
    hasher = BcryptPasswordHasher(WEAK_OPTIONS[HashAlgorithm.BCRYPT])
    password_hash = hasher.hash_password(user=USER, password="a" * 72 + "tail-one")

    outcome = hasher.verify_password(
        user=USER,
        password_hash=password_hash,
        password="a" * 72 + "tail-two",
    )

    assert outcome is VerificationOutcome.SUCCESS


def test_argon2_interoperates_with_argon2_cffi() -> None:
    hasher = Argon2idPasswordHasher(WEAK_OPTIONS[HashAlgorithm.ARGON2ID])
    reference = argon2.PasswordHasher(time_cost=1, memory_cost=64, parallelism=1)
    foreign_hash = reference.hash(PASSWORD)
    own_hash = hasher.hash_password(user=USER, password=PASSWORD)

    assert hasher.verify_password(
        user=USER,
        password_hash=foreign_hash,
        password=PASSWORD,
    ) is VerificationOutcome.SUCCESS
    assert reference.verify(own_hash, PASSWORD) is True


def test_argon2_verifies_stored_digest_length_other_than_default() -> None:
    hasher = Argon2idPasswordHasher(WEAK_OPTIONS[HashAlgorithm.ARGON2ID])
    foreign_hash = argon2.PasswordHasher(
        time_cost=1,
        memory_cost=64,
        parallelism=1,
        hash_len=16,
    ).hash(PASSWORD)

    outcome = hasher.verify_password(user=USER, password_hash=foreign_hash, password=PASSWORD)

    assert outcome is VerificationOutcome.SUCCESS


def test_scrypt_digest_matches_hashlib_for_decoded_parameters() -> None:
    hasher = ScryptPasswordHasher(WEAK_OPTIONS[HashAlgorithm.SCRYPT])
    decoded = hasher.decode(hasher.hash_password(user=USER, password=PASSWORD))

    expected = hashlib.scrypt(
        PASSWORD.encode(),
        salt=decoded.salt,
        n=16,
        r=8,
        p=1,
        dklen=32,
    )

    assert decoded.digest == expected


def test_scrypt_stored_hash_beyond_primitive_limits_returns_failed() -> None:
    hasher = ScryptPasswordHasher(WEAK_OPTIONS[HashAlgorithm.SCRYPT])
    record = struct.pack(">BBII", 1, 40, 8, 1) + bytes(16) + bytes(32)

    outcome = hasher.verify_password(
        user=USER,
        password_hash=base64.b64encode(record).decode(),
        password=PASSWORD,
    )

    assert outcome is VerificationOutcome.FAILED


@pytest.mark.parametrize("work_factor", [16, 17])
def test_scrypt_stored_hash_with_n_too_large_for_block_size_returns_failed(
    work_factor: int,
) -> None:
    hasher = ScryptPasswordHasher(WEAK_OPTIONS[HashAlgorithm.SCRYPT])
    record = struct.pack(">BBII", 1, work_factor, 1, 1) + bytes(16) + bytes(32)

    outcome = hasher.verify_password(
        user=USER,
        password_hash=base64.b64encode(record).decode(),
        password=PASSWORD,
    )

    assert outcome is VerificationOutcome.FAILED


def test_scrypt_n_too_large_for_block_size_fails_at_construction() -> None:
    options = AlgorithmOptions(strength_tier=_CUSTOM, work_factor=17, block_size=1)

    with pytest.raises(InvalidConfigurationError):
        ScryptPasswordHasher(options)


def test_scrypt_small_block_size_at_bound_hashes_and_verifies() -> None:
    hasher = ScryptPasswordHasher(
        AlgorithmOptions(strength_tier=_CUSTOM, work_factor=15, block_size=1)
    )

    password_hash = hasher.hash_password(user=USER, password=PASSWORD)

    assert hasher.verify_password(
        user=USER,
        password_hash=password_hash,
        password=PASSWORD,
    ) is VerificationOutcome.SUCCESS


@pytest.mark.parametrize(
    ("hasher_type", "options"),
    [
        (BcryptPasswordHasher, AlgorithmOptions(work_factor=3)),
        (Argon2idPasswordHasher, AlgorithmOptions(strength_tier=_CUSTOM, ops_limit=1)),
        (ScryptPasswordHasher, AlgorithmOptions(work_factor=31)),
    ],
)
def test_invalid_family_configuration_fails_at_construction(
    hasher_type: type[CodecPasswordHasher[Any]],
    options: AlgorithmOptions,
) -> None:
    with pytest.raises(InvalidConfigurationError):
        hasher_type(options)


def test_build_password_hasher_rejects_unknown_algorithm() -> None:
    with pytest.raises(InvalidConfigurationError):
        build_password_hasher("pbkdf2")


def test_default_hasher_uses_interactive_preset() -> None:
    assert BcryptPasswordHasher().parameters.work_factor == 10
    assert Argon2idPasswordHasher().parameters.memory_kib == 65536
    assert ScryptPasswordHasher().parameters.work_factor == 14


def _tampered_digests(algorithm: HashAlgorithm, password_hash: str) -> list[str]:
    if algorithm is HashAlgorithm.SCRYPT:
        record = base64.b64decode(password_hash)
        variants = []
        for index in range(26, len(record)):
            flipped = bytearray(record)
            flipped[index] ^= 0x01
            variants.append(base64.b64encode(bytes(flipped)).decode())
        return variants

    if algorithm is HashAlgorithm.BCRYPT:
        start = len(password_hash) - 31
    else:
        start = password_hash.rfind("$") + 1
    return [_replace_char(password_hash, index) for index in range(start, len(password_hash))]


def _replace_char(text: str, index: int) -> str:
    replacement = "A" if text[index] != "A" else "B"
    return text[:index] + replacement + text[index + 1 :]
