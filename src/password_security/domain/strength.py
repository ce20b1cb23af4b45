"""Named strength tiers and their per-family cost presets."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Final

_MIB = 1024 * 1024


class StrengthTier(StrEnum):
    """Cost tiers ordered interactive < moderate < sensitive; custom skips presets."""

    INTERACTIVE = "interactive"
    MODERATE = "moderate"
    SENSITIVE = "sensitive"
    CUSTOM = "custom"


@dataclass(frozen=True)
class StrengthProfile:
    """Concrete cost parameters bundled under one named tier."""

    argon2_memory_limit_bytes: int
    argon2_ops_limit: int
    argon2_parallelism: int
    bcrypt_work_factor: int
    scrypt_work_factor: int
    scrypt_block_size: int
    scrypt_parallelism: int


# Argon2id and scrypt values follow the libsodium pwhash presets.
STRENGTH_PROFILES: Final[dict[StrengthTier, StrengthProfile]] = {
    StrengthTier.INTERACTIVE: StrengthProfile(
        argon2_memory_limit_bytes=64 * _MIB,
        argon2_ops_limit=2,
        argon2_parallelism=1,
        bcrypt_work_factor=10,
        scrypt_work_factor=14,
        scrypt_block_size=8,
        scrypt_parallelism=1,
    ),
    StrengthTier.MODERATE: StrengthProfile(
        argon2_memory_limit_bytes=256 * _MIB,
        argon2_ops_limit=3,
        argon2_parallelism=1,
        bcrypt_work_factor=12,
        scrypt_work_factor=17,
        scrypt_block_size=8,
        scrypt_parallelism=1,
    ),
    StrengthTier.SENSITIVE: StrengthProfile(
        argon2_memory_limit_bytes=1024 * _MIB,
        argon2_ops_limit=4,
        argon2_parallelism=1,
        bcrypt_work_factor=14,
        scrypt_work_factor=20,
        scrypt_block_size=8,
        scrypt_parallelism=1,
    ),
}


def profile_for(tier: StrengthTier) -> StrengthProfile | None:
    """Return preset profile for one tier, or None for custom."""

    return STRENGTH_PROFILES.get(tier)
