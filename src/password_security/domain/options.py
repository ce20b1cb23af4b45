"""Immutable hashing configuration and per-family parameter resolution."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from password_security.domain.algorithms import BcryptRevision
from password_security.domain.errors import InvalidConfigurationError
from password_security.domain.strength import StrengthProfile, StrengthTier, profile_for

ARGON2_VERSION: Final[int] = 0x13
SUPPORTED_ARGON2_VERSIONS: Final[frozenset[int]] = frozenset({0x10, 0x13})
ARGON2_MAX_MEMORY_KIB: Final[int] = 0xFFFFFFFF
ARGON2_MAX_ITERATIONS: Final[int] = 0xFFFFFFFF
ARGON2_MAX_PARALLELISM: Final[int] = 0xFFFFFF

MIN_WORK_FACTOR: Final[int] = 3
MAX_WORK_FACTOR: Final[int] = 31
MIN_BCRYPT_WORK_FACTOR: Final[int] = 4

SCRYPT_DEFAULT_BLOCK_SIZE: Final[int] = 8
# hashlib.scrypt rejects maxmem above INT_MAX.
SCRYPT_MAX_MEMORY_BYTES: Final[int] = 2**31 - 1


@dataclass(frozen=True)
class Argon2Parameters:
    """Argon2id cost parameters as embedded in the PHC string."""

    memory_kib: int
    iterations: int
    parallelism: int
    version: int = ARGON2_VERSION


@dataclass(frozen=True)
class BcryptParameters:
    """Bcrypt cost parameters as embedded in the modular crypt string."""

    revision: BcryptRevision
    work_factor: int


@dataclass(frozen=True)
class ScryptParameters:
    """Scrypt cost parameters; N is `2 ** work_factor`."""

    work_factor: int
    block_size: int
    parallelism: int

    @property
    def n(self) -> int:
        return 1 << self.work_factor

    @property
    def required_memory_bytes(self) -> int:
        return 128 * self.block_size * (self.n + self.parallelism + 2)


@dataclass(frozen=True)
class AlgorithmOptions:
    """Configured strength tier plus optional explicit cost overrides.

    Each family reads only its own fields: bcrypt uses `work_factor` and
    `salt_revision`, Argon2id uses `memory_limit_bytes`, `ops_limit` and
    `parallelism`, scrypt uses `work_factor` (log2 N), `block_size` and
    `parallelism`. Unset fields fall back to the tier preset.
    """

    strength_tier: StrengthTier = StrengthTier.INTERACTIVE
    memory_limit_bytes: int | None = None
    ops_limit: int | None = None
    work_factor: int | None = None
    salt_revision: BcryptRevision = BcryptRevision.REVISION_2B
    parallelism: int | None = None
    block_size: int | None = None

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "strength_tier", StrengthTier(self.strength_tier))
        except ValueError as exc:
            raise InvalidConfigurationError(
                f"unknown strength tier: {self.strength_tier!r}"
            ) from exc
        try:
            object.__setattr__(self, "salt_revision", BcryptRevision(self.salt_revision))
        except ValueError as exc:
            raise InvalidConfigurationError(
                f"unknown bcrypt salt revision: {self.salt_revision!r}"
            ) from exc

        for name in ("memory_limit_bytes", "ops_limit", "parallelism", "block_size"):
            _require_positive_int(name=name, value=getattr(self, name))
        if self.work_factor is not None:
            _require_int(name="work_factor", value=self.work_factor)
            if not MIN_WORK_FACTOR <= self.work_factor <= MAX_WORK_FACTOR:
                raise InvalidConfigurationError(
                    f"work_factor must be between {MIN_WORK_FACTOR} and {MAX_WORK_FACTOR}, "
                    f"got {self.work_factor}"
                )

    @property
    def profile(self) -> StrengthProfile | None:
        return profile_for(self.strength_tier)


def resolve_argon2_parameters(options: AlgorithmOptions) -> Argon2Parameters:
    """Resolve Argon2id costs from explicit fields or the tier preset."""

    profile = options.profile
    memory_limit_bytes = _pick(
        options.memory_limit_bytes,
        profile.argon2_memory_limit_bytes if profile else None,
        name="memory_limit_bytes",
        family="argon2id",
    )
    ops_limit = _pick(
        options.ops_limit,
        profile.argon2_ops_limit if profile else None,
        name="ops_limit",
        family="argon2id",
    )
    parallelism = _pick(
        options.parallelism,
        profile.argon2_parallelism if profile else 1,
        name="parallelism",
        family="argon2id",
    )

    if parallelism > ARGON2_MAX_PARALLELISM:
        raise InvalidConfigurationError(
            f"argon2id parallelism must be at most {ARGON2_MAX_PARALLELISM}, got {parallelism}"
        )
    if ops_limit > ARGON2_MAX_ITERATIONS:
        raise InvalidConfigurationError(
            f"argon2id ops_limit must be at most {ARGON2_MAX_ITERATIONS}, got {ops_limit}"
        )
    memory_kib = memory_limit_bytes // 1024
    if memory_kib > ARGON2_MAX_MEMORY_KIB:
        raise InvalidConfigurationError(
            f"argon2id memory_limit_bytes must be at most {ARGON2_MAX_MEMORY_KIB * 1024}"
        )
    if memory_kib < 8 * parallelism:
        raise InvalidConfigurationError(
            f"argon2id memory_limit_bytes must be at least {8 * parallelism * 1024} "
            f"for parallelism {parallelism}, got {memory_limit_bytes}"
        )
    return Argon2Parameters(
        memory_kib=memory_kib,
        iterations=ops_limit,
        parallelism=parallelism,
    )


def resolve_bcrypt_parameters(options: AlgorithmOptions) -> BcryptParameters:
    """Resolve bcrypt cost and revision from explicit fields or the tier preset."""

    profile = options.profile
    work_factor = _pick(
        options.work_factor,
        profile.bcrypt_work_factor if profile else None,
        name="work_factor",
        family="bcrypt",
    )
    if work_factor < MIN_BCRYPT_WORK_FACTOR:
        raise InvalidConfigurationError(
            f"bcrypt work_factor must be at least {MIN_BCRYPT_WORK_FACTOR}, got {work_factor}"
        )
    return BcryptParameters(revision=options.salt_revision, work_factor=work_factor)


def resolve_scrypt_parameters(options: AlgorithmOptions) -> ScryptParameters:
    """Resolve scrypt N/r/p from explicit fields or the tier preset."""

    profile = options.profile
    parameters = ScryptParameters(
        work_factor=_pick(
            options.work_factor,
            profile.scrypt_work_factor if profile else None,
            name="work_factor",
            family="scrypt",
        ),
        block_size=_pick(
            options.block_size,
            profile.scrypt_block_size if profile else SCRYPT_DEFAULT_BLOCK_SIZE,
            name="block_size",
            family="scrypt",
        ),
        parallelism=_pick(
            options.parallelism,
            profile.scrypt_parallelism if profile else 1,
            name="parallelism",
            family="scrypt",
        ),
    )
    violation = scrypt_limit_violation(parameters)
    if violation is not None:
        raise InvalidConfigurationError(violation)
    return parameters


def scrypt_limit_violation(parameters: ScryptParameters) -> str | None:
    """Return why OpenSSL scrypt would refuse these costs, or None when it accepts them."""

    block_size = parameters.block_size
    if block_size * parameters.parallelism >= 2**30:
        return "scrypt block_size * parallelism must be below 2**30"
    # OpenSSL requires N < 2 ** (16 * r) whenever that bound fits in 64 bits.
    if 16 * block_size < 64 and parameters.n >= 1 << (16 * block_size):
        return (
            f"scrypt work_factor must be below {16 * block_size} "
            f"for block_size {block_size}, got {parameters.work_factor}"
        )
    if parameters.required_memory_bytes > SCRYPT_MAX_MEMORY_BYTES:
        return (
            f"scrypt parameters need {parameters.required_memory_bytes} bytes, "
            f"above the {SCRYPT_MAX_MEMORY_BYTES} byte ceiling"
        )
    return None


def _pick(explicit: int | None, preset: int | None, *, name: str, family: str) -> int:
    if explicit is not None:
        return explicit
    if preset is None:
        raise InvalidConfigurationError(f"custom strength requires {name} for {family}")
    return preset


def _require_int(*, name: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidConfigurationError(f"{name} must be an integer, got {value!r}")


def _require_positive_int(*, name: str, value: int | None) -> None:
    if value is None:
        return
    _require_int(name=name, value=value)
    if value <= 0:
        raise InvalidConfigurationError(f"{name} must be positive, got {value}")
