"""Runtime settings loaded from environment variables."""

from functools import lru_cache
from typing import Annotated

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from password_security.domain.algorithms import BcryptRevision, HashAlgorithm
from password_security.domain.options import AlgorithmOptions
from password_security.domain.strength import StrengthTier

PositiveInt = Annotated[int, Field(gt=0)]


class PasswordHashingSettings(BaseSettings):
    """Environment-driven password hashing settings.

    Cost fields left unset fall back to the selected strength tier preset.
    Range checks beyond positivity happen in `AlgorithmOptions`.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    algorithm: HashAlgorithm = Field(
        default=HashAlgorithm.ARGON2ID,
        validation_alias="PASSWORD_HASH_ALGORITHM",
    )
    strength_tier: StrengthTier = Field(
        default=StrengthTier.INTERACTIVE,
        validation_alias="PASSWORD_STRENGTH",
    )
    memory_limit_bytes: PositiveInt | None = Field(
        default=None,
        validation_alias="PASSWORD_MEMORY_LIMIT_BYTES",
    )
    ops_limit: PositiveInt | None = Field(default=None, validation_alias="PASSWORD_OPS_LIMIT")
    work_factor: PositiveInt | None = Field(
        default=None,
        validation_alias="PASSWORD_WORK_FACTOR",
    )
    salt_revision: BcryptRevision = Field(
        default=BcryptRevision.REVISION_2B,
        validation_alias="PASSWORD_BCRYPT_SALT_REVISION",
    )
    parallelism: PositiveInt | None = Field(
        default=None,
        validation_alias="PASSWORD_PARALLELISM",
    )
    block_size: PositiveInt | None = Field(default=None, validation_alias="PASSWORD_BLOCK_SIZE")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    def to_algorithm_options(self) -> AlgorithmOptions:
        """Build the immutable options value; raises InvalidConfigurationError."""

        return AlgorithmOptions(
            strength_tier=self.strength_tier,
            memory_limit_bytes=self.memory_limit_bytes,
            ops_limit=self.ops_limit,
            work_factor=self.work_factor,
            salt_revision=self.salt_revision,
            parallelism=self.parallelism,
            block_size=self.block_size,
        )


@lru_cache(maxsize=1)
def load_settings() -> PasswordHashingSettings:
    """Load and cache password hashing settings."""

    return PasswordHashingSettings()
