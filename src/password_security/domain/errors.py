"""Error taxonomy shared by options, codecs and hashers."""

from __future__ import annotations

from dataclasses import dataclass


class InvalidArgumentError(ValueError):
    """Raised when a hash/verify call receives a missing or blank argument."""


class InvalidConfigurationError(ValueError):
    """Raised when cost parameters are out of range at construction time."""


@dataclass(frozen=True)
class HashDecodeError(ValueError):
    """Deterministic decode failure with machine-readable reason."""

    reason: str

    def __str__(self) -> str:
        return self.reason


class MalformedHashError(HashDecodeError):
    """Encoded hash does not match the family grammar."""


class UnsupportedRevisionError(HashDecodeError):
    """Encoded hash matches the family but carries an unknown version tag."""
