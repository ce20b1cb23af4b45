"""Verification outcomes returned to credential callers."""

from __future__ import annotations

from enum import StrEnum


class VerificationOutcome(StrEnum):
    """Supported password verification outcomes."""

    FAILED = "failed"
    SUCCESS = "success"
    SUCCESS_REHASH_NEEDED = "success_rehash_needed"

    @property
    def is_success(self) -> bool:
        return self is not VerificationOutcome.FAILED
