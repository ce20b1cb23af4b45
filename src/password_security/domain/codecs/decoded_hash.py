"""Decoded components of one self-describing encoded hash."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

ParamsT = TypeVar("ParamsT")


@dataclass(frozen=True)
class DecodedHash(Generic[ParamsT]):
    """Parameters, salt and digest recovered from an encoded hash."""

    parameters: ParamsT
    salt: bytes
    digest: bytes
