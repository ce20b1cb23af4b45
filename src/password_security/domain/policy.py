"""Rehash policy comparing stored hash parameters with configured ones."""

from __future__ import annotations

from password_security.domain.options import (
    Argon2Parameters,
    BcryptParameters,
    ScryptParameters,
)

HashParameters = Argon2Parameters | BcryptParameters | ScryptParameters


def needs_rehash(*, stored: HashParameters, current: HashParameters) -> bool:
    """Return whether a stored hash is weaker than the configured parameters.

    Only increases in configured cost flag a hash; lowering cost never does.
    Parameters of different families are not comparable and always flag.
    """

    if isinstance(stored, Argon2Parameters) and isinstance(current, Argon2Parameters):
        return _argon2_needs_rehash(stored=stored, current=current)
    if isinstance(stored, BcryptParameters) and isinstance(current, BcryptParameters):
        return _bcrypt_needs_rehash(stored=stored, current=current)
    if isinstance(stored, ScryptParameters) and isinstance(current, ScryptParameters):
        return _scrypt_needs_rehash(stored=stored, current=current)
    return True


def _argon2_needs_rehash(*, stored: Argon2Parameters, current: Argon2Parameters) -> bool:
    return (
        current.version > stored.version
        or current.memory_kib > stored.memory_kib
        or current.iterations > stored.iterations
        or current.parallelism > stored.parallelism
    )


def _bcrypt_needs_rehash(*, stored: BcryptParameters, current: BcryptParameters) -> bool:
    return current.work_factor > stored.work_factor or current.revision != stored.revision


def _scrypt_needs_rehash(*, stored: ScryptParameters, current: ScryptParameters) -> bool:
    return (
        current.work_factor > stored.work_factor
        or current.block_size > stored.block_size
        or current.parallelism > stored.parallelism
    )
