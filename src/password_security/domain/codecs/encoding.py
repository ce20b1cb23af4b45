"""Strict base64 helpers shared by the hash codecs."""

from __future__ import annotations

import base64
import binascii
import re
from typing import Final

from password_security.domain.errors import MalformedHashError

_STD_ALPHABET: Final[str] = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
_BCRYPT_ALPHABET: Final[str] = "./ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789"
_TO_BCRYPT: Final = str.maketrans(_STD_ALPHABET, _BCRYPT_ALPHABET)
_FROM_BCRYPT: Final = str.maketrans(_BCRYPT_ALPHABET, _STD_ALPHABET)
_UNPADDED_STD = re.compile(r"[A-Za-z0-9+/]*")
_BCRYPT_CHARS = re.compile(r"[./A-Za-z0-9]*")


def b64encode_unpadded(data: bytes) -> str:
    """Encode bytes as standard base64 without `=` padding (PHC style)."""

    return base64.b64encode(data).decode("ascii").rstrip("=")


def b64decode_unpadded(text: str, *, field: str) -> bytes:
    """Decode canonical unpadded standard base64 or raise MalformedHashError."""

    if not _UNPADDED_STD.fullmatch(text):
        raise MalformedHashError(f"invalid_{field}_encoding")
    return _decode_canonical(text, field=field)


def b64encode_padded(data: bytes) -> str:
    """Encode bytes as standard padded base64."""

    return base64.b64encode(data).decode("ascii")


def b64decode_padded(text: str, *, field: str) -> bytes:
    """Decode canonical padded standard base64 or raise MalformedHashError."""

    try:
        decoded = base64.b64decode(text.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as error:
        raise MalformedHashError(f"invalid_{field}_encoding") from error
    if b64encode_padded(decoded) != text:
        raise MalformedHashError(f"non_canonical_{field}_encoding")
    return decoded


def bcrypt_b64encode(data: bytes) -> str:
    """Encode bytes with the bcrypt alphabet (`./A-Za-z0-9`), unpadded."""

    return b64encode_unpadded(data).translate(_TO_BCRYPT)


def bcrypt_b64decode(text: str, *, field: str, length: int, canonical: bool = True) -> bytes:
    """Decode bcrypt-alphabet base64 into exactly `length` bytes.

    With `canonical=False`, unused trailing bits are ignored instead of rejected.
    """

    if not _BCRYPT_CHARS.fullmatch(text):
        raise MalformedHashError(f"invalid_{field}_encoding")
    standard = text.translate(_FROM_BCRYPT)
    if canonical:
        decoded = _decode_canonical(standard, field=field)
    else:
        decoded = _decode_lenient(standard, field=field)
    if len(decoded) != length:
        raise MalformedHashError(f"invalid_{field}_length")
    return decoded


def _decode_canonical(text: str, *, field: str) -> bytes:
    decoded = _decode_lenient(text, field=field)
    if b64encode_unpadded(decoded) != text:
        raise MalformedHashError(f"non_canonical_{field}_encoding")
    return decoded


def _decode_lenient(text: str, *, field: str) -> bytes:
    if len(text) % 4 == 1:
        raise MalformedHashError(f"invalid_{field}_length")
    padded = text + "=" * (-len(text) % 4)
    try:
        return base64.b64decode(padded.encode("ascii"), validate=True)
    except binascii.Error as error:
        raise MalformedHashError(f"invalid_{field}_encoding") from error
