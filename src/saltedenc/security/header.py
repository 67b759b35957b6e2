"""Encode and decode the 16-byte ``Salted__`` header.

Layout: 8-byte ASCII tag ``Salted__`` followed by the 8-byte PBKDF2 salt,
no separators.
"""
from typing import Tuple

from saltedenc.core.config import HEADER_LENGTH, MAGIC, SALT_LENGTH
from saltedenc.core.exceptions import HeaderFormatError


def encode_header(salt: bytes) -> bytes:
    if len(salt) != SALT_LENGTH:
        raise HeaderFormatError(f"salt must be {SALT_LENGTH} bytes, got {len(salt)}")
    return MAGIC + bytes(salt)


def decode_header(prefix: bytes) -> bytes:
    """Validate the tag at the start of ``prefix`` and return the salt."""
    if len(prefix) < HEADER_LENGTH:
        raise HeaderFormatError(f"header too short: need {HEADER_LENGTH} bytes, got {len(prefix)}")
    if prefix[: len(MAGIC)] != MAGIC:
        raise HeaderFormatError("Invalid header (magic mismatch)")
    return bytes(prefix[len(MAGIC):HEADER_LENGTH])


def split_header(data: bytes) -> Tuple[bytes, bytes]:
    """Return ``(salt, body)`` for a complete salted stream."""
    salt = decode_header(data)
    return salt, bytes(data[HEADER_LENGTH:])
