"""Unit tests for the Salted__ header codec."""

import pytest
from saltedenc.core.exceptions import HeaderFormatError
from saltedenc.security.header import decode_header, encode_header, split_header

SALT = b"\x53\x61\x23\x11\x23\x56\x74\x12"
HEADER = b"\x53\x61\x6c\x74\x65\x64\x5f\x5f" + SALT


def test_encode_header_layout():
    header = encode_header(SALT)
    assert header == HEADER
    assert header[:8] == b"Salted__"
    assert len(header) == 16


@pytest.mark.parametrize("salt", [b"", b"\x00" * 7, b"\x00" * 9])
def test_encode_header_rejects_bad_salt(salt):
    with pytest.raises(HeaderFormatError, match="salt must be 8 bytes"):
        encode_header(salt)


def test_decode_header_returns_salt():
    assert decode_header(HEADER) == SALT
    # trailing ciphertext is ignored
    assert decode_header(HEADER + b"\x01\x02\x03") == SALT


def test_decode_header_too_short():
    with pytest.raises(HeaderFormatError, match="header too short"):
        decode_header(HEADER[:15])


def test_decode_header_magic_mismatch():
    with pytest.raises(HeaderFormatError, match="magic mismatch"):
        decode_header(b"Salted_X" + SALT)


def test_split_header():
    salt, body = split_header(HEADER + b"body")
    assert salt == SALT
    assert body == b"body"


def test_split_header_without_body():
    assert split_header(HEADER) == (SALT, b"")
