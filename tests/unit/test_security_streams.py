"""Unit tests for the file/stream helpers."""

import io
import os
from unittest.mock import patch

import pytest
from saltedenc.core.exceptions import HeaderFormatError, PrimitiveError
from saltedenc.security.crypto import SaltedCipher
from saltedenc.security.randomness import FixedRandomSource
from saltedenc.security.streams import (
    decrypt_file_stream,
    decrypt_stream,
    encrypt_file_stream,
    encrypt_stream,
    openssl_command,
)

SALT = b"\x53\x61\x23\x11\x23\x56\x74\x12"


@pytest.fixture
def session():
    return SaltedCipher("hunter2", "aes-256-cbc", 1000, random_source=FixedRandomSource(SALT))


# ==============================================================================
# Tests: Binary streams
# ==============================================================================

def test_encrypt_stream_matches_one_shot(session):
    data = os.urandom(10_000)
    dst = io.BytesIO()
    written = encrypt_stream(io.BytesIO(data), dst, session, chunk_size=333)
    assert dst.getvalue() == session.encrypt(data)
    assert written == len(dst.getvalue())


def test_decrypt_stream_roundtrip(session):
    data = os.urandom(5_000)
    dst = io.BytesIO()
    written = decrypt_stream(io.BytesIO(session.encrypt(data)), dst, session, chunk_size=7)
    assert dst.getvalue() == data
    assert written == len(data)


def test_encrypt_stream_empty_input(session):
    dst = io.BytesIO()
    encrypt_stream(io.BytesIO(b""), dst, session)
    # header plus one block of padding, like openssl enc on an empty file
    assert dst.getvalue() == session.encrypt(b"")
    assert len(dst.getvalue()) == 32


def test_stream_rejects_bad_chunk_size(session):
    with pytest.raises(ValueError, match="chunk_size"):
        encrypt_stream(io.BytesIO(b"data"), io.BytesIO(), session, chunk_size=0)


# ==============================================================================
# Tests: Files
# ==============================================================================

def test_encrypt_decrypt_file_roundtrip(tmp_path):
    data = os.urandom(250_000)
    in_file = tmp_path / "input.bin"
    enc_file = tmp_path / "input.bin.enc"
    dec_file = tmp_path / "input.dec"
    in_file.write_bytes(data)

    salt = encrypt_file_stream(str(in_file), str(enc_file), "correct horse battery staple", iterations=1000)
    written = decrypt_file_stream(str(enc_file), str(dec_file), "correct horse battery staple", iterations=1000)

    assert enc_file.read_bytes()[:16] == b"Salted__" + salt
    assert dec_file.read_bytes() == data
    assert written == len(data)


def test_encrypt_file_matches_known_vector(tmp_path):
    in_file = tmp_path / "plain.txt"
    enc_file = tmp_path / "plain.txt.enc"
    in_file.write_bytes(b"some data")

    encrypt_file_stream(str(in_file), str(enc_file), "password", random_source=FixedRandomSource(SALT), chunk_size=4)

    assert enc_file.read_bytes() == (
        b"\x53\x61\x6c\x74\x65\x64\x5f\x5f\x53\x61\x23\x11\x23\x56\x74\x12"
        b"\x72\x30\x32\x8f\xca\x92\x3c\x3b\x53\x99\x11\x99\x14\x32\x79\x78"
    )


def test_decrypt_file_wrong_cipher_fails(tmp_path):
    in_file = tmp_path / "plain.txt"
    enc_file = tmp_path / "plain.enc"
    in_file.write_bytes(b"x" * 65)
    encrypt_file_stream(str(in_file), str(enc_file), "pw", cipher="aes-256-ctr", iterations=10)

    # CTR output is 65 bytes, not a whole number of CBC blocks
    with pytest.raises(PrimitiveError):
        decrypt_file_stream(str(enc_file), str(tmp_path / "out"), "pw", cipher="aes-256-cbc", iterations=10)


def test_decrypt_file_truncated_header(tmp_path):
    enc_file = tmp_path / "short.enc"
    enc_file.write_bytes(b"Salted__\x00")
    with pytest.raises(HeaderFormatError):
        decrypt_file_stream(str(enc_file), str(tmp_path / "out"), "pw", iterations=10)


def test_decrypt_file_bad_magic(tmp_path):
    enc_file = tmp_path / "bad.enc"
    enc_file.write_bytes(b"NotSalt!" + b"\x00" * 24)
    with pytest.raises(HeaderFormatError, match="magic mismatch"):
        decrypt_file_stream(str(enc_file), str(tmp_path / "out"), "pw", iterations=10)


# ==============================================================================
# Tests: openssl command line
# ==============================================================================

def test_openssl_command_decrypt():
    assert openssl_command("aes-256-cbc", 10000, in_path="out.enc", out_path="out.txt") == [
        "openssl", "enc", "-d", "-aes-256-cbc", "-md", "sha256", "-pbkdf2",
        "-iter", "10000", "-in", "out.enc", "-out", "out.txt",
    ]


def test_openssl_command_encrypt_defaults():
    argv = openssl_command(decrypt=False)
    assert argv[:4] == ["openssl", "enc", "-e", "-aes-256-cbc"]
    assert "-in" not in argv


def test_decrypt_file_takes_salt_from_header_without_randomness(tmp_path):
    in_file = tmp_path / "plain.txt"
    enc_file = tmp_path / "plain.enc"
    in_file.write_bytes(b"salted on disk")
    salt = encrypt_file_stream(str(in_file), str(enc_file), "pw", iterations=10)

    with patch("saltedenc.security.kdf.system_random") as system_random, \
            patch("saltedenc.security.streams.SaltedCipher", wraps=SaltedCipher) as session_cls:
        decrypt_file_stream(str(enc_file), str(tmp_path / "out"), "pw", iterations=10)

    system_random.assert_not_called()
    assert session_cls.call_args.kwargs["salt"] == salt
    assert (tmp_path / "out").read_bytes() == b"salted on disk"
