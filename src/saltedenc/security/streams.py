"""File helpers that drive a SaltedCipher chunk by chunk.

Files are read in fixed-size chunks so memory stays bounded whatever the
input size. Output is interchangeable with ``openssl enc``; see
:func:`openssl_command` for the matching command line.
"""
from __future__ import annotations

import logging
from typing import BinaryIO, List, Optional, Union

from saltedenc.core.config import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_CIPHER,
    DEFAULT_ITERATIONS,
    HEADER_LENGTH,
    MAGIC,
)
from saltedenc.core.exceptions import HeaderFormatError
from .ciphers import CipherSpec, get_cipher
from .crypto import SaltedCipher
from .randomness import RandomSource

logger = logging.getLogger(__name__)


def _pump(src: BinaryIO, dst: BinaryIO, step, finish, chunk_size: int) -> int:
    if chunk_size < 1:
        raise ValueError("chunk_size must be positive")
    written = 0
    # step at least once so an empty source still gets a header and padding
    chunk = src.read(chunk_size)
    while True:
        out = step(chunk)
        dst.write(out)
        written += len(out)
        chunk = src.read(chunk_size)
        if not chunk:
            break
    out = finish()
    dst.write(out)
    written += len(out)
    return written


def encrypt_stream(src: BinaryIO, dst: BinaryIO, session: SaltedCipher, chunk_size: int = DEFAULT_CHUNK_SIZE) -> int:
    """Encrypt everything readable from ``src`` into ``dst``; return bytes written."""
    return _pump(src, dst, session.encrypt_chunk, session.encrypter_finalize, chunk_size)


def decrypt_stream(src: BinaryIO, dst: BinaryIO, session: SaltedCipher, chunk_size: int = DEFAULT_CHUNK_SIZE) -> int:
    """Decrypt a salted stream from ``src`` into ``dst``; return bytes written."""
    return _pump(src, dst, session.decrypt_chunk, session.decrypter_finalize, chunk_size)


def encrypt_file_stream(
    in_path: str,
    out_path: str,
    password: Union[bytes, str],
    cipher: Union[str, CipherSpec] = DEFAULT_CIPHER,
    iterations: int = DEFAULT_ITERATIONS,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    random_source: Optional[RandomSource] = None,
) -> bytes:
    """Encrypt ``in_path`` to ``out_path`` and return the salt used."""
    session = SaltedCipher(password, cipher, iterations, random_source=random_source)
    with open(in_path, "rb") as inf, open(out_path, "wb") as outf:
        written = encrypt_stream(inf, outf, session, chunk_size=chunk_size)
    logger.debug("encrypted %s -> %s (%d bytes)", in_path, out_path, written)
    return session.salt


def decrypt_file_stream(
    in_path: str,
    out_path: str,
    password: Union[bytes, str],
    cipher: Union[str, CipherSpec] = DEFAULT_CIPHER,
    iterations: int = DEFAULT_ITERATIONS,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> int:
    """
    Decrypt ``in_path`` to ``out_path``; return the plaintext size.

    The salt is read from the file header, so no random bytes are drawn.
    """
    with open(in_path, "rb") as inf:
        head = inf.read(HEADER_LENGTH)
        if len(head) < HEADER_LENGTH:
            raise HeaderFormatError(f"header too short: need {HEADER_LENGTH} bytes, got {len(head)}")
        session = SaltedCipher(password, cipher, iterations, salt=head[len(MAGIC):HEADER_LENGTH])
        with open(out_path, "wb") as outf:
            outf.write(session.decrypt_chunk(head))
            written = decrypt_stream(inf, outf, session, chunk_size=chunk_size)
    logger.debug("decrypted %s -> %s (%d bytes)", in_path, out_path, written)
    return written


def openssl_command(
    cipher: Union[str, CipherSpec] = DEFAULT_CIPHER,
    iterations: int = DEFAULT_ITERATIONS,
    decrypt: bool = True,
    in_path: Optional[str] = None,
    out_path: Optional[str] = None,
) -> List[str]:
    """Return the ``openssl enc`` argv equivalent to this package's settings."""
    argv = ["openssl", "enc", "-d" if decrypt else "-e", f"-{get_cipher(cipher).name}",
            "-md", "sha256", "-pbkdf2", "-iter", str(iterations)]
    if in_path is not None:
        argv += ["-in", in_path]
    if out_path is not None:
        argv += ["-out", out_path]
    return argv
