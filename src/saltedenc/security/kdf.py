"""PBKDF2-HMAC-SHA256 key/IV derivation compatible with ``openssl enc -pbkdf2``."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Union

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from saltedenc.core.config import SALT_LENGTH
from saltedenc.core.exceptions import DerivationError
from saltedenc.security.ciphers import CipherSpec, get_cipher
from saltedenc.security.randomness import RandomSource, system_random

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeyMaterial:
    key: bytes
    iv: bytes
    salt: bytes

    def __repr__(self) -> str:
        # never print the key or IV
        return f"KeyMaterial(salt={self.salt.hex()}, key_len={len(self.key)}, iv_len={len(self.iv)})"


def _as_bytes(password: Union[bytes, str]) -> bytes:
    if isinstance(password, str):
        return password.encode("utf-8")
    return bytes(password)


def _check_iterations(iterations: int) -> None:
    if isinstance(iterations, bool) or not isinstance(iterations, int) or iterations < 1:
        raise DerivationError(f"iteration count must be a positive integer, got {iterations!r}")


def generate_salt(random_source: Optional[RandomSource] = None) -> bytes:
    """Draw an 8-byte salt from ``random_source`` (the OS CSPRNG by default)."""
    source = random_source or system_random
    try:
        salt = source(SALT_LENGTH)
    except Exception as exc:
        raise DerivationError(f"random source failed: {exc}") from exc
    if not isinstance(salt, (bytes, bytearray)) or len(salt) != SALT_LENGTH:
        raise DerivationError(f"random source must return {SALT_LENGTH} bytes")
    return bytes(salt)


def derive_key_iv(
    password: Union[bytes, str],
    salt: bytes,
    iterations: int,
    key_len: int,
    iv_len: int,
) -> Tuple[bytes, bytes]:
    """
    Run PBKDF2-HMAC-SHA256 over ``password`` and ``salt`` for ``key_len + iv_len``
    bytes. The first ``key_len`` bytes are the key, the rest the IV.
    """
    _check_iterations(iterations)
    if len(salt) != SALT_LENGTH:
        raise DerivationError(f"salt must be {SALT_LENGTH} bytes, got {len(salt)}")

    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=key_len + iv_len,
        salt=bytes(salt),
        iterations=iterations,
    )
    okm = kdf.derive(_as_bytes(password))
    return okm[:key_len], okm[key_len:]


def derive_for_salt(
    password: Union[bytes, str],
    cipher: Union[str, CipherSpec],
    iterations: int,
    salt: bytes,
) -> KeyMaterial:
    """Derive key material for a cipher from a known salt (e.g. read from a header)."""
    spec = get_cipher(cipher)
    if spec.iv_length is None:
        raise DerivationError(f"cipher {spec.name} has no IV length")
    key, iv = derive_key_iv(password, salt, iterations, spec.key_length, spec.iv_length)
    logger.debug("derived key material for %s, salt=%s, iterations=%d", spec.name, salt.hex(), iterations)
    return KeyMaterial(key=key, iv=iv, salt=bytes(salt))


def derive_key_material(
    password: Union[bytes, str],
    cipher: Union[str, CipherSpec],
    iterations: int,
    random_source: Optional[RandomSource] = None,
) -> KeyMaterial:
    """
    Draw a fresh salt and derive key material for ``cipher``.

    The cipher and iteration count are validated before the random source is
    touched, so an invalid request never consumes randomness.
    """
    spec = get_cipher(cipher)
    if spec.iv_length is None:
        raise DerivationError(f"cipher {spec.name} has no IV length")
    _check_iterations(iterations)

    salt = generate_salt(random_source)
    return derive_for_salt(password, spec, iterations, salt)


def kdf_params_to_dict(salt: bytes, iterations: int, cipher: Union[str, CipherSpec]) -> Dict:
    return {
        "algo": "pbkdf2-hmac-sha256",
        "salt": salt.hex(),
        "iterations": iterations,
        "cipher": get_cipher(cipher).name,
    }
