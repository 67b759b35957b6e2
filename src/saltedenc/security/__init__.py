"""Security helpers: key derivation, salted header and streaming cipher session.

This package provides:
- PBKDF2-HMAC-SHA256 key/IV derivation compatible with ``openssl enc -pbkdf2``
- the 16-byte ``Salted__`` header codec
- a cipher session with one-shot and chunked encrypt/decrypt
- file helpers built on the chunked API
"""

from .ciphers import CIPHERS, CipherSpec, StreamingContext, get_cipher
from .crypto import DirectionState, SaltedCipher
from .header import decode_header, encode_header, split_header
from .kdf import (
    KeyMaterial,
    derive_for_salt,
    derive_key_iv,
    derive_key_material,
    generate_salt,
    kdf_params_to_dict,
)
from .randomness import FixedRandomSource, RandomSource, system_random
from .streams import (
    decrypt_file_stream,
    decrypt_stream,
    encrypt_file_stream,
    encrypt_stream,
    openssl_command,
)

__all__ = [
    "CIPHERS",
    "CipherSpec",
    "StreamingContext",
    "get_cipher",
    "DirectionState",
    "SaltedCipher",
    "decode_header",
    "encode_header",
    "split_header",
    "KeyMaterial",
    "derive_for_salt",
    "derive_key_iv",
    "derive_key_material",
    "generate_salt",
    "kdf_params_to_dict",
    "FixedRandomSource",
    "RandomSource",
    "system_random",
    "decrypt_file_stream",
    "decrypt_stream",
    "encrypt_file_stream",
    "encrypt_stream",
    "openssl_command",
]
