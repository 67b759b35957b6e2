"""saltedenc: read and write ``openssl enc`` salted streams in Python."""

from saltedenc.core.logging_config import configure_logging, install_null_handler
from saltedenc.core.exceptions import (
    ContextMissingError,
    DerivationError,
    HeaderFormatError,
    PrimitiveError,
    SaltedEncError,
    SessionStateError,
    UnsupportedCipherError,
)
from saltedenc.security import (
    CipherSpec,
    FixedRandomSource,
    SaltedCipher,
    decrypt_file_stream,
    encrypt_file_stream,
    get_cipher,
    openssl_command,
)

__version__ = "0.1.0"

install_null_handler()

__all__ = [
    "ContextMissingError",
    "DerivationError",
    "HeaderFormatError",
    "PrimitiveError",
    "SaltedEncError",
    "SessionStateError",
    "UnsupportedCipherError",
    "CipherSpec",
    "FixedRandomSource",
    "SaltedCipher",
    "decrypt_file_stream",
    "encrypt_file_stream",
    "get_cipher",
    "openssl_command",
    "configure_logging",
]
