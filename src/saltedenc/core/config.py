"""Defaults shared across saltedenc.

Values match what ``openssl enc -pbkdf2 -md sha256`` expects so that output
produced with the defaults can be decrypted by the command-line tool.
"""

MAGIC = b"Salted__"
SALT_LENGTH = 8
HEADER_LENGTH = len(MAGIC) + SALT_LENGTH  # 16

DEFAULT_CIPHER = "aes-256-cbc"
DEFAULT_ITERATIONS = 10000
DEFAULT_CHUNK_SIZE = 64 * 1024  # 64KB
