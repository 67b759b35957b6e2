"""Streaming ``openssl enc`` compatible encryption session.

A ``SaltedCipher`` derives its key and IV once, at construction, from a
password and a fresh 8-byte salt (PBKDF2-HMAC-SHA256). It then offers:

- one-shot ``encrypt`` / ``decrypt``
- chunked ``encrypt_chunk`` ... ``encrypter_finalize`` and
  ``decrypt_chunk`` ... ``decrypter_finalize``

The output is ``b"Salted__" || salt || ciphertext`` and can be decrypted with::

    openssl enc -d -aes-256-cbc -md sha256 -pbkdf2 -iter 10000 -in out.enc

Concatenating the outputs of every ``encrypt_chunk`` call and of
``encrypter_finalize`` gives exactly the bytes ``encrypt`` returns for the
whole plaintext, however the plaintext was split. The two directions keep
separate state and may be interleaved, but a session is not thread-safe.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Optional, Union

from saltedenc.core.config import DEFAULT_CIPHER, DEFAULT_ITERATIONS, HEADER_LENGTH
from saltedenc.core.exceptions import (
    ContextMissingError,
    HeaderFormatError,
    PrimitiveError,
    SaltedEncError,
    SessionStateError,
)
from .ciphers import CipherSpec, StreamingContext, get_cipher, one_shot
from .header import decode_header, encode_header, split_header
from .kdf import KeyMaterial, derive_for_salt, derive_key_material
from .randomness import RandomSource

logger = logging.getLogger(__name__)


class DirectionState(Enum):
    IDLE = "idle"
    # decrypt side only: some but not all of the 16 header bytes have arrived
    READING_HEADER = "reading_header"
    ACTIVE = "active"


class _Direction:
    __slots__ = ("name", "state", "context", "header_pending", "header_buffer")

    def __init__(self, name: str):
        self.name = name
        self.reset()

    def reset(self) -> None:
        self.state = DirectionState.IDLE
        self.context: Optional[StreamingContext] = None
        # emit (encrypt) or expect (decrypt) a header on the next stream
        self.header_pending = True
        self.header_buffer = bytearray()


class SaltedCipher:
    def __init__(
        self,
        password: Union[bytes, str],
        cipher: Union[str, CipherSpec] = DEFAULT_CIPHER,
        iterations: int = DEFAULT_ITERATIONS,
        random_source: Optional[RandomSource] = None,
        salt: Optional[bytes] = None,
    ):
        """
        Derive key material for ``cipher`` from ``password``.

        Args:
            password: text (UTF-8 encoded) or raw bytes
            cipher: OpenSSL cipher name such as ``"aes-256-cbc"``, or a CipherSpec
            iterations: PBKDF2 iteration count, must be >= 1
            random_source: callable returning n random bytes; defaults to os.urandom
            salt: use this 8-byte salt instead of drawing one, e.g. the salt
                read from an existing header

        Raises:
            DerivationError: invalid iteration count, cipher without IV, or a
                failing random source
            UnsupportedCipherError: unknown cipher name
        """
        self._spec = get_cipher(cipher)
        self._password = password
        self._iterations = iterations
        self._random_source = random_source
        self._encrypter = _Direction("encrypt")
        self._decrypter = _Direction("decrypt")
        if salt is None:
            material = derive_key_material(password, self._spec, iterations, random_source)
        else:
            material = derive_for_salt(password, self._spec, iterations, salt)
        self._install(material)

    @classmethod
    def new(
        cls,
        password: Union[bytes, str],
        cipher: Union[str, CipherSpec],
        iteration_count: int,
        random_source: Optional[RandomSource] = None,
    ) -> "SaltedCipher":
        return cls(password, cipher, iteration_count, random_source=random_source)

    def _install(self, material: KeyMaterial) -> None:
        self._material = material
        self._header = encode_header(material.salt)
        # key material for the most recent incoming header salt that is not ours
        self._foreign: Optional[KeyMaterial] = None
        self._encryptions = 0

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def cipher(self) -> CipherSpec:
        return self._spec

    @property
    def iterations(self) -> int:
        return self._iterations

    @property
    def salt(self) -> bytes:
        return self._material.salt

    @property
    def key(self) -> bytes:
        return self._material.key

    @property
    def iv(self) -> bytes:
        return self._material.iv

    @property
    def header(self) -> bytes:
        return self._header

    @property
    def block_size(self) -> int:
        return self._spec.block_size

    @property
    def encrypt_state(self) -> DirectionState:
        return self._encrypter.state

    @property
    def decrypt_state(self) -> DirectionState:
        return self._decrypter.state

    def __repr__(self) -> str:
        return f"SaltedCipher(cipher={self._spec.name!r}, iterations={self._iterations}, salt={self.salt.hex()})"

    # ------------------------------------------------------------------
    # Key material
    # ------------------------------------------------------------------

    def rekey(self) -> None:
        """Draw a new salt and re-derive key and IV for subsequent streams."""
        if self._encrypter.state is not DirectionState.IDLE or self._decrypter.state is not DirectionState.IDLE:
            raise SessionStateError("cannot rekey while a stream is in progress")
        self._install(derive_key_material(self._password, self._spec, self._iterations, self._random_source))
        logger.debug("session rekeyed, new salt=%s", self.salt.hex())

    def _material_for(self, salt: bytes) -> KeyMaterial:
        if salt == self._material.salt:
            return self._material
        if self._foreign is None or self._foreign.salt != salt:
            logger.debug("incoming salt %s differs from session salt, deriving", salt.hex())
            self._foreign = derive_for_salt(self._password, self._spec, self._iterations, salt)
        return self._foreign

    def _note_encryption(self) -> None:
        self._encryptions += 1
        if self._encryptions > 1 and self._spec.iv_length:
            logger.warning(
                "encrypting stream %d with the same key and IV (salt=%s); call rekey() for a fresh IV",
                self._encryptions,
                self.salt.hex(),
            )

    # ------------------------------------------------------------------
    # Primitive calls
    # ------------------------------------------------------------------

    def _new_context(self, material: KeyMaterial, decrypt: bool) -> StreamingContext:
        try:
            return StreamingContext(self._spec, material.key, material.iv, decrypt=decrypt)
        except (ValueError, TypeError) as exc:
            raise PrimitiveError(f"cannot initialise {self._spec.name} context: {exc}") from exc

    def _update(self, direction: _Direction, data: bytes) -> bytes:
        try:
            return direction.context.update(bytes(data))
        except (ValueError, TypeError) as exc:
            direction.reset()
            raise PrimitiveError(f"{direction.name} update failed: {exc}") from exc

    def _finalize(self, direction: _Direction) -> bytes:
        if direction.state is DirectionState.READING_HEADER:
            received = len(direction.header_buffer)
            direction.reset()
            raise HeaderFormatError(f"stream ended inside the header ({received} of {HEADER_LENGTH} bytes)")
        if direction.state is not DirectionState.ACTIVE:
            raise ContextMissingError(f"no active {direction.name}ion context; submit a chunk first")
        try:
            out = direction.context.finalize()
        except (ValueError, TypeError) as exc:
            raise PrimitiveError(f"{direction.name} finalize failed: {exc}") from exc
        finally:
            direction.reset()
        logger.debug("%s stream finalized", direction.name)
        return out

    # ------------------------------------------------------------------
    # One-shot
    # ------------------------------------------------------------------

    def encrypt(self, plaintext: bytes) -> bytes:
        """Encrypt ``plaintext`` in one go and return ``header || ciphertext``."""
        self._note_encryption()
        try:
            body = one_shot(self._spec, self.key, self.iv, bytes(plaintext))
        except (ValueError, TypeError) as exc:
            raise PrimitiveError(f"encrypt failed: {exc}") from exc
        return self._header + body

    def decrypt(self, data: bytes) -> bytes:
        """Validate the header of ``data`` and decrypt the rest in one go."""
        salt, body = split_header(data)
        material = self._material_for(salt)
        try:
            return one_shot(self._spec, material.key, material.iv, body, decrypt=True)
        except (ValueError, TypeError) as exc:
            raise PrimitiveError(f"decrypt failed: {exc}") from exc

    # ------------------------------------------------------------------
    # Chunked
    # ------------------------------------------------------------------

    def encrypt_chunk(self, chunk: bytes) -> bytes:
        """
        Encrypt one piece of a stream.

        The first call of a stream creates the context and its output starts
        with the 16-byte header. Output may be shorter than the input (a
        partial block is held until more data or ``encrypter_finalize``).
        """
        direction = self._encrypter
        if direction.state is DirectionState.IDLE:
            direction.context = self._new_context(self._material, decrypt=False)
            direction.state = DirectionState.ACTIVE
            self._note_encryption()
            logger.debug("encrypt stream started")

        out = self._update(direction, chunk)
        if direction.header_pending:
            direction.header_pending = False
            return self._header + out
        return out

    def encrypter_finalize(self) -> bytes:
        """Flush the encrypt stream (padding included) and reset for a new stream."""
        return self._finalize(self._encrypter)

    def decrypt_chunk(self, chunk: bytes) -> bytes:
        """
        Decrypt one piece of a stream.

        The first 16 bytes of a stream are the header; they may arrive split
        across several chunks and produce no output until complete. Output
        lags input by up to one block because the last block carries the
        padding checked in ``decrypter_finalize``.
        """
        direction = self._decrypter
        if direction.header_pending:
            direction.header_buffer += chunk
            if len(direction.header_buffer) < HEADER_LENGTH:
                if direction.header_buffer:
                    direction.state = DirectionState.READING_HEADER
                return b""
            buffered = bytes(direction.header_buffer)
            try:
                salt = decode_header(buffered)
            except HeaderFormatError:
                direction.reset()
                raise
            try:
                material = self._material_for(salt)
                direction.context = self._new_context(material, decrypt=True)
            except SaltedEncError:
                direction.reset()
                raise
            direction.state = DirectionState.ACTIVE
            direction.header_pending = False
            direction.header_buffer = bytearray()
            logger.debug("decrypt stream started, salt=%s", salt.hex())
            chunk = buffered[HEADER_LENGTH:]

        return self._update(direction, chunk)

    def decrypter_finalize(self) -> bytes:
        """Check padding, return the remaining plaintext and reset for a new stream."""
        return self._finalize(self._decrypter)
