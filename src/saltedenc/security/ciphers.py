"""Cipher registry and streaming contexts over the ``cryptography`` package.

Ciphers are looked up by their OpenSSL names (``aes-256-cbc``, ``aes-128-ctr``,
...). Block modes (CBC, ECB) are PKCS#7 padded exactly like ``openssl enc``;
the stream-like modes (CTR, CFB, OFB) are not padded and report a block size
of 1, again matching OpenSSL.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Union

from cryptography.hazmat.decrepit.ciphers.modes import CFB, OFB
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from saltedenc.core.exceptions import UnsupportedCipherError


@dataclass(frozen=True)
class CipherSpec:
    name: str
    key_length: int
    iv_length: Optional[int]
    block_size: int
    padded: bool
    mode_factory: Callable[..., modes.Mode]

    def build(self, key: bytes, iv: Optional[bytes]) -> Cipher:
        """Return a ``cryptography`` Cipher bound to ``key`` and ``iv``."""
        mode = self.mode_factory() if self.iv_length is None else self.mode_factory(iv)
        return Cipher(algorithms.AES(key), mode)


_AES_BLOCK = 16

_MODES = {
    # mode: (factory, takes_iv, padded)
    "cbc": (modes.CBC, True, True),
    "ecb": (modes.ECB, False, True),
    "ctr": (modes.CTR, True, False),
    "cfb": (CFB, True, False),
    "ofb": (OFB, True, False),
}


def _build_registry() -> Dict[str, CipherSpec]:
    registry = {}
    for bits in (128, 192, 256):
        for mode_name, (factory, takes_iv, padded) in _MODES.items():
            name = f"aes-{bits}-{mode_name}"
            registry[name] = CipherSpec(
                name=name,
                key_length=bits // 8,
                iv_length=_AES_BLOCK if takes_iv else None,
                block_size=_AES_BLOCK if padded else 1,
                padded=padded,
                mode_factory=factory,
            )
    return registry


CIPHERS: Dict[str, CipherSpec] = _build_registry()


def get_cipher(cipher: Union[str, CipherSpec]) -> CipherSpec:
    """Resolve an OpenSSL cipher name (or pass a CipherSpec through)."""
    if isinstance(cipher, CipherSpec):
        return cipher
    name = cipher.lower().lstrip("-")
    try:
        return CIPHERS[name]
    except KeyError:
        raise UnsupportedCipherError(f"Unsupported cipher: {cipher}") from None


class StreamingContext:
    """Incremental encryptor/decryptor with OpenSSL-compatible padding.

    ``update`` may return fewer bytes than it was given (a partial block is
    held back, and on decrypt the last full block is held back until the
    padding can be checked). ``finalize`` flushes the remainder and the
    context cannot be used afterwards.
    """

    def __init__(self, spec: CipherSpec, key: bytes, iv: Optional[bytes], decrypt: bool = False):
        cipher = spec.build(key, iv)
        self.decrypt = decrypt
        self._ctx = cipher.decryptor() if decrypt else cipher.encryptor()
        self._padding = None
        if spec.padded:
            pkcs7 = padding.PKCS7(_AES_BLOCK * 8)
            self._padding = pkcs7.unpadder() if decrypt else pkcs7.padder()

    def update(self, data: bytes) -> bytes:
        if self.decrypt:
            out = self._ctx.update(data)
            return self._padding.update(out) if self._padding else out
        if self._padding:
            data = self._padding.update(data)
        return self._ctx.update(data)

    def finalize(self) -> bytes:
        if self.decrypt:
            out = self._ctx.finalize()
            if self._padding:
                out = self._padding.update(out) + self._padding.finalize()
            return out
        out = b""
        if self._padding:
            out = self._ctx.update(self._padding.finalize())
        return out + self._ctx.finalize()


def one_shot(spec: CipherSpec, key: bytes, iv: Optional[bytes], data: bytes, decrypt: bool = False) -> bytes:
    """Encrypt or decrypt ``data`` in a single call."""
    ctx = StreamingContext(spec, key, iv, decrypt=decrypt)
    return ctx.update(data) + ctx.finalize()
