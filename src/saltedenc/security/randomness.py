"""Random byte sources used for salt generation.

A random source is any callable taking a length and returning that many bytes.
The default reads from the operating system CSPRNG; ``FixedRandomSource`` is a
deterministic stand-in for known-answer tests.
"""
import os
from typing import Callable

RandomSource = Callable[[int], bytes]


def system_random(length: int) -> bytes:
    """Return ``length`` cryptographically secure random bytes."""
    return os.urandom(length)


class FixedRandomSource:
    """Return prefixes of a fixed byte string instead of random data."""

    def __init__(self, data: bytes):
        self.data = bytes(data)
        self.calls = 0

    def __call__(self, length: int) -> bytes:
        if length > len(self.data):
            raise ValueError(f"fixed source holds {len(self.data)} bytes, {length} requested")
        self.calls += 1
        return self.data[:length]
