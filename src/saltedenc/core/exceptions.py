"""
Exceptions for saltedenc
Every error raised by the package derives from SaltedEncError so callers
can catch the whole family at once.
"""


class SaltedEncError(Exception):
    # general container for errors
    pass


class DerivationError(SaltedEncError):
    # raised when key material cannot be derived (bad iteration count,
    # cipher without an IV, failing random source)
    pass


class UnsupportedCipherError(SaltedEncError):
    # raised when a cipher name is not in the registry
    pass


class HeaderFormatError(SaltedEncError):
    # raised when the 16-byte salted header is short or carries the wrong tag
    pass


class ContextMissingError(SaltedEncError):
    # raised when finalize is called on a direction with no stream in progress
    pass


class SessionStateError(SaltedEncError):
    # raised when an operation is not allowed while a stream is in progress
    pass


class PrimitiveError(SaltedEncError):
    # raised when the underlying cipher rejects its input (bad padding,
    # truncated block, wrong key size)
    pass
