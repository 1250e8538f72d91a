"""
Error types raised by the image fingerprint core.

Recoverable failures (bad persisted data, store I/O, degenerate numerics)
get their own classes so callers can catch them without swallowing
unrelated exceptions. Contract violations such as an even window size are
plain ``ValueError``.
"""


class ImgprintError(Exception):
    """Base class for all imgprint errors."""


class FingerprintParseError(ImgprintError, ValueError):
    """A fingerprint string or value could not be converted."""


class HashStoreError(ImgprintError, OSError):
    """A hash store file could not be opened, read, parsed or written."""


class NoPathSetError(HashStoreError):
    """``HashStore.save()`` was called on a store with no bound file."""


class DegenerateError(ImgprintError, ArithmeticError):
    """The quadratic has no real roots (negative discriminant)."""


__all__ = [
    'ImgprintError',
    'FingerprintParseError',
    'HashStoreError',
    'NoPathSetError',
    'DegenerateError',
]
