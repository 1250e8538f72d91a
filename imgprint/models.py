"""
Data models for the image fingerprint tools.

Contains dataclasses for fingerprints, detected corners, hash store entries
and the progress events emitted by background hashing.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import imagehash
import numpy as np

from .config import DHASH_HEIGHT, HASH_BITS, HASH_MASK
from .errors import FingerprintParseError


@dataclass(frozen=True)
class Fingerprint:
    """
    A 64-bit perceptual fingerprint.

    Bits are packed most-significant-bit first in row-major scan order of the
    dHash grid. The integer carries no meaning on its own; compare two
    fingerprints with ``hamming_distance`` / ``mirror_distance`` (or ``a - b``,
    following the imagehash convention).

    Attributes:
        value: Unsigned integer in [0, 2**64)
    """
    value: int = 0

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise FingerprintParseError(f"Fingerprint value must be an int, got {self.value!r}")
        if not 0 <= self.value <= HASH_MASK:
            raise FingerprintParseError(f"Fingerprint value out of 64-bit range: {self.value}")

    @classmethod
    def from_str(cls, text: str) -> 'Fingerprint':
        """
        Parse the decimal string form of a fingerprint.

        Raises:
            FingerprintParseError: If text is not an unsigned decimal integer
                that fits in 64 bits
        """
        if not isinstance(text, str):
            raise FingerprintParseError(f"Expected a decimal string, got {type(text).__name__}")
        if not text or not (text.isascii() and text.isdigit()):
            raise FingerprintParseError(f"Invalid fingerprint string: {text!r}")
        return cls(int(text, 10))

    def to_str(self) -> str:
        """Return the decimal string form used in store files."""
        return str(self.value)

    def __str__(self) -> str:
        return self.to_str()

    def __int__(self) -> int:
        return self.value

    def __sub__(self, other: 'Fingerprint') -> int:
        if not isinstance(other, Fingerprint):
            return NotImplemented
        return bin(self.value ^ other.value).count('1')

    def to_hex(self) -> str:
        """Return the 16-digit hex form (same text as ``str(imagehash)``)."""
        return f"{self.value:016x}"

    def to_bits(self) -> list[bool]:
        """Return the 64 bits, most significant first."""
        return [bool((self.value >> (HASH_BITS - 1 - i)) & 1) for i in range(HASH_BITS)]

    def to_imagehash(self) -> imagehash.ImageHash:
        """Convert to an ``imagehash.ImageHash`` with an 8x8 bit array."""
        bits = np.array(self.to_bits(), dtype=bool)
        return imagehash.ImageHash(bits.reshape(DHASH_HEIGHT, HASH_BITS // DHASH_HEIGHT))

    @classmethod
    def from_imagehash(cls, image_hash: imagehash.ImageHash) -> 'Fingerprint':
        """
        Build a fingerprint from a 64-bit ``imagehash.ImageHash``.

        Raises:
            FingerprintParseError: If the hash does not hold exactly 64 bits
        """
        bits = np.asarray(image_hash.hash).flatten()
        if bits.size != HASH_BITS:
            raise FingerprintParseError(f"Expected a {HASH_BITS}-bit hash, got {bits.size} bits")
        value = 0
        for bit in bits:
            value = (value << 1) | int(bool(bit))
        return cls(value)


def score_order_key(score: float) -> tuple[int, float]:
    """
    Total order key for corner scores.

    NaN sorts below every number (including -inf) and all NaNs are equal to
    each other. Every other float keeps its natural order.
    """
    if math.isnan(score):
        return (0, 0.0)
    return (1, score)


@dataclass(frozen=True, eq=False)
class Corner:
    """
    A detected corner.

    Equality, hashing and ordering all compare ``score`` only, through
    ``score_order_key``, so the order is total: two corners with equal
    scores (or two NaN scores) compare equal whatever their position.

    Attributes:
        index: Flattened pixel offset (row * width + col)
        score: Corner response (32-bit float precision)
    """
    index: int
    score: float

    @property
    def sort_key(self) -> tuple[int, float]:
        return score_order_key(self.score)

    def position(self, width: int) -> tuple[int, int]:
        """Return (x, y) for an image of the given width."""
        row, col = divmod(self.index, width)
        return col, row

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Corner):
            return NotImplemented
        return self.sort_key == other.sort_key

    def __hash__(self) -> int:
        return hash(self.sort_key)

    def __lt__(self, other: 'Corner') -> bool:
        if not isinstance(other, Corner):
            return NotImplemented
        return self.sort_key < other.sort_key

    def __le__(self, other: 'Corner') -> bool:
        if not isinstance(other, Corner):
            return NotImplemented
        return self.sort_key <= other.sort_key

    def __gt__(self, other: 'Corner') -> bool:
        if not isinstance(other, Corner):
            return NotImplemented
        return self.sort_key > other.sort_key

    def __ge__(self, other: 'Corner') -> bool:
        if not isinstance(other, Corner):
            return NotImplemented
        return self.sort_key >= other.sort_key


@dataclass(frozen=True)
class HashStoreEntry:
    """A (fingerprint, path) pair held by a HashStore."""
    fingerprint: Fingerprint
    path: str

    def to_json(self) -> list:
        """Serialize as ``[decimal_string, path]``."""
        return [self.fingerprint.to_str(), self.path]

    @classmethod
    def from_json(cls, item: Any) -> 'HashStoreEntry':
        """
        Build an entry from a ``[fingerprint, path]`` pair.

        The fingerprint may be the decimal string (what ``to_json`` writes)
        or a plain JSON integer.

        Raises:
            FingerprintParseError: If the pair is malformed
        """
        if not isinstance(item, (list, tuple)) or len(item) != 2:
            raise FingerprintParseError(f"Expected a [fingerprint, path] pair, got {item!r}")
        raw_hash, path = item
        if not isinstance(path, str):
            raise FingerprintParseError(f"Expected a path string, got {path!r}")
        if isinstance(raw_hash, int) and not isinstance(raw_hash, bool):
            fingerprint = Fingerprint(raw_hash)
        else:
            fingerprint = Fingerprint.from_str(raw_hash)
        return cls(fingerprint=fingerprint, path=path)


class TaskStatus(Enum):
    """Processing state of a background hashing task."""
    IDLE = 'idle'
    HASHING = 'hashing'
    FINISHED = 'finished'
    ERRORED = 'errored'
    CANCELLED = 'cancelled'

    @property
    def is_terminal(self) -> bool:
        return self in (TaskStatus.FINISHED, TaskStatus.ERRORED, TaskStatus.CANCELLED)


class ProgressKind(Enum):
    STARTED = 'started'
    ADVANCED = 'advanced'
    FINISHED = 'finished'
    ERRORED = 'errored'
    CANCELLED = 'cancelled'


@dataclass
class HashProgress:
    """
    Progress event delivered to a hashing task's callback.

    Attributes:
        kind: Which event this is
        percent: Percentage of files received so far (0-100)
        results: New (Fingerprint, path) pairs for ADVANCED events
        message: Error text for ERRORED events
    """
    kind: ProgressKind
    percent: float = 0.0
    results: list = field(default_factory=list)
    message: str = ""
