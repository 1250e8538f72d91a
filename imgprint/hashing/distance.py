"""
Hamming distance between fingerprints.
"""

from __future__ import annotations

from typing import Union

from ..config import HASH_MASK
from ..models import Fingerprint

HashLike = Union[Fingerprint, int]


def _as_int(value: HashLike) -> int:
    if isinstance(value, Fingerprint):
        return value.value
    return Fingerprint(value).value


def hamming_distance(a: HashLike, b: HashLike) -> int:
    """
    Count the differing bits of two fingerprints.

    Returns:
        Distance in [0, 64]

    Examples:
        >>> hamming_distance(9, 8)
        1
        >>> hamming_distance(7, 8)
        4
    """
    return bin(_as_int(a) ^ _as_int(b)).count('1')


def mirror_distance(a: HashLike, b: HashLike) -> int:
    """
    Hamming distance that also tries the bit-complement of ``b``.

    An image and its brightness-inverted counterpart produce complementary
    dHash bits, so both count as equally similar.

    Returns:
        min(distance(a, b), distance(a, ~b)), in [0, 32]
    """
    b_value = _as_int(b)
    return min(
        hamming_distance(a, b_value),
        hamming_distance(a, b_value ^ HASH_MASK),
    )


__all__ = ['hamming_distance', 'mirror_distance']
