"""
Unit tests for Hamming and mirror distance.
"""

import random

import pytest

from imgprint.config import HASH_MASK
from imgprint.hashing import hamming_distance, mirror_distance
from imgprint.models import Fingerprint


def fp(text):
    return Fingerprint.from_str(text)


class TestHammingDistance:
    """Test plain bit-count distance."""

    def test_known_values(self):
        assert hamming_distance(fp("9"), fp("8")) == 1
        assert hamming_distance(fp("7"), fp("8")) == 4

    def test_identity(self):
        assert hamming_distance(fp("17361641481138401520"), fp("17361641481138401520")) == 0

    def test_complement_is_maximal(self):
        assert hamming_distance(Fingerprint(0), Fingerprint(HASH_MASK)) == 64

    def test_accepts_plain_ints(self):
        assert hamming_distance(7, 8) == 4

    def test_rejects_out_of_range_int(self):
        with pytest.raises(ValueError):
            hamming_distance(HASH_MASK + 1, 0)

    def test_properties_on_random_values(self):
        rng = random.Random(7)
        for _ in range(200):
            a = Fingerprint(rng.getrandbits(64))
            b = Fingerprint(rng.getrandbits(64))
            d = hamming_distance(a, b)
            assert 0 <= d <= 64
            assert d == hamming_distance(b, a)
            assert d == a - b
            assert hamming_distance(a, a) == 0


class TestMirrorDistance:
    """Test distance that treats inverted fingerprints as equal."""

    def test_regression_value(self):
        a = fp("217020655954766639")
        b = fp("3472328230754595056")
        assert hamming_distance(a, b) == 35
        assert mirror_distance(a, b) == 29

    def test_small_values_unchanged(self):
        assert mirror_distance(fp("9"), fp("8")) == 1
        assert mirror_distance(fp("7"), fp("8")) == 4

    def test_complement_is_zero(self):
        value = Fingerprint(0x0123_4567_89AB_CDEF)
        assert mirror_distance(value, Fingerprint(value.value ^ HASH_MASK)) == 0

    def test_properties_on_random_values(self):
        rng = random.Random(11)
        for _ in range(200):
            a = Fingerprint(rng.getrandbits(64))
            b = Fingerprint(rng.getrandbits(64))
            m = mirror_distance(a, b)
            assert 0 <= m <= 32
            assert m <= hamming_distance(a, b)
            assert m == mirror_distance(b, a)
