"""
Unit tests for LSH (Locality-Sensitive Hashing) module.
"""

import random

import pytest

from imgprint.config import HASH_MASK
from imgprint.lsh import HammingLSH, LSHStats, calculate_optimal_params
from imgprint.models import Fingerprint


def build_index(values, **kwargs):
    lsh = HammingLSH(**kwargs)
    for idx, value in enumerate(values):
        lsh.add(idx, Fingerprint(value))
    return lsh


class TestHammingLSH:
    """Test HammingLSH class."""

    def test_initialization(self):
        lsh = HammingLSH(num_tables=10, bits_per_table=16)
        assert lsh.num_tables == 10
        assert lsh.bits_per_table == 16
        assert len(lsh.tables) == 10
        assert all(len(positions) == 16 for positions in lsh.bit_positions)

    def test_invalid_bits_per_table(self):
        with pytest.raises(ValueError):
            HammingLSH(bits_per_table=65)
        with pytest.raises(ValueError):
            HammingLSH(bits_per_table=0)

    def test_seed_is_reproducible(self):
        assert HammingLSH(seed=3).bit_positions == HammingLSH(seed=3).bit_positions

    def test_add_fills_one_bucket_per_table(self):
        lsh = build_index([12345], num_tables=5, bits_per_table=8)
        assert [sum(len(b) for b in table.values()) for table in lsh.tables] == [1] * 5

    def test_identical_fingerprints_pair_in_every_table(self):
        lsh = build_index([7, 7], num_tables=10, bits_per_table=12)
        assert list(lsh.iter_candidate_pairs()) == [(0, 1)] * 10

    def test_complementary_fingerprints_never_collide(self):
        lsh = build_index([0, HASH_MASK], num_tables=10, bits_per_table=12)
        assert list(lsh.iter_candidate_pairs()) == []

    def test_candidate_pairs_are_ordered(self):
        lsh = HammingLSH(num_tables=10, bits_per_table=12)
        for idx in (2, 0, 1):
            lsh.add(idx, Fingerprint(42))

        pairs = list(lsh.iter_candidate_pairs())
        assert all(i < j for i, j in pairs)
        assert set(pairs) == {(0, 1), (0, 2), (1, 2)}

    def test_close_fingerprints_collide(self):
        base = random.Random(5).getrandbits(64)
        lsh = build_index([base, base ^ (1 << 17)], num_tables=12, bits_per_table=10)
        assert (0, 1) in set(lsh.iter_candidate_pairs())


class TestLSHStats:
    def test_reduction_ratio(self):
        stats = LSHStats(total_items=10, total_comparisons=9)
        assert stats.reduction_ratio == pytest.approx(1 - 9 / 45)

    def test_empty(self):
        assert LSHStats().reduction_ratio == 0.0


class TestCalculateOptimalParams:
    """Test calculate_optimal_params function."""

    def test_small_collection(self):
        tables, bits = calculate_optimal_params(5000, threshold=10)
        assert isinstance(tables, int)
        assert isinstance(bits, int)
        assert tables > 0
        assert 8 <= bits <= 16

    def test_bits_grow_with_collection(self):
        _, bits_small = calculate_optimal_params(300, threshold=10)
        _, bits_large = calculate_optimal_params(60000, threshold=10)
        assert bits_small == 8
        assert bits_large == 16

    def test_very_large_collection(self):
        tables, _ = calculate_optimal_params(500000, threshold=10)
        tables_small, _ = calculate_optimal_params(5000, threshold=10)
        assert tables > tables_small
        assert tables <= 64

    def test_exact_matches_need_one_table(self):
        assert calculate_optimal_params(5000, threshold=0) == (1, 12)
