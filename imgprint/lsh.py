"""
Locality-Sensitive Hashing (LSH) for fast fingerprint grouping.

This module implements LSH using bit sampling, which suits the Hamming
distance used between 64-bit dHash fingerprints.

If two fingerprints are similar (low Hamming distance) they share most of
their bits. Sampling random subsets of bits and using them as bucket keys
makes similar fingerprints collide in at least one bucket with high
probability.

Performance:
- Brute force: O(n^2) comparisons
- LSH: O(n * c) where c is the average number of candidates per fingerprint
"""

from __future__ import annotations

import math
import random
from collections import defaultdict
from dataclasses import dataclass
from typing import Iterator

from .config import HASH_BITS, LSH_DEFAULT_BITS, LSH_DEFAULT_TABLES
from .models import Fingerprint


@dataclass
class LSHStats:
    """Statistics about LSH index usage."""
    total_items: int = 0
    total_comparisons: int = 0
    matching_pairs: int = 0

    @property
    def reduction_ratio(self) -> float:
        """How much we reduced comparisons vs brute force."""
        brute_force = (self.total_items * (self.total_items - 1)) // 2
        if brute_force == 0:
            return 0.0
        return 1.0 - (self.total_comparisons / brute_force)


class HammingLSH:
    """
    Locality-Sensitive Hashing index over 64-bit fingerprints.

    Each table samples a random subset of bit positions; the sampled bits
    form the bucket key.

    Usage:
        lsh = HammingLSH(num_tables=12, bits_per_table=10)
        for idx, fingerprint in enumerate(fingerprints):
            lsh.add(idx, fingerprint)

        for i, j in lsh.iter_candidate_pairs():
            if fingerprints[i] - fingerprints[j] <= threshold:
                ...
    """

    def __init__(
        self,
        num_tables: int = LSH_DEFAULT_TABLES,
        bits_per_table: int = LSH_DEFAULT_BITS,
        hash_bits: int = HASH_BITS,
        seed: int = 42,
    ):
        """
        Initialize LSH index.

        Args:
            num_tables: Number of hash tables. More tables = better recall
                        but more memory.
            bits_per_table: Bits sampled per table. Fewer bits = more
                           candidates (better recall, more comparisons).
            hash_bits: Total bits in a fingerprint.
            seed: Random seed for reproducibility.
        """
        if not 0 < bits_per_table <= hash_bits:
            raise ValueError(f"bits_per_table must be in 1..{hash_bits}, got {bits_per_table}")

        self.num_tables = num_tables
        self.bits_per_table = bits_per_table
        self.hash_bits = hash_bits
        self.seed = seed

        rng = random.Random(seed)
        self.bit_positions: list[list[int]] = [
            sorted(rng.sample(range(hash_bits), bits_per_table))
            for _ in range(num_tables)
        ]

        # table_idx -> bucket_key -> list of indices
        self.tables: list[dict[int, list[int]]] = [
            defaultdict(list) for _ in range(num_tables)
        ]

    def _get_bucket_key(self, value: int, table_idx: int) -> int:
        """Pack the sampled bits of ``value`` for one table into an int key."""
        key = 0
        for position in self.bit_positions[table_idx]:
            key = (key << 1) | ((value >> position) & 1)
        return key

    def add(self, idx: int, fingerprint: Fingerprint) -> None:
        """Index ``fingerprint`` under ``idx`` (typically its store position)."""
        for table_idx, table in enumerate(self.tables):
            table[self._get_bucket_key(fingerprint.value, table_idx)].append(idx)

    def iter_candidate_pairs(self) -> Iterator[tuple[int, int]]:
        """
        Yield (i, j) pairs with i < j that share a bucket.

        Pairs colliding in several tables are yielded once per table.
        """
        for table in self.tables:
            for bucket in table.values():
                for a in range(len(bucket)):
                    for b in range(a + 1, len(bucket)):
                        i, j = bucket[a], bucket[b]
                        yield (i, j) if i < j else (j, i)


def calculate_optimal_params(
    num_items: int,
    threshold: int = 10,
    hash_bits: int = HASH_BITS,
    target_recall: float = 0.99,
    max_tables: int = 64,
) -> tuple[int, int]:
    """
    Pick LSH parameters for a collection size and distance threshold.

    The math:
    - Two fingerprints at Hamming distance d agree on k sampled bits with
      probability p = ((hash_bits - d) / hash_bits) ^ k
    - With L tables, the chance of at least one collision is 1 - (1 - p)^L

    Bits per table grow with log2 of the collection so buckets stay small;
    the table count is then the smallest L reaching ``target_recall``.

    Returns:
        Tuple of (num_tables, bits_per_table)
    """
    bits_per_table = min(16, max(8, round(math.log2(max(2, num_items)))))

    p_match = ((hash_bits - threshold) / hash_bits) ** bits_per_table
    if p_match >= 1.0:
        return 1, bits_per_table
    if p_match <= 0.0:
        return max_tables, bits_per_table

    tables = math.ceil(math.log(1.0 - target_recall) / math.log(1.0 - p_match))
    return max(1, min(max_tables, tables)), bits_per_table


__all__ = ['LSHStats', 'HammingLSH', 'calculate_optimal_params']
