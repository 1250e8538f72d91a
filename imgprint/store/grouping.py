"""
Grouping of similar store entries.

Uses Union-Find over the store's entries, comparing either every pair
(small stores) or only LSH candidate pairs (large stores).
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Optional

from ..config import DEFAULT_THRESHOLD, LSH_AUTO_THRESHOLD
from ..lsh import HammingLSH, LSHStats, calculate_optimal_params
from .core import HashStore


class _UnionFind:
    def __init__(self, size: int):
        self.parent = list(range(size))
        self.rank = [0] * size

    def find(self, x: int) -> int:
        root = x
        while self.parent[root] != root:
            root = self.parent[root]
        # Path compression
        while self.parent[x] != root:
            self.parent[x], x = root, self.parent[x]
        return root

    def union(self, x: int, y: int) -> bool:
        px, py = self.find(x), self.find(y)
        if px == py:
            return False
        if self.rank[px] < self.rank[py]:
            px, py = py, px
        self.parent[py] = px
        if self.rank[px] == self.rank[py]:
            self.rank[px] += 1
        return True


def find_similar_groups(
    store: HashStore,
    threshold: int = DEFAULT_THRESHOLD,
    use_lsh: Optional[bool] = None,
    logger: Optional[logging.Logger] = None,
) -> list[list[str]]:
    """
    Group store paths whose fingerprints are within ``threshold`` bits.

    Entries sharing a path (e.g. one per rotation) always belong to the same
    group. Grouping is transitive.

    Args:
        store: Store to group
        threshold: Maximum Hamming distance for two entries to match (0-64)
        use_lsh: Force LSH on/off, or None to enable it for large stores
        logger: Optional logger for status messages

    Returns:
        Groups of two or more distinct paths, each in insertion order
    """
    entries = store.entries
    n = len(entries)
    if n < 2:
        return []

    uf = _UnionFind(n)
    first_by_path: dict[str, int] = {}
    for idx, entry in enumerate(entries):
        if entry.path in first_by_path:
            uf.union(first_by_path[entry.path], idx)
        else:
            first_by_path[entry.path] = idx

    if use_lsh is None:
        use_lsh = n >= LSH_AUTO_THRESHOLD
        if use_lsh and logger:
            logger.info(f"Using LSH optimization for {n:,} entries")

    stats = LSHStats(total_items=n)
    if use_lsh:
        num_tables, bits_per_table = calculate_optimal_params(n, threshold)
        lsh = HammingLSH(num_tables=num_tables, bits_per_table=bits_per_table)
        for idx, entry in enumerate(entries):
            lsh.add(idx, entry.fingerprint)
        pairs = lsh.iter_candidate_pairs()
    else:
        pairs = ((i, j) for i in range(n) for j in range(i + 1, n))

    for i, j in pairs:
        # Skip pairs already joined (LSH yields repeats across tables)
        if uf.find(i) == uf.find(j):
            continue
        stats.total_comparisons += 1
        if entries[i].fingerprint - entries[j].fingerprint <= threshold:
            uf.union(i, j)
            stats.matching_pairs += 1

    if logger:
        logger.info(
            f"Found {stats.matching_pairs:,} matching pairs "
            f"({stats.total_comparisons:,} comparisons, {stats.reduction_ratio:.1%} reduction)"
        )

    groups: dict[int, list[str]] = defaultdict(list)
    for idx, entry in enumerate(entries):
        members = groups[uf.find(idx)]
        if entry.path not in members:
            members.append(entry.path)

    return [paths for paths in groups.values() if len(paths) > 1]


__all__ = ['find_similar_groups']
