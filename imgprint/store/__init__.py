"""
Persistent fingerprint storage.

Public API:
- HashStore: Ordered (fingerprint, path) entries with JSON load/save,
  exact lookup and top-k similarity search
- find_similar_groups: Group entries within a Hamming distance threshold
"""

from __future__ import annotations

from .core import HashStore
from .grouping import find_similar_groups

__all__ = [
    'HashStore',
    'find_similar_groups',
]
