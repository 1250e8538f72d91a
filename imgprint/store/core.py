"""
HashStore: a persistent, ordered collection of (fingerprint, path) entries.

The store file is a JSON array of ``[fingerprint, path]`` pairs where the
fingerprint is written as its decimal string, e.g.::

    [["9", "a.png"], ["17361641481138401520", "photos/b.jpg"]]
"""

from __future__ import annotations

import heapq
import json
import logging
import os
import tempfile
from operator import itemgetter
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

from ..config import DEFAULT_SEARCH_RESULTS, SIMILARITY_BASE
from ..errors import FingerprintParseError, HashStoreError, NoPathSetError
from ..hashing.distance import hamming_distance, mirror_distance
from ..models import Fingerprint, HashStoreEntry

logger = logging.getLogger(__name__)

Queries = Union[Fingerprint, Iterable[Fingerprint]]


class HashStore:
    """
    Ordered (fingerprint, path) entries with exact and top-k lookup.

    Insertion order is preserved and no deduplication is done: the same path
    may be stored once per rotation.

    Usage:
        store = HashStore.from_file('store.json')
        store.add_hash(dhash(image), 'photos/cat.png')
        store.save()

        matches = store.find_many(dhash_rotations(query), 5)
    """

    def __init__(
        self,
        entries: Optional[Iterable[HashStoreEntry]] = None,
        path: Optional[str] = None,
    ):
        """
        Args:
            entries: Initial entries, in order
            path: File bound for ``save()``; None for a fresh store
        """
        self._entries: list[HashStoreEntry] = list(entries or [])
        self.path = path

    @classmethod
    def new(cls) -> 'HashStore':
        """Create an empty store with no bound path."""
        return cls()

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> 'HashStore':
        """
        Load a store from a JSON file and bind it to that file.

        Raises:
            HashStoreError: If the file cannot be read or does not hold a
                JSON array of [fingerprint, path] pairs
        """
        path = str(path)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except OSError as e:
            raise HashStoreError(f"Cannot read hash store {path}: {e}") from e
        except ValueError as e:
            raise HashStoreError(f"Hash store {path} is not valid JSON: {e}") from e

        if not isinstance(data, list):
            raise HashStoreError(f"Hash store {path} must contain a JSON array")

        try:
            entries = [HashStoreEntry.from_json(item) for item in data]
        except FingerprintParseError as e:
            raise HashStoreError(f"Malformed entry in hash store {path}: {e}") from e

        logger.debug(f"Loaded {len(entries):,} entries from {path}")
        return cls(entries, path=path)

    def to_file(self, path: Union[str, Path]) -> 'HashStore':
        """
        Write every entry to ``path`` as JSON. The bound path is unchanged.

        The JSON goes to a temporary file in the same directory which then
        replaces ``path``, so a failed write leaves the previous file intact.

        Raises:
            HashStoreError: If the file cannot be written
        """
        path = str(path)
        directory = os.path.dirname(os.path.abspath(path))
        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(
                dir=directory, prefix=f".{os.path.basename(path)}.", suffix='.tmp'
            )
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump([entry.to_json() for entry in self._entries], f)
            os.replace(tmp_path, path)
        except OSError as e:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise HashStoreError(f"Cannot write hash store {path}: {e}") from e

        logger.debug(f"Wrote {len(self._entries):,} entries to {path}")
        return self

    def save(self) -> 'HashStore':
        """
        Write the store to its bound path.

        Raises:
            NoPathSetError: If the store was never loaded from or bound to a file
            HashStoreError: If the file cannot be written
        """
        if self.path is None:
            raise NoPathSetError("No path set")
        return self.to_file(self.path)

    def save_as(self, path: Union[str, Path]) -> 'HashStore':
        """Write the store to ``path`` and bind it for later ``save()`` calls."""
        self.to_file(path)
        self.path = str(path)
        return self

    def add_hash(self, fingerprint: Fingerprint, path: Union[str, Path]) -> None:
        """Append an entry. Duplicates are kept."""
        self._entries.append(HashStoreEntry(fingerprint=fingerprint, path=str(path)))

    def extend(self, pairs: Iterable[tuple[Fingerprint, str]]) -> None:
        """Append several (fingerprint, path) pairs in order."""
        for fingerprint, path in pairs:
            self.add_hash(fingerprint, path)

    def find(self, fingerprint: Fingerprint) -> Optional[str]:
        """Path of the first entry with an identical fingerprint, or None."""
        for entry in self._entries:
            if hamming_distance(entry.fingerprint, fingerprint) == 0:
                return entry.path
        return None

    def find_many_scored(
        self,
        queries: Queries,
        size: int = DEFAULT_SEARCH_RESULTS,
        mirror: bool = False,
    ) -> list[tuple[int, str]]:
        """
        Rank entries by similarity to the closest of ``queries``.

        Similarity is ``100 - min(distance(entry, q) for q in queries)``.
        Entries with equal similarity keep insertion order.

        Args:
            queries: One fingerprint or several (e.g. one per rotation)
            size: Maximum number of results
            mirror: Use ``mirror_distance`` instead of ``hamming_distance``

        Returns:
            Up to ``size`` (similarity, path) pairs, most similar first
        """
        if isinstance(queries, Fingerprint):
            queries = [queries]
        else:
            queries = list(queries)
        if not queries:
            raise ValueError("At least one query fingerprint is required")
        if size < 0:
            raise ValueError(f"size must be >= 0, got {size}")

        metric = mirror_distance if mirror else hamming_distance
        scored = (
            (SIMILARITY_BASE - min(metric(entry.fingerprint, q) for q in queries), entry.path)
            for entry in self._entries
        )
        return heapq.nlargest(size, scored, key=itemgetter(0))

    def find_many(
        self,
        queries: Queries,
        size: int = DEFAULT_SEARCH_RESULTS,
        mirror: bool = False,
    ) -> list[str]:
        """Paths of the ``size`` most similar entries, most similar first."""
        return [path for _, path in self.find_many_scored(queries, size, mirror)]

    def find_heap(self, fingerprint: Fingerprint, size: int = DEFAULT_SEARCH_RESULTS) -> list[str]:
        """Single-fingerprint form of ``find_many``."""
        return self.find_many([fingerprint], size)

    def find_within(self, fingerprint: Fingerprint, max_distance: int) -> list[str]:
        """Paths within ``max_distance`` bits of ``fingerprint``, closest first."""
        matches = [
            (hamming_distance(entry.fingerprint, fingerprint), entry.path)
            for entry in self._entries
        ]
        matches = [m for m in matches if m[0] <= max_distance]
        matches.sort(key=itemgetter(0))
        return [path for _, path in matches]

    @property
    def entries(self) -> tuple[HashStoreEntry, ...]:
        return tuple(self._entries)

    def fingerprints(self) -> list[Fingerprint]:
        return [entry.fingerprint for entry in self._entries]

    def paths(self) -> list[str]:
        return [entry.path for entry in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HashStoreEntry]:
        return iter(self._entries)

    def __repr__(self) -> str:
        return f"HashStore(entries={len(self._entries)}, path={self.path!r})"


__all__ = ['HashStore']
