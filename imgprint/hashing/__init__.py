"""
Hashing package for the image fingerprint tools.

Public API:
- dhash / dhash_once / dhash_rotations / dhash_file: dHash fingerprints
- hamming_distance / mirror_distance: Fingerprint distances
- find_image_files / iter_image_files: Discover image files in directories
- HashDirectoryTask / hash_files: Background hashing with progress and cancel
- has_heif_support: Check if HEIC/HEIF support is available
"""

from __future__ import annotations

from .dhash import (
    DEFAULT_FILTER,
    dhash,
    dhash_once,
    dhash_small_luma,
    dhash_rotations,
    dhash_file,
)
from .distance import hamming_distance, mirror_distance
from .file_discovery import find_image_files, iter_image_files
from .tasks import HashDirectoryTask, hash_files

from .dependencies import HAS_HEIF_SUPPORT


def has_heif_support() -> bool:
    """Check if HEIC/HEIF support is available."""
    return HAS_HEIF_SUPPORT


__all__ = [
    # dHash
    'DEFAULT_FILTER',
    'dhash',
    'dhash_once',
    'dhash_small_luma',
    'dhash_rotations',
    'dhash_file',
    # Distances
    'hamming_distance',
    'mirror_distance',
    # File discovery
    'find_image_files',
    'iter_image_files',
    # Background hashing
    'HashDirectoryTask',
    'hash_files',
    # Feature detection
    'has_heif_support',
]
