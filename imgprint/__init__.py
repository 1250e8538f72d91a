"""
imgprint
========
Find visually similar or duplicate images by fingerprint.

Features:
- 64-bit difference hash (dHash) fingerprints, with a rotation-invariant
  four-hash variant
- Hamming and mirror-invariant distances
- JSON hash store with exact lookup and top-k similarity search
- Harris and Shi-Tomasi corner detection
- Background directory hashing with progress and cancellation
"""

__version__ = "0.3.0"

from .errors import (
    ImgprintError,
    FingerprintParseError,
    HashStoreError,
    NoPathSetError,
    DegenerateError,
)
from .models import Fingerprint, Corner, HashStoreEntry, TaskStatus, ProgressKind, HashProgress
from .linalg import quadratic, eigenvalues2x2, harris_corner_score
from .hashing import (
    dhash,
    dhash_once,
    dhash_rotations,
    dhash_file,
    hamming_distance,
    mirror_distance,
    find_image_files,
    HashDirectoryTask,
    hash_files,
)
from .corners import GradientField, detect_corners, detect_corners_shi_tomasi, mark_corners
from .store import HashStore, find_similar_groups
from .lsh import HammingLSH, calculate_optimal_params

__all__ = [
    "ImgprintError",
    "FingerprintParseError",
    "HashStoreError",
    "NoPathSetError",
    "DegenerateError",
    "Fingerprint",
    "Corner",
    "HashStoreEntry",
    "TaskStatus",
    "ProgressKind",
    "HashProgress",
    "quadratic",
    "eigenvalues2x2",
    "harris_corner_score",
    "dhash",
    "dhash_once",
    "dhash_rotations",
    "dhash_file",
    "hamming_distance",
    "mirror_distance",
    "find_image_files",
    "HashDirectoryTask",
    "hash_files",
    "GradientField",
    "detect_corners",
    "detect_corners_shi_tomasi",
    "mark_corners",
    "HashStore",
    "find_similar_groups",
    "HammingLSH",
    "calculate_optimal_params",
]
