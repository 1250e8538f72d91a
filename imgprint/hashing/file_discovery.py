"""
Locating image files for directory hashing.

``iter_image_files`` walks lazily so callers can start hashing (or report a
running count) before the walk finishes. ``find_image_files`` is the sorted,
materialised form used by ``hash-dir``.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Iterator, Optional

from ..config import IMAGE_EXTENSIONS
from .dependencies import HAS_HEIF_SUPPORT, _logger

HEIF_EXTENSIONS = frozenset({'.heic', '.heif'})


def supported_extensions(extensions: Optional[Iterable[str]] = None) -> frozenset[str]:
    """
    Lower-cased extensions Pillow can open in this environment.

    HEIC/HEIF are dropped unless pillow-heif registered its opener.
    """
    wanted = frozenset(ext.lower() for ext in (extensions or IMAGE_EXTENSIONS))
    if not HAS_HEIF_SUPPORT:
        wanted -= HEIF_EXTENSIONS
    return wanted


def iter_image_files(
    root_path: str | Path,
    recursive: bool = True,
    extensions: Optional[Iterable[str]] = None,
) -> Iterator[Path]:
    """
    Yield resolved paths of image files under ``root_path``.

    Directories are visited in name order. A file reached through more than
    one symlink is yielded once.
    """
    wanted = supported_extensions(extensions)
    seen: set[Path] = set()

    for dirpath, dirnames, filenames in os.walk(root_path):
        dirnames.sort()
        if not recursive:
            dirnames.clear()
        for name in sorted(filenames):
            if os.path.splitext(name)[1].lower() not in wanted:
                continue
            path = Path(dirpath, name).resolve()
            if path in seen or not path.is_file():
                continue
            seen.add(path)
            yield path


def find_image_files(
    root_path: str | Path,
    recursive: bool = True,
    extensions: Optional[Iterable[str]] = None,
) -> list[Path]:
    """
    Sorted list of every image file ``iter_image_files`` finds.

    Args:
        root_path: Directory to scan
        recursive: Descend into subdirectories
        extensions: Extensions to accept (default: ``IMAGE_EXTENSIONS``)
    """
    files = sorted(iter_image_files(root_path, recursive, extensions))
    _logger.debug(f"Discovered {len(files):,} image files under {root_path}")
    return files


__all__ = ['HEIF_EXTENSIONS', 'supported_extensions', 'iter_image_files', 'find_image_files']
