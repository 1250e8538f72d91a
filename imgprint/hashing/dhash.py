"""
Difference hash (dHash) fingerprints.

The image is reduced to single-channel luma, resized to a 9x8 grid and each
pixel is compared with its left neighbour. Every comparison contributes one
bit (1 when the pixel is strictly brighter than the one before it), giving
8 bits per row and 64 bits in total, packed most significant bit first in
row-major order.
"""

from __future__ import annotations

from pathlib import Path

import numpy as np

from ..config import DHASH_WIDTH, DHASH_HEIGHT
from ..models import Fingerprint
from .dependencies import Image, _logger

# "Triangle" filter: bilinear interpolation
DEFAULT_FILTER = Image.Resampling.BILINEAR

_ROTATIONS = (
    None,
    Image.Transpose.ROTATE_90,
    Image.Transpose.ROTATE_180,
    Image.Transpose.ROTATE_270,
)


def dhash_small_luma(small: Image.Image) -> Fingerprint:
    """
    Pack the left/right comparisons of an already-downsized luma image.

    Args:
        small: Grayscale ('L') image, normally 9x8

    Returns:
        Fingerprint with (width - 1) * height bits
    """
    pixels = np.asarray(small, dtype=np.uint8)
    diff = pixels[:, 1:] > pixels[:, :-1]

    value = 0
    for bit in diff.flatten():
        value = (value << 1) | int(bit)
    return Fingerprint(value)


def _shrink(gray: Image.Image, resample) -> Image.Image:
    return gray.resize((DHASH_WIDTH, DHASH_HEIGHT), resample)


def dhash_once(image: Image.Image, resample=DEFAULT_FILTER) -> Fingerprint:
    """
    Compute the dHash of an image with an explicit resampling filter.

    With ``Image.Resampling.LANCZOS`` the bits match ``imagehash.dhash``.
    """
    gray = image.convert('L')
    return dhash_small_luma(_shrink(gray, resample))


def dhash(image: Image.Image) -> Fingerprint:
    """Compute the dHash of an image using the bilinear filter."""
    return dhash_once(image, DEFAULT_FILTER)


def dhash_rotations(image: Image.Image, resample=DEFAULT_FILTER) -> list[Fingerprint]:
    """
    Compute the dHash of the image rotated by 0, 90, 180 and 270 degrees.

    Each orientation is rotated before it is resized, so a query image in any
    axis-aligned orientation matches one of the four fingerprints.

    Returns:
        Four fingerprints, in rotation order (values may repeat for
        symmetric images)
    """
    gray = image.convert('L')
    hashes = []
    for method in _ROTATIONS:
        rotated = gray if method is None else gray.transpose(method)
        hashes.append(dhash_small_luma(_shrink(rotated, resample)))
    return hashes


def dhash_file(
    filepath: str | Path,
    rotations: bool = False,
    resample=DEFAULT_FILTER,
) -> list[Fingerprint]:
    """
    Open an image file and fingerprint it.

    Args:
        filepath: Path to the image
        rotations: Also hash the 90/180/270 degree rotations
        resample: Pillow resampling filter

    Returns:
        One fingerprint, or four when rotations is True

    Raises:
        OSError: If the file cannot be opened or decoded
            (``PIL.UnidentifiedImageError`` is a subclass)
    """
    with Image.open(filepath) as img:
        # Force load to detect truncated/corrupt images early
        img.load()
        if rotations:
            hashes = dhash_rotations(img, resample)
        else:
            hashes = [dhash_once(img, resample)]
    _logger.debug(f"Hashed {filepath}: {', '.join(str(h) for h in hashes)}")
    return hashes


__all__ = [
    'DEFAULT_FILTER',
    'dhash_small_luma',
    'dhash_once',
    'dhash',
    'dhash_rotations',
    'dhash_file',
]
