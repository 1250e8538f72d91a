"""
Third-party imports shared by the hashing and corner packages.

Pillow, imagehash and numpy are required. pillow-heif (HEIC/HEIF decoding)
and tqdm (progress bars) are picked up when installed.
"""

from __future__ import annotations

import logging
import warnings
from typing import Any, Optional

from ..config import MAX_IMAGE_PIXELS

_logger = logging.getLogger(__name__)

try:
    import numpy as np
    import imagehash
    from PIL import Image, ImageDraw, ImageFilter
except ImportError as e:
    raise ImportError(
        f"Required package missing ({e.name}).\n"
        "Install with: pip install Pillow imagehash numpy"
    ) from e

# HEIC files can only be opened after the opener is registered
HAS_HEIF_SUPPORT = False
try:
    from pillow_heif import register_heif_opener
except ImportError:
    _logger.warning(
        "pillow-heif not installed - .heic/.heif files will be skipped. "
        "Install with: pip install pillow-heif"
    )
else:
    register_heif_opener()
    HAS_HEIF_SUPPORT = True
    _logger.debug("Registered pillow-heif opener")

# Scans and stitched panoramas exceed Pillow's ~89MP default
Image.MAX_IMAGE_PIXELS = MAX_IMAGE_PIXELS
warnings.filterwarnings("ignore", category=Image.DecompressionBombWarning)

HAS_TQDM = False
_tqdm_class: Optional[Any] = None
try:
    from tqdm import tqdm as _tqdm_class
    HAS_TQDM = True
except ImportError:
    pass


def progress_bar(total: int, desc: str, unit: str = '%', disable: bool = False) -> Optional[Any]:
    """
    Create a tqdm bar, or return None when tqdm is missing or disabled.
    """
    if disable or not HAS_TQDM:
        return None
    return _tqdm_class(total=total, desc=desc, unit=unit, ncols=80)


__all__ = [
    'np',
    'Image',
    'ImageDraw',
    'ImageFilter',
    'imagehash',
    'HAS_HEIF_SUPPORT',
    'HAS_TQDM',
    'progress_bar',
    '_logger',
]
