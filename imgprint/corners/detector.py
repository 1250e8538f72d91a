"""
Corner detection on top of the gradient field.

Two response functions are available:
- Harris: det(M) - k * trace(M)^2
- Shi-Tomasi style: the larger eigenvalue of M

M is the window-averaged second-moment tensor. Both share the same
non-maximum suppression and ranked selection.
"""

from __future__ import annotations

import heapq
import logging

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from ..config import (
    DEFAULT_BLUR_SIGMA,
    DEFAULT_CORNER_THRESHOLD,
    DEFAULT_MAX_CORNERS,
    DEFAULT_WINDOW_SIZE,
    HARRIS_K,
)
from ..errors import DegenerateError
from ..hashing.dependencies import Image, ImageDraw
from ..linalg import eigenvalues2x2, harris_corner_score
from ..models import Corner
from .gradients import (
    GradientField,
    ImageLike,
    check_window,
    place_at_centers,
    to_pixel_grid,
    window_sums,
)

logger = logging.getLogger(__name__)

HARRIS = 'harris'
SHI_TOMASI = 'shi-tomasi'
METHODS = (HARRIS, SHI_TOMASI)


def _window_means(field: GradientField, window_size: int):
    area = float(window_size * window_size)
    return (
        (window_sums(field.xx, window_size) / area).astype(np.float32),
        (window_sums(field.xy, window_size) / area).astype(np.float32),
        (window_sums(field.yy, window_size) / area).astype(np.float32),
    )


def harris_response(field: GradientField, window_size: int, k: float = HARRIS_K) -> np.ndarray:
    """
    Harris response for every window center.

    Returns:
        float32 array shaped like the image, zero outside valid centers
    """
    check_window(window_size, field.height, field.width)
    xx, xy, yy = _window_means(field, window_size)
    response = harris_corner_score(xx, xy, yy, k).astype(np.float32)
    return place_at_centers(response, (field.height, field.width), window_size)


def shi_tomasi_response(field: GradientField, window_size: int) -> np.ndarray:
    """
    Larger eigenvalue of the averaged tensor for every window center.

    Windows whose eigenvalues come out complex (rounding on near-degenerate
    tensors) score 0.
    """
    check_window(window_size, field.height, field.width)
    xx, xy, yy = _window_means(field, window_size)

    response = np.zeros(xx.shape, dtype=np.float32)
    degenerate = 0
    for (row, col), a in np.ndenumerate(xx):
        b = float(xy[row, col])
        d = float(yy[row, col])
        try:
            response[row, col] = max(eigenvalues2x2(float(a), b, b, d))
        except DegenerateError:
            degenerate += 1

    if degenerate:
        logger.debug(f"{degenerate} degenerate windows scored as 0")
    return place_at_centers(response, (field.height, field.width), window_size)


def local_maxima(scores: np.ndarray, window_size: int) -> list[Corner]:
    """
    Non-maximum suppression.

    A window center survives when no other sample inside its window has a
    strictly greater score. NaN neighbours never suppress a center and a NaN
    center is never suppressed.

    Returns:
        Surviving corners in row-major order
    """
    height, width = scores.shape
    check_window(window_size, height, width)

    filled = np.where(np.isnan(scores), -np.inf, scores)
    window_max = sliding_window_view(filled, (window_size, window_size)).max(axis=(2, 3))

    r = window_size // 2
    centers = scores[r:r + window_max.shape[0], r:r + window_max.shape[1]]
    keep = ~(window_max > centers)

    corners = []
    for row, col in zip(*np.nonzero(keep)):
        index = int((row + r) * width + (col + r))
        corners.append(Corner(index=index, score=float(centers[row, col])))
    return corners


def select_corners(
    scores: np.ndarray,
    window_size: int,
    max_corners: int,
    threshold: float,
) -> list[Corner]:
    """
    Suppress non-maxima, keep the ``max_corners`` strongest, then drop those
    at or below ``threshold``.

    Truncation happens before threshold filtering.

    Returns:
        Corners in descending score order
    """
    if max_corners < 0:
        raise ValueError(f"max_corners must be >= 0, got {max_corners}")

    candidates = local_maxima(scores, window_size)
    strongest = heapq.nlargest(max_corners, candidates, key=lambda c: c.sort_key)
    return [corner for corner in strongest if corner.score > threshold]


def detect_corners(
    image: ImageLike,
    blur_sigma: float = DEFAULT_BLUR_SIGMA,
    window_size: int = DEFAULT_WINDOW_SIZE,
    max_corners: int = DEFAULT_MAX_CORNERS,
    threshold: float = DEFAULT_CORNER_THRESHOLD,
    method: str = HARRIS,
) -> list[Corner]:
    """
    Detect corners in an image.

    Args:
        image: Decoded image (PIL image or uint8 array)
        blur_sigma: Gaussian blur applied after grayscale conversion
        window_size: Odd summation / suppression window
        max_corners: Maximum number of corners considered
        threshold: Minimum response (exclusive)
        method: 'harris' or 'shi-tomasi'

    Returns:
        Corners in descending response order

    Raises:
        ValueError: On an even window, an image smaller than the window,
            negative max_corners or an unknown method
    """
    if method not in METHODS:
        raise ValueError(f"Unknown corner method: {method}. Use one of {METHODS}")

    grid = to_pixel_grid(image, blur_sigma)
    check_window(window_size, *grid.shape)

    field = GradientField.compute(grid)
    if method == HARRIS:
        scores = harris_response(field, window_size)
    else:
        scores = shi_tomasi_response(field, window_size)

    corners = select_corners(scores, window_size, max_corners, threshold)
    logger.debug(
        f"{method}: {len(corners)} corners (window={window_size}, max={max_corners}, "
        f"threshold={threshold})"
    )
    return corners


def detect_corners_shi_tomasi(
    image: ImageLike,
    blur_sigma: float = DEFAULT_BLUR_SIGMA,
    window_size: int = DEFAULT_WINDOW_SIZE,
    max_corners: int = DEFAULT_MAX_CORNERS,
    threshold: float = DEFAULT_CORNER_THRESHOLD,
) -> list[Corner]:
    """Corner detection ranked by the larger tensor eigenvalue."""
    return detect_corners(image, blur_sigma, window_size, max_corners, threshold, method=SHI_TOMASI)


def mark_corners(
    image: Image.Image,
    corners: list[Corner],
    color: tuple[int, int, int] = (255, 0, 0),
    radius: int = 1,
) -> Image.Image:
    """
    Return an RGB copy of ``image`` with each corner drawn as a small square.
    """
    marked = image.convert('RGB')
    draw = ImageDraw.Draw(marked)
    for corner in corners:
        x, y = corner.position(marked.width)
        draw.rectangle([x - radius, y - radius, x + radius, y + radius], fill=color)
    return marked


__all__ = [
    'HARRIS',
    'SHI_TOMASI',
    'METHODS',
    'harris_response',
    'shi_tomasi_response',
    'local_maxima',
    'select_corners',
    'detect_corners',
    'detect_corners_shi_tomasi',
    'mark_corners',
]
