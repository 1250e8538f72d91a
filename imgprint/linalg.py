"""
Small closed-form linear algebra helpers used by corner scoring.
"""

from __future__ import annotations

import math

from .config import HARRIS_K
from .errors import DegenerateError


def quadratic(a: float, b: float, c: float) -> tuple[float, float]:
    """
    Solve a*x^2 + b*x + c = 0 with the quadratic formula.

    Args:
        a, b, c: Polynomial coefficients

    Returns:
        Tuple of (root1, root2) where root1 uses +sqrt(discriminant)

    Raises:
        DegenerateError: If there are no real roots or a == 0

    Examples:
        >>> quadratic(1.0, -3.0, 2.0)
        (2.0, 1.0)
    """
    if a == 0:
        raise DegenerateError("Leading coefficient is zero")

    discriminant = b * b - 4.0 * a * c
    # NaN coefficients fail this check too
    if not discriminant >= 0:
        raise DegenerateError(f"Negative discriminant: {discriminant}")

    root = math.sqrt(discriminant)
    denom = 2.0 * a
    return (-b + root) / denom, (-b - root) / denom


def eigenvalues2x2(a: float, b: float, c: float, d: float) -> tuple[float, float]:
    """
    Eigenvalues of the 2x2 matrix [[a, b], [c, d]].

    Solves the characteristic polynomial x^2 - (a + d)x + (ad - bc).

    Raises:
        DegenerateError: If the eigenvalues are not real
    """
    return quadratic(1.0, -(a + d), a * d - b * c)


def harris_corner_score(xx: float, xy: float, yy: float, k: float = HARRIS_K) -> float:
    """Harris response det(M) - k * trace(M)^2 for M = [[xx, xy], [xy, yy]]."""
    det = xx * yy - xy * xy
    trace = xx + yy
    return det - k * trace * trace


__all__ = ['quadratic', 'eigenvalues2x2', 'harris_corner_score']
