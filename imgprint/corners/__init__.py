"""
Corner detection package.

Public API:
- to_pixel_grid: Grayscale + blur a decoded image into a byte grid
- GradientField / gradient_field: Windowed second-moment tensor components
- detect_corners: Harris (or Shi-Tomasi) corners with NMS and top-k selection
- detect_corners_shi_tomasi: Eigenvalue-ranked corners
- mark_corners: Draw detected corners onto a copy of an image
"""

from __future__ import annotations

from .gradients import GradientField, gradient_field, to_pixel_grid
from .detector import (
    HARRIS,
    SHI_TOMASI,
    METHODS,
    harris_response,
    shi_tomasi_response,
    local_maxima,
    select_corners,
    detect_corners,
    detect_corners_shi_tomasi,
    mark_corners,
)

__all__ = [
    'GradientField',
    'gradient_field',
    'to_pixel_grid',
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
