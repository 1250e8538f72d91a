"""
Utilities package for imgprint.

Provides:
- validators: Input validation for CLI parameters and paths
"""

from __future__ import annotations

from . import validators

from .validators import (
    validate_window_size,
    validate_threshold,
    validate_result_count,
    validate_image_file,
    validate_directory,
)

__all__ = [
    'validators',
    'validate_window_size',
    'validate_threshold',
    'validate_result_count',
    'validate_image_file',
    'validate_directory',
]
