"""
Input validation for caller-facing layers.

Corner detection treats bad geometry as a contract violation and raises
``ValueError``; these helpers let the CLI check user input first and report
a message instead.
"""

from __future__ import annotations

import os


def validate_window_size(window_size) -> tuple[bool, str]:
    """
    Validate a corner detection window size.

    Returns:
        Tuple of (is_valid, error_message)

    Examples:
        >>> validate_window_size(5)
        (True, '')
        >>> validate_window_size(4)
        (False, 'Window size must be odd')
    """
    try:
        window_size = int(window_size)
    except (ValueError, TypeError):
        return False, "Window size must be an integer"
    if window_size < 1:
        return False, "Window size must be positive"
    if window_size % 2 == 0:
        return False, "Window size must be odd"
    return True, ""


def validate_threshold(threshold) -> tuple[bool, str]:
    """
    Validate a Hamming distance threshold (0-64).

    Examples:
        >>> validate_threshold(10)
        (True, '')
        >>> validate_threshold(100)
        (False, 'Threshold must be between 0 and 64')
    """
    try:
        threshold = int(threshold)
    except (ValueError, TypeError):
        return False, "Threshold must be an integer"
    if not 0 <= threshold <= 64:
        return False, "Threshold must be between 0 and 64"
    return True, ""


def validate_result_count(count) -> tuple[bool, str]:
    """Validate the number of search results requested."""
    try:
        count = int(count)
    except (ValueError, TypeError):
        return False, "Result count must be an integer"
    if count < 1:
        return False, "Result count must be at least 1"
    return True, ""


def validate_image_file(filepath: str) -> tuple[bool, str]:
    """
    Validate that an image file exists and is readable.

    Examples:
        >>> validate_image_file('/nonexistent/file.jpg')
        (False, 'File not found: /nonexistent/file.jpg')
    """
    if not os.path.exists(filepath):
        return False, f"File not found: {filepath}"
    if not os.path.isfile(filepath):
        return False, f"Path is not a file: {filepath}"
    if not os.access(filepath, os.R_OK):
        return False, f"File is not readable (permission denied): {filepath}"
    return True, ""


def validate_directory(directory: str) -> tuple[bool, str]:
    """
    Validate that a directory exists and is accessible.

    Examples:
        >>> validate_directory('/nonexistent/directory')
        (False, 'Directory not found: /nonexistent/directory')
    """
    if not directory:
        return False, "Directory path is required"
    if not os.path.exists(directory):
        return False, f"Directory not found: {directory}"
    if not os.path.isdir(directory):
        return False, f"Path is not a directory: {directory}"
    if not os.access(directory, os.R_OK):
        return False, f"Cannot read directory (permission denied): {directory}"
    return True, ""


__all__ = [
    'validate_window_size',
    'validate_threshold',
    'validate_result_count',
    'validate_image_file',
    'validate_directory',
]
