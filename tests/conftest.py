"""
Pytest configuration and shared fixtures for test suite.
"""

import pytest
import tempfile
import shutil
from pathlib import Path

import numpy as np
from PIL import Image


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield Path(tmpdir)
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def gradient_image():
    """90x80 grayscale image getting brighter from left to right."""
    row = np.arange(90, dtype=np.uint8) * 2
    pixels = np.tile(row, (80, 1))
    return Image.fromarray(pixels)


@pytest.fixture
def square_image():
    """40x40 black image with a white square covering [10, 30) on both axes."""
    pixels = np.zeros((40, 40), dtype=np.uint8)
    pixels[10:30, 10:30] = 255
    return Image.fromarray(pixels)


@pytest.fixture
def textured_image():
    """Deterministic random RGB image with some structure."""
    rng = np.random.default_rng(1234)
    pixels = rng.integers(0, 256, size=(64, 96, 3), dtype=np.uint8)
    pixels[16:48, 24:72] //= 4
    return Image.fromarray(pixels)


@pytest.fixture
def sample_images(temp_dir, gradient_image, square_image, textured_image):
    """
    Write sample images to disk.

    Returns:
        dict with paths to:
        - gradient.png, square.png, textured.png (valid images)
        - corrupted.png (not an image)
    """
    images = {}

    path = temp_dir / "gradient.png"
    gradient_image.save(path, 'PNG')
    images['gradient'] = str(path)

    path = temp_dir / "square.png"
    square_image.save(path, 'PNG')
    images['square'] = str(path)

    path = temp_dir / "textured.png"
    textured_image.save(path, 'PNG')
    images['textured'] = str(path)

    path = temp_dir / "corrupted.png"
    path.write_text("not an image")
    images['corrupted'] = str(path)

    return images
