"""
Windowed gradient convolution.

Produces the second-moment tensor components (Ix^2, IxIy, Iy^2) for every
pixel that is the center of a window lying fully inside the image. Pixels
closer to the border than half a window stay at zero; that is the border
policy, not an error.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from ..config import SOBEL_KERNEL_X, SOBEL_KERNEL_Y
from ..hashing.dependencies import Image, ImageFilter

ImageLike = Union[Image.Image, np.ndarray]


def to_pixel_grid(image: ImageLike, blur_sigma: float = 0.0) -> np.ndarray:
    """
    Convert a decoded image to a blurred grayscale byte grid.

    Args:
        image: PIL image, or a uint8 array (H x W luma or H x W x C)
        blur_sigma: Gaussian blur radius; 0 disables blurring

    Returns:
        uint8 array of shape (height, width)
    """
    if isinstance(image, np.ndarray):
        if image.dtype != np.uint8:
            raise ValueError(f"Pixel arrays must be uint8, got {image.dtype}")
        image = Image.fromarray(image)

    gray = image.convert('L')
    if blur_sigma > 0:
        gray = gray.filter(ImageFilter.GaussianBlur(radius=blur_sigma))
    return np.asarray(gray, dtype=np.uint8)


def check_window(window_size: int, height: int, width: int):
    """
    Validate window geometry.

    Raises:
        ValueError: If window_size is not a positive odd integer or does not
            fit inside a height x width image
    """
    if window_size < 1 or window_size % 2 == 0:
        raise ValueError(f"window_size must be a positive odd integer, got {window_size}")
    if height < window_size or width < window_size:
        raise ValueError(
            f"Image of {width}x{height} is smaller than the {window_size}x{window_size} window"
        )


def window_sums(values: np.ndarray, window_size: int) -> np.ndarray:
    """Sum of every fully in-bounds window; shape (H - w + 1, W - w + 1)."""
    return sliding_window_view(values, (window_size, window_size)).sum(axis=(2, 3))


def place_at_centers(values: np.ndarray, shape: tuple[int, int], window_size: int) -> np.ndarray:
    """Embed per-window values at their window centers in a zero array of ``shape``."""
    out = np.zeros(shape, dtype=values.dtype)
    r = window_size // 2
    out[r:r + values.shape[0], r:r + values.shape[1]] = values
    return out


@dataclass
class GradientField:
    """
    Per-pixel second-moment tensor components.

    Attributes:
        xx: Ix^2 for each pixel (float32, height x width)
        xy: Ix*Iy for each pixel
        yy: Iy^2 for each pixel
        window_size: Convolution window used to build the field
    """
    xx: np.ndarray
    xy: np.ndarray
    yy: np.ndarray
    window_size: int = 3

    @property
    def height(self) -> int:
        return self.xx.shape[0]

    @property
    def width(self) -> int:
        return self.xx.shape[1]

    def triples(self) -> np.ndarray:
        """Flat (height * width, 3) array of (Ix^2, IxIy, Iy^2)."""
        return np.stack([self.xx, self.xy, self.yy], axis=-1).reshape(-1, 3)

    def at(self, index: int) -> tuple[float, float, float]:
        """Tensor components at a flattened pixel offset."""
        row, col = divmod(index, self.width)
        return float(self.xx[row, col]), float(self.xy[row, col]), float(self.yy[row, col])

    @classmethod
    def compute(
        cls,
        grid: np.ndarray,
        kernel_x=SOBEL_KERNEL_X,
        kernel_y=SOBEL_KERNEL_Y,
        window_size: int = 3,
    ) -> 'GradientField':
        """
        Convolve a grayscale grid with a kernel pair.

        Args:
            grid: 2-D grayscale pixel array
            kernel_x: window_size x window_size horizontal kernel
            kernel_y: window_size x window_size vertical kernel
            window_size: Odd window dimension

        Raises:
            ValueError: On an even window, mismatched kernels, or an image
                smaller than the window
        """
        grid = np.asarray(grid)
        if grid.ndim != 2:
            raise ValueError(f"Expected a 2-D grayscale grid, got shape {grid.shape}")

        height, width = grid.shape
        check_window(window_size, height, width)

        kx = np.asarray(kernel_x, dtype=np.float32)
        ky = np.asarray(kernel_y, dtype=np.float32)
        for kernel in (kx, ky):
            if kernel.shape != (window_size, window_size):
                raise ValueError(
                    f"Kernel shape {kernel.shape} does not match window {window_size}x{window_size}"
                )

        windows = sliding_window_view(grid.astype(np.float32), (window_size, window_size))
        sum_x = np.einsum('ijkl,kl->ij', windows, kx)
        sum_y = np.einsum('ijkl,kl->ij', windows, ky)

        shape = (height, width)
        return cls(
            xx=place_at_centers((sum_x * sum_x).astype(np.float32), shape, window_size),
            xy=place_at_centers((sum_x * sum_y).astype(np.float32), shape, window_size),
            yy=place_at_centers((sum_y * sum_y).astype(np.float32), shape, window_size),
            window_size=window_size,
        )


def gradient_field(image: ImageLike, blur_sigma: float = 0.0) -> GradientField:
    """Grayscale, blur and build the Sobel gradient field of an image."""
    return GradientField.compute(to_pixel_grid(image, blur_sigma))


__all__ = [
    'ImageLike',
    'to_pixel_grid',
    'check_window',
    'window_sums',
    'place_at_centers',
    'GradientField',
    'gradient_field',
]
