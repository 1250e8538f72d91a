"""
Configuration constants for the image fingerprint tools.

This module contains all configurable settings including:
- Supported image extensions for directory hashing
- dHash grid geometry
- Corner detector defaults
- Search and grouping defaults
"""

import os

# Image extensions picked up when hashing a directory
IMAGE_EXTENSIONS = {
    # Common formats
    '.jpg', '.jpeg', '.png', '.gif', '.bmp', '.webp', '.tiff', '.tif',
    # Other formats Pillow can decode
    '.ico', '.psd', '.tga', '.pcx', '.sgi',
    '.pbm', '.pgm', '.ppm', '.pnm',
    '.jp2', '.j2k', '.jpf', '.jpx',
    '.heic', '.heif',
}

# dHash grid: 9 columns give 8 left/right comparisons per row, 8 rows
DHASH_WIDTH = 9
DHASH_HEIGHT = 8
HASH_BITS = 64
HASH_MASK = (1 << HASH_BITS) - 1

# Similarity offset used when ranking: similarity = SIMILARITY_BASE - distance
SIMILARITY_BASE = 100

# Number of results returned by a similarity search
DEFAULT_SEARCH_RESULTS = 5

# Default maximum Hamming distance for grouping similar fingerprints (0-64)
DEFAULT_THRESHOLD = 10

# Harris detector constant (k in det(M) - k * trace(M)^2)
HARRIS_K = 0.04

# Corner detector defaults
# A threshold of about 1,000,000 keeps only strong corners on 8-bit images
DEFAULT_BLUR_SIGMA = 0.1
DEFAULT_WINDOW_SIZE = 5
DEFAULT_MAX_CORNERS = 50
DEFAULT_CORNER_THRESHOLD = 1_000_000.0

# Sobel pair used for the gradient field (row-major 3x3)
SOBEL_KERNEL_X = (
    (1.0, 0.0, -1.0),
    (2.0, 0.0, -2.0),
    (1.0, 0.0, -1.0),
)
SOBEL_KERNEL_Y = (
    (1.0, 2.0, 1.0),
    (0.0, 0.0, 0.0),
    (-1.0, -2.0, -1.0),
)

# LSH (Locality-Sensitive Hashing) configuration for grouping
LSH_AUTO_THRESHOLD = 5000  # Auto-enable LSH when >= this many entries
LSH_DEFAULT_TABLES = 12
LSH_DEFAULT_BITS = 10

# Decompression bomb limit raised to 500 megapixels
MAX_IMAGE_PIXELS = 500_000_000

# Background hashing poll interval (seconds)
DEFAULT_POLL_INTERVAL = 0.05

# Default hash store location
STORE_FILE = os.path.join(os.path.expanduser('~'), '.imgprint_store.json')
