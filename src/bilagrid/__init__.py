"""
bilagrid - Fast Bilateral Filtering

Edge-preserving image smoothing on a downsampled bilateral grid.

Features:
- Per-channel RGB filtering on a 5-axis (x, y, r, g, b) grid
- Automatic 3-axis grid for grayscale images
- Luminance-only filtering on a 3-axis (x, y, Y) grid that keeps chroma
- Automatic range bandwidth from the image intensity range
- Numba kernels for splatting, separable tent blur and multilinear slicing
- Pixel source/sink protocols with NumPy-backed images and Pillow I/O

Example - Arrays:
    >>> from bilagrid import bilateral_filter
    >>>
    >>> smooth = bilateral_filter(pixels, sigma_space=16.0, sigma_range=0.1)
    >>> smooth_lum = bilateral_filter(pixels, mode="luminance", auto=True)

Example - Images:
    >>> from bilagrid import FastBilateral, load_image, save_image
    >>>
    >>> bilateral = FastBilateral.auto(load_image("photo.png")).execute()
    >>> save_image(bilateral.result_image(), "photo-filtered.png")
"""

__version__ = "0.1.0"

# Colorspace projection
from bilagrid.color import linear_rgb_to_xyz, luminance, xyz_to_linear_rgb

# Filters
from bilagrid.filter import (
    BilateralConfig,
    FastBilateral,
    FilterParameters,
    FilterState,
    LuminanceBilateral,
    bilateral_filter,
    estimate_parameters,
)

# Pixel containers
from bilagrid.image import ArrayImage, Bounds, RGBAImage

# File I/O
from bilagrid.io import load_image, save_image

# Protocols
from bilagrid.protocols import PixelSink, PixelSource

__all__ = [
    # Version
    "__version__",
    # Filters
    "FastBilateral",
    "LuminanceBilateral",
    "FilterState",
    "bilateral_filter",
    # Configuration
    "BilateralConfig",
    "FilterParameters",
    "estimate_parameters",
    # Images
    "ArrayImage",
    "RGBAImage",
    "Bounds",
    "PixelSource",
    "PixelSink",
    "load_image",
    "save_image",
    # Color
    "linear_rgb_to_xyz",
    "xyz_to_linear_rgb",
    "luminance",
]
