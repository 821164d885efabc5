"""
Bilateral grid filtering module.

Provides edge-preserving smoothing of images on a downsampled
(x, y, range...) grid.

Features:
- Parameter estimation with automatic range bandwidth
- Transparent grayscale collapse (5-axis grid -> 3-axis grid)
- Numba kernels for splatting, separable tent blur and multilinear slicing
- Per-channel RGB filtering or luminance-only filtering with chroma kept
- Stage functions for custom pipelines

Example:
    >>> from bilagrid.filter import FastBilateral, bilateral_filter
    >>>
    >>> # Functional interface with arrays
    >>> smooth = bilateral_filter(pixels, sigma_space=16.0, sigma_range=0.1)
    >>>
    >>> # Object interface with pixel sources
    >>> bilateral = FastBilateral.auto(ArrayImage(pixels)).execute()
    >>> image = bilateral.result_image()
"""

from bilagrid.filter.api import (
    allocate_grid,
    bilateral_filter,
    convolve,
    downsample,
    normalize,
    reconstruct,
)
from bilagrid.filter.config import BilateralConfig
from bilagrid.filter.grid import Cell, Grid
from bilagrid.filter.params import FilterParameters, estimate_parameters
from bilagrid.filter.pipeline import FastBilateral, FilterState, LuminanceBilateral

__all__ = [
    # Filters
    "FastBilateral",
    "LuminanceBilateral",
    "FilterState",
    # Configuration
    "BilateralConfig",
    "FilterParameters",
    "estimate_parameters",
    # Grid
    "Grid",
    "Cell",
    # Stages
    "allocate_grid",
    "downsample",
    "convolve",
    "normalize",
    "reconstruct",
    "bilateral_filter",
]
