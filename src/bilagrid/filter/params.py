"""
Filter parameters and their estimation from an image.

The estimator scans the range values of every pixel once, collapses
grayscale images to a single range axis, derives sigma_range in auto mode
and sizes every grid axis.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np

from bilagrid.constants import GRAY_CHANNELS, RGB_CHANNELS, SPATIAL_DIMS
from bilagrid.filter.config import BilateralConfig
from bilagrid.filter.grid import range_strides

logger = logging.getLogger(__name__)


def axis_size(extent: float, bandwidth: float, padding: int) -> int:
    """
    Number of cells needed to cover an axis.

    size = floor(extent / bandwidth) + 1 + 2 * padding. An axis with zero
    extent (or zero bandwidth) collapses to 1 + 2 * padding.

    Args:
        extent: Distance between the first and last sample on the axis
        bandwidth: Distance covered by one cell
        padding: Border cells on each side

    Returns:
        Axis size in cells
    """
    if extent <= 0.0 or bandwidth <= 0.0:
        return 1 + 2 * padding
    return int(extent / bandwidth) + 1 + 2 * padding


@dataclass
class FilterParameters:
    """
    Grid parameters of one filter execution.

    Attributes:
        width: Image width in pixels
        height: Image height in pixels
        sigma_space: Pixels per spatial cell
        sigma_range: Normalized intensity per range cell
        mins: Minimum of each range channel [C]
        maxs: Maximum of each range channel [C]
        padding_space: Spatial border cells
        padding_range: Range border cells
        sizes: Cells per axis (x, y, range...) (computed)
        strides: Linear strides of the range axes (computed)
    """

    width: int
    height: int
    sigma_space: float
    sigma_range: float
    mins: np.ndarray
    maxs: np.ndarray
    padding_space: int
    padding_range: int
    sizes: tuple[int, ...] = field(init=False)
    strides: np.ndarray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Calculate grid sizes from extents and bandwidths."""
        self.mins = np.asarray(self.mins, dtype=np.float64)
        self.maxs = np.asarray(self.maxs, dtype=np.float64)
        if self.mins.shape != self.maxs.shape or self.mins.ndim != 1:
            raise ValueError(f"mins and maxs must be [C], got {self.mins.shape} and {self.maxs.shape}")

        spatial = (
            axis_size(self.width - 1, self.sigma_space, self.padding_space),
            axis_size(self.height - 1, self.sigma_space, self.padding_space),
        )
        ranges = tuple(
            axis_size(float(extent), self.sigma_range, self.padding_range)
            for extent in self.extents
        )
        self.sizes = spatial + ranges
        self.strides = range_strides(ranges)

    @property
    def channels(self) -> int:
        """Number of range channels (C)."""
        return len(self.mins)

    @property
    def dimension(self) -> int:
        """Number of grid axes (D = C + 2)."""
        return self.channels + SPATIAL_DIMS

    @property
    def extents(self) -> np.ndarray:
        return self.maxs - self.mins

    @property
    def range_active(self) -> np.ndarray:
        """False for range axes that collapse to a single valid index."""
        return (self.extents > 0.0) & (self.sigma_range > 0.0)

    @property
    def n_range_cells(self) -> int:
        return int(np.prod(self.sizes[SPATIAL_DIMS:]))

    def grid_coordinates(self, xs: np.ndarray, ys: np.ndarray, values: np.ndarray) -> np.ndarray:
        """
        Continuous grid coordinates of pixels.

        Args:
            xs: Pixel columns [N]
            ys: Pixel rows [N]
            values: Range values of those pixels [N, C]

        Returns:
            float64 coordinates [N, D]
        """
        n = len(xs)
        coords = np.empty((n, self.dimension), dtype=np.float64)
        coords[:, 0] = np.asarray(xs, dtype=np.float64) / self.sigma_space + self.padding_space
        coords[:, 1] = np.asarray(ys, dtype=np.float64) / self.sigma_space + self.padding_space

        active = self.range_active
        for k in range(self.channels):
            if active[k]:
                coords[:, SPATIAL_DIMS + k] = (
                    (values[:, k] - self.mins[k]) / self.sigma_range + self.padding_range
                )
            else:
                coords[:, SPATIAL_DIMS + k] = self.padding_range
        return coords


def is_gray(rgb: np.ndarray) -> bool:
    """Check whether every pixel has equal R, G and B values."""
    return bool(np.all(rgb[..., 0] == rgb[..., 1]) and np.all(rgb[..., 1] == rgb[..., 2]))


def estimate_parameters(
    values: np.ndarray,
    sigma_space: float,
    sigma_range: float,
    auto: bool = False,
    config: BilateralConfig | None = None,
) -> FilterParameters:
    """
    Estimate grid parameters from the range values of an image.

    Args:
        values: Range values [H, W, C] in [0, 1]; C == 3 (RGB) may collapse
            to 1 when every pixel is gray
        sigma_space: Pixels per spatial cell
        sigma_range: Intensity per range cell (ignored when auto is True)
        auto: Derive sigma_range from the global intensity range
        config: Grid layout configuration (defaults to BilateralConfig())

    Returns:
        FilterParameters sized for the image

    Raises:
        ValueError: If the image is empty or the bandwidths are not positive

    Example:
        >>> rgb = np.random.rand(64, 48, 3)
        >>> params = estimate_parameters(rgb, 16.0, 0.1)
        >>> params.sizes[:2]
        (7, 8)
    """
    config = config or BilateralConfig()
    values = np.asarray(values, dtype=np.float64)
    if values.ndim != 3:
        raise ValueError(f"values must be [H, W, C], got shape {values.shape}")

    height, width, channels = values.shape
    if width == 0 or height == 0:
        raise ValueError(f"Cannot filter an empty image ({width}x{height})")

    if sigma_space <= 0:
        raise ValueError(f"sigma_space={sigma_space} must be positive (> 0)")
    if not auto and sigma_range <= 0:
        raise ValueError(f"sigma_range={sigma_range} must be positive (> 0)")

    if channels == RGB_CHANNELS and config.collapse_gray and is_gray(values):
        # Gray image: one range axis carries the same information as three
        values = values[..., :GRAY_CHANNELS]
        logger.debug("[ParameterEstimator] Gray image, collapsing to %d range axis", GRAY_CHANNELS)

    mins = values.min(axis=(0, 1))
    maxs = values.max(axis=(0, 1))

    if auto:
        # Global extent across all range channels, not per channel
        sigma_range = float(maxs.max() - mins.min()) * config.auto_factor

    params = FilterParameters(
        width=width,
        height=height,
        sigma_space=float(sigma_space),
        sigma_range=float(sigma_range),
        mins=mins,
        maxs=maxs,
        padding_space=config.padding_space,
        padding_range=config.padding_range,
    )

    logger.info(
        "[ParameterEstimator] sigma_space=%.3f, sigma_range=%.5f, sizes=%s (%d cells)",
        params.sigma_space,
        params.sigma_range,
        params.sizes,
        int(np.prod(params.sizes)),
    )
    return params
