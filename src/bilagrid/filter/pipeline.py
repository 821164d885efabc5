"""
FastBilateral: edge-preserving smoothing on a bilateral grid.

A bilateral filter replaces every pixel with a weighted average of nearby
pixels of similar intensity. The grid approximation scatters the image into
a coarse (x, y, range...) volume, blurs that volume with a cheap separable
tent filter and reads the result back with multilinear interpolation.

Two variants share the same engine:
- FastBilateral filters R, G and B directly (5-axis grid, or 3 axes when
  the image is gray)
- LuminanceBilateral filters CIE Y only (3-axis grid) and shifts X and Z by
  the same luminance delta

Example:
    >>> from bilagrid import ArrayImage, FastBilateral
    >>> bilateral = FastBilateral.auto(ArrayImage(pixels))
    >>> filtered = bilateral.execute().result_image()
"""

from __future__ import annotations

import logging
import operator
import threading
import time
from enum import Enum
from typing import Self

import numpy as np

from bilagrid.color import luminance, shift_luminance
from bilagrid.constants import (
    COLOR_MODEL,
    DEFAULT_SIGMA_RANGE,
    DEFAULT_SIGMA_SPACE,
    RGB_CHANNELS,
)
from bilagrid.filter.api import convolve, downsample, normalize, reconstruct
from bilagrid.filter.config import BilateralConfig
from bilagrid.filter.grid import Grid
from bilagrid.filter.params import FilterParameters, estimate_parameters
from bilagrid.image import Bounds, RGBAImage, quantize, read_pixels
from bilagrid.protocols import PixelSource

logger = logging.getLogger(__name__)


class FilterState(Enum):
    """Lifecycle of a filter instance."""

    UNINITIALIZED = "uninitialized"
    PARAMETERS_ESTIMATED = "parameters_estimated"
    DOWNSAMPLED = "downsampled"
    CONVOLVED = "convolved"
    NORMALIZED = "normalized"  # Luminance mode only
    READY = "ready"


class FastBilateral:
    """
    Fast bilateral filter over R, G and B.

    The filter is lazy: nothing is computed until execute() is called.
    Parameter estimation runs once per instance; execute() can be called
    again and rebuilds the grid from the same parameters. Queries (at,
    filtered, result_image) are read-only once the filter is READY.

    Example:
        >>> bilateral = FastBilateral(ArrayImage(pixels), sigma_space=8.0, sigma_range=0.15)
        >>> bilateral.execute()
        >>> r, g, b, a = bilateral.at(10, 20)
    """

    __slots__ = (
        "image",
        "sigma_space",
        "sigma_range",
        "config",
        "_auto",
        "_lock",  # Serializes estimation and execution
        "_state",
        "_params",
        "_pixels",  # Normalized source RGBA [H, W, 4]
        "_values",  # Range values fed to the grid [H, W, C]
        "_grid",
    )

    def __init__(
        self,
        image: PixelSource,
        sigma_space: float = DEFAULT_SIGMA_SPACE,
        sigma_range: float = DEFAULT_SIGMA_RANGE,
        config: BilateralConfig | None = None,
    ):
        """
        Initialize the filter.

        Args:
            image: Source image
            sigma_space: Pixels per spatial grid cell
            sigma_range: Normalized intensity per range grid cell
            config: Grid layout configuration (defaults to BilateralConfig())

        Raises:
            TypeError: If image does not implement PixelSource
            ValueError: If a bandwidth is not positive
        """
        if not isinstance(image, PixelSource):
            raise TypeError(
                f"image must implement bounds() and at(x, y), got {type(image).__name__}"
            )
        if sigma_space <= 0:
            raise ValueError(f"sigma_space={sigma_space} must be positive (> 0)")
        if sigma_range <= 0:
            raise ValueError(f"sigma_range={sigma_range} must be positive (> 0)")

        self.image = image
        self.sigma_space = float(sigma_space)
        self.sigma_range = float(sigma_range)
        self.config = config or BilateralConfig()
        self._auto = False

        self._lock = threading.Lock()
        self._state = FilterState.UNINITIALIZED
        self._params: FilterParameters | None = None
        self._pixels: np.ndarray | None = None
        self._values: np.ndarray | None = None
        self._grid: Grid | None = None

        logger.debug(
            "[%s] Initialized: sigma_space=%s, sigma_range=%s",
            type(self).__name__,
            sigma_space,
            sigma_range,
        )

    @classmethod
    def auto(
        cls,
        image: PixelSource,
        config: BilateralConfig | None = None,
        sigma_space: float = DEFAULT_SIGMA_SPACE,
    ) -> Self:
        """
        Create a filter whose sigma_range is derived from the image.

        sigma_range becomes (max - min) * config.auto_factor over all range
        channels combined, computed during execute().

        Args:
            image: Source image
            config: Grid layout configuration
            sigma_space: Pixels per spatial grid cell

        Returns:
            Filter in auto mode
        """
        bilateral = cls(image, sigma_space, DEFAULT_SIGMA_RANGE, config=config)
        bilateral._auto = True
        return bilateral

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> FilterState:
        return self._state

    @property
    def is_auto(self) -> bool:
        return self._auto

    @property
    def parameters(self) -> FilterParameters | None:
        """Estimated grid parameters (None before the first execute())."""
        return self._params

    @property
    def grid(self) -> Grid | None:
        """Finalized grid (None before the first execute())."""
        return self._grid

    def _require_ready(self) -> None:
        if self._state is not FilterState.READY:
            raise RuntimeError(
                f"{type(self).__name__} is {self._state.value}; call execute() before querying pixels"
            )

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def _range_values(self, pixels: np.ndarray) -> np.ndarray:
        """Values the grid is built on, [H, W, C]."""
        return pixels[..., :RGB_CHANNELS]

    def _estimate(self) -> None:
        """Read the source and estimate parameters, at most once per instance."""
        if self._params is not None:
            return

        pixels = read_pixels(self.image, self.config.max_value)
        values = self._range_values(pixels)
        params = estimate_parameters(
            values,
            self.sigma_space,
            self.sigma_range,
            auto=self._auto,
            config=self.config,
        )

        self._pixels = pixels
        self._values = np.ascontiguousarray(values[..., : params.channels])
        self._params = params
        self.sigma_range = params.sigma_range
        self._state = FilterState.PARAMETERS_ESTIMATED

    def _enter(self, state: FilterState) -> None:
        # A READY filter keeps serving queries from its old grid while rebuilding
        if self._state is not FilterState.READY:
            self._state = state

    def _finalize(self, grid: Grid) -> Grid:
        """Hook run between convolution and READY."""
        return grid

    def execute(self) -> Self:
        """
        Run the filter: estimate, downsample, convolve (and normalize).

        The new grid is published only once it is complete, so queries on a
        READY filter stay valid while execute() runs again.

        Returns:
            Self for method chaining
        """
        with self._lock:
            start = time.perf_counter()
            self._estimate()

            grid = downsample(self._params, self._values)
            self._enter(FilterState.DOWNSAMPLED)

            grid = convolve(grid, self.config.passes)
            self._enter(FilterState.CONVOLVED)

            grid = self._finalize(grid)
            self._grid = grid
            self._state = FilterState.READY

            logger.info(
                "[%s] Executed in %.2f ms: %dx%d pixels, grid %s",
                type(self).__name__,
                (time.perf_counter() - start) * 1000,
                self._params.width,
                self._params.height,
                self._grid.sizes,
            )
        return self

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _filter_pixels(self, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        """
        Filtered linear RGB of the given pixels.

        Args:
            xs: Pixel columns [N]
            ys: Pixel rows [N]

        Returns:
            float64 RGB [N, 3], not clamped
        """
        params = self._params
        channels = params.channels
        cells = reconstruct(self._grid, params, xs, ys, self._values[ys, xs])

        colors = cells[:, :channels]
        weight = cells[:, channels]
        rgb = np.zeros_like(colors)
        # Empty neighborhoods keep zero
        nonzero = weight != 0.0
        rgb[nonzero] = colors[nonzero] / weight[nonzero, np.newaxis]

        if channels < RGB_CHANNELS:
            rgb = np.repeat(rgb[:, -1:], RGB_CHANNELS, axis=1)
        return rgb

    def color_model(self) -> str:
        """Output color model: 8-bit RGBA."""
        return COLOR_MODEL

    def bounds(self) -> Bounds:
        return self.image.bounds()

    def at(self, x: int, y: int) -> tuple[int, int, int, int]:
        """
        Filtered 8-bit (R, G, B, A) pixel at column x, row y.

        Alpha is copied from the source pixel.

        Raises:
            RuntimeError: If execute() has not completed
            TypeError: If x or y is not an integer
            ValueError: If (x, y) is outside the image bounds
        """
        self._require_ready()
        try:
            x, y = operator.index(x), operator.index(y)
        except TypeError:
            raise TypeError(f"Pixel coordinates must be integers, got ({x!r}, {y!r})") from None
        if not self.bounds().contains(x, y):
            raise ValueError(f"Pixel ({x}, {y}) is outside image bounds {self.bounds()}")

        rgb = self._filter_pixels(np.array([x]), np.array([y]))
        r, g, b = quantize(rgb[0])
        a = quantize(self._pixels[y, x, 3])
        return int(r), int(g), int(b), int(a)

    def filtered(self) -> np.ndarray:
        """
        Filtered linear RGB of the whole image before quantization.

        Returns:
            float64 array [H, W, 3]
        """
        self._require_ready()
        height, width = self._params.height, self._params.width
        ys, xs = np.indices((height, width)).reshape(2, -1)
        return self._filter_pixels(xs, ys).reshape(height, width, RGB_CHANNELS)

    def result_image(self) -> RGBAImage:
        """
        Materialize the filtered image.

        Returns:
            8-bit RGBA image with the bounds of the source
        """
        rgb = self.filtered()
        data = np.empty(rgb.shape[:2] + (4,), dtype=np.uint8)
        data[..., :RGB_CHANNELS] = quantize(rgb)
        data[..., 3] = quantize(self._pixels[..., 3])
        return RGBAImage(self.bounds(), data)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(sigma_space={self.sigma_space}, "
            f"sigma_range={self.sigma_range}, auto={self._auto}, state={self._state.value})"
        )


class LuminanceBilateral(FastBilateral):
    """
    Fast bilateral filter over CIE Y only.

    Filters brightness on a 3-axis grid and keeps chroma: the luminance
    delta is added to X and Z before projecting back to linear RGB. Cheaper
    than FastBilateral on color images at the cost of some fidelity.

    Example:
        >>> bilateral = LuminanceBilateral.auto(ArrayImage(pixels)).execute()
        >>> image = bilateral.result_image()
    """

    __slots__ = ()

    def _range_values(self, pixels: np.ndarray) -> np.ndarray:
        return luminance(pixels[..., :RGB_CHANNELS])[..., np.newaxis]

    def _finalize(self, grid: Grid) -> Grid:
        normalize(grid)
        self._enter(FilterState.NORMALIZED)
        return grid

    def _filter_pixels(self, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        params = self._params
        cells = reconstruct(self._grid, params, xs, ys, self._values[ys, xs])
        # Cells are already normalized, the interpolated value is the luminance
        return shift_luminance(self._pixels[ys, xs, :RGB_CHANNELS], cells[:, 0])
