"""
Bilateral grid stages and functional filtering API.

Each stage is a plain function over NumPy arrays backed by a Numba kernel:

    estimate_parameters -> allocate_grid -> downsample -> convolve
        -> [normalize] -> reconstruct

bilateral_filter() chains them for a whole image, following the same
function-with-kwargs pattern as the rest of the package.
"""

from __future__ import annotations

import logging

import numpy as np

from bilagrid.constants import (
    DEFAULT_PASSES,
    DEFAULT_SIGMA_RANGE,
    DEFAULT_SIGMA_SPACE,
    SPATIAL_DIMS,
    VALID_MODES,
)
from bilagrid.filter.config import BilateralConfig
from bilagrid.filter.grid import Grid
from bilagrid.filter.kernels import (
    blur_axis_numba,
    normalize_cells_numba,
    slice_numba,
    splat_numba,
)
from bilagrid.filter.params import FilterParameters
from bilagrid.validators import validate_choices, validate_positive

logger = logging.getLogger(__name__)


def allocate_grid(params: FilterParameters) -> Grid:
    """Allocate a zeroed grid sized by the parameters."""
    return Grid(params.sizes, params.channels)


def downsample(params: FilterParameters, values: np.ndarray, grid: Grid | None = None) -> Grid:
    """
    Scatter every pixel into its nearest grid cell.

    Each pixel adds its range vector to the cell colors and 1 to the cell
    weight.

    Args:
        params: Grid parameters
        values: Range values [H, W, C] in [0, 1]
        grid: Grid to accumulate into (a new one is allocated if None)

    Returns:
        The accumulated grid
    """
    values = np.ascontiguousarray(values, dtype=np.float64)
    expected = (params.height, params.width, params.channels)
    if values.shape != expected:
        raise ValueError(f"values must be {list(expected)}, got shape {values.shape}")

    if grid is None:
        grid = allocate_grid(params)

    splat_numba(
        values,
        params.sigma_space,
        params.padding_space,
        params.mins,
        params.sigma_range,
        params.range_active,
        params.padding_range,
        params.strides,
        grid.cells,
    )

    logger.debug(
        "[downsample] %d pixels -> %d non-empty cells",
        params.width * params.height,
        int(np.count_nonzero(grid.cells[..., -1])),
    )
    return grid


def _axis_offsets(grid: Grid, axis: int) -> tuple[int, int, int]:
    """Neighbor offsets (dx, dy, dr) of one grid axis."""
    if axis == 0:
        return 1, 0, 0
    if axis == 1:
        return 0, 1, 0
    return 0, 0, int(grid.strides[axis - SPATIAL_DIMS])


def convolve(grid: Grid, passes: int = DEFAULT_PASSES) -> Grid:
    """
    Blur the grid with the (1, 2, 1) / 4 tent stencil along every axis.

    Axes are processed in order (x, y, then each range axis), `passes`
    times each. Every pass swaps the roles of the grid and a scratch grid of
    identical shape, reading one and writing the interior of the other.

    Args:
        grid: Downsampled grid
        passes: Stencil applications per axis

    Returns:
        The grid holding the blurred cells (the input grid when the total
        number of passes is even); the other buffer is dropped
    """
    if passes < 1:
        raise ValueError(f"passes must be at least 1, got {passes}")

    current = grid
    scratch = grid.zeros_like()
    interior = grid.interior_mask()

    for axis in range(grid.dimension):
        dx, dy, dr = _axis_offsets(grid, axis)
        for _ in range(passes):
            current, scratch = scratch, current
            blur_axis_numba(scratch.cells, current.cells, interior, dx, dy, dr)

    logger.debug("[convolve] %d axes x %d passes over %d cells", grid.dimension, passes, grid.n_cells)
    return current


def normalize(grid: Grid) -> Grid:
    """
    Divide the color sums of every non-empty cell by its weight (in-place).

    Args:
        grid: Blurred grid

    Returns:
        The same grid
    """
    normalize_cells_numba(grid.cells)
    return grid


def reconstruct(
    grid: Grid,
    params: FilterParameters,
    xs: np.ndarray,
    ys: np.ndarray,
    values: np.ndarray,
) -> np.ndarray:
    """
    Interpolate the grid at the sample points of the given pixels.

    Args:
        grid: Finalized grid
        params: Grid parameters
        xs: Pixel columns [N]
        ys: Pixel rows [N]
        values: Range values of those pixels [N, C]

    Returns:
        Interpolated cells [N, C + 1] (colors then weight), not normalized
    """
    coords = params.grid_coordinates(xs, ys, values)
    sizes = np.asarray(grid.sizes, dtype=np.int64)
    out = np.empty((len(coords), grid.channels + 1), dtype=np.float64)
    slice_numba(coords, sizes, grid.strides, grid.cells, out)
    return out


@validate_positive("sigma_space", 1)
@validate_positive("sigma_range", 2)
@validate_choices(VALID_MODES, "mode", 3)
def bilateral_filter(
    image: np.ndarray,
    sigma_space: float = DEFAULT_SIGMA_SPACE,
    sigma_range: float = DEFAULT_SIGMA_RANGE,
    mode: str = "rgb",
    auto: bool = False,
    config: BilateralConfig | None = None,
) -> np.ndarray:
    """
    Apply the fast bilateral filter to an image array.

    Args:
        image: Image array [H, W], [H, W, 3] or [H, W, 4]; uint8, uint16 or
            float in [0, 1]
        sigma_space: Pixels per spatial grid cell
        sigma_range: Normalized intensity per range grid cell
        mode: "rgb" filters every channel, "luminance" filters CIE Y only
        auto: Derive sigma_range from the image intensity range
        config: Grid layout configuration

    Returns:
        Filtered uint8 RGBA array [H, W, 4]

    Example:
        >>> noisy = np.random.randint(0, 256, (64, 64, 3), dtype=np.uint8)
        >>> smooth = bilateral_filter(noisy, sigma_space=8.0, sigma_range=0.2)
        >>> smooth.shape
        (64, 64, 4)
    """
    from bilagrid.filter.pipeline import FastBilateral, LuminanceBilateral
    from bilagrid.image import ArrayImage

    source = ArrayImage(image)
    cls = LuminanceBilateral if mode == "luminance" else FastBilateral

    if auto:
        bilateral = cls.auto(source, config=config, sigma_space=sigma_space)
    else:
        bilateral = cls(source, sigma_space, sigma_range, config=config)

    return bilateral.execute().result_image().data
