"""
Numba-optimized kernels for bilateral grid filtering.

Provides JIT-compiled kernels for the grid stages: cell arithmetic,
splatting (downsampling), tent blur (convolution), per-cell normalization
and multilinear slicing (reconstruction).

Grid layout shared by every kernel:
    cells[x, y, r, k] with r the linear index of the range coordinates
    (r = sum(z_i * strides[i])) and k in [0, C] where k == C is the weight.
"""

import numpy as np
from numba import njit, prange

# ============================================================================
# Cell Operations
# ============================================================================


@njit(cache=True, nogil=True, inline="always")
def cell_add(out: np.ndarray, a: np.ndarray, b: np.ndarray) -> None:
    """
    out = a + b (colors and weight).

    Args:
        out: Destination cell [C + 1] (may alias a or b)
        a: First cell [C + 1]
        b: Second cell [C + 1]
    """
    for k in range(out.shape[0]):
        out[k] = a[k] + b[k]


@njit(cache=True, nogil=True, inline="always")
def cell_add_scaled(out: np.ndarray, a: np.ndarray, alpha: float, b: np.ndarray) -> None:
    """
    out = a + alpha * b (colors and weight).

    Args:
        out: Destination cell [C + 1] (may alias a or b)
        a: Base cell [C + 1]
        alpha: Scale applied to b
        b: Scaled cell [C + 1]
    """
    for k in range(out.shape[0]):
        out[k] = a[k] + alpha * b[k]


@njit(cache=True, nogil=True, inline="always")
def cell_scale(out: np.ndarray, alpha: float, a: np.ndarray) -> None:
    """
    out = alpha * a (colors and weight).

    Args:
        out: Destination cell [C + 1] (may alias a)
        alpha: Scale factor
        a: Source cell [C + 1]
    """
    for k in range(out.shape[0]):
        out[k] = alpha * a[k]


# ============================================================================
# Downsampling
# ============================================================================


@njit(cache=True, nogil=True)
def splat_numba(
    values: np.ndarray,
    sigma_space: float,
    padding_space: int,
    mins: np.ndarray,
    sigma_range: float,
    range_active: np.ndarray,
    padding_range: int,
    strides: np.ndarray,
    cells: np.ndarray,
) -> None:
    """
    Scatter every pixel into its nearest grid cell.

    Runs serially: distinct pixels collide into the same cell, and the
    accumulation order is kept deterministic.

    Args:
        values: Range values per pixel [H, W, C] in [0, 1]
        sigma_space: Pixels per spatial cell
        padding_space: Spatial border cells
        mins: Minimum of each range channel [C]
        sigma_range: Intensity step per range cell
        range_active: False for range axes with zero extent [C]
        padding_range: Range border cells
        strides: Linear strides of the range axes [C]
        cells: Grid cells [SX, SY, R, C + 1] (modified in-place)
    """
    height, width, channels = values.shape

    for x in range(width):
        gx = int(x / sigma_space + 0.5) + padding_space

        for y in range(height):
            gy = int(y / sigma_space + 0.5) + padding_space

            r = 0
            for k in range(channels):
                z = padding_range
                if range_active[k]:
                    z += int((values[y, x, k] - mins[k]) / sigma_range + 0.5)
                r += z * strides[k]

            cell = cells[gx, gy, r]
            for k in range(channels):
                cell[k] += values[y, x, k]
            cell[channels] += 1.0


# ============================================================================
# Convolution
# ============================================================================


@njit(parallel=True, cache=True, nogil=True)
def blur_axis_numba(
    src: np.ndarray,
    dst: np.ndarray,
    interior: np.ndarray,
    dx: int,
    dy: int,
    dr: int,
) -> None:
    """
    One tent-filter pass (prev + 2 * curr + next) / 4 along a single axis.

    Reads only from src and writes only the interior cells of dst, so the
    two buffers never alias. Border cells of dst are left untouched.

    Args:
        src: Grid cells read by the stencil [SX, SY, R, C + 1]
        dst: Grid cells written by the stencil [SX, SY, R, C + 1]
        interior: True for range indices inside the border on every range axis [R]
        dx: Neighbor offset on the x axis (0 or 1)
        dy: Neighbor offset on the y axis (0 or 1)
        dr: Neighbor offset on the linear range index (0 or the axis stride)
    """
    sx, sy, nr, _ = src.shape

    for x in prange(1, sx - 1):
        for y in range(1, sy - 1):
            for r in range(nr):
                if not interior[r]:
                    continue

                out = dst[x, y, r]
                cell_add(out, src[x - dx, y - dy, r - dr], src[x + dx, y + dy, r + dr])
                cell_add_scaled(out, out, 2.0, src[x, y, r])
                cell_scale(out, 0.25, out)


# ============================================================================
# Normalization
# ============================================================================


@njit(parallel=True, cache=True, nogil=True)
def normalize_cells_numba(cells: np.ndarray) -> None:
    """
    Divide the color sums of every non-empty cell by its weight.

    Args:
        cells: Grid cells [SX, SY, R, C + 1] (modified in-place)
    """
    sx, sy, nr, k = cells.shape
    channels = k - 1

    for x in prange(sx):
        for y in range(sy):
            for r in range(nr):
                weight = cells[x, y, r, channels]
                if weight != 0.0:
                    for c in range(channels):
                        cells[x, y, r, c] /= weight


# ============================================================================
# Reconstruction
# ============================================================================


@njit(parallel=True, cache=True, nogil=True)
def slice_numba(
    coords: np.ndarray,
    sizes: np.ndarray,
    strides: np.ndarray,
    cells: np.ndarray,
    out: np.ndarray,
) -> None:
    """
    Multilinear interpolation of the grid at continuous coordinates.

    Every sample accumulates the 2^D corners of its enclosing cell, each
    corner index clamped to [0, size - 1] and weighted by the product of
    (1 - alpha) or alpha over the axes.

    Args:
        coords: Continuous grid coordinates [N, D]
        sizes: Grid size per axis [D]
        strides: Linear strides of the range axes [D - 2]
        cells: Grid cells [SX, SY, R, C + 1]
        out: Interpolated cells [N, C + 1] (modified in-place)
    """
    n, dims = coords.shape
    corners = 1 << dims

    for p in prange(n):
        row = out[p]
        for k in range(row.shape[0]):
            row[k] = 0.0

        for i in range(corners):
            scale = 1.0
            gx = 0
            gy = 0
            r = 0
            for axis in range(dims):
                off = coords[p, axis]
                last = sizes[axis] - 1
                base = min(max(int(off), 0), last)
                alpha = off - base

                if (i >> axis) & 1:
                    idx = base
                    scale *= 1.0 - alpha
                else:
                    idx = min(base + 1, last)
                    scale *= alpha

                if axis == 0:
                    gx = idx
                elif axis == 1:
                    gy = idx
                else:
                    r += idx * strides[axis - 2]

            cell_add_scaled(row, row, scale, cells[gx, gy, r])
