"""
Dense bilateral grid storage.

A grid of D axes (2 spatial + C range) is stored as one float64 array
shaped [SX, SY, R, C + 1]: the two spatial axes are indexed directly and the
range axes are linearized into R = prod(range sizes) with multiplicative
strides. Each cell holds C color sums followed by its weight.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from bilagrid.constants import MIN_DIMENSION, SPATIAL_DIMS
from bilagrid.filter.kernels import cell_add, cell_add_scaled, cell_scale


def range_strides(range_sizes: tuple[int, ...] | list[int]) -> np.ndarray:
    """
    Compute linear strides of the range axes.

    Args:
        range_sizes: Size of each range axis

    Returns:
        int64 strides, the first range axis varying fastest

    Example:
        >>> range_strides([5, 6, 7])
        array([ 1,  5, 30])
    """
    strides = np.ones(len(range_sizes), dtype=np.int64)
    for i in range(1, len(range_sizes)):
        strides[i] = strides[i - 1] * range_sizes[i - 1]
    return strides


@dataclass
class Cell:
    """
    View over one grid cell.

    Attributes:
        data: Cell storage [C + 1] (colors then weight), shared with the grid
    """

    data: np.ndarray

    @property
    def colors(self) -> np.ndarray:
        return self.data[:-1]

    @property
    def weight(self) -> float:
        return float(self.data[-1])

    def add(self, a: Cell, b: Cell) -> None:
        """self = a + b"""
        cell_add(self.data, a.data, b.data)

    def add_scaled(self, a: Cell, alpha: float, b: Cell) -> None:
        """self = a + alpha * b"""
        cell_add_scaled(self.data, a.data, alpha, b.data)

    def scale(self, alpha: float, a: Cell) -> None:
        """self = alpha * a"""
        cell_scale(self.data, alpha, a.data)

    def __repr__(self) -> str:
        return f"Cell(colors={self.colors.tolist()}, weight={self.weight:f})"


class Grid:
    """
    Dense D-dimensional accumulator of cells.

    Example:
        >>> grid = Grid((8, 6, 5), channels=1)
        >>> grid.at(2, 2, 3).weight
        0.0
    """

    __slots__ = ("sizes", "channels", "strides", "cells")

    def __init__(self, sizes: tuple[int, ...] | list[int], channels: int):
        """
        Allocate a zeroed grid.

        Args:
            sizes: Size of every axis (x, y, then the range axes)
            channels: Color components per cell

        Raises:
            ValueError: If fewer than 3 axes are given or a size is not positive
        """
        sizes = tuple(int(s) for s in sizes)
        if len(sizes) < MIN_DIMENSION:
            raise ValueError(
                f"Grid needs at least {MIN_DIMENSION} axes (x, y, range), got {len(sizes)}"
            )
        if any(s <= 0 for s in sizes):
            raise ValueError(f"Grid sizes must be positive, got {sizes}")
        if channels < 1:
            raise ValueError(f"channels must be at least 1, got {channels}")

        self.sizes = sizes
        self.channels = channels
        self.strides = range_strides(sizes[SPATIAL_DIMS:])
        n_range = int(np.prod(sizes[SPATIAL_DIMS:]))
        self.cells = np.zeros((sizes[0], sizes[1], n_range, channels + 1), dtype=np.float64)

    @property
    def dimension(self) -> int:
        return len(self.sizes)

    @property
    def n_cells(self) -> int:
        return int(np.prod(self.sizes))

    def zeros_like(self) -> Grid:
        """Allocate an empty grid of identical shape."""
        return Grid(self.sizes, self.channels)

    def index(self, *coords: int) -> tuple[int, int, int]:
        """
        Map a D-dimensional cell coordinate to its storage index.

        Args:
            *coords: One integer per axis

        Returns:
            (x, y, r) index into cells
        """
        if len(coords) != self.dimension:
            raise ValueError(f"Expected {self.dimension} coordinates, got {len(coords)}")
        for axis, (c, s) in enumerate(zip(coords, self.sizes)):
            if not 0 <= c < s:
                raise IndexError(f"Coordinate {c} out of range [0, {s}) on axis {axis}")

        r = 0
        for z, stride in zip(coords[SPATIAL_DIMS:], self.strides):
            r += z * int(stride)
        return coords[0], coords[1], r

    def at(self, *coords: int) -> Cell:
        """Return a view of the cell at the given coordinate."""
        x, y, r = self.index(*coords)
        return Cell(self.cells[x, y, r])

    def interior_mask(self) -> np.ndarray:
        """
        Flag linear range indices lying inside the border on every range axis.

        Returns:
            Boolean mask [R]
        """
        mask = np.ones(self.cells.shape[2], dtype=np.bool_)
        linear = np.arange(self.cells.shape[2], dtype=np.int64)
        for size, stride in zip(self.sizes[SPATIAL_DIMS:], self.strides):
            z = (linear // stride) % size
            mask &= (z >= 1) & (z <= size - 2)
        return mask

    def __repr__(self) -> str:
        return f"Grid(sizes={self.sizes}, channels={self.channels})"
