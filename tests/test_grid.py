"""
Tests for grid storage: strides, cell addressing and cell arithmetic.
"""

import numpy as np
import pytest

from bilagrid.filter import Cell, Grid
from bilagrid.filter.grid import range_strides


@pytest.fixture
def rgb_grid():
    """5-axis grid with 3 color channels."""
    return Grid((5, 6, 3, 4, 5), channels=3)


# ============================================================================
# Strides
# ============================================================================


class TestRangeStrides:
    """Test linearization of range axes."""

    def test_first_axis_fastest(self):
        np.testing.assert_array_equal(range_strides([5, 6, 7]), [1, 5, 30])

    def test_single_axis(self):
        np.testing.assert_array_equal(range_strides([9]), [1])

    def test_dtype(self):
        assert range_strides([3, 3]).dtype == np.int64


# ============================================================================
# Grid Tests
# ============================================================================


class TestGrid:
    """Test Grid allocation and addressing."""

    def test_storage_shape(self, rgb_grid):
        """Range axes are linearized into a single storage axis."""
        assert rgb_grid.cells.shape == (5, 6, 60, 4)
        assert rgb_grid.dimension == 5
        assert rgb_grid.n_cells == 5 * 6 * 3 * 4 * 5
        np.testing.assert_array_equal(rgb_grid.strides, [1, 3, 12])

    def test_zero_initialized(self, rgb_grid):
        assert not rgb_grid.cells.any()

    def test_gray_grid(self):
        grid = Grid((8, 6, 5), channels=1)
        assert grid.cells.shape == (8, 6, 5, 2)
        assert grid.at(2, 2, 3).weight == 0.0

    def test_index(self, rgb_grid):
        assert rgb_grid.index(1, 2, 2, 3, 4) == (1, 2, 2 + 3 * 3 + 4 * 12)
        assert rgb_grid.index(0, 0, 0, 0, 0) == (0, 0, 0)

    def test_index_wrong_arity(self, rgb_grid):
        with pytest.raises(ValueError, match="Expected 5 coordinates"):
            rgb_grid.index(1, 2, 3)

    def test_index_out_of_range(self, rgb_grid):
        with pytest.raises(IndexError, match="axis 2"):
            rgb_grid.index(0, 0, 3, 0, 0)

        with pytest.raises(IndexError):
            rgb_grid.index(-1, 0, 0, 0, 0)

    def test_at_is_view(self, rgb_grid):
        """Cells returned by at() share storage with the grid."""
        cell = rgb_grid.at(1, 2, 2, 3, 4)
        cell.data[:] = [0.1, 0.2, 0.3, 2.0]

        np.testing.assert_array_equal(rgb_grid.cells[1, 2, 2 + 9 + 48], [0.1, 0.2, 0.3, 2.0])
        np.testing.assert_array_equal(cell.colors, [0.1, 0.2, 0.3])
        assert cell.weight == 2.0

    def test_zeros_like(self, rgb_grid):
        rgb_grid.cells[...] = 1.0
        other = rgb_grid.zeros_like()

        assert other.sizes == rgb_grid.sizes
        assert other.channels == rgb_grid.channels
        assert not other.cells.any()

    def test_interior_mask(self):
        """Interior excludes index 0 and size - 1 on every range axis."""
        grid = Grid((5, 5, 5, 6), channels=2)
        mask = grid.interior_mask()

        assert mask.shape == (30,)
        assert mask.sum() == 3 * 4
        assert not mask[0]  # (0, 0)
        assert mask[1 + 5]  # (1, 1)
        assert mask[3 + 4 * 5]  # (3, 4)
        assert not mask[4 + 4 * 5]  # (4, 4)
        assert not mask[1 + 5 * 5]  # (1, 5)

    def test_invalid_dimension(self):
        with pytest.raises(ValueError, match="at least 3 axes"):
            Grid((5, 5), channels=1)

    def test_invalid_sizes(self):
        with pytest.raises(ValueError, match="must be positive"):
            Grid((5, 0, 5), channels=1)

    def test_invalid_channels(self):
        with pytest.raises(ValueError, match="channels"):
            Grid((5, 5, 5), channels=0)


# ============================================================================
# Cell Tests
# ============================================================================


class TestCell:
    """Test cell arithmetic (colors and weight together)."""

    def test_add(self):
        out = Cell(np.zeros(4))
        out.add(Cell(np.array([1.0, 2.0, 3.0, 1.0])), Cell(np.array([4.0, 5.0, 6.0, 2.0])))

        np.testing.assert_allclose(out.data, [5.0, 7.0, 9.0, 3.0])

    def test_add_scaled(self):
        out = Cell(np.zeros(4))
        out.add_scaled(Cell(np.array([1.0, 2.0, 3.0, 1.0])), 2.0, Cell(np.array([4.0, 5.0, 6.0, 2.0])))

        np.testing.assert_allclose(out.data, [9.0, 12.0, 15.0, 5.0])

    def test_scale(self):
        out = Cell(np.zeros(2))
        out.scale(0.5, Cell(np.array([3.0, 2.0])))

        np.testing.assert_allclose(out.data, [1.5, 1.0])

    def test_aliasing(self):
        """Destination may alias an operand."""
        cell = Cell(np.array([1.0, 2.0]))
        cell.add_scaled(cell, 2.0, cell)

        np.testing.assert_allclose(cell.data, [3.0, 6.0])

    def test_repr(self):
        assert repr(Cell(np.array([0.5, 2.0]))) == "Cell(colors=[0.5], weight=2.000000)"
