"""
Tests for the stage functions and the functional bilateral_filter() API.
"""

import numpy as np
import pytest

from bilagrid import ArrayImage, FastBilateral, LuminanceBilateral, bilateral_filter
from bilagrid.filter import (
    BilateralConfig,
    allocate_grid,
    convolve,
    downsample,
    estimate_parameters,
    normalize,
    reconstruct,
)


@pytest.fixture
def pixels():
    rng = np.random.default_rng(42)
    return rng.integers(0, 256, size=(20, 24, 3), dtype=np.uint8)


@pytest.fixture
def values(pixels):
    return pixels.astype(np.float64) / 255.0


# ============================================================================
# Stage Functions
# ============================================================================


class TestStages:
    """Test the individual grid stages."""

    def test_allocate_grid(self, values):
        params = estimate_parameters(values, 8.0, 0.2)
        grid = allocate_grid(params)

        assert grid.sizes == params.sizes
        assert grid.channels == 3
        assert not grid.cells.any()

    def test_downsample(self, values):
        params = estimate_parameters(values, 8.0, 0.2)
        grid = downsample(params, values)

        assert grid.cells[..., 3].sum() == 20 * 24
        np.testing.assert_allclose(grid.cells[..., :3].sum(axis=(0, 1, 2)), values.sum(axis=(0, 1)))

    def test_downsample_accumulates(self, values):
        params = estimate_parameters(values, 8.0, 0.2)
        grid = downsample(params, values)
        downsample(params, values, grid=grid)

        assert grid.cells[..., 3].sum() == 2 * 20 * 24

    def test_downsample_wrong_shape(self, values):
        params = estimate_parameters(values, 8.0, 0.2)

        with pytest.raises(ValueError, match="values must be"):
            downsample(params, values[..., :1])

    def test_convolve(self, values):
        params = estimate_parameters(values, 8.0, 0.2)
        before = downsample(params, values).cells.copy()
        grid = convolve(downsample(params, values))

        weights = grid.cells[..., 3]
        assert not np.array_equal(grid.cells, before)
        assert 0.0 < weights.sum() <= before[..., 3].sum() + 1e-9
        # Border cells are never written
        assert not weights[0].any() and not weights[-1].any()
        assert not weights[:, 0].any() and not weights[:, -1].any()

    def test_convolve_even_passes_reuse_input(self, values):
        """With an even number of total passes the input grid holds the result."""
        params = estimate_parameters(values, 8.0, 0.2)
        grid = downsample(params, values)

        assert convolve(grid, passes=2) is grid

    def test_convolve_invalid_passes(self, values):
        grid = downsample(estimate_parameters(values, 8.0, 0.2), values)

        with pytest.raises(ValueError, match="passes must be at least 1"):
            convolve(grid, passes=0)

    def test_normalize(self, values):
        params = estimate_parameters(values, 8.0, 0.2)
        grid = normalize(convolve(downsample(params, values)))

        nonzero = grid.cells[..., 3] > 0.0
        colors = grid.cells[..., :3][nonzero]
        assert colors.min() >= values.min() - 1e-9
        assert colors.max() <= values.max() + 1e-9

    def test_reconstruct(self, values):
        params = estimate_parameters(values, 8.0, 0.2)
        grid = convolve(downsample(params, values))

        ys, xs = np.array([0, 5, 19]), np.array([0, 7, 23])
        cells = reconstruct(grid, params, xs, ys, values[ys, xs])

        assert cells.shape == (3, 4)
        assert (cells[:, 3] > 0.0).all()

    def test_stages_match_filter(self, pixels, values):
        """Chaining the stages reproduces FastBilateral.filtered()."""
        params = estimate_parameters(values, 8.0, 0.2)
        grid = convolve(downsample(params, values))

        ys, xs = np.indices(values.shape[:2]).reshape(2, -1)
        cells = reconstruct(grid, params, xs, ys, values[ys, xs])
        manual = (cells[:, :3] / cells[:, 3:]).reshape(values.shape)

        filtered = FastBilateral(ArrayImage(pixels), 8.0, 0.2).execute().filtered()

        np.testing.assert_allclose(filtered, manual, atol=1e-9)


# ============================================================================
# Functional API
# ============================================================================


class TestBilateralFilter:
    """Test bilateral_filter()."""

    def test_output_format(self, pixels):
        result = bilateral_filter(pixels, sigma_space=8.0, sigma_range=0.2)

        assert result.dtype == np.uint8
        assert result.shape == (20, 24, 4)
        assert np.all(result[..., 3] == 255)

    def test_matches_object_api(self, pixels):
        expected = FastBilateral(ArrayImage(pixels), 8.0, 0.2).execute().result_image().data

        np.testing.assert_array_equal(bilateral_filter(pixels, 8.0, 0.2), expected)

    def test_luminance_mode(self, pixels):
        expected = LuminanceBilateral(ArrayImage(pixels), 8.0, 0.2).execute().result_image().data

        np.testing.assert_array_equal(bilateral_filter(pixels, 8.0, 0.2, mode="luminance"), expected)

    def test_auto(self, pixels):
        expected = FastBilateral.auto(ArrayImage(pixels), sigma_space=8.0).execute().result_image().data

        np.testing.assert_array_equal(bilateral_filter(pixels, sigma_space=8.0, auto=True), expected)

    def test_grayscale_and_float_input(self, values):
        gray = bilateral_filter(values[..., 0], sigma_space=4.0)
        color = bilateral_filter(values, sigma_space=4.0)

        assert gray.shape == color.shape == (20, 24, 4)
        np.testing.assert_array_equal(gray[..., 0], gray[..., 1])

    def test_config(self, pixels):
        result = bilateral_filter(pixels, 8.0, 0.2, config=BilateralConfig(passes=1))

        assert result.shape == (20, 24, 4)

    def test_invalid_mode(self, pixels):
        with pytest.raises(ValueError, match="mode='xyz' is not valid"):
            bilateral_filter(pixels, mode="xyz")

    def test_invalid_bandwidths(self, pixels):
        with pytest.raises(ValueError, match="sigma_space=0 must be positive"):
            bilateral_filter(pixels, sigma_space=0)

        with pytest.raises(ValueError, match="sigma_range"):
            bilateral_filter(pixels, 16.0, -0.1)

        with pytest.raises(TypeError, match="must be a number"):
            bilateral_filter(pixels, sigma_range="0.1")

        with pytest.raises(TypeError, match="must be a number"):
            bilateral_filter(pixels, sigma_space=True)
