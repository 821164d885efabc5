"""
Tests for linear RGB <-> XYZ projection.
"""

import numpy as np
import pytest

from bilagrid.color import (
    RGB_TO_XYZ,
    XYZ_TO_RGB,
    linear_rgb_to_xyz,
    luminance,
    shift_luminance,
    xyz_to_linear_rgb,
)


@pytest.fixture
def rgb():
    rng = np.random.default_rng(42)
    return rng.random((6, 5, 3))


class TestConversions:
    """Test RGB/XYZ matrices and conversions."""

    def test_matrices_are_inverse(self):
        np.testing.assert_allclose(RGB_TO_XYZ @ XYZ_TO_RGB, np.eye(3), atol=1e-12)

    def test_white_point(self):
        """Linear white maps to the D65 white point."""
        np.testing.assert_allclose(linear_rgb_to_xyz([1.0, 1.0, 1.0]), [0.950456, 1.0, 1.089058], atol=1e-5)

    def test_round_trip(self, rgb):
        np.testing.assert_allclose(xyz_to_linear_rgb(linear_rgb_to_xyz(rgb)), rgb, atol=1e-12)

    def test_matches_matmul(self, rgb):
        np.testing.assert_allclose(linear_rgb_to_xyz(rgb), rgb @ RGB_TO_XYZ.T, rtol=1e-14)

    def test_single_pixel_matches_batch(self, rgb):
        """One pixel and a whole image go through identical arithmetic."""
        batch = linear_rgb_to_xyz(rgb)

        np.testing.assert_array_equal(linear_rgb_to_xyz(rgb[2, 3]), batch[2, 3])

    def test_luminance(self):
        assert float(luminance([1.0, 0.0, 0.0])) == pytest.approx(0.2126, abs=1e-4)
        assert float(luminance([0.0, 1.0, 0.0])) == pytest.approx(0.7152, abs=1e-4)
        assert float(luminance([1.0, 1.0, 1.0])) == pytest.approx(1.0, abs=1e-12)

    def test_invalid_shape(self):
        with pytest.raises(ValueError, match="3 components"):
            linear_rgb_to_xyz(np.zeros((4, 4)))


class TestShiftLuminance:
    """Test shift_luminance()."""

    def test_identity(self, rgb):
        np.testing.assert_allclose(shift_luminance(rgb, luminance(rgb)), rgb, atol=1e-12)

    def test_sets_luminance(self, rgb):
        target = np.full(rgb.shape[:-1], 0.4)

        np.testing.assert_allclose(luminance(shift_luminance(rgb, target)), target, atol=1e-12)

    def test_delta_applied_to_x_and_z(self):
        rgb = np.array([0.2, 0.5, 0.3])
        xyz = linear_rgb_to_xyz(rgb)

        shifted = linear_rgb_to_xyz(shift_luminance(rgb, xyz[1] + 0.1))

        np.testing.assert_allclose(shifted, xyz + 0.1, atol=1e-12)

    def test_scalar_target_broadcast(self, rgb):
        shifted = shift_luminance(rgb, 0.25)

        assert shifted.shape == rgb.shape
        np.testing.assert_allclose(luminance(shifted), 0.25, atol=1e-12)
