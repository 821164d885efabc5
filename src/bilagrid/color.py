"""
Linear RGB <-> CIE XYZ projection used by the luminance filter.

Matrices are the sRGB primaries with a D65 white point; XYZ_TO_RGB is the
inverse of RGB_TO_XYZ to double precision.

Products are written out per component rather than with matmul so that a
single pixel and a whole image go through the same arithmetic.
"""

from __future__ import annotations

import numpy as np

# Linear sRGB to XYZ (D65)
RGB_TO_XYZ = np.array(
    [
        [0.41239079926595948, 0.35758433938387796, 0.18048078840183429],
        [0.21263900587151036, 0.71516867876775593, 0.072192315360733715],
        [0.019330818715591851, 0.11919477979462599, 0.95053215224966058],
    ]
)

# XYZ to linear sRGB
XYZ_TO_RGB = np.array(
    [
        [3.2409699419045214, -1.5373831775700935, -0.49861076029300328],
        [-0.96924363628087983, 1.8759675015077207, 0.041555057407175613],
        [0.055630079696993609, -0.20397695888897657, 1.0569715142428786],
    ]
)


def _row(m: np.ndarray, i: int, v: np.ndarray) -> np.ndarray:
    return m[i, 0] * v[..., 0] + m[i, 1] * v[..., 1] + m[i, 2] * v[..., 2]


def _project(m: np.ndarray, v: np.ndarray) -> np.ndarray:
    v = np.asarray(v, dtype=np.float64)
    if v.shape[-1] != 3:
        raise ValueError(f"Expected 3 components in the last axis, got shape {v.shape}")
    return np.stack([_row(m, 0, v), _row(m, 1, v), _row(m, 2, v)], axis=-1)


def linear_rgb_to_xyz(rgb: np.ndarray) -> np.ndarray:
    """
    Convert linear RGB to CIE XYZ.

    Args:
        rgb: Linear RGB values, shape (..., 3)

    Returns:
        XYZ values, shape (..., 3)
    """
    return _project(RGB_TO_XYZ, rgb)


def xyz_to_linear_rgb(xyz: np.ndarray) -> np.ndarray:
    """Convert CIE XYZ to linear RGB (inverse of linear_rgb_to_xyz)."""
    return _project(XYZ_TO_RGB, xyz)


def luminance(rgb: np.ndarray) -> np.ndarray:
    """
    Compute CIE Y from linear RGB.

    Args:
        rgb: Linear RGB values, shape (..., 3)

    Returns:
        Luminance, shape (...)
    """
    return linear_rgb_to_xyz(rgb)[..., 1]


def shift_luminance(rgb: np.ndarray, filtered_y: np.ndarray) -> np.ndarray:
    """
    Replace the luminance of linear RGB colors while keeping their chroma offset.

    The difference between the new and the original luminance is added to
    X and Z as well, then the color is projected back to linear RGB.

    Args:
        rgb: Original linear RGB values, shape (..., 3)
        filtered_y: New luminance per color, shape (...)

    Returns:
        Linear RGB values, shape (..., 3), not clamped
    """
    xyz = linear_rgb_to_xyz(rgb)
    filtered_y = np.broadcast_to(np.asarray(filtered_y, dtype=np.float64), xyz.shape[:-1])
    delta = filtered_y - xyz[..., 1]
    shifted = np.stack(
        [xyz[..., 0] + delta, filtered_y, xyz[..., 2] + delta],
        axis=-1,
    )
    return xyz_to_linear_rgb(shifted)
