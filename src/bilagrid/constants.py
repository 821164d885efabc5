"""
Constants and default values for bilagrid filters.

Centralizes magic numbers and configuration defaults for better maintainability.
"""

from __future__ import annotations

# =============================================================================
# Bandwidth Defaults
# =============================================================================

DEFAULT_SIGMA_SPACE = 16.0  # Pixels per spatial grid cell
DEFAULT_SIGMA_RANGE = 0.1  # Normalized intensity per range grid cell
DEFAULT_AUTO_FACTOR = 0.1  # sigma_range = (max - min) * factor in auto mode

# =============================================================================
# Grid Layout
# =============================================================================

DEFAULT_PADDING_SPACE = 2  # Border cells on each spatial axis
DEFAULT_PADDING_RANGE = 2  # Border cells on each range axis
MIN_PADDING = 2  # Must exceed the stencil radius (1)
DEFAULT_PASSES = 2  # Stencil applications per axis

SPATIAL_DIMS = 2  # x, y
MIN_DIMENSION = 3  # x, y + at least one range axis
RGB_CHANNELS = 3
GRAY_CHANNELS = 1

# =============================================================================
# Pixel Formats
# =============================================================================

MAX_VALUE_16 = 65535  # Source channel scale (16-bit)
MAX_VALUE_8 = 255  # Output channel scale (8-bit)
UINT8_TO_UINT16 = 257  # 0xFF * 257 == 0xFFFF

COLOR_MODEL = "RGBA"  # Output color model (8 bits per channel)

# Valid filter modes for the functional API
VALID_MODES = {"rgb", "luminance"}
