"""
Filter configuration for bilateral grid filtering.

Holds the per-instance constants of the grid layout (paddings, channel
scale, stencil passes) so that no filter shares mutable defaults with another.
"""

from dataclasses import dataclass

from bilagrid.constants import (
    DEFAULT_AUTO_FACTOR,
    DEFAULT_PADDING_RANGE,
    DEFAULT_PADDING_SPACE,
    DEFAULT_PASSES,
    MAX_VALUE_16,
    MIN_PADDING,
)


@dataclass(frozen=True)
class BilateralConfig:
    """
    Configuration for bilateral grid filtering.

    Attributes:
        padding_space: Border cells on each spatial axis (>= 2)
        padding_range: Border cells on each range axis (>= 2)
        max_value: Divisor normalizing source channels to [0, 1]
        passes: Tent stencil applications per grid axis
        auto_factor: Fraction of the intensity range used as sigma_range in auto mode
        collapse_gray: Filter grayscale images on a single range axis
    """

    padding_space: int = DEFAULT_PADDING_SPACE
    padding_range: int = DEFAULT_PADDING_RANGE
    max_value: int = MAX_VALUE_16
    passes: int = DEFAULT_PASSES
    auto_factor: float = DEFAULT_AUTO_FACTOR
    collapse_gray: bool = True

    def __post_init__(self):
        """Validate configuration parameters."""
        # Padding must exceed the stencil radius so neighbor reads stay in bounds
        if self.padding_space < MIN_PADDING:
            raise ValueError(f"padding_space must be at least {MIN_PADDING}, got {self.padding_space}")

        if self.padding_range < MIN_PADDING:
            raise ValueError(f"padding_range must be at least {MIN_PADDING}, got {self.padding_range}")

        if self.max_value <= 0:
            raise ValueError("max_value must be positive")

        if self.passes < 1:
            raise ValueError("passes must be at least 1")

        if not 0.0 < self.auto_factor <= 1.0:
            raise ValueError("auto_factor must be in (0.0, 1.0]")
