"""
Tests for BilateralConfig.
"""

import dataclasses

import pytest

from bilagrid.filter import BilateralConfig


class TestBilateralConfig:
    """Test BilateralConfig dataclass."""

    def test_default_initialization(self):
        """Test default BilateralConfig initialization."""
        config = BilateralConfig()

        assert config.padding_space == 2
        assert config.padding_range == 2
        assert config.max_value == 65535
        assert config.passes == 2
        assert config.auto_factor == 0.1
        assert config.collapse_gray is True

    def test_custom_initialization(self):
        """Test custom BilateralConfig initialization."""
        config = BilateralConfig(padding_space=3, padding_range=4, passes=1, auto_factor=0.25)

        assert config.padding_space == 3
        assert config.padding_range == 4
        assert config.passes == 1
        assert config.auto_factor == 0.25

    def test_frozen(self):
        """Test that configs cannot be mutated after creation."""
        config = BilateralConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.passes = 3

    def test_invalid_padding(self):
        """Test that padding below the stencil reach raises error."""
        with pytest.raises(ValueError, match="padding_space must be at least"):
            BilateralConfig(padding_space=1)

        with pytest.raises(ValueError, match="padding_range must be at least"):
            BilateralConfig(padding_range=0)

    def test_invalid_max_value(self):
        with pytest.raises(ValueError, match="max_value must be positive"):
            BilateralConfig(max_value=0)

    def test_invalid_passes(self):
        with pytest.raises(ValueError, match="passes must be at least 1"):
            BilateralConfig(passes=0)

    def test_invalid_auto_factor(self):
        """Test that auto_factor outside (0, 1] raises error."""
        with pytest.raises(ValueError, match="auto_factor"):
            BilateralConfig(auto_factor=0.0)

        with pytest.raises(ValueError, match="auto_factor"):
            BilateralConfig(auto_factor=1.5)

        assert BilateralConfig(auto_factor=1.0).auto_factor == 1.0
