"""
Protocol definitions for bilagrid image interfaces.

Defines the pixel source consumed by the filters and the pixel sink they
produce. Any object implementing these methods can be filtered, so callers
are free to wrap their own image containers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from bilagrid.image import Bounds


@runtime_checkable
class PixelSource(Protocol):
    """
    Read-only 2D image.

    Channel values are integers at a 16-bit scale (0..65535).
    """

    def bounds(self) -> Bounds:
        """Return image bounds (width, height)."""
        ...

    def at(self, x: int, y: int) -> tuple[int, int, int, int]:
        """
        Return the (R, G, B, A) values of the pixel at column x, row y.

        Args:
            x: Column index in [0, width)
            y: Row index in [0, height)

        Returns:
            Tuple of four 16-bit channel values
        """
        ...


@runtime_checkable
class PixelSink(Protocol):
    """Writable 2D image with 8-bit RGBA pixels."""

    def bounds(self) -> Bounds:
        """Return image bounds (width, height)."""
        ...

    def set(self, x: int, y: int, rgba: tuple[int, int, int, int]) -> None:
        """
        Store an 8-bit (R, G, B, A) pixel at column x, row y.

        Args:
            x: Column index in [0, width)
            y: Row index in [0, height)
            rgba: Four 8-bit channel values
        """
        ...
