"""
In-memory image containers implementing the pixel protocols.

ArrayImage is the pixel source used by the filters (16-bit RGBA backing
array). RGBAImage is the 8-bit RGBA sink produced by the filters.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from bilagrid.constants import MAX_VALUE_8, MAX_VALUE_16, UINT8_TO_UINT16
from bilagrid.protocols import PixelSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Bounds:
    """
    Image bounds.

    Attributes:
        width: Number of columns
        height: Number of rows
    """

    width: int
    height: int

    def __post_init__(self) -> None:
        """Validate bounds."""
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Bounds must be non-negative, got {self.width}x{self.height}")

    @property
    def shape(self) -> tuple[int, int]:
        """NumPy (rows, columns) shape."""
        return (self.height, self.width)

    @property
    def empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def contains(self, x: int, y: int) -> bool:
        """Check whether (x, y) addresses a pixel inside the bounds."""
        return 0 <= x < self.width and 0 <= y < self.height


def _to_rgba16(data: np.ndarray) -> np.ndarray:
    """
    Convert an image array to 16-bit RGBA.

    Args:
        data: Image array [H, W], [H, W, 3] or [H, W, 4]; uint8, uint16 or
            float in [0, 1]

    Returns:
        uint16 array [H, W, 4]
    """
    data = np.asarray(data)
    if data.ndim == 2:
        data = data[:, :, np.newaxis].repeat(3, axis=2)
    if data.ndim != 3 or data.shape[2] not in (3, 4):
        raise ValueError(f"image must be [H, W], [H, W, 3] or [H, W, 4], got shape {data.shape}")

    if data.dtype == np.uint8:
        rgba = data.astype(np.uint16) * UINT8_TO_UINT16
    elif data.dtype == np.uint16:
        rgba = data.copy()
    elif np.issubdtype(data.dtype, np.floating):
        rgba = np.floor(np.clip(data, 0.0, 1.0) * MAX_VALUE_16 + 0.5).astype(np.uint16)
    else:
        raise TypeError(f"Unsupported image dtype {data.dtype}. Use uint8, uint16 or float.")

    if rgba.shape[2] == 3:
        alpha = np.full(rgba.shape[:2] + (1,), MAX_VALUE_16, dtype=np.uint16)
        rgba = np.concatenate([rgba, alpha], axis=2)

    return np.ascontiguousarray(rgba)


class ArrayImage:
    """
    Read-only image backed by a NumPy array.

    Pixels are stored as 16-bit RGBA. 8-bit input is widened (v * 257), float
    input in [0, 1] is scaled by 65535, and missing alpha is fully opaque.

    Example:
        >>> img = ArrayImage(np.zeros((4, 6, 3), dtype=np.uint8))
        >>> img.bounds()
        Bounds(width=6, height=4)
        >>> img.at(0, 0)
        (0, 0, 0, 65535)
    """

    __slots__ = ("_data", "_bounds")

    def __init__(self, data: np.ndarray):
        self._data = _to_rgba16(data)
        self._data.setflags(write=False)
        self._bounds = Bounds(width=self._data.shape[1], height=self._data.shape[0])

    def bounds(self) -> Bounds:
        return self._bounds

    def at(self, x: int, y: int) -> tuple[int, int, int, int]:
        if not self._bounds.contains(x, y):
            raise ValueError(f"Pixel ({x}, {y}) is outside image bounds {self._bounds}")
        r, g, b, a = self._data[y, x]
        return int(r), int(g), int(b), int(a)

    @property
    def data(self) -> np.ndarray:
        """Read-only uint16 RGBA array [H, W, 4]."""
        return self._data

    def __array__(self, dtype=None, copy=None) -> np.ndarray:
        if dtype is not None:
            return self._data.astype(dtype)
        return self._data

    def __repr__(self) -> str:
        return f"ArrayImage({self._bounds.width}x{self._bounds.height})"


class RGBAImage:
    """
    8-bit RGBA image, the output of the filters.

    Implements both PixelSink (set) and PixelSource (at, 16-bit scale) so a
    filtered image can be filtered again.
    """

    __slots__ = ("_data", "_bounds")

    def __init__(self, bounds: Bounds, data: np.ndarray | None = None):
        if data is None:
            data = np.zeros((bounds.height, bounds.width, 4), dtype=np.uint8)
        else:
            data = np.asarray(data)
            if data.shape != (bounds.height, bounds.width, 4) or data.dtype != np.uint8:
                raise ValueError(
                    f"data must be uint8 [{bounds.height}, {bounds.width}, 4], "
                    f"got {data.dtype} {data.shape}"
                )
        self._data = data
        self._bounds = bounds

    def bounds(self) -> Bounds:
        return self._bounds

    def set(self, x: int, y: int, rgba: tuple[int, int, int, int]) -> None:
        if not self._bounds.contains(x, y):
            raise ValueError(f"Pixel ({x}, {y}) is outside image bounds {self._bounds}")
        self._data[y, x] = rgba

    def at(self, x: int, y: int) -> tuple[int, int, int, int]:
        if not self._bounds.contains(x, y):
            raise ValueError(f"Pixel ({x}, {y}) is outside image bounds {self._bounds}")
        r, g, b, a = self._data[y, x]
        return (
            int(r) * UINT8_TO_UINT16,
            int(g) * UINT8_TO_UINT16,
            int(b) * UINT8_TO_UINT16,
            int(a) * UINT8_TO_UINT16,
        )

    def pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        """Return the stored 8-bit (R, G, B, A) pixel."""
        r, g, b, a = self._data[y, x]
        return int(r), int(g), int(b), int(a)

    @property
    def data(self) -> np.ndarray:
        """uint8 RGBA array [H, W, 4]."""
        return self._data

    def __array__(self, dtype=None, copy=None) -> np.ndarray:
        # Widen to 16-bit so np.asarray() agrees with at()
        wide = self._data.astype(np.uint16) * UINT8_TO_UINT16
        return wide if dtype is None else wide.astype(dtype)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RGBAImage):
            return NotImplemented
        return self._bounds == other._bounds and np.array_equal(self._data, other._data)

    def __repr__(self) -> str:
        return f"RGBAImage({self._bounds.width}x{self._bounds.height})"


def read_pixels(source: PixelSource, max_value: int = MAX_VALUE_16) -> np.ndarray:
    """
    Read a pixel source into a normalized float array.

    ArrayImage and RGBAImage are read in one vectorized copy; any other
    PixelSource is read pixel by pixel through at().

    Args:
        source: Image to read
        max_value: Channel normalization divisor

    Returns:
        float64 array [H, W, 4] with channels in [0, 1]
    """
    if not isinstance(source, PixelSource):
        raise TypeError(
            f"source must implement bounds() and at(x, y), got {type(source).__name__}"
        )

    bounds = source.bounds()
    if isinstance(source, (ArrayImage, RGBAImage)):
        raw = np.asarray(source)
    else:
        logger.debug("[read_pixels] Reading %s pixel by pixel", type(source).__name__)
        raw = np.empty((bounds.height, bounds.width, 4), dtype=np.float64)
        for y in range(bounds.height):
            for x in range(bounds.width):
                raw[y, x] = source.at(x, y)

    return raw.astype(np.float64) / float(max_value)


def quantize(values: np.ndarray) -> np.ndarray:
    """
    Convert normalized channel values to 8 bits.

    Values are rounded to nearest and clamped to [0, 255].

    Args:
        values: Channel values, nominally in [0, 1]

    Returns:
        uint8 array of the same shape
    """
    return np.clip(np.floor(values * MAX_VALUE_8 + 0.5), 0, MAX_VALUE_8).astype(np.uint8)
