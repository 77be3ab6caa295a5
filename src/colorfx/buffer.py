"""
Pixel buffers and rectangular regions.

A PixelBuffer wraps a 2-D ``uint32`` array of shape ``(height, stride)``
holding 0xAARRGGBB words row-major; only the first ``width`` columns of each
row are visible. All index arithmetic over rows and stride lives here.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import numpy as np

from colorfx.color.types import LinearColor, PackedColor, as_packed

logger = logging.getLogger(__name__)

_LE_UINT32 = np.dtype("<u4")


@dataclass(frozen=True)
class Region:
    """
    Rectangle of pixels, ``x``/``y`` is the top-left corner.

    Attributes:
        x: Left column
        y: Top row
        width: Number of columns (>= 0)
        height: Number of rows (>= 0)
    """

    x: int
    y: int
    width: int
    height: int

    def __post_init__(self):
        for name in ("x", "y", "width", "height"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise TypeError(f"{name} must be int, got {type(value).__name__}")
            if value < 0:
                raise ValueError(f"{name}={value} must be >= 0")
            object.__setattr__(self, name, int(value))

    @classmethod
    def full(cls, width: int, height: int) -> Region:
        return cls(0, 0, width, height)

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def is_empty(self) -> bool:
        return self.area == 0

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def contains(self, x: int, y: int) -> bool:
        return self.x <= x < self.right and self.y <= y < self.bottom

    def clip(self, width: int, height: int) -> Region:
        """Intersect with a ``width`` x ``height`` canvas."""
        x0 = min(self.x, width)
        y0 = min(self.y, height)
        return Region(x0, y0, max(0, min(self.right, width) - x0), max(0, min(self.bottom, height) - y0))


class PixelBuffer:
    """
    Mutable grid of packed colors with explicit width, height and stride.

    Example:
        >>> buf = PixelBuffer(2, 1, fill=0xFFFF0000)
        >>> buf[1, 0]
        PackedColor(0xFFFF0000)
    """

    __slots__ = ("_data", "_width")

    def __init__(
        self,
        width: int,
        height: int,
        fill: PackedColor | LinearColor | int | str = 0,
        *,
        stride: int | None = None,
    ):
        stride = width if stride is None else stride
        if width < 0 or height < 0:
            raise ValueError(f"Buffer size {width}x{height} must be non-negative")
        if stride < width:
            raise ValueError(f"stride={stride} must be >= width={width}")
        self._data = np.full((height, stride), as_packed(fill).argb, dtype=np.uint32)
        self._width = width

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_array(cls, array: np.ndarray, width: int | None = None, *, copy: bool = False) -> PixelBuffer:
        """
        Wrap a 2-D array of packed words (no copy when already C-contiguous uint32).

        Args:
            array: Packed colors [height, stride]
            width: Visible width (default: full stride)
            copy: Always copy the data

        Returns:
            PixelBuffer sharing memory with ``array`` unless a copy was needed
        """
        array = np.asarray(array)
        if array.ndim != 2:
            raise ValueError(f"Expected a 2-D array [height, stride], got shape {array.shape}")
        if copy:
            data = np.array(array, dtype=np.uint32, order="C")
        else:
            data = np.ascontiguousarray(array, dtype=np.uint32)
        width = data.shape[1] if width is None else width
        if not 0 <= width <= data.shape[1]:
            raise ValueError(f"width={width} must be in [0, {data.shape[1]}]")

        buf = cls.__new__(cls)
        buf._data = data
        buf._width = width
        return buf

    @classmethod
    def from_colors(cls, rows: Sequence[Sequence[PackedColor | LinearColor | int | str]]) -> PixelBuffer:
        """Build from nested rows of color-like values (all rows equally long)."""
        rows = [list(row) for row in rows]
        width = len(rows[0]) if rows else 0
        if any(len(row) != width for row in rows):
            raise ValueError("All rows must have the same length")
        words = np.array([[as_packed(c).argb for c in row] for row in rows], dtype=np.uint32)
        return cls.from_array(words.reshape(len(rows), width))

    @classmethod
    def from_bytes(cls, data: bytes, width: int, height: int, stride: int | None = None) -> PixelBuffer:
        """
        Decode little-endian B, G, R, A bytes.

        Args:
            data: Raw bytes, ``4 * stride * height`` long
            width: Visible width
            height: Row count
            stride: Row length in pixels (default: width)
        """
        stride = width if stride is None else stride
        expected = 4 * stride * height
        if len(data) != expected:
            raise ValueError(f"Expected {expected} bytes for {stride}x{height}, got {len(data)}")
        words = np.frombuffer(data, dtype=_LE_UINT32).astype(np.uint32).reshape(height, stride)
        return cls.from_array(words, width)

    def to_bytes(self) -> bytes:
        """Encode as little-endian B, G, R, A bytes (full stride)."""
        return self._data.astype(_LE_UINT32, copy=False).tobytes()

    def copy(self) -> PixelBuffer:
        return PixelBuffer.from_array(self._data, self._width, copy=True)

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._data.shape[0]

    @property
    def stride(self) -> int:
        return self._data.shape[1]

    @property
    def size(self) -> int:
        """Number of visible pixels."""
        return self._width * self.height

    @property
    def full_region(self) -> Region:
        return Region(0, 0, self._width, self.height)

    @property
    def data(self) -> np.ndarray:
        """Backing array [height, stride]."""
        return self._data

    @property
    def pixels(self) -> np.ndarray:
        """View of the visible pixels [height, width]."""
        return self._data[:, : self._width]

    @property
    def flat(self) -> np.ndarray:
        """1-D view of the backing array, indexed by ``y * stride + x``."""
        return self._data.reshape(-1)

    def check_region(self, region: Region | None) -> Region:
        """Return ``region`` (default: whole buffer), verifying it lies inside the buffer."""
        if region is None:
            return self.full_region
        if not isinstance(region, Region):
            raise TypeError(f"region must be Region, got {type(region).__name__}")
        if region.right > self._width or region.bottom > self.height:
            raise ValueError(
                f"{region} exceeds buffer bounds {self._width}x{self.height}. "
                f"Use region.clip(width, height) to intersect it."
            )
        return region

    def region_coordinates(self, region: Region | None = None) -> tuple[np.ndarray, np.ndarray]:
        """Row-major (xs, ys) int64 coordinates of every pixel in ``region``."""
        region = self.check_region(region)
        ys, xs = np.mgrid[region.y : region.bottom, region.x : region.right]
        return xs.ravel().astype(np.int64), ys.ravel().astype(np.int64)

    def region_indices(self, region: Region | None = None) -> np.ndarray:
        """Row-major flat indices (``y * stride + x``) of every pixel in ``region``."""
        xs, ys = self.region_coordinates(region)
        return ys * self.stride + xs

    def coordinates_of(self, indices: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        """Inverse of ``region_indices``: (xs, ys) for flat indices."""
        indices = np.asarray(indices, dtype=np.int64)
        return indices % self.stride, indices // self.stride

    # ------------------------------------------------------------------
    # Pixel access
    # ------------------------------------------------------------------

    def _check_xy(self, key) -> tuple[int, int]:
        if not isinstance(key, tuple) or len(key) != 2:
            raise TypeError("PixelBuffer is indexed by (x, y)")
        x, y = int(key[0]), int(key[1])
        if not (0 <= x < self._width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside buffer {self._width}x{self.height}")
        return x, y

    def __getitem__(self, key: tuple[int, int]) -> PackedColor:
        x, y = self._check_xy(key)
        return PackedColor.from_uint32(int(self._data[y, x]))

    def __setitem__(self, key: tuple[int, int], color: PackedColor | LinearColor | int | str) -> None:
        x, y = self._check_xy(key)
        self._data[y, x] = as_packed(color).argb

    def iter_colors(self) -> Iterable[PackedColor]:
        for word in self.pixels.ravel():
            yield PackedColor.from_uint32(int(word))

    def __eq__(self, other) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return (
            self._width == other._width
            and self.height == other.height
            and bool(np.array_equal(self.pixels, other.pixels))
        )

    __hash__ = None

    def __repr__(self) -> str:
        stride = f", stride={self.stride}" if self.stride != self._width else ""
        return f"PixelBuffer({self._width}x{self.height}{stride})"
