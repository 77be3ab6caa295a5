"""
Coordinate generators: constant fills, gradients, Voronoi cells and noise.

Generators compute a color from the pixel position alone; Gradient subclasses
then composite it over the source pixel with their BlendMode.
"""

from __future__ import annotations

import logging
from typing import TypeAlias
import math
from collections.abc import Iterable, Sequence
from enum import STRICT, Enum, IntFlag

import numpy as np

from colorfx.blend.modes import BlendMode
from colorfx.color import kernels as color_kernels
from colorfx.color.colormap import ColorMap, DiscreteColorMap
from colorfx.color.types import LinearColor, PackedColor, as_packed
from colorfx.constants import MIN_RADIUS
from colorfx.effects import kernels
from colorfx.effects.base import CoordinateColorEffect, Gradient
from colorfx.seeding import normalize_seed
from colorfx.validators import validate_finite

logger = logging.getLogger(__name__)

ColorLike: TypeAlias = PackedColor | LinearColor | int | str
Point: TypeAlias = tuple[float, float]


class VectorNorm(Enum):
    """Distance used between a pixel and a gradient point."""

    EUCLIDEAN = "euclidean"
    MANHATTAN = "manhattan"
    CHEBYSHEV = "chebyshev"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            key = value.strip().lower()
            for member in cls:
                if member.value == key:
                    return member
        return None

    def distances(self, dx: np.ndarray, dy: np.ndarray) -> np.ndarray:
        """Norm of the offset vectors (dx, dy), elementwise."""
        if self is VectorNorm.MANHATTAN:
            return np.abs(dx) + np.abs(dy)
        if self is VectorNorm.CHEBYSHEV:
            return np.maximum(np.abs(dx), np.abs(dy))
        return np.hypot(dx, dy)


class NoiseMode(IntFlag, boundary=STRICT):
    """Noise flags; REGULAR draws independent R, G and B and keeps alpha."""

    REGULAR = 0
    GRAYSCALE = 1
    ALPHA_NOISE = 2


def _as_colormap(colors: ColorMap | Sequence[ColorLike]) -> ColorMap:
    if isinstance(colors, ColorMap):
        return colors
    return DiscreteColorMap.uniform(list(colors))


def _as_point(point) -> tuple[float, float]:
    x, y = (float(v) for v in point)
    if not (math.isfinite(x) and math.isfinite(y)):
        raise ValueError(f"Point {point} must have finite coordinates")
    return x, y


def _parse_points(points: Iterable[tuple[Point, ColorLike]]) -> tuple[np.ndarray, np.ndarray, tuple]:
    """Split (position, color) pairs into positions [P, 2], channels [P, 4] and colors."""
    parsed = [(_as_point(pos), as_packed(color)) for pos, color in points]
    if not parsed:
        raise ValueError("At least one point has to be provided")
    positions = np.array([p for p, _ in parsed], dtype=np.float64)
    colors = tuple(c for _, c in parsed)
    rgba = color_kernels.unpack_array(np.array([c.argb for c in colors], dtype=np.uint32))
    positions.flags.writeable = False
    rgba.flags.writeable = False
    return positions, rgba, colors


def _point_distances(positions: np.ndarray, xs: np.ndarray, ys: np.ndarray, norm: VectorNorm) -> np.ndarray:
    """Distances [N, P] from each pixel to each point."""
    dx = xs[:, None].astype(np.float64) - positions[None, :, 0]
    dy = ys[:, None].astype(np.float64) - positions[None, :, 1]
    return norm.distances(dx, dy)


# ============================================================================
# Gradients
# ============================================================================


class ConstantColor(Gradient):
    """Fill with one color."""

    __slots__ = ("_color",)

    def __init__(self, color: ColorLike, blending: BlendMode | str = BlendMode.TOP, seed: int = 0):
        super().__init__(blending, seed)
        self._color = as_packed(color)

    @property
    def color(self) -> PackedColor:
        return self._color

    def generate_array(self, xs, ys, width, height):
        return np.full(xs.shape[0], self._color.argb, dtype=np.uint32)

    def __repr__(self) -> str:
        return f"ConstantColor({self._color}, {self.blending.name})"


class LinearGradient(Gradient):
    """
    Gradient along the line from ``start`` to ``end``.

    Each pixel is projected onto the line; positions before ``start`` get the
    first map color, positions past ``end`` the last.

    Args:
        start: Position mapped to 0
        end: Position mapped to 1 (must differ from ``start``)
        colors: ColorMap, or colors spread uniformly
    """

    __slots__ = ("_start", "_end", "_map", "_direction", "_low", "_high")

    def __init__(
        self,
        start: Point,
        end: Point,
        colors: ColorMap | Sequence[ColorLike],
        blending: BlendMode | str = BlendMode.TOP,
        seed: int = 0,
    ):
        super().__init__(blending, seed)
        self._start = _as_point(start)
        self._end = _as_point(end)
        direction = np.subtract(self._end, self._start)
        if not np.any(direction):
            raise ValueError(f"start and end must differ, got {self._start}")
        self._map = _as_colormap(colors)
        self._direction = direction
        self._low = float(direction @ self._start)
        self._high = float(direction @ self._end)

    @property
    def color_map(self) -> ColorMap:
        return self._map

    def generate_array(self, xs, ys, width, height):
        progress = xs * self._direction[0] + ys * self._direction[1]
        return self._map.sample((progress - self._low) / (self._high - self._low))

    def __repr__(self) -> str:
        return f"LinearGradient({self._start}, {self._end}, {self._map!r})"


class RadialGradient(Gradient):
    """
    Gradient by distance from a center.

    Args:
        center: Center point (default: the buffer's midpoint)
        size: Radius mapped to 1 (default: half the buffer diagonal)
        colors: ColorMap, or colors spread uniformly
    """

    __slots__ = ("_center", "_size", "_map")

    def __init__(
        self,
        center: Point | None,
        size: float | None,
        colors: ColorMap | Sequence[ColorLike],
        blending: BlendMode | str = BlendMode.TOP,
        seed: int = 0,
    ):
        super().__init__(blending, seed)
        if size is not None:
            size = float(size)
            if not math.isfinite(size) or size < 0:
                raise ValueError(f"size={size} must be None or a non-negative, finite number")
        self._center = None if center is None else _as_point(center)
        self._size = size
        self._map = _as_colormap(colors)

    @property
    def color_map(self) -> ColorMap:
        return self._map

    def generate_array(self, xs, ys, width, height):
        mid = (width * 0.5, height * 0.5)
        cx, cy = self._center or mid
        size = math.hypot(*mid) if self._size is None else self._size
        if size <= MIN_RADIUS:
            return np.full(xs.shape[0], self._map.at(1.0).argb, dtype=np.uint32)
        return self._map.sample(np.hypot(xs - cx, ys - cy) / size)

    def __repr__(self) -> str:
        return f"RadialGradient({self._center}, {self._size}, {self._map!r})"


class MultiPointGradient(Gradient):
    """
    Inverse-distance weighted blend of colored points.

    Each point contributes with weight ``distance ** -power``. A pixel lying
    exactly on a point takes that point's color (the first such point).

    Args:
        points: (position, color) pairs, at least one
        power: Distance exponent
        norm: Distance norm
    """

    __slots__ = ("_positions", "_rgba", "_colors", "_power", "_norm")

    @validate_finite("power", 2)
    def __init__(
        self,
        points: Iterable[tuple[Point, ColorLike]],
        power: float = 1.0,
        norm: VectorNorm | str = VectorNorm.EUCLIDEAN,
        blending: BlendMode | str = BlendMode.TOP,
        seed: int = 0,
    ):
        super().__init__(blending, seed)
        self._positions, self._rgba, self._colors = _parse_points(points)
        self._power = float(power)
        self._norm = VectorNorm(norm)

    @property
    def points(self) -> tuple[tuple[Point, PackedColor], ...]:
        return tuple(zip(map(tuple, self._positions.tolist()), self._colors))

    def generate_array(self, xs, ys, width, height):
        dist = _point_distances(self._positions, xs, ys, self._norm)
        on_point = dist == 0.0
        exact = on_point.any(axis=1)

        # Weights are scaled by the nearest distance so large powers cannot overflow
        nearest = np.where(exact, 1.0, dist.min(axis=1))
        safe = np.where(on_point, 1.0, dist)
        weights = (nearest[:, None] / safe) ** self._power
        rgba = weights @ self._rgba / weights.sum(axis=1, keepdims=True)

        out = color_kernels.pack_array(np.ascontiguousarray(rgba))
        if exact.any():
            first = on_point[exact].argmax(axis=1)
            out[exact] = np.array([self._colors[i].argb for i in first], dtype=np.uint32)
        return out

    def __repr__(self) -> str:
        return f"MultiPointGradient({len(self._colors)} points, power={self._power:g}, {self._norm.value})"


class HyperbolicGradient(Gradient):
    """
    Interpolate between two colored points by ``d_from / (d_from + d_to)``.

    A pixel on both points (only possible when they coincide) gets the
    ``start`` color.
    """

    __slots__ = ("_start", "_end", "_start_color", "_end_color")

    def __init__(
        self,
        start: tuple[Point, ColorLike],
        end: tuple[Point, ColorLike],
        blending: BlendMode | str = BlendMode.TOP,
        seed: int = 0,
    ):
        super().__init__(blending, seed)
        self._start = _as_point(start[0])
        self._start_color = as_packed(start[1])
        self._end = _as_point(end[0])
        self._end_color = as_packed(end[1])

    def generate_array(self, xs, ys, width, height):
        f = np.hypot(xs - self._start[0], ys - self._start[1])
        t = np.hypot(xs - self._end[0], ys - self._end[1])
        total = f + t
        ratio = np.where(total > 0.0, f / np.where(total > 0.0, total, 1.0), 0.0)

        c0 = np.array(self._start_color.rgba)
        c1 = np.array(self._end_color.rgba)
        rgba = c0 + (c1 - c0) * ratio[:, None]
        return color_kernels.pack_array(np.ascontiguousarray(rgba))

    def __repr__(self) -> str:
        return (
            f"HyperbolicGradient(({self._start}, {self._start_color}), "
            f"({self._end}, {self._end_color}))"
        )


class VoronoiGradient(Gradient):
    """Color each pixel with its nearest point's color; ties go to the earlier point."""

    __slots__ = ("_positions", "_words", "_norm")

    def __init__(
        self,
        points: Iterable[tuple[Point, ColorLike]],
        norm: VectorNorm | str = VectorNorm.EUCLIDEAN,
        blending: BlendMode | str = BlendMode.TOP,
        seed: int = 0,
    ):
        super().__init__(blending, seed)
        positions, _, colors = _parse_points(points)
        self._positions = positions
        self._words = np.array([c.argb for c in colors], dtype=np.uint32)
        self._norm = VectorNorm(norm)

    def generate_array(self, xs, ys, width, height):
        dist = _point_distances(self._positions, xs, ys, self._norm)
        return self._words[dist.argmin(axis=1)]

    def __repr__(self) -> str:
        return f"VoronoiGradient({len(self._words)} points, {self._norm.value})"


# ============================================================================
# Noise
# ============================================================================


class NoiseEffect(CoordinateColorEffect):
    """
    Position-seeded random colors.

    Every pixel's value depends only on (seed, x, y), so serial and parallel
    application give identical buffers.

    Example:
        >>> noise = NoiseEffect(seed=7, mode=NoiseMode.GRAYSCALE)
        >>> noise(PixelBuffer(4, 4, fill=BLACK)) == noise(PixelBuffer(4, 4, fill=BLACK))
        True
    """

    __slots__ = ("_seed", "_mode")

    def __init__(self, seed: int = 0, mode: NoiseMode | int = NoiseMode.REGULAR):
        self._seed = normalize_seed(seed)
        self._mode = NoiseMode(mode)

    @property
    def seed(self) -> int:
        return int(self._seed)

    @property
    def mode(self) -> NoiseMode:
        return self._mode

    def process_coordinates(self, xs, ys, width, height, words):
        return kernels.noise(
            self._seed,
            np.ascontiguousarray(xs, dtype=np.int64),
            np.ascontiguousarray(ys, dtype=np.int64),
            np.ascontiguousarray(words, dtype=np.uint32),
            bool(self._mode & NoiseMode.GRAYSCALE),
            bool(self._mode & NoiseMode.ALPHA_NOISE),
        )

    def __repr__(self) -> str:
        return f"NoiseEffect(seed={self.seed}, mode={self._mode!r})"
