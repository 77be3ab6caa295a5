"""
Scalar-to-color lookup maps.

DiscreteColorMap interpolates channel-wise between sorted stops;
ContinuousColorMap wraps a function. Both clamp lookups to [0, 1].
"""

from __future__ import annotations

import logging
from typing import TypeAlias
import math
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Sequence

import numpy as np

from colorfx.color import kernels
from colorfx.color.types import LinearColor, PackedColor, as_packed

logger = logging.getLogger(__name__)

ColorLike: TypeAlias = PackedColor | LinearColor | int | str


class ColorMap(ABC):
    """Maps a position in [0, 1] to a color."""

    __slots__ = ()

    @abstractmethod
    def sample(self, positions: np.ndarray) -> np.ndarray:
        """
        Vectorized lookup.

        Args:
            positions: Float positions of any shape (clamped to [0, 1], NaN -> 0)

        Returns:
            Packed uint32 colors of the same shape
        """

    def at(self, position: float) -> PackedColor:
        word = self.sample(np.array([position], dtype=np.float64))[0]
        return PackedColor.from_uint32(int(word))

    def __getitem__(self, position: float) -> PackedColor:
        return self.at(position)

    def at_range(self, value: float, low: float, high: float) -> PackedColor:
        """Look up ``value`` rescaled from [low, high] to [0, 1]."""
        if high == low:
            return self.at(0.0 if value < low else 1.0)
        return self.at((value - low) / (high - low))

    @staticmethod
    def uniform(colors: Sequence[ColorLike]) -> DiscreteColorMap:
        """Map with ``colors`` placed at ``i / (N - 1)``."""
        return DiscreteColorMap.uniform(colors)


def _clamp_positions(positions: np.ndarray) -> np.ndarray:
    positions = np.asarray(positions, dtype=np.float64)
    return np.clip(np.nan_to_num(positions, nan=0.0), 0.0, 1.0)


class DiscreteColorMap(ColorMap):
    """
    Piecewise-linear map over sorted (position, color) stops.

    Stops with equal positions keep their given order. Between two stops the
    channels (alpha included) are interpolated linearly and re-quantized.

    Example:
        >>> cmap = DiscreteColorMap.uniform([0xFF000000, 0xFFFFFFFF])
        >>> cmap[0.5]
        PackedColor(0xFF808080)
    """

    __slots__ = ("_positions", "_colors", "_rgba")

    def __init__(self, stops: Iterable[tuple[float, ColorLike]]):
        parsed = []
        for position, color in stops:
            position = float(position)
            if not math.isfinite(position) or not 0.0 <= position <= 1.0:
                raise ValueError(f"Stop position {position} is outside valid range [0.0, 1.0]")
            parsed.append((position, as_packed(color)))
        if not parsed:
            raise ValueError("DiscreteColorMap requires at least one stop")

        parsed.sort(key=lambda stop: stop[0])
        positions = np.array([p for p, _ in parsed], dtype=np.float64)
        words = np.array([c.argb for _, c in parsed], dtype=np.uint32)
        rgba = kernels.unpack_array(words)
        positions.flags.writeable = False
        rgba.flags.writeable = False

        self._positions = positions
        self._colors = tuple(c for _, c in parsed)
        self._rgba = rgba
        logger.debug("[ColorMap] Created discrete map with %d stops", len(parsed))

    @classmethod
    def uniform(cls, colors: Sequence[ColorLike]) -> DiscreteColorMap:
        colors = list(colors)
        if not colors:
            raise ValueError("DiscreteColorMap requires at least one color")
        if len(colors) == 1:
            return cls([(0.0, colors[0])])
        last = len(colors) - 1
        return cls([(i / last, c) for i, c in enumerate(colors)])

    @property
    def stops(self) -> tuple[tuple[float, PackedColor], ...]:
        return tuple(zip(self._positions.tolist(), self._colors))

    def sample(self, positions: np.ndarray) -> np.ndarray:
        s = _clamp_positions(positions)
        shape = s.shape
        flat = s.ravel()
        n = len(self._colors)
        if n == 1:
            return np.full(shape, self._colors[0].argb, dtype=np.uint32)

        lower = np.clip(np.searchsorted(self._positions, flat, side="right") - 1, 0, n - 2)
        p0 = self._positions[lower]
        span = self._positions[lower + 1] - p0
        safe_span = np.where(span > 0.0, span, 1.0)
        t = np.where(span > 0.0, (flat - p0) / safe_span, 1.0)
        t = np.clip(t, 0.0, 1.0)

        c0 = self._rgba[lower]
        c1 = self._rgba[lower + 1]
        rgba = c0 + (c1 - c0) * t[:, None]
        return kernels.pack_array(rgba).reshape(shape)

    def __repr__(self) -> str:
        inner = ", ".join(f"({p:g}, {c})" for p, c in self.stops)
        return f"DiscreteColorMap([{inner}])"


class ContinuousColorMap(ColorMap):
    """Map backed by a function of the clamped position."""

    __slots__ = ("_func",)

    def __init__(self, func: Callable[[float], ColorLike]):
        if not callable(func):
            raise TypeError(f"func must be callable, got {type(func).__name__}")
        self._func = func

    def sample(self, positions: np.ndarray) -> np.ndarray:
        s = _clamp_positions(positions)
        out = np.array([as_packed(self._func(float(p))).argb for p in s.ravel()], dtype=np.uint32)
        return out.reshape(s.shape)

    def __repr__(self) -> str:
        return f"ContinuousColorMap({self._func!r})"
