"""
Color mapping effects: replacement, palette reduction and tone mapping.
"""

from __future__ import annotations

import logging
from typing import TypeAlias
import numbers
from collections.abc import Iterable, Sequence

import numpy as np

from colorfx.color import kernels as color_kernels
from colorfx.color.colormap import ColorMap, DiscreteColorMap
from colorfx.color.metrics import ColorEqualityMetric, ColorTolerance, metric_features
from colorfx.color.palette import Palette
from colorfx.color.types import BLACK, TRANSPARENT, WHITE, LinearColor, PackedColor, as_packed
from colorfx.effects.base import ColorEffect
from colorfx.validators import validate_type

logger = logging.getLogger(__name__)

ColorLike: TypeAlias = PackedColor | LinearColor | int | str

_SINGLE_COLOR = (PackedColor, LinearColor, numbers.Integral, str)


def _as_palette(palette: Palette | Iterable[ColorLike]) -> Palette:
    return palette if isinstance(palette, Palette) else Palette(palette)


def _unique_rgba(words: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Distinct words, the index mapping back to ``words`` and their channels."""
    unique, inverse = np.unique(words, return_inverse=True)
    return unique, inverse.reshape(-1), color_kernels.unpack_array(np.ascontiguousarray(unique))


# ============================================================================
# Replacement
# ============================================================================


class ReplaceColor(ColorEffect):
    """
    Replace colors matching a search color within a tolerance.

    Pairs are tested in order; the first matching pair wins. Colors matching
    no pair pass through unchanged.

    Args:
        search: Color (or colors) to look for
        replace: Replacement color
        tolerance: Metric and maximum distance (default: RGB, half a quantization step)

    Example:
        >>> effect = ReplaceColor(RED, BLUE, ColorTolerance("rgb", 0.1))
        >>> effect.process_color(PackedColor(250, 5, 5))
        PackedColor(0xFF0000FF)
    """

    __slots__ = ("_pairs", "_tolerance")

    def __init__(
        self,
        search: ColorLike | Iterable[ColorLike],
        replace: ColorLike,
        tolerance: ColorTolerance = ColorTolerance.RGB_DEFAULT,
    ):
        if isinstance(search, _SINGLE_COLOR):
            search = [search]
        self._init_pairs([(s, replace) for s in search], tolerance)

    @classmethod
    def from_pairs(
        cls,
        pairs: Iterable[tuple[ColorLike, ColorLike]],
        tolerance: ColorTolerance = ColorTolerance.RGB_DEFAULT,
    ) -> ReplaceColor:
        """Build from explicit (search, replace) pairs."""
        effect = cls.__new__(cls)
        effect._init_pairs(pairs, tolerance)
        return effect

    def _init_pairs(self, pairs, tolerance):
        if not isinstance(tolerance, ColorTolerance):
            raise TypeError(f"tolerance must be ColorTolerance, got {type(tolerance).__name__}")
        self._pairs = tuple((as_packed(s), as_packed(r)) for s, r in pairs)
        self._tolerance = tolerance

    @property
    def pairs(self) -> tuple[tuple[PackedColor, PackedColor], ...]:
        return self._pairs

    @property
    def tolerance(self) -> ColorTolerance:
        return self._tolerance

    def process_colors(self, words):
        out = np.array(words, dtype=np.uint32)
        if not self._pairs or out.size == 0:
            return out

        metric = self._tolerance.metric
        features, kind = metric_features(color_kernels.unpack_array(out), metric)
        searches = np.array([s.argb for s, _ in self._pairs], dtype=np.uint32)
        search_features, _ = metric_features(color_kernels.unpack_array(searches), metric)

        pending = np.ones(out.shape[0], dtype=bool)
        for j, (_, replace) in enumerate(self._pairs):
            dist = color_kernels.distances_to(search_features[j], features, kind)
            hit = pending & (dist <= self._tolerance.tolerance)
            out[hit] = replace.argb
            pending &= ~hit
        return out

    def __repr__(self) -> str:
        pairs = ", ".join(f"({s}, {r})" for s, r in self._pairs)
        return f"{self.name}([{pairs}], {self._tolerance})"


class RemoveColor(ReplaceColor):
    """Make colors matching ``color`` (within ``tolerance``) fully transparent."""

    __slots__ = ()

    def __init__(
        self,
        color: ColorLike | Iterable[ColorLike],
        tolerance: ColorTolerance = ColorTolerance.RGB_DEFAULT,
    ):
        super().__init__(color, TRANSPARENT, tolerance)


# ============================================================================
# Palette Reduction
# ============================================================================


class ReduceColorSpace(ColorEffect):
    """
    Quantize every color to its nearest palette entry.

    Ties resolve to the earliest palette entry, so results never depend on
    chunking or thread scheduling.

    Args:
        palette: Target palette (or colors to build one from)
        metric: Distance metric used for the search
    """

    __slots__ = ("_palette", "_metric", "_words")

    def __init__(
        self,
        palette: Palette | Iterable[ColorLike],
        metric: ColorEqualityMetric | str = ColorEqualityMetric.RGB,
    ):
        self._palette = _as_palette(palette)
        self._metric = ColorEqualityMetric(metric)
        words = np.array([c.argb for c in self._palette], dtype=np.uint32)
        words.flags.writeable = False
        self._words = words
        logger.debug(
            "[ReduceColorSpace] %d palette entries, metric=%s", len(self._palette), self._metric.value
        )

    @property
    def palette(self) -> Palette:
        return self._palette

    @property
    def metric(self) -> ColorEqualityMetric:
        return self._metric

    def process_colors(self, words):
        unique, inverse, rgba = _unique_rgba(words)
        idx, _ = self._palette.nearest_indices(rgba, self._metric)
        return self._words[idx][inverse]

    def __repr__(self) -> str:
        return f"{self.name}({self._palette!r}, {self._metric.value!r})"


class ColorSpaceReductionError(ReduceColorSpace):
    """
    Visualize the quantization error of ReduceColorSpace.

    Each pixel becomes an opaque gray whose level is the distance to the
    nearest palette entry (saturated at 1).
    """

    __slots__ = ()

    def process_colors(self, words):
        unique, inverse, rgba = _unique_rgba(words)
        _, dist = self._palette.nearest_indices(rgba, self._metric)
        level = (np.clip(dist, 0.0, 1.0) * 255.0).astype(np.uint32)
        gray = np.uint32(0xFF000000) | (level << 16) | (level << 8) | level
        return gray.astype(np.uint32)[inverse]


# ============================================================================
# Tone Mapping
# ============================================================================


class Colorize(ColorEffect):
    """Look up each color's R, G, B average in a color map."""

    __slots__ = ("_map",)

    @validate_type(ColorMap, "color_map")
    def __init__(self, color_map: ColorMap):
        self._map = color_map

    @property
    def color_map(self) -> ColorMap:
        return self._map

    def process_colors(self, words):
        rgba = color_kernels.unpack_array(np.ascontiguousarray(words))
        return self._map.sample(rgba[:, :3].mean(axis=1))

    def __repr__(self) -> str:
        return f"Colorize({self._map!r})"


class Multitone(Colorize):
    """
    Map the average brightness onto ``black -> tones... -> white``.

    Args:
        tones: Intermediate colors, placed uniformly between the end points
        black: Color for average 0
        white: Color for average 1
    """

    __slots__ = ("_black", "_tones", "_white")

    def __init__(
        self,
        tones: Sequence[ColorLike] = (),
        black: ColorLike = BLACK,
        white: ColorLike = WHITE,
    ):
        self._black = as_packed(black)
        self._tones = tuple(as_packed(t) for t in tones)
        self._white = as_packed(white)
        super().__init__(DiscreteColorMap.uniform([self._black, *self._tones, self._white]))

    @property
    def tones(self) -> tuple[PackedColor, ...]:
        return self._tones

    def __repr__(self) -> str:
        tones = ", ".join(str(t) for t in self._tones)
        return f"{self.name}([{tones}], black={self._black}, white={self._white})"


class Duotone(Multitone):
    """Two-color map from ``black`` to ``tint``."""

    __slots__ = ()

    def __init__(self, tint: ColorLike, black: ColorLike = BLACK):
        super().__init__((), black, tint)

    def __repr__(self) -> str:
        return f"Duotone({self._white}, black={self._black})"


class Tritone(Multitone):
    """Three-color map ``black -> tint -> white``."""

    __slots__ = ()

    def __init__(self, tint: ColorLike, black: ColorLike = BLACK, white: ColorLike = WHITE):
        super().__init__((tint,), black, white)
