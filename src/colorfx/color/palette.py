"""
Palettes and nearest-color search.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

import numpy as np

from colorfx.color import kernels
from colorfx.color.metrics import ColorEqualityMetric, metric_features
from colorfx.color.types import LinearColor, PackedColor, as_packed

logger = logging.getLogger(__name__)


class Palette:
    """
    Immutable, ordered, non-empty set of colors used as quantization targets.

    Nearest-color search is a linear scan; ties resolve to the earliest entry.
    Instances are safe to read from many threads.

    Example:
        >>> palette = Palette([0xFF000000, 0xFFFFFFFF])
        >>> palette.get_nearest_color(PackedColor(200, 200, 200), "average")[0]
        PackedColor(0xFFFFFFFF)
    """

    __slots__ = ("_colors", "_rgba", "_features")

    def __init__(self, colors: Iterable[PackedColor | LinearColor | int | str]):
        packed = tuple(as_packed(c) for c in colors)
        if not packed:
            raise ValueError("Palette requires at least one color")

        words = np.array([c.argb for c in packed], dtype=np.uint32)
        rgba = kernels.unpack_array(words)
        rgba.flags.writeable = False

        self._colors = packed
        self._rgba = rgba
        self._features: dict[ColorEqualityMetric, tuple[np.ndarray, int]] = {}
        logger.debug("[Palette] Created with %d colors", len(packed))

    @property
    def colors(self) -> tuple[PackedColor, ...]:
        return self._colors

    @property
    def rgba(self) -> np.ndarray:
        """Read-only normalized channels [N, 4]."""
        return self._rgba

    def _entry_features(self, metric: ColorEqualityMetric) -> tuple[np.ndarray, int]:
        # Populated lazily; a racing duplicate computation stores an equal value
        cached = self._features.get(metric)
        if cached is None:
            features, kind = metric_features(self._rgba, metric)
            features.flags.writeable = False
            cached = (features, kind)
            self._features[metric] = cached
        return cached

    def get_nearest_color(
        self,
        color: PackedColor | LinearColor | int | str,
        metric: ColorEqualityMetric | str = ColorEqualityMetric.CIELAB94,
    ) -> tuple[PackedColor, float]:
        """
        Find the palette entry closest to ``color``.

        Args:
            color: Query color (LinearColor queries are not quantized)
            metric: Distance metric

        Returns:
            (matching entry, distance >= 0)
        """
        metric = ColorEqualityMetric(metric)
        if isinstance(color, LinearColor):
            query = np.array([color.rgba], dtype=np.float64)
        else:
            query = kernels.unpack_array(np.array([as_packed(color).argb], dtype=np.uint32))
        idx, dist = self.nearest_indices(query, metric)
        return self._colors[int(idx[0])], float(dist[0])

    def nearest_indices(
        self, rgba: np.ndarray, metric: ColorEqualityMetric | str = ColorEqualityMetric.CIELAB94
    ) -> tuple[np.ndarray, np.ndarray]:
        """
        Vectorized nearest-entry search.

        Args:
            rgba: Normalized query colors [M, 4]
            metric: Distance metric

        Returns:
            (entry indices [M], distances [M])
        """
        metric = ColorEqualityMetric(metric)
        entries, kind = self._entry_features(metric)
        queries, _ = metric_features(rgba, metric)
        return kernels.nearest_entries(queries, entries, kind)

    def __len__(self) -> int:
        return len(self._colors)

    def __getitem__(self, index: int) -> PackedColor:
        return self._colors[index]

    def __iter__(self) -> Iterator[PackedColor]:
        return iter(self._colors)

    def __contains__(self, color) -> bool:
        return color in self._colors

    def __eq__(self, other) -> bool:
        if isinstance(other, Palette):
            return self._colors == other._colors
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._colors)

    def __repr__(self) -> str:
        return f"Palette([{', '.join(str(c) for c in self._colors)}])"
