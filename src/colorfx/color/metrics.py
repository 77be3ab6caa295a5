"""
Color equality metrics and tolerances.

A metric maps colors to a feature vector (a channel subset or a derived
scalar) and a distance rule over it. Channel-subset metrics use the root mean
square channel difference, so every metric except CIELAB94 yields a distance
in [0, 1]. CIELAB94 is the raw Euclidean distance of the L*a*b* triples.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

import numpy as np

from colorfx.color import kernels
from colorfx.constants import DEFAULT_TOLERANCE


class ColorEqualityMetric(Enum):
    """Selects the channels or derived scalar two colors are compared on."""

    RGBA = "rgba"
    RGB = "rgb"
    R = "r"
    G = "g"
    B = "b"
    RG = "rg"
    RB = "rb"
    RA = "ra"
    GB = "gb"
    GA = "ga"
    BA = "ba"
    RGA = "rga"
    RBA = "rba"
    GBA = "gba"
    C = "c"
    M = "m"
    Y = "y"
    K = "k"
    ALPHA = "alpha"
    HUE = "hue"
    SATURATION = "saturation"
    LUMINANCE = "luminance"
    CIE_GRAY = "cie_gray"
    CIELAB94 = "cielab94"
    AVERAGE = "average"
    EUCLIDEAN_RGB_LENGTH = "euclidean_rgb_length"
    EUCLIDEAN_RGBA_LENGTH = "euclidean_rgba_length"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            key = value.strip().lower()
            for member in cls:
                if member.value == key or member.name.lower() == key:
                    return member
        return None


_CHANNEL_INDEX = {"r": 0, "g": 1, "b": 2, "a": 3}
_SQRT3 = math.sqrt(3.0)


def _channel_columns(metric: ColorEqualityMetric) -> list[int] | None:
    name = metric.value
    if name == "rgba":
        return [0, 1, 2, 3]
    if 1 <= len(name) <= 3 and set(name) <= set(_CHANNEL_INDEX):
        return [_CHANNEL_INDEX[ch] for ch in name]
    return None


def metric_features(rgba: np.ndarray, metric: ColorEqualityMetric | str) -> tuple[np.ndarray, int]:
    """
    Map colors to the feature space of a metric.

    Args:
        rgba: Normalized colors [N, 4] in (r, g, b, a) order
        metric: Metric (or its name)

    Returns:
        (features [N, K], distance kind) where kind is a ``kernels.DIST_*`` value
    """
    metric = ColorEqualityMetric(metric)
    rgba = np.ascontiguousarray(rgba, dtype=np.float64)

    columns = _channel_columns(metric)
    if columns is not None:
        return np.ascontiguousarray(rgba[:, columns]), kernels.DIST_RMS

    M = ColorEqualityMetric
    if metric in (M.C, M.M, M.Y, M.K):
        cmyk = kernels.rgb_to_cmyk_array(rgba)
        col = "cmyk".index(metric.value)
        return np.ascontiguousarray(cmyk[:, col : col + 1]), kernels.DIST_ABS
    if metric is M.ALPHA:
        return np.ascontiguousarray(rgba[:, 3:4]), kernels.DIST_ABS
    if metric in (M.HUE, M.SATURATION, M.LUMINANCE):
        hsl = kernels.rgb_to_hsl_array(rgba)
        col = (M.HUE, M.SATURATION, M.LUMINANCE).index(metric)
        kind = kernels.DIST_HUE if metric is M.HUE else kernels.DIST_ABS
        return np.ascontiguousarray(hsl[:, col : col + 1]), kind
    if metric is M.CIE_GRAY:
        return kernels.cie_gray_array(rgba)[:, None], kernels.DIST_ABS
    if metric is M.CIELAB94:
        return kernels.rgb_to_lab_array(rgba), kernels.DIST_EUCLID
    if metric is M.AVERAGE:
        return rgba[:, :3].mean(axis=1, keepdims=True), kernels.DIST_ABS
    if metric is M.EUCLIDEAN_RGB_LENGTH:
        return np.linalg.norm(rgba[:, :3], axis=1, keepdims=True) / _SQRT3, kernels.DIST_ABS
    # EUCLIDEAN_RGBA_LENGTH
    return np.linalg.norm(rgba, axis=1, keepdims=True) / 2.0, kernels.DIST_ABS


def color_distance(
    first: Sequence[float], second: Sequence[float], metric: ColorEqualityMetric | str
) -> float:
    """Distance between two normalized (r, g, b, a) tuples under ``metric``."""
    features, kind = metric_features(np.array([first, second], dtype=np.float64), metric)
    return float(kernels.feature_distance(features[0], features[1], kind))


@dataclass(frozen=True)
class ColorTolerance:
    """
    A metric paired with a maximum distance.

    Attributes:
        metric: Metric the distance is measured with
        tolerance: Inclusive distance threshold (>= 0)
    """

    metric: ColorEqualityMetric
    tolerance: float = DEFAULT_TOLERANCE

    def __post_init__(self):
        object.__setattr__(self, "metric", ColorEqualityMetric(self.metric))
        if isinstance(self.tolerance, bool) or not isinstance(self.tolerance, (int, float)):
            raise TypeError(f"tolerance must be a number, got {type(self.tolerance).__name__}")
        if not math.isfinite(self.tolerance) or self.tolerance < 0:
            raise ValueError(f"tolerance={self.tolerance} must be a non-negative, finite number")

    def matches(self, first: Sequence[float], second: Sequence[float]) -> bool:
        return color_distance(first, second, self.metric) <= self.tolerance


ColorTolerance.EXACT = ColorTolerance(ColorEqualityMetric.RGBA, 0.0)
ColorTolerance.RGBA_DEFAULT = ColorTolerance(ColorEqualityMetric.RGBA)
ColorTolerance.RGB_DEFAULT = ColorTolerance(ColorEqualityMetric.RGB)
ColorTolerance.CIELAB94_DEFAULT = ColorTolerance(ColorEqualityMetric.CIELAB94, 2.3)
