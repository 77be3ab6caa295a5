"""
Color model: packed and float colors, colorspace conversions, metrics,
palettes and color maps.
"""

from colorfx.color.colormap import ColorMap, ContinuousColorMap, DiscreteColorMap
from colorfx.color.metrics import ColorEqualityMetric, ColorTolerance, color_distance
from colorfx.color.palette import Palette
from colorfx.color.types import (
    BLACK,
    BLUE,
    CYAN,
    GRAY,
    GREEN,
    MAGENTA,
    RED,
    TRANSPARENT,
    WHITE,
    YELLOW,
    ColorChannel,
    LinearColor,
    PackedColor,
    as_packed,
)

__all__ = [
    "PackedColor",
    "LinearColor",
    "ColorChannel",
    "as_packed",
    "ColorEqualityMetric",
    "ColorTolerance",
    "color_distance",
    "Palette",
    "ColorMap",
    "DiscreteColorMap",
    "ContinuousColorMap",
    "TRANSPARENT",
    "BLACK",
    "WHITE",
    "RED",
    "GREEN",
    "BLUE",
    "YELLOW",
    "CYAN",
    "MAGENTA",
    "GRAY",
]
