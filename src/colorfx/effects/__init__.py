"""
Buffer effects: per-color adjustments, mappings, generators and region filters.
"""

from colorfx.effects.adjust import (
    Brightness,
    Cartoon,
    Contrast,
    EdgeThreshold,
    GammaCorrect,
    Grayscale,
    HSLtoRGB,
    Hue,
    Invert,
    Opacity,
    RGBtoHSL,
    RGBtoSRGB,
    Saturation,
    Sepia,
    SRGBtoRGB,
)
from colorfx.effects.base import (
    AcceleratedEffect,
    ChainedEffect,
    ColorEffect,
    CoordinateColorEffect,
    DelegatedColorEffect,
    Effect,
    Gradient,
    PerColorEffect,
    RGBAMatrixEffect,
    RGBMatrixEffect,
)
from colorfx.effects.gradients import (
    ConstantColor,
    HyperbolicGradient,
    LinearGradient,
    MultiPointGradient,
    NoiseEffect,
    NoiseMode,
    RadialGradient,
    VectorNorm,
    VoronoiGradient,
)
from colorfx.effects.mapping import (
    Colorize,
    ColorSpaceReductionError,
    Duotone,
    Multitone,
    ReduceColorSpace,
    RemoveColor,
    ReplaceColor,
    Tritone,
)
from colorfx.effects.region import BitmapBlend, BoxBlur, Cartoon2, Cartoon3, ConvolutionEffect

__all__ = [
    # Base classes
    "Effect",
    "AcceleratedEffect",
    "ColorEffect",
    "PerColorEffect",
    "DelegatedColorEffect",
    "RGBAMatrixEffect",
    "RGBMatrixEffect",
    "CoordinateColorEffect",
    "Gradient",
    "ChainedEffect",
    # Adjustments
    "Invert",
    "Grayscale",
    "Opacity",
    "Brightness",
    "Saturation",
    "Contrast",
    "Sepia",
    "Hue",
    "GammaCorrect",
    "RGBtoSRGB",
    "SRGBtoRGB",
    "RGBtoHSL",
    "HSLtoRGB",
    "Cartoon",
    "EdgeThreshold",
    # Mappings
    "ReplaceColor",
    "RemoveColor",
    "ReduceColorSpace",
    "ColorSpaceReductionError",
    "Colorize",
    "Multitone",
    "Duotone",
    "Tritone",
    # Generators
    "VectorNorm",
    "NoiseMode",
    "ConstantColor",
    "LinearGradient",
    "RadialGradient",
    "MultiPointGradient",
    "HyperbolicGradient",
    "VoronoiGradient",
    "NoiseEffect",
    # Region effects
    "ConvolutionEffect",
    "BoxBlur",
    "BitmapBlend",
    "Cartoon2",
    "Cartoon3",
]
