"""
colorfx - Color Model, Compositing and Pixel Effects

Packed 32-bit colors, colorspace conversions, blend modes and composable
per-pixel and per-region effects over raw pixel buffers.

Features:
- PackedColor (0xAARRGGBB) and LinearColor values with HSL/HSV/CMYK/YUV/YIQ/YCbCr/L*a*b* conversions
- Every common blend mode plus bitwise modes, with "over" alpha compositing
- Palettes with nearest-color search and discrete/continuous color maps
- Numba-compiled effects, chunked across a thread pool
- Deterministic, position-seeded noise and dissolve

Example - Effects:
    >>> from colorfx import PixelBuffer, Region
    >>> from colorfx.effects import BoxBlur, Sepia
    >>>
    >>> buf = PixelBuffer(64, 64, fill="#ff336699")
    >>> out = Sepia(0.8).then(BoxBlur(2))(buf, Region(8, 8, 32, 32))

Example - Pipeline:
    >>> from colorfx import Pipeline
    >>>
    >>> pipeline = Pipeline().grayscale().contrast(1.3).tritone("#2060c0")
    >>> out = pipeline(buf, inplace=True)

Example - Compositing:
    >>> from colorfx import BlendMode, composite, RED, BLUE
    >>> composite(RED, BLUE.with_alpha(128), BlendMode.SCREEN)
"""

__version__ = "0.1.0"

# Compositing
from colorfx.blend import BlendMode, composite, composite_array, dissolve_draws

# Buffers
from colorfx.buffer import PixelBuffer, Region

# Color model
from colorfx.color import (
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
    ColorEqualityMetric,
    ColorMap,
    ColorTolerance,
    ContinuousColorMap,
    DiscreteColorMap,
    LinearColor,
    PackedColor,
    Palette,
    as_packed,
)

# Execution settings
from colorfx.config import DEFAULT_EXECUTION, SERIAL, ExecutionConfig

# Effects
from colorfx.effects import ChainedEffect, Effect

# Unified pipeline
from colorfx.pipeline import Pipeline

# Protocols
from colorfx.protocols import BufferStage

__all__ = [
    # Version
    "__version__",
    # Color model
    "PackedColor",
    "LinearColor",
    "ColorChannel",
    "as_packed",
    "ColorEqualityMetric",
    "ColorTolerance",
    "Palette",
    "ColorMap",
    "DiscreteColorMap",
    "ContinuousColorMap",
    # Named colors
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
    # Compositing
    "BlendMode",
    "composite",
    "composite_array",
    "dissolve_draws",
    # Buffers
    "PixelBuffer",
    "Region",
    # Effects and pipeline
    "Effect",
    "ChainedEffect",
    "Pipeline",
    "BufferStage",
    # Execution
    "ExecutionConfig",
    "DEFAULT_EXECUTION",
    "SERIAL",
]
