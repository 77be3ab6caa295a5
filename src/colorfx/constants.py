"""
Constants and default values for colorfx.

Centralizes colorimetric reference data and configuration defaults.
"""

from __future__ import annotations

import math

# =============================================================================
# Packed Color Layout
# =============================================================================

# Bit offsets of each channel inside a 0xAARRGGBB word
SHIFT_A = 24
SHIFT_R = 16
SHIFT_G = 8
SHIFT_B = 0

OPAQUE_MASK = 0xFF000000
RGB_MASK = 0x00FFFFFF
UINT32_MASK = 0xFFFFFFFF

# Short-hex thresholds for PackedColor.from_argb
SHORT_RGB_MAX = 0xFFF  # 0xRGB -> 0xFFRRGGBB
SHORT_ARGB_MAX = 0xFFFF  # 0xARGB -> 0xAARRGGBB
RGB24_MAX = 0xFFFFFF  # 0xRRGGBB -> 0xFFRRGGBB

# =============================================================================
# Colorimetry
# =============================================================================

TAU = 2.0 * math.pi

# sRGB transfer function
SRGB_GAMMA_CORRECTION_FACTOR = 2.2
SRGB_LINEAR_THRESHOLD = 0.04045
SRGB_ENCODED_THRESHOLD = 0.0031308

# Reference white (D65, 2 degree observer), Y normalized to 1
WHITE_X = 0.95047
WHITE_Y = 1.00000
WHITE_Z = 1.08883

# Linear sRGB -> XYZ (D65)
RGB_TO_XYZ = (
    (0.4124564, 0.3575761, 0.1804375),
    (0.2126729, 0.7151522, 0.0721750),
    (0.0193339, 0.1191920, 0.9503041),
)

# XYZ -> linear sRGB (D65)
XYZ_TO_RGB = (
    (3.2404542, -1.5371385, -0.4985314),
    (-0.9692660, 1.8760108, 0.0415560),
    (0.0556434, -0.2040259, 1.0572252),
)

# CIE L*a*b* companding constants
LAB_EPSILON = 216.0 / 24389.0
LAB_KAPPA = 24389.0 / 27.0

# Luma-chroma forward matrices (rows: Y, chroma1, chroma2) on [0, 1] RGB
YUV_MATRIX = (
    (0.299, 0.587, 0.114),
    (-0.14713, -0.28886, 0.436),
    (0.615, -0.51499, -0.10001),
)

YIQ_MATRIX = (
    (0.299, 0.587, 0.114),
    (0.5959, -0.2746, -0.3213),
    (0.2115, -0.5227, 0.3112),
)

# Full-range (JPEG) YCbCr, chroma offset by 0.5
YCBCR_MATRIX = (
    (0.299, 0.587, 0.114),
    (-0.168736, -0.331264, 0.5),
    (0.5, -0.418688, -0.081312),
)
YCBCR_OFFSET = (0.0, 0.5, 0.5)

# Luminance weights used by the saturation matrix
SATURATION_WEIGHTS = (0.3086, 0.6094, 0.0820)

SEPIA_MATRIX = (
    (0.393, 0.769, 0.189),
    (0.349, 0.686, 0.168),
    (0.272, 0.534, 0.131),
)

# =============================================================================
# Effect Defaults
# =============================================================================

DEFAULT_TOLERANCE = 0.5 / 255.0  # Half a quantization step
DEFAULT_CARTOON_STEPS = 8
MIN_CARTOON3_STEPS = 2
DEFAULT_EDGE_SENSITIVITY = 0.3
DEFAULT_BLUR_RADIUS = 1
MIN_RADIUS = 1e-9  # Radii below this are treated as degenerate

# Edge mask thresholds for Cartoon3
EDGE_LOW_CUTOFF = 0.3
EDGE_HIGH_CUTOFF = 0.9

# =============================================================================
# Execution
# =============================================================================

DEFAULT_CHUNK_SIZE = 65536  # Pixels per worker task
MIN_CHUNK_SIZE = 1
