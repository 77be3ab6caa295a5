"""
Colorspace conversions on normalized channel floats.

Every ``rgb_to_X`` has a matching ``X_to_rgb``. Hue is expressed in radians
[0, 2pi). L*a*b* uses the D65 reference white with sRGB companding.

Scalar functions take and return plain floats/tuples; the ``*_array``
variants take ``[N, 3]`` (or wider) float arrays.
"""

from __future__ import annotations

import numpy as np

from colorfx.color import kernels
from colorfx.constants import (
    SRGB_GAMMA_CORRECTION_FACTOR,
    YCBCR_MATRIX,
    YCBCR_OFFSET,
    YIQ_MATRIX,
    YUV_MATRIX,
)
from colorfx.validators import validate_choices, validate_positive

# Kernels double as the scalar API
rgb_to_hsl = kernels.rgb_to_hsl
hsl_to_rgb = kernels.hsl_to_rgb
rgb_to_hsv = kernels.rgb_to_hsv
hsv_to_rgb = kernels.hsv_to_rgb
rgb_to_cmyk = kernels.rgb_to_cmyk
cmyk_to_rgb = kernels.cmyk_to_rgb
rgb_to_xyz = kernels.rgb_to_xyz
xyz_to_rgb = kernels.xyz_to_rgb
rgb_to_lab = kernels.rgb_to_lab
lab_to_rgb = kernels.lab_to_rgb
cie_gray = kernels.cie_gray
average = kernels.average

rgb_to_hsl_array = kernels.rgb_to_hsl_array
hsl_to_rgb_array = kernels.hsl_to_rgb_array
rgb_to_hsv_array = kernels.rgb_to_hsv_array
rgb_to_cmyk_array = kernels.rgb_to_cmyk_array
rgb_to_lab_array = kernels.rgb_to_lab_array
cie_gray_array = kernels.cie_gray_array

# ============================================================================
# Linear Luma/Chroma Spaces
# ============================================================================

_YUV = np.array(YUV_MATRIX, dtype=np.float64)
_YUV_INV = np.linalg.inv(_YUV)
_YIQ = np.array(YIQ_MATRIX, dtype=np.float64)
_YIQ_INV = np.linalg.inv(_YIQ)
_YCBCR = np.array(YCBCR_MATRIX, dtype=np.float64)
_YCBCR_INV = np.linalg.inv(_YCBCR)
_YCBCR_OFFSET = np.array(YCBCR_OFFSET, dtype=np.float64)
_ZERO = np.zeros(3, dtype=np.float64)

_MATRICES = {
    "yuv": (_YUV, _YUV_INV, _ZERO),
    "yiq": (_YIQ, _YIQ_INV, _ZERO),
    "ycbcr": (_YCBCR, _YCBCR_INV, _YCBCR_OFFSET),
}


def _forward(space: str, r: float, g: float, b: float) -> tuple[float, float, float]:
    matrix, _, offset = _MATRICES[space]
    out = matrix @ np.array((r, g, b), dtype=np.float64) + offset
    return float(out[0]), float(out[1]), float(out[2])


def _inverse(space: str, c0: float, c1: float, c2: float) -> tuple[float, float, float]:
    _, inverse, offset = _MATRICES[space]
    out = inverse @ (np.array((c0, c1, c2), dtype=np.float64) - offset)
    return float(out[0]), float(out[1]), float(out[2])


def rgb_to_yuv(r: float, g: float, b: float) -> tuple[float, float, float]:
    return _forward("yuv", r, g, b)


def yuv_to_rgb(y: float, u: float, v: float) -> tuple[float, float, float]:
    return _inverse("yuv", y, u, v)


def rgb_to_yiq(r: float, g: float, b: float) -> tuple[float, float, float]:
    return _forward("yiq", r, g, b)


def yiq_to_rgb(y: float, i: float, q: float) -> tuple[float, float, float]:
    return _inverse("yiq", y, i, q)


def rgb_to_ycbcr(r: float, g: float, b: float) -> tuple[float, float, float]:
    """Full-range YCbCr with Cb/Cr centred on 0.5."""
    return _forward("ycbcr", r, g, b)


def ycbcr_to_rgb(y: float, cb: float, cr: float) -> tuple[float, float, float]:
    return _inverse("ycbcr", y, cb, cr)


@validate_choices(set(_MATRICES), "space")
def rgb_to_space_array(rgb: np.ndarray, space: str) -> np.ndarray:
    """
    Vectorized forward transform for ``space`` in {"yuv", "yiq", "ycbcr"}.

    Args:
        rgb: RGB floats [N, >=3]
        space: Target space name

    Returns:
        Transformed channels [N, 3]
    """
    matrix, _, offset = _MATRICES[space]
    return rgb[:, :3] @ matrix.T + offset


@validate_choices(set(_MATRICES), "space")
def space_to_rgb_array(values: np.ndarray, space: str) -> np.ndarray:
    """Inverse of ``rgb_to_space_array``."""
    _, inverse, offset = _MATRICES[space]
    return (values[:, :3] - offset) @ inverse.T


# ============================================================================
# Gamma
# ============================================================================


@validate_positive("gamma")
def gamma_correct(channel: float, gamma: float) -> float:
    """Raise a normalized channel to ``gamma``."""
    return float(channel) ** gamma


@validate_positive("gamma")
def gamma_correct_array(channels: np.ndarray, gamma: float) -> np.ndarray:
    return np.power(np.clip(channels, 0.0, 1.0), gamma)


ENCODE_SRGB_GAMMA = 1.0 / SRGB_GAMMA_CORRECTION_FACTOR
DECODE_SRGB_GAMMA = SRGB_GAMMA_CORRECTION_FACTOR
