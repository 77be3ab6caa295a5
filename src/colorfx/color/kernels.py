"""
Numba-compiled kernels for packed color arithmetic and colorspace conversion.

Scalar kernels operate on normalized [0, 1] channel floats and return tuples.
Array kernels loop over ``[N, 3]`` / ``[N, 4]`` float arrays and call the
scalar kernels, so scalar and vectorized results are bit-identical.
"""

import math

import numpy as np
from numba import njit

from colorfx.constants import (
    LAB_EPSILON,
    LAB_KAPPA,
    RGB_TO_XYZ,
    SRGB_ENCODED_THRESHOLD,
    SRGB_LINEAR_THRESHOLD,
    TAU,
    WHITE_X,
    WHITE_Y,
    WHITE_Z,
    XYZ_TO_RGB,
)

_RGB_TO_XYZ = np.array(RGB_TO_XYZ, dtype=np.float64)
_XYZ_TO_RGB = np.array(XYZ_TO_RGB, dtype=np.float64)
_SIXTH = math.pi / 3.0

# ============================================================================
# Quantization and Packing
# ============================================================================


@njit(cache=True, nogil=True)
def clamp01(x: float) -> float:
    """Clamp to [0, 1]; NaN maps to 0."""
    if not x >= 0.0:
        return 0.0
    if x > 1.0:
        return 1.0
    return x


@njit(cache=True, nogil=True)
def round_half_even(x: float) -> float:
    """Round to the nearest integer, ties to even (matches Python round)."""
    f = np.floor(x)
    d = x - f
    if d > 0.5:
        f += 1.0
    elif d == 0.5 and f % 2.0 == 1.0:
        f += 1.0
    return f


@njit(cache=True, nogil=True)
def quantize(x: float) -> int:
    """
    Map a normalized channel to an 8-bit level with round-half-to-even.

    Values are clamped to [0, 1] first, so the result is always in [0, 255].
    """
    return int(round_half_even(clamp01(x) * 255.0))


@njit(cache=True, nogil=True)
def pack(r: float, g: float, b: float, a: float) -> int:
    """Quantize four normalized channels into a 0xAARRGGBB word."""
    return (quantize(a) << 24) | (quantize(r) << 16) | (quantize(g) << 8) | quantize(b)


@njit(cache=True, nogil=True)
def unpack(argb: int) -> tuple[float, float, float, float]:
    """Split a 0xAARRGGBB word into normalized (r, g, b, a)."""
    a = ((argb >> 24) & 0xFF) / 255.0
    r = ((argb >> 16) & 0xFF) / 255.0
    g = ((argb >> 8) & 0xFF) / 255.0
    b = (argb & 0xFF) / 255.0
    return r, g, b, a


@njit(cache=True, nogil=True)
def unpack_array(words: np.ndarray) -> np.ndarray:
    """
    Unpack a 1-D uint32 array into normalized RGBA floats.

    Args:
        words: Packed colors [N]

    Returns:
        Float channels [N, 4] in (r, g, b, a) order
    """
    n = words.shape[0]
    out = np.empty((n, 4), dtype=np.float64)
    for i in range(n):
        w = np.int64(words[i])
        out[i, 0] = ((w >> 16) & 0xFF) / 255.0
        out[i, 1] = ((w >> 8) & 0xFF) / 255.0
        out[i, 2] = (w & 0xFF) / 255.0
        out[i, 3] = ((w >> 24) & 0xFF) / 255.0
    return out


@njit(cache=True, nogil=True)
def pack_array(rgba: np.ndarray) -> np.ndarray:
    """Quantize normalized RGBA floats [N, 4] into packed uint32 words [N]."""
    n = rgba.shape[0]
    out = np.empty(n, dtype=np.uint32)
    for i in range(n):
        out[i] = pack(rgba[i, 0], rgba[i, 1], rgba[i, 2], rgba[i, 3])
    return out


# ============================================================================
# Cylindrical Spaces (HSL / HSV)
# ============================================================================


@njit(cache=True, nogil=True)
def _hue(r: float, g: float, b: float, mx: float, delta: float) -> float:
    if delta <= 0.0:
        return 0.0
    if mx == r:
        h = ((g - b) / delta) % 6.0
    elif mx == g:
        h = (b - r) / delta + 2.0
    else:
        h = (r - g) / delta + 4.0
    h *= _SIXTH
    if h >= TAU:
        h -= TAU
    return h


@njit(cache=True, nogil=True)
def rgb_to_hsl(r: float, g: float, b: float) -> tuple[float, float, float]:
    """RGB -> (hue radians [0, 2pi), saturation, lightness)."""
    mx = max(r, max(g, b))
    mn = min(r, min(g, b))
    delta = mx - mn
    light = (mx + mn) / 2.0
    if delta <= 0.0:
        return 0.0, 0.0, light
    denom = 1.0 - abs(2.0 * light - 1.0)
    sat = delta / denom if denom > 0.0 else 0.0
    return _hue(r, g, b, mx, delta), clamp01(sat), light


@njit(cache=True, nogil=True)
def _chroma_to_rgb(h: float, c: float, m: float) -> tuple[float, float, float]:
    hp = (h % TAU) / _SIXTH
    x = c * (1.0 - abs(hp % 2.0 - 1.0))
    if hp < 1.0:
        r, g, b = c, x, 0.0
    elif hp < 2.0:
        r, g, b = x, c, 0.0
    elif hp < 3.0:
        r, g, b = 0.0, c, x
    elif hp < 4.0:
        r, g, b = 0.0, x, c
    elif hp < 5.0:
        r, g, b = x, 0.0, c
    else:
        r, g, b = c, 0.0, x
    return clamp01(r + m), clamp01(g + m), clamp01(b + m)


@njit(cache=True, nogil=True)
def hsl_to_rgb(h: float, s: float, light: float) -> tuple[float, float, float]:
    """(hue radians, saturation, lightness) -> RGB."""
    s = clamp01(s)
    light = clamp01(light)
    if s <= 0.0:
        return light, light, light
    c = (1.0 - abs(2.0 * light - 1.0)) * s
    return _chroma_to_rgb(h, c, light - c / 2.0)


@njit(cache=True, nogil=True)
def rgb_to_hsv(r: float, g: float, b: float) -> tuple[float, float, float]:
    """RGB -> (hue radians [0, 2pi), saturation, value)."""
    mx = max(r, max(g, b))
    mn = min(r, min(g, b))
    delta = mx - mn
    if mx <= 0.0:
        return 0.0, 0.0, 0.0
    return _hue(r, g, b, mx, delta), delta / mx, mx


@njit(cache=True, nogil=True)
def hsv_to_rgb(h: float, s: float, v: float) -> tuple[float, float, float]:
    """(hue radians, saturation, value) -> RGB."""
    s = clamp01(s)
    v = clamp01(v)
    if s <= 0.0:
        return v, v, v
    c = v * s
    return _chroma_to_rgb(h, c, v - c)


# ============================================================================
# CMYK
# ============================================================================


@njit(cache=True, nogil=True)
def rgb_to_cmyk(r: float, g: float, b: float) -> tuple[float, float, float, float]:
    """RGB -> (c, m, y, k); pure black yields (0, 0, 0, 1)."""
    k = 1.0 - max(r, max(g, b))
    if k >= 1.0:
        return 0.0, 0.0, 0.0, 1.0
    inv = 1.0 - k
    return (inv - r) / inv, (inv - g) / inv, (inv - b) / inv, k


@njit(cache=True, nogil=True)
def cmyk_to_rgb(c: float, m: float, y: float, k: float) -> tuple[float, float, float]:
    inv = 1.0 - clamp01(k)
    return (1.0 - clamp01(c)) * inv, (1.0 - clamp01(m)) * inv, (1.0 - clamp01(y)) * inv


# ============================================================================
# sRGB / XYZ / L*a*b*
# ============================================================================


@njit(cache=True, nogil=True)
def srgb_to_linear(c: float) -> float:
    """sRGB electro-optical transfer function (companding removed)."""
    if c <= SRGB_LINEAR_THRESHOLD:
        return c / 12.92
    return ((c + 0.055) / 1.055) ** 2.4


@njit(cache=True, nogil=True)
def linear_to_srgb(c: float) -> float:
    if c <= SRGB_ENCODED_THRESHOLD:
        return c * 12.92
    return 1.055 * c ** (1.0 / 2.4) - 0.055


@njit(cache=True, nogil=True)
def rgb_to_xyz(r: float, g: float, b: float) -> tuple[float, float, float]:
    """sRGB -> CIE XYZ (D65), Y of reference white = 1."""
    lr = srgb_to_linear(r)
    lg = srgb_to_linear(g)
    lb = srgb_to_linear(b)
    m = _RGB_TO_XYZ
    x = m[0, 0] * lr + m[0, 1] * lg + m[0, 2] * lb
    y = m[1, 0] * lr + m[1, 1] * lg + m[1, 2] * lb
    z = m[2, 0] * lr + m[2, 1] * lg + m[2, 2] * lb
    return x, y, z


@njit(cache=True, nogil=True)
def xyz_to_rgb(x: float, y: float, z: float) -> tuple[float, float, float]:
    m = _XYZ_TO_RGB
    lr = m[0, 0] * x + m[0, 1] * y + m[0, 2] * z
    lg = m[1, 0] * x + m[1, 1] * y + m[1, 2] * z
    lb = m[2, 0] * x + m[2, 1] * y + m[2, 2] * z
    return (
        clamp01(linear_to_srgb(clamp01(lr))),
        clamp01(linear_to_srgb(clamp01(lg))),
        clamp01(linear_to_srgb(clamp01(lb))),
    )


@njit(cache=True, nogil=True)
def _lab_f(t: float) -> float:
    if t > LAB_EPSILON:
        return t ** (1.0 / 3.0)
    return (LAB_KAPPA * t + 16.0) / 116.0


@njit(cache=True, nogil=True)
def _lab_f_inv(f: float) -> float:
    t = f * f * f
    if t > LAB_EPSILON:
        return t
    return (116.0 * f - 16.0) / LAB_KAPPA


@njit(cache=True, nogil=True)
def rgb_to_lab(r: float, g: float, b: float) -> tuple[float, float, float]:
    """sRGB -> CIE L*a*b* (D65). L in [0, 100]."""
    x, y, z = rgb_to_xyz(r, g, b)
    fx = _lab_f(x / WHITE_X)
    fy = _lab_f(y / WHITE_Y)
    fz = _lab_f(z / WHITE_Z)
    return 116.0 * fy - 16.0, 500.0 * (fx - fy), 200.0 * (fy - fz)


@njit(cache=True, nogil=True)
def lab_to_rgb(lightness: float, a: float, b: float) -> tuple[float, float, float]:
    fy = (lightness + 16.0) / 116.0
    fx = fy + a / 500.0
    fz = fy - b / 200.0
    return xyz_to_rgb(_lab_f_inv(fx) * WHITE_X, _lab_f_inv(fy) * WHITE_Y, _lab_f_inv(fz) * WHITE_Z)


@njit(cache=True, nogil=True)
def cie_gray(r: float, g: float, b: float) -> float:
    """Perceptual gray: L* / 100, clamped to [0, 1]."""
    lightness, _, _ = rgb_to_lab(r, g, b)
    return clamp01(lightness / 100.0)


@njit(cache=True, nogil=True)
def average(r: float, g: float, b: float) -> float:
    return (r + g + b) / 3.0


# ============================================================================
# Array Conversions
# ============================================================================


@njit(cache=True, nogil=True)
def rgb_to_hsl_array(rgb: np.ndarray) -> np.ndarray:
    """Convert [N, >=3] RGB floats to [N, 3] HSL."""
    n = rgb.shape[0]
    out = np.empty((n, 3), dtype=np.float64)
    for i in range(n):
        out[i, 0], out[i, 1], out[i, 2] = rgb_to_hsl(rgb[i, 0], rgb[i, 1], rgb[i, 2])
    return out


@njit(cache=True, nogil=True)
def hsl_to_rgb_array(hsl: np.ndarray) -> np.ndarray:
    n = hsl.shape[0]
    out = np.empty((n, 3), dtype=np.float64)
    for i in range(n):
        out[i, 0], out[i, 1], out[i, 2] = hsl_to_rgb(hsl[i, 0], hsl[i, 1], hsl[i, 2])
    return out


@njit(cache=True, nogil=True)
def rgb_to_hsv_array(rgb: np.ndarray) -> np.ndarray:
    n = rgb.shape[0]
    out = np.empty((n, 3), dtype=np.float64)
    for i in range(n):
        out[i, 0], out[i, 1], out[i, 2] = rgb_to_hsv(rgb[i, 0], rgb[i, 1], rgb[i, 2])
    return out


@njit(cache=True, nogil=True)
def rgb_to_cmyk_array(rgb: np.ndarray) -> np.ndarray:
    n = rgb.shape[0]
    out = np.empty((n, 4), dtype=np.float64)
    for i in range(n):
        out[i, 0], out[i, 1], out[i, 2], out[i, 3] = rgb_to_cmyk(rgb[i, 0], rgb[i, 1], rgb[i, 2])
    return out


@njit(cache=True, nogil=True)
def rgb_to_lab_array(rgb: np.ndarray) -> np.ndarray:
    """Convert [N, >=3] RGB floats to [N, 3] L*a*b*."""
    n = rgb.shape[0]
    out = np.empty((n, 3), dtype=np.float64)
    for i in range(n):
        out[i, 0], out[i, 1], out[i, 2] = rgb_to_lab(rgb[i, 0], rgb[i, 1], rgb[i, 2])
    return out


@njit(cache=True, nogil=True)
def cie_gray_array(rgb: np.ndarray) -> np.ndarray:
    n = rgb.shape[0]
    out = np.empty(n, dtype=np.float64)
    for i in range(n):
        out[i] = cie_gray(rgb[i, 0], rgb[i, 1], rgb[i, 2])
    return out


# ============================================================================
# Distance Kernels
# ============================================================================

# Distance kinds over feature vectors
DIST_RMS = 0  # root mean square over the feature components
DIST_ABS = 1  # absolute difference of a single scalar
DIST_HUE = 2  # circular distance of an angle, scaled to [0, 1]
DIST_EUCLID = 3  # plain Euclidean distance


@njit(cache=True, nogil=True)
def feature_distance(p: np.ndarray, q: np.ndarray, kind: int) -> float:
    """Distance between two feature vectors of equal length."""
    k = p.shape[0]
    if kind == DIST_ABS:
        return abs(p[0] - q[0])
    if kind == DIST_HUE:
        d = abs(p[0] - q[0]) % TAU
        return min(d, TAU - d) / math.pi
    acc = 0.0
    for j in range(k):
        d = p[j] - q[j]
        acc += d * d
    if kind == DIST_RMS:
        acc /= k
    return math.sqrt(acc)


@njit(cache=True, nogil=True)
def distances_to(query: np.ndarray, entries: np.ndarray, kind: int) -> np.ndarray:
    """Distance from one feature vector to each row of ``entries``."""
    n = entries.shape[0]
    out = np.empty(n, dtype=np.float64)
    for i in range(n):
        out[i] = feature_distance(query, entries[i], kind)
    return out


@njit(cache=True, nogil=True)
def nearest_entries(
    queries: np.ndarray, entries: np.ndarray, kind: int
) -> tuple[np.ndarray, np.ndarray]:
    """
    Linear nearest-entry search.

    Ties keep the earliest entry (strict ``<``), so results do not depend on
    how queries are chunked.

    Args:
        queries: Query features [M, K]
        entries: Palette features [N, K], N >= 1
        kind: One of the DIST_* constants

    Returns:
        (indices [M], distances [M])
    """
    m = queries.shape[0]
    n = entries.shape[0]
    idx = np.zeros(m, dtype=np.int64)
    dist = np.empty(m, dtype=np.float64)
    for i in range(m):
        best = feature_distance(queries[i], entries[0], kind)
        best_j = 0
        for j in range(1, n):
            d = feature_distance(queries[i], entries[j], kind)
            if d < best:
                best = d
                best_j = j
        idx[i] = best_j
        dist[i] = best
    return idx, dist
