"""
Numba-compiled per-pixel kernels for effects.

Color kernels map a 1-D array of packed words to a new array. Region kernels
read a flat source buffer and write ``out[indices]`` only, so callers can
run disjoint index chunks on separate threads.
"""

import numpy as np
from numba import njit

from colorfx.color.kernels import (
    cie_gray,
    hsl_to_rgb,
    pack,
    rgb_to_hsl,
    round_half_even,
    unpack,
)
from colorfx.constants import TAU
from colorfx.seeding import pixel_hash

# ============================================================================
# Color Kernels
# ============================================================================


@njit(cache=True, nogil=True)
def matrix_transform(words: np.ndarray, matrix: np.ndarray, offset: np.ndarray) -> np.ndarray:
    """
    Apply ``out = matrix @ (r, g, b, a) + offset`` to every color.

    Args:
        words: Packed colors [N]
        matrix: Channel matrix [4, 4] in (r, g, b, a) order
        offset: Channel offset [4]

    Returns:
        Packed colors [N], channels clamped to [0, 1]
    """
    n = words.shape[0]
    out = np.empty(n, dtype=np.uint32)
    for i in range(n):
        r, g, b, a = unpack(np.int64(words[i]))
        nr = matrix[0, 0] * r + matrix[0, 1] * g + matrix[0, 2] * b + matrix[0, 3] * a + offset[0]
        ng = matrix[1, 0] * r + matrix[1, 1] * g + matrix[1, 2] * b + matrix[1, 3] * a + offset[1]
        nb = matrix[2, 0] * r + matrix[2, 1] * g + matrix[2, 2] * b + matrix[2, 3] * a + offset[2]
        na = matrix[3, 0] * r + matrix[3, 1] * g + matrix[3, 2] * b + matrix[3, 3] * a + offset[3]
        out[i] = pack(nr, ng, nb, na)
    return out


@njit(cache=True, nogil=True)
def hue_rotate(words: np.ndarray, phi: float) -> np.ndarray:
    """Rotate the HSL hue of every color by ``phi`` radians, alpha kept."""
    n = words.shape[0]
    out = np.empty(n, dtype=np.uint32)
    for i in range(n):
        r, g, b, a = unpack(np.int64(words[i]))
        h, s, light = rgb_to_hsl(r, g, b)
        nr, ng, nb = hsl_to_rgb((h + phi) % TAU, s, light)
        out[i] = pack(nr, ng, nb, a)
    return out


@njit(cache=True, nogil=True)
def gamma_transform(words: np.ndarray, gamma: float) -> np.ndarray:
    """Raise R, G and B to ``gamma``, alpha kept."""
    n = words.shape[0]
    out = np.empty(n, dtype=np.uint32)
    for i in range(n):
        r, g, b, a = unpack(np.int64(words[i]))
        out[i] = pack(r**gamma, g**gamma, b**gamma, a)
    return out


@njit(cache=True, nogil=True)
def encode_hsl(words: np.ndarray) -> np.ndarray:
    """Store (h / 2pi, s, l) in the (r, g, b) channels, alpha kept."""
    n = words.shape[0]
    out = np.empty(n, dtype=np.uint32)
    for i in range(n):
        r, g, b, a = unpack(np.int64(words[i]))
        h, s, light = rgb_to_hsl(r, g, b)
        out[i] = pack(h / TAU, s, light, a)
    return out


@njit(cache=True, nogil=True)
def decode_hsl(words: np.ndarray) -> np.ndarray:
    """Inverse of ``encode_hsl``."""
    n = words.shape[0]
    out = np.empty(n, dtype=np.uint32)
    for i in range(n):
        h, s, light, a = unpack(np.int64(words[i]))
        r, g, b = hsl_to_rgb(h * TAU, s, light)
        out[i] = pack(r, g, b, a)
    return out


@njit(cache=True, nogil=True)
def posterize(words: np.ndarray, steps: int) -> np.ndarray:
    """Round R, G and B to ``steps`` levels (``round(v * steps) / steps``)."""
    n = words.shape[0]
    out = np.empty(n, dtype=np.uint32)
    for i in range(n):
        r, g, b, a = unpack(np.int64(words[i]))
        out[i] = pack(
            round_half_even(r * steps) / steps,
            round_half_even(g * steps) / steps,
            round_half_even(b * steps) / steps,
            a,
        )
    return out


@njit(cache=True, nogil=True)
def edge_threshold(words: np.ndarray, low: float, high: float) -> np.ndarray:
    """
    Turn an edge response into a black/white mask.

    ``s = 1 - gray``; values below ``low`` drop to 0, the rest are squared;
    the mask is white where ``s > high`` and black elsewhere. Alpha kept.
    """
    n = words.shape[0]
    out = np.empty(n, dtype=np.uint32)
    for i in range(n):
        r, g, b, a = unpack(np.int64(words[i]))
        s = 1.0 - cie_gray(r, g, b)
        s = 0.0 if s < low else s * s
        v = 1.0 if s > high else 0.0
        out[i] = pack(v, v, v, a)
    return out


# ============================================================================
# Region Kernels
# ============================================================================


@njit(cache=True, nogil=True)
def convolve(
    source: np.ndarray,
    stride: int,
    width: int,
    height: int,
    kernel: np.ndarray,
    indices: np.ndarray,
    out: np.ndarray,
) -> None:
    """
    2-D convolution of R, G and B with edge clamping.

    Alpha is taken from the centre pixel.

    Args:
        source: Flat packed source buffer (``y * stride + x``)
        stride: Row length of the buffer in pixels
        width: Visible width (samples are clamped to [0, width - 1])
        height: Row count
        kernel: Weights [kh, kw], odd dimensions
        indices: Flat indices to compute
        out: Flat packed destination buffer
    """
    kh = kernel.shape[0]
    kw = kernel.shape[1]
    cy = kh // 2
    cx = kw // 2
    for k in range(indices.shape[0]):
        i = indices[k]
        x = i % stride
        y = i // stride
        r = 0.0
        g = 0.0
        b = 0.0
        for ky in range(kh):
            sy = min(max(y + ky - cy, 0), height - 1)
            for kx in range(kw):
                w = kernel[ky, kx]
                if w == 0.0:
                    continue
                sx = min(max(x + kx - cx, 0), width - 1)
                sr, sg, sb, _ = unpack(np.int64(source[sy * stride + sx]))
                r += w * sr
                g += w * sg
                b += w * sb
        a = ((np.int64(source[i]) >> 24) & 0xFF) / 255.0
        out[i] = pack(r, g, b, a)


@njit(cache=True, nogil=True)
def cartoon_shade(
    source: np.ndarray,
    blurred: np.ndarray,
    indices: np.ndarray,
    steps: int,
    hue_steps: int,
    out: np.ndarray,
) -> None:
    """
    Combine quantized source lightness with the coarsely quantized hue of a blurred copy.

    Lightness is ``round(cie_gray * steps) / steps`` of the unblurred pixel,
    hue is rounded to ``hue_steps`` levels per turn, saturation comes from
    the blurred pixel and alpha from the source.
    """
    for k in range(indices.shape[0]):
        i = indices[k]
        r, g, b, a = unpack(np.int64(source[i]))
        light = round_half_even(cie_gray(r, g, b) * steps) / steps
        br, bg, bb, _ = unpack(np.int64(blurred[i]))
        h, s, _ = rgb_to_hsl(br, bg, bb)
        h = round_half_even(h / TAU * hue_steps) / hue_steps * TAU
        nr, ng, nb = hsl_to_rgb(h, s, light)
        out[i] = pack(nr, ng, nb, a)


@njit(cache=True, nogil=True)
def blend_lerp(
    source: np.ndarray,
    blended: np.ndarray,
    indices: np.ndarray,
    amount: float,
    out: np.ndarray,
) -> None:
    """``out[i] = lerp(source[i], blended[k], amount)`` channel-wise, alpha included."""
    for k in range(indices.shape[0]):
        i = indices[k]
        sr, sg, sb, sa = unpack(np.int64(source[i]))
        br, bg, bb, ba = unpack(np.int64(blended[k]))
        out[i] = pack(
            sr + (br - sr) * amount,
            sg + (bg - sg) * amount,
            sb + (bb - sb) * amount,
            sa + (ba - sa) * amount,
        )


# ============================================================================
# Noise
# ============================================================================

_SALT_R = np.uint64(0x5EED0001)
_SALT_G = np.uint64(0x5EED0002)
_SALT_B = np.uint64(0x5EED0003)
_SALT_A = np.uint64(0x5EED0004)


@njit(cache=True, nogil=True)
def _noise_byte(seed: np.uint64, x: np.int64, y: np.int64, salt: np.uint64) -> np.int64:
    return np.int64(pixel_hash(seed, x, y, salt) >> np.uint64(56))


@njit(cache=True, nogil=True)
def noise(
    seed: np.uint64,
    xs: np.ndarray,
    ys: np.ndarray,
    source: np.ndarray,
    grayscale: bool,
    alpha_noise: bool,
) -> np.ndarray:
    """
    Position-seeded random colors.

    Each channel byte is a pure function of (seed, x, y, channel). Grayscale
    copies the red draw to G and B; without alpha noise the source alpha is
    kept.
    """
    n = xs.shape[0]
    out = np.empty(n, dtype=np.uint32)
    for i in range(n):
        x = xs[i]
        y = ys[i]
        r = _noise_byte(seed, x, y, _SALT_R)
        if grayscale:
            g = r
            b = r
        else:
            g = _noise_byte(seed, x, y, _SALT_G)
            b = _noise_byte(seed, x, y, _SALT_B)
        if alpha_noise:
            a = _noise_byte(seed, x, y, _SALT_A)
        else:
            a = (np.int64(source[i]) >> 24) & 0xFF
        out[i] = (a << 24) | (r << 16) | (g << 8) | b
    return out

