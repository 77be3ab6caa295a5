"""
Numba-compiled compositing kernels.

All channel math is done on normalized floats; results are re-quantized with
round-half-to-even. Bitwise modes work on the raw 32-bit word.
"""

import math

import numpy as np
from numba import njit

from colorfx.blend.modes import BlendMode
from colorfx.color.kernels import clamp01, hsl_to_rgb, pack, rgb_to_hsl, unpack

# Module-level ints are frozen into the compiled kernels
_NORMAL = int(BlendMode.NORMAL)
_DISSOLVE = int(BlendMode.DISSOLVE)
_MULTIPLY = int(BlendMode.MULTIPLY)
_SCREEN = int(BlendMode.SCREEN)
_DIVIDE = int(BlendMode.DIVIDE)
_REMAINDER = int(BlendMode.REMAINDER)
_BOTTOM = int(BlendMode.BOTTOM)
_TOP = int(BlendMode.TOP)
_COLOR_BURN = int(BlendMode.COLOR_BURN)
_COLOR_DODGE = int(BlendMode.COLOR_DODGE)
_HUE = int(BlendMode.HUE)
_SATURATION = int(BlendMode.SATURATION)
_COLOR = int(BlendMode.COLOR)
_LUMINOSITY = int(BlendMode.LUMINOSITY)
_DARKEN = int(BlendMode.DARKEN)
_LIGHTEN = int(BlendMode.LIGHTEN)
_OVERLAY = int(BlendMode.OVERLAY)
_SOFT_LIGHT = int(BlendMode.SOFT_LIGHT)
_HARD_LIGHT = int(BlendMode.HARD_LIGHT)
_ADD = int(BlendMode.ADD)
_SUBTRACT = int(BlendMode.SUBTRACT)
_DIFFERENCE = int(BlendMode.DIFFERENCE)
_EXCLUSION = int(BlendMode.EXCLUSION)
_AVERAGE = int(BlendMode.AVERAGE)
_HARD_MIX = int(BlendMode.HARD_MIX)
_PIN_LIGHT = int(BlendMode.PIN_LIGHT)
_VIVID_LIGHT = int(BlendMode.VIVID_LIGHT)
_LINEAR_LIGHT = int(BlendMode.LINEAR_LIGHT)
_HALFWAY_LERP = int(BlendMode.HALFWAY_LERP)
_BINARY_OR = int(BlendMode.BINARY_OR)
_BINARY_AND = int(BlendMode.BINARY_AND)
_BINARY_XOR = int(BlendMode.BINARY_XOR)
_BINARY_NOR = int(BlendMode.BINARY_NOR)
_BINARY_NAND = int(BlendMode.BINARY_NAND)
_BINARY_NXOR = int(BlendMode.BINARY_NXOR)
_BINARY_SHL = int(BlendMode.BINARY_SHL)
_BINARY_SHR = int(BlendMode.BINARY_SHR)
_BINARY_ROL = int(BlendMode.BINARY_ROL)
_BINARY_ROR = int(BlendMode.BINARY_ROR)

_MASK32 = 0xFFFFFFFF

# ============================================================================
# Separable Channel Formulas
# ============================================================================


@njit(cache=True, nogil=True)
def _screen(cb: float, cs: float) -> float:
    return cb + cs - cb * cs


@njit(cache=True, nogil=True)
def _hard_light(cb: float, cs: float) -> float:
    if cs <= 0.5:
        return cb * 2.0 * cs
    return _screen(cb, 2.0 * cs - 1.0)


@njit(cache=True, nogil=True)
def _soft_light(cb: float, cs: float) -> float:
    if cs <= 0.5:
        return cb - (1.0 - 2.0 * cs) * cb * (1.0 - cb)
    if cb <= 0.25:
        d = ((16.0 * cb - 12.0) * cb + 4.0) * cb
    else:
        d = math.sqrt(cb)
    return cb + (2.0 * cs - 1.0) * (d - cb)


@njit(cache=True, nogil=True)
def blend_channel(mode: int, cb: float, cs: float) -> float:
    """
    Separable blend of one channel, bottom ``cb`` and top ``cs``.

    Division-based modes saturate instead of producing non-finite values.
    """
    if mode == _MULTIPLY:
        return cb * cs
    if mode == _SCREEN:
        return _screen(cb, cs)
    if mode == _DIVIDE:
        if cs <= 0.0:
            return 1.0 if cb > 0.0 else 0.0
        return min(1.0, cb / cs)
    if mode == _REMAINDER:
        if cs <= 0.0:
            return cb
        return cb - cs * math.floor(cb / cs)
    if mode == _COLOR_BURN:
        if cb >= 1.0:
            return 1.0
        if cs <= 0.0:
            return 0.0
        return 1.0 - min(1.0, (1.0 - cb) / cs)
    if mode == _COLOR_DODGE:
        if cb <= 0.0:
            return 0.0
        if cs >= 1.0:
            return 1.0
        return min(1.0, cb / (1.0 - cs))
    if mode == _DARKEN:
        return min(cb, cs)
    if mode == _LIGHTEN:
        return max(cb, cs)
    if mode == _OVERLAY:
        return _hard_light(cs, cb)
    if mode == _SOFT_LIGHT:
        return _soft_light(cb, cs)
    if mode == _HARD_LIGHT:
        return _hard_light(cb, cs)
    if mode == _ADD:
        return min(1.0, cb + cs)
    if mode == _SUBTRACT:
        return max(0.0, cb - cs)
    if mode == _DIFFERENCE:
        return abs(cb - cs)
    if mode == _EXCLUSION:
        return cb + cs - 2.0 * cb * cs
    if mode == _AVERAGE:
        return (cb + cs) / 2.0
    if mode == _HARD_MIX:
        return 0.0 if cs < 1.0 - cb else 1.0
    if mode == _PIN_LIGHT:
        if cb < 2.0 * cs - 1.0:
            return 2.0 * cs - 1.0
        if cb < 2.0 * cs:
            return cb
        return 2.0 * cs
    if mode == _VIVID_LIGHT:
        if cs <= 0.5:
            if cs <= 0.0:
                return 1.0 if cb >= 1.0 else 0.0
            return clamp01(1.0 - (1.0 - cb) / (2.0 * cs))
        if cs >= 1.0:
            return 0.0 if cb <= 0.0 else 1.0
        return clamp01(cb / (2.0 * (1.0 - cs)))
    if mode == _LINEAR_LIGHT:
        return clamp01(cs + 2.0 * cb - 1.0)
    # NORMAL
    return cs


@njit(cache=True, nogil=True)
def _blend_rgb(
    mode: int, br: float, bg: float, bb: float, tr: float, tg: float, tb: float
) -> tuple[float, float, float]:
    if mode == _HUE or mode == _SATURATION or mode == _COLOR or mode == _LUMINOSITY:
        bh, bs, bl = rgb_to_hsl(br, bg, bb)
        th, ts, tl = rgb_to_hsl(tr, tg, tb)
        if mode == _HUE:
            return hsl_to_rgb(th, bs, bl)
        if mode == _SATURATION:
            return hsl_to_rgb(bh, ts, bl)
        if mode == _COLOR:
            return hsl_to_rgb(th, ts, bl)
        return hsl_to_rgb(bh, bs, tl)
    return (
        blend_channel(mode, br, tr),
        blend_channel(mode, bg, tg),
        blend_channel(mode, bb, tb),
    )


# ============================================================================
# Packed Compositing
# ============================================================================


@njit(cache=True, nogil=True)
def _bitwise(mode: int, bottom: np.int64, top: np.int64) -> np.int64:
    if mode == _BINARY_OR:
        return bottom | top
    if mode == _BINARY_AND:
        return bottom & top
    if mode == _BINARY_XOR:
        return bottom ^ top
    if mode == _BINARY_NOR:
        return ~(bottom | top) & _MASK32
    if mode == _BINARY_NAND:
        return ~(bottom & top) & _MASK32
    if mode == _BINARY_NXOR:
        return ~(bottom ^ top) & _MASK32
    n = top & 31
    if mode == _BINARY_SHL:
        return (bottom << n) & _MASK32
    if mode == _BINARY_SHR:
        return bottom >> n
    if n == 0:
        return bottom
    if mode == _BINARY_ROL:
        return ((bottom << n) | (bottom >> (32 - n))) & _MASK32
    # ROR
    return ((bottom >> n) | (bottom << (32 - n))) & _MASK32


@njit(cache=True, nogil=True)
def composite_word(bottom: np.int64, top: np.int64, mode: int, draw: float) -> np.int64:
    """
    Composite two packed colors.

    Args:
        bottom: Bottom 0xAARRGGBB word
        top: Top 0xAARRGGBB word
        mode: BlendMode value
        draw: Uniform [0, 1) draw, consumed only by DISSOLVE

    Returns:
        Resulting 0xAARRGGBB word
    """
    bottom = np.int64(bottom)
    top = np.int64(top)
    if mode >= _BINARY_OR:
        return _bitwise(mode, bottom, top)
    if mode == _BOTTOM:
        return bottom
    if mode == _TOP:
        return top

    br, bg, bb, ba = unpack(bottom)
    tr, tg, tb, ta = unpack(top)

    if mode == _DISSOLVE:
        total = ta + ba
        p = ta / total if total > 0.0 else 0.5
        return top if draw < p else bottom
    if mode == _HALFWAY_LERP:
        return np.int64(
            pack((br + tr) * 0.5, (bg + tg) * 0.5, (bb + tb) * 0.5, (ba + ta) * 0.5)
        )

    alpha = 1.0 - (1.0 - ba) * (1.0 - ta)
    if alpha <= 0.0:
        return np.int64(0)

    xr, xg, xb = _blend_rgb(mode, br, bg, bb, tr, tg, tb)
    # Blend result only applies where the bottom is present
    mr = (1.0 - ba) * tr + ba * clamp01(xr)
    mg = (1.0 - ba) * tg + ba * clamp01(xg)
    mb = (1.0 - ba) * tb + ba * clamp01(xb)
    under = (1.0 - ta) * ba
    r = (ta * mr + under * br) / alpha
    g = (ta * mg + under * bg) / alpha
    b = (ta * mb + under * bb) / alpha
    return np.int64(pack(r, g, b, alpha))


@njit(cache=True, nogil=True)
def composite_indices(
    bottom: np.ndarray,
    top: np.ndarray,
    indices: np.ndarray,
    mode: int,
    draws: np.ndarray,
    out: np.ndarray,
) -> None:
    """
    Composite ``bottom[indices]`` with ``top[indices]`` into ``out[indices]``.

    ``bottom``, ``top`` and ``out`` are flat uint32 views of equal size;
    ``draws`` is aligned with ``indices`` (may be empty unless mode is DISSOLVE).
    """
    use_draws = draws.shape[0] > 0
    for k in range(indices.shape[0]):
        i = indices[k]
        draw = draws[k] if use_draws else 0.0
        out[i] = composite_word(np.int64(bottom[i]), np.int64(top[i]), mode, draw)


@njit(cache=True, nogil=True)
def composite_flat(
    bottom: np.ndarray, top: np.ndarray, mode: int, draws: np.ndarray
) -> np.ndarray:
    """Elementwise composite of two equal-length flat uint32 arrays."""
    n = bottom.shape[0]
    out = np.empty(n, dtype=np.uint32)
    use_draws = draws.shape[0] > 0
    for i in range(n):
        draw = draws[i] if use_draws else 0.0
        out[i] = composite_word(np.int64(bottom[i]), np.int64(top[i]), mode, draw)
    return out
