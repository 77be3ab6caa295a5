"""
Compositing API for single colors and packed arrays.
"""

from __future__ import annotations

import numpy as np

from colorfx.blend import kernels
from colorfx.blend.modes import BlendMode
from colorfx.color.types import LinearColor, PackedColor, as_packed
from colorfx.seeding import normalize_seed, pixel_uniforms

# Salt separating dissolve draws from other seeded streams
DISSOLVE_SALT = np.uint64(0xD155_01FE)


def composite(
    bottom: PackedColor | LinearColor | int | str,
    top: PackedColor | LinearColor | int | str,
    mode: BlendMode | str | int = BlendMode.NORMAL,
    *,
    rng: np.random.Generator | None = None,
    draw: float | None = None,
) -> PackedColor:
    """
    Composite ``top`` over ``bottom``.

    Alpha follows the "over" rule ``1 - (1 - ab)(1 - at)``; a fully
    transparent result is transparent black. Bitwise modes return the raw
    bitwise word.

    Args:
        bottom: Bottom color
        top: Top color
        mode: Blend mode
        rng: Random source for DISSOLVE (one draw per call)
        draw: Explicit uniform draw in [0, 1) for DISSOLVE (takes precedence over ``rng``)

    Returns:
        Composited color

    Raises:
        ValueError: If mode is DISSOLVE and neither ``rng`` nor ``draw`` is given

    Example:
        >>> composite(0xFFFF0000, 0xFF00FF00, BlendMode.MULTIPLY)
        PackedColor(0xFF000000)
    """
    mode = BlendMode(mode)
    value = 0.0
    if mode is BlendMode.DISSOLVE:
        if draw is not None:
            value = float(draw)
        elif rng is not None:
            value = float(rng.random())
        else:
            raise ValueError(
                "BlendMode.DISSOLVE needs a random source. Pass rng= (np.random.Generator) or draw=."
            )
    word = kernels.composite_word(as_packed(bottom).argb, as_packed(top).argb, int(mode), value)
    return PackedColor.from_uint32(int(word))


def dissolve_draws(shape: tuple[int, ...], seed: int | None) -> np.ndarray:
    """
    Position-derived dissolve draws for an array of ``shape``.

    2-D shapes use (row, column) as (y, x); 1-D shapes use the index as x.
    """
    if len(shape) == 2:
        ys, xs = np.indices(shape, dtype=np.int64)
    elif len(shape) == 1:
        xs = np.arange(shape[0], dtype=np.int64)
        ys = np.zeros(shape[0], dtype=np.int64)
    else:
        raise ValueError(f"Expected a 1-D or 2-D shape, got {shape}")
    draws = pixel_uniforms(normalize_seed(seed), xs.ravel(), ys.ravel(), DISSOLVE_SALT)
    return draws


def composite_array(
    bottom: np.ndarray,
    top: np.ndarray | PackedColor | LinearColor | int | str,
    mode: BlendMode | str | int = BlendMode.NORMAL,
    *,
    seed: int | None = 0,
) -> np.ndarray:
    """
    Composite packed uint32 arrays elementwise.

    Args:
        bottom: Packed colors, 1-D or 2-D
        top: Packed colors of the same shape, or a single color broadcast over ``bottom``
        mode: Blend mode
        seed: Seed for position-derived DISSOLVE draws

    Returns:
        New packed uint32 array with the shape of ``bottom``
    """
    mode = BlendMode(mode)
    bottom = np.asarray(bottom, dtype=np.uint32)
    if isinstance(top, (PackedColor, LinearColor, int, np.integer, str)):
        top = np.full(bottom.shape, as_packed(top).argb, dtype=np.uint32)
    else:
        top = np.asarray(top, dtype=np.uint32)
    if top.shape != bottom.shape:
        raise ValueError(f"Shape mismatch: bottom {bottom.shape} vs top {top.shape}")

    if mode is BlendMode.DISSOLVE:
        draws = dissolve_draws(bottom.shape, seed)
    else:
        draws = np.empty(0, dtype=np.float64)

    out = kernels.composite_flat(
        np.ascontiguousarray(bottom).ravel(), np.ascontiguousarray(top).ravel(), int(mode), draws
    )
    return out.reshape(bottom.shape)
