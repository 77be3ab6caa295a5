"""
Position-derived random draws.

Each pixel's draw is a pure function of (seed, x, y, salt), computed with the
SplitMix64 finalizer. Output never depends on processing order, chunk size or
thread count.
"""

import numpy as np
from numba import njit

_GOLDEN = np.uint64(0x9E3779B97F4A7C15)
_MIX1 = np.uint64(0xBF58476D1CE4E5B9)
_MIX2 = np.uint64(0x94D049BB133111EB)
_S30 = np.uint64(30)
_S27 = np.uint64(27)
_S31 = np.uint64(31)
_S11 = np.uint64(11)
_INV_2_53 = 1.0 / 9007199254740992.0


@njit(cache=True, nogil=True)
def _mix(z: np.uint64) -> np.uint64:
    z = (z ^ (z >> _S30)) * _MIX1
    z = (z ^ (z >> _S27)) * _MIX2
    return z ^ (z >> _S31)


@njit(cache=True, nogil=True)
def pixel_hash(seed: np.uint64, x: np.int64, y: np.int64, salt: np.uint64) -> np.uint64:
    """64-bit hash of a pixel position under a seed and a per-use salt."""
    h = _mix(np.uint64(seed) + _GOLDEN)
    h = _mix(h ^ (np.uint64(x) + _GOLDEN))
    h = _mix(h ^ (np.uint64(y) * _MIX1 + _GOLDEN))
    return _mix(h ^ np.uint64(salt))


@njit(cache=True, nogil=True)
def pixel_uniform(seed: np.uint64, x: np.int64, y: np.int64, salt: np.uint64) -> float:
    """Uniform draw in [0, 1) for one pixel."""
    return float(pixel_hash(seed, x, y, salt) >> _S11) * _INV_2_53


@njit(cache=True, nogil=True)
def pixel_uniforms(seed: np.uint64, xs: np.ndarray, ys: np.ndarray, salt: np.uint64) -> np.ndarray:
    """Uniform draws in [0, 1) for each (xs[i], ys[i])."""
    n = xs.shape[0]
    out = np.empty(n, dtype=np.float64)
    for i in range(n):
        out[i] = pixel_uniform(seed, xs[i], ys[i], salt)
    return out


def normalize_seed(seed: int | None) -> np.uint64:
    """Map an arbitrary int to a uint64 seed (None -> 0)."""
    if seed is None:
        return np.uint64(0)
    if isinstance(seed, bool) or not isinstance(seed, (int, np.integer)):
        raise TypeError(f"seed must be int, got {type(seed).__name__}")
    return np.uint64(int(seed) & 0xFFFFFFFFFFFFFFFF)
