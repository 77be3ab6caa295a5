"""
Per-color adjustment effects.

Matrix-expressible adjustments (grayscale, opacity, brightness, saturation,
contrast, sepia) are RGB(A)MatrixEffects; the rest run dedicated kernels.
"""

from __future__ import annotations

import logging

import numpy as np

from colorfx.color.kernels import clamp01
from colorfx.constants import (
    DEFAULT_CARTOON_STEPS,
    EDGE_HIGH_CUTOFF,
    EDGE_LOW_CUTOFF,
    SATURATION_WEIGHTS,
    SEPIA_MATRIX,
    SRGB_GAMMA_CORRECTION_FACTOR,
)
from colorfx.effects import kernels
from colorfx.effects.base import ColorEffect, RGBAMatrixEffect, RGBMatrixEffect
from colorfx.validators import (
    validate_finite,
    validate_non_negative,
    validate_positive,
    validate_type,
)

logger = logging.getLogger(__name__)


class Invert(ColorEffect):
    """Invert R, G and B; alpha is kept. Applying it twice is the identity."""

    __slots__ = ()

    def process_colors(self, words):
        return np.bitwise_xor(words, np.uint32(0x00FFFFFF))


class Grayscale(RGBMatrixEffect):
    """
    Blend each channel towards the channel mean.

    ``amount=1`` maps every color to its R, G, B average; ``amount=0`` is the
    identity. Values are clamped to [0, 1].
    """

    __slots__ = ("_amount",)

    @validate_finite("amount")
    def __init__(self, amount: float = 1.0):
        a = clamp01(float(amount))
        self._amount = a
        matrix = np.array([[1.0, a, a], [a, 1.0, a], [a, a, 1.0]]) / (1.0 + 2.0 * a)
        super().__init__(matrix)

    def __repr__(self) -> str:
        return f"Grayscale({self._amount:g})"


class Opacity(RGBAMatrixEffect):
    """Multiply alpha by ``amount`` (clamped to [0, 1])."""

    __slots__ = ("_amount",)

    @validate_finite("amount")
    def __init__(self, amount: float):
        self._amount = clamp01(float(amount))
        super().__init__(np.diag([1.0, 1.0, 1.0, self._amount]))

    def __repr__(self) -> str:
        return f"Opacity({self._amount:g})"


class Brightness(RGBMatrixEffect):
    """Scale R, G and B by ``amount`` (results saturate at 1)."""

    __slots__ = ("_amount",)

    @validate_non_negative("amount")
    def __init__(self, amount: float):
        self._amount = float(amount)
        super().__init__(np.diag([self._amount] * 3))

    def __repr__(self) -> str:
        return f"Brightness({self._amount:g})"


class Saturation(RGBMatrixEffect):
    """
    Luminance-preserving saturation matrix.

    ``amount=0`` is grayscale, ``1`` the identity, larger values oversaturate.
    """

    __slots__ = ("_amount",)

    @validate_non_negative("amount")
    def __init__(self, amount: float):
        s = float(amount)
        self._amount = s
        weights = np.array(SATURATION_WEIGHTS)
        matrix = np.tile((1.0 - s) * weights, (3, 1)) + s * np.eye(3)
        super().__init__(matrix)

    def __repr__(self) -> str:
        return f"Saturation({self._amount:g})"


class Contrast(RGBMatrixEffect):
    """Scale R, G and B around mid-gray: ``(v - 0.5) * amount + 0.5``."""

    __slots__ = ("_amount",)

    @validate_non_negative("amount")
    def __init__(self, amount: float):
        c = float(amount)
        self._amount = c
        super().__init__(np.eye(3) * c, [0.5 - 0.5 * c] * 3)

    def __repr__(self) -> str:
        return f"Contrast({self._amount:g})"


class Sepia(RGBMatrixEffect):
    """Interpolate from the identity to the sepia tone matrix by ``strength``."""

    __slots__ = ("_strength",)

    @validate_finite("strength")
    def __init__(self, strength: float = 1.0):
        t = clamp01(float(strength))
        self._strength = t
        super().__init__(np.eye(3) + (np.array(SEPIA_MATRIX) - np.eye(3)) * t)

    def __repr__(self) -> str:
        return f"Sepia({self._strength:g})"


class Hue(ColorEffect):
    """Rotate the HSL hue by ``radians``; saturation, lightness and alpha kept."""

    __slots__ = ("_radians",)

    @validate_finite("radians")
    def __init__(self, radians: float):
        self._radians = float(radians)

    def process_colors(self, words):
        return kernels.hue_rotate(np.ascontiguousarray(words), self._radians)

    def __repr__(self) -> str:
        return f"Hue({self._radians:g})"


class GammaCorrect(ColorEffect):
    """Raise normalized R, G and B to ``gamma``; alpha kept."""

    __slots__ = ("_gamma",)

    @validate_positive("gamma")
    def __init__(self, gamma: float):
        self._gamma = float(gamma)

    @property
    def gamma(self) -> float:
        return self._gamma

    def process_colors(self, words):
        return kernels.gamma_transform(np.ascontiguousarray(words), self._gamma)

    def __repr__(self) -> str:
        return f"{self.name}({self._gamma:g})"


class RGBtoSRGB(GammaCorrect):
    """Encode linear RGB with the 1 / 2.2 power curve."""

    __slots__ = ()

    def __init__(self):
        super().__init__(1.0 / SRGB_GAMMA_CORRECTION_FACTOR)

    def __repr__(self) -> str:
        return "RGBtoSRGB()"


class SRGBtoRGB(GammaCorrect):
    """Decode sRGB to linear RGB with the 2.2 power curve."""

    __slots__ = ()

    def __init__(self):
        super().__init__(SRGB_GAMMA_CORRECTION_FACTOR)

    def __repr__(self) -> str:
        return "SRGBtoRGB()"


class RGBtoHSL(ColorEffect):
    """Store (hue / 2pi, saturation, lightness) in the R, G, B channels."""

    __slots__ = ()

    def process_colors(self, words):
        return kernels.encode_hsl(np.ascontiguousarray(words))


class HSLtoRGB(ColorEffect):
    """Inverse of RGBtoHSL."""

    __slots__ = ()

    def process_colors(self, words):
        return kernels.decode_hsl(np.ascontiguousarray(words))


class Cartoon(ColorEffect):
    """Posterize R, G and B to ``steps`` levels each (steps floor at 1)."""

    __slots__ = ("_steps",)

    @validate_type(int, "steps")
    def __init__(self, steps: int = DEFAULT_CARTOON_STEPS):
        self._steps = max(int(steps), 1)

    @property
    def steps(self) -> int:
        return self._steps

    def process_colors(self, words):
        return kernels.posterize(np.ascontiguousarray(words), self._steps)

    def __repr__(self) -> str:
        return f"Cartoon({self._steps})"


class EdgeThreshold(ColorEffect):
    """
    Binarize an edge response (used by Cartoon3).

    Args:
        sensitivity: Edge sensitivity in [0, 1]; raises the white cutoff by ``sensitivity / 10``
    """

    __slots__ = ("_sensitivity",)

    @validate_finite("sensitivity")
    def __init__(self, sensitivity: float):
        self._sensitivity = clamp01(float(sensitivity))

    def process_colors(self, words):
        return kernels.edge_threshold(
            np.ascontiguousarray(words),
            EDGE_LOW_CUTOFF,
            EDGE_HIGH_CUTOFF + self._sensitivity / 10.0,
        )

    def __repr__(self) -> str:
        return f"EdgeThreshold({self._sensitivity:g})"
