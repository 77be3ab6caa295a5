"""
Region effects: convolution, blur, bitmap blending and the cartoon composites.

These read pixels other than the one being written (neighbours or a second
buffer), so they work on the flat backing arrays directly.
"""

from __future__ import annotations

import logging

import numpy as np

from colorfx.blend.api import DISSOLVE_SALT
from colorfx.blend.kernels import composite_flat
from colorfx.blend.modes import BlendMode
from colorfx.buffer import PixelBuffer
from colorfx.color.kernels import clamp01
from colorfx.constants import (
    DEFAULT_BLUR_RADIUS,
    DEFAULT_CARTOON_STEPS,
    DEFAULT_EDGE_SENSITIVITY,
    MIN_CARTOON3_STEPS,
)
from colorfx.effects import kernels
from colorfx.effects.adjust import EdgeThreshold
from colorfx.effects.base import AcceleratedEffect, ChainedEffect, Effect
from colorfx.execution import run_chunked
from colorfx.seeding import normalize_seed, pixel_uniforms
from colorfx.validators import validate_finite, validate_non_negative, validate_range, validate_type

logger = logging.getLogger(__name__)

SMOOTHING_KERNEL = np.full((3, 3), 1.0 / 9.0)
LAPLACIAN_KERNEL = np.array([[0.0, -1.0, 0.0], [-1.0, 4.0, -1.0], [0.0, -1.0, 0.0]])


# ============================================================================
# Convolution
# ============================================================================


class ConvolutionEffect(AcceleratedEffect):
    """
    Convolve R, G and B with a 2-D kernel; alpha is taken from the centre pixel.

    Samples outside the buffer are clamped to the nearest edge pixel, so
    pixels next to the border see no dark fringe.

    Args:
        kernel: Weights with odd height and width

    Example:
        >>> sharpen = ConvolutionEffect([[0, -1, 0], [-1, 5, -1], [0, -1, 0]])
    """

    __slots__ = ("_kernel",)

    reads_neighbors = True

    def __init__(self, kernel):
        kernel = np.array(kernel, dtype=np.float64)
        if kernel.ndim != 2:
            raise ValueError(f"kernel must be 2-D, got shape {kernel.shape}")
        if kernel.shape[0] % 2 == 0 or kernel.shape[1] % 2 == 0:
            raise ValueError(f"kernel dimensions must be odd, got shape {kernel.shape}")
        if not np.all(np.isfinite(kernel)):
            raise ValueError("kernel must be finite")
        kernel.flags.writeable = False
        self._kernel = kernel

    @property
    def kernel(self) -> np.ndarray:
        return self._kernel

    def process(self, source, target, indices):
        kernels.convolve(
            source.flat,
            source.stride,
            source.width,
            source.height,
            self._kernel,
            indices,
            target.flat,
        )

    def __repr__(self) -> str:
        return f"ConvolutionEffect(shape={self._kernel.shape})"


class BoxBlur(ConvolutionEffect):
    """Mean over a ``(2r + 1)`` square window; a radius of 0 is raised to 1."""

    __slots__ = ("_radius",)

    @validate_type(int, "radius")
    @validate_non_negative("radius")
    def __init__(self, radius: int = DEFAULT_BLUR_RADIUS):
        self._radius = max(int(radius), 1)
        size = 2 * self._radius + 1
        super().__init__(np.full((size, size), 1.0 / (size * size)))

    @property
    def radius(self) -> int:
        return self._radius

    def __repr__(self) -> str:
        return f"BoxBlur({self._radius})"


# ============================================================================
# Bitmap Blending
# ============================================================================


class BitmapBlend(AcceleratedEffect):
    """
    Composite an overlay buffer over the source.

    The source is the bottom layer and the overlay pixel at the same (x, y)
    the top layer. The result is interpolated from the source towards the
    composite by ``amount``.

    Args:
        overlay: Buffer with the same width and height as the buffers this is applied to
        mode: Blend mode
        amount: Interpolation factor in [0, 1]
        seed: Seed for DISSOLVE draws
    """

    __slots__ = ("_overlay", "_mode", "_amount", "_seed")

    @validate_range(0.0, 1.0, "amount", 3)
    def __init__(
        self,
        overlay: PixelBuffer,
        mode: BlendMode | str = BlendMode.NORMAL,
        amount: float = 1.0,
        seed: int = 0,
    ):
        if not isinstance(overlay, PixelBuffer):
            raise TypeError(f"overlay must be PixelBuffer, got {type(overlay).__name__}")
        self._overlay = overlay.copy()
        self._mode = BlendMode(mode)
        self._amount = float(amount)
        self._seed = normalize_seed(seed)

    @property
    def mode(self) -> BlendMode:
        return self._mode

    @property
    def amount(self) -> float:
        return self._amount

    def _render(self, source, target, region, config):
        if (self._overlay.width, self._overlay.height) != (source.width, source.height):
            raise ValueError(
                f"Overlay size {self._overlay.width}x{self._overlay.height} does not match "
                f"buffer size {source.width}x{source.height}"
            )
        super()._render(source, target, region, config)

    def process(self, source, target, indices):
        xs, ys = source.coordinates_of(indices)
        bottom = np.ascontiguousarray(source.flat[indices])
        top = np.ascontiguousarray(self._overlay.data[ys, xs])
        if self._mode is BlendMode.DISSOLVE:
            draws = pixel_uniforms(self._seed, xs, ys, DISSOLVE_SALT)
        else:
            draws = np.empty(0, dtype=np.float64)
        blended = composite_flat(bottom, top, int(self._mode), draws)
        kernels.blend_lerp(source.flat, blended, indices, self._amount, target.flat)

    def __repr__(self) -> str:
        return f"BitmapBlend({self._overlay!r}, {self._mode.name}, {self._amount:g})"


# ============================================================================
# Cartoon Composites
# ============================================================================


class Cartoon2(Effect):
    """
    Flat-shaded cartoon look.

    The region is box-blurred (radius 1); each pixel then takes the blurred
    hue quantized to ``steps // 2`` levels, the blurred saturation, and the
    unblurred CIE gray quantized to ``steps`` levels as lightness. Alpha is
    kept.
    """

    __slots__ = ("_steps", "_blur")

    @validate_type(int, "steps")
    def __init__(self, steps: int = DEFAULT_CARTOON_STEPS):
        self._steps = max(int(steps), 1)
        self._blur = BoxBlur(1)

    @property
    def steps(self) -> int:
        return self._steps

    def _render(self, source, target, region, config):
        blurred = self._blur.apply(source, region, config=config)
        hue_steps = max(self._steps // 2, 1)
        indices = target.region_indices(region)
        run_chunked(
            lambda chunk: kernels.cartoon_shade(
                source.flat, blurred.flat, chunk, self._steps, hue_steps, target.flat
            ),
            indices,
            config,
        )

    def __repr__(self) -> str:
        return f"Cartoon2({self._steps})"


class Cartoon3(Effect):
    """
    Cartoon2 background multiplied by a thresholded edge mask.

    Edge detection runs a 3x3 smoothing pass, a Laplacian and EdgeThreshold
    over the region, then the mask is multiplied onto the Cartoon2
    background.

    Args:
        steps: Lightness levels of the background (floors at 2)
        edge_sensitivity: Clamped to [0, 1]; higher values keep fewer edges
    """

    __slots__ = ("_steps", "_edge_sensitivity")

    @validate_finite("edge_sensitivity", 2)
    @validate_type(int, "steps")
    def __init__(self, steps: int = DEFAULT_CARTOON_STEPS, edge_sensitivity: float = DEFAULT_EDGE_SENSITIVITY):
        self._steps = max(int(steps), MIN_CARTOON3_STEPS)
        self._edge_sensitivity = clamp01(float(edge_sensitivity))

    @property
    def steps(self) -> int:
        return self._steps

    @property
    def edge_sensitivity(self) -> float:
        return self._edge_sensitivity

    def _render(self, source, target, region, config):
        background = Cartoon2(self._steps).apply(source, region, config=config)
        edges = ChainedEffect(
            [
                ConvolutionEffect(SMOOTHING_KERNEL),
                ConvolutionEffect(LAPLACIAN_KERNEL),
                EdgeThreshold(self._edge_sensitivity),
                BitmapBlend(background, BlendMode.MULTIPLY, 1.0),
            ]
        )
        edges.apply(target, region, inplace=True, config=config)

    def __repr__(self) -> str:
        return f"Cartoon3({self._steps}, {self._edge_sensitivity:g})"
