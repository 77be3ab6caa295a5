"""
Effect base classes.

Every effect is applied through ``Effect.apply(buffer, region, inplace, config)``:
the pixels inside ``region`` are transformed, every other pixel passes through
unchanged. Accelerated effects split the region's pixel indices into disjoint
chunks (see ``colorfx.execution``) so chunks can run on separate threads.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable

import numpy as np

from colorfx.blend.api import DISSOLVE_SALT
from colorfx.blend.kernels import composite_flat
from colorfx.blend.modes import BlendMode
from colorfx.buffer import PixelBuffer, Region
from colorfx.color.types import LinearColor, PackedColor, as_packed
from colorfx.config import ExecutionConfig
from colorfx.effects import kernels
from colorfx.execution import run_chunked
from colorfx.seeding import normalize_seed, pixel_uniforms

logger = logging.getLogger(__name__)


class Effect(ABC):
    """
    Stateless buffer transform.

    Instances hold immutable configuration only and can be applied to any
    number of buffers, concurrently if needed.
    """

    __slots__ = ()

    @property
    def name(self) -> str:
        return type(self).__name__

    def apply(
        self,
        buffer: PixelBuffer,
        region: Region | None = None,
        *,
        inplace: bool = False,
        config: ExecutionConfig | None = None,
    ) -> PixelBuffer:
        """
        Apply the effect to ``region`` of ``buffer``.

        Args:
            buffer: Source pixels
            region: Sub-rectangle to process (default: whole buffer)
            inplace: Write into ``buffer`` instead of a copy
            config: Chunking and threading settings

        Returns:
            The processed buffer (``buffer`` itself when ``inplace=True``)

        Raises:
            ValueError: If the region does not fit inside the buffer
        """
        if not isinstance(buffer, PixelBuffer):
            raise TypeError(f"buffer must be PixelBuffer, got {type(buffer).__name__}")
        region = buffer.check_region(region)
        target = buffer if inplace else buffer.copy()
        if not region.is_empty:
            self._render(buffer, target, region, config)

        logger.debug(
            "[%s] Applied to %d pixels (%s)",
            self.name,
            region.area,
            "in-place" if inplace else "copy",
        )
        return target

    def __call__(
        self,
        buffer: PixelBuffer,
        region: Region | None = None,
        *,
        inplace: bool = False,
        config: ExecutionConfig | None = None,
    ) -> PixelBuffer:
        return self.apply(buffer, region, inplace=inplace, config=config)

    @abstractmethod
    def _render(
        self,
        source: PixelBuffer,
        target: PixelBuffer,
        region: Region,
        config: ExecutionConfig | None,
    ) -> None:
        """
        Write the effect's output for ``region`` into ``target``.

        ``source`` and ``target`` may be the same object (in-place application).
        """

    def then(self, *effects: Effect) -> ChainedEffect:
        """Chain this effect with ``effects``, applied after it in order."""
        return ChainedEffect([self, *effects])

    def __repr__(self) -> str:
        return f"{self.name}()"


class AcceleratedEffect(Effect):
    """
    Effect computed independently per pixel index.

    Subclasses implement ``process(source, target, indices)``, which must
    write ``target.flat[indices]`` and nothing else. Effects whose output for
    one pixel depends on neighbouring pixels set ``reads_neighbors`` so that
    in-place application reads from a snapshot.
    """

    __slots__ = ()

    reads_neighbors = False

    def _render(self, source, target, region, config):
        if source is target and self.reads_neighbors:
            source = source.copy()
        indices = target.region_indices(region)
        run_chunked(lambda chunk: self.process(source, target, chunk), indices, config)

    @abstractmethod
    def process(self, source: PixelBuffer, target: PixelBuffer, indices: np.ndarray) -> None:
        """Compute the pixels at flat ``indices`` of ``source`` into ``target``."""


# ============================================================================
# Per-color Effects
# ============================================================================


class ColorEffect(AcceleratedEffect):
    """
    Effect whose output pixel depends only on the input pixel's color.

    Subclasses implement the vectorized ``process_colors``; ``process_color``
    is derived from it.
    """

    __slots__ = ()

    @abstractmethod
    def process_colors(self, words: np.ndarray) -> np.ndarray:
        """
        Transform packed colors.

        Args:
            words: Packed uint32 colors [N]

        Returns:
            New packed uint32 colors [N]
        """

    def process_color(self, color: PackedColor | LinearColor | int | str) -> PackedColor:
        word = self.process_colors(np.array([as_packed(color).argb], dtype=np.uint32))[0]
        return PackedColor.from_uint32(int(word))

    def process(self, source, target, indices):
        target.flat[indices] = self.process_colors(source.flat[indices])


class PerColorEffect(ColorEffect):
    """
    Color effect defined by a scalar ``transform(color)``.

    Each distinct color in a chunk is transformed once.
    """

    __slots__ = ()

    @abstractmethod
    def transform(self, color: PackedColor) -> PackedColor:
        """Map one color."""

    def process_color(self, color):
        return as_packed(self.transform(as_packed(color)))

    def process_colors(self, words):
        unique, inverse = np.unique(words, return_inverse=True)
        mapped = np.array(
            [as_packed(self.transform(PackedColor.from_uint32(int(w)))).argb for w in unique],
            dtype=np.uint32,
        )
        return mapped[inverse.reshape(-1)]


class DelegatedColorEffect(PerColorEffect):
    """
    Color effect backed by a function.

    Example:
        >>> swap = DelegatedColorEffect(lambda c: PackedColor(c.b, c.g, c.r, c.a))
    """

    __slots__ = ("_func",)

    def __init__(self, func: Callable[[PackedColor], PackedColor | LinearColor | int]):
        if not callable(func):
            raise TypeError(f"func must be callable, got {type(func).__name__}")
        self._func = func

    def transform(self, color):
        return as_packed(self._func(color))

    def __repr__(self) -> str:
        return f"DelegatedColorEffect({self._func!r})"


class RGBAMatrixEffect(ColorEffect):
    """
    Affine channel transform ``(r, g, b, a) -> M @ (r, g, b, a) + offset``.

    Args:
        matrix: 4x4 matrix in (r, g, b, a) order
        offset: Length-4 offset (default: zeros)
    """

    __slots__ = ("_matrix", "_offset")

    def __init__(self, matrix, offset=None):
        matrix = np.array(matrix, dtype=np.float64)
        if matrix.shape != (4, 4):
            raise ValueError(f"matrix must be 4x4, got shape {matrix.shape}")
        offset = np.zeros(4) if offset is None else np.array(offset, dtype=np.float64)
        if offset.shape != (4,):
            raise ValueError(f"offset must have 4 entries, got shape {offset.shape}")
        if not (np.all(np.isfinite(matrix)) and np.all(np.isfinite(offset))):
            raise ValueError("matrix and offset must be finite")
        matrix.flags.writeable = False
        offset.flags.writeable = False
        self._matrix = matrix
        self._offset = offset

    @property
    def matrix(self) -> np.ndarray:
        return self._matrix

    @property
    def offset(self) -> np.ndarray:
        return self._offset

    def process_colors(self, words):
        return kernels.matrix_transform(np.ascontiguousarray(words), self._matrix, self._offset)


class RGBMatrixEffect(RGBAMatrixEffect):
    """
    Affine transform of R, G and B; alpha passes through.

    Args:
        matrix: 3x3 matrix in (r, g, b) order
        offset: Length-3 offset (default: zeros)
    """

    __slots__ = ()

    def __init__(self, matrix, offset=None):
        rgb = np.array(matrix, dtype=np.float64)
        if rgb.shape != (3, 3):
            raise ValueError(f"matrix must be 3x3, got shape {rgb.shape}")
        full = np.eye(4)
        full[:3, :3] = rgb
        full_offset = np.zeros(4)
        if offset is not None:
            offset = np.array(offset, dtype=np.float64)
            if offset.shape != (3,):
                raise ValueError(f"offset must have 3 entries, got shape {offset.shape}")
            full_offset[:3] = offset
        super().__init__(full, full_offset)


# ============================================================================
# Coordinate Effects
# ============================================================================


class CoordinateColorEffect(AcceleratedEffect):
    """
    Effect whose output depends on the pixel position (and optionally its color).

    Coordinates are buffer coordinates; ``width``/``height`` are the buffer's.
    """

    __slots__ = ()

    @abstractmethod
    def process_coordinates(
        self,
        xs: np.ndarray,
        ys: np.ndarray,
        width: int,
        height: int,
        words: np.ndarray,
    ) -> np.ndarray:
        """
        Compute output colors for pixel positions.

        Args:
            xs: Column of each pixel [N]
            ys: Row of each pixel [N]
            width: Buffer width
            height: Buffer height
            words: Current packed colors at those positions [N]

        Returns:
            Packed uint32 colors [N]
        """

    def process_coordinate(
        self, x: int, y: int, width: int, height: int, color: PackedColor | int = 0
    ) -> PackedColor:
        word = self.process_coordinates(
            np.array([x], dtype=np.int64),
            np.array([y], dtype=np.int64),
            width,
            height,
            np.array([as_packed(color).argb], dtype=np.uint32),
        )[0]
        return PackedColor.from_uint32(int(word))

    def process(self, source, target, indices):
        xs, ys = source.coordinates_of(indices)
        target.flat[indices] = self.process_coordinates(
            xs, ys, source.width, source.height, source.flat[indices]
        )


class Gradient(CoordinateColorEffect):
    """
    Coordinate generator composited over the source with ``blending``.

    With the default ``BlendMode.TOP`` the generated color replaces the
    source. DISSOLVE draws are derived from (``seed``, x, y).
    """

    __slots__ = ("_blending", "_seed")

    def __init__(self, blending: BlendMode | str = BlendMode.TOP, seed: int = 0):
        self._blending = BlendMode(blending)
        self._seed = normalize_seed(seed)

    @property
    def blending(self) -> BlendMode:
        return self._blending

    @abstractmethod
    def generate_array(self, xs: np.ndarray, ys: np.ndarray, width: int, height: int) -> np.ndarray:
        """Generated packed colors for the given positions."""

    def generate(self, x: int, y: int, width: int, height: int) -> PackedColor:
        word = self.generate_array(
            np.array([x], dtype=np.int64), np.array([y], dtype=np.int64), width, height
        )[0]
        return PackedColor.from_uint32(int(word))

    def process_coordinates(self, xs, ys, width, height, words):
        generated = np.ascontiguousarray(self.generate_array(xs, ys, width, height), dtype=np.uint32)
        if self._blending is BlendMode.TOP:
            return generated
        if self._blending is BlendMode.DISSOLVE:
            draws = pixel_uniforms(self._seed, xs, ys, DISSOLVE_SALT)
        else:
            draws = np.empty(0, dtype=np.float64)
        return composite_flat(np.ascontiguousarray(words), generated, int(self._blending), draws)


# ============================================================================
# Combinators
# ============================================================================


class ChainedEffect(Effect):
    """
    Applies effects strictly in the given order, each on the previous output.

    One working buffer is allocated (none when applied in place); effects
    that read neighbouring pixels snapshot it themselves.
    """

    __slots__ = ("_effects",)

    def __init__(self, effects: Iterable[Effect]):
        effects = tuple(effects)
        for effect in effects:
            if not isinstance(effect, Effect):
                raise TypeError(f"Expected Effect instances, got {type(effect).__name__}")
        self._effects = effects

    @property
    def effects(self) -> tuple[Effect, ...]:
        return self._effects

    def _render(self, source, target, region, config):
        for effect in self._effects:
            effect.apply(target, region, inplace=True, config=config)

    def __len__(self) -> int:
        return len(self._effects)

    def __iter__(self):
        return iter(self._effects)

    def __repr__(self) -> str:
        return f"ChainedEffect([{', '.join(repr(e) for e in self._effects)}])"
