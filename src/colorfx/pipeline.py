"""
Fluent pipeline for composing effects.

Example:
    >>> from colorfx import Pipeline, PixelBuffer
    >>>
    >>> pipeline = (
    ...     Pipeline()
    ...     .grayscale(0.5)
    ...     .contrast(1.2)
    ...     .box_blur(2)
    ...     .duotone("#ff8800")
    ... )
    >>> result = pipeline(buffer)
"""

from __future__ import annotations

import logging
from copy import deepcopy
from typing import Any, Self

from colorfx.buffer import PixelBuffer, Region
from colorfx.config import ExecutionConfig
from colorfx.effects import (
    BitmapBlend,
    BoxBlur,
    Brightness,
    Cartoon,
    Cartoon2,
    Cartoon3,
    ChainedEffect,
    Colorize,
    ColorSpaceReductionError,
    ConstantColor,
    Contrast,
    ConvolutionEffect,
    DelegatedColorEffect,
    Duotone,
    Effect,
    GammaCorrect,
    Grayscale,
    HSLtoRGB,
    Hue,
    HyperbolicGradient,
    Invert,
    LinearGradient,
    MultiPointGradient,
    Multitone,
    NoiseEffect,
    Opacity,
    RadialGradient,
    ReduceColorSpace,
    RemoveColor,
    ReplaceColor,
    RGBAMatrixEffect,
    RGBMatrixEffect,
    RGBtoHSL,
    RGBtoSRGB,
    Saturation,
    Sepia,
    SRGBtoRGB,
    Tritone,
    VoronoiGradient,
)

logger = logging.getLogger(__name__)


class Pipeline:
    """
    Ordered, mutable list of effects with a fluent builder API.

    Every builder method constructs the named effect (validating its
    arguments immediately), appends it and returns the pipeline. Effects run
    strictly in the order they were added.

    Example:
        >>> pipeline = Pipeline().invert().sepia(0.8).cartoon(6)
        >>> len(pipeline)
        3
        >>> result = pipeline(buffer, inplace=True)
    """

    __slots__ = ("_effects",)

    # Builder method name -> effect class (for __getattr__ delegation)
    _EFFECT_METHODS: dict[str, type[Effect]] = {
        # Adjustments
        "invert": Invert,
        "grayscale": Grayscale,
        "opacity": Opacity,
        "brightness": Brightness,
        "saturation": Saturation,
        "contrast": Contrast,
        "sepia": Sepia,
        "hue": Hue,
        "gamma": GammaCorrect,
        "rgb_to_srgb": RGBtoSRGB,
        "srgb_to_rgb": SRGBtoRGB,
        "rgb_to_hsl": RGBtoHSL,
        "hsl_to_rgb": HSLtoRGB,
        "cartoon": Cartoon,
        "matrix": RGBMatrixEffect,
        "rgba_matrix": RGBAMatrixEffect,
        "map_colors": DelegatedColorEffect,
        # Mappings
        "replace_color": ReplaceColor,
        "remove_color": RemoveColor,
        "reduce_colors": ReduceColorSpace,
        "reduction_error": ColorSpaceReductionError,
        "colorize": Colorize,
        "multitone": Multitone,
        "duotone": Duotone,
        "tritone": Tritone,
        # Generators
        "fill": ConstantColor,
        "linear_gradient": LinearGradient,
        "radial_gradient": RadialGradient,
        "multi_point_gradient": MultiPointGradient,
        "hyperbolic_gradient": HyperbolicGradient,
        "voronoi": VoronoiGradient,
        "noise": NoiseEffect,
        # Region effects
        "convolve": ConvolutionEffect,
        "box_blur": BoxBlur,
        "blend": BitmapBlend,
        "cartoon2": Cartoon2,
        "cartoon3": Cartoon3,
    }

    def __init__(self, effects: list[Effect] | None = None):
        self._effects: list[Effect] = []
        for effect in effects or ():
            self.add(effect)
        logger.debug("[Pipeline] Initialized with %d effects", len(self._effects))

    # ========================================================================
    # Building
    # ========================================================================

    def add(self, effect: Effect | Pipeline) -> Self:
        """
        Append an effect, or every effect of another pipeline.

        Returns:
            Self for chaining
        """
        if isinstance(effect, Pipeline):
            self._effects.extend(effect._effects)
        elif isinstance(effect, Effect):
            self._effects.append(effect)
        else:
            raise TypeError(f"Expected Effect or Pipeline, got {type(effect).__name__}")
        return self

    def __getattr__(self, name: str) -> Any:
        """
        Resolve builder methods registered in ``_EFFECT_METHODS``.

        Raises:
            AttributeError: If the name is not a registered builder
        """
        effect_cls = self._EFFECT_METHODS.get(name)
        if effect_cls is None:
            raise AttributeError(
                f"'{type(self).__name__}' has no attribute '{name}'. "
                f"Available methods: {sorted(self._EFFECT_METHODS)}"
            )

        def builder(*args, **kwargs):
            return self.add(effect_cls(*args, **kwargs))

        builder.__name__ = name
        builder.__doc__ = f"Append {effect_cls.__name__}(*args, **kwargs)."
        return builder

    @property
    def effects(self) -> tuple[Effect, ...]:
        return tuple(self._effects)

    def to_effect(self) -> ChainedEffect:
        """Freeze the current effects into an immutable ChainedEffect."""
        return ChainedEffect(self._effects)

    # ========================================================================
    # Execution
    # ========================================================================

    def apply(
        self,
        buffer: PixelBuffer,
        region: Region | None = None,
        *,
        inplace: bool = False,
        config: ExecutionConfig | None = None,
    ) -> PixelBuffer:
        """
        Apply every effect in order.

        Args:
            buffer: Source pixels
            region: Sub-rectangle to process (default: whole buffer)
            inplace: Write into ``buffer`` instead of a copy
            config: Chunking and threading settings

        Returns:
            The processed buffer
        """
        result = self.to_effect().apply(buffer, region, inplace=inplace, config=config)
        logger.info(
            "[Pipeline] Applied %d effects to %d pixels",
            len(self._effects),
            buffer.check_region(region).area,
        )
        return result

    def __call__(
        self,
        buffer: PixelBuffer,
        region: Region | None = None,
        *,
        inplace: bool = False,
        config: ExecutionConfig | None = None,
    ) -> PixelBuffer:
        return self.apply(buffer, region, inplace=inplace, config=config)

    def reset(self) -> Self:
        """
        Remove all effects.

        Returns:
            Self for chaining
        """
        self._effects.clear()
        logger.debug("[Pipeline] Reset")
        return self

    def copy(self) -> Self:
        """
        Create an independent copy of this pipeline.

        Example:
            >>> base = Pipeline().grayscale()
            >>> tinted = base.copy().duotone("#0080ff")  # base is unchanged
        """
        return deepcopy(self)

    def __copy__(self) -> Self:
        """Shallow copy delegates to deep copy."""
        return self.copy()

    def __deepcopy__(self, memo: dict[int, Any]) -> Self:
        # Effects are immutable, only the list needs copying
        new = Pipeline()
        new._effects = list(self._effects)
        return new

    def __len__(self) -> int:
        return len(self._effects)

    def __repr__(self) -> str:
        if not self._effects:
            return "Pipeline(empty)"
        return f"Pipeline({', '.join(e.name for e in self._effects)})"
