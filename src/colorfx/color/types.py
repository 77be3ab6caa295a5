"""
Color value types.

PackedColor is an immutable 32-bit 0xAARRGGBB value (8 bits per channel).
LinearColor is a mutable four-channel float color whose channels are clamped
to [0, 1] on every write. Both share the colorspace and derived-color API of
``_ColorOps``.
"""

from __future__ import annotations

import math
import operator
import re
from enum import IntEnum
from typing import Self

from colorfx.color import conversions, kernels
from colorfx.color.metrics import ColorEqualityMetric, ColorTolerance, color_distance
from colorfx.constants import (
    OPAQUE_MASK,
    RGB24_MAX,
    SHORT_ARGB_MAX,
    SHORT_RGB_MAX,
    TAU,
    UINT32_MASK,
)
from colorfx.validators import validate_positive


class ColorChannel(IntEnum):
    """Channel tag; the value is the channel's bit offset in a packed word."""

    A = 24
    R = 16
    G = 8
    B = 0

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            key = value.strip().upper()
            for member in cls:
                if member.name == key:
                    return member
        return None


def _expand_nibbles(value: int, count: int) -> int:
    out = 0
    for i in reversed(range(count)):
        nibble = (value >> (4 * i)) & 0xF
        out = (out << 8) | (nibble << 4) | nibble
    return out


def _unit(text: str, scale: float) -> float:
    """Parse '50%' or '0.5' or '128' style CSS components."""
    text = text.strip()
    if text.endswith("%"):
        return float(text[:-1]) / 100.0
    value = float(text)
    return value / scale if value > 1.0 else value


_FUNC_RE = re.compile(r"^\s*(rgba?|hsla?|hsva?)\s*\(\s*([^)]*)\)\s*$", re.IGNORECASE)


class _ColorOps:
    """Colorspace and derived-color operations shared by both color types."""

    __slots__ = ()

    # Subclasses provide rf/gf/bf/af and from_floats

    @property
    def rgba(self) -> tuple[float, float, float, float]:
        return self.rf, self.gf, self.bf, self.af

    # ------------------------------------------------------------------
    # Colorspaces
    # ------------------------------------------------------------------

    def to_hsl(self) -> tuple[float, float, float]:
        return conversions.rgb_to_hsl(self.rf, self.gf, self.bf)

    @classmethod
    def from_hsl(cls, h: float, s: float, light: float, alpha: float = 1.0) -> Self:
        return cls.from_floats(*conversions.hsl_to_rgb(h, s, light), alpha)

    def to_hsv(self) -> tuple[float, float, float]:
        return conversions.rgb_to_hsv(self.rf, self.gf, self.bf)

    @classmethod
    def from_hsv(cls, h: float, s: float, v: float, alpha: float = 1.0) -> Self:
        return cls.from_floats(*conversions.hsv_to_rgb(h, s, v), alpha)

    def to_cmyk(self) -> tuple[float, float, float, float]:
        return conversions.rgb_to_cmyk(self.rf, self.gf, self.bf)

    @classmethod
    def from_cmyk(cls, c: float, m: float, y: float, k: float, alpha: float = 1.0) -> Self:
        return cls.from_floats(*conversions.cmyk_to_rgb(c, m, y, k), alpha)

    def to_yuv(self) -> tuple[float, float, float]:
        return conversions.rgb_to_yuv(self.rf, self.gf, self.bf)

    @classmethod
    def from_yuv(cls, y: float, u: float, v: float, alpha: float = 1.0) -> Self:
        return cls.from_floats(*conversions.yuv_to_rgb(y, u, v), alpha)

    def to_yiq(self) -> tuple[float, float, float]:
        return conversions.rgb_to_yiq(self.rf, self.gf, self.bf)

    @classmethod
    def from_yiq(cls, y: float, i: float, q: float, alpha: float = 1.0) -> Self:
        return cls.from_floats(*conversions.yiq_to_rgb(y, i, q), alpha)

    def to_ycbcr(self) -> tuple[float, float, float]:
        return conversions.rgb_to_ycbcr(self.rf, self.gf, self.bf)

    @classmethod
    def from_ycbcr(cls, y: float, cb: float, cr: float, alpha: float = 1.0) -> Self:
        return cls.from_floats(*conversions.ycbcr_to_rgb(y, cb, cr), alpha)

    def to_xyz(self) -> tuple[float, float, float]:
        return conversions.rgb_to_xyz(self.rf, self.gf, self.bf)

    @classmethod
    def from_xyz(cls, x: float, y: float, z: float, alpha: float = 1.0) -> Self:
        return cls.from_floats(*conversions.xyz_to_rgb(x, y, z), alpha)

    def to_lab(self) -> tuple[float, float, float]:
        return conversions.rgb_to_lab(self.rf, self.gf, self.bf)

    @classmethod
    def from_lab(cls, lightness: float, a: float, b: float, alpha: float = 1.0) -> Self:
        return cls.from_floats(*conversions.lab_to_rgb(lightness, a, b), alpha)

    # ------------------------------------------------------------------
    # Scalar summaries
    # ------------------------------------------------------------------

    @property
    def average(self) -> float:
        """Arithmetic mean of R, G and B."""
        return conversions.average(self.rf, self.gf, self.bf)

    @property
    def cie_gray(self) -> float:
        """Perceptual gray, L* / 100."""
        return conversions.cie_gray(self.rf, self.gf, self.bf)

    @property
    def hue(self) -> float:
        return self.to_hsl()[0]

    @property
    def saturation(self) -> float:
        return self.to_hsl()[1]

    @property
    def luminance(self) -> float:
        return self.to_hsl()[2]

    @property
    def length(self) -> float:
        """Euclidean length of the RGB vector."""
        return math.sqrt(self.rf * self.rf + self.gf * self.gf + self.bf * self.bf)

    # ------------------------------------------------------------------
    # Distance and equality
    # ------------------------------------------------------------------

    def distance_to(
        self, other: _ColorOps, metric: ColorEqualityMetric | str = ColorEqualityMetric.RGBA
    ) -> float:
        return color_distance(self.rgba, other.rgba, metric)

    def cielab94_distance_to(self, other: _ColorOps) -> float:
        return color_distance(self.rgba, other.rgba, ColorEqualityMetric.CIELAB94)

    def equals(
        self,
        other: _ColorOps,
        tolerance: ColorTolerance | ColorEqualityMetric | str = ColorTolerance.RGBA_DEFAULT,
        threshold: float | None = None,
    ) -> bool:
        """
        Compare two colors under a metric.

        Args:
            other: Color to compare against
            tolerance: A ColorTolerance, or a metric (combined with ``threshold``)
            threshold: Maximum distance when ``tolerance`` is a bare metric

        Returns:
            True when the distance does not exceed the tolerance
        """
        if not isinstance(tolerance, ColorTolerance):
            tolerance = ColorTolerance(
                ColorEqualityMetric(tolerance),
                ColorTolerance.RGBA_DEFAULT.tolerance if threshold is None else threshold,
            )
        return tolerance.matches(self.rgba, other.rgba)

    # ------------------------------------------------------------------
    # Derived colors
    # ------------------------------------------------------------------

    @property
    def complement(self) -> Self:
        return self.from_floats(1.0 - self.rf, 1.0 - self.gf, 1.0 - self.bf, self.af)

    def rotate_hue(self, phi: float) -> Self:
        """Rotate the hue by ``phi`` radians, keeping saturation, lightness and alpha."""
        h, s, light = self.to_hsl()
        return self.from_hsl((h + phi) % TAU, s, light, self.af)

    @property
    def triadic(self) -> tuple[Self, Self, Self]:
        return self, self.rotate_hue(TAU / 3.0), self.rotate_hue(2.0 * TAU / 3.0)

    @property
    def analogous(self) -> list[Self]:
        return self.neutrals(math.pi / 6.0, 3)

    def neutrals(self, step: float = math.pi / 12.0, count: int = 6) -> list[Self]:
        """``count`` hue rotations spaced by ``step`` radians, centred on this color."""
        if count < 1:
            raise ValueError(f"count={count} must be >= 1")
        centre = (count - 1) / 2.0
        return [self.rotate_hue((i - centre) * step) for i in range(count)]

    @validate_positive("gamma")
    def correct_gamma(self, gamma: float) -> Self:
        """Raise R, G and B to ``gamma``; alpha is kept."""
        return self.from_floats(
            conversions.gamma_correct(self.rf, gamma),
            conversions.gamma_correct(self.gf, gamma),
            conversions.gamma_correct(self.bf, gamma),
            self.af,
        )

    @property
    def normalized(self) -> Self:
        """Scale RGB so the largest channel is 1 (black is returned as is)."""
        peak = max(self.rf, self.gf, self.bf)
        if peak <= 0.0:
            return self.from_floats(0.0, 0.0, 0.0, self.af)
        return self.from_floats(self.rf / peak, self.gf / peak, self.bf / peak, self.af)

    @classmethod
    def lerp(cls, start: _ColorOps, end: _ColorOps, t: float) -> Self:
        """Channel-wise linear interpolation (including alpha), ``t`` clamped to [0, 1]."""
        t = kernels.clamp01(t)
        a = start.rgba
        b = end.rgba
        return cls.from_floats(*(x + (y - x) * t for x, y in zip(a, b)))


class PackedColor(_ColorOps):
    """
    Immutable 32-bit color, 0xAARRGGBB.

    Stored in memory little-endian, so the byte order is B, G, R, A.

    Example:
        >>> PackedColor(255, 0, 0).argb == 0xFFFF0000
        True
        >>> PackedColor.from_argb(0xF00).argb == 0xFFFF0000
        True
    """

    __slots__ = ("_argb",)

    def __init__(self, r: int, g: int, b: int, a: int = 255):
        channels = []
        for name, value in (("r", r), ("g", g), ("b", b), ("a", a)):
            if isinstance(value, bool):
                raise TypeError(f"{name} must be int, got bool")
            try:
                value = operator.index(value)
            except TypeError:
                raise TypeError(f"{name} must be int, got {type(value).__name__}") from None
            if not 0 <= value <= 255:
                raise ValueError(f"{name}={value} is outside valid range [0, 255]")
            channels.append(value)
        r, g, b, a = channels
        object.__setattr__(self, "_argb", (a << 24) | (r << 16) | (g << 8) | b)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_uint32(cls, value: int) -> PackedColor:
        """Wrap a raw 32-bit word without any short-hex interpretation."""
        color = cls.__new__(cls)
        object.__setattr__(color, "_argb", int(value) & UINT32_MASK)
        return color

    @classmethod
    def from_argb(cls, value: int) -> PackedColor:
        """
        Build from an ARGB integer, expanding short forms.

        ``0xRGB`` (<= 0xFFF) expands nibbles and is opaque, ``0xARGB``
        (<= 0xFFFF) expands nibbles, ``0xRRGGBB`` (<= 0xFFFFFF) is made opaque,
        anything larger is taken as a full ``0xAARRGGBB`` word.
        """
        value = int(value)
        if value < 0 or value > UINT32_MASK:
            raise ValueError(f"argb=0x{value:X} is not a 32-bit unsigned value")
        if value <= SHORT_RGB_MAX:
            value = OPAQUE_MASK | _expand_nibbles(value, 3)
        elif value <= SHORT_ARGB_MAX:
            value = _expand_nibbles(value, 4)
        elif value <= RGB24_MAX:
            value |= OPAQUE_MASK
        return cls.from_uint32(value)

    @classmethod
    def from_floats(cls, r: float, g: float, b: float, a: float = 1.0) -> PackedColor:
        """Quantize normalized channels (clamped, round-half-to-even)."""
        return cls.from_uint32(kernels.pack(float(r), float(g), float(b), float(a)))

    @classmethod
    def from_gray(cls, value: float, alpha: float = 1.0) -> PackedColor:
        return cls.from_floats(value, value, value, alpha)

    @classmethod
    def from_color(cls, color: _ColorOps) -> PackedColor:
        if isinstance(color, PackedColor):
            return color
        return cls.from_floats(*color.rgba)

    @classmethod
    def parse(cls, text: str) -> PackedColor:
        """
        Parse a hex or CSS-style color string.

        Accepts ``#rgb``, ``#argb``, ``#rrggbb``, ``#aarrggbb`` (``0x`` prefix
        also allowed) and ``rgb()/rgba()/hsl()/hsla()/hsv()/hsva()`` with
        percentages, unit floats or byte values; hue in degrees.

        Raises:
            ValueError: If the text is not a recognized color
        """
        if not isinstance(text, str):
            raise TypeError(f"text must be str, got {type(text).__name__}")
        raw = text.strip()
        lowered = raw.lower()
        if lowered.startswith("#") or lowered.startswith("0x"):
            digits = raw[1:] if raw.startswith("#") else raw[2:]
            if len(digits) not in (3, 4, 6, 8) or not re.fullmatch(r"[0-9a-fA-F]+", digits):
                raise ValueError(f"Invalid hex color '{text}'. Use #rgb, #argb, #rrggbb or #aarrggbb")
            value = int(digits, 16)
            if len(digits) == 3:
                value = OPAQUE_MASK | _expand_nibbles(value, 3)
            elif len(digits) == 4:
                value = _expand_nibbles(value, 4)
            elif len(digits) == 6:
                value |= OPAQUE_MASK
            return cls.from_uint32(value)

        match = _FUNC_RE.match(raw)
        if match is None:
            raise ValueError(f"Invalid color '{text}'. Expected a hex value or rgb()/hsl()/hsv()")
        func = match.group(1).lower()
        parts = [p for p in re.split(r"[\s,/]+", match.group(2).strip()) if p]
        if len(parts) not in (3, 4):
            raise ValueError(f"Invalid color '{text}': expected 3 or 4 components, got {len(parts)}")
        try:
            alpha = _unit(parts[3], 255.0) if len(parts) == 4 else 1.0
            if func.startswith("rgb"):
                r, g, b = (_unit(p, 255.0) for p in parts[:3])
                return cls.from_floats(r, g, b, alpha)
            hue = math.radians(float(parts[0].strip().removesuffix("deg"))) % TAU
            second = _unit(parts[1], 100.0)
            third = _unit(parts[2], 100.0)
        except ValueError as e:
            raise ValueError(f"Invalid color '{text}': {e}") from e
        if func.startswith("hsl"):
            return cls.from_hsl(hue, second, third, alpha)
        return cls.from_hsv(hue, second, third, alpha)

    # ------------------------------------------------------------------
    # Channels
    # ------------------------------------------------------------------

    @property
    def argb(self) -> int:
        return self._argb

    @property
    def a(self) -> int:
        return (self._argb >> 24) & 0xFF

    @property
    def r(self) -> int:
        return (self._argb >> 16) & 0xFF

    @property
    def g(self) -> int:
        return (self._argb >> 8) & 0xFF

    @property
    def b(self) -> int:
        return self._argb & 0xFF

    @property
    def af(self) -> float:
        return self.a / 255.0

    @property
    def rf(self) -> float:
        return self.r / 255.0

    @property
    def gf(self) -> float:
        return self.g / 255.0

    @property
    def bf(self) -> float:
        return self.b / 255.0

    @property
    def is_opaque(self) -> bool:
        return self.a == 255

    def __getitem__(self, channel: ColorChannel | str | int) -> int:
        channel = ColorChannel(channel)
        return (self._argb >> channel.value) & 0xFF

    def with_channel(self, channel: ColorChannel | str | int, value: int) -> PackedColor:
        channel = ColorChannel(channel)
        if not 0 <= int(value) <= 255:
            raise ValueError(f"value={value} is outside valid range [0, 255]")
        shift = channel.value
        return PackedColor.from_uint32((self._argb & ~(0xFF << shift)) | (int(value) << shift))

    def with_alpha(self, alpha: int) -> PackedColor:
        return self.with_channel(ColorChannel.A, alpha)

    def to_linear(self) -> LinearColor:
        return LinearColor(self.rf, self.gf, self.bf, self.af)

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------

    def __int__(self) -> int:
        return self._argb

    def __index__(self) -> int:
        return self._argb

    def __eq__(self, other) -> bool:
        if isinstance(other, PackedColor):
            return self._argb == other._argb
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._argb)

    def __repr__(self) -> str:
        return f"PackedColor(0x{self._argb:08X})"

    def __str__(self) -> str:
        return f"#{self._argb:08X}"


class LinearColor(_ColorOps):
    """
    Mutable four-channel float color.

    Every write clamps to [0, 1] (NaN becomes 0), so stored channels are
    always valid. Arithmetic returns new, clamped colors.
    """

    __slots__ = ("_r", "_g", "_b", "_a")

    def __init__(self, r: float = 0.0, g: float = 0.0, b: float = 0.0, a: float = 1.0):
        self.rf = r
        self.gf = g
        self.bf = b
        self.af = a

    @classmethod
    def from_floats(cls, r: float, g: float, b: float, a: float = 1.0) -> LinearColor:
        return cls(r, g, b, a)

    @classmethod
    def from_color(cls, color: _ColorOps) -> LinearColor:
        return cls(*color.rgba)

    @property
    def rf(self) -> float:
        return self._r

    @rf.setter
    def rf(self, value: float) -> None:
        self._r = kernels.clamp01(float(value))

    @property
    def gf(self) -> float:
        return self._g

    @gf.setter
    def gf(self, value: float) -> None:
        self._g = kernels.clamp01(float(value))

    @property
    def bf(self) -> float:
        return self._b

    @bf.setter
    def bf(self, value: float) -> None:
        self._b = kernels.clamp01(float(value))

    @property
    def af(self) -> float:
        return self._a

    @af.setter
    def af(self, value: float) -> None:
        self._a = kernels.clamp01(float(value))

    def __getitem__(self, channel: ColorChannel | str | int) -> float:
        channel = ColorChannel(channel)
        return {
            ColorChannel.A: self._a,
            ColorChannel.R: self._r,
            ColorChannel.G: self._g,
            ColorChannel.B: self._b,
        }[channel]

    def __setitem__(self, channel: ColorChannel | str | int, value: float) -> None:
        channel = ColorChannel(channel)
        setattr(self, {"A": "af", "R": "rf", "G": "gf", "B": "bf"}[channel.name], value)

    def to_packed(self) -> PackedColor:
        return PackedColor.from_floats(self._r, self._g, self._b, self._a)

    def __add__(self, other: LinearColor) -> LinearColor:
        if not isinstance(other, _ColorOps):
            return NotImplemented
        return LinearColor(*(x + y for x, y in zip(self.rgba, other.rgba)))

    def __sub__(self, other: LinearColor) -> LinearColor:
        if not isinstance(other, _ColorOps):
            return NotImplemented
        return LinearColor(*(x - y for x, y in zip(self.rgba, other.rgba)))

    def __mul__(self, factor: float) -> LinearColor:
        if isinstance(factor, bool) or not isinstance(factor, (int, float)):
            return NotImplemented
        return LinearColor(*(x * factor for x in self.rgba))

    __rmul__ = __mul__

    def __eq__(self, other) -> bool:
        if isinstance(other, LinearColor):
            return self.rgba == other.rgba
        return NotImplemented

    __hash__ = None

    def __repr__(self) -> str:
        return f"LinearColor({self._r:.6g}, {self._g:.6g}, {self._b:.6g}, {self._a:.6g})"


# ============================================================================
# Named Colors
# ============================================================================

TRANSPARENT = PackedColor(0, 0, 0, 0)
BLACK = PackedColor(0, 0, 0)
WHITE = PackedColor(255, 255, 255)
RED = PackedColor(255, 0, 0)
GREEN = PackedColor(0, 255, 0)
BLUE = PackedColor(0, 0, 255)
YELLOW = PackedColor(255, 255, 0)
CYAN = PackedColor(0, 255, 255)
MAGENTA = PackedColor(255, 0, 255)
GRAY = PackedColor(128, 128, 128)


def as_packed(value: PackedColor | LinearColor | int | str) -> PackedColor:
    """
    Coerce a color-like value to PackedColor.

    Integers are taken as raw 0xAARRGGBB words, strings go through
    ``PackedColor.parse``.
    """
    if isinstance(value, PackedColor):
        return value
    if isinstance(value, _ColorOps):
        return PackedColor.from_color(value)
    if isinstance(value, str):
        return PackedColor.parse(value)
    if isinstance(value, bool):
        raise TypeError("Expected a color, got bool")
    try:
        word = operator.index(value)
    except TypeError:
        raise TypeError(
            f"Expected a color (PackedColor, LinearColor, int or str), got {type(value).__name__}"
        ) from None
    if not 0 <= word <= UINT32_MASK:
        raise ValueError(f"Color word 0x{word:X} is not a 32-bit unsigned value")
    return PackedColor.from_uint32(word)
