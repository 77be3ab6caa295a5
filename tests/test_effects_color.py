"""
Tests for per-color effects: adjustments and color mappings.
"""

import math

import numpy as np
import pytest

from colorfx.buffer import PixelBuffer, Region
from colorfx.color.colormap import DiscreteColorMap
from colorfx.color.metrics import ColorEqualityMetric, ColorTolerance
from colorfx.color.palette import Palette
from colorfx.color.types import (
    BLACK,
    BLUE,
    CYAN,
    GREEN,
    RED,
    TRANSPARENT,
    WHITE,
    PackedColor,
)
from colorfx.effects import (
    Brightness,
    Cartoon,
    ChainedEffect,
    Colorize,
    ColorSpaceReductionError,
    Contrast,
    DelegatedColorEffect,
    Duotone,
    EdgeThreshold,
    GammaCorrect,
    Grayscale,
    HSLtoRGB,
    Hue,
    Invert,
    Multitone,
    Opacity,
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
)


@pytest.fixture
def random_buffer():
    """Random opaque 16x8 buffer."""
    rng = np.random.default_rng(42)
    words = rng.integers(0, 2**24, size=(8, 16), dtype=np.uint32) | np.uint32(0xFF000000)
    return PixelBuffer.from_array(words)


class TestEffectApplication:
    """Test Effect.apply semantics shared by every effect."""

    def test_copy_by_default(self, random_buffer):
        """Test the input buffer is untouched unless inplace=True."""
        before = random_buffer.copy()
        out = Invert().apply(random_buffer)
        assert out is not random_buffer
        assert random_buffer == before

    def test_inplace_returns_same_buffer(self, random_buffer):
        """Test in-place application mutates and returns the input."""
        out = Invert()(random_buffer, inplace=True)
        assert out is random_buffer

    def test_region_only(self, random_buffer):
        """Test pixels outside the region pass through unchanged."""
        region = Region(4, 2, 5, 3)
        out = Invert().apply(random_buffer, region)
        for y in range(random_buffer.height):
            for x in range(random_buffer.width):
                if region.contains(x, y):
                    assert out[x, y].argb == random_buffer[x, y].argb ^ 0x00FFFFFF
                else:
                    assert out[x, y] == random_buffer[x, y]

    def test_padding_untouched(self):
        """Test stride padding is never written."""
        data = np.full((2, 4), 0x12345678, dtype=np.uint32)
        buf = PixelBuffer.from_array(data, width=2)
        Invert().apply(buf, inplace=True)
        np.testing.assert_array_equal(data[:, 2:], 0x12345678)

    def test_empty_region(self, random_buffer):
        """Test an empty region is a no-op."""
        assert Invert().apply(random_buffer, Region(3, 3, 0, 0)) == random_buffer

    def test_region_out_of_bounds_raises(self, random_buffer):
        """Test regions outside the buffer are rejected."""
        with pytest.raises(ValueError):
            Invert().apply(random_buffer, Region(10, 0, 10, 1))

    def test_buffer_type_checked(self):
        """Test non-buffers are rejected."""
        with pytest.raises(TypeError):
            Invert().apply(np.zeros((2, 2), dtype=np.uint32))

    def test_then_chains_in_order(self):
        """Test then() applies effects in order."""
        buf = PixelBuffer(1, 1, fill=RED)
        chained = Brightness(0.0).then(Invert())
        assert isinstance(chained, ChainedEffect)
        assert chained(buf)[0, 0] == WHITE
        assert Invert().then(Brightness(0.0))(buf)[0, 0] == BLACK


class TestFixedPoints:
    """Test Invert and Grayscale composition properties."""

    def test_invert_twice_is_identity(self):
        """Test inverting twice restores every word, alpha included."""
        rng = np.random.default_rng(42)
        words = rng.integers(0, 2**32, size=(9, 11), dtype=np.uint64).astype(np.uint32)
        buf = PixelBuffer.from_array(words)
        assert Invert()(Invert()(buf)) == buf
        assert Invert().then(Invert()).apply(buf) == buf

    def test_grayscale_is_idempotent(self, random_buffer):
        """Test a second full grayscale pass changes nothing."""
        once = Grayscale().apply(random_buffer)
        assert Grayscale().apply(once) == once
        assert Grayscale().then(Grayscale()).apply(random_buffer) == once


class TestAdjustments:
    """Test adjustment effects on known colors."""

    def test_invert(self):
        """Test inversion keeps alpha and is an involution."""
        assert Invert().process_color(RED) == CYAN
        color = PackedColor(10, 20, 30, 40)
        assert Invert().process_color(Invert().process_color(color)) == color

    def test_grayscale(self):
        """Test full grayscale maps to the channel mean."""
        assert Grayscale(1.0).process_color(RED).argb == 0xFF555555
        assert Grayscale(0.0).process_color(RED) == RED

    def test_opacity(self):
        """Test opacity scales alpha only."""
        out = Opacity(0.5).process_color(RED)
        assert out.a == 0x80
        assert (out.r, out.g, out.b) == (255, 0, 0)

    def test_brightness(self):
        """Test brightness scales and saturates."""
        assert Brightness(0.5).process_color(WHITE).argb == 0xFF808080
        assert Brightness(2.0).process_color(PackedColor(100, 200, 0)).argb == 0xFFC8FF00

    def test_brightness_negative_raises(self):
        """Test negative brightness is rejected."""
        with pytest.raises(ValueError):
            Brightness(-0.1)

    def test_contrast(self):
        """Test zero contrast collapses to mid-gray."""
        assert Contrast(0.0).process_color(RED).argb == 0xFF808080
        assert Contrast(1.0).process_color(RED) == RED

    def test_saturation(self):
        """Test zero saturation gives the weighted luminance."""
        assert Saturation(0.0).process_color(RED).argb == 0xFF4F4F4F
        assert Saturation(1.0).process_color(RED) == RED

    def test_sepia_strength_zero_is_identity(self):
        """Test sepia interpolates from the identity."""
        color = PackedColor(12, 200, 99)
        assert Sepia(0.0).process_color(color) == color
        assert Sepia(1.0).process_color(WHITE).argb == 0xFFFFFFEF

    def test_hue(self):
        """Test hue rotation by a third of a turn."""
        assert Hue(2.0 * math.pi / 3.0).process_color(RED) == GREEN
        assert Hue(0.0).process_color(BLUE) == BLUE

    def test_gamma(self):
        """Test power-law gamma on mid-gray."""
        assert GammaCorrect(2.0).process_color(0xFF808080).argb == 0xFF404040
        assert GammaCorrect(1.0).gamma == 1.0

    @pytest.mark.parametrize("gamma", [0.0, -1.0, float("inf")])
    def test_gamma_invalid_raises(self, gamma):
        """Test gamma must be positive and finite."""
        with pytest.raises(ValueError):
            GammaCorrect(gamma)

    def test_srgb_pair(self):
        """Test encode then decode approximately restores a color."""
        color = PackedColor(40, 120, 220)
        out = SRGBtoRGB().process_color(RGBtoSRGB().process_color(color))
        assert max(abs(out.r - color.r), abs(out.g - color.g), abs(out.b - color.b)) <= 2

    def test_rgb_to_hsl_encoding(self):
        """Test HSL is stored in the RGB channels."""
        assert RGBtoHSL().process_color(RED).argb == 0xFF00FF80
        back = HSLtoRGB().process_color(0xFF00FF80)
        assert back.r == 255
        assert back.g <= 1 and back.b <= 1

    def test_cartoon_posterizes(self):
        """Test a single step rounds each channel to 0 or 255."""
        assert Cartoon(1).process_color(0xFF808080) == WHITE
        assert Cartoon(1).process_color(0xFF7F7F7F) == BLACK

    def test_cartoon_steps_floor(self):
        """Test steps below 1 are raised to 1."""
        assert Cartoon(0).steps == 1
        with pytest.raises(TypeError):
            Cartoon(2.5)

    def test_edge_threshold(self):
        """Test dark responses become white and bright ones black."""
        assert EdgeThreshold(0.3).process_color(BLACK) == WHITE
        assert EdgeThreshold(0.3).process_color(WHITE) == BLACK

    def test_amount_nan_raises(self):
        """Test clamped amounts must still be finite."""
        with pytest.raises(ValueError):
            Grayscale(float("nan"))


class TestMatrixEffects:
    """Test matrix effect construction."""

    def test_rgb_matrix_swaps_channels(self):
        """Test a permutation matrix."""
        swap = RGBMatrixEffect([[0, 0, 1], [0, 1, 0], [1, 0, 0]])
        assert swap.process_color(RED) == BLUE

    def test_rgba_matrix_offset(self):
        """Test the offset is added after the product."""
        effect = RGBAMatrixEffect(np.zeros((4, 4)), [0.0, 0.0, 0.0, 1.0])
        assert effect.process_color(RED) == BLACK

    def test_bad_shape_raises(self):
        """Test the matrix shape is checked."""
        with pytest.raises(ValueError, match="3x3"):
            RGBMatrixEffect(np.eye(4))
        with pytest.raises(ValueError, match="4x4"):
            RGBAMatrixEffect(np.eye(3))
        with pytest.raises(ValueError):
            RGBMatrixEffect(np.eye(3), [0.0, 0.0])

    def test_non_finite_raises(self):
        """Test matrices must be finite."""
        matrix = np.eye(4)
        matrix[0, 0] = np.nan
        with pytest.raises(ValueError, match="finite"):
            RGBAMatrixEffect(matrix)

    def test_matrix_read_only(self):
        """Test the stored matrix cannot be mutated."""
        effect = Grayscale(0.5)
        with pytest.raises(ValueError):
            effect.matrix[0, 0] = 2.0

    def test_delegated(self, random_buffer):
        """Test function-backed effects run per distinct color."""
        effect = DelegatedColorEffect(lambda c: PackedColor(c.b, c.g, c.r, c.a))
        out = effect.apply(random_buffer)
        color = random_buffer[3, 4]
        assert out[3, 4] == PackedColor(color.b, color.g, color.r, color.a)

    def test_delegated_requires_callable(self):
        """Test non-callables are rejected."""
        with pytest.raises(TypeError):
            DelegatedColorEffect(RED)


class TestReplaceColor:
    """Test color replacement and removal."""

    def test_replace_within_tolerance(self):
        """Test near colors are replaced and far ones kept."""
        effect = ReplaceColor(RED, BLUE, ColorTolerance("rgb", 0.1))
        assert effect.process_color(PackedColor(250, 5, 5)) == BLUE
        assert effect.process_color(GREEN) == GREEN

    def test_default_tolerance_is_exact_rgb(self):
        """Test the default tolerance only matches the same RGB."""
        effect = ReplaceColor(RED, BLUE)
        assert effect.process_color(RED.with_alpha(10)) == BLUE
        assert effect.process_color(PackedColor(254, 0, 0)) == PackedColor(254, 0, 0)

    def test_multiple_search_colors(self):
        """Test an iterable of search colors."""
        effect = ReplaceColor([RED, GREEN], WHITE)
        assert effect.process_color(RED) == WHITE
        assert effect.process_color(GREEN) == WHITE
        assert effect.process_color(BLUE) == BLUE

    def test_numpy_integer_search_color(self):
        """Test a numpy word read from a buffer is a single search color."""
        buf = PixelBuffer.from_colors([[RED, GREEN]])
        effect = ReplaceColor(buf.pixels[0, 0], BLUE)
        assert effect.pairs == ((RED, BLUE),)
        assert effect.apply(buf).pixels[0].tolist() == [BLUE.argb, GREEN.argb]
        assert len(RemoveColor(np.uint32(GREEN.argb)).pairs) == 1

    def test_first_matching_pair_wins(self):
        """Test pair order decides overlapping matches."""
        effect = ReplaceColor.from_pairs([(RED, BLUE), (RED, GREEN)])
        assert effect.process_color(RED) == BLUE
        assert len(effect.pairs) == 2

    def test_replacement_is_not_rematched(self):
        """Test replaced colors are not fed to later pairs."""
        effect = ReplaceColor.from_pairs([(RED, GREEN), (GREEN, BLUE)])
        assert effect.process_color(RED) == GREEN

    def test_tolerance_type_checked(self):
        """Test tolerance must be a ColorTolerance."""
        with pytest.raises(TypeError):
            ReplaceColor(RED, BLUE, 0.1)

    def test_remove_color(self):
        """Test removed colors become transparent."""
        buf = PixelBuffer.from_colors([[RED, GREEN]])
        out = RemoveColor(RED).apply(buf)
        assert out[0, 0] == TRANSPARENT
        assert out[1, 0] == GREEN


class TestReduceColorSpace:
    """Test palette quantization effects."""

    @pytest.mark.parametrize(
        "color,expected",
        [
            (PackedColor(255, 255, 0), WHITE),
            (RED, BLACK),
            (PackedColor(128, 127, 128), WHITE),
            (PackedColor(127, 127, 128), BLACK),
        ],
    )
    def test_average_metric_midpoint(self, color, expected):
        """Test inputs with mean channel >= 0.5 map to white, below to black."""
        effect = ReduceColorSpace([BLACK, WHITE], "average")
        assert effect.process_color(color) == expected

    def test_average_metric_buffer(self, random_buffer):
        """Test a whole buffer splits on the channel mean."""
        out = ReduceColorSpace([BLACK, WHITE], "average").apply(random_buffer)
        shifts = np.array([16, 8, 0], dtype=np.uint32)
        rgb = (random_buffer.pixels[..., None] >> shifts) & 0xFF
        expected = np.where(rgb.sum(axis=-1) / 765.0 >= 0.5, WHITE.argb, BLACK.argb)
        np.testing.assert_array_equal(out.pixels, expected)

    def test_average_metric_ties_keep_first_entry(self):
        """Test equidistant entries resolve to the first one in palette order."""
        # Red and blue share the same channel mean
        buf = PixelBuffer.from_colors([[WHITE, BLACK, GREEN]])
        assert np.all(ReduceColorSpace([RED, BLUE], "average").apply(buf).pixels == RED.argb)
        assert np.all(ReduceColorSpace([BLUE, RED], "average").apply(buf).pixels == BLUE.argb)

    def test_black_white_reduction(self):
        """Test grays split at the midpoint."""
        effect = ReduceColorSpace([BLACK, WHITE])
        assert effect.process_color(0xFF808080) == WHITE
        assert effect.process_color(0xFF7F7F7F) == BLACK

    def test_buffer_only_contains_palette(self, random_buffer):
        """Test every output pixel is a palette entry."""
        palette = Palette([BLACK, WHITE, RED, GREEN, BLUE])
        out = ReduceColorSpace(palette, "cielab94").apply(random_buffer)
        assert set(np.unique(out.pixels).tolist()) <= {c.argb for c in palette}

    def test_metric_property(self):
        """Test metric defaults and coercion."""
        assert ReduceColorSpace([BLACK]).metric is ColorEqualityMetric.RGB
        assert ReduceColorSpace([BLACK], "hue").metric is ColorEqualityMetric.HUE

    def test_empty_palette_raises(self):
        """Test an empty palette is rejected."""
        with pytest.raises(ValueError):
            ReduceColorSpace([])

    def test_reduction_error(self):
        """Test the error visualization."""
        effect = ColorSpaceReductionError([BLACK])
        assert effect.process_color(BLACK).argb == 0xFF000000
        assert effect.process_color(WHITE).argb == 0xFFFFFFFF

    def test_reduction_error_saturates(self):
        """Test distances above 1 saturate to white."""
        effect = ColorSpaceReductionError([BLACK], "cielab94")
        assert effect.process_color(WHITE) == WHITE


class TestToneMapping:
    """Test colorize and multitone effects."""

    def test_colorize(self):
        """Test the RGB average indexes the map."""
        effect = Colorize(DiscreteColorMap.uniform([BLACK, RED]))
        assert effect.process_color(WHITE) == RED
        assert effect.process_color(BLACK) == BLACK

    def test_colorize_requires_colormap(self):
        """Test non-map arguments are rejected."""
        with pytest.raises(TypeError):
            Colorize([BLACK, RED])

    def test_duotone_endpoints(self):
        """Test duotone maps black and white to its end colors."""
        effect = Duotone(RED)
        assert effect.process_color(BLACK) == BLACK
        assert effect.process_color(WHITE) == RED

    def test_tritone_midpoint(self):
        """Test the tint sits at the middle of a tritone."""
        effect = Tritone(BLUE)
        assert effect.process_color(WHITE) == WHITE
        assert effect.process_color(BLACK) == BLACK
        assert effect.process_color(PackedColor(255, 0, 127)) == BLUE

    def test_multitone_tones(self):
        """Test intermediate tones are stored in order."""
        effect = Multitone([RED, GREEN], black=BLACK, white=WHITE)
        assert effect.tones == (RED, GREEN)
        assert len(effect.color_map.stops) == 4
