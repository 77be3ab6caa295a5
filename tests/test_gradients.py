"""
Tests for coordinate generators: gradients, Voronoi cells and noise.
"""

import numpy as np
import pytest

from colorfx.blend.modes import BlendMode
from colorfx.buffer import PixelBuffer, Region
from colorfx.color.colormap import DiscreteColorMap
from colorfx.color.types import BLACK, BLUE, GREEN, RED, WHITE, PackedColor
from colorfx.effects import (
    ConstantColor,
    HyperbolicGradient,
    LinearGradient,
    MultiPointGradient,
    NoiseEffect,
    NoiseMode,
    RadialGradient,
    VectorNorm,
    VoronoiGradient,
)


def _row(buf: PixelBuffer) -> list[int]:
    return buf.pixels[0].tolist()


class TestVectorNorm:
    """Test distance norms."""

    def test_norms(self):
        """Test each norm on a 3-4-5 offset."""
        dx = np.array([3.0])
        dy = np.array([-4.0])
        assert VectorNorm.EUCLIDEAN.distances(dx, dy)[0] == pytest.approx(5.0)
        assert VectorNorm.MANHATTAN.distances(dx, dy)[0] == pytest.approx(7.0)
        assert VectorNorm.CHEBYSHEV.distances(dx, dy)[0] == pytest.approx(4.0)

    def test_lookup_by_name(self):
        """Test case-insensitive lookup."""
        assert VectorNorm("Manhattan") is VectorNorm.MANHATTAN
        with pytest.raises(ValueError):
            VectorNorm("minkowski")


class TestConstantColor:
    """Test constant fills."""

    def test_fill_replaces(self):
        """Test the default TOP blending overwrites the source."""
        out = ConstantColor(RED).apply(PixelBuffer(3, 2, fill=BLUE))
        assert np.all(out.pixels == RED.argb)

    def test_fill_blends(self):
        """Test a blended fill."""
        out = ConstantColor(GREEN, BlendMode.MULTIPLY).apply(PixelBuffer(2, 1, fill=RED))
        assert _row(out) == [BLACK.argb, BLACK.argb]

    def test_dissolve_picks_either_color(self):
        """Test dissolve blending only yields the two inputs."""
        out = ConstantColor(RED, "dissolve", seed=3).apply(PixelBuffer(8, 8, fill=BLUE))
        assert set(np.unique(out.pixels).tolist()) == {RED.argb, BLUE.argb}

    def test_generate_scalar(self):
        """Test the scalar generator."""
        assert ConstantColor("#0f0").generate(5, 5, 10, 10) == GREEN


class TestLinearGradient:
    """Test linear gradients."""

    def test_horizontal_black_to_white(self):
        """Test evenly spaced gray levels along x."""
        out = LinearGradient((0, 0), (3, 0), [BLACK, WHITE]).apply(PixelBuffer(4, 1))
        assert _row(out) == [0xFF000000, 0xFF555555, 0xFFAAAAAA, 0xFFFFFFFF]

    def test_clamps_outside_segment(self):
        """Test positions past the end points take the end colors."""
        gradient = LinearGradient((2, 0), (3, 0), [RED, BLUE])
        out = gradient.apply(PixelBuffer(6, 1))
        assert _row(out) == [RED.argb] * 3 + [BLUE.argb] * 3

    def test_vertical_ignores_x(self):
        """Test a vertical gradient is constant along rows."""
        out = LinearGradient((0, 0), (0, 3), [BLACK, WHITE]).apply(PixelBuffer(3, 4))
        for row in out.pixels:
            assert len(set(row.tolist())) == 1

    def test_degenerate_raises(self):
        """Test start and end must differ."""
        with pytest.raises(ValueError, match="must differ"):
            LinearGradient((1, 1), (1, 1), [BLACK, WHITE])

    def test_non_finite_point_raises(self):
        """Test points must be finite."""
        with pytest.raises(ValueError):
            LinearGradient((0, float("nan")), (1, 1), [BLACK, WHITE])

    def test_accepts_colormap(self):
        """Test a prebuilt color map is used as is."""
        cmap = DiscreteColorMap([(0.0, RED), (1.0, RED)])
        gradient = LinearGradient((0, 0), (1, 0), cmap)
        assert gradient.color_map is cmap


class TestRadialGradient:
    """Test radial gradients."""

    def test_center_and_edge(self):
        """Test the center maps to 0 and the radius to 1."""
        gradient = RadialGradient((0, 0), 2.0, [BLACK, WHITE])
        assert gradient.generate(0, 0, 5, 5) == BLACK
        assert gradient.generate(2, 0, 5, 5) == WHITE
        assert gradient.generate(1, 0, 5, 5).argb == 0xFF808080

    def test_defaults_to_buffer_midpoint(self):
        """Test the default center and size."""
        gradient = RadialGradient(None, None, [BLACK, WHITE])
        assert gradient.generate(2, 2, 4, 4) == BLACK
        assert gradient.generate(0, 0, 4, 4) == WHITE

    def test_zero_size_uses_last_color(self):
        """Test a degenerate radius maps every pixel to 1."""
        out = RadialGradient((1, 1), 0.0, [BLACK, WHITE]).apply(PixelBuffer(3, 3))
        assert np.all(out.pixels == WHITE.argb)

    @pytest.mark.parametrize("size", [-1.0, float("inf"), float("nan")])
    def test_invalid_size_raises(self, size):
        """Test negative or non-finite sizes are rejected."""
        with pytest.raises(ValueError):
            RadialGradient(None, size, [BLACK, WHITE])


class TestMultiPointGradient:
    """Test inverse-distance weighted gradients."""

    def test_midpoint_blend(self):
        """Test a pixel equidistant from two points averages them."""
        gradient = MultiPointGradient([((0, 0), BLACK), ((2, 0), WHITE)])
        assert gradient.generate(1, 0, 3, 1).argb == 0xFF808080

    def test_pixel_on_point(self):
        """Test a pixel exactly on a point takes its color."""
        gradient = MultiPointGradient([((0, 0), RED), ((2, 0), BLUE)])
        out = gradient.apply(PixelBuffer(3, 1))
        assert out[0, 0] == RED
        assert out[2, 0] == BLUE

    def test_coincident_points_first_wins(self):
        """Test the first of two coincident points is used."""
        gradient = MultiPointGradient([((1, 0), RED), ((1, 0), BLUE)])
        assert gradient.generate(1, 0, 3, 1) == RED

    def test_higher_power_favors_nearest(self):
        """Test larger powers pull colors towards the nearest point."""
        points = [((0, 0), BLACK), ((3, 0), WHITE)]
        low = MultiPointGradient(points, power=1.0).generate(1, 0, 4, 1)
        high = MultiPointGradient(points, power=8.0).generate(1, 0, 4, 1)
        assert high.r < low.r

    def test_empty_points_raises(self):
        """Test at least one point is required."""
        with pytest.raises(ValueError, match="At least one point"):
            MultiPointGradient([])

    def test_power_must_be_finite(self):
        """Test the exponent is validated."""
        with pytest.raises(ValueError):
            MultiPointGradient([((0, 0), RED)], float("inf"))

    def test_points_property(self):
        """Test the parsed points are exposed."""
        gradient = MultiPointGradient([((1, 2), "#f00")])
        assert gradient.points == (((1.0, 2.0), RED),)


class TestHyperbolicGradient:
    """Test two-point hyperbolic gradients."""

    def test_end_points(self):
        """Test each point takes its own color."""
        gradient = HyperbolicGradient(((0, 0), RED), ((4, 0), BLUE))
        assert gradient.generate(0, 0, 5, 1) == RED
        assert gradient.generate(4, 0, 5, 1) == BLUE

    def test_midpoint(self):
        """Test the midpoint is an even mix."""
        gradient = HyperbolicGradient(((0, 0), BLACK), ((4, 0), WHITE))
        assert gradient.generate(2, 0, 5, 1).argb == 0xFF808080

    def test_coincident_points(self):
        """Test coincident points fall back to the start color."""
        gradient = HyperbolicGradient(((1, 1), RED), ((1, 1), BLUE))
        assert gradient.generate(1, 1, 3, 3) == RED


class TestVoronoiGradient:
    """Test Voronoi cells."""

    def test_cells(self):
        """Test pixels take the nearest point's color; ties go to the first."""
        gradient = VoronoiGradient([((0, 0), RED), ((2, 0), BLUE)])
        out = gradient.apply(PixelBuffer(3, 1))
        assert _row(out) == [RED.argb, RED.argb, BLUE.argb]

    def test_norm_changes_cells(self):
        """Test the norm decides which point is nearest."""
        points = [((0, 0), RED), ((3, 3), BLUE)]
        # (2, 0): Euclidean 2 vs 3.16, Chebyshev 2 vs 3, Manhattan 2 vs 4
        for norm in VectorNorm:
            assert VoronoiGradient(points, norm).generate(2, 0, 4, 4) == RED
        # (0, 3): Chebyshev 3 vs 3 ties and keeps the first point
        assert VoronoiGradient(points, "chebyshev").generate(0, 3, 4, 4) == RED
        assert VoronoiGradient(points, "euclidean").generate(1, 3, 4, 4) == BLUE

    def test_empty_points_raises(self):
        """Test at least one point is required."""
        with pytest.raises(ValueError):
            VoronoiGradient([])


class TestNoiseEffect:
    """Test position-seeded noise."""

    def test_deterministic(self):
        """Test equal seeds give equal buffers."""
        buf = PixelBuffer(16, 16, fill=BLACK)
        assert NoiseEffect(seed=5).apply(buf) == NoiseEffect(seed=5).apply(buf)
        assert NoiseEffect(seed=5).apply(buf) != NoiseEffect(seed=6).apply(buf)

    def test_region_independent(self):
        """Test a pixel's noise does not depend on the processed region."""
        buf = PixelBuffer(8, 8, fill=BLACK)
        full = NoiseEffect(seed=9).apply(buf)
        part = NoiseEffect(seed=9).apply(buf, Region(2, 3, 4, 2))
        assert part[3, 4] == full[3, 4]
        assert part[0, 0] == BLACK

    def test_keeps_alpha(self):
        """Test regular noise keeps the source alpha."""
        out = NoiseEffect(seed=1).apply(PixelBuffer(8, 8, fill=0x80000000))
        assert np.all((out.pixels >> 24) == 0x80)

    def test_grayscale(self):
        """Test grayscale noise has equal R, G and B."""
        out = NoiseEffect(seed=1, mode=NoiseMode.GRAYSCALE).apply(PixelBuffer(8, 8, fill=BLACK))
        for color in out.iter_colors():
            assert color.r == color.g == color.b

    def test_alpha_noise(self):
        """Test alpha noise varies the alpha channel."""
        mode = NoiseMode.GRAYSCALE | NoiseMode.ALPHA_NOISE
        out = NoiseEffect(seed=1, mode=mode).apply(PixelBuffer(8, 8, fill=BLACK))
        assert len(np.unique(out.pixels >> 24)) > 1

    def test_invalid_mode_raises(self):
        """Test unknown flags are rejected."""
        with pytest.raises(ValueError):
            NoiseEffect(mode=4)

    def test_properties(self):
        """Test seed and mode are exposed."""
        noise = NoiseEffect(seed=12, mode=1)
        assert noise.seed == 12
        assert noise.mode is NoiseMode.GRAYSCALE
        assert isinstance(noise.process_coordinate(0, 0, 1, 1), PackedColor)
