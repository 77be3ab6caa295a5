"""
Tests for palettes and color maps.
"""

import numpy as np
import pytest

from colorfx.color.colormap import ColorMap, ContinuousColorMap, DiscreteColorMap
from colorfx.color.palette import Palette
from colorfx.color.types import BLACK, BLUE, GREEN, RED, WHITE, LinearColor, PackedColor


class TestPalette:
    """Test palette construction and nearest-color search."""

    @pytest.mark.parametrize("metric", ["rgb", "rgba", "hue", "average", "cie_gray", "cielab94"])
    def test_distance_zero_exactly_on_members(self, metric):
        """Test distances are never negative and vanish for palette entries."""
        rng = np.random.default_rng(42)
        words = rng.integers(0, 2**32, size=8, dtype=np.uint64)
        palette = Palette([PackedColor.from_uint32(int(w)) for w in words])
        for entry in palette:
            assert palette.get_nearest_color(entry, metric)[1] == 0.0
        for w in rng.integers(0, 2**32, size=50, dtype=np.uint64):
            assert palette.get_nearest_color(int(w), metric)[1] >= 0.0

    def test_empty_palette_raises(self):
        """Test a palette needs at least one color."""
        with pytest.raises(ValueError, match="at least one color"):
            Palette([])

    def test_accepts_color_likes(self):
        """Test entries are coerced to PackedColor."""
        palette = Palette(["#f00", 0xFF00FF00, LinearColor(0.0, 0.0, 1.0)])
        assert palette.colors == (RED, GREEN, BLUE)
        assert len(palette) == 3
        assert palette[1] == GREEN
        assert RED in palette

    def test_average_metric_linear_query_is_exact(self):
        """Test a LinearColor query is not quantized before the search."""
        palette = Palette([BLACK, WHITE])
        color, distance = palette.get_nearest_color(LinearColor(0.5, 0.5, 0.5), "average")
        assert color == BLACK
        assert distance == pytest.approx(0.5)

    def test_average_metric_packed_queries(self):
        """Test packed queries just above and below the midpoint."""
        palette = Palette([BLACK, WHITE])
        assert palette.get_nearest_color(PackedColor(128, 128, 128), "average")[0] == WHITE
        assert palette.get_nearest_color(PackedColor(127, 127, 127), "average")[0] == BLACK

    def test_ties_resolve_to_first_entry(self):
        """Test equal distances keep the earliest entry."""
        palette = Palette([RED, GREEN])
        # Blue is equally far from red and green
        color, _ = palette.get_nearest_color(BLUE, "rgb")
        assert color == RED
        assert Palette([GREEN, RED]).get_nearest_color(BLUE, "rgb")[0] == GREEN

    def test_default_metric_is_cielab94(self):
        """Test the default search uses L*a*b* distances."""
        palette = Palette([BLACK, WHITE])
        color, distance = palette.get_nearest_color(WHITE)
        assert color == WHITE
        assert distance == pytest.approx(0.0, abs=1e-9)

    def test_nearest_indices_vectorized(self):
        """Test the vectorized search matches the scalar one."""
        rng = np.random.default_rng(42)
        palette = Palette([BLACK, WHITE, RED, GREEN, BLUE])
        words = rng.integers(0, 2**32, size=50, dtype=np.uint64).astype(np.uint32)
        rgba = np.array([PackedColor.from_uint32(int(w)).rgba for w in words])
        idx, dist = palette.nearest_indices(rgba, "rgba")
        for w, i, d in zip(words, idx, dist):
            color, distance = palette.get_nearest_color(int(w), "rgba")
            assert palette[int(i)] == color
            assert d == pytest.approx(distance)

    def test_equality(self):
        """Test palettes compare by their entries."""
        assert Palette([RED, BLUE]) == Palette(["#f00", "#00f"])
        assert Palette([RED, BLUE]) != Palette([BLUE, RED])


class TestDiscreteColorMap:
    """Test discrete color maps."""

    def test_two_color_map(self):
        """Test end points and midpoint of a black-to-white map."""
        cmap = DiscreteColorMap.uniform([BLACK, WHITE])
        assert cmap.at(0.0) == BLACK
        assert cmap.at(1.0) == WHITE
        assert cmap[0.5].argb == 0xFF808080

    def test_single_color_map(self):
        """Test a one-color map is constant."""
        cmap = DiscreteColorMap.uniform([RED])
        assert cmap.at(0.0) == RED
        assert cmap.at(0.7) == RED

    def test_lookups_clamp(self):
        """Test positions outside [0, 1] and NaN clamp."""
        cmap = ColorMap.uniform([BLACK, WHITE])
        assert cmap.at(-3.0) == BLACK
        assert cmap.at(7.0) == WHITE
        assert cmap.at(float("nan")) == BLACK

    def test_stops_sorted(self):
        """Test stops are sorted by position."""
        cmap = DiscreteColorMap([(1.0, WHITE), (0.0, BLACK), (0.5, RED)])
        assert [p for p, _ in cmap.stops] == [0.0, 0.5, 1.0]
        assert cmap.at(0.5) == RED

    def test_alpha_interpolated(self):
        """Test alpha is interpolated with the color channels."""
        cmap = DiscreteColorMap.uniform([RED.with_alpha(0), RED])
        assert cmap.at(0.5).a == 128

    def test_stop_out_of_range_raises(self):
        """Test stop positions outside [0, 1] are rejected."""
        with pytest.raises(ValueError, match="outside valid range"):
            DiscreteColorMap([(1.5, RED)])

    def test_empty_raises(self):
        """Test an empty map is rejected."""
        with pytest.raises(ValueError):
            DiscreteColorMap([])
        with pytest.raises(ValueError):
            DiscreteColorMap.uniform([])

    def test_at_range(self):
        """Test lookups rescaled from an arbitrary interval."""
        cmap = DiscreteColorMap.uniform([BLACK, WHITE])
        assert cmap.at_range(15.0, 10.0, 20.0).argb == 0xFF808080
        assert cmap.at_range(5.0, 10.0, 10.0) == BLACK
        assert cmap.at_range(15.0, 10.0, 10.0) == WHITE

    def test_sample_keeps_shape(self):
        """Test vectorized sampling preserves the input shape."""
        cmap = DiscreteColorMap.uniform([BLACK, WHITE])
        out = cmap.sample(np.zeros((2, 3)))
        assert out.shape == (2, 3)
        assert out.dtype == np.uint32


class TestContinuousColorMap:
    """Test function-backed color maps."""

    def test_function_receives_clamped_position(self):
        """Test the function only sees positions in [0, 1]."""
        seen = []

        def func(position):
            seen.append(position)
            return PackedColor.from_gray(position)

        cmap = ContinuousColorMap(func)
        assert cmap.at(2.0) == WHITE
        assert cmap.at(-1.0) == BLACK
        assert seen == [1.0, 0.0]

    def test_non_callable_raises(self):
        """Test a non-callable is rejected."""
        with pytest.raises(TypeError):
            ContinuousColorMap(RED)
