"""
Tests for the Pipeline fluent API.
"""

import logging

import numpy as np
import pytest

from colorfx import BufferStage, Pipeline
from colorfx.buffer import PixelBuffer, Region
from colorfx.color.types import BLACK, RED, WHITE
from colorfx.effects import ChainedEffect, Grayscale, Invert, Sepia


@pytest.fixture
def buffer():
    """Random opaque 8x8 buffer."""
    rng = np.random.default_rng(42)
    words = rng.integers(0, 2**24, size=(8, 8), dtype=np.uint32) | np.uint32(0xFF000000)
    return PixelBuffer.from_array(words)


class TestPipelineBuilding:
    """Test pipeline construction."""

    def test_builders_return_self(self):
        """Test builder methods are chainable."""
        pipeline = Pipeline()
        assert pipeline.invert() is pipeline
        assert pipeline.grayscale(0.5).sepia().box_blur(2) is pipeline
        assert len(pipeline) == 4

    def test_builders_create_effects(self):
        """Test builders append the named effect types."""
        pipeline = Pipeline().invert().grayscale(0.5).duotone("#ff8800")
        names = [effect.name for effect in pipeline.effects]
        assert names == ["Invert", "Grayscale", "Duotone"]

    def test_builder_validates_immediately(self):
        """Test invalid arguments fail when the effect is added."""
        with pytest.raises(ValueError):
            Pipeline().gamma(0.0)

    def test_unknown_method_raises(self):
        """Test unknown attributes raise AttributeError."""
        with pytest.raises(AttributeError, match="Available methods"):
            Pipeline().sharpen()

    def test_add_effect_and_pipeline(self):
        """Test add() accepts effects and pipelines."""
        inner = Pipeline().invert().sepia()
        pipeline = Pipeline().add(Grayscale()).add(inner)
        assert len(pipeline) == 3

    def test_add_rejects_other_types(self):
        """Test add() rejects non-effects."""
        with pytest.raises(TypeError):
            Pipeline().add(lambda buf: buf)

    def test_initial_effects(self):
        """Test effects passed to the constructor."""
        assert len(Pipeline([Invert(), Sepia()])) == 2

    def test_repr(self):
        """Test the string form lists effect names."""
        assert repr(Pipeline()) == "Pipeline(empty)"
        assert repr(Pipeline().invert().sepia()) == "Pipeline(Invert, Sepia)"


class TestPipelineExecution:
    """Test applying pipelines."""

    def test_order_matters(self):
        """Test effects run in insertion order."""
        buf = PixelBuffer(2, 2, fill=RED)
        assert Pipeline().brightness(0.0).invert()(buf)[0, 0] == WHITE
        assert Pipeline().invert().brightness(0.0)(buf)[0, 0] == BLACK

    def test_matches_sequential_application(self, buffer):
        """Test a pipeline equals applying its effects one by one."""
        pipeline = Pipeline().grayscale(0.3).contrast(1.4).box_blur(1).hue(1.0)
        expected = buffer
        for effect in pipeline.effects:
            expected = effect(expected)
        assert pipeline(buffer) == expected

    def test_copy_by_default(self, buffer):
        """Test the input is untouched unless inplace=True."""
        before = buffer.copy()
        out = Pipeline().invert()(buffer)
        assert out is not buffer
        assert buffer == before

    def test_inplace(self, buffer):
        """Test in-place application returns the input buffer."""
        out = Pipeline().invert().apply(buffer, inplace=True)
        assert out is buffer

    def test_region(self, buffer):
        """Test the region is forwarded to every effect."""
        region = Region(1, 1, 2, 2)
        out = Pipeline().invert().sepia().apply(buffer, region)
        assert out[0, 0] == buffer[0, 0]
        assert out[1, 1] != buffer[1, 1]

    def test_empty_pipeline_copies(self, buffer):
        """Test an empty pipeline returns an equal copy."""
        out = Pipeline()(buffer)
        assert out == buffer
        assert out is not buffer

    def test_logs_application(self, buffer, caplog):
        """Test application is logged at INFO."""
        with caplog.at_level(logging.INFO, logger="colorfx.pipeline"):
            Pipeline().invert().apply(buffer)
        assert "[Pipeline] Applied 1 effects to 64 pixels" in caplog.text


class TestPipelineUtilities:
    """Test copy, reset and conversion helpers."""

    def test_copy_is_independent(self):
        """Test copies do not share the effect list."""
        base = Pipeline().grayscale()
        tinted = base.copy().duotone("#0080ff")
        assert len(base) == 1
        assert len(tinted) == 2

    def test_reset(self):
        """Test reset clears all effects and is chainable."""
        pipeline = Pipeline().invert().sepia()
        assert pipeline.reset() is pipeline
        assert len(pipeline) == 0

    def test_to_effect(self, buffer):
        """Test freezing into a ChainedEffect."""
        pipeline = Pipeline().invert().sepia()
        effect = pipeline.to_effect()
        assert isinstance(effect, ChainedEffect)
        pipeline.reset()
        assert len(effect) == 2
        assert effect(buffer) == Sepia()(Invert()(buffer))

    def test_effects_tuple_is_snapshot(self):
        """Test the effects property cannot mutate the pipeline."""
        pipeline = Pipeline().invert()
        effects = pipeline.effects
        assert isinstance(effects, tuple)
        pipeline.sepia()
        assert len(effects) == 1

    def test_buffer_stage_protocol(self):
        """Test pipelines and effects satisfy BufferStage."""
        assert isinstance(Pipeline(), BufferStage)
        assert isinstance(Invert(), BufferStage)
