"""
Example: colorfx effects usage.

Demonstrates how to use colorfx for:
- Per-color adjustments on a region
- Palette reduction and tone mapping
- Gradient generation and blending
- Composing everything with a Pipeline
"""

import logging

import numpy as np

from colorfx import BLACK, WHITE, BlendMode, ExecutionConfig, Palette, Pipeline, PixelBuffer, Region
from colorfx.effects import (
    BitmapBlend,
    Cartoon3,
    Grayscale,
    LinearGradient,
    NoiseEffect,
    NoiseMode,
    ReduceColorSpace,
    Sepia,
)

# Configure logging to see pipeline statistics
logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")


def generate_sample_buffer(width: int = 256, height: int = 192) -> PixelBuffer:
    """Generate a smooth color ramp with a little noise."""
    rng = np.random.default_rng(42)
    ys, xs = np.mgrid[0:height, 0:width]
    r = (xs * 255 // max(width - 1, 1)).astype(np.uint32)
    g = (ys * 255 // max(height - 1, 1)).astype(np.uint32)
    b = rng.integers(96, 160, size=(height, width), dtype=np.uint32)
    words = np.uint32(0xFF000000) | (r << 16) | (g << 8) | b
    return PixelBuffer.from_array(words)


def example_1_adjustments():
    """Example 1: Adjustments restricted to a region."""
    print("\n" + "=" * 70)
    print("EXAMPLE 1: Adjustments on a region")
    print("=" * 70)

    buf = generate_sample_buffer()
    region = Region(32, 32, 128, 96)

    out = Sepia(0.8).then(Grayscale(0.3)).apply(buf, region)
    print(f"Input pixel  (0, 0):   {buf[0, 0]}")
    print(f"Output pixel (0, 0):   {out[0, 0]}  (outside region, unchanged)")
    print(f"Input pixel  (64, 64): {buf[64, 64]}")
    print(f"Output pixel (64, 64): {out[64, 64]}")


def example_2_palette_reduction():
    """Example 2: Quantize to a fixed palette."""
    print("\n" + "=" * 70)
    print("EXAMPLE 2: Palette reduction")
    print("=" * 70)

    buf = generate_sample_buffer()
    palette = Palette(["#000", "#fff", "#c03030", "#30c030", "#3030c0", "#c0c030"])

    for metric in ("rgb", "cielab94", "hue"):
        out = ReduceColorSpace(palette, metric).apply(buf)
        used = len(np.unique(out.pixels))
        print(f"  metric={metric:<9} -> {used} distinct colors")


def example_3_gradients_and_blending():
    """Example 3: Generate an overlay and blend it."""
    print("\n" + "=" * 70)
    print("EXAMPLE 3: Gradients and bitmap blending")
    print("=" * 70)

    buf = generate_sample_buffer()
    overlay = PixelBuffer(buf.width, buf.height)
    LinearGradient((0, 0), (buf.width - 1, buf.height - 1), [BLACK, WHITE]).apply(
        overlay, inplace=True
    )
    NoiseEffect(seed=7, mode=NoiseMode.GRAYSCALE).apply(overlay, Region(0, 0, 64, 64), inplace=True)

    for mode in (BlendMode.MULTIPLY, BlendMode.SCREEN, BlendMode.OVERLAY):
        out = BitmapBlend(overlay, mode, amount=0.75).apply(buf)
        print(f"  {mode.name:<9} center = {out[buf.width // 2, buf.height // 2]}")


def example_4_pipeline():
    """Example 4: Fluent pipeline with parallel execution."""
    print("\n" + "=" * 70)
    print("EXAMPLE 4: Pipeline")
    print("=" * 70)

    buf = generate_sample_buffer(512, 384)
    pipeline = Pipeline().contrast(1.2).saturation(1.3).box_blur(1).tritone("#2060c0")
    print(f"Pipeline: {pipeline!r}")

    config = ExecutionConfig(parallel=True, chunk_size=16384)
    out = pipeline(buf, config=config)
    print(f"Result: {out!r}, first pixel {out[0, 0]}")

    # Cartoon3 on its own for comparison
    cartoon = Cartoon3(6, edge_sensitivity=0.2).apply(buf, config=config)
    print(f"Cartoon3 distinct colors: {len(np.unique(cartoon.pixels))}")


if __name__ == "__main__":
    example_1_adjustments()
    example_2_palette_reduction()
    example_3_gradients_and_blending()
    example_4_pipeline()
