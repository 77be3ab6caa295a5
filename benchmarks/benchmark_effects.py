"""
Benchmark effect throughput, serial versus chunked parallel execution.
"""

import time

import numpy as np

from colorfx import SERIAL, ExecutionConfig, Pipeline, PixelBuffer
from colorfx.effects import BoxBlur, Cartoon3, Hue, NoiseEffect, ReduceColorSpace, Sepia

WIDTH = 1024
HEIGHT = 1024
NUM_ITERATIONS = 10

PARALLEL = ExecutionConfig(parallel=True, chunk_size=65536)

print("=" * 80)
print("EFFECT BENCHMARK (Numba kernels, chunked thread pool)")
print(f"Testing with {WIDTH}x{HEIGHT} = {WIDTH * HEIGHT:,} pixels, {NUM_ITERATIONS} iterations")
print("=" * 80)

# Setup
rng = np.random.default_rng(42)
words = rng.integers(0, 2**24, size=(HEIGHT, WIDTH), dtype=np.uint32) | np.uint32(0xFF000000)
buffer = PixelBuffer.from_array(words)

effects = {
    "Sepia(0.8)": Sepia(0.8),
    "Hue(1.0)": Hue(1.0),
    "BoxBlur(2)": BoxBlur(2),
    "NoiseEffect": NoiseEffect(seed=1),
    "ReduceColorSpace(8, rgb)": ReduceColorSpace(
        ["#000", "#fff", "#f00", "#0f0", "#00f", "#ff0", "#0ff", "#f0f"]
    ),
    "Cartoon3(6)": Cartoon3(6),
    "Pipeline(4)": Pipeline().contrast(1.1).saturation(1.2).box_blur(1).duotone("#ff8800"),
}


def bench(effect, config):
    times = []
    for _ in range(NUM_ITERATIONS):
        start = time.perf_counter()
        effect.apply(buffer, config=config)
        times.append((time.perf_counter() - start) * 1000)
    return np.mean(times), np.std(times)


# Warmup (triggers JIT compilation)
print("\nWarming up...")
for effect in effects.values():
    effect.apply(buffer, config=SERIAL)

print(f"\n{'Effect':<26} {'Serial (ms)':>16} {'Parallel (ms)':>16} {'Speedup':>9}")
print("-" * 80)
for name, effect in effects.items():
    serial_mean, serial_std = bench(effect, SERIAL)
    parallel_mean, parallel_std = bench(effect, PARALLEL)
    print(
        f"{name:<26} {serial_mean:>8.2f} +/- {serial_std:<5.2f} "
        f"{parallel_mean:>8.2f} +/- {parallel_std:<5.2f} {serial_mean / parallel_mean:>8.2f}x"
    )

print("\n" + "=" * 80)
print(f"Throughput (Sepia, parallel): {WIDTH * HEIGHT / bench(effects['Sepia(0.8)'], PARALLEL)[0] / 1e3:.1f} M pixels/sec")
print("=" * 80)
